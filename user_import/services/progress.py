from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm

"""Row validation progress.

Counts valid and invalid rows as the reporter goes. The tqdm bar is only
drawn when stdout is a terminal; redirected output and CI logs get the
counts without the bar.
"""

__all__ = [
    "RowProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class RowProgress:
    def __init__(self, total: int, *, description: str = "Validating rows") -> None:
        self.total = total
        self.valid = 0
        self.invalid = 0
        self._bar: Any = None
        if total and is_tty_enabled():
            self._bar = tqdm(total=total, desc=description, unit="row", ncols=80, ascii=True)

    @property
    def done(self) -> int:
        return self.valid + self.invalid

    def record(self, is_valid: bool) -> None:
        if is_valid:
            self.valid += 1
        else:
            self.invalid += 1
        if self._bar is not None:
            self._bar.update(1)
            self._bar.set_postfix(invalid=self.invalid)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def __enter__(self) -> RowProgress:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
