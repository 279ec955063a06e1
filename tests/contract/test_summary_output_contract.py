from __future__ import annotations

import re
from pathlib import Path

from user_import.cli import main as cli_main
from user_import.logging.init import reset_logging

SUMMARY_REGEX = re.compile(
    r"^SUMMARY rows=\d+ valid=\d+ invalid=\d+ committed=\d+ elapsed_sec=\d+(\.\d+)?$", re.M
)


def test_summary_is_last_line(write_config, temp_workdir: Path, upload_writer, user_row, capsys):
    reset_logging()
    upload_writer(temp_workdir / "data" / "users.xlsx", [user_row()])

    cli_main([])

    lines = capsys.readouterr().out.strip().splitlines()
    assert SUMMARY_REGEX.match(lines[-1]), lines[-1]
