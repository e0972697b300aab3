from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from hasher.logging_ import setup_logging
from hasher.models import ValidationReport
from hasher.validate import summary_json


def test_json_log_file(tmp_path: Path) -> None:
    run_id = setup_logging(
        "DEBUG", log_dir=tmp_path, use_json=True, to_console=False, run_id="abc"
    )
    assert run_id == "abc"
    logging.getLogger("hasher.manifest").info("%s : %s", "deadbeef", "a.txt")
    logging.getLogger("hasher.validate").warning(
        summary_json(ValidationReport(invalid={"b.txt": "00"}))
    )
    for handler in logging.getLogger().handlers:
        handler.flush()

    lines = (tmp_path / "hasher.log").read_text(encoding="utf-8").splitlines()
    first, second = (json.loads(line) for line in lines)
    assert first["event"] == "deadbeef : a.txt"
    assert first["component"] == "hasher.manifest"
    assert first["run_id"] == "abc"
    assert second["level"] == "WARNING"
    assert second["event"] == "validation_summary"
    assert second["meta"]["invalid"] == 1
    assert second["meta"]["all_valid"] is False


def test_setup_logging_replaces_handlers() -> None:
    setup_logging("INFO")
    setup_logging("WARNING")
    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.WARNING
