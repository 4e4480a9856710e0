from __future__ import annotations

import logging

import main
from galaxy.generator import VoidPolicy
from utils.logging_config import setup_logging


def test_defaults_follow_parameters():
    args = main._parse_args([])
    assert args.count == 50000
    assert args.void_policy == VoidPolicy.REMOVE.value
    assert not args.headless


def test_headless_run_logs_summary(tmp_path):
    log_file = tmp_path / "galaxy.log"
    main.run(["--headless", "--count", "400", "--seed", "3", "--log-file", str(log_file)])
    text = log_file.read_text(encoding="utf-8")
    assert "Galaxy v1" in text
    assert "points" in text


def test_setup_logging_does_not_duplicate_handlers():
    setup_logging(logging.DEBUG)
    setup_logging(logging.INFO)
    assert len(logging.getLogger("galaxy").handlers) == 1
    assert logging.getLogger("galaxy").level == logging.INFO
