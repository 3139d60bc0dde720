"""Tests for structured logging setup and run-id propagation."""

import json
import logging

import pandas as pd
import pytest

from pnl_forecast.core.config import Settings
from pnl_forecast.main import run
from pnl_forecast.observability.logger import (
    _add_run_id,
    get_logger,
    get_run_id,
    new_run_id,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_new_run_id_is_current():
    rid = new_run_id()
    assert len(rid) == 12
    assert get_run_id() == rid


def test_processor_adds_run_id():
    rid = new_run_id()
    event = _add_run_id(None, "info", {"event": "x"})
    assert event["run_id"] == rid


def test_json_output_carries_run_id_and_extra(capsys):
    setup_logging("INFO", "json")
    rid = new_run_id()
    logging.getLogger("pnl_forecast.test").info("Trajectory built", extra={"trades": 3})
    line = capsys.readouterr().err.strip().splitlines()[-1]
    entry = json.loads(line)
    assert entry["event"] == "Trajectory built"
    assert entry["run_id"] == rid
    assert entry["trades"] == 3
    assert entry["level"] == "info"


def test_level_filters(capsys):
    setup_logging("WARNING", "console")
    logging.getLogger("pnl_forecast.test").info("hidden")
    assert "hidden" not in capsys.readouterr().err


def test_bound_logger_renders_context(capsys):
    setup_logging("INFO", "json")
    rid = new_run_id()
    get_logger("pnl_forecast.test").info("Bound event", source="ledger.csv")
    entry = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert entry["event"] == "Bound event"
    assert entry["source"] == "ledger.csv"
    assert entry["run_id"] == rid


@pytest.mark.asyncio
async def test_run_logs_start_with_source(tmp_path, capsys, three_trades):
    path = tmp_path / "ledger.csv"
    pd.DataFrame([t.model_dump() for t in three_trades]).to_csv(path, index=False)
    settings = Settings()
    settings.observability.log_format = "json"

    result = await run(settings, source=str(path))

    assert len(result.actual_points) == 3
    entries = [
        json.loads(line)
        for line in capsys.readouterr().err.splitlines()
        if line.startswith("{")
    ]
    start = next(e for e in entries if e["event"] == "Starting forecast run")
    assert start["source"] == str(path)
    assert start["model_pattern"] == "1232"
