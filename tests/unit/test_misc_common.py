import logging

import pytest

from charging_snapshot.common import time_utils
from charging_snapshot.common.errors import ClockError
from charging_snapshot.common.ids import generate_run_id
from charging_snapshot.common.logging import ColorLineFormatter, JsonLineFormatter


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("run-")


def test_epoch_seconds_is_whole_seconds():
    seconds = time_utils.epoch_seconds()
    assert isinstance(seconds, int)
    assert seconds > 1_600_000_000


def test_epoch_seconds_wraps_clock_failures(monkeypatch):
    class BrokenDatetime:
        @staticmethod
        def now(tz=None):
            raise OSError("clock unavailable")

    monkeypatch.setattr(time_utils, "datetime", BrokenDatetime)
    with pytest.raises(ClockError):
        time_utils.epoch_seconds()


def _record(level: int, message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("test", level, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_color_formatter_colors_by_level():
    formatter = ColorLineFormatter()
    assert formatter.format(_record(logging.INFO, "ok")) == "\x1b[32mok\x1b[0m"
    assert formatter.format(_record(logging.ERROR, "bad")) == "\x1b[31mbad\x1b[0m"
    assert ColorLineFormatter(use_color=False).format(_record(logging.ERROR, "bad")) == "bad"


def test_json_formatter_emits_stable_fields():
    import json

    line = JsonLineFormatter().format(_record(logging.INFO, "Done", run_id="run-1", rows_out=3))
    payload = json.loads(line)

    assert payload["message"] == "Done"
    assert payload["run_id"] == "run-1"
    assert payload["rows_out"] == 3
    assert payload["error_code"] is None
