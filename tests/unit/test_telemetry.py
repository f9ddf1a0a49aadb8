from unittest.mock import MagicMock, patch

import pytest

from src.shared.telemetry import Telemetry, measure_time


class Timed:
    def __init__(self):
        self.telemetry = MagicMock()

    @measure_time("ok_op")
    def ok(self):
        return 42

    @measure_time("bad_op")
    def bad(self):
        raise ValueError("nope")


def test_measure_time_records_duration_and_returns_result():
    with patch("src.shared.telemetry.METHOD_DURATION") as metric:
        assert Timed().ok() == 42

    metric.labels.assert_called_once_with(component="Timed", method="ok")
    metric.labels.return_value.observe.assert_called_once()


def test_measure_time_logs_and_reraises():
    timed = Timed()

    with patch("src.shared.telemetry.METHOD_DURATION"), pytest.raises(ValueError):
        timed.bad()

    timed.telemetry.log_error.assert_called_once()


def test_trace_id_is_shared_by_context():
    trace_id = Telemetry.start_trace()
    assert Telemetry.get_trace_id() == trace_id
    assert len(trace_id) == 8


def test_log_error_attaches_exception(caplog):
    telemetry = Telemetry("TestComponent")
    error = RuntimeError("boom")

    with caplog.at_level("ERROR", logger="sections.TestComponent"):
        telemetry.log_error("Failed", error, section="news")

    record = caplog.records[-1]
    assert record.exc_info[1] is error
    assert "section" in record.getMessage()
