import logging

from mcpwrap.logging_config import EventFormatter, HealthCheckFilter, get_logging_config
from mcpwrap.modules.events import SESSION_ACQUIRE_SUCCESS, EventRecorder


def _record(name="mcpwrap.test", msg="hello", **extra):
    record = logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_event_formatter_appends_event_data():
    formatter = EventFormatter(fmt="%(levelname)s %(message)s")
    record = _record(
        msg=SESSION_ACQUIRE_SUCCESS,
        event=SESSION_ACQUIRE_SUCCESS,
        event_data={"source": "header", "session_id": "abc-123"},
    )

    line = formatter.format(record)

    assert line == 'INFO session.acquire.success {"session_id": "abc-123", "source": "header"}'


def test_event_formatter_leaves_plain_records_alone():
    formatter = EventFormatter(fmt="%(message)s")

    assert formatter.format(_record(msg="plain")) == "plain"


def test_health_check_filter_suppresses_health_access_logs():
    health_filter = HealthCheckFilter()

    assert health_filter.filter(_record(name="uvicorn.access", msg='"GET /health HTTP/1.1" 200')) is False
    assert health_filter.filter(_record(name="uvicorn.access", msg='"GET /tools HTTP/1.1" 200')) is True
    assert health_filter.filter(_record(name="mcpwrap", msg="GET /health")) is True


def test_logging_config_applies_level_and_formatter():
    config = get_logging_config("debug")

    assert config["loggers"]["mcpwrap"]["level"] == "DEBUG"
    assert config["formatters"]["default"]["()"] is EventFormatter


class _CollectingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_recorder_log_records_carry_event_fields():
    recorder_logger = logging.getLogger("mcpwrap.modules.events.recorder")
    handler = _CollectingHandler()
    recorder_logger.addHandler(handler)
    previous_level = recorder_logger.level
    recorder_logger.setLevel(logging.INFO)
    try:
        EventRecorder().emit(SESSION_ACQUIRE_SUCCESS, session_id="abc-123")
    finally:
        recorder_logger.removeHandler(handler)
        recorder_logger.setLevel(previous_level)

    record = handler.records[-1]
    assert record.getMessage() == SESSION_ACQUIRE_SUCCESS
    assert record.event == SESSION_ACQUIRE_SUCCESS
    assert record.event_data == {"session_id": "abc-123"}
