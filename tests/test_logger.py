import logging

import pytest

from gobe.logger import LogType, log, log_obj_logger, set_debug


@pytest.fixture
def records(caplog):
    caplog.set_level(logging.DEBUG, logger="gobe")
    return caplog


def test_info_message_is_joined(records):
    rec = log("info", "hello", "world")
    assert rec.levelno == logging.INFO
    assert rec.getMessage() == "hello world"
    assert records.records[-1].getMessage() == "hello world"


def test_record_points_at_caller(records):
    rec = log("info", "where")
    assert rec.funcName == "test_record_points_at_caller"
    assert rec.context.endswith("test_record_points_at_caller")


def test_error_always_shows_data(records):
    set_debug(False)
    rec = log("error", "boom")
    assert rec.levelno == logging.ERROR
    assert rec.show_data is True


def test_info_show_data_follows_debug_flag(records):
    try:
        set_debug(True)
        first = log("info", "a")
        set_debug(False)
        second = log("info", "b")
    finally:
        set_debug(False)
    assert first.show_data is True
    assert second.show_data is False


def test_type_is_case_insensitive(records):
    rec = log("ERROR", "upper")
    assert rec.levelno == logging.ERROR


def test_enum_member_accepted(records):
    rec = log(LogType.WARN, "careful")
    assert rec.levelno == logging.WARNING
    assert rec.log_type == "warn"


def test_unknown_type_falls_back_to_info(records):
    rec = log("bogus", "x")
    assert rec.levelno == logging.INFO


def test_obj_none_reports_error(records):
    rec = log_obj_logger(None, "info", "x")
    assert rec.levelno == logging.ERROR
    assert "is nil" in rec.getMessage()


def test_obj_logger_attribute_is_used(records):
    class Holder:
        logger = logging.getLogger("gobe.custom")

    rec = log_obj_logger(Holder(), "info", "from", "holder")
    assert rec.name == "gobe.custom"
    assert rec.getMessage() == "from holder"


def test_obj_without_logger_reports_error(records):
    class Bare:
        pass

    rec = log_obj_logger(Bare(), "info", "x")
    assert rec.levelno == logging.ERROR
    assert "does not have a logger field" in rec.getMessage()