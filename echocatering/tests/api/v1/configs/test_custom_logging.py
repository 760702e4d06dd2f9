import logging

from pydantic import BaseModel

from echocatering.api.v1.configs.custom_logging import PrettyReprFormatter, setup_logging


class Reader(BaseModel):
    id: str
    label: str


def make_record(msg, pathname="/srv/app/echocatering/api/v1/errors.py") -> logging.LogRecord:
    return logging.LogRecord("echocatering", logging.INFO, pathname, 12, msg, None, None)


def test_models_are_rendered_with_rich():
    formatter = PrettyReprFormatter("%(message)s")
    output = formatter.format(make_record(Reader(id="tmr_1", label="Bar")))
    assert "'model': 'Reader'" in output
    assert "'label': 'Bar'" in output


def test_pathname_is_shortened():
    formatter = PrettyReprFormatter("%(pathname)s", reset=False)
    assert formatter.format(make_record("hello")) == "echocatering/api/v1/errors.py"


def test_setup_logging_replaces_handlers():
    logger = setup_logging(level="debug")
    setup_logging(level="WARNING")
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
