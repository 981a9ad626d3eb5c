"""Tests for kmsctl.utils.logger."""
import logging

import pytest

from kmsctl.utils.logger import ColouredFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_level():
    yield
    setup_logging()


@pytest.mark.parametrize("verbose, quiet, level", [
    (False, False, logging.INFO),
    (True, False, logging.DEBUG),
    (False, True, logging.ERROR),
    (True, True, logging.ERROR),
])
def test_levels(verbose, quiet, level):
    setup_logging(verbose=verbose, quiet=quiet)
    assert logging.getLogger("kmsctl").level == level


def test_single_handler_across_calls():
    setup_logging()
    setup_logging(verbose=True)
    assert len(logging.getLogger("kmsctl").handlers) == 1


def test_loggers_are_children_of_kmsctl():
    assert get_logger("kmsctl.services.transfer").name == "kmsctl.services.transfer"
    assert get_logger("tests.helper").name == "kmsctl.tests.helper"


def test_formatter_tags_level():
    record = logging.LogRecord("kmsctl", logging.WARNING, __file__, 1, "skipped %s", ("x",), None)
    line = ColouredFormatter("%(message)s").format(record)
    assert "[warning]" in line
    assert line.endswith("skipped x")
