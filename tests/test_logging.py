import logging

from ghclosebot.logging.setup import StructuredFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "Comment action execution", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_extra_fields() -> None:
    text = StructuredFormatter("%(message)s").format(_record(repo="octo/repo", result="applied"))

    assert text == "Comment action execution | repo='octo/repo' result='applied'"


def test_formatter_without_extra_fields() -> None:
    assert StructuredFormatter("%(message)s").format(_record()) == "Comment action execution"


def test_configure_logging_sets_level() -> None:
    root = logging.getLogger()
    previous_handlers, previous_level = list(root.handlers), root.level
    try:
        configure_logging("warning")
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
