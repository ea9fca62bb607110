import logging

from casefile.utils.logger_config import EmojiFormatter, setup_logging


def test_formatter_prefixes_level_emoji():
    record = logging.LogRecord("casefile", logging.WARNING, __file__, 1, "careful", None, None)
    assert EmojiFormatter("%(message)s").format(record) == "⚠️ careful"


def test_setup_logging_replaces_handlers():
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, EmojiFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
