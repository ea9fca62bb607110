import logging


class EmojiFormatter(logging.Formatter):
    """Prefixes each record with an emoji for its level."""

    LEVEL_EMOJIS = {
        logging.DEBUG: "🐛",
        logging.INFO: "🔎",
        logging.WARNING: "⚠️",
        logging.ERROR: "❌",
        logging.CRITICAL: "🚨",
    }

    def format(self, record):
        s = super().format(record)
        emoji = self.LEVEL_EMOJIS.get(record.levelno, "")
        return f"{emoji} {s}"


def setup_logging(level: int = logging.INFO):
    """
    Configures the root logger with the EmojiFormatter.
    Call once at the application's entry point.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        EmojiFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    # Avoid duplicate output when called more than once.
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # The HTTP clients are chatty at DEBUG.
    for noisy in ("httpx", "httpcore", "openai", "google_genai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
