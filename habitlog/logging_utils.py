from __future__ import annotations

import logging

from habitlog.settings import settings


MAX_TEXT_ARG = 80


def shorten_text(text: str, limit: int = MAX_TEXT_ARG) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class ShortenArgsFilter(logging.Filter):
    """Truncate long string arguments, such as the entry notes logged by log_entry, before formatting."""

    def filter(self, record: logging.LogRecord) -> bool:
        args = record.args
        if isinstance(args, tuple):
            record.args = tuple(
                shorten_text(arg) if isinstance(arg, str) else arg for arg in args
            )
        elif isinstance(args, dict):
            record.args = {
                key: shorten_text(value) if isinstance(value, str) else value
                for key, value in args.items()
            }
        return True


_configured = False


def configure_logging(level: str | None = None) -> None:
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    shorten = ShortenArgsFilter()
    for handler in logging.getLogger().handlers:
        handler.addFilter(shorten)
    _configured = True
