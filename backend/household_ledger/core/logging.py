import logging
import logging.config

_CONTEXT_KEYS = (
    "operation",
    "owner_user_id",
    "group_id",
    "cursor",
    "limit",
    "direction",
    "total_count",
    "max_count_limit",
    "recommendation",
    "params",
)


class ContextFormatter(logging.Formatter):
    """Appends the ``extra=`` fields the ledger loggers attach as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = [f"{key}={getattr(record, key)!r}" for key in _CONTEXT_KEYS if hasattr(record, key)]
        if pairs:
            line = f"{line} | {' '.join(pairs)}"
        return line


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "context": {
                    "()": ContextFormatter,
                    "fmt": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "context",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "household_ledger": {"level": level, "handlers": ["console"], "propagate": False},
            },
        }
    )
