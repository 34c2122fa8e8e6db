import logging
import logging.config
import re

# Message ids ("<local@domain>") share the address shape; a token that opens
# with "<" is a delivery id and stays visible.
ADDRESS_PATTERN = re.compile(r"(?<![<A-Za-z0-9._%+-])[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")


class AddressRedactingFilter(logging.Filter):
    """Mask email addresses in log records; recipient ids stay visible."""

    def _sanitize(self, value: object) -> object:
        if not isinstance(value, str):
            return value
        return ADDRESS_PATTERN.sub("[REDACTED]", value)

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._sanitize(record.msg)

        if isinstance(record.args, tuple):
            record.args = tuple(self._sanitize(item) for item in record.args)
        elif isinstance(record.args, dict):
            record.args = {key: self._sanitize(value) for key, value in record.args.items()}

        return True


def setup_logging() -> None:
    from birthday_wisher.core.settings import get_settings

    settings = get_settings()
    handler_filters = ["redact_addresses"] if settings.log_redact_addresses else []
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "redact_addresses": {
                    "()": "birthday_wisher.core.logging.AddressRedactingFilter",
                }
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": handler_filters,
                }
            },
            "loggers": {
                "": {
                    "handlers": ["console"],
                    "level": settings.log_level.upper(),
                },
                "uvicorn.access": {
                    "handlers": ["console"],
                    "level": "WARNING",
                    "propagate": False,
                },
                "apscheduler": {
                    "level": "WARNING",
                },
            },
        }
    )
