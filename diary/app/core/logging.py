"""
Logging configuration for the diary service.

Everything goes to one stream handler; connection strings are masked before
any record is emitted.
"""

import logging
import re
import sys

CREDENTIALS_PATTERN = re.compile(r"//[^:/@\s]+:[^@/\s]+@")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def mask_credentials(text: str) -> str:
    """Replace ``user:password@`` in any URL-like text with ``****:****@``."""
    return CREDENTIALS_PATTERN.sub("//****:****@", text)


class CredentialMaskingFilter(logging.Filter):
    """Filter to mask database credentials in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = mask_credentials(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                mask_credentials(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers:
        if getattr(handler, "_diary_handler", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CredentialMaskingFilter())
    handler._diary_handler = True
    root.addHandler(handler)
