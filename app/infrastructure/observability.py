"""Structured Logging — JSON formatter, secret masking, and setup.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (submission_type, record_id, tx_ref, error_code, path) surfaced when present
    - Secret keys and passwords never reach a handler unmasked
    - JSON format in production, human-readable in development

Design Decisions:
    - setup_logging called once on startup via lifespan
    - SecretFilter attached to the handler, so third-party loggers are masked too
"""

import logging
import json
import re
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "submission_type", "record_id", "tx_ref", "error_code", "path",
    "gateway_status",
)


class SecretFilter(logging.Filter):
    """Mask gateway secret keys, bearer tokens and key=value secrets."""

    FLW_KEY_PATTERN = re.compile(r"FLWSECK(?:_TEST)?-[A-Za-z0-9-]+")
    BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+")
    KEY_VALUE_PATTERN = re.compile(
        r"((?:(?:secret|token|password|api_key)[\w-]*|passwd|pass(?![\w-]))['\"]?\s*[:=]\s*['\"]?)[^\s,'\"}]+",
        re.IGNORECASE,
    )

    def mask(self, text: str) -> str:
        text = self.FLW_KEY_PATTERN.sub("[SECRET]", text)
        text = self.BEARER_PATTERN.sub(r"\1[SECRET]", text)
        return self.KEY_VALUE_PATTERN.sub(r"\1[REDACTED]", text)

    def filter(self, record: logging.LogRecord) -> bool:
        # Render once so args are masked together with the template
        record.msg = self.mask(record.getMessage())
        record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    handler.addFilter(SecretFilter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn installs its own handlers; route them through ours instead
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True
    return handler
