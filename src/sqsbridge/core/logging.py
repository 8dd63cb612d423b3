"""Logging setup: structured JSON to stderr, or a plain line format."""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

from sqsbridge.core.config import LoggingConfig

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class BridgeJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that tags every line with the service name."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = "sqsbridge"
        log_record["level"] = record.levelname


def configure_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Install a single stream handler on the ``sqsbridge`` logger."""
    if config is None:
        config = LoggingConfig()

    handler = logging.StreamHandler(sys.stderr)
    if config.json_format:
        handler.setFormatter(BridgeJsonFormatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))

    root = logging.getLogger("sqsbridge")
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(config.level.upper())
    root.propagate = False
    return root
