"""Bridge between Amazon SQS queues and partitioned log topics."""

from __future__ import annotations

__version__ = "0.1.0"
