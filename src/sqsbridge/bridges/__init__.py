"""Source (queue -> log) and sink (log -> queue) bridges."""

from __future__ import annotations

from sqsbridge.bridges.base import BaseBridge, BridgeState
from sqsbridge.bridges.sink import SinkBridge
from sqsbridge.bridges.source import SourceBridge

__all__ = ["BaseBridge", "BridgeState", "SinkBridge", "SourceBridge"]
