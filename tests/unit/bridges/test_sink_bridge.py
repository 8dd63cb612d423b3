"""Unit tests for SinkBridge (log -> queue)."""

from __future__ import annotations

import logging
import re

import pytest

from sqsbridge.bridges import SinkBridge
from sqsbridge.bridges.sink import dedup_id, group_id, header_attributes
from sqsbridge.core.exceptions import ConfigurationError, IllegalStateError, TransportError
from sqsbridge.models.messages import HeaderType, LogRecord, RecordHeader, StringAttribute
from tests.conftest import FIFO_URL, STANDARD_URL
from tests.fakes import FailingTransport, MemoryQueueTransport

# ---------- helpers ----------


def _record(value: str | None = "payload", key: str | None = "k1", partition: int | None = 2,
            offset: int | None = 57, headers: list[RecordHeader] | None = None) -> LogRecord:
    return LogRecord(topic="orders", partition=partition, offset=offset,
                     key=key, value=value, headers=headers or [])


def _sink(transport, **overrides) -> SinkBridge:
    bridge = SinkBridge(transport_factory=lambda _config: transport)
    bridge.start({"queue_url": STANDARD_URL, "topics": "orders", **overrides})
    return bridge


# ---------- fixtures ----------

@pytest.fixture
def transport():
    return MemoryQueueTransport()


# ---------- identity helpers ----------

class TestIdentity:
    def test_dedup_id_from_log_coordinates(self):
        assert dedup_id(_record()) == "orders-2-57"

    def test_dedup_id_is_stable_and_unique(self):
        assert dedup_id(_record()) == dedup_id(_record(value="other"))
        assert dedup_id(_record(offset=58)) != dedup_id(_record(offset=57))
        assert dedup_id(_record(partition=3)) != dedup_id(_record(partition=2))

    def test_dedup_id_without_coordinates(self):
        assert dedup_id(_record(offset=None)) is None

    def test_group_id_is_key(self):
        assert group_id(_record(key="customer-9")) == "customer-9"

    def test_group_id_falls_back_to_topic(self):
        assert group_id(_record(key=None)) == "orders"
        assert group_id(_record(key="  ")) == "orders"

    def test_header_attributes_keep_strings_only(self):
        record = _record(headers=[
            RecordHeader(key="a", value="x"),
            RecordHeader(key="b", value=b"\x01", value_type=HeaderType.BYTES),
            RecordHeader(key="c", value=5, value_type=HeaderType.INT),
        ])
        assert header_attributes(record, []) == {"a": StringAttribute(value="x")}

    def test_header_attributes_include_list(self):
        record = _record(headers=[RecordHeader(key="a", value="x"), RecordHeader(key="b", value="y")])
        assert list(header_attributes(record, ["b"])) == ["b"]


# ---------- lifecycle ----------

class TestLifecycle:
    def test_empty_put_is_noop_before_start(self):
        SinkBridge().put([])

    def test_put_before_start(self):
        with pytest.raises(IllegalStateError):
            SinkBridge().put([_record()])

    def test_put_after_stop(self, transport):
        bridge = _sink(transport)
        bridge.stop()
        assert transport.close_count == 1
        with pytest.raises(IllegalStateError):
            bridge.put([_record()])

    @pytest.mark.parametrize("selectors", [
        {"topics": "orders", "topics_regex": "ord.*"},
        {"topics": "", "topics_regex": ""},
    ])
    def test_exactly_one_topic_selector(self, transport, selectors):
        bridge = SinkBridge(transport_factory=lambda _config: transport)
        with pytest.raises(ConfigurationError):
            bridge.start({"queue_url": STANDARD_URL, **selectors})

    def test_subscription_list(self, transport):
        bridge = _sink(transport, topics="orders, refunds")
        assert bridge.subscription == ["orders", "refunds"]

    def test_subscription_regex(self, transport):
        bridge = _sink(transport, topics="", topics_regex="ord.*")
        assert isinstance(bridge.subscription, re.Pattern)
        assert bridge.subscription.fullmatch("orders")


# ---------- put ----------

class TestPut:
    def test_sends_one_message_per_record(self, transport):
        bridge = _sink(transport)
        bridge.put([_record(value="a", offset=1), _record(value="b", offset=2)])
        [first, second] = transport.receive(STANDARD_URL, 10, 0)
        assert (first.body, second.body) == ("a", "b")

    def test_empty_values_are_skipped(self, transport, caplog):
        bridge = _sink(transport)
        with caplog.at_level(logging.WARNING):
            bridge.put([_record(value=""), _record(value=None), _record(value="x")])
        assert [body for _, body, _, _ in transport.sent] == ["x"]
        assert "Skipping empty message" in caplog.text

    def test_fifo_group_and_dedup(self, transport):
        bridge = SinkBridge(transport_factory=lambda _config: transport)
        bridge.start({"queue_url": FIFO_URL, "topics": "orders"})
        bridge.put([_record(key="k1")])
        assert transport.sent == [(FIFO_URL, "payload", "k1", "orders-2-57")]

    def test_fifo_redelivered_record_is_deduplicated(self, transport):
        bridge = SinkBridge(transport_factory=lambda _config: transport)
        bridge.start({"queue_url": FIFO_URL, "topics": "orders"})
        bridge.put([_record()])
        bridge.put([_record()])
        assert transport.visible_count(FIFO_URL) == 1

    def test_fifo_group_falls_back_to_topic(self, transport):
        bridge = SinkBridge(transport_factory=lambda _config: transport)
        bridge.start({"queue_url": FIFO_URL, "topics": "orders"})
        bridge.put([_record(key=None)])
        assert transport.sent[0][2] == "orders"

    def test_headers_become_attributes(self, transport):
        bridge = _sink(transport, message_attributes_enabled=True)
        bridge.put([_record(headers=[
            RecordHeader(key="tenant", value="acme"),
            RecordHeader(key="raw", value=b"\x00", value_type=HeaderType.BYTES),
        ])])
        [message] = transport.receive(STANDARD_URL, 1, 0, True)
        assert message.string_attributes() == {"tenant": "acme"}
        assert list(message.attributes) == ["tenant"]

    def test_headers_filtered_by_include_list(self, transport):
        bridge = _sink(transport, message_attributes_enabled=True,
                       message_attributes_include_list=["keep"])
        bridge.put([_record(headers=[
            RecordHeader(key="keep", value="1"),
            RecordHeader(key="drop", value="2"),
        ])])
        [message] = transport.receive(STANDARD_URL, 1, 0, True)
        assert list(message.attributes) == ["keep"]

    def test_attributes_disabled(self, transport):
        bridge = _sink(transport)
        bridge.put([_record(headers=[RecordHeader(key="tenant", value="acme")])])
        [message] = transport.receive(STANDARD_URL, 1, 0, True)
        assert message.attributes == {}

    def test_send_failure_does_not_stop_the_batch(self, caplog):
        transport = FailingTransport({"bad"})
        bridge = _sink(transport)
        with caplog.at_level(logging.ERROR):
            bridge.put([_record(value="bad", offset=1), _record(value="good", offset=2)])
        assert [body for _, body, _, _ in transport.sent] == ["good"]
        assert "Failed to send message orders-2-1" in caplog.text

    def test_send_failure_raises_when_configured(self):
        transport = FailingTransport({"bad"})
        bridge = _sink(transport, raise_on_send_error=True)
        with pytest.raises(TransportError):
            bridge.put([_record(value="bad", offset=1), _record(value="good", offset=2)])
        assert transport.sent == []


# ---------- against moto ----------

class TestAgainstSqs:
    def test_put_to_fifo_queue(self, aws, fifo_queue_url):
        bridge = SinkBridge()
        bridge.start({"queue_url": fifo_queue_url, "topics": "orders",
                      "message_attributes_enabled": True})
        bridge.put([
            _record(value="first", offset=1, headers=[RecordHeader(key="tenant", value="acme")]),
            _record(value="second", key="k2", offset=2),
        ])
        bridge.stop()

        resp = aws.receive_message(
            QueueUrl=fifo_queue_url, MaxNumberOfMessages=10,
            MessageAttributeNames=["All"], AttributeNames=["All"],
        )
        messages = sorted(resp["Messages"], key=lambda m: m["Body"])
        assert [m["Body"] for m in messages] == ["first", "second"]
        assert messages[0]["MessageAttributes"]["tenant"]["StringValue"] == "acme"
        assert messages[0]["Attributes"]["MessageGroupId"] == "k1"
        assert messages[0]["Attributes"]["MessageDeduplicationId"] == "orders-2-1"
