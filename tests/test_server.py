# tests/test_server.py
"""Tests for receiving notifications with COARNotifyServer."""

import json

import pytest

from coarnotify.exceptions import NotifyException, ValidationError
from coarnotify.patterns import Accept, RequestReview
from coarnotify.server import (
    COARNotifyReceipt,
    COARNotifyServer,
    COARNotifyServerError,
    COARNotifyServiceBinding,
)

from notify_fixtures import invalid, source


class MockServiceBinding(COARNotifyServiceBinding):
    """Records what it receives and answers with a fixed receipt."""

    def __init__(self, receipt: COARNotifyReceipt = None):
        self.receipt = receipt or COARNotifyReceipt(COARNotifyReceipt.CREATED, "http://example.com/location")
        self.received = []

    def notification_received(self, notification):
        self.received.append(notification)
        return self.receipt


class FailingServiceBinding(COARNotifyServiceBinding):
    def notification_received(self, notification):
        raise RuntimeError("storage unavailable")


@pytest.fixture
def binding():
    return MockServiceBinding()


@pytest.fixture
def server(binding):
    return COARNotifyServer(binding)


class TestReceive:
    """Test COARNotifyServer.receive."""

    def test_dict(self, server, binding):
        """Test receiving a parsed document."""
        receipt = server.receive(source("RequestReview"))

        assert receipt.status == COARNotifyReceipt.CREATED
        assert receipt.location == "http://example.com/location"
        assert len(binding.received) == 1
        assert isinstance(binding.received[0], RequestReview)

    def test_str(self, server, binding):
        """Test receiving a JSON string."""
        server.receive(json.dumps(source("Accept")))
        assert isinstance(binding.received[0], Accept)

    def test_bytes(self, server, binding):
        """Test receiving a raw request body."""
        server.receive(json.dumps(source("Accept")).encode("utf-8"))
        assert binding.received[0].id == source("Accept")["id"]

    def test_accepted_receipt(self):
        """Test that the binding's receipt is returned as-is."""
        binding = MockServiceBinding(COARNotifyReceipt(COARNotifyReceipt.ACCEPTED))
        receipt = COARNotifyServer(binding).receive(source("RequestReview"))

        assert receipt.status == 202
        assert receipt.location is None

    def test_invalid_notification(self, server, binding):
        """Test that invalid notifications are refused with a 400."""
        with pytest.raises(COARNotifyServerError) as exc_info:
            server.receive(invalid("RequestReview"))

        error = exc_info.value
        assert error.status == 400
        assert error.message == "Invalid notification"
        assert isinstance(error.validation_error, ValidationError)
        assert error.__cause__ is error.validation_error
        assert binding.received == []

    def test_skip_validation(self, server, binding):
        """Test passing an invalid notification through on purpose."""
        receipt = server.receive(invalid("RequestReview"), validate=False)

        assert receipt.status == COARNotifyReceipt.CREATED
        assert binding.received[0].id == "not a uri"

    def test_unknown_type(self, server, binding):
        """Test that an unknown type is not a server error."""
        doc = source("RequestReview")
        doc["type"] = "UnknownType"

        with pytest.raises(NotifyException) as exc_info:
            server.receive(doc)
        assert not isinstance(exc_info.value, COARNotifyServerError)
        assert binding.received == []

    def test_no_type(self, server):
        """Test a document with no type."""
        doc = source("RequestReview")
        del doc["type"]
        with pytest.raises(NotifyException):
            server.receive(doc)

    def test_invalid_json(self, server):
        """Test a body that is not JSON."""
        with pytest.raises(COARNotifyServerError) as exc_info:
            server.receive("this is not json")
        assert exc_info.value.status == 400
        assert exc_info.value.message.startswith("Invalid JSON")

    def test_not_an_object(self, server):
        """Test a JSON body that is not an object."""
        with pytest.raises(COARNotifyServerError) as exc_info:
            server.receive("[1, 2, 3]")
        assert exc_info.value.status == 400

    def test_binding_error_propagates(self):
        """Test that binding failures reach the caller."""
        with pytest.raises(RuntimeError):
            COARNotifyServer(FailingServiceBinding()).receive(source("RequestReview"))
