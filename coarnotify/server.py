# coarnotify/server.py
"""
Server-side handling of incoming notifications.

COARNotifyServer does not listen on a socket itself. Give receive() the
body of a request that arrived at your inbox and it parses it, resolves it
to a pattern, validates it and hands it to your COARNotifyServiceBinding,
whose receipt tells you what to answer. See coarnotify.inbox for a complete
HTTP inbox built on it.

Usage:
    class MyBinding(COARNotifyServiceBinding):
        def notification_received(self, notification):
            store(notification)
            return COARNotifyReceipt(COARNotifyReceipt.CREATED, location)

    server = COARNotifyServer(MyBinding())
    receipt = server.receive(request_body)
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Union

from . import factory
from .core.notify import NotifyPattern
from .exceptions import NotifyException, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class COARNotifyReceipt:
    """The status (and, for CREATED, the location) to answer a sender with."""
    CREATED: ClassVar[int] = 201
    ACCEPTED: ClassVar[int] = 202

    status: int
    location: Optional[str] = None


class COARNotifyServiceBinding(ABC):
    """Your application's handler for received notifications."""

    @abstractmethod
    def notification_received(self, notification: NotifyPattern) -> COARNotifyReceipt:
        """
        Process a notification.

        Args:
            notification: The notification, as its pattern class

        Returns:
            The receipt to answer the sender with
        """
        pass


class COARNotifyServerError(NotifyException):
    """
    A notification was refused.

    The message is kept short enough to send back to the client. For invalid
    notifications the full error tree is on ``validation_error``.
    """

    def __init__(self, status: int, msg: str, validation_error: Optional[ValidationError] = None):
        super().__init__(msg)
        self.status = status
        self.message = msg
        self.validation_error = validation_error


class COARNotifyServer:
    """
    Args:
        service_impl: The binding notifications are passed to
    """

    def __init__(self, service_impl: COARNotifyServiceBinding):
        self._service_impl = service_impl

    def receive(self, raw: Union[str, bytes, Dict[str, Any]], validate: bool = True) -> COARNotifyReceipt:
        """
        Receive a notification.

        Exceptions raised by the service binding are not caught.

        Args:
            raw: The notification as a JSON string, JSON bytes, or a dict
            validate: Refuse notifications that fail validation

        Returns:
            The binding's receipt

        Raises:
            COARNotifyServerError: The body is not JSON (400), or the
                notification is invalid (400)
            NotifyException: The notification has no type, or no pattern
                matches it
        """
        if isinstance(raw, (str, bytes)):
            try:
                data = json.loads(raw)
            except ValueError as e:
                raise COARNotifyServerError(400, f"Invalid JSON: {e}") from e
        else:
            data = raw

        if not isinstance(data, dict):
            raise COARNotifyServerError(400, "Notification must be a JSON object")

        notification = factory.get_by_object(data, validate_stream_on_construct=False)
        logger.info(f"Received {type(notification).__name__} {notification.id}")

        if validate:
            try:
                notification.validate()
            except ValidationError as ve:
                logger.warning(f"Rejected invalid notification {notification.id}: {ve}")
                raise COARNotifyServerError(400, "Invalid notification", validation_error=ve) from ve

        return self._service_impl.notification_received(notification)
