# coarnotify/client.py
"""
Client for sending COAR Notify notifications to an inbox.

Usage:
    client = COARNotifyClient("https://example.org/inbox")

    offer = RequestReview()
    ...
    response = client.send(offer)
    print(response.action, response.location)
"""

import json
import logging
from dataclasses import dataclass
from typing import ClassVar, Optional

from .core.notify import NotifyPattern
from .exceptions import NotifyException, NotifyHttpError, ValidationError
from .http import HttpLayer, UrllibHttpLayer

logger = logging.getLogger(__name__)

CONTENT_TYPE = 'application/ld+json;profile="https://www.w3.org/ns/activitystreams"'


@dataclass
class NotifyResponse:
    """
    What the inbox did with a notification.

    action is CREATED (with the location of the new resource, if the inbox
    gave one) or ACCEPTED.
    """
    CREATED: ClassVar[str] = "created"
    ACCEPTED: ClassVar[str] = "accepted"

    action: str
    location: Optional[str] = None


class COARNotifyClient:
    """
    Sends notifications to an inbox.

    Args:
        inbox_url: Default inbox for send()
        http_layer: Transport to use; defaults to UrllibHttpLayer
    """

    def __init__(self, inbox_url: Optional[str] = None, http_layer: Optional[HttpLayer] = None):
        self.inbox_url = inbox_url
        self._http = http_layer if http_layer is not None else UrllibHttpLayer()

    def send(
        self,
        notification: NotifyPattern,
        inbox_url: Optional[str] = None,
        validate: bool = True,
    ) -> NotifyResponse:
        """
        Send a notification.

        The inbox is ``inbox_url`` if given, else the client's default,
        else the notification's ``target.inbox``.

        Args:
            notification: The notification to send
            inbox_url: Inbox to send to
            validate: Validate the notification first and refuse to send it
                if it is invalid

        Returns:
            NotifyResponse

        Raises:
            NotifyException: no inbox could be found, or the notification
                is invalid
            NotifyHttpError: the inbox answered with anything but 201 or 202
        """
        if inbox_url is None:
            inbox_url = self.inbox_url
        if inbox_url is None:
            target = notification.target
            if target is not None:
                inbox_url = target.inbox
        if inbox_url is None:
            raise NotifyException("No inbox URL provided at the client, method, or notification level")

        if validate:
            try:
                notification.validate()
            except ValidationError as e:
                raise NotifyException(
                    "Attempting to send invalid notification; to override set validate=False when calling this method"
                ) from e

        logger.info(f"Sending {type(notification).__name__} {notification.id} to {inbox_url}")
        resp = self._http.post(
            inbox_url,
            json.dumps(notification.to_jsonld()),
            {"Content-Type": CONTENT_TYPE},
        )
        logger.debug(f"Inbox {inbox_url} answered HTTP {resp.status_code}")

        if resp.status_code == 201:
            return NotifyResponse(NotifyResponse.CREATED, resp.header("Location"))
        if resp.status_code == 202:
            return NotifyResponse(NotifyResponse.ACCEPTED)
        raise NotifyHttpError(f"Unexpected response: {resp.status_code}", status_code=resp.status_code)
