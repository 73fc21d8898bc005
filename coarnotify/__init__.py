# coarnotify - COAR Notify protocol library
#
# Build, validate, send and receive COAR Notify notifications: JSON-LD
# documents layered on ActivityStreams 2.0 that repositories, review
# services and aggregators exchange through LDN inboxes.
#
# Core concepts:
# - Pattern: A notification type (Accept, RequestReview, ...)
# - Pattern part: An object nested in a pattern (Service, Object, Actor, Item)
# - Factory: Resolves an incoming document to its pattern class
# - Client: POSTs a notification to an inbox
# - Server: Parses, validates and dispatches a received notification

import json
from typing import Any, Dict, Optional

from .core.activitystreams2 import ActivityStream, ActivityStreamsTypes, Properties
from .core.notify import (
    NotifyActor,
    NotifyBase,
    NotifyItem,
    NotifyObject,
    NotifyPattern,
    NotifyProperties,
    NotifyService,
    NotifyTypes,
)
from .exceptions import (
    InvalidType,
    InvalidURI,
    InvalidValue,
    NotifyException,
    NotifyHttpError,
    ValidationError,
)
from .factory import get_by_object, get_by_types, list_patterns, register_pattern, deregister_pattern
from .client import COARNotifyClient, NotifyResponse
from .http import HttpLayer, HttpResponse
from .server import COARNotifyReceipt, COARNotifyServer, COARNotifyServerError, COARNotifyServiceBinding
from . import patterns  # Register built-in patterns
from .patterns import (
    Accept,
    AnnounceEndorsement,
    AnnounceRelationship,
    AnnounceReview,
    AnnounceServiceResult,
    Reject,
    RequestEndorsement,
    RequestReview,
    TentativelyAccept,
    TentativelyReject,
    UndoOffer,
    UnprocessableNotification,
)


def client(inbox_url: Optional[str] = None, http_layer: Optional[HttpLayer] = None) -> COARNotifyClient:
    """Create a COARNotifyClient."""
    return COARNotifyClient(inbox_url=inbox_url, http_layer=http_layer)


def server(service_impl: COARNotifyServiceBinding) -> COARNotifyServer:
    """Create a COARNotifyServer dispatching to ``service_impl``."""
    return COARNotifyServer(service_impl)


def from_dict(data: Dict[str, Any], **options) -> NotifyPattern:
    """
    Build the pattern a document describes.

    Options are passed to the pattern constructor.
    """
    return get_by_object(data, **options)


def from_json(text: str, **options) -> NotifyPattern:
    """Build the pattern a JSON document describes."""
    return get_by_object(json.loads(text), **options)


__all__ = [
    # Core
    "ActivityStream",
    "ActivityStreamsTypes",
    "Properties",
    "NotifyActor",
    "NotifyBase",
    "NotifyItem",
    "NotifyObject",
    "NotifyPattern",
    "NotifyProperties",
    "NotifyService",
    "NotifyTypes",
    # Exceptions
    "InvalidType",
    "InvalidURI",
    "InvalidValue",
    "NotifyException",
    "NotifyHttpError",
    "ValidationError",
    # Factory
    "get_by_object",
    "get_by_types",
    "list_patterns",
    "register_pattern",
    "deregister_pattern",
    # Client / server
    "COARNotifyClient",
    "NotifyResponse",
    "HttpLayer",
    "HttpResponse",
    "COARNotifyReceipt",
    "COARNotifyServer",
    "COARNotifyServerError",
    "COARNotifyServiceBinding",
    "client",
    "server",
    "from_dict",
    "from_json",
    # Patterns
    "Accept",
    "AnnounceEndorsement",
    "AnnounceRelationship",
    "AnnounceReview",
    "AnnounceServiceResult",
    "Reject",
    "RequestEndorsement",
    "RequestReview",
    "TentativelyAccept",
    "TentativelyReject",
    "UndoOffer",
    "UnprocessableNotification",
]

__version__ = "1.0.0"
