"""
Core COAR Notify model: the ActivityStreams 2 container and vocabulary, and
the Notify base classes the patterns are built from.
"""

from .activitystreams2 import (
    ACTIVITY_STREAMS_NAMESPACE,
    ACTIVITY_STREAMS_OBJECTS,
    ActivityStream,
    ActivityStreamsTypes,
    Properties,
)
from .notify import (
    NOTIFY_NAMESPACE,
    VALIDATION_RULES,
    VALIDATORS,
    NestedObject,
    NotifyActor,
    NotifyBase,
    NotifyItem,
    NotifyMediaItem,
    NotifyObject,
    NotifyPattern,
    NotifyPatternPart,
    NotifyProperties,
    NotifyService,
    NotifyTypes,
)

__all__ = [
    "ACTIVITY_STREAMS_NAMESPACE",
    "ACTIVITY_STREAMS_OBJECTS",
    "ActivityStream",
    "ActivityStreamsTypes",
    "Properties",
    "NOTIFY_NAMESPACE",
    "VALIDATION_RULES",
    "VALIDATORS",
    "NestedObject",
    "NotifyActor",
    "NotifyBase",
    "NotifyItem",
    "NotifyMediaItem",
    "NotifyObject",
    "NotifyPattern",
    "NotifyPatternPart",
    "NotifyProperties",
    "NotifyService",
    "NotifyTypes",
]
