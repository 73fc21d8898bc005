# coarnotify/patterns/request_review.py
"""
RequestReview: https://coar-notify.net/specification/1.0.1/request-review/
"""

from ..core.activitystreams2 import ActivityStreamsTypes
from ..core.notify import NotifyMediaItem, NotifyObject, NotifyPattern, NotifyTypes
from ..factory import register_pattern


class RequestReviewItem(NotifyMediaItem):
    """An item offered for review."""


class RequestReviewObject(NotifyObject):
    ITEM_CLASS = RequestReviewItem


@register_pattern
class RequestReview(NotifyPattern):
    """Ask a service to review a resource."""

    TYPE = [ActivityStreamsTypes.OFFER, NotifyTypes.REVIEW_ACTION]
    OBJECT_CLASS = RequestReviewObject
