# coarnotify/patterns/announce_review.py
"""
AnnounceReview: https://coar-notify.net/specification/1.0.1/announce-review/
"""

from ..core.activitystreams2 import ActivityStreamsTypes, Properties
from ..core.notify import NotifyMediaItem, NotifyObject, NotifyPattern, NotifyTypes
from ..exceptions import ValidationError
from ..factory import register_pattern


class AnnounceReviewItem(NotifyMediaItem):
    """The reviewed item."""


class AnnounceReviewContext(NotifyObject):
    ITEM_CLASS = AnnounceReviewItem


class AnnounceReviewObject(NotifyObject):
    """The review. Its ``type`` is required."""

    def validate(self) -> bool:
        ve = ValidationError()
        try:
            super().validate()
        except ValidationError as superve:
            ve = superve

        self.required_and_validate(ve, Properties.TYPE, self.type)

        if ve.has_errors():
            raise ve
        return True


@register_pattern
class AnnounceReview(NotifyPattern):
    """Announce that a review of a resource has been published."""

    TYPE = [ActivityStreamsTypes.ANNOUNCE, NotifyTypes.REVIEW_ACTION]
    OBJECT_CLASS = AnnounceReviewObject
    CONTEXT_CLASS = AnnounceReviewContext

    def validate(self) -> bool:
        ve = ValidationError()
        try:
            super().validate()
        except ValidationError as superve:
            ve = superve

        self.required_and_validate(ve, Properties.CONTEXT, self.context)

        if ve.has_errors():
            raise ve
        return True
