# coarnotify/patterns/tentatively_reject.py
"""
TentativelyReject: https://coar-notify.net/specification/1.0.1/tentative-reject/
"""

from ..core.activitystreams2 import ActivityStreamsTypes, Properties
from ..core.notify import (
    NotifyPattern,
    nested_pattern_object,
    summary_property,
    validate_in_reply_to_object,
)
from ..exceptions import ValidationError
from ..factory import register_pattern


@register_pattern
class TentativelyReject(NotifyPattern):
    """Tentatively reject an offer, leaving room for it to be resubmitted."""

    TYPE = ActivityStreamsTypes.TENTATIVE_REJECT

    object = nested_pattern_object
    summary = summary_property

    def validate(self) -> bool:
        ve = ValidationError()
        try:
            super().validate()
        except ValidationError as superve:
            ve = superve

        self.required(ve, Properties.IN_REPLY_TO, self.in_reply_to)
        validate_in_reply_to_object(self, ve)

        if ve.has_errors():
            raise ve
        return True
