# coarnotify/patterns/unprocessable_notification.py
"""
UnprocessableNotification: https://coar-notify.net/specification/1.0.1/unprocessable/
"""

from ..core.activitystreams2 import ActivityStreamsTypes, Properties
from ..core.notify import NotifyPattern, NotifyTypes, summary_property
from ..exceptions import ValidationError
from ..factory import register_pattern


@register_pattern
class UnprocessableNotification(NotifyPattern):
    """Tell the sender that a notification it sent could not be processed."""

    TYPE = [ActivityStreamsTypes.FLAG, NotifyTypes.UNPROCESSABLE_NOTIFICATION]

    summary = summary_property

    def validate(self) -> bool:
        """Requires ``inReplyTo`` and a ``summary`` explaining the failure."""
        ve = ValidationError()
        try:
            super().validate()
        except ValidationError as superve:
            ve = superve

        self.required(ve, Properties.IN_REPLY_TO, self.in_reply_to)
        self.required(ve, Properties.SUMMARY, self.summary)

        if ve.has_errors():
            raise ve
        return True
