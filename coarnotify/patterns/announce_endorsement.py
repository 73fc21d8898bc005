# coarnotify/patterns/announce_endorsement.py
"""
AnnounceEndorsement: https://coar-notify.net/specification/1.0.1/announce-endorsement/
"""

from ..core.activitystreams2 import ActivityStreamsTypes, Properties
from ..core.notify import NotifyMediaItem, NotifyObject, NotifyPattern, NotifyTypes
from ..exceptions import ValidationError
from ..factory import register_pattern


class AnnounceEndorsementItem(NotifyMediaItem):
    """The endorsed item."""


class AnnounceEndorsementContext(NotifyObject):
    """The resource that was endorsed."""

    ITEM_CLASS = AnnounceEndorsementItem


@register_pattern
class AnnounceEndorsement(NotifyPattern):
    """
    Announce that an endorsement of a resource exists.

    The object is the endorsement itself, and ``context`` (required) is the
    resource it endorses.
    """

    TYPE = [ActivityStreamsTypes.ANNOUNCE, NotifyTypes.ENDORSEMENT_ACTION]
    CONTEXT_CLASS = AnnounceEndorsementContext

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
