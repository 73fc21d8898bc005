# coarnotify/patterns/request_endorsement.py
"""
RequestEndorsement: https://coar-notify.net/specification/1.0.1/request-endorsement/
"""

from ..core.activitystreams2 import ActivityStreamsTypes
from ..core.notify import NotifyMediaItem, NotifyObject, NotifyPattern, NotifyTypes
from ..factory import register_pattern


class RequestEndorsementItem(NotifyMediaItem):
    """An item offered for endorsement."""


class RequestEndorsementObject(NotifyObject):
    ITEM_CLASS = RequestEndorsementItem


@register_pattern
class RequestEndorsement(NotifyPattern):
    """Ask a service (an overlay journal, say) to endorse a resource."""

    TYPE = [ActivityStreamsTypes.OFFER, NotifyTypes.ENDORSEMENT_ACTION]
    OBJECT_CLASS = RequestEndorsementObject
