# coarnotify/patterns/announce_service_result.py
"""
AnnounceServiceResult: https://coar-notify.net/specification/1.0.1/announce-resource/
"""

from ..core.activitystreams2 import ActivityStreamsTypes, Properties
from ..core.notify import NotifyMediaItem, NotifyObject, NotifyPattern, NotifyTypes
from ..exceptions import ValidationError
from ..factory import register_pattern


class AnnounceServiceResultItem(NotifyMediaItem):
    """The item the service acted on."""


class AnnounceServiceResultContext(NotifyObject):
    ITEM_CLASS = AnnounceServiceResultItem


class AnnounceServiceResultObject(NotifyObject):
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
class AnnounceServiceResult(NotifyPattern):
    """
    Announce the result of a service acting on a resource (for example, that
    it has been ingested). The object is the result, ``context`` the resource.
    """

    TYPE = [ActivityStreamsTypes.ANNOUNCE, NotifyTypes.INGEST_ACTION]
    OBJECT_CLASS = AnnounceServiceResultObject
    CONTEXT_CLASS = AnnounceServiceResultContext

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
