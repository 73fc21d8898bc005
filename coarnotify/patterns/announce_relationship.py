# coarnotify/patterns/announce_relationship.py
"""
AnnounceRelationship: https://coar-notify.net/specification/1.0.1/announce-relationship/
"""

from ..core.activitystreams2 import ActivityStreamsTypes, Properties
from ..core.notify import NotifyObject, NotifyPattern, NotifyTypes
from ..exceptions import ValidationError
from ..factory import register_pattern


class AnnounceRelationshipObject(NotifyObject):
    """
    The relationship, as an ``as:subject`` / ``as:relationship`` /
    ``as:object`` triple. All three and the ``type`` are required.
    """

    def validate(self) -> bool:
        ve = ValidationError()
        try:
            super().validate()
        except ValidationError as superve:
            ve = superve

        obj, rel, subj = self.triple
        self.required_and_validate(ve, Properties.TYPE, self.type)
        self.required_and_validate(ve, Properties.SUBJECT_TRIPLE, subj)
        self.required_and_validate(ve, Properties.OBJECT_TRIPLE, obj)
        self.required_and_validate(ve, Properties.RELATIONSHIP_TRIPLE, rel)

        if ve.has_errors():
            raise ve
        return True


@register_pattern
class AnnounceRelationship(NotifyPattern):
    """Announce a relationship between two resources."""

    TYPE = [ActivityStreamsTypes.ANNOUNCE, NotifyTypes.RELATIONSHIP_ACTION]
    OBJECT_CLASS = AnnounceRelationshipObject

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
