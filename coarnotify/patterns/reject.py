# coarnotify/patterns/reject.py
"""
Reject: https://coar-notify.net/specification/1.0.1/reject/
"""

from ..core.activitystreams2 import ActivityStreamsTypes
from ..core.notify import NotifyPattern, nested_pattern_object, summary_property
from ..factory import register_pattern


@register_pattern
class Reject(NotifyPattern):
    """
    Reject an offer.

    Unlike Accept, ``inReplyTo`` is neither required nor checked against
    the object.
    """

    TYPE = ActivityStreamsTypes.REJECT

    object = nested_pattern_object
    summary = summary_property
