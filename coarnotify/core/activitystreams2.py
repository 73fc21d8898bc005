# coarnotify/core/activitystreams2.py
"""
The parts of ActivityStreams 2.0 that COAR Notify uses.

https://www.w3.org/TR/activitystreams-core/

Provides the AS property identifiers and type tokens, and ActivityStream,
a thin wrapper around a JSON document that keeps track of the ``@context``
namespaces its properties come from.

This is not a JSON-LD processor: contexts are never resolved, expanded or
compacted.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

ACTIVITY_STREAMS_NAMESPACE = "https://www.w3.org/ns/activitystreams"

# A property is either a bare name, or a (name, namespace) pair. The
# namespace may itself be a (prefix, uri) pair.
PropertyName = Union[str, Tuple[str, Union[str, Tuple[str, str]]]]


class Properties:
    """ActivityStreams properties used by COAR Notify, as (name, namespace) pairs."""

    ID = ("id", ACTIVITY_STREAMS_NAMESPACE)
    TYPE = ("type", ACTIVITY_STREAMS_NAMESPACE)
    ORIGIN = ("origin", ACTIVITY_STREAMS_NAMESPACE)
    OBJECT = ("object", ACTIVITY_STREAMS_NAMESPACE)
    TARGET = ("target", ACTIVITY_STREAMS_NAMESPACE)
    ACTOR = ("actor", ACTIVITY_STREAMS_NAMESPACE)
    IN_REPLY_TO = ("inReplyTo", ACTIVITY_STREAMS_NAMESPACE)
    CONTEXT = ("context", ACTIVITY_STREAMS_NAMESPACE)
    SUMMARY = ("summary", ACTIVITY_STREAMS_NAMESPACE)
    SUBJECT_TRIPLE = ("as:subject", ACTIVITY_STREAMS_NAMESPACE)
    OBJECT_TRIPLE = ("as:object", ACTIVITY_STREAMS_NAMESPACE)
    RELATIONSHIP_TRIPLE = ("as:relationship", ACTIVITY_STREAMS_NAMESPACE)


class ActivityStreamsTypes:
    """
    ActivityStreams types COAR Notify may use.

    COAR Notify's own types are in coarnotify.core.notify.NotifyTypes.
    """

    # Activities
    ACCEPT = "Accept"
    ANNOUNCE = "Announce"
    REJECT = "Reject"
    OFFER = "Offer"
    TENTATIVE_ACCEPT = "TentativeAccept"
    TENTATIVE_REJECT = "TentativeReject"
    FLAG = "Flag"
    UNDO = "Undo"

    # Objects
    ACTIVITY = "Activity"
    APPLICATION = "Application"
    ARTICLE = "Article"
    AUDIO = "Audio"
    COLLECTION = "Collection"
    COLLECTION_PAGE = "CollectionPage"
    RELATIONSHIP = "Relationship"
    DOCUMENT = "Document"
    EVENT = "Event"
    GROUP = "Group"
    IMAGE = "Image"
    INTRANSITIVE_ACTIVITY = "IntransitiveActivity"
    NOTE = "Note"
    OBJECT = "Object"
    ORDERED_COLLECTION = "OrderedCollection"
    ORDERED_COLLECTION_PAGE = "OrderedCollectionPage"
    ORGANIZATION = "Organization"
    PAGE = "Page"
    PERSON = "Person"
    PLACE = "Place"
    PROFILE = "Profile"
    QUESTION = "Question"
    SERVICE = "Service"
    TOMBSTONE = "Tombstone"
    VIDEO = "Video"


# The ActivityStreams types which are objects (as opposed to activities)
ACTIVITY_STREAMS_OBJECTS = [
    ActivityStreamsTypes.ACTIVITY,
    ActivityStreamsTypes.APPLICATION,
    ActivityStreamsTypes.ARTICLE,
    ActivityStreamsTypes.AUDIO,
    ActivityStreamsTypes.COLLECTION,
    ActivityStreamsTypes.COLLECTION_PAGE,
    ActivityStreamsTypes.RELATIONSHIP,
    ActivityStreamsTypes.DOCUMENT,
    ActivityStreamsTypes.EVENT,
    ActivityStreamsTypes.GROUP,
    ActivityStreamsTypes.IMAGE,
    ActivityStreamsTypes.INTRANSITIVE_ACTIVITY,
    ActivityStreamsTypes.NOTE,
    ActivityStreamsTypes.OBJECT,
    ActivityStreamsTypes.ORDERED_COLLECTION,
    ActivityStreamsTypes.ORDERED_COLLECTION_PAGE,
    ActivityStreamsTypes.ORGANIZATION,
    ActivityStreamsTypes.PAGE,
    ActivityStreamsTypes.PERSON,
    ActivityStreamsTypes.PLACE,
    ActivityStreamsTypes.PROFILE,
    ActivityStreamsTypes.QUESTION,
    ActivityStreamsTypes.SERVICE,
    ActivityStreamsTypes.TOMBSTONE,
    ActivityStreamsTypes.VIDEO,
]


def _split_property(property: PropertyName) -> Tuple[str, Any]:
    if isinstance(property, tuple):
        return property[0], property[1]
    return property, None


class ActivityStream:
    """
    Wrapper around an ActivityStreams document.

    The ``@context`` of the raw document is split out on construction and
    kept as a list of namespaces (strings or single-key ``{prefix: uri}``
    dicts), in first-seen order and without duplicates. It is only put
    back by to_jsonld().

    The raw document is used as-is, not copied.

    Args:
        raw: The ActivityStreams document, or None for a new empty one
    """

    def __init__(self, raw: Optional[Dict[str, Any]] = None):
        self._doc = raw if raw is not None else {}
        self._context: List[Any] = []
        if "@context" in self._doc:
            context = self._doc.pop("@context")
            if not isinstance(context, list):
                context = [context]
            for entry in context:
                self._add_context(entry)

    @property
    def doc(self) -> Dict[str, Any]:
        return self._doc

    @doc.setter
    def doc(self, doc: Dict[str, Any]):
        self._doc = doc

    @property
    def context(self) -> List[Any]:
        return self._context

    @context.setter
    def context(self, context: List[Any]):
        self._context = context

    def _add_context(self, entry: Any) -> None:
        if entry not in self._context:
            self._context.append(entry)

    def register_namespace(self, namespace: Union[str, Tuple[str, str]]) -> None:
        """
        Add a namespace to the context if it is not already there.

        Args:
            namespace: A namespace URI, or a (prefix, uri) pair which is
                recorded as ``{prefix: uri}``
        """
        entry = namespace
        if isinstance(namespace, tuple):
            prefix, uri = namespace
            entry = {prefix: uri}
        self._add_context(entry)

    def merge_context(self, context: List[Any]) -> None:
        """Add each entry of another stream's context to this one."""
        for entry in context:
            self._add_context(entry)

    def set_property(self, property: PropertyName, value: Any) -> None:
        """
        Set a property on the document.

        Args:
            property: A bare name, a ``(name, namespace)`` pair, or a
                ``(name, (prefix, namespace))`` pair. Namespaces are
                registered in the context.
            value: The value to set
        """
        prop_name, namespace = _split_property(property)
        self._doc[prop_name] = value
        if namespace is not None:
            self.register_namespace(namespace)

    def get_property(self, property: PropertyName) -> Any:
        """Get a property from the document, or None if it is not set."""
        prop_name, _ = _split_property(property)
        return self._doc.get(prop_name)

    def to_jsonld(self) -> Dict[str, Any]:
        """Return the document with its ``@context`` restored."""
        return {
            "@context": self._context,
            **self._doc,
        }
