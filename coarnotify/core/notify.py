# coarnotify/core/notify.py
"""
The COAR Notify object model.

https://coar-notify.net/specification/1.0.1/

NotifyBase wraps an ActivityStream and gives it validated property access.
NotifyPattern is the root of every notification, and NotifyPatternPart the
root of the objects nested inside one (services, objects, actors, items).

Each class declares its type rules as class constants:

    TYPE           - type token(s) a pattern always carries
    DEFAULT_TYPE   - type a part is given if it has none
    ALLOWED_TYPES  - the only types a part may be given
    OBJECT_CLASS   - wrapper for a pattern's ``object``
    CONTEXT_CLASS  - wrapper for a pattern's ``context``
    ITEM_CLASS     - wrapper for an object's ``ietf:item``
"""

import copy
import uuid
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, Union

from .. import factory
from ..exceptions import InvalidType, ValidationError
from ..validate import (
    REQUIRED_MESSAGE,
    Validator,
    absolute_uri,
    at_least_one_of,
    one_of,
    type_checker,
    url,
)
from .activitystreams2 import (
    ACTIVITY_STREAMS_OBJECTS,
    ActivityStream,
    ActivityStreamsTypes,
    Properties,
    PropertyName,
)

NOTIFY_NAMESPACE = "https://coar-notify.net"


class NotifyProperties:
    """COAR Notify properties used in the patterns, in addition to the AS ones."""

    INBOX = ("inbox", NOTIFY_NAMESPACE)
    CITE_AS = ("ietf:cite-as", NOTIFY_NAMESPACE)
    ITEM = ("ietf:item", NOTIFY_NAMESPACE)
    NAME = "name"
    MEDIA_TYPE = "mediaType"


class NotifyTypes:
    """COAR Notify's own types."""

    ENDORSEMENT_ACTION = "coar-notify:EndorsementAction"
    INGEST_ACTION = "coar-notify:IngestAction"
    RELATIONSHIP_ACTION = "coar-notify:RelationshipAction"
    REVIEW_ACTION = "coar-notify:ReviewAction"
    UNPROCESSABLE_NOTIFICATION = "coar-notify:UnprocessableNotification"
    ABOUT_PAGE = "sorg:AboutPage"


ACTOR_TYPES = [
    ActivityStreamsTypes.SERVICE,
    ActivityStreamsTypes.APPLICATION,
    ActivityStreamsTypes.GROUP,
    ActivityStreamsTypes.ORGANIZATION,
    ActivityStreamsTypes.PERSON,
]

VALIDATION_RULES: Dict[Any, Dict[str, Any]] = {
    Properties.ID: {
        "default": absolute_uri,
        "context": {
            Properties.CONTEXT: {"default": url},
            Properties.ORIGIN: {"default": url},
            Properties.TARGET: {"default": url},
            NotifyProperties.ITEM: {"default": url},
        },
    },
    Properties.TYPE: {
        "default": type_checker,
        "context": {
            Properties.ACTOR: {"default": one_of(ACTOR_TYPES)},
            Properties.OBJECT: {"default": at_least_one_of(ACTIVITY_STREAMS_OBJECTS)},
            Properties.CONTEXT: {"default": at_least_one_of(ACTIVITY_STREAMS_OBJECTS)},
            NotifyProperties.ITEM: {"default": at_least_one_of(ACTIVITY_STREAMS_OBJECTS)},
        },
    },
    NotifyProperties.CITE_AS: {"default": url},
    NotifyProperties.INBOX: {"default": url},
    Properties.IN_REPLY_TO: {"default": absolute_uri},
    Properties.SUBJECT_TRIPLE: {"default": absolute_uri},
    Properties.OBJECT_TRIPLE: {"default": absolute_uri},
    Properties.RELATIONSHIP_TRIPLE: {"default": absolute_uri},
}

# Used by every object that is not given its own Validator. Changes to it
# (VALIDATORS.add_rules) apply process-wide.
VALIDATORS = Validator(VALIDATION_RULES)


class NotifyBase:
    """
    Base class for all Notify objects.

    Args:
        stream: An ActivityStream, or a dict holding the raw document, or
            None to start an empty one
        validate_stream_on_construct: Validate the document as soon as it
            is wrapped (only applies when a stream or dict is supplied)
        validate_properties: Validate each value as it is set
        validators: The Validator holding the rules; defaults to VALIDATORS
        validation_context: The property this object is nested under in its
            parent, which selects context-specific rules
        properties_by_reference: Get and set values by reference into the
            document; when False, values are deep-copied on the way in and out
    """

    TYPE: ClassVar[Union[str, List[str], None]] = None
    ALLOWED_TYPES: ClassVar[Tuple[str, ...]] = ()

    def __init__(
        self,
        stream: Union[ActivityStream, Dict[str, Any], None] = None,
        validate_stream_on_construct: bool = True,
        validate_properties: bool = True,
        validators: Optional[Validator] = None,
        validation_context: Optional[PropertyName] = None,
        properties_by_reference: bool = True,
    ):
        self._validate_stream_on_construct = validate_stream_on_construct
        self._validate_properties = validate_properties
        self._validators = validators if validators is not None else VALIDATORS
        self._validation_context = validation_context
        self._properties_by_reference = properties_by_reference
        validate_now = False

        if stream is None:
            self._stream = ActivityStream()
        elif isinstance(stream, dict):
            validate_now = validate_stream_on_construct
            self._stream = ActivityStream(stream)
        else:
            validate_now = validate_stream_on_construct
            self._stream = stream

        if self._stream.get_property(Properties.ID) is None:
            self._stream.set_property(Properties.ID, f"urn:uuid:{uuid.uuid4()}")

        self._apply_type_defaults()

        if validate_now:
            self.validate()

    def _apply_type_defaults(self) -> None:
        """Bring the type in line with the class's type rules after wrapping."""

    @property
    def validate_properties(self) -> bool:
        return self._validate_properties

    @property
    def validate_stream_on_construct(self) -> bool:
        return self._validate_stream_on_construct

    @property
    def validators(self) -> Validator:
        return self._validators

    @property
    def validation_context(self) -> Optional[PropertyName]:
        return self._validation_context

    @property
    def properties_by_reference(self) -> bool:
        return self._properties_by_reference

    @property
    def doc(self) -> Dict[str, Any]:
        """The underlying document, without its ``@context``."""
        return self._stream.doc

    @property
    def id(self) -> Optional[str]:
        return self.get_property(Properties.ID)

    @id.setter
    def id(self, value: Optional[str]):
        self.set_property(Properties.ID, value)

    @property
    def type(self) -> Union[str, List[str], None]:
        return self.get_property(Properties.TYPE)

    @type.setter
    def type(self, types: Union[str, List[str], None]):
        self.set_property(Properties.TYPE, types)

    def get_property(self, prop_name: PropertyName, by_reference: Optional[bool] = None) -> Any:
        """
        Get a property value.

        Args:
            prop_name: The property to get
            by_reference: Override the object's properties_by_reference

        Returns:
            The value (a deep copy unless by reference), or None
        """
        if by_reference is None:
            by_reference = self._properties_by_reference
        val = self._stream.get_property(prop_name)
        if by_reference:
            return val
        return copy.deepcopy(val)

    def set_property(self, prop_name: PropertyName, value: Any, by_reference: Optional[bool] = None) -> None:
        """
        Set a property value.

        The value is validated before it is stored, and a failing value
        raises immediately (unless property validation is switched off).

        Args:
            prop_name: The property to set
            value: The value to set
            by_reference: Override the object's properties_by_reference
        """
        if by_reference is None:
            by_reference = self._properties_by_reference
        self.validate_property(prop_name, value)
        if not by_reference:
            value = copy.deepcopy(value)
        self._stream.set_property(prop_name, value)

    def validate(self) -> bool:
        """
        Validate the object, collecting every problem found.

        The base requires ``id`` and ``type``. Subclasses extend this by
        calling it first and adding their own checks to the ValidationError
        it raises.

        Returns:
            True if valid, otherwise raises ValidationError
        """
        ve = ValidationError()

        self.required_and_validate(ve, Properties.ID, self.id)
        self.required_and_validate(ve, Properties.TYPE, self.type)

        if ve.has_errors():
            raise ve
        return True

    def validate_property(
        self,
        prop_name: PropertyName,
        value: Any,
        force_validate: bool = False,
        raise_error: bool = True,
    ) -> Tuple[bool, str]:
        """
        Validate a single value against the rule for its property.

        Nothing is checked when property validation is off, unless forced.
        None values always pass.

        Args:
            prop_name: The property the value is for
            value: The value to check
            force_validate: Validate even if validate_properties is False
            raise_error: Raise the validator's exception rather than return it

        Returns:
            (valid, message) tuple
        """
        if value is None:
            return True, ""

        if self._validate_properties or force_validate:
            validator = self._validators.get(prop_name, self._validation_context)
            if validator is not None:
                try:
                    validator(self, value)
                except ValueError as e:
                    if raise_error:
                        raise
                    return False, str(e)
        return True, ""

    def required(self, ve: ValidationError, prop_name: PropertyName, value: Any) -> None:
        """Record an error if a required value is missing."""
        if value is None:
            pn = prop_name[0] if isinstance(prop_name, tuple) else prop_name
            ve.add_error(prop_name, REQUIRED_MESSAGE.format(x=pn))

    def required_and_validate(self, ve: ValidationError, prop_name: PropertyName, value: Any) -> None:
        """
        Record an error if a required value is missing, otherwise validate it.

        Nested Notify objects are validated in full and their errors folded
        in under ``prop_name``.
        """
        if value is None:
            self.required(ve, prop_name, value)
        else:
            self._validate_value(ve, prop_name, value)

    def optional_and_validate(self, ve: ValidationError, prop_name: PropertyName, value: Any) -> None:
        """Validate a value if it is present."""
        if value is not None:
            self._validate_value(ve, prop_name, value)

    def _validate_value(self, ve: ValidationError, prop_name: PropertyName, value: Any) -> None:
        if isinstance(value, NotifyBase):
            try:
                value.validate()
            except ValidationError as subve:
                ve.add_nested_errors(prop_name, subve)
        else:
            valid, msg = self.validate_property(prop_name, value, force_validate=True, raise_error=False)
            if not valid:
                ve.add_error(prop_name, msg)

    def _nested(self, prop_name: PropertyName, klass: Type["NotifyBase"]) -> Optional["NotifyBase"]:
        """
        Wrap the value of a property in ``klass``.

        A fresh wrapper is built on every call. A bare string value is an
        ActivityStreams link and is wrapped as ``{"id": value}``, detached
        from the document.
        """
        value = self.get_property(prop_name)
        if value is None:
            return None
        if not isinstance(value, dict):
            value = {"id": value}
        return klass(
            value,
            validate_stream_on_construct=False,
            validate_properties=self._validate_properties,
            validators=self._validators,
            validation_context=prop_name,
            properties_by_reference=self._properties_by_reference,
        )

    def _set_nested(self, prop_name: PropertyName, value: Optional["NotifyBase"]) -> None:
        if value is None:
            self.set_property(prop_name, None)
            return
        self.set_property(prop_name, value.doc)
        self._stream.merge_context(value._stream.context)

    def to_jsonld(self) -> Dict[str, Any]:
        """Return the object as a JSON-LD document."""
        return self._stream.to_jsonld()


class NotifyPatternPart(NotifyBase):
    """
    Base class for the objects nested inside a pattern.

    DEFAULT_TYPE is applied if the document has no type. A non-empty
    ALLOWED_TYPES is enforced on every type assignment, whatever the
    validate_properties setting.
    """

    DEFAULT_TYPE: ClassVar[Optional[str]] = None

    def _apply_type_defaults(self) -> None:
        if self.DEFAULT_TYPE is not None and self.type is None:
            self.type = self.DEFAULT_TYPE

    @property
    def type(self) -> Union[str, List[str], None]:
        return self.get_property(Properties.TYPE)

    @type.setter
    def type(self, types: Union[str, List[str], None]):
        if types is not None:
            candidates = types if isinstance(types, list) else [types]
            if self.ALLOWED_TYPES:
                for t in candidates:
                    if t not in self.ALLOWED_TYPES:
                        raise InvalidType(
                            f"Type value {t} is not one of the permitted values: {list(self.ALLOWED_TYPES)}"
                        )
            types = candidates[0] if len(candidates) == 1 else list(candidates)
        self.set_property(Properties.TYPE, types)


class NotifyService(NotifyPatternPart):
    """A service (the ``origin`` or ``target`` of a pattern)."""

    DEFAULT_TYPE = ActivityStreamsTypes.SERVICE

    @property
    def inbox(self) -> Optional[str]:
        return self.get_property(NotifyProperties.INBOX)

    @inbox.setter
    def inbox(self, value: Optional[str]):
        self.set_property(NotifyProperties.INBOX, value)

    def validate(self) -> bool:
        ve = ValidationError()
        try:
            super().validate()
        except ValidationError as superve:
            ve = superve

        self.optional_and_validate(ve, NotifyProperties.INBOX, self.inbox)

        if ve.has_errors():
            raise ve
        return True


class NotifyItem(NotifyPatternPart):
    """The ``ietf:item`` of an object: a specific resource, such as a PDF."""

    @property
    def media_type(self) -> Optional[str]:
        return self.get_property(NotifyProperties.MEDIA_TYPE)

    @media_type.setter
    def media_type(self, value: Optional[str]):
        self.set_property(NotifyProperties.MEDIA_TYPE, value)

    def validate(self) -> bool:
        """Only ``id`` is required; the type is not checked at this level."""
        ve = ValidationError()
        self.required_and_validate(ve, Properties.ID, self.id)
        if ve.has_errors():
            raise ve
        return True


class NotifyMediaItem(NotifyItem):
    """An item that must declare its ``type`` and ``mediaType``."""

    def validate(self) -> bool:
        ve = ValidationError()
        try:
            super().validate()
        except ValidationError as superve:
            ve = superve

        self.required_and_validate(ve, Properties.TYPE, self.type)
        self.required(ve, NotifyProperties.MEDIA_TYPE, self.media_type)

        if ve.has_errors():
            raise ve
        return True


class NotifyObject(NotifyPatternPart):
    """A pattern's ``object`` or ``context``."""

    ITEM_CLASS: ClassVar[Type[NotifyItem]] = NotifyItem

    @property
    def cite_as(self) -> Optional[str]:
        return self.get_property(NotifyProperties.CITE_AS)

    @cite_as.setter
    def cite_as(self, value: Optional[str]):
        self.set_property(NotifyProperties.CITE_AS, value)

    @property
    def item(self) -> Optional[NotifyItem]:
        return self._nested(NotifyProperties.ITEM, self.ITEM_CLASS)

    @item.setter
    def item(self, value: Optional[NotifyItem]):
        self._set_nested(NotifyProperties.ITEM, value)

    @property
    def triple(self) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        """The ``(as:object, as:relationship, as:subject)`` values."""
        return (
            self.get_property(Properties.OBJECT_TRIPLE),
            self.get_property(Properties.RELATIONSHIP_TRIPLE),
            self.get_property(Properties.SUBJECT_TRIPLE),
        )

    @triple.setter
    def triple(self, value: Tuple[str, str, str]):
        obj, rel, subj = value
        self.set_property(Properties.OBJECT_TRIPLE, obj)
        self.set_property(Properties.RELATIONSHIP_TRIPLE, rel)
        self.set_property(Properties.SUBJECT_TRIPLE, subj)

    def validate(self) -> bool:
        """
        Only ``id`` is required; the type is not checked at this level.
        ``ietf:cite-as`` and ``ietf:item`` are validated when present.
        """
        ve = ValidationError()
        self.required_and_validate(ve, Properties.ID, self.id)
        self.optional_and_validate(ve, NotifyProperties.CITE_AS, self.cite_as)
        self.optional_and_validate(ve, NotifyProperties.ITEM, self.item)
        if ve.has_errors():
            raise ve
        return True


class NotifyActor(NotifyPatternPart):
    """The ``actor`` of a pattern."""

    DEFAULT_TYPE = ActivityStreamsTypes.SERVICE
    ALLOWED_TYPES = tuple(ACTOR_TYPES)

    @property
    def name(self) -> Optional[str]:
        return self.get_property(NotifyProperties.NAME)

    @name.setter
    def name(self, value: Optional[str]):
        self.set_property(NotifyProperties.NAME, value)


class NotifyPattern(NotifyBase):
    """
    Base class for all notification patterns.

    On construction the class TYPE is merged into whatever type the
    document already has. Caller-supplied types are kept.
    """

    TYPE = ActivityStreamsTypes.OBJECT
    OBJECT_CLASS: ClassVar[Type[NotifyObject]] = NotifyObject
    CONTEXT_CLASS: ClassVar[Type[NotifyObject]] = NotifyObject

    def _apply_type_defaults(self) -> None:
        self._ensure_type_contains(self.TYPE)

    def _ensure_type_contains(self, types: Union[str, List[str]]) -> None:
        required = list(types) if isinstance(types, list) else [types]
        existing = self._stream.get_property(Properties.TYPE)
        if existing is None:
            merged = required
        else:
            merged = list(existing) if isinstance(existing, list) else [existing]
            for t in required:
                if t not in merged:
                    merged.append(t)
        self.set_property(Properties.TYPE, merged[0] if len(merged) == 1 else merged)

    @property
    def origin(self) -> Optional[NotifyService]:
        return self._nested(Properties.ORIGIN, NotifyService)

    @origin.setter
    def origin(self, value: Optional[NotifyService]):
        self._set_nested(Properties.ORIGIN, value)

    @property
    def target(self) -> Optional[NotifyService]:
        return self._nested(Properties.TARGET, NotifyService)

    @target.setter
    def target(self, value: Optional[NotifyService]):
        self._set_nested(Properties.TARGET, value)

    @property
    def object(self) -> Optional[NotifyObject]:
        return self._nested(Properties.OBJECT, self.OBJECT_CLASS)

    @object.setter
    def object(self, value: Optional[NotifyBase]):
        self._set_nested(Properties.OBJECT, value)

    @property
    def actor(self) -> Optional[NotifyActor]:
        return self._nested(Properties.ACTOR, NotifyActor)

    @actor.setter
    def actor(self, value: Optional[NotifyActor]):
        self._set_nested(Properties.ACTOR, value)

    @property
    def context(self) -> Optional[NotifyObject]:
        return self._nested(Properties.CONTEXT, self.CONTEXT_CLASS)

    @context.setter
    def context(self, value: Optional[NotifyObject]):
        self._set_nested(Properties.CONTEXT, value)

    @property
    def in_reply_to(self) -> Optional[str]:
        return self.get_property(Properties.IN_REPLY_TO)

    @in_reply_to.setter
    def in_reply_to(self, value: Optional[str]):
        self.set_property(Properties.IN_REPLY_TO, value)

    def validate(self) -> bool:
        """
        Requires ``origin``, ``target`` and ``object`` on top of the base
        checks, and validates ``actor``, ``inReplyTo`` and ``context`` when
        present.
        """
        ve = ValidationError()
        try:
            super().validate()
        except ValidationError as superve:
            ve = superve

        self.required_and_validate(ve, Properties.ORIGIN, self.origin)
        self.required_and_validate(ve, Properties.TARGET, self.target)
        self.required_and_validate(ve, Properties.OBJECT, self.object)
        self.optional_and_validate(ve, Properties.ACTOR, self.actor)
        self.optional_and_validate(ve, Properties.IN_REPLY_TO, self.in_reply_to)
        self.optional_and_validate(ve, Properties.CONTEXT, self.context)

        if ve.has_errors():
            raise ve
        return True


#############################################
## Shared pattern behaviour

@dataclass
class NestedObject:
    """
    The resolved ``object`` of a pattern that responds to another pattern.

    kind is PATTERN when the object's type matched a registered pattern
    (instance is that pattern), otherwise OBJECT (instance is a NotifyObject).
    """

    PATTERN: ClassVar[str] = "pattern"
    OBJECT: ClassVar[str] = "object"

    kind: str
    instance: NotifyBase

    @property
    def id(self) -> Optional[str]:
        return self.instance.id


def resolve_nested_object(pattern: NotifyPattern) -> Optional[NestedObject]:
    """Resolve a pattern's ``object`` through the pattern registry."""
    value = pattern.get_property(Properties.OBJECT)
    if value is None:
        return None

    if isinstance(value, dict) and value.get("type") is not None:
        klass = factory.get_by_types(value["type"])
        if klass is not None:
            instance = klass(
                value,
                validate_stream_on_construct=False,
                validate_properties=pattern.validate_properties,
                validators=pattern.validators,
                properties_by_reference=pattern.properties_by_reference,
            )
            return NestedObject(NestedObject.PATTERN, instance)

    return NestedObject(NestedObject.OBJECT, pattern._nested(Properties.OBJECT, NotifyObject))


def _get_nested_pattern_object(self: NotifyPattern) -> Optional[NotifyBase]:
    nested = resolve_nested_object(self)
    return nested.instance if nested is not None else None


def _set_object(self: NotifyPattern, value: Optional[NotifyBase]) -> None:
    self._set_nested(Properties.OBJECT, value)


def _get_summary(self: NotifyBase) -> Optional[str]:
    return self.get_property(Properties.SUMMARY)


def _set_summary(self: NotifyBase, value: Optional[str]) -> None:
    self.set_property(Properties.SUMMARY, value)


# Assign in a pattern class body (``object = nested_pattern_object``) for
# patterns whose object is the notification they respond to.
nested_pattern_object = property(
    _get_nested_pattern_object,
    _set_object,
    doc="The object, as its own pattern class if its type is registered, else a NotifyObject.",
)

summary_property = property(_get_summary, _set_summary, doc="The ``summary`` of the pattern.")


def validate_in_reply_to_object(pattern: NotifyPattern, ve: ValidationError) -> None:
    """Record an error on ``inReplyTo`` if it differs from the nested object's id."""
    in_reply_to = pattern.in_reply_to
    if in_reply_to is None:
        return
    nested = resolve_nested_object(pattern)
    objid = nested.id if nested is not None else None
    if in_reply_to != objid:
        ve.add_error(
            Properties.IN_REPLY_TO,
            f"Expected inReplyTo id to be the same as the nested object id. "
            f"inReplyTo: {in_reply_to}, object.id: {objid}",
        )
