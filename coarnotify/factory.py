# coarnotify/factory.py
"""
Pattern registry.

Pattern classes register themselves by their TYPE. Incoming documents are
matched to the most specific registered pattern whose types they carry.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set, Type, Union

from .exceptions import NotifyException

if TYPE_CHECKING:
    from .core.notify import NotifyPattern

logger = logging.getLogger(__name__)

# Global pattern registry, in registration order
_PATTERNS: List[Type["NotifyPattern"]] = []


def _type_set(types: Union[str, Iterable[str], None]) -> Set[str]:
    if types is None:
        return set()
    if isinstance(types, str):
        return {types}
    return set(types)


def register_pattern(cls: Type["NotifyPattern"]) -> Type["NotifyPattern"]:
    """
    Class decorator to register a pattern.

    A registered class with the same type set is replaced.

    Usage:
        @register_pattern
        class Accept(NotifyPattern):
            TYPE = ActivityStreamsTypes.ACCEPT
    """
    types = _type_set(cls.TYPE)
    for i, existing in enumerate(_PATTERNS):
        if _type_set(existing.TYPE) == types:
            if existing is not cls:
                logger.warning(f"Overwriting pattern for {sorted(types)}: {existing.__name__} -> {cls.__name__}")
            _PATTERNS[i] = cls
            return cls
    _PATTERNS.append(cls)
    return cls


def deregister_pattern(cls: Type["NotifyPattern"]) -> bool:
    """
    Remove a pattern, or the pattern registered for the same type set.

    Returns:
        True if a pattern was removed
    """
    types = _type_set(cls.TYPE)
    for i, existing in enumerate(_PATTERNS):
        if _type_set(existing.TYPE) == types:
            del _PATTERNS[i]
            return True
    return False


def list_patterns() -> Dict[str, Type["NotifyPattern"]]:
    """List registered patterns by class name."""
    return {cls.__name__: cls for cls in _PATTERNS}


def get_by_types(incoming_types: Union[str, Iterable[str], None]) -> Optional[Type["NotifyPattern"]]:
    """
    Get the pattern class that best fits a set of types.

    A pattern fits if all of its types are in ``incoming_types``. The fit
    leaving the fewest incoming types unexplained wins, and an exact match
    is returned straight away. Ties go to the earliest registered.

    Args:
        incoming_types: A type or list of types from a document

    Returns:
        The pattern class, or None if nothing fits
    """
    incoming = _type_set(incoming_types)
    if not incoming:
        return None

    candidate = None
    best = None
    for cls in _PATTERNS:
        pattern_types = _type_set(cls.TYPE)
        if not pattern_types.issubset(incoming):
            continue
        diff = len(incoming) - len(pattern_types)
        if diff == 0:
            return cls
        if best is None or diff < best:
            candidate = cls
            best = diff

    return candidate


def get_by_object(data: Dict[str, Any], *args, **kwargs) -> "NotifyPattern":
    """
    Wrap a document in the pattern class its type resolves to.

    Extra arguments are passed to the pattern constructor (for example
    ``validate_stream_on_construct=False``).

    Raises:
        NotifyException: if the document has no type or no pattern fits
    """
    types = data.get("type")
    if types is None:
        raise NotifyException("No type found in object")

    klass = get_by_types(types)
    if klass is None:
        raise NotifyException(f"No matching pattern found for types: {types}")

    logger.debug(f"Resolved types {types} to {klass.__name__}")
    return klass(data, *args, **kwargs)
