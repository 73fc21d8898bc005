# coarnotify/exceptions.py
"""
Exceptions raised by the COAR Notify library.

Single-value validators raise InvalidValue (or one of its subclasses) at the
point the bad value is seen. Whole-object validation collects everything it
finds into a ValidationError and raises that once, at the end of the pass.
"""

from typing import Any, Dict, Optional


class NotifyException(Exception):
    """Base class for all exceptions in the coarnotify library."""


class InvalidValue(NotifyException, ValueError):
    """A single property value failed its validator."""


class InvalidURI(InvalidValue):
    """A value is not an acceptable URI (or URL)."""


class InvalidType(InvalidValue):
    """A type value is not one of the types an object permits."""


class NotifyHttpError(NotifyException):
    """An inbox answered with a status the client does not understand."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(NotifyException):
    """
    Accumulated validation errors for an object and its nested objects.

    Errors are keyed on the property they belong to. Each entry may hold a
    list of messages and a dict of nested entries for a sub-object:

        {
            ("object", "https://www.w3.org/ns/activitystreams"): {
                "errors": [],
                "nested": {
                    ("id", "https://www.w3.org/ns/activitystreams"): {
                        "errors": ["Invalid URI scheme `9x`"]
                    }
                }
            }
        }

    Validators build one of these, add to it, and raise it only if
    has_errors() is true once they are done.
    """

    def __init__(self, errors: Optional[Dict[Any, Dict[str, Any]]] = None):
        super().__init__()
        self._errors = errors if errors is not None else {}

    @property
    def errors(self) -> Dict[Any, Dict[str, Any]]:
        return self._errors

    def add_error(self, key: Any, value: str) -> None:
        """Record a message against a property."""
        if key not in self._errors:
            self._errors[key] = {"errors": []}
        self._errors[key]["errors"].append(value)

    def add_nested_errors(self, key: Any, subve: "ValidationError") -> None:
        """Fold the errors of a nested object in under its parent property."""
        if key not in self._errors:
            self._errors[key] = {"errors": []}
        nested = self._errors[key].setdefault("nested", {})
        for k, v in subve.errors.items():
            nested[k] = v

    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def to_dict(self) -> Dict[str, Any]:
        """The errors with each property key reduced to its bare name, for JSON output."""
        return _plain_keys(self._errors)

    def __str__(self) -> str:
        return str(self._errors)


def _plain_keys(errors: Dict[Any, Dict[str, Any]]) -> Dict[str, Any]:
    out = {}
    for key, entry in errors.items():
        name = key[0] if isinstance(key, tuple) else key
        plain = {"errors": list(entry.get("errors", []))}
        if "nested" in entry:
            plain["nested"] = _plain_keys(entry["nested"])
        out[name] = plain
    return out
