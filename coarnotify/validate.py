# coarnotify/validate.py
"""
Validation functions and the rule engine that applies them.

Every validator has the signature ``validator(obj, value) -> bool`` where
``obj`` is the Notify object that owns the value. Validators return True or
raise an InvalidValue subclass with a readable message.

The URI checks implement the RFC 3986 generic syntax directly instead of
going through urllib.parse, which accepts far more than an identifier in a
notification is allowed to be.
"""

import re
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .exceptions import InvalidURI, InvalidValue

REQUIRED_MESSAGE = "`{x}` is a required field"

ValidatorFn = Callable[[Any, Any], bool]


#############################################
## RFC 3986 grammar

_UNRESERVED = r"a-zA-Z0-9\-._~"
_SUB_DELIMS = r"!$&'()*+,;="
_PCT_ENCODED = r"%[0-9a-fA-F]{2}"
_PCHAR = rf"(?:[{_UNRESERVED}{_SUB_DELIMS}:@]|{_PCT_ENCODED})"

_DEC_OCTET = r"(?:25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])"
_IPV4 = rf"{_DEC_OCTET}(?:\.{_DEC_OCTET}){{3}}"

_H16 = r"[0-9a-fA-F]{1,4}"
_LS32 = rf"(?:{_H16}:{_H16}|{_IPV4})"
_IPV6 = "(?:" + "|".join([
    rf"(?:{_H16}:){{6}}{_LS32}",
    rf"::(?:{_H16}:){{5}}{_LS32}",
    rf"(?:{_H16})?::(?:{_H16}:){{4}}{_LS32}",
    rf"(?:(?:{_H16}:){{0,1}}{_H16})?::(?:{_H16}:){{3}}{_LS32}",
    rf"(?:(?:{_H16}:){{0,2}}{_H16})?::(?:{_H16}:){{2}}{_LS32}",
    rf"(?:(?:{_H16}:){{0,3}}{_H16})?::{_H16}:{_LS32}",
    rf"(?:(?:{_H16}:){{0,4}}{_H16})?::{_LS32}",
    rf"(?:(?:{_H16}:){{0,5}}{_H16})?::{_H16}",
    rf"(?:(?:{_H16}:){{0,6}}{_H16})?::",
]) + ")"
# RFC 6874 zone identifiers; the bare "%" form is accepted as well
_ZONE_ID = rf"(?:%25|%)(?:[{_UNRESERVED}]|{_PCT_ENCODED})+"
_IPV_FUTURE = rf"v[0-9a-fA-F]+\.[{_UNRESERVED}{_SUB_DELIMS}:]+"

# the top label is alphabetic, or an IDNA A-label (xn--...)
_HOSTNAME = r"(?:[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?\.)+(?:[a-zA-Z]{2,63}|xn--[a-zA-Z0-9\-]{1,59})\.?"

SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+\-.]*$")
USERINFO = re.compile(rf"^(?:[{_UNRESERVED}{_SUB_DELIMS}:]|{_PCT_ENCODED})*$")
IP_LITERAL = re.compile(rf"^\[(?:{_IPV6}(?:{_ZONE_ID})?|{_IPV_FUTURE})\]$")
IPV4 = re.compile(rf"^{_IPV4}$")
HOSTNAME = re.compile(rf"^{_HOSTNAME}$")
PORT = re.compile(r"^[0-9]*$")
PATH = re.compile(rf"^(?:{_PCHAR}|/)*$")
QUERY_OR_FRAGMENT = re.compile(rf"^(?:{_PCHAR}|[/?])*$")

# RFC 3986 Appendix B: splits a reference into its five components
URI_COMPONENTS = re.compile(r"^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$", re.DOTALL)


def _split_authority(authority: str) -> Tuple[Optional[str], str, Optional[str]]:
    """Split an authority into (userinfo, host, port)."""
    userinfo = None
    if "@" in authority:
        userinfo, authority = authority.rsplit("@", 1)

    port = None
    if authority.startswith("["):
        end = authority.find("]")
        if end == -1:
            return userinfo, authority, None
        host = authority[:end + 1]
        rest = authority[end + 1:]
        if rest:
            if not rest.startswith(":"):
                # leave the junk on the host so it fails the literal check
                return userinfo, authority, None
            port = rest[1:]
    elif ":" in authority:
        host, port = authority.rsplit(":", 1)
    else:
        host = authority

    return userinfo, host, port


def _valid_host(host: str) -> bool:
    if host == "" or host == "localhost":
        return True
    if host.startswith("["):
        return IP_LITERAL.fullmatch(host) is not None
    if IPV4.fullmatch(host):
        return True
    return HOSTNAME.fullmatch(host) is not None


def parse_uri(uri: str) -> Dict[str, Optional[str]]:
    """
    Split a URI into its components without validating them.

    Returns a dict with the keys scheme, authority, userinfo, host, port,
    path, query and fragment. Components that are absent are None.
    """
    match = URI_COMPONENTS.fullmatch(uri)
    scheme, authority, path, query, fragment = match.groups()
    userinfo = host = port = None
    if authority is not None:
        userinfo, host, port = _split_authority(authority)
    return {
        "scheme": scheme,
        "authority": authority,
        "userinfo": userinfo,
        "host": host,
        "port": port,
        "path": path,
        "query": query,
        "fragment": fragment,
    }


#############################################
## URI validators

def absolute_uri(obj: Any, uri: Any) -> bool:
    """
    Validate that ``uri`` is an absolute URI.

    Relative references are rejected. The scheme, authority (userinfo,
    host and port), path, query and fragment are each checked against the
    RFC 3986 grammar. Hosts may be a domain name, an IPv4 address,
    ``localhost`` or a bracketed IPv6 (or IPvFuture) literal.

    Args:
        obj: The Notify object the value belongs to (unused)
        uri: The value to check

    Returns:
        True if valid, otherwise raises InvalidURI
    """
    if not isinstance(uri, str):
        raise InvalidURI(f"Invalid URI `{uri}`: URIs must be strings")

    parts = parse_uri(uri)

    if parts["scheme"] is None:
        raise InvalidURI(f"Invalid URI `{uri}`: no scheme, relative references are not allowed")
    if not SCHEME.fullmatch(parts["scheme"]):
        raise InvalidURI(f"Invalid URI scheme `{parts['scheme']}`")

    if parts["authority"] is not None:
        if parts["userinfo"] is not None and not USERINFO.fullmatch(parts["userinfo"]):
            raise InvalidURI(f"Invalid URI authority `{parts['authority']}`")
        if not _valid_host(parts["host"]):
            raise InvalidURI(f"Invalid URI authority `{parts['authority']}`")
        if parts["port"] is not None and not PORT.fullmatch(parts["port"]):
            raise InvalidURI(f"Invalid URI authority `{parts['authority']}`")

    if not PATH.fullmatch(parts["path"]):
        raise InvalidURI(f"Invalid URI path `{parts['path']}`")

    if parts["query"] is not None and not QUERY_OR_FRAGMENT.fullmatch(parts["query"]):
        raise InvalidURI(f"Invalid URI query `{parts['query']}`")

    if parts["fragment"] is not None and not QUERY_OR_FRAGMENT.fullmatch(parts["fragment"]):
        raise InvalidURI(f"Invalid URI fragment `{parts['fragment']}`")

    return True


def url(obj: Any, value: Any) -> bool:
    """
    Validate that ``value`` is a dereferenceable HTTP(S) URL.

    The value must first be an absolute URI, then use the http or https
    scheme and name a host.
    """
    absolute_uri(obj, value)
    parts = parse_uri(value)
    if parts["scheme"].lower() not in ("http", "https"):
        raise InvalidURI(f"URL scheme must be http or https, got `{parts['scheme']}`")
    if not parts["host"]:
        raise InvalidURI(f"`{value}` does not appear to be a valid URL")
    return True


#############################################
## Validator factories

def one_of(values: Iterable[Any]) -> ValidatorFn:
    """
    Build a validator requiring the value to equal one of ``values``.

    Intended for single-valued properties; a list value never matches.
    """
    values = list(values)

    def validate(obj, x):
        if x not in values:
            raise InvalidValue(f"`{x}` is not one of the valid values: {values}")
        return True

    return validate


def at_least_one_of(values: Iterable[Any]) -> ValidatorFn:
    """
    Build a validator requiring the value (a scalar or a list) to share at
    least one element with ``values``.
    """
    values = list(values)

    def validate(obj, x):
        candidates = x if isinstance(x, list) else [x]
        for entry in candidates:
            if entry in values:
                return True

        if isinstance(x, list):
            raise InvalidValue(f"`{x}` does not contain at least one of the valid values: {values}")
        raise InvalidValue(f"`{x}` is not one of the valid values: {values}")

    return validate


def contains(value: Any) -> ValidatorFn:
    """
    Build a validator requiring the value (a scalar or a list) to include
    every element of ``value`` (a scalar or a list).
    """
    required = set(value) if isinstance(value, list) else {value}

    def validate(obj, x):
        supplied = set(x) if isinstance(x, list) else {x}
        if not required.issubset(supplied):
            raise InvalidValue(f"`{x}` does not contain the required value(s): {sorted(required)}")
        return True

    return validate


def type_checker(obj: Any, value: Any) -> bool:
    """
    Validate a type value against the owning object's own type rules.

    Objects that restrict their allowed types must use one of them; objects
    with a fixed type constant must include it; anything else passes.
    """
    allowed = getattr(obj, "ALLOWED_TYPES", None)
    if allowed:
        return one_of(allowed)(obj, value)

    type_constant = getattr(obj, "TYPE", None)
    if type_constant is not None:
        return contains(type_constant)(obj, value)

    return True


#############################################
## Rule engine

def _merge_dicts_recursive(base: Dict, update: Dict) -> Dict:
    merged = dict(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_dicts_recursive(merged[key], value)
        else:
            merged[key] = value
    return merged


class Validator:
    """
    Lookup table from property to validator function.

    Rules have the shape:

        {
            <property>: {
                "default": <validator>,
                "context": {
                    <enclosing property>: {"default": <validator>}
                }
            }
        }

    The enclosing property is the one under which the validated object is
    nested in its parent (``origin``, ``object``, ...). A context rule wins
    over the property default.

    Args:
        rules: The rule set. It is never modified in place.
    """

    def __init__(self, rules: Dict[Any, Dict[str, Any]]):
        self._rules = rules

    def get(self, property: Any, context: Any = None) -> Optional[ValidatorFn]:
        """
        Get the validator for a property.

        Args:
            property: The property identifier
            context: The enclosing property, if any

        Returns:
            The validator, or None if nothing validates this property
        """
        entry = self._rules.get(property, {})
        if context is not None:
            specific = entry.get("context", {}).get(context, {}).get("default")
            if specific is not None:
                return specific
        return entry.get("default")

    @property
    def rules(self) -> Dict[Any, Dict[str, Any]]:
        return self._rules

    def add_rules(self, rules: Dict[Any, Dict[str, Any]]) -> None:
        """
        Merge new rules into this validator.

        Dicts merge recursively; any other value in ``rules`` replaces the
        one it lands on.
        """
        self._rules = _merge_dicts_recursive(self._rules, rules)
