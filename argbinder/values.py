"""
Argbinder value parsers.

Each parser turns the inline value fragment of an option token (possibly
empty) into a typed field value, consuming tokens that follow the option from
the stream when the fragment is empty and the kind needs a value.

- parse_boolean: toggle on an empty fragment, otherwise on/off words or +/-.
- parse_integer: a signed 32-bit integer.
- parse_string: the fragment, or the next token (even if it is option-shaped).
- parse_strings: comma-separated values, or consecutive non-prefixed tokens.

All parsers raise faults carrying the option token, its 1-based position and a
hint; nothing is consumed past the point of failure.
"""
import re

from .faults import *
from .utils import Unset, ordinal

TRUTHY = frozenset({"on", "true", "yes", "+"})
FALSY = frozenset({"off", "false", "no", "-"})

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1
INTEGER = re.compile(r"\s*[+-]?[0-9]+\s*")


def _require(stream, token, value, what, /):
    """
    Return the fragment, or consume the next token when the fragment is empty.
    """
    if value:
        return value
    if stream.peek() is Unset:
        raise MissingValueParameterError(
            "option %r at %s position requires %s" % (token, ordinal(stream.position), what),
            title="missing value",
            code=FaultCode.MISSING_VALUE_PARAMETER,
            hint="pass it inline (for example: %s:<value>) or as the next token" % token,
            token=token,
            index=stream.index,
            docs=getdoc(FaultCode.MISSING_VALUE_PARAMETER)
        )
    return stream.take()


def _split(value, /):
    # A leading comma does not split: ",a" stays a single element.
    if value.find(",") > 0:
        return value.split(",")
    return [value]


def parse_boolean(stream, token, value, /, *, current, grammar, separate=False):
    """
    Resolve a boolean option.

    - a trailing '+' or '-' on the token overrides the fragment ("-v+", "-q-").
    - with 'separate', an empty fragment takes the next token when it is not
      option-shaped ("-v off").
    - an empty fragment toggles the current field value, so the same switch
      turns a default-off field on and a default-on field off.
    - on/true/yes/+ and off/false/no/- (case-insensitive) force the value.
    """
    position = stream.position
    if token.endswith("+"):
        value = "+"
    if token.endswith("-"):
        value = "-"

    if separate and not value and (following := stream.peek()) is not Unset and not grammar.is_option(following):
        value = stream.take()

    if not value:
        return not current
    if (lowered := value.lower()) in TRUTHY:
        return True
    if lowered in FALSY:
        return False

    raise InvalidBooleanValueError(
        "option %r at %s position requires a boolean value, got %r" % (token, ordinal(position), value),
        title="invalid boolean value",
        code=FaultCode.INVALID_BOOLEAN_VALUE,
        hint="use true or false, on or off, yes or no, + or -",
        token=token,
        value=value,
        index=position - 1,
        docs=getdoc(FaultCode.INVALID_BOOLEAN_VALUE)
    )


def parse_integer(stream, token, value, /):
    """
    Resolve an integer option as a signed 32-bit integer.

    Accepts an optional sign and ASCII digits, with surrounding whitespace.
    """
    position = stream.position
    value = _require(stream, token, value, "an integer value")

    if INTEGER.fullmatch(value) and INT32_MIN <= (result := int(value)) <= INT32_MAX:
        return result

    raise InvalidIntegerValueError(
        "option %r at %s position requires an integer value, got %r" % (token, ordinal(position), value),
        title="invalid integer value",
        code=FaultCode.INVALID_INTEGER_VALUE,
        hint="use a whole number between %d and %d" % (INT32_MIN, INT32_MAX),
        token=token,
        value=value,
        index=position - 1,
        docs=getdoc(FaultCode.INVALID_INTEGER_VALUE)
    )


def parse_string(stream, token, value, /):
    """
    Resolve a string option: the fragment, or the next token as-is.
    """
    return _require(stream, token, value, "a string value")


def parse_strings(stream, token, value, /, *, grammar):
    """
    Resolve a string-list option.

    Inline fragment
    - split on commas when a comma appears past the first character, otherwise
      a single element ("-tags:a,b,c", "-tag:a").

    Empty fragment
    - the next token is split the same way and consumed as one unit when it
      holds a comma past its first character ("-tags a,b,c");
    - otherwise following tokens are collected one by one until the end of the
      input or the next prefixed token ("-tags a b c -v").
    """
    if value:
        return _split(value)

    if (following := stream.peek()) is Unset:
        raise MissingValueParameterError(
            "option %r at %s position requires one or more string values" % (token, ordinal(stream.position)),
            title="missing value",
            code=FaultCode.MISSING_VALUE_PARAMETER,
            hint="pass them inline (for example: %s:a,b,c) or as the next tokens" % token,
            token=token,
            index=stream.index,
            docs=getdoc(FaultCode.MISSING_VALUE_PARAMETER)
        )

    if following.find(",") > 0:
        return _split(stream.take())

    values = []
    while (following := stream.peek()) is not Unset and not grammar.prefixed(following):
        values.append(stream.take())
    return values


__all__ = (
    "parse_boolean",
    "parse_integer",
    "parse_string",
    "parse_strings",
)
