r"""
Argbinder argument declarations.

Overview
- Kind: the four value kinds a declaration can bind (bool, int, str, list of str).
- Declarations (class attributes of a Configuration)
  • Option: named field, addressed by one or more aliases ("name,n").
  • Usage: an Option bound to the help text; matching it prints the text and
    bypasses required-option validation.
  • Parameters: the single field collecting every positional token.
- Matching
  • Option.matches(name): exact, case-sensitive comparison against the joined
    alias text first, then against each alias.
  • match(name, options): first declaration (in declaration order) that matches.

Declarations are descriptors: the owning class tells them their field name
through __set_name__, and instances read/write the field through __get__ and
__set__. Declaration metadata itself is read-only (see mirror()).

Quick example:
    >>> from argbinder import Configuration, Option, Parameters, Usage
    >>> class Settings(Configuration):
    ...     name = Option("name,n", type=str, required=True)
    ...     verbose = Option("v,verbose", type=bool)
    ...     files = Parameters()
    ...     usage = Usage("h,help,?", "usage: tool -n NAME [-v] FILES...")

Public API
- Enum: Kind
- Classes: Argument, Option, Usage, Parameters
- Functions: match
"""
import builtins
import functools
import operator
import re
from collections.abc import Iterable
from enum import Enum

from rich.text import Text

from .utils import *


class Kind(Enum):
    """
    Value kind of a bound field, keyed by the Python type a declaration names.

    Kind(bool) is BOOLEAN, Kind(int) is INTEGER, Kind(str) is STRING and
    Kind(list) is STRINGS (an ordered list of strings).
    """
    BOOLEAN = bool
    INTEGER = int
    STRING = str
    STRINGS = list

    @property
    def default(self):
        """
        Field default used when a declaration does not provide one.
        """
        return {
            Kind.BOOLEAN: False,
            Kind.INTEGER: 0,
            Kind.STRING: None,
            Kind.STRINGS: (),
        }[self]


class ArgumentType(type):
    """
    Metaclass giving declarations a stable typename, read-only metadata and a
    readable representation.

    Responsibilities
    - __typename__ is derived from the class name (camel-case split with hyphens).
    - Every name listed in __introspectable__ becomes a read-only property
      backed by "_{name}" (see mirror()).
    - __repr__/__rich_repr__ list the __displayable__ names, falling back to
      __introspectable__.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Example
            - option(aliases=['name', 'n'], field='name', kind=<Kind.STRING: ...>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize metadata shared by every declaration.

    - descr: optional short description. Unset becomes None; a provided string
      must be non-empty after trimming.
    - required: coerced to bool.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)
    metadata["required"] = bool(metadata["required"])


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate and normalize the aliases of an option.

    - aliases: one comma-joined string ("project,p,proj"). Each alias is
      trimmed and must be a run of word characters or '?', the only names
      the token grammar can produce. Duplicates inside one declaration are
      rejected; sharing an alias across declarations is allowed (the first
      declared wins, see ConfigurationType).
    - text: the normalized joined form, kept for whole-text lookups.
    """
    if not isinstance(aliases := metadata["aliases"], str):
        raise TypeError(f"{cls.__typename__} aliases must be a comma-joined string")

    names = []
    for alias in aliases.split(","):
        if not (alias := alias.strip()):
            raise ValueError(f"{cls.__typename__} aliases cannot be empty-strings")
        elif not re.fullmatch(r"[\w?]+", alias):
            raise ValueError(f"{cls.__typename__} aliases must be word characters or '?' (got {alias!r})")
        elif alias in names:
            raise ValueError(f"{cls.__typename__} aliases cannot contain duplicates")
        names.append(alias)

    metadata["aliases"] = tuple(names)
    metadata["text"] = ",".join(names)


def _sanitize_valued_metadata(cls, metadata, /):
    """
    Internal: resolve the value kind and check the default against it.

    - type: bool, int, str or list; anything else is rejected.
    - default: Unset resolves to the kind default (False, 0, None, empty list).
      Lists are frozen into tuples here and copied per configuration instance.
    """
    try:
        kind = Kind(metadata.pop("type"))
    except (ValueError, TypeError):
        raise TypeError(f"{cls.__typename__} 'type' must be one of bool, int, str or list") from None
    metadata["kind"] = kind

    default = coalesce(metadata["default"], kind.default)
    match kind:
        case Kind.BOOLEAN if not isinstance(default, bool):
            raise TypeError(f"{cls.__typename__} boolean 'default' must be a bool")
        case Kind.INTEGER if not isinstance(default, int) or isinstance(default, bool):
            raise TypeError(f"{cls.__typename__} integer 'default' must be an int")
        case Kind.STRING if not isinstance(default, str | None):
            raise TypeError(f"{cls.__typename__} string 'default' must be a string")
        case Kind.STRINGS:
            if isinstance(default, str) or not isinstance(default, Iterable):
                raise TypeError(f"{cls.__typename__} list 'default' must be an iterable of strings")
            default = tuple(default)
            if not all(isinstance(item, str) for item in default):
                raise TypeError(f"{cls.__typename__} list 'default' must only contain strings")
    metadata["default"] = default


class Argument(metaclass=ArgumentType):
    """
    Abstract base of every declaration.

    Binding
    - __set_name__ records the owning field; a declaration can be bound to a
      single field only.
    - __get__ returns the instance's current value (or a fresh default when the
      field was never written); accessed on the class, it returns the
      declaration itself.
    - __set__ writes the instance's field.
    """

    def __init__(self, **metadata):
        if type(self) is Argument:
            raise TypeError("type 'Argument' cannot be instantiated directly")
        self._field = Unset
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __set_name__(self, owner, name):
        if self._field is not Unset and self._field != name:
            raise TypeError(f"{type(self).__typename__} is already bound to field {self._field!r}")
        self._field = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return instance.__dict__[self._field]
        except KeyError:
            return self.initial()

    def __set__(self, instance, value):
        if self._field is Unset:
            raise TypeError(f"{type(self).__typename__} is not bound to any field")
        instance.__dict__[self._field] = value

    def initial(self):
        """
        Return a fresh copy of the field default (lists are never shared).
        """
        if self._kind is Kind.STRINGS:
            return list(self._default)
        return self._default


class Option(Argument):
    """
    Named field populated from an option token.

    Parameters
    - aliases: str
      Comma-joined spellings the user may type ("name,n"). Matching is exact and
      case-sensitive; no prefix or fuzzy matching.
    - type: bool | int | str | list
      Value kind of the field. Booleans toggle or take on/off values, integers
      are 32-bit signed, lists collect strings.
    - default: Any
      Initial field value; defaults to the kind default.
    - required: bool
      When True, a non-empty token list that never mentions the option fails
      validation (unless the usage option was requested).
    - descr: Unset | str
      Short description, None when omitted.
    """

    __introspectable__ = (
        "aliases",
        "text",
        "field",
        "kind",
        "default",
        "required",
        "descr",
    )

    __displayable__ = (
        "aliases",
        "field",
        "kind",
        "required",
    )

    def __init__(self, aliases, /, type=str, default=Unset, required=False, descr=Unset):
        metadata = {
            "aliases": aliases,
            "type": type,
            "default": default,
            "required": required,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)
        _sanitize_valued_metadata(builtins.type(self), metadata)
        super().__init__(**metadata)

    def matches(self, name, /):
        """
        Return True when 'name' is the joined alias text or one of the aliases.
        """
        return name == self._text or name in self._aliases


class Usage(Option):
    """
    Option bound to the help text.

    The field's current value is printed verbatim when one of the aliases is
    seen, and its presence (or an empty token list) bypasses required-option
    validation. At most one Usage may be declared per configuration.
    """

    def __init__(self, aliases, text, /, required=False, descr=Unset):
        if not isinstance(text, str):
            raise TypeError(f"{builtins.type(self).__typename__} text must be a string")
        super().__init__(aliases, type=str, default=text, required=required, descr=descr)


class Parameters(Argument):
    """
    Field collecting positional tokens, in order.

    Tokens that are not option-shaped (and unknown options, when the session
    allows it) are appended here. At most one Parameters may be declared per
    configuration; without one, a positional token is an error.
    """

    __introspectable__ = (
        "field",
        "kind",
        "default",
        "required",
        "descr",
    )

    __displayable__ = (
        "field",
        "kind",
    )

    def __init__(self, descr=Unset):
        metadata = {
            "type": list,
            "default": (),
            "required": False,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_valued_metadata(builtins.type(self), metadata)
        super().__init__(**metadata)


def match(name, options, /):
    """
    Resolve an option name against declarations, in declaration order.

    Returns the first Option whose joined alias text or one of whose aliases
    equals 'name', or None when nothing matches. Declarations sharing an alias
    resolve to whichever was declared first.
    """
    for option in options:
        if option.matches(name):
            return option
    return None


__all__ = (
    # Enum
    "Kind",

    # Classes (declarations)
    "Argument",
    "Option",
    "Usage",
    "Parameters",

    # Functions
    "match",
)

# Not part of the public API.
del ArgumentType
