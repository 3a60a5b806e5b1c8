"""
Argbinder bindings: declaration discovery and field access.

What this module provides
- ConfigurationType: metaclass that builds the declaration registry of a
  configuration class once, at class construction.
  • base-class declarations come first, then the class's own declarations in
    definition order; redefining a field replaces the inherited declaration.
  • at most one Usage and at most one Parameters per configuration.
  • an alias declared by two options is legal (the first declared wins when
    matching) but reported with a ShadowedAliasWarning.
- Configuration: base class for configuration objects. Its initializer gives
  every declared field a fresh default, then applies keyword overrides.
- discover(target): the declarations of a configuration instance, split into
  options (Usage included, at its declared position), usage and parameters.
- fetch(target, argument) / store(target, argument, value): read and write a
  bound field through its declaration.

Example
    >>> class Settings(Configuration):
    ...     verbose = Option("v,verbose", type=bool)
    ...     files = Parameters()
    >>> settings = Settings(verbose=True)
    >>> discover(settings).options
    (option(aliases=['v', 'verbose'], field='verbose', kind=<Kind.BOOLEAN: <class 'bool'>>, required=False),)
"""
from collections import namedtuple

from .arguments import Argument, Option, Usage, Parameters
from .faults import ShadowedAliasWarning, FaultCode, trigger, getdoc

Declarations = namedtuple("Declarations", (
    "options",
    "usage",
    "parameters",
))


class ConfigurationType(type):
    """
    Metaclass that resolves the declarations of a configuration class.

    The resulting registry is stored as __arguments__ (a tuple, in resolution
    order) and never changes afterwards.
    """

    def __new__(cls, name, bases, namespace, **options):
        # Declarations learn their field names here, through __set_name__.
        self = super().__new__(cls, name, bases, namespace, **options)

        registry = {}
        for base in reversed(bases):
            for argument in getattr(base, "__arguments__", ()):
                registry[argument.field] = argument

        own = []
        for field, object in namespace.items():
            if isinstance(object, Argument):
                registry[field] = object
                own.append(object)
            else:
                registry.pop(field, None)

        arguments = tuple(registry.values())

        if len([argument for argument in arguments if isinstance(argument, Usage)]) > 1:
            raise TypeError(f"configuration {name!r} cannot declare more than one usage")
        if len([argument for argument in arguments if isinstance(argument, Parameters)]) > 1:
            raise TypeError(f"configuration {name!r} cannot declare more than one parameters list")

        seen = {}
        for option in (argument for argument in arguments if isinstance(argument, Option)):
            for alias in option.aliases:
                if (first := seen.setdefault(alias, option)) is option:
                    continue
                if first in own or option in own:
                    trigger(ShadowedAliasWarning(
                        "alias %r of field %r is shadowed by field %r in configuration %r" % (
                            alias, option.field, first.field, name
                        ),
                        title="shadowed alias",
                        code=FaultCode.SHADOWED_ALIAS,
                        hint="remove %r from one of the two declarations" % alias,
                        alias=alias,
                        field=option.field,
                        shadower=first.field,
                        docs=getdoc(FaultCode.SHADOWED_ALIAS),
                    ), stacklevel=4)

        self.__arguments__ = arguments
        return self


class Configuration(metaclass=ConfigurationType):
    """
    Base class for objects whose fields are bound from a token list.

    Declare fields as class attributes (Option, Usage, Parameters); every
    instance starts with a fresh copy of each default. Keyword arguments
    override defaults, unknown keywords are rejected.
    """

    def __init__(self, **values):
        arguments = type(self).__arguments__
        for argument in arguments:
            store(self, argument, argument.initial())

        fields = {argument.field: argument for argument in arguments}
        for field, value in values.items():
            try:
                store(self, fields[field], value)
            except KeyError:
                raise TypeError(f"{type(self).__name__}() got an unexpected keyword argument {field!r}") from None

    def __repr__(self):
        return f"{type(self).__name__}({", ".join("%s=%r" % pair for pair in self.__rich_repr__())})"

    def __rich_repr__(self):
        for argument in type(self).__arguments__:
            yield argument.field, fetch(self, argument)


def discover(target, /):
    """
    Return the Declarations of a configuration instance.

    - options: every Option in resolution order, Usage included.
    - usage: the Usage declaration or None.
    - parameters: the Parameters declaration or None.
    """
    if not isinstance(target, Configuration):
        raise TypeError("discover() argument must be a configuration instance")

    arguments = type(target).__arguments__
    options = tuple(argument for argument in arguments if isinstance(argument, Option))
    return Declarations(
        options,
        next((option for option in options if isinstance(option, Usage)), None),
        next((argument for argument in arguments if isinstance(argument, Parameters)), None),
    )


def fetch(target, argument, /):
    """
    Read the field bound to 'argument' on 'target'.
    """
    return argument.__get__(target, type(target))


def store(target, argument, value, /):
    """
    Write 'value' into the field bound to 'argument' on 'target'.
    """
    argument.__set__(target, value)


__all__ = (
    "Declarations",
    "Configuration",
    "discover",
    "fetch",
    "store",
)
