"""
Argbinder faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  raised while binding a token list onto a configuration object.
- BindingException / BindingWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Propagation
- A parse session raises the first fault it meets; nothing is retried and
  fields bound before the failing token stay bound.
- Only the process-facing runner (sessions.run) turns a fault into a rendered
  message and a non-zero exit, by triggering it in shell mode.

Integration
- In non-shell mode, exceptions are raised and warnings go through warnings.warn.
- In shell mode, they are rendered via rich on stderr (exceptions then exit 1).
"""
import copy
import os.path
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - declarations (2110x)
      • NO_OPTIONS_DECLARED
    - options (2111x)
      • UNKNOWN_OPTION
    - positionals (2112x)
      • UNEXPECTED_PARAMETER
    - values (2113x/2114x)
      • INVALID_BOOLEAN_VALUE, INVALID_INTEGER_VALUE, MISSING_VALUE_PARAMETER
    - validation (2115x)
      • MISSING_REQUIRED_OPTION
    - warnings (22xxx)
      • SHADOWED_ALIAS
    """
    # --- declaration errors (21xxx) ---
    NO_OPTIONS_DECLARED         = 21101

    # --- option errors (21xxx) ---
    UNKNOWN_OPTION              = 21111

    # --- positional errors (21xxx) ---
    UNEXPECTED_PARAMETER        = 21121

    # --- value errors (21xxx) ---
    INVALID_BOOLEAN_VALUE       = 21131
    INVALID_INTEGER_VALUE       = 21132
    MISSING_VALUE_PARAMETER     = 21141

    # --- validation errors (21xxx) ---
    MISSING_REQUIRED_OPTION     = 21151

    # --- warnings (22xxx) ---
    SHADOWED_ALIAS              = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(options):
    main = __import__("__main__")
    try:
        return getattr(main, "__prog__")
    except AttributeError:
        return options.get("prog") or os.path.basename(sys.argv[0]) or "argbinder"


def _render(fault, palette, kind):
    """
    shared rich renderer for exceptions and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the message, then " → hint" when a hint is available.
    - fancy: the same content inside a Panel titled with the header.
    """
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), style)

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(_prog(options), styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class BindingException(Exception):
    """
    base error for every fault met while binding tokens onto a configuration.

    carries
    - message: one lowercased, position-first sentence.
    - options: read-only context (title, code, hint, token, index, alias, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NoOptionsDeclaredError(BindingException): ...
class UnknownOptionError(BindingException): ...
class UnexpectedParameterError(BindingException): ...
class InvalidBooleanValueError(BindingException): ...
class InvalidIntegerValueError(BindingException): ...
class MissingValueParameterError(BindingException): ...
class MissingRequiredOptionError(BindingException): ...


class BindingWarning(ABC, Warning):
    """
    base warning for declarations that are legal but probably unintended.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedAliasWarning(BindingWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are emitted through the warnings module.

    typical options
    - shell, fancy, colorful, console, prog, stacklevel, and any context the
      reporter may want to show (title, code, hint, token, index, alias).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "BindingException",
    "NoOptionsDeclaredError",
    "UnknownOptionError",
    "UnexpectedParameterError",
    "InvalidBooleanValueError",
    "InvalidIntegerValueError",
    "MissingValueParameterError",
    "MissingRequiredOptionError",
    "BindingWarning",
    "ShadowedAliasWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
