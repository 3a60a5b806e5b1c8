"""
Argbinder sessions: bind a token list onto a configuration in one pass.

What this module provides
- Session: one parse of one token list against one configuration instance.
  • classifies each token (option vs positional), matches option names
    against the declared aliases, runs the value parser of the matched field's
    kind and writes the result back immediately.
  • counts how many times each option was matched (see found()/counts).
  • after the scan, commits the positional list and checks required options.
- parse(target, tokens, **switches): convenience for Session(...).parse(...).
- run(target, argv, **switches): process-facing runner; renders faults on
  stderr and exits 1, exits 0 after a help request, returns the target
  otherwise.

Switches
- separate_booleans (default False): allow "-flag value" for booleans. Off by
  default because "-v false.txt" is ambiguous with positional parameters.
- slash_options (default True): allow "/name" options; "//x" never is one.
- unknown_as_parameters (default False): unknown option-shaped tokens are
  appended to the positional list instead of failing.

Quick start
    from argbinder import Configuration, Option, Parameters, Usage, run

    class Settings(Configuration):
        name = Option("name,n", type=str, required=True)
        verbose = Option("v,verbose", type=bool)
        files = Parameters()
        usage = Usage("h,help,?", "usage: tool -n NAME [-v] FILES...")

    if __name__ == "__main__":
        settings = run(Settings)

Failure semantics
- The first fault aborts the session. Fields bound before the failing token
  keep their new values; there is no rollback.
"""
import difflib
import shlex
import sys
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Console

from .arguments import Kind, match
from .bindings import Configuration, discover, fetch, store
from .faults import *
from .tokens import Grammar, Stream
from .utils import *
from .values import parse_boolean, parse_integer, parse_string, parse_strings

HELP_ALIASES = ("h", "help", "?")


class Session:
    """
    Single-use parse of a token list onto a configuration instance.

    Lifecycle
    - constructed per parse; discovery runs once, in the initializer.
    - parse(tokens) walks the tokens left to right exactly once. A session
      cannot parse twice.
    - after parse(), found()/lookup()/counts report what was matched.

    Parameters
    - target: Configuration
      The instance whose fields are written.
    - separate_booleans, slash_options, unknown_as_parameters: bool
      Parsing switches (see the module documentation).
    - console: Unset | rich.console.Console
      Destination of the usage text (stdout by default).
    """

    target = mirror("target")
    grammar = mirror("grammar")
    separate_booleans = mirror("separate_booleans")
    unknown_as_parameters = mirror("unknown_as_parameters")

    def __init__(
            self,
            target,
            /,
            *,
            separate_booleans=False,
            slash_options=True,
            unknown_as_parameters=False,
            console=Unset
    ):
        self._target = target
        self._declarations = discover(target)
        self._grammar = Grammar(slash_options)
        self._separate_booleans = bool(separate_booleans)
        self._unknown_as_parameters = bool(unknown_as_parameters)
        self._console = coalesce(console, Console(highlight=False))
        self._found = dict.fromkeys(self._declarations.options, 0)
        self._parameters = []
        self._parsed = False

    def __repr__(self):
        return "session(target=%r, grammar=%r, separate_booleans=%r, unknown_as_parameters=%r)" % (
            self._target, self._grammar, self._separate_booleans, self._unknown_as_parameters
        )

    @property
    def slash_options(self):
        return self._grammar.slashes

    @property
    def declarations(self):
        return self._declarations

    @property
    def counts(self):
        """
        Read-only mapping of each option declaration to its match count.
        """
        return MappingProxyType(dict(self._found))

    def lookup(self, name, /):
        """
        Return the first option matching 'name' (joined alias text or a single
        alias), or None.
        """
        return match(name, self._declarations.options)

    def found(self, name, /):
        """
        Return how many times the option matching 'name' was seen (0 when no
        option matches).
        """
        if (option := self.lookup(name)) is None:
            return 0
        return self._found[option]

    def parse(self, tokens, /):
        """
        Bind 'tokens' onto the target and validate the result.

        Returns the session itself; raises the first BindingException met.
        """
        if self._parsed:
            raise RuntimeError("session has already parsed its tokens")
        self._parsed = True

        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")

        options, usage, parameters = self._declarations
        if not options:
            raise NoOptionsDeclaredError(
                "no options declared on %r" % type(self._target).__name__,
                title="no options declared",
                code=FaultCode.NO_OPTIONS_DECLARED,
                hint="declare at least one Option(...) field on the configuration class",
                docs=getdoc(FaultCode.NO_OPTIONS_DECLARED)
            )

        if usage is not None and not tokens:
            self._usage()

        stream = Stream(tokens)
        while stream.advance():
            if self._grammar.is_option(token := stream.current):
                self._option(stream, token)
            else:
                self._append(stream, token)

        if parameters is not None:
            store(self._target, parameters, list(self._parameters))

        # An empty command line, or a help request, skips required-option checks.
        if not tokens or (usage is not None and self._found[usage]):
            return self

        for option in options:
            if option.required and not self._found[option]:
                raise MissingRequiredOptionError(
                    "missing required option %r" % option.text,
                    title="missing required option",
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    hint="add -%s to the command line" % option.aliases[0],
                    alias=option.text,
                    field=option.field,
                    docs=getdoc(FaultCode.MISSING_REQUIRED_OPTION)
                )
        return self

    def _option(self, stream, token):
        name, value = self._grammar.split(token)

        if (option := match(name, self._declarations.options)) is None:
            if self._unknown_as_parameters:
                return self._append(stream, token)

            aliases = [alias for declared in self._declarations.options for alias in declared.aliases]
            suggestions = difflib.get_close_matches(name, aliases, 5)
            try:
                hint = "did you mean -%s?" % suggestions[0]
            except IndexError:
                hint = "known options are %s" % ", ".join("-" + alias for alias in aliases)
            raise UnknownOptionError(
                "unknown option %r at %s position" % (token, ordinal(stream.position)),
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                hint=hint,
                token=token,
                name=name,
                index=stream.index,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_OPTION)
            )

        self._found[option] += 1

        if option is self._declarations.usage:
            return self._usage()

        match option.kind:
            case Kind.BOOLEAN:
                result = parse_boolean(
                    stream,
                    token,
                    value,
                    current=fetch(self._target, option),
                    grammar=self._grammar,
                    separate=self._separate_booleans
                )
            case Kind.INTEGER:
                result = parse_integer(stream, token, value)
            case Kind.STRING:
                result = parse_string(stream, token, value)
            case Kind.STRINGS:
                result = parse_strings(stream, token, value, grammar=self._grammar)

        store(self._target, option, result)

    def _append(self, stream, token):
        if self._declarations.parameters is None:
            raise UnexpectedParameterError(
                "unexpected positional parameter %r at %s position" % (token, ordinal(stream.position)),
                title="unexpected positional parameter",
                code=FaultCode.UNEXPECTED_PARAMETER,
                hint="declare a Parameters() field to collect positional parameters",
                token=token,
                index=stream.index,
                docs=getdoc(FaultCode.UNEXPECTED_PARAMETER)
            )
        self._parameters.append(token)

    def _usage(self):
        self._console.out(fetch(self._target, self._declarations.usage), highlight=False)


def parse(target, tokens, /, **switches):
    """
    Parse 'tokens' onto 'target' with a fresh Session and return the session.

    Keyword arguments are forwarded to Session (separate_booleans,
    slash_options, unknown_as_parameters, console).
    """
    return Session(target, **switches).parse(tokens)


def _tokenize(argv):
    """
    Normalize a runner argument into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like splitting (shlex.split).
    - Iterable[str]: listed as-is; Session.parse checks the elements.
    """
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    return list(argv)


def run(target=Unset, argv=Unset, /, *, fancy=False, colorful=True, stderr=Unset, **switches):
    """
    Process-facing runner.

    Parameters
    - target: Unset | Configuration | type[Configuration]
      • Unset: the __configuration__ attribute of __main__.
      • a Configuration subclass is instantiated with its defaults.
    - argv: Unset | str | Iterable[str]
      Tokens to parse (sys.argv[1:] when Unset).
    - fancy, colorful: bool
      Rendering of faults (panel chrome, colors).
    - stderr: Unset | rich.console.Console
      Destination of fault renderings (stderr by default).
    - **switches: forwarded to Session.

    Outcomes
    - a fault: rendered, then SystemExit(1).
    - a matched Usage option aliased 'h', 'help' or '?': SystemExit(0).
    - otherwise: the bound target is returned.
    """
    if target is Unset:
        try:
            target = getattr(__import__("__main__"), "__configuration__")
        except AttributeError:
            raise TypeError("run() needs a configuration or a __configuration__ attribute in __main__") from None
    if isinstance(target, type) and issubclass(target, Configuration):
        target = target()

    tokens = _tokenize(argv)

    try:
        session = parse(target, tokens, **switches)
    except BindingException as exception:
        trigger(exception, shell=True, fancy=fancy, colorful=colorful, **({} if stderr is Unset else {"console": stderr}))
        raise  # trigger() exits in shell mode

    usage = session.declarations.usage
    if usage is not None and session.counts[usage] and set(usage.aliases) & set(HELP_ALIASES):
        sys.exit(0)
    return target


__all__ = (
    "Session",
    "parse",
    "run",
)
