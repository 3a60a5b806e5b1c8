"""
argbinder.tokens
~~~~~~~~~~~~~~~~

Token classification, option-token grammar and the single-pass cursor.

Grammar of an option token
- prefix: "--" or "-" (not distinguished), or "/" when slash options are
  allowed ("//" never starts an option).
- name: the longest run of word characters or '?' right after the prefix
  (possibly empty).
- separator: an optional ':' or '='.
- value: everything after the separator (the inline value fragment, possibly
  empty).

    -name=pete   → ("name", "pete")
    --debug      → ("debug", "")
    /out:a.txt   → ("out", "a.txt")
    -q-          → ("q", "-")

Classification
- a bare "-" is never an option: it is the explicit "off" value of a boolean.
- otherwise a token is an option when it starts with "-", or with a single "/"
  when slash options are allowed.

A token that merely starts with a prefix ("-", "--" or "/") also ends the
whitespace-separated form of a string list, even when it is not an option
(a bare "-", or "//x" with slash options on).
"""
from .utils import Unset, mirror


def _wordlike(char, /):
    return char == "?" or char == "_" or char.isalnum()


class Grammar:
    """
    Option-token classifier and splitter for one prefix policy.

    Parameters
    - slashes: bool
      When True (the default), "/name" is an option as well as "-name".
    """

    slashes = mirror("slashes")

    def __init__(self, slashes=True):
        self._slashes = bool(slashes)

    def __repr__(self):
        return f"grammar(slashes={self._slashes!r})"

    def is_option(self, token, /):
        """
        Return True when the token is option-shaped.
        """
        if token == "-":
            return False
        if token.startswith("-"):
            return True
        return self._slashes and token.startswith("/") and not token.startswith("//")

    def prefixed(self, token, /):
        """
        Return True when the token starts with an option prefix.

        This is the stop condition of whitespace-separated string lists; unlike
        is_option(), it also holds for a bare "-" and, with slashes on, for "//".
        """
        return token.startswith("-") or (self._slashes and token.startswith("/"))

    def split(self, token, /):
        """
        Split an option token into its (name, value) parts.

        The prefix is stripped, the name is the longest word-or-'?' run, one ':'
        or '=' separator is skipped, and the remainder is the inline value.
        Tokens without a recognized prefix have no name and no value.
        """
        if token.startswith("--"):
            index = 2
        elif token.startswith("-") or (self._slashes and token.startswith("/")):
            index = 1
        else:
            return "", ""

        start = index
        while index < len(token) and _wordlike(token[index]):
            index += 1
        name = token[start:index]

        if index < len(token) and token[index] in ":=":
            index += 1

        return name, token[index:]


class Stream:
    """
    Read-once cursor over a token list.

    The session advances it one token at a time; value parsers peek at and
    take the tokens that follow the current one.
    """

    tokens = mirror("tokens")

    def __init__(self, tokens, /):
        self._tokens = tuple(tokens)
        self._index = -1

    def __repr__(self):
        return f"stream(index={self._index!r}, tokens={self._tokens!r})"

    def __len__(self):
        return len(self._tokens)

    @property
    def index(self):
        """
        0-based index of the current token (-1 before the first advance).
        """
        return self._index

    @property
    def position(self):
        """
        1-based position of the current token, as shown in fault messages.
        """
        return self._index + 1

    @property
    def current(self):
        if not 0 <= self._index < len(self._tokens):
            raise IndexError("stream has no current token")
        return self._tokens[self._index]

    def advance(self):
        """
        Move to the next token; return False once the tokens are exhausted.
        """
        if self._index < len(self._tokens):
            self._index += 1
        return self._index < len(self._tokens)

    def peek(self):
        """
        Return the token after the current one without consuming it, or Unset.
        """
        try:
            return self._tokens[self._index + 1]
        except IndexError:
            return Unset

    def take(self):
        """
        Consume and return the token after the current one.
        """
        if self._index + 1 >= len(self._tokens):
            raise IndexError("stream has no more tokens")
        self._index += 1
        return self._tokens[self._index]


__all__ = (
    "Grammar",
    "Stream",
)
