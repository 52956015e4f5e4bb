"""
Armature token model.

A command invocation reaches the engine as a flat, ordered sequence of tokens
that the host's tokenizer already produced. The set of token kinds is closed:

- Value(text): a plain string value (“alice”, “spam”).
- Keyword(designator): a keyword designator; “--room” arrives as Keyword("room").
- Number(value): an integer literal.
- Reference(sigil, identifier): a platform identifier such as “@alice:example.org”
  (sigil “@”), “#room:example.org” (sigil “#”) or “!opaque:example.org” (sigil “!”).

Tokens are immutable, hashable and compare by value. str(token) renders the
token the way a user would have typed it, which is what fault messages show.

lift(item) coerces plain Python objects into tokens (str → Value, int → Number).
It never splits or interprets text; tokenizing raw input is the host's job.
"""
from typing import final

from rich.text import Text


class Token:
    """
    Base of the closed token union.

    Subclasses declare their payload in __fields__ and are sealed with @final;
    validators and parsers match on the concrete classes exhaustively.
    """
    __slots__ = ()
    __fields__ = ()

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__.lower()} tokens are immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__.lower()} tokens are immutable")

    def _values(self):
        return tuple(getattr(self, name) for name in self.__fields__)

    def __eq__(self, other, /):
        if type(other) is not type(self):
            return NotImplemented
        return self._values() == other._values()

    def __hash__(self):
        return hash((type(self).__name__, *self._values()))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(map(repr, self._values())))

    def __rich__(self):
        return Text(str(self), style=self.__style__)

    def __reduce__(self):
        return type(self), self._values()

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self


@final
class Value(Token):
    __slots__ = ("text",)
    __fields__ = ("text",)
    __style__ = "green"

    def __init__(self, text, /):
        if not isinstance(text, str):
            raise TypeError("value token text must be a string")
        object.__setattr__(self, "text", text)

    def __str__(self):
        return self.text


@final
class Keyword(Token):
    __slots__ = ("designator",)
    __fields__ = ("designator",)
    __style__ = "bold cyan"

    def __init__(self, designator, /):
        if not isinstance(designator, str):
            raise TypeError("keyword designator must be a string")
        elif not designator.strip():
            raise ValueError("keyword designator cannot be empty")
        elif any(char.isspace() for char in designator):
            raise ValueError("keyword designator cannot contain whitespace")
        object.__setattr__(self, "designator", designator)

    def __str__(self):
        return "--" + self.designator


@final
class Number(Token):
    __slots__ = ("value",)
    __fields__ = ("value",)
    __style__ = "magenta"

    def __init__(self, value, /):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("number token value must be an integer")
        object.__setattr__(self, "value", value)

    def __str__(self):
        return str(self.value)


@final
class Reference(Token):
    __slots__ = ("sigil", "identifier")
    __fields__ = ("sigil", "identifier")
    __style__ = "yellow"

    # @user, #alias, !opaque-id
    SIGILS = frozenset("@#!")

    def __init__(self, sigil, identifier, /):
        if sigil not in self.SIGILS:
            raise ValueError("reference sigil must be one of %s" % ", ".join(map(repr, sorted(self.SIGILS))))
        if not isinstance(identifier, str):
            raise TypeError("reference identifier must be a string")
        elif not identifier:
            raise ValueError("reference identifier cannot be empty")
        object.__setattr__(self, "sigil", sigil)
        object.__setattr__(self, "identifier", identifier)

    def __str__(self):
        return self.sigil + self.identifier


def lift(item, /):
    """
    Coerce a plain object into a token.

    - Token instances pass through unchanged.
    - str → Value (the text is taken verbatim; "--room" stays a Value).
    - int → Number (bool is rejected).
    """
    match item:
        case Token():
            return item
        case bool():
            raise TypeError("lift() cannot convert a boolean into a token")
        case str():
            return Value(item)
        case int():
            return Number(item)
        case _:
            raise TypeError(f"lift() cannot convert {type(item).__name__!r} into a token")


__all__ = (
    "Token",
    "Value",
    "Keyword",
    "Number",
    "Reference",
    "lift",
)
