"""
Armature argument-list parsing.

What this module provides
- ArgumentListParser: matches a token stream strictly against an ordered list of
  positional ParameterDescriptions, then hands the remainder to a rest strategy.
- RestParser: rest strategy that collects every remaining token verbatim.
- KeywordParser: rest strategy that splits the remainder into keyword values/flags
  and leftover positional tokens.
- parameters(...) / parse(...): the entry points used by command dispatch.

Matching rules
- Positional matching is strict, left-to-right, fail-fast and non-backtracking:
  the k-th description only ever sees the token left by the (k-1)-th one, and a
  failure at k never tries k+1 or any reordering.
- A rejected token is not consumed; the fault's snapshot still shows it under the cursor.
- Without a rest strategy, leftover tokens are left unconsumed and ignored here;
  exhaustiveness is the caller's decision.
- Keywords may be interleaved anywhere among rest tokens. A value-bearing keyword
  takes exactly the next token, which must not itself be a keyword.

All failures are returned as Err(...) values carrying the parameter (or keyword) and a
snapshot of the stream; nothing in this module raises for bad user input.

Quick example:
    >>> kick = parameters(
    ...     [ParameterDescription("user", "user")],
    ...     KeywordParser(KeywordsDescription(
    ...         KeywordParameterDescription("dry-run", flag=True),
    ...         KeywordParameterDescription("room", "room"),
    ...     ), ParameterDescription("reason", "string")),
    ... )
    >>> kick.parse([Reference("@", "spam:example.org"), Keyword("dry-run"), "spammer"])
"""
import logging

from .arguments import ParameterDescription, KeywordsDescription, RestBundle, ParsedArguments
from .faults import ArgumentParseError, MissingParameterError, UnknownKeywordError, MissingKeywordValueError
from .results import Ok, Err
from .streams import ArgumentStream
from .tokens import Keyword, Value, Number, Reference
from .utils import *

logger = logging.getLogger(__name__)


def _failed(fault):
    logger.debug("argument parsing failed [%s]: %s", fault.code.normalize(), fault.message)
    return Err(fault)


def _rejected(description, outcome, stream, *, keyword=False):
    """
    Internal: bind a validator failure to the description that produced it.
    The token under the cursor is the rejected one; it has not been consumed.
    """
    label = "keyword '--%s' value" if keyword else "parameter %r"
    return _failed(ArgumentParseError(
        "%s at %s position: %s" % (
            label % description.name,
            ordinal(stream.position + 1),
            outcome.err.message,
        ),
        parameter=description,
        snapshot=stream.snapshot(),
        cause=outcome.err,
    ))


class RestParser:
    """
    Rest strategy that collects every remaining token, in order, into RestBundle.rest.

    An optional ParameterDescription names the rest for usage text; its acceptor, when
    given, must accept every collected token.
    """
    __slots__ = ("_description",)

    def __init__(self, description=Unset, /):
        if description is not Unset and not isinstance(description, ParameterDescription):
            raise TypeError(f"{type(self).__name__} description must be a parameter description")
        self._description = coalesce(description)

    @property
    def description(self):
        return self._description

    def _collect(self, stream, rest):
        if self._description is not None:
            outcome = self._description.validate(stream.peek())
            if outcome.is_err():
                return _rejected(self._description, outcome, stream)
        rest.append(stream.read())
        return Ok(True)

    def parse_rest(self, stream, /):
        rest = []
        while stream.peek() is not None:
            if (outcome := self._collect(stream, rest)).is_err():
                return outcome
        return Ok(RestBundle(rest))

    def __usage__(self):
        return "[%s...]" % ("" if self._description is None else self._description.name)

    def __repr__(self):
        return f"{type(self).__name__}({self._description!r})"


class KeywordParser(RestParser):
    """
    Rest strategy that understands keyword designators.

    For each token of the remainder, left to right:
    - Keyword(name) declared as a flag: record True.
    - Keyword(name) declared value-bearing: the next token is its value. End of stream
      or another keyword in that slot is MissingKeywordValueError; a value rejected by
      the keyword's acceptor is ArgumentParseError bound to the keyword.
    - Keyword(name) not declared: UnknownKeywordError, unless allow_other_keys is set,
      in which case it takes the following non-keyword token as its value, or True.
    - anything else: appended to rest (validated against the rest description if any).

    A keyword given more than once keeps the last value.
    """
    __slots__ = ("_keywords",)

    def __init__(self, keywords, description=Unset, /):
        if not isinstance(keywords, KeywordsDescription):
            raise TypeError(f"{type(self).__name__} keywords must be a keywords description")
        super().__init__(description)
        self._keywords = keywords

    @property
    def keywords(self):
        return self._keywords

    def parse_rest(self, stream, /):
        rest = []
        values = {}
        while (token := stream.peek()) is not None:
            match token:
                case Keyword(designator=name):
                    position = stream.position
                    description = self._keywords.get(name)
                    if description is None:
                        if not self._keywords.allow_other_keys:
                            known = ", ".join("--" + keyword.name for keyword in self._keywords)
                            return _failed(UnknownKeywordError(
                                "unknown keyword %r at %s position" % (str(token), ordinal(position + 1)),
                                parameter=None,
                                keyword=name,
                                snapshot=stream.snapshot(),
                                hint="known keywords are %s" % known if known else "this command takes no keywords",
                            ))
                        stream.read()
                        following = stream.peek()
                        values[name] = stream.read() if following is not None and not isinstance(following, Keyword) else True
                        continue

                    stream.read()
                    if description.is_flag:
                        values[name] = True
                        continue

                    match stream.peek():
                        case None:
                            found = "the input ends there"
                        case Keyword() as other:
                            found = "got keyword %r instead" % str(other)
                        case Value() | Number() | Reference() as value:
                            outcome = description.validate(value)
                            if outcome.is_err():
                                return _rejected(description, outcome, stream, keyword=True)
                            values[name] = stream.read()
                            continue
                        case other:
                            raise TypeError(f"expected a token, got {type(other).__name__!r}")
                    return _failed(MissingKeywordValueError(
                        "keyword %r at %s position expects a value but %s" % (str(token), ordinal(position + 1), found),
                        parameter=description,
                        snapshot=stream.snapshot(),
                        hint="pass a value after it (for example: --%s <%s>)" % (
                            name,
                            description.acceptor.name if description.acceptor else "value",
                        ),
                    ))
                case Value() | Number() | Reference():
                    if (outcome := self._collect(stream, rest)).is_err():
                        return outcome
                case _:
                    raise TypeError(f"expected a token, got {type(token).__name__!r}")
        return Ok(RestBundle(rest, values))

    def __usage__(self):
        return " ".join([*(keyword.__usage__() for keyword in self._keywords), super().__usage__()])

    def __repr__(self):
        return f"{type(self).__name__}({self._keywords!r}, {self._description!r})"


class ArgumentListParser:
    """
    Parser for one command's argument list: ordered positional descriptions plus an
    optional rest strategy. Instances are immutable and reusable across calls; every
    call to parse() works on a fresh stream.
    """
    __slots__ = ("_descriptions", "_rest_parser")

    def __init__(self, descriptions, rest_parser=None, /):
        descriptions = tuple(descriptions)
        for description in descriptions:
            if not isinstance(description, ParameterDescription):
                raise TypeError(f"{type(self).__name__} descriptions must be parameter descriptions")
        names = [description.name for description in descriptions]
        if len(set(names)) != len(names):
            raise ValueError(f"{type(self).__name__} parameter names must be unique")
        if rest_parser is not None and not isinstance(rest_parser, RestParser):
            raise TypeError(f"{type(self).__name__} rest parser must be a rest parser")
        self._descriptions = descriptions
        self._rest_parser = rest_parser

    @property
    def descriptions(self):
        return self._descriptions

    @property
    def rest_parser(self):
        return self._rest_parser

    def parse(self, tokens=(), /):
        stream = tokens if isinstance(tokens, ArgumentStream) else ArgumentStream(tokens)
        immediate = []
        for parameter in self._descriptions:
            token = stream.peek()
            if token is None:
                return _failed(MissingParameterError(
                    "expected an argument for parameter %r at %s position but none was provided" % (
                        parameter.name,
                        ordinal(stream.position + 1),
                    ),
                    parameter=parameter,
                    snapshot=stream.snapshot(),
                    hint="usage: %s" % self.usage(),
                ))
            outcome = parameter.validate(token)
            if outcome.is_err():
                return _rejected(parameter, outcome, stream)
            immediate.append(stream.read())

        if self._rest_parser is None:
            return Ok(ParsedArguments(immediate))
        outcome = self._rest_parser.parse_rest(stream)
        if outcome.is_err():
            return outcome
        return Ok(ParsedArguments(immediate, outcome.ok))

    __call__ = parse

    def usage(self):
        """
        One-line synopsis, e.g. "<user> [--dry-run] [--room <room>] [reason...]".
        """
        parts = [description.__usage__() for description in self._descriptions]
        if self._rest_parser is not None:
            parts.append(self._rest_parser.__usage__())
        return " ".join(parts)

    def __repr__(self):
        return f"{type(self).__name__}({list(self._descriptions)!r}, {self._rest_parser!r})"


def parameters(descriptions, rest_parser=None, /):
    """
    Build the argument-list parser a command definition declares once at start-up.
    """
    return ArgumentListParser(descriptions, rest_parser)


def parse(descriptions, tokens=(), /, rest_parser=None):
    """
    Parse `tokens` against positional `descriptions` and an optional rest strategy.

    Returns Ok(ParsedArguments) or Err(ArgumentParseError | subclass).
    """
    return ArgumentListParser(descriptions, rest_parser).parse(tokens)


__all__ = (
    "RestParser",
    "KeywordParser",
    "ArgumentListParser",
    "parameters",
    "parse",
)
