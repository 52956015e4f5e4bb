r"""
Armature parameter descriptions and parsed-argument bundles.

Overview
- Descriptions (static, declared once per command at start-up)
  • ParameterDescription: a required positional parameter (name + acceptor).
  • KeywordParameterDescription: a keyword parameter introduced by a designator
    (--name); either a flag (presence-only) or value-bearing (exactly one value token).
  • KeywordsDescription: the keyword vocabulary of a command, plus the
    allow_other_keys switch that tolerates undeclared designators.

- Bundles (created per parse call)
  • RestBundle: leftover tokens plus the keyword values that were found.
  • ParsedArguments: the tokens consumed by positional parameters, plus the
    optional RestBundle produced by the rest strategy.

Acceptors
- An acceptor may be given as a PresentationType, as a bare validator callable,
  or as the name of a registered presentation type (resolved once, at declaration
  time, against the default registry or the `registry=` argument; an unknown name
  raises UnknownTypeNameError because it is a start-up error).

Introspection & representation
- DescriptionType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields listed in __introspectable__ as read-only properties.

Quick example:
    >>> user = ParameterDescription("user", "user")
    >>> keywords = KeywordsDescription(
    ...     KeywordParameterDescription("dry-run", flag=True),
    ...     KeywordParameterDescription("room", "room"),
    ... )
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from rich.text import Text

from .presentation import PresentationType, default_registry
from .results import Ok
from .tokens import Token
from .utils import *


def _view(name):
    """
    Internal: read-only property over the private backing field "_{name}".
    Backing values are frozen on construction, so the property hands them out as-is.
    """
    @rename(name)
    def getter(self):
        return getattr(self, "_" + name)

    return property(getter)


class DescriptionType(type):
    """
    Metaclass for parameter descriptions.

    Responsibilities
    - Expose selected fields as read-only properties for all names listed in
      __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and usage output.
    - Derive __typename__ from the class name (camel-case split with hyphens) for
      messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: _view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif any(char.isspace() for char in name):
        raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespace")
    return name


def _sanitize_descr(cls, descr, /):
    if not isinstance(descr, str | Text | UnsetType):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    return coalesce(descr)


def _resolve_acceptor(cls, acceptor, registry, /):
    """
    Internal: turn the accepted acceptor spellings into a PresentationType.

    - PresentationType → itself
    - str → looked up in `registry` (the default registry when Unset); unknown names raise
    - callable → wrapped in an anonymous PresentationType named after its __expected__
    """
    match acceptor:
        case PresentationType():
            return acceptor
        case str():
            return coalesce(registry, default_registry()).find(acceptor).unwrap()
        case _ if callable(acceptor):
            name = ", ".join(getattr(acceptor, "__expected__", ())) or getattr(acceptor, "__name__", "argument")
            return PresentationType(name, acceptor)
        case _:
            raise TypeError(f"{cls.__typename__} 'acceptor' must be a presentation type, a validator or a type name")


class ParameterDescription(metaclass=DescriptionType):
    """
    Required positional parameter.

    Properties
    - name: str, unique within its command; used in messages and usage.
    - acceptor: PresentationType validating the single token at this position.
    - descr: str | Text | None, short human description.
    """

    __introspectable__ = (
        "name",
        "acceptor",
        "descr",
    )

    def __init__(self, name, acceptor, /, descr=Unset, *, registry=Unset):
        self._name = _sanitize_name(type(self), name)
        self._acceptor = _resolve_acceptor(type(self), acceptor, registry)
        self._descr = _sanitize_descr(type(self), descr)

    def validate(self, token, /):
        return self._acceptor.validate(token)

    def __usage__(self):
        return f"<{self._name}>"


class KeywordParameterDescription(metaclass=DescriptionType):
    """
    Keyword parameter, introduced by the designator --name.

    - flag=True: presence-only; recorded as True and never takes a value token.
      Flags cannot declare an acceptor.
    - flag=False: exactly one following non-keyword token is its value. When an
      acceptor is given, the value must satisfy it; without one any non-keyword
      token is taken.
    """

    __introspectable__ = (
        "name",
        "acceptor",
        "descr",
        "flag",
    )

    def __init__(self, name, acceptor=Unset, /, descr=Unset, *, flag=False, registry=Unset):
        self._name = _sanitize_name(type(self), name)
        self._flag = bool(flag)
        if self._flag and acceptor is not Unset:
            raise TypeError(f"flag {type(self).__typename__} cannot have an 'acceptor'")
        self._acceptor = None if acceptor is Unset else _resolve_acceptor(type(self), acceptor, registry)
        self._descr = _sanitize_descr(type(self), descr)

    @property
    def is_flag(self):
        return self._flag

    def validate(self, token, /):
        if self._acceptor is None:
            return Ok(True)
        return self._acceptor.validate(token)

    def __usage__(self):
        if self._flag:
            return f"[--{self._name}]"
        return f"[--{self._name} <{self._acceptor.name if self._acceptor else 'value'}>]"


class KeywordsDescription(metaclass=DescriptionType):
    """
    The keyword vocabulary of a command.

    Construction accepts KeywordParameterDescription instances (positionally or as a
    single iterable) or a mapping of name → description whose keys must match the
    descriptions' names. Names must be unique.
    """

    __introspectable__ = (
        "keywords",
        "allow_other_keys",
    )

    def __init__(self, *keywords, allow_other_keys=False):
        if len(keywords) == 1 and isinstance(keywords[0], Mapping):
            mapping, = keywords
            for key, description in mapping.items():
                if not isinstance(description, KeywordParameterDescription):
                    raise TypeError(f"{type(self).__typename__} values must be keyword parameter descriptions")
                if key != description.name:
                    raise ValueError(f"{type(self).__typename__} key {key!r} does not match keyword {description.name!r}")
            keywords = tuple(mapping.values())
        elif len(keywords) == 1 and isinstance(keywords[0], Iterable):
            keywords = tuple(keywords[0])

        sanitized = {}
        for description in keywords:
            if not isinstance(description, KeywordParameterDescription):
                raise TypeError(f"{type(self).__typename__} entries must be keyword parameter descriptions")
            if description.name in sanitized:
                raise ValueError(f"{type(self).__typename__} cannot declare keyword {description.name!r} twice")
            sanitized[description.name] = description

        self._keywords = MappingProxyType(sanitized)
        self._allow_other_keys = bool(allow_other_keys)

    def get(self, name, default=None, /):
        return self._keywords.get(name, default)

    def __contains__(self, name, /):
        return name in self._keywords

    def __iter__(self):
        return iter(self._keywords.values())

    def __len__(self):
        return len(self._keywords)


class RestBundle:
    """
    Leftover tokens and keyword values produced by a rest strategy.

    - rest: tuple of tokens, in encountered order.
    - keyword_values: read-only mapping keyword name → Token, or True for flags.
    """
    __slots__ = ("_rest", "_keyword_values")

    def __init__(self, rest=(), keyword_values=MappingProxyType({}), /):
        self._rest = tuple(rest)
        if not all(isinstance(token, Token) for token in self._rest):
            raise TypeError("rest bundle entries must be tokens")
        self._keyword_values = MappingProxyType(dict(keyword_values))

    rest = property(operator.attrgetter("_rest"))
    keyword_values = property(operator.attrgetter("_keyword_values"))

    def keyword(self, name, default=None, /):
        """
        The value recorded for keyword `name`: a Token, True for a flag, or `default`
        when the keyword did not appear.
        """
        return self._keyword_values.get(name, default)

    def flag(self, name, /):
        return self._keyword_values.get(name) is True

    def __eq__(self, other, /):
        if not isinstance(other, RestBundle):
            return NotImplemented
        return self._rest == other._rest and dict(self._keyword_values) == dict(other._keyword_values)

    def __hash__(self):
        return hash((self._rest, frozenset(self._keyword_values.items())))

    def __repr__(self):
        return f"{type(self).__name__}(rest={list(self._rest)!r}, keyword_values={dict(self._keyword_values)!r})"

    def __rich_repr__(self):
        yield "rest", list(self._rest)
        yield "keyword_values", dict(self._keyword_values)


class ParsedArguments:
    """
    Outcome payload of a successful parse.

    - immediate_arguments: tuple of tokens, one per satisfied positional parameter.
    - rest: RestBundle, or None when no rest strategy was configured.
    """
    __slots__ = ("_immediate_arguments", "_rest")

    def __init__(self, immediate_arguments, rest=None, /):
        self._immediate_arguments = tuple(immediate_arguments)
        if rest is not None and not isinstance(rest, RestBundle):
            raise TypeError("parsed arguments rest must be a rest bundle")
        self._rest = rest

    immediate_arguments = property(operator.attrgetter("_immediate_arguments"))
    rest = property(operator.attrgetter("_rest"))

    def keyword(self, name, default=None, /):
        return default if self._rest is None else self._rest.keyword(name, default)

    def __eq__(self, other, /):
        if not isinstance(other, ParsedArguments):
            return NotImplemented
        return self._immediate_arguments == other._immediate_arguments and self._rest == other._rest

    def __hash__(self):
        return hash((self._immediate_arguments, self._rest))

    def __repr__(self):
        return f"{type(self).__name__}(immediate_arguments={list(self._immediate_arguments)!r}, rest={self._rest!r})"

    def __rich_repr__(self):
        yield "immediate_arguments", list(self._immediate_arguments)
        yield "rest", self._rest


__all__ = (
    "ParameterDescription",
    "KeywordParameterDescription",
    "KeywordsDescription",
    "RestBundle",
    "ParsedArguments",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del DescriptionType
