"""
Armature faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the engine
  can report. Codes are grouped by domain to keep copy consistent and make logs
  and searches predictable.
- ArmatureFault: base type that carries message + options and knows how to render
  itself in a friendly, lowercased and actionable way.
- report(): presentation entry point; renders a fault through a rich console.
- getdoc(): optional description lookup for a code from the host application.

Values, not control flow
- Parse-time faults are returned inside Err(...) and never raised by the parsers.
  They still subclass Exception so a host can raise them (Err.unwrap() does) and so
  they carry the usual exception affordances.
- Registry faults (duplicate/unknown type names) are programming errors; the registry
  returns them as values too, and start-up code unwraps them to abort loudly.

UX goals
- Position-first messages: parse faults name the ordinal position in the stream
  (“at second position”) and the parameter or keyword involved.
- Every fault keeps its context (parameter, snapshot, token, names) in `options`,
  so a presentation layer never has to re-derive it.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

stderr = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - stream (2110x)
      • EXHAUSTED_STREAM
    - parameters (2111x)
      • MISSING_PARAMETER, VALIDATION_FAILURE
    - keywords (2112x)
      • UNKNOWN_KEYWORD, MISSING_KEYWORD_VALUE
    - registry (2113x)
      • DUPLICATE_TYPE_NAME, UNKNOWN_TYPE_NAME

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- stream errors ---
    EXHAUSTED_STREAM            = 21101

    # --- parameter errors ---
    MISSING_PARAMETER           = 21111
    VALIDATION_FAILURE          = 21112

    # --- keyword errors ---
    UNKNOWN_KEYWORD             = 21121
    MISSING_KEYWORD_VALUE       = 21122

    # --- registry errors ---
    DUPLICATE_TYPE_NAME         = 21131
    UNKNOWN_TYPE_NAME           = 21132

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArmatureFault(Exception):
    """
    base of every fault the engine reports.

    contract
    - message: short, lowercased, position-first sentence.
    - options: read-only mapping of context (semantic fields such as parameter,
      snapshot or token) and rendering switches (colorful, fancy, hint).
    - subclasses pin their FaultCode and title through __faultcode__/__title__.
    """
    __faultcode__ = Unset
    __title__ = "fault"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return type(self).__faultcode__

    @property
    def hint(self):
        return self.options.get("hint")

    def __eq__(self, other, /):
        if type(other) is not type(self):
            return NotImplemented
        return self.message == other.message and dict(self.options) == dict(other.options)

    def __hash__(self):
        return hash((type(self), self.message))

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r})"

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "armature"), "prog-name"),
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(type(self).__title__.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ExhaustedStreamError(ArmatureFault):
    """
    a token was required but the stream had none left.

    options: position
    """
    __faultcode__ = FaultCode.EXHAUSTED_STREAM
    __title__ = "exhausted stream"

    @property
    def position(self):
        return self.options.get("position")


class ValidationError(ArmatureFault):
    """
    a validator rejected a token.

    options: token, expected (tuple of every presentation type name that was tried)
    """
    __faultcode__ = FaultCode.VALIDATION_FAILURE
    __title__ = "invalid argument"

    @property
    def token(self):
        return self.options.get("token")

    @property
    def expected(self):
        return tuple(self.options.get("expected", ()))


class ArgumentParseError(ArmatureFault):
    """
    a failure bound to the parameter description it concerns and to a snapshot of
    the stream at the moment of failure.

    options: parameter, snapshot, cause (the inner ValidationError, when any)
    """
    __faultcode__ = FaultCode.VALIDATION_FAILURE
    __title__ = "invalid argument"

    @property
    def parameter(self):
        return self.options.get("parameter")

    @property
    def snapshot(self):
        return self.options.get("snapshot")

    @property
    def cause(self):
        return self.options.get("cause")

    @property
    def position(self):
        return None if self.snapshot is None else self.snapshot.position


class MissingParameterError(ArgumentParseError):
    __faultcode__ = FaultCode.MISSING_PARAMETER
    __title__ = "missing argument"


class UnknownKeywordError(ArgumentParseError):
    """
    options: keyword (the designator that was not declared); parameter is None.
    """
    __faultcode__ = FaultCode.UNKNOWN_KEYWORD
    __title__ = "unknown keyword"

    @property
    def keyword(self):
        return self.options.get("keyword")


class MissingKeywordValueError(ArgumentParseError):
    __faultcode__ = FaultCode.MISSING_KEYWORD_VALUE
    __title__ = "missing keyword value"


class DuplicateTypeNameError(ArmatureFault):
    __faultcode__ = FaultCode.DUPLICATE_TYPE_NAME
    __title__ = "duplicate presentation type"

    @property
    def name(self):
        return self.options.get("name")


class UnknownTypeNameError(ArmatureFault):
    __faultcode__ = FaultCode.UNKNOWN_TYPE_NAME
    __title__ = "unknown presentation type"

    @property
    def name(self):
        return self.options.get("name")


def report(fault, /, *, console=Unset, **options):
    """
    render a fault with the given presentation options.

    options
    - console: rich Console to print to (defaults to the module's stderr console).
    - colorful: bool, style the output (default True).
    - fancy: bool, wrap the body in a panel titled with the header (default False).
    - hint, or any other override merged into the fault via copy.replace().

    returns the rendered (replaced) fault so callers can inspect what was shown.
    """
    if not isinstance(fault, ArmatureFault):
        raise TypeError("report() argument must be an armature fault")
    fault = copy.replace(fault, **options) if options else fault
    coalesce(console, stderr).print(fault)
    return fault


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ArmatureFault",
    "ExhaustedStreamError",
    "ValidationError",
    "ArgumentParseError",
    "MissingParameterError",
    "UnknownKeywordError",
    "MissingKeywordValueError",
    "DuplicateTypeNameError",
    "UnknownTypeNameError",
    "report",
    "getdoc",
)
