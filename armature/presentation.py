"""
Armature presentation types: named token classifications and their registry.

Overview
- Validators
  • A validator is a pure function Token -> Ok(True) | Err(ValidationError). It looks at
    the single token it is given and nothing else.
  • simple_type_validator(name, predicate) lifts a boolean predicate into a validator
    with the uniform message "expected <name>, got <token>".
  • union(*branches) succeeds when any branch succeeds; on total failure it reports
    every attempted type name ("expected one of user, room, got spam").
  • Every validator advertises the names it accepts in its __expected__ attribute,
    which is how unions collect names from nested unions.

- PresentationType
  • (name, validator) pair; the name is the key in the registry and the label in
    usage text and fault messages.

- PresentationTypeRegistry
  • A lock-guarded mapping from unique names to presentation types.
  • register() fails with DuplicateTypeNameError and leaves the registry unchanged;
    find() fails with UnknownTypeNameError. Both return outcomes, never raise.
  • Tests and embedders can build isolated registries; the module keeps one
    default registry behind register_presentation_type/find_presentation_type.

Lifecycle of the default registry
- init() installs the built-in types (idempotent) and runs when this module loads.
- Hosts register their own types during start-up, before the first parse. After that
  the registry is only read. shutdown() clears it (used by embedders and tests).

Built-in types
- "Keyword", "string", "number", "reference",
  "user" (@…), "room" (#… or !…), "room-alias" (#…), "room-id" (!…).
"""
import logging
import threading
from typing import NamedTuple

from .faults import ValidationError, DuplicateTypeNameError, UnknownTypeNameError
from .results import Ok, Err
from .tokens import Token, Value, Keyword, Number, Reference
from .utils import rename

logger = logging.getLogger(__name__)


def simple_type_validator(name, predicate, /):
    """
    Wrap a boolean predicate into a validator for the presentation type `name`.

    The returned validator answers Ok(True) when predicate(token) is truthy and
    Err(ValidationError) with the message "expected <name>, got <token>" otherwise.
    """
    if not isinstance(name, str):
        raise TypeError("simple_type_validator() name must be a string")
    elif not (name := name.strip()):
        raise ValueError("simple_type_validator() name cannot be empty")
    if not callable(predicate):
        raise TypeError("simple_type_validator() predicate must be callable")

    @rename(f"validate_{name.replace('-', '_')}")
    def validator(token, /):
        if predicate(token):
            return Ok(True)
        return Err(ValidationError(
            "expected %s, got %s" % (name, token),
            token=token,
            expected=(name,),
        ))

    validator.__expected__ = (name,)
    return validator


def expected_names(validator, /):
    """
    The presentation type names a validator (or PresentationType) accepts.
    """
    if isinstance(validator, PresentationType):
        return validator.validator.__expected__ if hasattr(validator.validator, "__expected__") else (validator.name,)
    return tuple(getattr(validator, "__expected__", (getattr(validator, "__name__", "argument"),)))


def _as_validator(branch):
    if isinstance(branch, PresentationType):
        return branch.validator
    if callable(branch):
        return branch
    raise TypeError("union() arguments must be validators or presentation types")


def union(*branches):
    """
    Build a validator that accepts a token when at least one branch accepts it.

    Branches are tried in order and the first success wins. When every branch
    rejects the token, the failure lists all attempted type names, de-duplicated and
    in branch order, so the caller can render "expected one of …".
    """
    if not branches:
        raise TypeError("union() requires at least one branch")
    validators = tuple(map(_as_validator, branches))

    names = []
    for branch in branches:
        for name in expected_names(branch):
            if name not in names:
                names.append(name)
    names = tuple(names)

    @rename("validate_union")
    def validator(token, /):
        attempted = []
        for branch in validators:
            outcome = branch(token)
            if outcome.is_ok():
                return outcome
            for name in getattr(outcome.err, "expected", ()) or expected_names(branch):
                if name not in attempted:
                    attempted.append(name)
        return Err(ValidationError(
            "expected one of %s, got %s" % (", ".join(attempted), token),
            token=token,
            expected=tuple(attempted),
        ))

    validator.__expected__ = names
    return validator


class PresentationType(NamedTuple):
    name: str
    validator: object

    def validate(self, token, /):
        return self.validator(token)

    def __repr__(self):
        return f"PresentationType({self.name!r})"


def _presentation(name, validator):
    if not isinstance(name, str):
        raise TypeError("presentation type name must be a string")
    elif not (name := name.strip()):
        raise ValueError("presentation type name cannot be empty")
    if isinstance(validator, PresentationType):
        if validator.name == name:
            return validator
        validator = validator.validator
    if not callable(validator):
        raise TypeError("presentation type validator must be callable")
    return PresentationType(name, validator)


class PresentationTypeRegistry:
    """
    Process-wide (or isolated) mapping from unique names to presentation types.

    Writes are serialized with a lock so a lookup never observes a half-inserted
    entry; reads go straight to the dictionary.
    """
    __slots__ = ("_types", "_lock")

    def __init__(self, presentations=(), /):
        self._types = {}
        self._lock = threading.Lock()
        for presentation in presentations:
            self.register(presentation.name, presentation).unwrap()

    def register(self, name, validator, /):
        presentation = _presentation(name, validator)
        with self._lock:
            if presentation.name in self._types:
                logger.debug("rejected duplicate presentation type %r", presentation.name)
                return Err(DuplicateTypeNameError(
                    "presentation type %r has already been registered" % presentation.name,
                    name=presentation.name,
                    hint="pick a unique name or reuse the registered type",
                ))
            self._types[presentation.name] = presentation
        logger.debug("registered presentation type %r", presentation.name)
        return Ok(presentation)

    def find(self, name, /):
        try:
            return Ok(self._types[name])
        except KeyError:
            return Err(UnknownTypeNameError(
                "presentation type %r was not registered" % (name,),
                name=name,
                hint="register the type during start-up, before the first parse",
            ))
        except TypeError:
            raise TypeError("presentation type name must be a string") from None

    def names(self):
        return tuple(self._types)

    def clear(self):
        with self._lock:
            self._types.clear()

    def __contains__(self, name, /):
        return name in self._types

    def __len__(self):
        return len(self._types)

    def __iter__(self):
        return iter(tuple(self._types.values()))

    def __repr__(self):
        return f"{type(self).__name__}({list(self._types)!r})"


def _is_keyword(token):
    match token:
        case Keyword():
            return True
        case Value() | Number() | Reference():
            return False
        case _:
            raise TypeError(f"expected a token, got {type(token).__name__!r}")


def _is_string(token):
    match token:
        case Value():
            return True
        case Keyword() | Number() | Reference():
            return False
        case _:
            raise TypeError(f"expected a token, got {type(token).__name__!r}")


def _is_number(token):
    match token:
        case Number():
            return True
        case Value() | Keyword() | Reference():
            return False
        case _:
            raise TypeError(f"expected a token, got {type(token).__name__!r}")


def _sigils(*sigils):
    def predicate(token):
        match token:
            case Reference(sigil=sigil):
                return sigil in sigils
            case Value() | Keyword() | Number():
                return False
            case _:
                raise TypeError(f"expected a token, got {type(token).__name__!r}")
    return predicate


KeywordPresentationType = PresentationType("Keyword", simple_type_validator("Keyword", _is_keyword))
StringPresentationType = PresentationType("string", simple_type_validator("string", _is_string))
NumberPresentationType = PresentationType("number", simple_type_validator("number", _is_number))
ReferencePresentationType = PresentationType("reference", simple_type_validator("reference", _sigils(*Reference.SIGILS)))
UserPresentationType = PresentationType("user", simple_type_validator("user", _sigils("@")))
RoomPresentationType = PresentationType("room", simple_type_validator("room", _sigils("#", "!")))
RoomAliasPresentationType = PresentationType("room-alias", simple_type_validator("room-alias", _sigils("#")))
RoomIDPresentationType = PresentationType("room-id", simple_type_validator("room-id", _sigils("!")))

BUILTINS = (
    KeywordPresentationType,
    StringPresentationType,
    NumberPresentationType,
    ReferencePresentationType,
    UserPresentationType,
    RoomPresentationType,
    RoomAliasPresentationType,
    RoomIDPresentationType,
)

_registry = PresentationTypeRegistry()


def default_registry():
    return _registry


def register_presentation_type(name, validator, /):
    return _registry.register(name, validator)


def find_presentation_type(name, /):
    return _registry.find(name)


def make_presentation_type(name, validator, /):
    """
    Build, register and return a presentation type in the default registry.

    Meant for start-up code: a duplicate name raises DuplicateTypeNameError.
    """
    return register_presentation_type(name, validator).unwrap()


def init():
    """
    Install the built-in presentation types into the default registry.

    Idempotent: built-ins that are already registered are left alone. A different
    type squatting on a built-in name is a start-up error and raises.
    """
    for presentation in BUILTINS:
        if _registry.find(presentation.name).ok == presentation:
            continue
        _registry.register(presentation.name, presentation).unwrap()
    logger.debug("presentation registry initialized with %d types", len(_registry))
    return _registry


def shutdown():
    """
    Drop every registration from the default registry.
    """
    _registry.clear()
    logger.debug("presentation registry shut down")


init()


__all__ = (
    "PresentationType",
    "PresentationTypeRegistry",
    "simple_type_validator",
    "union",
    "expected_names",
    "default_registry",
    "register_presentation_type",
    "find_presentation_type",
    "make_presentation_type",
    "init",
    "shutdown",
    "KeywordPresentationType",
    "StringPresentationType",
    "NumberPresentationType",
    "ReferencePresentationType",
    "UserPresentationType",
    "RoomPresentationType",
    "RoomAliasPresentationType",
    "RoomIDPresentationType",
    "BUILTINS",
)
