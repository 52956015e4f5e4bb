"""
Armature outcome values.

Every operation of the engine reports through a two-variant outcome instead of
raising: Ok(value) on success, Err(fault) on failure. Outcomes are frozen and
compare by payload, so two parses of the same input produce equal outcomes.

    >>> outcome = registry.find("user")
    >>> if outcome.is_err():
    ...     report(outcome.err)
    >>> presentation = outcome.unwrap()  # raises the carried fault on Err

unwrap() is meant for start-up code, where a registry misconfiguration should
abort loudly.
"""
from typing import final

from .faults import ArmatureFault


class Result:
    __slots__ = ("_payload",)

    def __init__(self, payload, /):
        object.__setattr__(self, "_payload", payload)

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError("type 'Result' is not an acceptable base type")
        super().__init_subclass__(**options)

    def __setattr__(self, name, value, /):
        raise AttributeError("results are immutable")

    def __eq__(self, other, /):
        if type(other) is not type(self):
            return NotImplemented
        return self._payload == other._payload

    def __hash__(self):
        return hash((type(self).__name__, self._payload))

    def __repr__(self):
        return f"{type(self).__name__}({self._payload!r})"

    def __rich_repr__(self):
        yield self._payload


@final
class Ok(Result):
    __slots__ = ()

    @property
    def ok(self):
        return self._payload

    @property
    def err(self):
        return None

    def is_ok(self):
        return True

    def is_err(self):
        return False

    def unwrap(self):
        return self._payload


@final
class Err(Result):
    __slots__ = ()

    def __init__(self, fault, /):
        if not isinstance(fault, ArmatureFault):
            raise TypeError("Err() argument must be an armature fault")
        super().__init__(fault)

    @property
    def ok(self):
        return None

    @property
    def err(self):
        return self._payload

    def is_ok(self):
        return False

    def is_err(self):
        return True

    def unwrap(self):
        raise self._payload


__all__ = (
    "Result",
    "Ok",
    "Err",
)
