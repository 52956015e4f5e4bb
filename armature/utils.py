"""
Armature utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, kept apart from None.
  • Falsey, printable as "Unset", survives copy and pickle as the same object.

- coalesce(value, default=None)
  • Resolve Unset to a default; every other value, falsey or not, passes through.

- @rename("name")
  • Give generated validators and metaclass hooks a stable __name__/__qualname__.

- ordinal(number)
  • Human-friendly ordinal for a 1-based position (“first”, “second”, “11th”), used in
    position-first fault messages.

Stability and contract
- Names not in __all__ are internal and may change without notice.
"""
import functools
from typing import final


@final
class UnsetType:
    """
    Sentinel type for arguments that were left out.

    Descriptions may legitimately be None and keyword defaults may be None, so
    "not provided" needs its own value.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return object.__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self


def coalesce(value, default=None, /):
    """
    Return `default` when `value` is Unset, `value` otherwise.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    """
    if value is Unset:
        return default
    return value


def rename(name, /):
    """
    Decorator: set __name__ and __qualname__ of the decorated callable to `name`.

    Used on closures built at runtime (validators, metaclass hooks) so their reprs
    and tracebacks read as the thing they stand for.
    """
    if not isinstance(name, str) or not name:
        raise TypeError("@rename() argument must be a non-empty string")

    def apply(function):
        if not callable(function):
            raise TypeError("@rename() must be applied to a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return apply


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    if number < 1:
        raise ValueError("ordinal() argument must be a positive integer")

    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Distinct from None: equality and identity checks must not treat it as None.
"""


__all__ = (
    "coalesce",
    "rename",
    "ordinal",
    "UnsetType",
    "Unset",
)
