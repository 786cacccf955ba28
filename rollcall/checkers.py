"""
Rollcall type checkers.

A type checker turns one raw command-line token into a typed value, or raises
ValueError when the token is not a literal of that type. Usage strings pick a
checker by tag:

    count <from:int> <to:int> <double:bool=false>

Built-in tags
- string: identity, never fails (also the fallback for absent/unknown tags).
- bool:   1 t T TRUE true True / 0 f F FALSE false False.
- int:    base-10 signed literal, limited to the signed 64-bit range.
- float:  decimal literal with optional exponent, or inf/infinity/nan.

Extending
    >>> @checker("path")
    ... def _path(value):
    ...     return pathlib.Path(value)

Checkers registered this way land in the process-wide CHECKERS table; an App
can also receive extra checkers of its own (see App(types=...)).
"""
import math
import re

CHECKERS = {}

_TRUE = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSE = frozenset(("0", "f", "F", "FALSE", "false", "False"))

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPECIAL = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)

INT_MIN = -(1 << 63)
INT_MAX = (1 << 63) - 1


def checker(tag, /):
    """
    Register the decorated callable as the checker for 'tag'.

    The tag must be an identifier made of letters, digits and underscores (the
    same alphabet the usage grammar accepts). Re-registering a tag replaces the
    previous checker.
    """
    if not isinstance(tag, str):
        raise TypeError("checker() argument must be a string")
    if not re.fullmatch(r"\w+", tag, re.ASCII):
        raise ValueError(f"checker() tag {tag!r} must be an identifier")

    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@checker() must be applied to a callable")
        CHECKERS[tag] = callback
        return callback

    return wrapper


@checker("string")
def string(value, /):
    return value


@checker("bool")
def boolean(value, /):
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"invalid bool literal {value!r}")


@checker("int")
def integer(value, /):
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"invalid int literal {value!r}")
    if not INT_MIN <= (result := int(value)) <= INT_MAX:
        raise ValueError(f"int literal {value!r} is out of range")
    return result


@checker("float")
def floating(value, /):
    if _SPECIAL.fullmatch(value):
        return float(value)
    if not _DECIMAL.fullmatch(value):
        raise ValueError(f"invalid float literal {value!r}")
    # a finite literal never turns into inf silently
    if math.isinf(result := float(value)):
        raise ValueError(f"float literal {value!r} is out of range")
    return result


def resolve(tag, types=CHECKERS, /):
    """
    Return (resolved-tag, checker) for a declared tag.

    Absent (empty/None) and unknown tags resolve to the string checker.
    """
    try:
        return tag, types[tag]
    except KeyError:
        return "string", types.get("string", string)


__all__ = (
    "CHECKERS",
    "INT_MIN",
    "INT_MAX",
    "checker",
    "resolve",
)
