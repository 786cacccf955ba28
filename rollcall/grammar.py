"""
Rollcall usage-string grammar.

A usage string names a command and declares its positional arguments:

    count <from:int> <to:int> <double:bool=false>

- the command name is the first whitespace-delimited token and must not be a
  placeholder itself;
- each placeholder has the shape <name[:type][=default]> where name and type are
  identifiers (letters, digits, underscore) and default is a literal made of
  identifier characters and dots;
- placeholders are scanned left to right over the whole string, anything else
  is free text kept only for display;
- once a placeholder declares a default, every later one must declare one too.

parse_usage() is a pure function of its input: it never touches a registry and
never prints. Structural problems are programmer errors and raise immediately.
"""
import re

from .arguments import Placeholder
from .checkers import CHECKERS
from .utils import *

PATTERN = re.compile(r"<(\w+)(?::(\w+))?(?:=([\w.]+))?>", re.ASCII)


def parse_usage(usage, /, types=Unset):
    """
    Compile a usage string into (command-name, placeholders).

    Parameters
    - usage: str
      The usage string, e.g. "hello <name:string>".
    - types: Mapping[str, Callable] | Unset
      Checker table used to resolve placeholder types (defaults to CHECKERS).

    Returns
    - tuple[str, tuple[Placeholder, ...]]

    Raises
    - TypeError: usage is not a string.
    - ValueError: empty usage, missing command name, duplicate placeholder
      names, invalid default literal, or a required placeholder following an
      optional one.
    """
    if not isinstance(usage, str):
        raise TypeError("parse_usage() argument must be a string")
    elif not (usage := usage.strip()):
        raise ValueError("parse_usage() argument cannot be empty")

    types = coalesce(types, CHECKERS)

    placeholders = []
    seen = set()
    optional = None
    for match in PATTERN.finditer(usage):
        name, annotation, literal = match.groups()
        if name in seen:
            raise ValueError(f"usage {usage!r} declares placeholder {name!r} more than once")
        seen.add(name)

        placeholder = Placeholder(name, annotation, literal, types=types)
        if optional and not placeholder.optional:
            raise ValueError(
                f"usage {usage!r} declares required placeholder {name!r} after optional placeholder {optional!r}; "
                "optional placeholders must come after required ones"
            )
        if placeholder.optional and not optional:
            optional = name
        placeholders.append(placeholder)

    name = usage.split(maxsplit=1)[0]
    if name.startswith("<"):
        raise ValueError(f"usage {usage!r} must start with a command name")

    return name, tuple(placeholders)


__all__ = (
    "PATTERN",
    "parse_usage",
)
