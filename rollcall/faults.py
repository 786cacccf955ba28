"""
Rollcall faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings), grouped by domain so logs and searches stay predictable.
- CommandException / CommandWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Two tiers
- Registration mistakes (bad usage strings, non-callable handlers) are programmer
  errors; they are plain TypeError/ValueError raised at setup and never pass
  through this module.
- Dispatch problems (missing/unknown command, missing or malformed arguments) are
  user-input errors; they are CommandException instances surfaced via trigger().

Integration
- App code builds a fault and calls App.trigger(fault, ...), which merges the
  runtime options and forwards here.
- In non-shell mode, exceptions are raised and warnings go through `warnings`;
  in shell mode, they are rendered via rich on stderr and errors exit with status 1.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • MISSING_COMMAND, UNKNOWN_COMMAND
    - positionals (1112x)
      • MISSING_ARGUMENTS, UNCASTABLE_ARGUMENT
    - registration warnings (1211x)
      • UNKNOWN_TYPE, DUPLICATED_COMMAND

    numeric ranges leave room for future additions without reshuffling existing
    codes; normalize() lets hosts remap them to custom labels.
    """
    # --- routing errors (11xxx) ---
    MISSING_COMMAND             = 11100
    UNKNOWN_COMMAND             = 11101

    # --- positional errors (11xxx) ---
    MISSING_ARGUMENTS           = 11125
    UNCASTABLE_ARGUMENT         = 11126

    # --- warnings (12xxx) ---
    UNKNOWN_TYPE                = 12113
    DUPLICATED_COMMAND          = 12114

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _renderer(fault, palette):
    """
    Build the (styler, text) pair shared by every fault renderer.

    styler(style) resolves a palette key honoring __main__.__styles__ and the
    'colorful' option; text(fragment, style) normalizes anything into rich Text.
    """
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if fault.options["colorful"] else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not fault.options["colorful"]:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def _render(fault, kind):
    styler, text = _renderer(fault, fault.__palette__)

    prog = text(getattr(__import__("__main__"), "__prog__", fault.options["program"]), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(fault.options["code"].normalize(), styler("code")),
        " | ",
        text(fault.options["title"].title(), styler(f"{kind}-title")),
        " ]"
    )
    message = text(fault.message, styler(f"{kind}-message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(fault.options["hint"], styler("hint")))

    if fault.options["fancy"]:
        return Panel(Group(message, hint), title=header, title_align="left", width=console.width - 4)

    return Group(header, message, hint)


class CommandException(Exception):
    __palette__ = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "error-title": "bold #FF4DA6",  # friendly pinky title

        # body
        "error-message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    }

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, "error")

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingCommandError(CommandException): ...
class UnknownCommandError(CommandException): ...
class MissingArgumentsError(CommandException): ...
class UncastableArgumentError(CommandException): ...


class CommandWarning(ABC, Warning):
    __palette__ = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #FFB400",  # amber fault code for warnings
        "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

        # body
        "warning-message": "#D6D6DE",  # slightly lighter gray body
        "hint-arrow": "#B8EFAF dim",  # softer green arrow
        "hint": "italic #B8EFAF",  # softer green hint text
    }

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, "warning")

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownTypeWarning(CommandWarning): ...
class DuplicatedCommandWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.

    typical options
    - program, shell, fancy, colorful, title, code, hint, docs, and any other
      context the reporter may want to show (e.g., input/index/placeholder).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings; when
    not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "MissingCommandError",
    "UnknownCommandError",
    "MissingArgumentsError",
    "UncastableArgumentError",
    "CommandWarning",
    "UnknownTypeWarning",
    "DuplicatedCommandWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
