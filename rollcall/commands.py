"""
Rollcall command layer: register, bind, and run CLI commands.

What this module provides
- Command: one registered command, compiled from a usage string and bound to
  a handler. It knows its minimum argument count and binds raw tokens into a
  tuple of converted values (Command.bind).
- App: the registry. It collects commands in registration order, renders the
  one-line usage listing, and dispatches process arguments (App.run).
- invoke(app, argv): convenience runner mirroring App.run.

Core ideas
- Usage-driven UX: the usage string is the whole CLI surface of a command.
- Position-first diagnostics: messages carry the ordinal position of the
  offending token (“at third position”) so users can learn by trying.
- Programmer errors raise at registration; user errors go through faults.

Quick start
    from rollcall import App

    app = App()

    @app.command("count <from:int> <to:int> <double:bool=false>")
    def count(start, stop, double):
        for number in range(start, stop + 1):
            print(number * (2 if double else 1))

    if __name__ == "__main__":
        app.run()

Dispatch contract
- no command given or an unknown one → combined usage + fault, exit status 1
- too few arguments or a malformed value → that command's usage + fault, exit status 1
- otherwise the handler runs and its return value is handed back by run()

In non-shell mode (App(shell=False)) faults are raised instead of printed,
which is how the test-suite observes them.
"""
import copy
import difflib
import functools
import operator
import os.path
import re
import shlex
import sys
from collections import ChainMap
from collections.abc import Iterable, Mapping

from rich.panel import Panel
from rich.text import Text

from .checkers import CHECKERS
from .faults import *
from .faults import console
from .grammar import parse_usage
from .utils import *


class CommandType(type):
    """
    Metaclass for the command layer (Command and App).

    Responsibilities
    - Derive a human-friendly __typename__ from the class name.
    - Expose every name in __introspectable__ as a read-only mirrored property.
    - Provide stable __repr__/__rich_repr__ for diagnostics and rich pretty-printing;
      __displayable__ (if set) narrows the fields shown.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
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
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth") for nicer phrasing.
    - Other numbers use numeric ordinals with correct English suffixes.
    """
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


def _article(word):
    return "an" if word[:1].lower() in "aeiou" else "a"


def _program(path=Unset, /):
    """
    Display name of the running program.

    __main__.__prog__ wins when the host defines it; otherwise the basename of
    the invocation path (sys.argv[0] when not given).
    """
    if path is Unset:
        path = sys.argv[0] if sys.argv else ""
    return getattr(__import__("__main__"), "__prog__", os.path.basename(path) or "rollcall")


class Command(metaclass=CommandType):
    """
    A registered command: name, usage text, placeholders, and handler.

    Lifecycle
    - Built once from (usage, handler); immutable afterwards.
    - Owned by the App that registered it.

    Calling a Command forwards positional values to its handler, so a bound
    tuple can be applied directly: command(*command.bind(tokens)).
    """

    __introspectable__ = (
        "name",
        "usage",
        "arguments",
        "handler",
        "minimum",
    )

    __displayable__ = (
        "name",
        "usage",
        "arguments",
        "minimum",
    )

    def __new__(cls, usage, handler, /, types=Unset):
        """
        Compile 'usage' and bind 'handler'.

        Raises
        - TypeError: handler is not callable, or usage is not a string.
        - ValueError: any structural problem reported by parse_usage().
        """
        if not callable(handler):
            raise TypeError(f"{cls.__typename__} 'handler' must be callable, not {type(handler).__name__}")

        name, arguments = parse_usage(usage, types)

        self = super().__new__(cls)
        self._name = name
        self._usage = usage.strip()
        self._arguments = arguments
        self._handler = handler
        self._minimum = sum(not argument.optional for argument in arguments)
        return self

    def bind(self, tokens, /):
        """
        Convert raw tokens (command name excluded) into handler values.

        rules
        - fewer tokens than the required placeholders → MissingArgumentsError.
        - required placeholders, and optional ones with a token at their
          position, convert that token; other optional ones take their default.
        - the first conversion failure → UncastableArgumentError (no partial result).
        - tokens past the last placeholder are ignored.

        ordinals in messages count from the command name (first position), so
        the first argument is reported at the second position.
        """
        tokens = tuple(tokens)

        if len(tokens) < self._minimum:
            missing = tuple(argument.name for argument in self._arguments[len(tokens):self._minimum])
            raise MissingArgumentsError(
                "command %r expects at least %d argument%s, got %d" % (
                    self._name, self._minimum, "s" * (self._minimum != 1), len(tokens)
                ),
                title="missing arguments",
                code=FaultCode.MISSING_ARGUMENTS,
                input=self._name,
                missing=missing,
                hint="add %s after %r" % (" ".join(f"<{name}>" for name in missing), self._name),
                docs=getdoc(FaultCode.MISSING_ARGUMENTS),
            )

        values = []
        for index, argument in enumerate(self._arguments):
            if argument.optional and index >= len(tokens):
                values.append(argument.default)
                continue

            try:
                values.append(argument(token := tokens[index]))
            except ValueError:
                raise UncastableArgumentError(
                    "argument %r at %s position expects %s %s, got %r" % (
                        argument.name, _ordinal(index + 2), _article(argument.type), argument.type, token
                    ),
                    title="uncastable argument",
                    code=FaultCode.UNCASTABLE_ARGUMENT,
                    input=token,
                    index=index + 2,
                    placeholder=argument,
                    hint="pass a valid %s literal for <%s>" % (argument.type, argument.name),
                    docs=getdoc(FaultCode.UNCASTABLE_ARGUMENT),
                ) from None

        return tuple(values)

    def __call__(self, *values):
        return self._handler(*values)


class App(metaclass=CommandType):
    """
    Command registry and dispatcher.

    Options (keyword-only)
    - shell: print usage + fault to stderr and exit(1) on user errors (default);
      when False, faults are raised so callers and tests can observe them.
    - fancy: wrap rendered output in rich panels.
    - colorful: style rendered output with the palette (see __styles__ in __main__).
    - types: extra {tag: checker} entries layered over the global CHECKERS table.

    The registry is append-only: commands are added during setup and only read
    while dispatching.
    """

    __introspectable__ = (
        "commands",
        "types",
        "shell",
        "fancy",
        "colorful",
    )

    __displayable__ = (
        "commands",
        "shell",
        "fancy",
        "colorful",
    )

    __palette__ = {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
        "panel-title": "bold #FF4D94",
    }

    def __new__(cls, *, shell=True, fancy=False, colorful=False, types=Unset):
        if not isinstance(types := coalesce(types, {}), Mapping):
            raise TypeError(f"{cls.__typename__} 'types' must be a mapping")
        for tag, checker in types.items():
            if not isinstance(tag, str) or not re.fullmatch(r"\w+", tag, re.ASCII):
                raise ValueError(f"{cls.__typename__} 'types' keys must be identifiers, got {tag!r}")
            if not callable(checker):
                raise TypeError(f"{cls.__typename__} 'types' checker for {tag!r} must be callable")

        self = super().__new__(cls)
        self._commands = []
        # per-app entries shadow the global table; later global registrations stay visible
        self._types = ChainMap(dict(types), CHECKERS)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        return self

    def command(self, usage, handler=Unset, /):
        """
        Register a command.

        Forms
        - app.command("hello <name>", handler) → Command
        - @app.command("hello <name>")          → decorator returning the Command

        Registration is all-or-nothing: a usage or handler error raises before
        anything is appended. Unknown type tags and duplicate names are reported
        as warnings; with duplicates, the latest registration wins at dispatch.
        """
        if handler is Unset:
            @rename("command")
            def wrapper(handler, /):
                return self.command(usage, handler)
            return wrapper

        command = Command(usage, handler, self._types)

        for argument in command.arguments:
            if argument.annotation and argument.annotation not in self._types:
                self.trigger(UnknownTypeWarning(
                    "placeholder %r of command %r declares unknown type %r" % (
                        argument.name, command.name, argument.annotation
                    ),
                    title="unknown type",
                    code=FaultCode.UNKNOWN_TYPE,
                    input=argument.annotation,
                    placeholder=argument,
                    hint="use one of %s; values are passed as strings meanwhile" % ", ".join(sorted(self._types)),
                    docs=getdoc(FaultCode.UNKNOWN_TYPE),
                ))

        if any(existing.name == command.name for existing in self._commands):
            self.trigger(DuplicatedCommandWarning(
                "command %r is already registered" % command.name,
                title="duplicated command",
                code=FaultCode.DUPLICATED_COMMAND,
                input=command.name,
                hint="the latest registration of %r wins; remove the other one" % command.name,
                docs=getdoc(FaultCode.DUPLICATED_COMMAND),
            ))

        self._commands.append(command)
        return command

    def usage(self, program=Unset, command=Unset, /):
        """
        Render the usage block as rich Text.

        - one command (or the one requested): "usage: <program> <usage>"
        - several commands: "usage:" followed by one " <program> <usage>" line each
        """
        styles = self.__palette__ | getattr(__import__("__main__"), "__styles__", {})

        def styler(style):
            return styles.get(style, "") if self.colorful else ""

        program = Text(_program(program), styler("program-name"))
        commands = self._commands if command is Unset else [command]

        usage = Text()
        usage.append("usage", styler("usage-label")).append(":")
        if len(commands) == 1:
            usage.append(" ").append(program).append(" ").append(commands[0].usage, styler("usage-section"))
            return usage

        for command in commands:
            usage.append("\n ").append(program).append(" ").append(command.usage, styler("usage-section"))
        return usage

    def trigger(self, fault, /, command=Unset, program=Unset, **options):
        """
        Surface a fault with this app's runtime options.

        In shell mode, exceptions are preceded by the usage block: the single
        command's usage when 'command' is given, the whole listing otherwise.
        """
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        fault = copy.replace(
            fault,
            **options,
            program=_program(program),
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
        )
        if self.shell and isinstance(fault, CommandException):
            usage = self.usage(program, command)
            if self.fancy:
                usage = Panel(
                    usage,
                    title=Text.assemble("[ ", f"{fault.options["program"]} usage".upper(), " ]"),
                    title_align="left",
                )
            console.print(usage, soft_wrap=True)
        trigger(fault)

    def run(self, argv=Unset, /):
        """
        Dispatch process arguments to the matching command.

        Parameters
        - argv:
          • Unset: sys.argv.
          • str: shell-like string, split with shlex.split (program path first).
          • Iterable[str]: pre-tokenized sequence; argv[0] is the invocation path.

        Returns
        - whatever the handler returns.

        Raises
        - TypeError: invalid argv shape (not strings, or no invocation path).
        - CommandException subclasses when shell is False; otherwise user errors
          exit the process with status 1.
        """
        if argv is Unset:
            argv = list(sys.argv)
        elif isinstance(argv, str):
            argv = shlex.split(argv)
        elif isinstance(argv, Iterable):
            argv = list(argv)
            if not all(isinstance(token, str) for token in argv):
                raise TypeError("run() argument must be a string or an iterable of strings")
        else:
            raise TypeError("run() argument must be a string or an iterable of strings")

        if not argv:
            raise TypeError("run() argument must start with the invocation path")

        path, tokens = argv[0], argv[1:]

        if not tokens:
            self.trigger(MissingCommandError(
                "a command is required",
                title="missing command",
                code=FaultCode.MISSING_COMMAND,
                hint="pick one of the commands listed in the usage",
                docs=getdoc(FaultCode.MISSING_COMMAND),
            ), program=path)

        name, tokens = tokens[0], tokens[1:]

        command = Unset
        for candidate in self._commands:
            # no early exit: the latest registration under a name wins
            if candidate.name == name:
                command = candidate

        if command is Unset:
            suggestions = difflib.get_close_matches(name, [candidate.name for candidate in self._commands], 5)
            try:
                hint = "did you mean %r? the usage lists every available command" % suggestions[0]
            except IndexError:
                hint = "the usage lists every available command"
            self.trigger(UnknownCommandError(
                "unknown command %r at %s position" % (name, _ordinal(1)),
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                input=name,
                index=1,
                suggestions=suggestions,
                hint=hint,
                docs=getdoc(FaultCode.UNKNOWN_COMMAND),
            ), program=path)

        try:
            values = command.bind(tokens)
        except CommandException as fault:
            self.trigger(fault, command, path)

        return command(*values)

    def __invoke__(self, argv=Unset, /):
        return self.run(argv)


def invoke(object, argv=Unset, /):
    """
    Convenience runner for apps.

    Parameters
    - object: an instance providing __invoke__(argv), typically an App.
    - argv: forwarded untouched (see App.run).

    Raises
    - TypeError: when 'object' does not implement __invoke__ (a plain callable
      has no usage string, so it cannot be wrapped implicitly).
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(argv)

    target = "argument" if argv is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Command",
    "App",
    "invoke",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
