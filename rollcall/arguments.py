r"""
Rollcall argument descriptors.

Overview
- Placeholder: one positional argument of a command, compiled from a
  `<name[:type][=default]>` fragment of a usage string.
  • name: identifier used for usage display and diagnostics.
  • type: resolved checker tag ("string" when absent or unknown).
  • annotation: the tag as written, or None when the fragment had none.
  • checker: callable converting a raw token (raises ValueError on mismatch).
  • default: converted default value, or Unset when none was declared.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ as read-only properties.

Validation highlights
- name must match \w+ (ASCII).
- checker must be callable.
- a declared default literal is converted eagerly with the placeholder's own
  checker; failure is a ValueError at construction time.

Quick example:
    >>> from rollcall.arguments import Placeholder
    >>> to = Placeholder("to", "int")
    >>> to("3")
    3
    >>> double = Placeholder("double", "bool", "false")
    >>> double.optional, double.default
    (True, False)
"""
import functools
import operator
import re

from .checkers import CHECKERS, resolve
from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable types.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for consistent messages.
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_name" field.
    - Provide stable, readable __repr__/__rich_repr__ implementations.
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
            """
            Return a concise, stable representation with key metadata.

            Example
            - placeholder(name='to', type='int', annotation='int', default=Unset)
            """
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


class Placeholder(metaclass=ArgumentType):
    """
    Positional argument descriptor compiled from a usage-string placeholder.

    A Placeholder is immutable once built. Calling it converts a raw token with
    its checker, so the binder can treat every descriptor as a converter.
    """

    __introspectable__ = (
        "name",
        "type",
        "annotation",
        "checker",
        "default",
    )

    __displayable__ = (
        "name",
        "type",
        "annotation",
        "default",
    )

    def __new__(cls, name, annotation=None, literal=None, /, types=CHECKERS):
        """
        Construct a Placeholder.

        Parameters
        - name: str
          Identifier of the argument (letters, digits, underscore).
        - annotation: str | None
          Declared type tag. None or "" mean “no tag”; unknown tags fall back
          to the string checker but are remembered here for diagnostics.
        - literal: str | None
          Raw default literal; when given, it is converted with the resolved
          checker and the placeholder becomes optional.
        - types: Mapping[str, Callable]
          Checker table used to resolve the annotation.

        Raises
        - TypeError: non-string name/annotation/literal, or non-callable checker.
        - ValueError: invalid name, or a default literal the checker rejects.
        """
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not re.fullmatch(r"\w+", name, re.ASCII):
            raise ValueError(f"{cls.__typename__} 'name' must be an identifier, got {name!r}")

        if not isinstance(annotation, str | None):
            raise TypeError(f"{cls.__typename__} 'annotation' must be a string")
        annotation = annotation or None

        type, checker = resolve(annotation, types)
        if not callable(checker):
            raise TypeError(f"{cls.__typename__} {type!r} checker must be callable")

        default = Unset
        if literal is not None:
            if not isinstance(literal, str):
                raise TypeError(f"{cls.__typename__} 'literal' must be a string")
            try:
                default = checker(literal)
            except ValueError:
                raise ValueError(
                    f"{cls.__typename__} {name!r} has an invalid default value for type {type}: {literal!r}"
                ) from None

        self = super().__new__(cls)
        self._name = name
        self._type = type
        self._annotation = annotation
        self._checker = checker
        self._default = default
        return self

    @property
    def optional(self):
        """
        True when a default was declared (falsy defaults such as False or 0 count).
        """
        return self._default is not Unset

    def __call__(self, token, /):
        """
        Convert a raw token; ValueError propagates on a type mismatch.
        """
        return self._checker(token)

    def __str__(self):
        """
        Render back to the usage-string fragment, e.g. <double:bool=False>.
        """
        fragment = self._name
        if self._annotation:
            fragment += ":" + self._annotation
        if self.optional:
            fragment += "=" + str(self._default)
        return f"<{fragment}>"


__all__ = (
    "Placeholder",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
