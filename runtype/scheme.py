"""
    Scheme markers, scheme node classification and scheme aliases.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
import collections.abc as collections_abc
import numbers
import re
import sys
import typing
from typing import Any, Mapping

if sys.version_info >= (3, 8):
    from typing import Literal
else:
    from typing_extensions import Literal

Number = numbers.Number
r"""
    Marker for numbers: any instance of :class:`numbers.Number` which is not a :obj:`bool`.
"""

String = str
r"""
    Marker for strings.
"""

Boolean = bool
r"""
    Marker for booleans.
"""

Function = collections_abc.Callable
r"""
    Marker for callables (functions, methods, classes, objects with ``__call__``).
"""

Object = dict
r"""
    Marker for plain objects, i.e. instances of :obj:`dict`.
"""

SchemeKind = Literal[
    "number",
    "string",
    "boolean",
    "function",
    "object",
    "class",
    "predicate",
    "regex",
    "mapping",
    "array",
    "union",
    "alias",
    "unsupported",
]
r"""
    Tags returned by :func:`scheme_kind`, one for each kind of scheme node.
"""

_function_markers = (collections_abc.Callable, typing.Callable)


_scheme_aliases: ContextVar[Mapping[str, Any]] = ContextVar(
    "_scheme_aliases", default={}
)
r"""
    Current context of scheme aliases, used to resolve string scheme nodes in :func:`~runtype.validation.validate`.
"""


@contextmanager
def scheme_aliases(**aliases: Any) -> collections_abc.Iterator[None]:
    r"""
    Sets named schemes which can be referred to by string nodes inside other schemes.

    For example, the following snippet validates a tree of arbitrary depth,
    using :func:`scheme_aliases` to create a context where the string ``"Tree"``
    resolves to the recursive scheme ``Tree``:

    >>> Tree = {"value": Number, "children": ["Tree"]}
    >>> with scheme_aliases(Tree=Tree):
    >>>     validate({"value": 1, "children": [{"value": 2, "children": []}]}, Tree)

    """
    token = _scheme_aliases.set({**_scheme_aliases.get(), **aliases})
    try:
        yield
    finally:
        _scheme_aliases.reset(token)


def current_scheme_aliases() -> Mapping[str, Any]:
    """The scheme aliases set in the current context."""
    return _scheme_aliases.get()


def resolve_alias(alias: str) -> Any:
    """
    Returns the scheme registered for the given alias in the current context.
    Aliases registered as other aliases are followed until a scheme which is
    not a known alias is reached.

    Raises :obj:`KeyError` if the alias is not known.
    Raises :obj:`ValueError` if the alias only resolves to aliases in a cycle.
    """
    aliases = _scheme_aliases.get()
    seen = {alias}
    scheme = aliases[alias]
    while isinstance(scheme, str) and scheme in aliases:
        if scheme in seen:
            raise ValueError(f"Alias {alias!r} resolves to itself.")
        seen.add(scheme)
        scheme = aliases[scheme]
    return scheme


def scheme_kind(scheme: Any) -> SchemeKind:
    r"""
    Classifies a scheme node. Markers are recognised by identity,
    so they take precedence over the generic class and predicate kinds:

    >>> scheme_kind(Number), scheme_kind(int), scheme_kind(callable)
    ('number', 'class', 'predicate')
    >>> scheme_kind({"x": Number}), scheme_kind([Number]), scheme_kind([Number, String])
    ('mapping', 'array', 'union')

    String nodes are aliases (see :func:`scheme_aliases`): they are classified
    as ``"alias"`` if known in the current context, and as ``"unsupported"``
    otherwise.
    """
    # pylint: disable = too-many-return-statements
    if scheme is Number:
        return "number"
    if scheme is String:
        return "string"
    if scheme is Boolean:
        return "boolean"
    if any(scheme is marker for marker in _function_markers):
        return "function"
    if scheme is Object:
        return "object"
    if isinstance(scheme, type):
        return "class"
    if callable(scheme):
        return "predicate"
    if isinstance(scheme, re.Pattern):
        return "regex"
    if isinstance(scheme, Mapping):
        return "mapping"
    if isinstance(scheme, list):
        if len(scheme) == 1:
            return "array"
        if len(scheme) > 1:
            return "union"
        return "unsupported"
    if isinstance(scheme, str):
        if scheme in _scheme_aliases.get():
            return "alias"
        return "unsupported"
    return "unsupported"


def is_number(val: Any) -> bool:
    """Whether ``val`` is a number (booleans excluded)."""
    return isinstance(val, numbers.Number) and not isinstance(val, bool)


def is_plain_object(val: Any) -> bool:
    """Whether ``val`` is a plain object."""
    return isinstance(val, dict)


def is_array(val: Any) -> bool:
    """Whether ``val`` is an array."""
    return isinstance(val, (list, tuple))
