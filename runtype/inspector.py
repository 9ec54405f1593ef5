"""
    Scheme inspector object, used by
    :func:`~runtype.validation.inspect_scheme` to determine whether a
    scheme can be validated against (and record the classes it references).
"""

from __future__ import annotations
import sys
import typing
from typing import Any, Optional

from .scheme import resolve_alias, scheme_kind

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

SchemeConstructorArgs = typing.Tuple[str, Any]

_marker_names = {
    "number": "Number",
    "string": "String",
    "boolean": "Boolean",
    "function": "Function",
    "object": "Object",
}


def _predicate_name(f: Any) -> str:
    return getattr(f, "__name__", repr(f))


class SchemeInspector:
    r"""
    Class used to record the structure of a scheme during a call to
    :func:`~runtype.validation.inspect_scheme`.

    The walk is static: it never looks at data, visits every node of the
    scheme once and expands each alias at most once, so that recursive
    schemes are walked in finite time.
    """

    _recorded_constructors: typing.List[SchemeConstructorArgs]
    _unsupported_schemes: typing.List[Any]
    _classes: typing.Set[type]
    _expanded_aliases: typing.Set[str]

    __slots__ = (
        "__weakref__",
        "_recorded_constructors",
        "_unsupported_schemes",
        "_classes",
        "_expanded_aliases",
    )

    def __new__(cls) -> Self:
        instance = super().__new__(cls)
        instance._recorded_constructors = []
        instance._unsupported_schemes = []
        instance._classes = set()
        instance._expanded_aliases = set()
        return instance

    @property
    def classes(self) -> typing.FrozenSet[type]:
        r"""The classes referenced by the scheme."""
        return frozenset(self._classes)

    @property
    def unsupported_schemes(self) -> typing.Tuple[Any, ...]:
        r"""The sequence of unsupported scheme nodes encountered during the walk."""
        return tuple(self._unsupported_schemes)

    @property
    def scheme_structure(self) -> str:
        """
        The structure of the recorded scheme:

        1. The string spans multiple lines, with indentation levels matching
           the nesting level of inner schemes.
        2. Any unsupported node encountered is wrapped into ``UnsupportedScheme[...]``.

        """
        return "\n".join(self._repr()[0])

    def has_class(self, cls: Any) -> bool:
        """Whether the class ``cls`` is referenced by the scheme."""
        return cls in self._classes

    def walk(self, scheme: Any) -> None:
        """
        Records the given scheme and, recursively, all its sub-schemes.
        """
        kind = scheme_kind(scheme)
        if kind == "class":
            self._classes.add(scheme)
            self._record(kind, scheme)
        elif kind in ("predicate", "regex"):
            self._record(kind, scheme)
        elif kind in _marker_names:
            self._record(kind, None)
        elif kind == "mapping":
            self._record(kind, tuple(scheme.keys()))
            for field_scheme in scheme.values():
                self.walk(field_scheme)
        elif kind == "array":
            self._record(kind, None)
            self.walk(scheme[0])
        elif kind == "union":
            self._record(kind, len(scheme))
            for member_scheme in scheme:
                self.walk(member_scheme)
        elif kind == "alias":
            if scheme in self._expanded_aliases:
                self._record(kind, (scheme, False))
                return
            try:
                aliased_scheme = resolve_alias(scheme)
            except ValueError:
                self._unsupported_schemes.append(scheme)
                self._record("unsupported", scheme)
                return
            self._expanded_aliases.add(scheme)
            self._record(kind, (scheme, True))
            self.walk(aliased_scheme)
        else:
            self._unsupported_schemes.append(scheme)
            self._record("unsupported", scheme)

    def _record(self, tag: str, param: Optional[Any]) -> None:
        self._recorded_constructors.append((tag, param))

    def __bool__(self) -> bool:
        return not self._unsupported_schemes

    def __repr__(self) -> str:
        """
        Representation of the inspector, including the :attr:`scheme_structure`.

        :meta public:
        """
        if not self:
            return (
                "The following scheme cannot be validated against:\n"
                + self.scheme_structure
            )
        return (
            "SchemeInspector instance for the following scheme:\n"
            + self.scheme_structure
        )

    def _repr(
        self, idx: int = 0, level: int = 0
    ) -> typing.Tuple[typing.List[str], int]:
        # pylint: disable = too-many-return-statements
        basic_indent = "  "
        indent = basic_indent * level
        next_indent_len = len(basic_indent * (level + 1))
        param: Any
        lines: typing.List[str]
        tag, param = self._recorded_constructors[idx]
        if tag == "unsupported":
            return [
                indent + "UnsupportedScheme[",
                indent + "    " + repr(param),
                indent + "]",
            ], idx
        if tag in _marker_names:
            return [indent + _marker_names[tag]], idx
        if tag == "class":
            return [indent + param.__name__], idx
        if tag == "predicate":
            return [indent + _predicate_name(param)], idx
        if tag == "regex":
            return [indent + f"re.compile({param.pattern!r})"], idx
        if tag == "mapping":
            assert isinstance(param, tuple)
            item_lines_list: typing.List[str] = []
            for k in param:
                value_lines, idx = self._repr(idx + 1, level + 1)
                value_lines[0] = (
                    indent
                    + basic_indent
                    + f"{k}: "
                    + value_lines[0][next_indent_len:]
                )
                item_lines_list.extend(value_lines)
            return [indent + "{", *item_lines_list, indent + "}"], idx
        if tag == "array":
            item_lines, idx = self._repr(idx + 1, level + 1)
            return [indent + "[", *item_lines, indent + "]"], idx
        if tag == "union":
            assert isinstance(param, int)
            lines = [indent + "["]
            for _ in range(param):
                member_lines, idx = self._repr(idx + 1, level + 1)
                member_lines[-1] += ","
                lines.extend(member_lines)
            lines.append(indent + "]")
            return lines, idx
        if tag == "alias":
            alias, expanded = param
            if not expanded:
                return [indent + repr(alias)], idx
            aliased_lines, idx = self._repr(idx + 1, level)
            aliased_lines[0] = (
                indent + f"{alias!r} = " + aliased_lines[0][len(indent):]
            )
            return aliased_lines, idx
        assert False, f"Invalid scheme constructor tag: {repr(tag)}"
