"""
    Implements a descriptor class which declares one entry of the data held
    by a :class:`~runtype.model.Model`, with the possibility to define
    read-only access.
"""

# Copyright (C) 2023 Hashberg Ltd

# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 2.1 of the License, or (at your option) any later version.

# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.

# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301
# USA

from __future__ import annotations
import sys
from typing import Any, Type
from .validation import inspect_scheme, validate

if sys.version_info >= (3, 8):
    from typing import final
else:
    from typing_extensions import final


class Field:
    r"""
    Declares an entry of the data of a :class:`~runtype.model.Model` subclass.
    The scheme of the model is the mapping from field names to field schemes,
    built when the subclass is created:

    >>> class Segment(Model):
    ...     start = Field({"x": Number, "y": Number})
    ...     end = Field({"x": Number, "y": Number})
    ...     label = Field(String, readonly=True)
    ...
    >>> s = Segment({"start": {"x": 0, "y": 0}, "end": {"x": 1, "y": 1}, "label": "a"})
    >>> s.end = {"x": 2, "y": "2"}
    ValidationError: 'end.y' should be number

    Reading a field returns the entry of :meth:`~runtype.model.Model.get_data`.
    Assigning to a field validates the value against the field scheme, with
    the field name as root of the error path, and stores the validated value
    into the data. Fields cannot be deleted, and read-only fields cannot be
    assigned to after construction.
    """

    _scheme: Any
    _readonly: bool
    _name: str
    _owner: Type[Any]

    __slots__ = ("_scheme", "_readonly", "_name", "_owner")

    def __init__(self, scheme: Any, *, readonly: bool = False) -> None:
        """
        Creates a new field with the given scheme.

        :param scheme: the scheme for the value of the field
        :param readonly: whether the field is read-only

        :raises TypeError: if the scheme cannot be validated against

        :meta public:
        """
        inspector = inspect_scheme(scheme)
        if not inspector:
            raise TypeError(f"Cannot declare field.\n{inspector!r}")
        self._scheme = scheme
        self._readonly = bool(readonly)

    @final
    @property
    def name(self) -> str:
        """The name of the field, used as key in the model data."""
        return self._name

    @final
    @property
    def scheme(self) -> Any:
        """The scheme of the field."""
        return self._scheme

    @final
    @property
    def owner(self) -> Type[Any]:
        """The model class declaring the field."""
        return self._owner

    @final
    @property
    def readonly(self) -> bool:
        """Whether the field is read-only."""
        return self._readonly

    @final
    def __set_name__(self, owner: Type[Any], name: str) -> None:
        """
        Hook called when the field is assigned to a class attribute.

        :raises TypeError: if the owner does not hold its data in a ``get_data`` method
        """
        if not callable(getattr(owner, "get_data", None)):
            raise TypeError(
                f"Field {name!r} can only be declared on a Model subclass, "
                f"found {owner.__name__!r}."
            )
        self._owner = owner
        self._name = name

    @final
    def __get__(self, instance: Any, _: Type[Any]) -> Any:
        """
        Gets the value of the field from the data of the given model.

        :raises AttributeError: if the data holds no entry for the field

        :meta public:
        """
        if instance is None:
            return self
        try:
            return instance.get_data()[self._name]
        except (KeyError, TypeError):
            pass
        owner_name = type(instance).__name__
        raise AttributeError(f"{owner_name!r} object has no field {self._name!r}")

    @final
    def __set__(self, instance: Any, value: Any) -> None:
        """
        Validates the value and stores the validated value into the data
        of the given model.

        :raises ValidationError: if the value does not match the field scheme
        :raises AttributeError: if the field is read-only

        :meta public:
        """
        if self._readonly:
            raise AttributeError(f"Field {self._name!r} is readonly.")
        instance.get_data()[self._name] = validate(value, self._scheme, self._name)

    @final
    def __delete__(self, instance: Any) -> None:
        """
        :raises AttributeError: always, fields cannot be deleted

        :meta public:
        """
        raise AttributeError(f"Field {self._name!r} cannot be deleted.")

    def __repr__(self) -> str:
        return f"Field({self._scheme!r}, readonly={self._readonly})"
