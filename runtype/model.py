"""
    Base class for entities holding data validated against a class-level scheme.
"""

from __future__ import annotations

import logging
import typing
from typing import Any, ClassVar

from .descriptor import Field
from .validation import inspect_scheme, validate

logger = logging.getLogger(__name__)


class Model:
    r"""
    Base class for entities whose data is validated on construction against
    the scheme set as the ``scheme`` class attribute:

    >>> class User(Model):
    ...     scheme = {"id": Number, "name": String, "tags": [String]}
    ...
    >>> User({"id": 5, "name": "a", "tags": ["x"], "extra": None}).get_data()
    {'id': 5, 'name': 'a', 'tags': ['x']}
    >>> User({"id": 5})
    ValidationError: 'name' should be string

    The validated data is stored privately and exposed by :meth:`get_data`
    (and the read-only :attr:`data` property). The classes referenced by
    the scheme are collected once, at construction, see :meth:`is_class`.

    Alternatively, the scheme can be declared field by field with
    :class:`~runtype.descriptor.Field` class attributes, which also give
    validated attribute access to the entries of the data. Fields are
    inherited from base models.
    """

    scheme: ClassVar[Any] = None

    __data: Any
    __classes: typing.FrozenSet[type]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        own_fields = [
            name for name, attr in vars(cls).items() if isinstance(attr, Field)
        ]
        if not own_fields:
            return
        if "scheme" in vars(cls):
            raise TypeError(
                f"Model {cls.__name__!r} cannot declare both a scheme and fields."
            )
        scheme: typing.Dict[str, Any] = {}
        for base in reversed(cls.__mro__):
            for name, attr in vars(base).items():
                if isinstance(attr, Field):
                    scheme[name] = attr.scheme
        cls.scheme = scheme
        logger.debug("Built scheme for %s from fields: %s", cls.__name__, list(scheme))

    def __init__(self, data: Any) -> None:
        """
        Validates the given data against the scheme of the class.

        :raises ValidationError: if ``data`` does not match the scheme
        :raises UnsupportedSchemeError: if the scheme contains a node which cannot be validated against
        """
        scheme = type(self).scheme
        self.__data = validate(data, scheme)
        self.__classes = inspect_scheme(scheme).classes
        logger.debug(
            "Built class registry for %s: %s",
            type(self).__name__,
            sorted(cls.__name__ for cls in self.__classes),
        )

    @property
    def data(self) -> Any:
        """The validated data."""
        return self.__data

    def get_data(self) -> Any:
        """Returns the validated data."""
        return self.__data

    def is_class(self, cls: Any) -> bool:
        """Whether the class ``cls`` is referenced anywhere in the scheme."""
        return cls in self.__classes

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.__data!r})"
