"""
    Validation errors and validation failure tracking functionality.
"""

from __future__ import annotations

from contextvars import ContextVar
import sys
import typing
from typing import Any, Optional

if sys.version_info >= (3, 8):
    from typing import Protocol
else:
    from typing_extensions import Protocol

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


def render_path(path: str) -> str:
    """Path label as shown in error messages: the root is rendered as ``.``."""
    return path or "."


def _scheme_str(scheme: Any) -> str:
    if isinstance(scheme, type):
        return scheme.__name__
    return repr(scheme)


Acc = typing.TypeVar("Acc")
"""
    Type variable for the accumulator in :meth:`ValidationFailure.visit`.
"""


class FailureTreeVisitor(Protocol[Acc]):
    """
    Structural type for visitor functions that can be passed to
    :meth:`ValidationFailure.visit`.
    """

    def __call__(self, failure: ValidationFailure, acc: Acc) -> Acc:
        """
        See :meth:`ValidationFailure.visit` for usage.
        """


class ValidationError(TypeError):
    """
    Error raised when a value does not match a scheme.
    The message names the offending path and what was expected there.

    The full :class:`ValidationFailure` tree is available as the
    ``validation_failure`` attribute, see :func:`get_validation_failure`.
    """

    validation_failure: ValidationFailure

    def __init__(self, validation_failure: ValidationFailure) -> None:
        super().__init__(validation_failure.message)
        self.validation_failure = validation_failure


class UnsupportedSchemeError(ValidationError):
    """
    Error raised when a scheme node is malformed: this signals a bug in the
    scheme rather than in the data being validated.
    """


class ValidationFailure:
    """
    Generic validation failures, e.g. a value rejected by a predicate
    or a regular expression: ``Invalid value for 'email'``.
    """

    _val: Any
    _scheme: Any
    _path: str
    _causes: typing.Tuple[ValidationFailure, ...]

    def __new__(
        cls, val: Any, scheme: Any, path: str, *causes: ValidationFailure
    ) -> Self:
        instance = super().__new__(cls)
        instance._val = val
        instance._scheme = scheme
        instance._path = path
        instance._causes = causes
        return instance

    @property
    def val(self) -> Any:
        """The value involved in the validation failure."""
        return self._val

    @property
    def scheme(self) -> Any:
        """The scheme node involved in the validation failure."""
        return self._scheme

    @property
    def path(self) -> str:
        """The path label at which the failure arose (empty at the root)."""
        return self._path

    @property
    def causes(self) -> typing.Tuple[ValidationFailure, ...]:
        r"""
        Validation failures that in turn caused this failure (if any).

        :rtype: :obj:`~typing.Tuple`\ [:class:`ValidationFailure`, ...]
        """
        return self._causes

    @property
    def message(self) -> str:
        """The error message for this failure."""
        return f"Invalid value for '{render_path(self.path)}'"

    def visit(self, fun: FailureTreeVisitor[Acc], acc: Acc) -> None:
        r"""
        Performs a pre-order visit of the validation failure tree:

        1. applies ``fun(self, acc)`` to the failure,
        2. saves the return value as ``new_acc``
        3. recurses on all causes using ``new_acc``.

        For example, this collects the messages of all alternatives tried
        by a union scheme:

        >>> messages = []
        >>> def collect(failure, acc):
        ...     acc.append(failure.message)
        ...     return acc
        ...
        >>> latest_validation_failure().visit(collect, messages)

        :param fun: the function that will be called on each element of the failure tree during the visit
        :type fun: :obj:`~typing.Callable`\ [[:class:`ValidationFailure`, ``Acc``], ``Acc``]
        :param acc: the initial value for the accumulator
        :type acc: any type ``Acc``
        """
        new_acc = fun(self, acc)
        for cause in self.causes:
            cause.visit(fun, new_acc)

    def rich_print(self) -> None:
        r"""
        Pretty-prints the validation failure tree using `rich <https://github.com/willmcgugan/rich>`_:

        >>> from runtype import is_valid, latest_validation_failure
        >>> is_valid({"id": "5"}, {"id": [Number, re.compile("^a")]})
        False
        >>> latest_validation_failure().rich_print()
        Failure tree
        └── Invalid value for 'id' (value: '5')
            ├── 'id' should be number (value: '5')
            └── Invalid value for 'id' (value: '5')

        Raises :obj:`ModuleNotFoundError` if `rich <https://github.com/willmcgugan/rich>`_ is not installed.
        """
        # pylint: disable = import-outside-toplevel
        import rich
        from rich.tree import Tree
        from rich.text import Text

        failure_tree = Tree("Failure tree")

        def tree_builder(failure: ValidationFailure, acc: Tree) -> Tree:
            label = Text(f"{failure.message} (value: {failure.val!r})")
            return acc.add(label)

        self.visit(tree_builder, failure_tree)
        rich.print(failure_tree)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        causes_str = ""
        if self.causes:
            causes_str = ", " + ", ".join(repr(cause) for cause in self.causes)
        return (
            f"{type(self).__name__}({self.val!r}, {_scheme_str(self.scheme)}, "
            f"{self.path!r}{causes_str})"
        )


class KindValidationFailure(ValidationFailure):
    """
    Validation failure for a value of the wrong kind, e.g. ``'id' should be number``.
    """

    _expected: str

    def __new__(cls, val: Any, scheme: Any, path: str, expected: str) -> Self:
        instance = super().__new__(cls, val, scheme, path)
        instance._expected = expected
        return instance

    @property
    def expected(self) -> str:
        """Name of the kind of value expected at :attr:`path`."""
        return self._expected

    @property
    def message(self) -> str:
        return f"'{render_path(self.path)}' should be {self.expected}"


class InstanceValidationFailure(ValidationFailure):
    """
    Validation failure for a value which is not an instance of the class in the scheme.
    """

    @property
    def message(self) -> str:
        return (
            f"Value of '{render_path(self.path)}' is not instance of "
            f"{self.scheme.__name__}"
        )


class UnionValidationFailure(ValidationFailure):
    """
    Validation failure arising from a union scheme, where no alternative matched.
    The causes are the failures of all alternatives, in order; the message is
    the message of the last one.
    """

    def __new__(
        cls, val: Any, scheme: Any, path: str, *causes: ValidationFailure
    ) -> Self:
        assert causes, "Union failure requires at least one cause."
        return super().__new__(cls, val, scheme, path, *causes)

    @property
    def message(self) -> str:
        return self.causes[-1].message


class UnsupportedSchemeValidationFailure(ValidationFailure):
    """
    Failure for a scheme node that cannot be validated against.
    """

    @property
    def message(self) -> str:
        return f"Unsupported validator for '{render_path(self.path)}'"


def get_validation_failure(err: TypeError) -> ValidationFailure:
    """
    Programmatic access to the validation failure tree for a validation error.

    >>> from runtype import validate, get_validation_failure
    >>> try:
    ...     validate({"tags": ["x", 2]}, {"tags": [String]})
    ... except TypeError as err:
    ...     validation_failure = get_validation_failure(err)
    ...
    >>> validation_failure
    KindValidationFailure(2, str, 'tags[1]')

    :param err: error raised by :func:`~runtype.validation.validate`
    :type err: :obj:`TypeError`

    Raises :obj:`TypeError` if the given error ``err`` is not a :obj:`TypeError`.
    Raises :obj:`ValueError` if no validation failure data is available (when ``err`` is not a validation error raised by this library).
    """
    if not isinstance(err, TypeError):
        raise TypeError(f"Expected TypeError, found {type(err)}")
    if not hasattr(err, "validation_failure"):
        raise ValueError("TypeError given is not a validation error.")
    validation_failure = getattr(err, "validation_failure")
    if not isinstance(validation_failure, ValidationFailure):
        raise ValueError("TypeError given is not a validation error.")
    return validation_failure


_latest_validation_failure: ContextVar[Optional[ValidationFailure]] = (
    ContextVar("_latest_validation_failure", default=None)
)


def latest_validation_failure() -> Optional[ValidationFailure]:
    """
    Programmatic access to the validation failure tree for the latest validation call.

    Failures recorded by ``is_valid`` are kept in a context-local slot, which
    is read and cleared by this call. In an interactive session, an uncaught
    :class:`ValidationError` left in :obj:`sys.last_value` takes precedence,
    so the function should be called right after the error is reported.

    >>> from runtype import validate, latest_validation_failure
    >>> validate({"id": 5}, {"id": Number, "name": String})
    ValidationError: 'name' should be string
    >>> latest_validation_failure()
    KindValidationFailure(None, str, 'name')

    This validation failure information is also set by
    ``is_valid`` in case of failed validation,
    even though no error is raised.
    """
    validation_err: Optional[ValidationError] = None
    try:
        err = sys.last_value  # pylint: disable = no-member
        if isinstance(err, ValidationError):
            validation_err = err
    except AttributeError:
        pass
    latest_failure = _set_latest_validation_failure(None)
    if validation_err is not None:
        return get_validation_failure(validation_err)
    return latest_failure


def _set_latest_validation_failure(
    failure: Optional[ValidationFailure],
) -> Optional[ValidationFailure]:
    """
    Sets a new value for the latest validation failure and returns
    the previous value.
    """
    prev_failure = _latest_validation_failure.get()
    _latest_validation_failure.set(failure)
    return prev_failure
