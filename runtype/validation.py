"""
    Core scheme validation functionality.
"""

from __future__ import annotations

import typing
from typing import Any, Iterable, Iterator, Mapping

from .inspector import SchemeInspector
from .scheme import (
    is_array,
    is_number,
    is_plain_object,
    resolve_alias,
    scheme_kind,
)
from .validation_failure import (
    InstanceValidationFailure,
    KindValidationFailure,
    UnionValidationFailure,
    UnsupportedSchemeError,
    UnsupportedSchemeValidationFailure,
    ValidationError,
    ValidationFailure,
    _set_latest_validation_failure,
)


def _field_path(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def _idx_path(path: str, idx: int) -> str:
    return f"{path}[{idx}]"


def _kind_error(val: Any, scheme: Any, path: str, expected: str) -> ValidationError:
    """
    Error arising from ``val`` not being of the kind of value expected at ``path``.
    """
    return ValidationError(KindValidationFailure(val, scheme, path, expected))


def _instance_error(val: Any, scheme: type, path: str) -> ValidationError:
    return ValidationError(InstanceValidationFailure(val, scheme, path))


def _invalid_value_error(val: Any, scheme: Any, path: str) -> ValidationError:
    return ValidationError(ValidationFailure(val, scheme, path))


def _union_error(
    val: Any, scheme: Any, path: str, *errors: ValidationError
) -> ValidationError:
    """
    Error arising from ``val`` not matching any alternative of a union scheme.
    The failures of all alternatives are included as causes.
    """
    causes = tuple(error.validation_failure for error in errors)
    return ValidationError(UnionValidationFailure(val, scheme, path, *causes))


def _unsupported_scheme_error(
    val: Any, scheme: Any, path: str
) -> UnsupportedSchemeError:
    return UnsupportedSchemeError(
        UnsupportedSchemeValidationFailure(val, scheme, path)
    )


def _validate_mapping(val: Any, scheme: Mapping[Any, Any], path: str) -> dict[Any, Any]:
    """
    Mapping validation: recursive validation of all fields declared by the scheme,
    in declaration order. Fields missing from ``val`` are validated as :obj:`None`,
    fields not declared by the scheme are dropped.
    """
    if not is_plain_object(val):
        raise _kind_error(val, scheme, path, "plain object")
    return {
        key: validate(val.get(key), field_scheme, _field_path(path, key))
        for key, field_scheme in scheme.items()
    }


def _validate_array(val: Any, scheme: list[Any], path: str) -> list[Any]:
    """
    Array validation: recursive validation of all items against the single item scheme.
    """
    if not is_array(val):
        raise _kind_error(val, scheme, path, "array")
    item_scheme = scheme[0]
    return [
        validate(item, item_scheme, _idx_path(path, idx))
        for idx, item in enumerate(val)
    ]


def _validate_union(val: Any, scheme: list[Any], path: str) -> Any:
    """
    Union validation. Each alternative ``s`` listed in the scheme is tried in order:

    - if ``val`` is valid for ``s``, the validated value is returned immediately
    - otherwise, moves to the next ``s``

    If ``val`` is not valid for any of the alternatives, a validation error is
    raised with the message of the last alternative.
    Unsupported alternatives are scheme bugs, not mismatches: their error
    propagates immediately.
    """
    member_errors: typing.List[ValidationError] = []
    for member_scheme in scheme:
        try:
            return validate(val, member_scheme, path)
        except UnsupportedSchemeError:
            raise
        except ValidationError as e:
            member_errors.append(e)
    raise _union_error(val, scheme, path, *member_errors)


def validate(val: Any, scheme: Any, path: str = "") -> Any:
    """
    Performs runtime validation of the value ``val`` against ``scheme``.
    The function raises :class:`~runtype.validation_failure.ValidationError`
    upon failure and returns the validated value upon success:
    mappings and arrays are rebuilt following the shape of the scheme,
    all other values are returned as they are.

    The error message names the path of the first offending value, e.g.

        >>> from runtype import validate, Number, String
        >>> validate({"id": 5, "tags": ["x", 2]}, {"id": Number, "tags": [String]})
        ValidationError: 'tags[1]' should be string

    :param val: the value to be validated
    :type val: :obj:`~typing.Any`
    :param scheme: the scheme to validate against
    :type scheme: :obj:`~typing.Any`
    :param path: the path label of ``val``, empty at the root
    :type path: :obj:`str`
    :raises ValidationError: if ``val`` does not match ``scheme``
    :raises UnsupportedSchemeError: if ``scheme`` contains a node which cannot be validated against

    """
    # pylint: disable = too-many-return-statements, too-many-branches
    kind = scheme_kind(scheme)
    if kind == "number":
        if is_number(val):
            return val
        raise _kind_error(val, scheme, path, "number")
    if kind == "string":
        if isinstance(val, str):
            return val
        raise _kind_error(val, scheme, path, "string")
    if kind == "boolean":
        if isinstance(val, bool):
            return val
        raise _kind_error(val, scheme, path, "boolean")
    if kind == "class":
        if isinstance(val, scheme):
            return val
        raise _instance_error(val, scheme, path)
    if kind == "function":
        if callable(val):
            return val
        raise _kind_error(val, scheme, path, "function")
    if kind == "object":
        if is_plain_object(val):
            return val
        raise _kind_error(val, scheme, path, "plain object")
    if kind == "predicate":
        if scheme(val):
            return val
        raise _invalid_value_error(val, scheme, path)
    if kind == "regex":
        if not isinstance(val, str):
            raise _kind_error(val, scheme, path, "string")
        if scheme.search(val) is None:
            raise _invalid_value_error(val, scheme, path)
        return val
    # recursive cases
    if kind == "mapping":
        return _validate_mapping(val, scheme, path)
    if kind == "array":
        return _validate_array(val, scheme, path)
    if kind == "union":
        return _validate_union(val, scheme, path)
    if kind == "alias":
        try:
            aliased_scheme = resolve_alias(scheme)
        except ValueError:
            raise _unsupported_scheme_error(val, scheme, path) from None
        return validate(val, aliased_scheme, path)
    raise _unsupported_scheme_error(val, scheme, path)


def inspect_scheme(scheme: Any) -> SchemeInspector:
    r"""
    Walks the given scheme once, without any data, and returns a
    :class:`~runtype.inspector.SchemeInspector` which records the classes
    referenced by the scheme and any unsupported node:

    >>> class Point: ...
    >>> res = inspect_scheme({"origin": Point, "path": [{"to": Point}], "label": String})
    >>> res.classes
    frozenset({<class '__main__.Point'>})
    >>> bool(res)
    True

    The inspector can be used wherever a boolean is expected, and indicates
    whether the scheme is supported or not:

    >>> inspect_scheme({"tags": []})
    The following scheme cannot be validated against:
    {
      tags: UnsupportedScheme[
          []
      ]
    }

    """
    inspector = SchemeInspector()
    inspector.walk(scheme)
    return inspector


def can_validate(scheme: Any) -> bool:
    """
    Checks whether validation is supported for the given scheme: if not,
    :func:`validate` will raise :obj:`UnsupportedSchemeError` when it reaches
    the unsupported node.

    :param scheme: the scheme to be checked for validation support
    :type scheme: :obj:`~typing.Any`

    """
    return bool(inspect_scheme(scheme))


def is_valid(val: Any, scheme: Any) -> bool:
    """
    Performs the same functionality as :func:`validate`, but returning
    :obj:`False` if validation is unsuccessful instead of raising error.

    In case of validation failure, detailed failure information is accessible
    via :func:`~runtype.validation_failure.latest_validation_failure`.
    Unsupported schemes still raise :obj:`UnsupportedSchemeError`.
    """
    try:
        validate(val, scheme)
        _set_latest_validation_failure(None)
        return True
    except UnsupportedSchemeError:
        raise
    except ValidationError as e:
        _set_latest_validation_failure(e.validation_failure)
        return False


def validated_iter(val: Iterable[Any], scheme: Any) -> Iterator[Any]:
    """
    Wraps the iterable ``val`` into an iterator which validates its items
    against ``scheme`` prior to them being yielded, at paths ``[0]``, ``[1]``, ...

    Items are validated lazily: an invalid item only raises when it is reached.
    """
    for idx, item in enumerate(val):
        yield validate(item, scheme, _idx_path("", idx))
