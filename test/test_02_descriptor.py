# pylint: disable = missing-docstring

import logging
from typing import Any

import pytest

from runtype import Model, Number, String, ValidationError
from runtype.descriptor import Field


class Point: ...


class Segment(Model):
    start = Field({"x": Number, "y": Number})
    end = Field({"x": Number, "y": Number})
    label = Field(String, readonly=True)


def _segment() -> Segment:
    return Segment({"start": {"x": 0, "y": 0}, "end": {"x": 1, "y": 1}, "label": "a"})


def test_scheme_from_fields() -> None:
    assert Segment.scheme == {
        "start": {"x": Number, "y": Number},
        "end": {"x": Number, "y": Number},
        "label": String,
    }
    assert list(Segment.scheme) == ["start", "end", "label"]


def test_field_attributes() -> None:
    assert isinstance(Segment.label, Field)
    assert Segment.label.name == "label"
    assert Segment.label.owner is Segment
    assert Segment.label.scheme is String
    assert Segment.label.readonly
    assert not Segment.start.readonly


def test_construction_validates_fields() -> None:
    with pytest.raises(ValidationError, match=r"^'start\.y' should be number$"):
        Segment({"start": {"x": 0, "y": "0"}, "end": {"x": 1, "y": 1}, "label": "a"})
    with pytest.raises(ValidationError, match=r"^'label' should be string$"):
        Segment({"start": {"x": 0, "y": 0}, "end": {"x": 1, "y": 1}})


def test_field_get() -> None:
    s = _segment()
    assert s.start == {"x": 0, "y": 0}
    assert s.label == "a"
    assert s.start is s.get_data()["start"]


@pytest.mark.parametrize("end", [{"x": 2, "y": 3}, {"x": 2.5, "y": -1, "z": 0}])
def test_field_set(end: Any) -> None:
    s = _segment()
    s.end = end
    assert s.end == {"x": end["x"], "y": end["y"]}
    assert s.end is not end
    assert s.get_data()["end"] is s.end


@pytest.mark.parametrize("end, message", [
    ({"x": 2, "y": "2"}, r"^'end\.y' should be number$"),
    ("2", r"^'end' should be plain object$"),
    (None, r"^'end' should be plain object$"),
])
def test_field_set_validation_error(end: Any, message: str) -> None:
    s = _segment()
    with pytest.raises(ValidationError, match=message):
        s.end = end
    assert s.end == {"x": 1, "y": 1}


def test_field_readonly() -> None:
    s = _segment()
    with pytest.raises(AttributeError):
        s.label = "b"
    assert s.label == "a"


def test_field_delete() -> None:
    s = _segment()
    with pytest.raises(AttributeError):
        del s.start
    with pytest.raises(AttributeError):
        del s.label
    assert s.start == {"x": 0, "y": 0}


def test_field_outside_model() -> None:
    # errors in __set_name__ are wrapped in RuntimeError before Python 3.12
    with pytest.raises((TypeError, RuntimeError)):
        class C:  # pylint: disable = unused-variable
            x = Field(Number)


def test_unsupported_field_scheme() -> None:
    with pytest.raises(TypeError):
        Field({"x": []})


def test_scheme_and_fields() -> None:
    with pytest.raises(TypeError):
        class C(Model):  # pylint: disable = unused-variable
            scheme = {"x": Number}
            y = Field(Number)


def test_field_inheritance() -> None:
    class LabelledPoint(Model):
        label = Field(String)

    class ColouredPoint(LabelledPoint):
        at = Field(Point)
        colour = Field([String, Number])

    assert ColouredPoint.scheme == {"label": String, "at": Point, "colour": [String, Number]}
    p = ColouredPoint({"label": "p", "at": Point(), "colour": 3})
    assert p.is_class(Point)
    assert p.colour == 3
    p.colour = "red"
    assert p.get_data()["colour"] == "red"
    with pytest.raises(ValidationError, match=r"^Value of 'at' is not instance of Point$"):
        p.at = None


def test_subclass_without_fields() -> None:
    class NamedSegment(Segment):
        pass
    assert NamedSegment.scheme is Segment.scheme
    s = NamedSegment({"start": {"x": 0, "y": 0}, "end": {"x": 1, "y": 1}, "label": "a"})
    assert s.label == "a"


def test_fields_scheme_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="runtype.model")

    class Tagged(Model):  # pylint: disable = unused-variable
        tags = Field([String])

    assert "Built scheme for Tagged from fields: ['tags']" in caplog.text
