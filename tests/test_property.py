import pytest

from gobe.mapper import MapperError
from gobe.property import Property, PropertyValue
from gobe.telemetry import Telemetry
from gobe.validation import ValidationError, ValidationFunc, ValidationResult


def _positive(value, *args):
    return ValidationResult(value > 0, "positive check")


def test_property_value_get_set():
    pv = PropertyValue("count", 1)
    assert pv.get() == 1
    pv.set(5)
    assert pv.get() == 5
    assert pv.name == "count"


def test_property_value_set_none_raises():
    pv = PropertyValue("count", 1)
    with pytest.raises(ValueError):
        pv.set(None)
    assert pv.get() == 1


def test_property_value_validator_rejects():
    pv = PropertyValue("count", 1)
    pv.validation.add_validator(ValidationFunc(0, _positive))
    pv.set(3)
    assert pv.get() == 3
    with pytest.raises(ValidationError):
        pv.set(-2)
    assert pv.get() == 3


def test_property_value_clear_and_is_nil():
    pv = PropertyValue("item", "x")
    assert pv.is_nil() is False
    pv.clear()
    assert pv.is_nil() is True
    assert pv.get() is None


def test_property_value_serialize_nil_raises():
    pv = PropertyValue("empty")
    with pytest.raises(ValueError):
        pv.serialize("", "json")


def test_property_value_serialize_round_trip():
    pv = PropertyValue("cfg", {"a": 1})
    data = pv.serialize("", "json")
    other = PropertyValue("cfg2", {})
    other.deserialize(data, "json", "")
    assert other.get() == {"a": 1}


def test_property_value_deserialize_bad_format():
    pv = PropertyValue("cfg", {"a": 1})
    with pytest.raises(MapperError):
        pv.deserialize(b'{"a":1}', "nope", "")


def test_property_serialize_json():
    prop = Property("cfg", {"a": 1})
    assert prop.serialize("json") == b'{"a":1}'


def test_property_deserialize_merges():
    prop = Property("cfg", {"a": 1})
    prop.deserialize(b'{"b": 2}', "json")
    assert prop.value == {"a": 1, "b": 2}


def test_property_deserialize_empty_is_noop():
    prop = Property("cfg", {"a": 1})
    prop.deserialize(b"", "json")
    assert prop.value == {"a": 1}


def test_property_deserialize_into_none():
    prop = Property("cfg")
    prop.deserialize(b'{"k": "v"}', "json")
    assert prop.value == {"k": "v"}


def test_property_callback_called():
    seen = []
    prop = Property("cfg", 1, callback=seen.append)
    prop.value = 7
    assert seen == [7]
    assert prop.value == 7


def test_property_callback_error_is_ignored():
    def boom(value):
        raise RuntimeError("bad")

    prop = Property("cfg", 1, callback=boom)
    prop.value = 9
    assert prop.value == 9


def test_property_metrics():
    assert isinstance(Property("m", 1, with_metrics=True).metrics, Telemetry)
    assert Property("m", 1).metrics is None


def test_property_reference():
    prop = Property("named", 1)
    ref_id, ref_name = prop.reference
    assert ref_name == "named"
    assert ref_id == prop.prop.id


def test_property_save_and_load(tmp_path):
    path = tmp_path / "prop.yaml"
    prop = Property("cfg", {"host": "localhost", "port": 80})
    prop.save_to_file(path, "yaml")
    loaded = Property("cfg2", {})
    loaded.load_from_file(path, "yaml")
    assert loaded.value == {"host": "localhost", "port": 80}


def test_property_load_missing_file(tmp_path):
    prop = Property("cfg", {})
    with pytest.raises(FileNotFoundError):
        prop.load_from_file(tmp_path / "missing.json", "json")