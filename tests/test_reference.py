import dataclasses
import uuid

import pytest

from gobe.reference import Reference, new_reference


def test_name_is_kept():
    assert new_reference("service").name == "service"


def test_ids_are_unique():
    assert new_reference("a").id != new_reference("a").id
    assert isinstance(new_reference("a").id, uuid.UUID) and new_reference("b").name == "b"


def test_string_form():
    ref = new_reference("svc")
    assert str(ref) == f"ID: {ref.id}, Name: svc"


def test_empty_name_uses_caller():
    ref = new_reference("")
    assert "test_empty_name_uses_caller:" in ref.name


def test_usable_as_key():
    ref = new_reference("k")
    table = {ref: 1}
    assert table[Reference("k", ref.id)] == 1


def test_is_immutable():
    ref = new_reference("k")
    with pytest.raises(dataclasses.FrozenInstanceError):
        ref.name = "other"
    assert ref.name == "k"