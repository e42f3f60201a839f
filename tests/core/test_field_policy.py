"""Field Policy Resolver — verifies descriptor derivation and caching.

Tests cover:
    - Record wire names are snake_case of the attribute name
    - plain BaseModel wire names are the attribute names pydantic reads
    - explicit alias overrides the convention
    - Field(exclude=True) marks the field suppressed
    - read/write rights and omit_empty come from FieldPolicy metadata
    - embedded fields require a record type
    - describe() is cached per type and rejects non-records
"""

from typing import Annotated

import pytest
from pydantic import Field

from chopshop.core.errors import TypeSystemError
from chopshop.core.field_policy import FieldPolicy, describe
from chopshop.core.records import Record
from tests.core.sample_records import Holder, Named, Options, Outer, Place, Plain, Renamed


def _by_attr(record_type):
    return {d.attr: d for d in describe(record_type)}


def test_wire_name_convention():
    class Names(Record):
        name: str = ""
        displayName: str = ""
        UserID: int = 0
        display_name_2: str = ""

    assert [d.wire_name for d in describe(Names)] == [
        "name", "display_name", "user_id", "display_name_2",
    ]


def test_plain_model_keeps_attribute_names():
    d = _by_attr(Plain)["firstName"]
    assert d.wire_name == "firstName"
    assert d.input_key == "firstName"


def test_descriptors_follow_declaration_order():
    assert [d.attr for d in describe(Named)] == ["name", "secret"]


def test_camel_case_attribute_gets_snake_wire_name():
    assert _by_attr(Renamed)["userName"].wire_name == "user_name"


def test_explicit_alias_overrides_convention():
    assert _by_attr(Renamed)["display"].wire_name == "shown_as"
    assert _by_attr(Renamed)["display"].input_key == "shown_as"


def test_exclude_marks_field_suppressed():
    d = _by_attr(Renamed)["internal_note"]
    assert d.suppressed is True
    assert d.wire_name is None


def test_rights_are_read_from_field_policy():
    d = _by_attr(Named)["secret"]
    assert d.read_right == "admin"
    assert d.write_right == "admin"
    assert _by_attr(Named)["name"].read_right is None
    assert _by_attr(Named)["name"].write_right is None


def test_omit_empty_only_when_requested():
    options = _by_attr(Options)
    assert options["nickname"].omit_empty is True
    assert options["link"].omit_empty is False


def test_embedded_field_is_flagged():
    d = _by_attr(Outer)["middle"]
    assert d.embedded is True
    assert d.recursible is True


def test_custom_decoding_record_is_atomic():
    place = _by_attr(Place)
    assert place["position"].atomic is True
    assert place["position"].recursible is False
    assert place["address"].recursible is True


def test_frozen_record_is_atomic():
    assert _by_attr(Holder)["frozen"].atomic is True


def test_optional_record_is_recursible():
    d = _by_attr(Place)["backup_address"]
    assert d.record_type is not None
    assert d.optional is True
    assert d.recursible is True
    assert _by_attr(Place)["address"].optional is False


def test_optional_scalar_is_not_a_record():
    assert _by_attr(Place)["visited_at"].record_type is None


def test_optional_embedded_record_is_a_type_system_error():
    class Broken(Record):
        base: Annotated[Plain | None, FieldPolicy(embedded=True)] = None

    with pytest.raises(TypeSystemError):
        describe(Broken)


def test_embedding_a_non_record_is_a_type_system_error():
    class Broken(Record):
        value: Annotated[int, FieldPolicy(embedded=True)] = 0

    with pytest.raises(TypeSystemError):
        describe(Broken)


def test_describe_rejects_non_record_types():
    with pytest.raises(TypeSystemError):
        describe(dict)


def test_describe_is_cached_per_type():
    assert describe(Named) is describe(Named)


def test_last_field_policy_wins():
    class Twice(Record):
        value: Annotated[str, FieldPolicy(read_right="a"), FieldPolicy(read_right="b")] = Field("")

    assert _by_attr(Twice)["value"].read_right == "b"
