"""Structural Merger — verifies write policy and select-and-copy semantics.

Tests cover:
    - write_right fields untouched without the right, copied with it
    - permitted fields are overwritten even by default values (not a patch)
    - nested records merge recursively with their own write rights
    - optional records merge field by field when both sides are present
    - optional records are created or cleared only with every nested write right
    - custom-decoding and frozen records are copied wholesale
    - suppressed fields are still merged
    - mismatched or non-record values raise TypeSystemError
"""

import pytest

from chopshop.core.capabilities import Capabilities
from chopshop.core.errors import TypeSystemError
from chopshop.core.merger import merge, write_rights
from tests.core.sample_records import (
    Address, Coordinates, Frozen, Holder, Named, Options, Place, Plain, ReadOnlyForStaff,
    Renamed, Wrap,
)

ADMIN = Capabilities.for_principal("root", 1, ["admin"])
USER = Capabilities.for_principal("ada", 2, [])
VERIFIER = Capabilities.for_principal("vera", 3, ["verify"])


def test_gated_field_untouched_without_right():
    target = Named(name="old", secret="keep")
    merge(Named(name="new", secret="stolen"), target, USER)
    assert target.name == "new"
    assert target.secret == "keep"


def test_gated_field_copied_with_right():
    target = Named(name="old", secret="old")
    merge(Named(name="new", secret="new"), target, ADMIN)
    assert target.secret == "new"


def test_anonymous_merge_skips_gated_fields():
    target = ReadOnlyForStaff(title="keep", draft_note="old")
    merge(ReadOnlyForStaff(title="new", draft_note="new"), target, Capabilities.anonymous())
    assert target.title == "keep"
    assert target.draft_note == "new"


def test_permitted_fields_are_overwritten_with_defaults():
    target = Named(name="old")
    merge(Named(), target, USER)
    assert target.name == ""


def test_nested_record_merges_field_by_field():
    target = Place(address=Address(street="Old", postal_code="111"))
    original_address = target.address
    merge(Place(address=Address(street="New", postal_code="999")), target, USER)
    assert target.address is original_address
    assert target.address.street == "New"
    assert target.address.postal_code == "111"


def test_nested_write_right_honoured_when_held():
    target = Place(address=Address(street="Old", postal_code="111"))
    merge(Place(address=Address(street="New", postal_code="999")), target, VERIFIER)
    assert target.address.postal_code == "999"


def test_custom_decoding_leaf_copied_wholesale():
    incoming = Coordinates(lat=1.0, lng=2.0)
    target = Place()
    merge(Place(position=incoming), target, USER)
    assert target.position is incoming


def test_frozen_record_copied_wholesale():
    incoming = Frozen(code="x")
    target = Holder()
    merge(Holder(frozen=incoming), target, USER)
    assert target.frozen is incoming


def test_optional_record_merges_field_by_field():
    target = Place(backup_address=Address(street="Old", postal_code="111"))
    original = target.backup_address
    merge(Place(backup_address=Address(street="New", postal_code="999")), target, USER)
    assert target.backup_address is original
    assert target.backup_address.street == "New"
    assert target.backup_address.postal_code == "111"


def test_optional_record_nested_right_honoured_when_held():
    target = Place(backup_address=Address(street="Old", postal_code="111"))
    merge(Place(backup_address=Address(street="New", postal_code="999")), target, VERIFIER)
    assert target.backup_address.postal_code == "999"


def test_optional_record_not_created_without_nested_rights():
    target = Place()
    merge(Place(backup_address=Address(street="New", postal_code="999")), target, USER)
    assert target.backup_address is None


def test_optional_record_created_with_nested_rights():
    incoming = Address(street="New", postal_code="999")
    target = Place()
    merge(Place(backup_address=incoming), target, VERIFIER)
    assert target.backup_address is incoming


def test_optional_record_not_cleared_without_nested_rights():
    target = Place(backup_address=Address(street="Old", postal_code="111"))
    merge(Place(), target, USER)
    assert target.backup_address.postal_code == "111"


def test_optional_record_cleared_with_nested_rights():
    target = Place(backup_address=Address(street="Old"))
    merge(Place(), target, VERIFIER)
    assert target.backup_address is None


def test_optional_ungated_record_created_freely():
    incoming = Plain(firstName="B")
    target = Wrap()
    merge(Wrap(other=incoming), target, USER)
    assert target.other is incoming


def test_write_rights_collects_nested_rights():
    assert write_rights(Address) == {"verify"}
    assert write_rights(Place) == {"verify"}
    assert write_rights(Options) == {"admin"}
    assert write_rights(Wrap) == frozenset()


def test_suppressed_field_is_still_merged():
    target = Renamed(internal_note="old")
    merge(Renamed(internal_note="new"), target, USER)
    assert target.internal_note == "new"


def test_type_mismatch_is_type_system_error():
    with pytest.raises(TypeSystemError):
        merge(Named(), Place(), USER)


def test_non_record_target_is_type_system_error():
    with pytest.raises(TypeSystemError):
        merge(Named(), {"name": "x"}, USER)


def test_missing_nested_target_record_is_type_system_error():
    target = Place.model_construct(address=None)
    with pytest.raises(TypeSystemError):
        merge(Place(), target, USER)
