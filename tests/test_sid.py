import struct

import pytest

from ms_winstructs.core.decode_policy import AnomalyKind, DecodePolicy
from ms_winstructs.exceptions import (
    InvalidRevisionException,
    InvalidSidStringException,
    OutOfBoundsException,
    SecurityDescriptorEncodeException,
)
from ms_winstructs.security.security_constants import REVISION, SID, SUB_AUTHORITY_COUNT
from ms_winstructs.security.sid import ObjectSid


def test_decode_single_sub_authority() -> None:
    sid = ObjectSid.from_bytes(b"\x01\x01\x00\x00\x00\x00\x00\x05\x15\x00\x00\x00")

    assert sid.revision == 1
    assert sid.sub_authority_count == 1
    assert sid.identifier_authority == 5
    assert sid.sub_authorities == [21]
    assert str(sid) == "S-1-5-21"
    assert sid.anomalies == ()


def test_decode_domain_sid(domain_user_sid_bytes: bytes) -> None:
    sid = ObjectSid.from_bytes(domain_user_sid_bytes)

    assert sid.to_canonical_string_format() == "S-1-5-21-4151808797-3430561092-2843464588-1104"
    assert sid.relative_identifier == 1104
    assert sid.get_data() == domain_user_sid_bytes
    assert len(sid) == 28


def test_decode_ignores_trailing_bytes(system_sid_bytes: bytes) -> None:
    sid = ObjectSid.from_bytes(system_sid_bytes + b"\xff\xff\xff\xff")

    assert str(sid) == "S-1-5-18"
    assert sid.get_data() == system_sid_bytes


def test_create_and_encode(administrators_sid_bytes: bytes) -> None:
    sid = ObjectSid.create(5, [32, 544])

    assert sid.get_data() == administrators_sid_bytes
    assert sid[SUB_AUTHORITY_COUNT] == 2
    assert sid.get_well_known_name() == "ADMINISTRATORS_BUILT_IN_GROUP"


def test_no_sub_authorities() -> None:
    sid = ObjectSid.create(5, [])

    assert sid.get_data() == b"\x01\x00\x00\x00\x00\x00\x00\x05"
    assert str(sid) == "S-1-5"
    assert sid.relative_identifier is None
    assert ObjectSid.from_bytes(sid.get_data()) == sid


def test_large_authority_is_hex() -> None:
    sid = ObjectSid.create(1 << 32, [7])

    assert str(sid) == "S-1-0x000100000000-7"
    assert ObjectSid.from_canonical_string_format("S-1-0x000100000000-7") == sid


def test_authority_below_hex_threshold_is_decimal() -> None:
    sid = ObjectSid.from_bytes(b"\x01\x00\x00\x00\xff\xff\xff\xff")

    assert str(sid) == "S-1-4294967295"


@pytest.mark.parametrize("value, expected", [
    ("S-1-5-18", "S-1-5-18"),
    ("s-1-5-18", "S-1-5-18"),
    ("S-1-5-32-544", "S-1-5-32-544"),
    ("S-1-5-21-4151808797-3430561092-2843464588-1104", "S-1-5-21-4151808797-3430561092-2843464588-1104"),
    ("S-1-0x5-18", "S-1-5-18"),
])
def test_parse_canonical_string(value: str, expected: str) -> None:
    assert ObjectSid.from_canonical_string_format(value).to_canonical_string_format() == expected


@pytest.mark.parametrize("value", [
    "",
    "S-1",
    "X-1-5-18",
    "S-1-5-",
    "S-1-five",
    "S-1-5-4294967296",
    "S-1-281474976710656",
    "S-1-5-1-2-3-4-5-6-7-8-9-10-11-12-13-14-15-16",
])
def test_parse_invalid_string(value: str) -> None:
    with pytest.raises(InvalidSidStringException):
        ObjectSid.from_canonical_string_format(value)


def test_parse_non_string() -> None:
    with pytest.raises(InvalidSidStringException):
        ObjectSid.from_canonical_string_format(b"S-1-5-18")


def test_unknown_revision_is_recorded() -> None:
    data = b"\x02\x01\x00\x00\x00\x00\x00\x05\x12\x00\x00\x00"

    sid = ObjectSid.from_bytes(data)

    assert sid.revision == 2
    assert [a.kind for a in sid.anomalies] == [AnomalyKind.INVALID_REVISION]
    assert sid.get_data() == data


def test_unknown_revision_enforced() -> None:
    data = b"\x02\x01\x00\x00\x00\x00\x00\x05\x12\x00\x00\x00"

    with pytest.raises(InvalidRevisionException):
        ObjectSid.from_bytes(data, DecodePolicy(enforce_known_revisions=True))


def test_too_many_sub_authorities_is_recorded_but_never_raised() -> None:
    data = b"\x01\x10\x00\x00\x00\x00\x00\x05" + struct.pack("<16L", *range(16))

    sid = ObjectSid.from_bytes(data, DecodePolicy.strict_policy())

    assert sid.sub_authority_count == 16
    assert sid.sub_authorities == list(range(16))
    assert [a.kind for a in sid.anomalies] == [AnomalyKind.SUB_AUTHORITY_COUNT]
    assert sid.get_data() == data
    # a copy isn't decoded, so it has to respect the limit
    with pytest.raises(SecurityDescriptorEncodeException):
        sid.copy_with({REVISION: 1})


def test_create_with_most_sub_authorities() -> None:
    sid = ObjectSid.create(5, list(range(15)))

    assert sid.sub_authority_count == 15
    assert len(sid.get_data()) == 8 + 4 * 15


def test_count_larger_than_data() -> None:
    data = b"\x01\x02\x00\x00\x00\x00\x00\x05\x12\x00\x00\x00"

    with pytest.raises(OutOfBoundsException):
        ObjectSid.from_bytes(data)


def test_truncated(domain_user_sid_bytes: bytes) -> None:
    for end in range(len(domain_user_sid_bytes)):
        with pytest.raises(OutOfBoundsException):
            ObjectSid.from_bytes(domain_user_sid_bytes[:end])


@pytest.mark.parametrize("authority, sub_authorities", [
    (-1, [1]),
    (1 << 48, [1]),
    (5, [1 << 32]),
    (5, [-1]),
    (5, ["18"]),
    (5, "18"),
    (5, list(range(16))),
    (5, list(range(256))),
])
def test_create_invalid(authority, sub_authorities) -> None:
    with pytest.raises(SecurityDescriptorEncodeException):
        ObjectSid.create(authority, sub_authorities)


def test_immutable(system_sid_bytes: bytes) -> None:
    sid = ObjectSid.from_bytes(system_sid_bytes)

    with pytest.raises(TypeError):
        sid[REVISION] = 2

    changed = sid.copy_with({REVISION: 2})
    assert changed.revision == 2
    assert sid.revision == 1
    assert changed != sid


def test_equality_and_hash(system_sid_bytes: bytes) -> None:
    decoded = ObjectSid.from_bytes(system_sid_bytes)
    created = ObjectSid.create(5, [18])

    assert decoded == created
    assert hash(decoded) == hash(created)
    assert decoded != "S-1-5-18"
    assert len({decoded, created}) == 1


def test_ldap_filter_format(system_sid_bytes: bytes) -> None:
    sid = ObjectSid.from_bytes(system_sid_bytes)

    assert sid.to_ldap_filter_string_format() == "\\01\\01\\00\\00\\00\\00\\00\\05\\12\\00\\00\\00"


def test_well_known_names(system_sid_bytes: bytes, everyone_sid_bytes: bytes) -> None:
    assert ObjectSid.from_bytes(system_sid_bytes).get_well_known_name() == "LOCAL_SYSTEM"
    assert ObjectSid.from_bytes(everyone_sid_bytes).get_well_known_name() == "EVERYONE"
    assert ObjectSid.create(5, [21, 1, 2, 3, 500]).get_well_known_name() is None


def test_render(system_sid_bytes: bytes) -> None:
    sid = ObjectSid.from_bytes(system_sid_bytes)

    assert sid.to_dict() == {SID: "S-1-5-18"}
    assert repr(sid) == "ObjectSid('S-1-5-18')"
