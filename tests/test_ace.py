import struct
import uuid

import pytest

from ms_winstructs.core.decode_policy import AnomalyKind, DecodePolicy
from ms_winstructs.exceptions import (
    AceBodyOverrunException,
    OutOfBoundsException,
    SecurityDescriptorEncodeException,
    SizeMismatchException,
)
from ms_winstructs.security.ace import (
    ACE,
    ACE_TYPE_MAP,
    ACE_TYPES,
    AccessAllowedAce,
    AccessAllowedCallbackAce,
    AccessAllowedObjectAce,
    AccessDeniedAce,
    AccessDeniedObjectAce,
    RawAceBody,
    SystemAuditAce,
)
from ms_winstructs.security.security_constants import (
    ACE_SIZE,
    ACE_TYPE,
    ACE_TYPE_NAME,
    AccessMask,
    AceFlags,
    AceType,
    ObjectAceFlags,
)
from ms_winstructs.security.sid import ObjectSid

USER_CLASS_GUID = uuid.UUID("bf967aba-0de6-11d0-a285-00aa003049e2")
INET_ORG_PERSON_GUID = uuid.UUID("4828cc14-1437-45bc-9b07-ad6f015e5f28")


def _ace_header(ace_type: int, flags: int, size: int) -> bytes:
    return struct.pack("<BBH", ace_type, flags, size)


def test_decode_access_allowed(system_allowed_ace_bytes: bytes) -> None:
    ace = ACE.from_bytes(system_allowed_ace_bytes)

    assert ace.ace_type == AceType.ACCESS_ALLOWED.value
    assert ace.ace_type_name == "ACCESS_ALLOWED"
    assert ace.ace_flags == 0
    assert ace.size == 20
    assert isinstance(ace.body, AccessAllowedAce)
    assert ace.mask == 1
    assert str(ace.sid) == "S-1-5-18"
    assert ace.body.application_data == b""
    assert ace.get_data() == system_allowed_ace_bytes


def test_decode_access_denied_with_inheritance(everyone_sid_bytes: bytes) -> None:
    data = _ace_header(0x01, 0x03, 20) + struct.pack("<L", 0x00010000) + everyone_sid_bytes

    ace = ACE.from_bytes(data)

    assert isinstance(ace.body, AccessDeniedAce)
    assert ace.has_flag(AceFlags.OBJECT_INHERIT_ACE)
    assert ace.has_flag(AceFlags.CONTAINER_INHERIT_ACE)
    assert not ace.has_flag(AceFlags.INHERITED_ACE)
    assert ace.body.has_privilege(AccessMask.DELETE)
    assert ace.get_data() == data


def test_decode_object_ace_with_both_guids(everyone_sid_bytes: bytes) -> None:
    body = (
        struct.pack("<LL", 0x100, 0x3)
        + USER_CLASS_GUID.bytes_le
        + INET_ORG_PERSON_GUID.bytes_le
        + everyone_sid_bytes
    )
    data = _ace_header(0x05, 0x00, 4 + len(body)) + body

    ace = ACE.from_bytes(data)

    assert ace.size == 56
    assert isinstance(ace.body, AccessAllowedObjectAce)
    assert ace.body.object_type == USER_CLASS_GUID
    assert ace.body.inherited_object_type == INET_ORG_PERSON_GUID
    assert ace.body.has_privilege(AccessMask.ADS_RIGHT_DS_CONTROL_ACCESS)
    assert str(ace.sid) == "S-1-1-0"
    assert ace.get_data() == data


def test_decode_object_ace_with_only_inherited_guid(everyone_sid_bytes: bytes) -> None:
    body = struct.pack("<LL", 0x10, 0x2) + INET_ORG_PERSON_GUID.bytes_le + everyone_sid_bytes
    data = _ace_header(0x06, 0x12, 4 + len(body)) + body

    ace = ACE.from_bytes(data)

    assert isinstance(ace.body, AccessDeniedObjectAce)
    assert ace.body.object_type is None
    assert ace.body.inherited_object_type == INET_ORG_PERSON_GUID
    assert ace.body.has_flag(ObjectAceFlags.ACE_INHERITED_OBJECT_TYPE_PRESENT)
    assert ace.get_data() == data


def test_decode_object_ace_without_guids(everyone_sid_bytes: bytes) -> None:
    body = struct.pack("<LL", 0x10, 0x0) + everyone_sid_bytes
    data = _ace_header(0x05, 0x00, 4 + len(body)) + body

    ace = ACE.from_bytes(data)

    assert ace.size == 24
    assert ace.body.object_type is None
    assert ace.body.inherited_object_type is None
    assert ace.get_data() == data


def test_callback_ace_keeps_application_data(system_sid_bytes: bytes) -> None:
    condition = b"artx\x00\x00\x00\x00"
    data = _ace_header(0x09, 0x00, 4 + 4 + 12 + 8) + struct.pack("<L", 0x1) + system_sid_bytes + condition

    ace = ACE.from_bytes(data)

    assert isinstance(ace.body, AccessAllowedCallbackAce)
    assert ace.body.application_data == condition
    assert ace.get_data() == data


def test_slack_after_sid_is_kept(system_sid_bytes: bytes) -> None:
    data = _ace_header(0x00, 0x00, 24) + struct.pack("<L", 0x1) + system_sid_bytes + b"\x00" * 4

    ace = ACE.from_bytes(data)

    assert ace.body.application_data == b"\x00" * 4
    assert ace.size == 24
    assert ace.get_data() == data
    assert [a.kind for a in ace.body.own_anomalies] == [AnomalyKind.SIZE_MISMATCH]
    assert [a.kind for a in ace.anomalies] == [AnomalyKind.SIZE_MISMATCH]


def test_slack_after_sid_is_an_error_when_strict(system_sid_bytes: bytes) -> None:
    data = _ace_header(0x00, 0x00, 24) + struct.pack("<L", 0x1) + system_sid_bytes + b"\xde\xad\xbe\xef"

    with pytest.raises(SizeMismatchException):
        ACE.from_bytes(data, DecodePolicy.strict_policy())


def test_slack_after_object_ace_sid(everyone_sid_bytes: bytes) -> None:
    body = struct.pack("<LL", 0x10, 0x0) + everyone_sid_bytes + b"\xde\xad\xbe\xef"
    data = _ace_header(0x05, 0x00, 4 + len(body)) + body

    ace = ACE.from_bytes(data)

    assert ace.body.application_data == b"\xde\xad\xbe\xef"
    assert [a.kind for a in ace.anomalies] == [AnomalyKind.SIZE_MISMATCH]
    assert ace.get_data() == data

    with pytest.raises(SizeMismatchException):
        ACE.from_bytes(data, DecodePolicy(strict=True))


def test_callback_application_data_is_not_slack(system_sid_bytes: bytes) -> None:
    condition = b"artx\x00\x00\x00\x00"
    data = _ace_header(0x09, 0x00, 4 + 4 + 12 + 8) + struct.pack("<L", 0x1) + system_sid_bytes + condition

    ace = ACE.from_bytes(data, DecodePolicy.strict_policy())

    assert ace.anomalies == ()
    assert ace.body.application_data == condition


@pytest.mark.parametrize("ace_type, name", [
    (0x04, "ACCESS_ALLOWED_COMPOUND"),
    (0x42, "UNKNOWN_TYPE_0x42"),
    (0xFF, "UNKNOWN_TYPE_0xFF"),
])
def test_raw_body_is_preserved(ace_type: int, name: str) -> None:
    data = _ace_header(ace_type, 0x10, 8) + b"\xde\xad\xbe\xef"

    ace = ACE.from_bytes(data)

    assert isinstance(ace.body, RawAceBody)
    assert ace.body.raw_data == b"\xde\xad\xbe\xef"
    assert ace.ace_type_name == name
    assert ace.sid is None
    assert ace.mask is None
    assert ace.get_data() == data


def test_header_only_raw_ace() -> None:
    data = _ace_header(0x42, 0x00, 4)

    ace = ACE.from_bytes(data)

    assert ace.body.raw_data == b""
    assert ace.get_data() == data


def test_body_overruns_declared_size(system_sid_bytes: bytes) -> None:
    # a basic body with a one sub-authority SID needs 16 bytes, but the header leaves room for 12
    data = _ace_header(0x00, 0x00, 16) + struct.pack("<L", 0x1) + system_sid_bytes

    with pytest.raises(AceBodyOverrunException):
        ACE.from_bytes(data)


def test_object_guid_overruns_declared_size(everyone_sid_bytes: bytes) -> None:
    body = struct.pack("<LL", 0x10, 0x1) + USER_CLASS_GUID.bytes_le + everyone_sid_bytes
    data = _ace_header(0x05, 0x00, 16) + body

    with pytest.raises(AceBodyOverrunException):
        ACE.from_bytes(data)


@pytest.mark.parametrize("size", [0, 1, 3])
def test_size_smaller_than_header(size: int) -> None:
    with pytest.raises(AceBodyOverrunException):
        ACE.from_bytes(_ace_header(0x00, 0x00, size) + b"\x00" * 32)


def test_size_larger_than_buffer(system_allowed_ace_bytes: bytes) -> None:
    data = _ace_header(0x00, 0x00, 40) + system_allowed_ace_bytes[4:]

    with pytest.raises(OutOfBoundsException):
        ACE.from_bytes(data)


def test_truncated(system_allowed_ace_bytes: bytes) -> None:
    for end in range(len(system_allowed_ace_bytes)):
        with pytest.raises(OutOfBoundsException):
            ACE.from_bytes(system_allowed_ace_bytes[:end])


def test_sid_anomalies_surface_on_ace() -> None:
    sid = b"\x03\x01\x00\x00\x00\x00\x00\x05\x12\x00\x00\x00"
    data = _ace_header(0x00, 0x00, 20) + struct.pack("<L", 0x1) + sid

    ace = ACE.from_bytes(data)

    assert ace.own_anomalies == ()
    assert [a.kind for a in ace.anomalies] == [AnomalyKind.INVALID_REVISION]


def test_create_computes_size() -> None:
    body = AccessAllowedAce.create(AccessMask.GENERIC_READ, ObjectSid.create(5, [18]))

    ace = ACE.create(body, ace_flags=AceFlags.CONTAINER_INHERIT_ACE)

    assert ace.ace_type == 0x00
    assert ace.ace_flags == 0x02
    assert ace[ACE_SIZE] == 20
    assert ace.get_declared(ACE_SIZE) is None
    assert ace.get_data()[:4] == b"\x00\x02\x14\x00"
    assert ace.get_data()[4:8] == b"\x00\x00\x00\x80"


def test_create_raw_requires_type() -> None:
    with pytest.raises(SecurityDescriptorEncodeException):
        ACE.create(RawAceBody.create(b"\x00"))

    ace = ACE.create(RawAceBody.create(b"\x00"), ace_type=0x42)
    assert ace.get_data() == b"\x42\x00\x05\x00\x00"


def test_type_must_match_body() -> None:
    body = AccessAllowedAce.create(0x1, ObjectSid.create(5, [18]))

    with pytest.raises(SecurityDescriptorEncodeException):
        ACE.create(body, ace_type=AceType.ACCESS_DENIED.value)


def test_body_must_be_structure() -> None:
    with pytest.raises(SecurityDescriptorEncodeException):
        ACE.create(b"\x01\x00\x00\x00", ace_type=0x00)


def test_basic_body_requires_sid() -> None:
    with pytest.raises(SecurityDescriptorEncodeException):
        AccessAllowedAce.create(0x1, "S-1-5-18")


@pytest.mark.parametrize("flags, object_type, inherited_object_type, expected", [
    (0x0, USER_CLASS_GUID, None, 0x1),
    (0x0, None, INET_ORG_PERSON_GUID, 0x2),
    (0x0, str(USER_CLASS_GUID), INET_ORG_PERSON_GUID, 0x3),
    (0x3, None, None, 0x0),
    (0x4, USER_CLASS_GUID, None, 0x5),
])
def test_object_presence_flags_follow_guids(flags: int, object_type, inherited_object_type, expected: int) -> None:
    body = AccessAllowedObjectAce.create(0x100, ObjectSid.create(1, [0]), object_type=object_type,
                                         inherited_object_type=inherited_object_type, flags=flags)

    assert body.flags == expected


def test_object_ace_invalid_guid() -> None:
    with pytest.raises(SecurityDescriptorEncodeException):
        AccessAllowedObjectAce.create(0x100, ObjectSid.create(1, [0]), object_type="not a guid")


@pytest.mark.parametrize("body_class", ACE_TYPES)
def test_every_known_type(body_class) -> None:
    body = body_class.create(0x1, ObjectSid.create(5, [18]))
    ace = ACE.create(body)

    decoded = ACE.from_bytes(ace.get_data())

    assert type(decoded.body) is body_class
    assert ACE_TYPE_MAP[decoded.ace_type] is body_class
    assert decoded == ace


def test_compound_type_is_not_mapped() -> None:
    assert AceType.ACCESS_ALLOWED_COMPOUND.value not in ACE_TYPE_MAP


def test_equality_is_by_type_and_bytes(system_sid_bytes: bytes) -> None:
    sid = ObjectSid.from_bytes(system_sid_bytes)

    assert AccessAllowedAce.create(0x1, sid) != SystemAuditAce.create(0x1, sid)
    assert AccessAllowedAce.create(0x1, sid) == AccessAllowedAce.create(0x1, sid)


def test_to_dict(everyone_sid_bytes: bytes) -> None:
    body = AccessAllowedObjectAce.create(AccessMask.ADS_RIGHT_DS_READ_PROP, ObjectSid.from_bytes(everyone_sid_bytes),
                                         object_type=USER_CLASS_GUID)
    ace = ACE.create(body, ace_flags=AceFlags.INHERITED_ACE)

    rendered = ace.to_dict()

    assert rendered[ACE_TYPE] == 0x05
    assert rendered[ACE_TYPE_NAME] == "ACCESS_ALLOWED_OBJECT"
    assert rendered["AceFlags"] == ["INHERITED_ACE"]
    assert rendered["AceSize"] == 40
    assert rendered["Ace"]["Sid"] == "S-1-1-0"
    assert rendered["Ace"]["ObjectType"] == str(USER_CLASS_GUID)
    assert rendered["Ace"]["InheritedObjectType"] is None
    assert rendered["Ace"]["MaskNames"] == ["ADS_RIGHT_DS_READ_PROP"]
