import pytest

# S-1-5-18
SYSTEM_SID = b"\x01\x01\x00\x00\x00\x00\x00\x05\x12\x00\x00\x00"
# S-1-5-32-544
ADMINISTRATORS_SID = b"\x01\x02\x00\x00\x00\x00\x00\x05\x20\x00\x00\x00\x20\x02\x00\x00"
# S-1-1-0
EVERYONE_SID = b"\x01\x01\x00\x00\x00\x00\x00\x01\x00\x00\x00\x00"
# S-1-5-21-4151808797-3430561092-2843464588-1104
DOMAIN_USER_SID = (
    b"\x01\x05\x00\x00\x00\x00\x00\x05"
    b"\x15\x00\x00\x00\x1D\x93\x77\xF7"
    b"\x44\x35\x7A\xCC\x8C\xD3\x7B\xA9"
    b"\x50\x04\x00\x00"
)

# ACCESS_ALLOWED, no flags, 20 bytes, mask 0x1 for S-1-5-18
SYSTEM_ALLOWED_ACE = b"\x00\x00\x14\x00\x01\x00\x00\x00" + SYSTEM_SID

# revision 2, 28 bytes, one ACE
SYSTEM_DACL = b"\x02\x00\x1C\x00\x01\x00\x00\x00" + SYSTEM_ALLOWED_ACE

# A security descriptor laid out DACL first, then owner and group, the way windows often writes them
DACL_FIRST_SECURITY_DESCRIPTOR = (
    b"\x01\x00\x04\x80\x30\x00\x00\x00"
    b"\x3C\x00\x00\x00\x00\x00\x00\x00"
    b"\x14\x00\x00\x00"
    + SYSTEM_DACL
    + SYSTEM_SID
    + SYSTEM_SID
)

# The same security descriptor laid out owner, group, SACL, DACL
CANONICAL_SECURITY_DESCRIPTOR = (
    b"\x01\x00\x04\x80\x14\x00\x00\x00"
    b"\x20\x00\x00\x00\x00\x00\x00\x00"
    b"\x2C\x00\x00\x00"
    + SYSTEM_SID
    + SYSTEM_SID
    + SYSTEM_DACL
)


@pytest.fixture
def system_sid_bytes() -> bytes:
    return SYSTEM_SID


@pytest.fixture
def administrators_sid_bytes() -> bytes:
    return ADMINISTRATORS_SID


@pytest.fixture
def everyone_sid_bytes() -> bytes:
    return EVERYONE_SID


@pytest.fixture
def domain_user_sid_bytes() -> bytes:
    return DOMAIN_USER_SID


@pytest.fixture
def system_allowed_ace_bytes() -> bytes:
    return SYSTEM_ALLOWED_ACE


@pytest.fixture
def system_dacl_bytes() -> bytes:
    return SYSTEM_DACL


@pytest.fixture
def dacl_first_security_descriptor_bytes() -> bytes:
    return DACL_FIRST_SECURITY_DESCRIPTOR


@pytest.fixture
def canonical_security_descriptor_bytes() -> bytes:
    return CANONICAL_SECURITY_DESCRIPTOR
