# Created in October 2026
#
# Author: Azaria Zornberg
#
# Copyright 2026 - 2026 Azaria Zornberg
#
# This file is part of ms_winstructs
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from enum import Enum, IntFlag


# Constants related to Security Descriptor parsing

# Sacl and Dacl
SACL = 'Sacl'
DACL = 'Dacl'

# Offset constants
OFFSET_OWNER = 'OffsetOwner'
OFFSET_GROUP = 'OffsetGroup'
OFFSET_SACL = 'OffsetSacl'
OFFSET_DACL = 'OffsetDacl'

# SID constants
OWNER_SID = 'OwnerSid'
GROUP_SID = 'GroupSid'
SID = 'Sid'

# ACL constants
ACE_COUNT = 'AceCount'
ACES = 'Aces'
ACL_REVISION = 'AclRevision'
ACL_SIZE = 'AclSize'

# ACE constants
ACE_BODY = 'Ace'
ACE_FLAGS = 'AceFlags'
ACE_SIZE = 'AceSize'
ACE_TYPE = 'AceType'
ACE_TYPE_NAME = 'TypeName'

# Object authority constants
IDENTIFIER_AUTHORITY = 'IdentifierAuthority'
SUB_AUTHORITY = 'SubAuthority'
SUB_AUTHORITY_COUNT = 'SubAuthorityCount'

# Object type constants
INHERITED_OBJECT_TYPE = 'InheritedObjectType'
OBJECT_TYPE = 'ObjectType'

# General constants used a bit across structures
APPLICATION_DATA = 'ApplicationData'
CONTROL = 'Control'
FLAGS = 'Flags'
MASK = 'Mask'
RAW_DATA = 'RawData'
REVISION = 'Revision'
SBZ1 = 'Sbz1'
SBZ2 = 'Sbz2'

# Fixed sizes of the headers and pieces of structures, in bytes
ACE_HEADER_SIZE = 4
ACL_HEADER_SIZE = 8
SECURITY_DESCRIPTOR_HEADER_SIZE = 20
SID_HEADER_SIZE = 8
SUB_AUTHORITY_SIZE = 4
GUID_SIZE = 16

# SIDs can describe up to 15 sub-authorities. anything beyond that is malformed
MAX_SUB_AUTHORITIES = 15
# the identifier authority is 6 bytes
MAX_IDENTIFIER_AUTHORITY = (1 << 48) - 1
# authorities below this are printed in decimal in the canonical string form, and at or above it in hex
HEX_AUTHORITY_THRESHOLD = 1 << 32

# Revisions we know about. Anything else is decoded, but flagged
SID_REVISION = 1
ACL_REVISION_STANDARD = 2
ACL_REVISION_DS = 4
SECURITY_DESCRIPTOR_REVISION = 1
KNOWN_SID_REVISIONS = frozenset([SID_REVISION])
KNOWN_ACL_REVISIONS = frozenset([ACL_REVISION_STANDARD, ACL_REVISION_DS])
KNOWN_SECURITY_DESCRIPTOR_REVISIONS = frozenset([SECURITY_DESCRIPTOR_REVISION])


class AceType(Enum):
    """ ACE type tags, as described in MS-DTYP 2.4.4.1
    https://docs.microsoft.com/en-us/openspecs/windows_protocols/ms-dtyp/628ebb1d-c509-4ea0-a10f-77ef97ca4586
    """
    ACCESS_ALLOWED = 0x00
    ACCESS_DENIED = 0x01
    SYSTEM_AUDIT = 0x02
    SYSTEM_ALARM = 0x03
    ACCESS_ALLOWED_COMPOUND = 0x04
    ACCESS_ALLOWED_OBJECT = 0x05
    ACCESS_DENIED_OBJECT = 0x06
    SYSTEM_AUDIT_OBJECT = 0x07
    SYSTEM_ALARM_OBJECT = 0x08
    ACCESS_ALLOWED_CALLBACK = 0x09
    ACCESS_DENIED_CALLBACK = 0x0A
    ACCESS_ALLOWED_CALLBACK_OBJECT = 0x0B
    ACCESS_DENIED_CALLBACK_OBJECT = 0x0C
    SYSTEM_AUDIT_CALLBACK = 0x0D
    SYSTEM_ALARM_CALLBACK = 0x0E
    SYSTEM_AUDIT_CALLBACK_OBJECT = 0x0F
    SYSTEM_ALARM_CALLBACK_OBJECT = 0x10
    SYSTEM_MANDATORY_LABEL = 0x11
    SYSTEM_RESOURCE_ATTRIBUTE = 0x12
    SYSTEM_SCOPED_POLICY_ID = 0x13

    @classmethod
    def get_name_for_value(cls, val: int) -> str:
        """ The name of an ACE type tag, or a placeholder naming the raw tag if we don't know it. """
        try:
            return cls(val).name
        except ValueError:
            return 'UNKNOWN_TYPE_0x{:02X}'.format(val)


class AceFlags(IntFlag):
    """ ACE header flags, as described in MS-DTYP 2.4.4.1 """
    OBJECT_INHERIT_ACE = 0x01
    CONTAINER_INHERIT_ACE = 0x02
    NO_PROPAGATE_INHERIT_ACE = 0x04
    INHERIT_ONLY_ACE = 0x08
    INHERITED_ACE = 0x10
    SUCCESSFUL_ACCESS_ACE_FLAG = 0x40
    FAILED_ACCESS_ACE_FLAG = 0x80


class ObjectAceFlags(IntFlag):
    """ Flags in the body of object ACEs saying which of the optional GUIDs follow """
    ACE_OBJECT_TYPE_PRESENT = 0x01
    ACE_INHERITED_OBJECT_TYPE_PRESENT = 0x02


class AccessMask(IntFlag):
    """ ACCESS_MASK bits, as described in MS-DTYP 2.4.3, along with the directory service specific
    bits used by object ACEs in Active Directory.
    https://msdn.microsoft.com/en-us/library/cc230294.aspx
    """
    ADS_RIGHT_DS_CREATE_CHILD = 0x00000001
    ADS_RIGHT_DS_DELETE_CHILD = 0x00000002
    ADS_RIGHT_ACTRL_DS_LIST = 0x00000004
    ADS_RIGHT_DS_SELF = 0x00000008
    ADS_RIGHT_DS_READ_PROP = 0x00000010
    ADS_RIGHT_DS_WRITE_PROP = 0x00000020
    ADS_RIGHT_DS_DELETE_TREE = 0x00000040
    ADS_RIGHT_DS_LIST_OBJECT = 0x00000080
    ADS_RIGHT_DS_CONTROL_ACCESS = 0x00000100

    DELETE = 0x00010000
    READ_CONTROL = 0x00020000
    WRITE_DACL = 0x00040000
    WRITE_OWNER = 0x00080000
    SYNCHRONIZE = 0x00100000

    ACCESS_SYSTEM_SECURITY = 0x01000000
    MAXIMUM_ALLOWED = 0x02000000

    GENERIC_ALL = 0x10000000
    GENERIC_EXECUTE = 0x20000000
    GENERIC_WRITE = 0x40000000
    GENERIC_READ = 0x80000000


class SecurityDescriptorControl(IntFlag):
    """ Security descriptor control bits, as described in MS-DTYP 2.4.6 """
    SE_OWNER_DEFAULTED = 0x0001
    SE_GROUP_DEFAULTED = 0x0002
    SE_DACL_PRESENT = 0x0004
    SE_DACL_DEFAULTED = 0x0008
    SE_SACL_PRESENT = 0x0010
    SE_SACL_DEFAULTED = 0x0020
    SE_DACL_TRUSTED = 0x0040
    SE_SERVER_SECURITY = 0x0080
    SE_DACL_AUTO_INHERIT_REQ = 0x0100
    SE_SACL_AUTO_INHERIT_REQ = 0x0200
    SE_DACL_AUTO_INHERITED = 0x0400
    SE_SACL_AUTO_INHERITED = 0x0800
    SE_DACL_PROTECTED = 0x1000
    SE_SACL_PROTECTED = 0x2000
    SE_RM_CONTROL_VALID = 0x4000
    SE_SELF_RELATIVE = 0x8000


def get_flag_names(flag_class, value: int):
    """ Names of the members of an IntFlag class that are set in a value, in ascending bit order.
    Bits with no name are dropped.
    """
    return [member.name for member in flag_class if member.value & value == member.value]


# Windows has some "well known SIDs" that show up everywhere.
# These are independent of the actual domain
# see: https://docs.microsoft.com/en-us/windows/win32/secauthz/well-known-sids
# also see: https://docs.microsoft.com/en-us/windows/security/identity-protection/access-control/security-identifiers


class WellKnownSID(Enum):
    # The first 5 are universally well known even outside of windows, while the later ones are
    # only well-known within the windows security model
    NULL = 'S-1-0-0'
    EVERYONE = 'S-1-1-0'
    LOCAL = 'S-1-2-0'
    CREATOR_OWNER = 'S-1-3-0'
    CREATOR_GROUP = 'S-1-3-1'

    # the following all exist within the windows NT authority (S-1-5)
    SERVICE = 'S-1-5-6'
    ANONYMOUS = 'S-1-5-7'
    ENTERPRISE_CONTROLLERS = 'S-1-5-9'
    SELF = 'S-1-5-10'
    AUTHENTICATED_USERS = 'S-1-5-11'
    LOCAL_SYSTEM = 'S-1-5-18'
    LOCAL_SERVICE = 'S-1-5-19'
    NETWORK_SERVICE = 'S-1-5-20'

    # builtin groups
    ADMINISTRATORS_BUILT_IN_GROUP = 'S-1-5-32-544'
    USERS_BUILT_IN_GROUP = 'S-1-5-32-545'
    GUESTS_BUILT_IN_GROUP = 'S-1-5-32-546'
    POWER_USERS_BUILT_IN_GROUP = 'S-1-5-32-547'
    ACCOUNT_OPERATORS_BUILT_IN_GROUP = 'S-1-5-32-548'
    SERVER_OPERATORS_BUILT_IN_GROUP = 'S-1-5-32-549'
    PRINT_OPERATORS_BUILT_IN_GROUP = 'S-1-5-32-550'
    BACKUP_OPERATORS_BUILT_IN_GROUP = 'S-1-5-32-551'
    REPLICATORS_BUILT_IN_GROUP = 'S-1-5-32-552'
    REMOTE_DESKTOP_USERS_BUILT_IN_GROUP = 'S-1-5-32-555'
    NETWORK_CONFIG_OPERATORS_BUILT_IN_GROUP = 'S-1-5-32-556'
    REMOTE_MANAGEMENT_USERS_BUILT_IN_GROUP = 'S-1-5-32-580'
    ALL_SERVICES_BUILT_IN_GROUP = 'S-1-5-80-0'
    TRUSTED_INSTALLER = 'S-1-5-80-956008885-3418522649-1831038044-1853292631-2271478464'

    # mandatory integrity levels, as found in SYSTEM_MANDATORY_LABEL ACEs
    LOW_MANDATORY_LEVEL = 'S-1-16-4096'
    MEDIUM_MANDATORY_LEVEL = 'S-1-16-8192'
    HIGH_MANDATORY_LEVEL = 'S-1-16-12288'
    SYSTEM_MANDATORY_LEVEL = 'S-1-16-16384'

    @classmethod
    def get_name_for_sid_string(cls, sid_string: str):
        """ The well known name of a SID string, or None if it isn't one. """
        for member in cls:
            if member.value == sid_string:
                return member.name
        return None
