""" Utilities for encoding and decoding Windows security descriptors and the structures inside them.

A security descriptor details who owns an object and what different users and groups can and cannot
do to it. Security descriptors show up all over a windows system's on-disk state: in the NTFS $Secure
file, in registry hive key security cells, and in the nTSecurityDescriptor attribute of Active
Directory objects.

These utilities are the front door to the library. Every decode function takes raw bytes and an
optional DecodePolicy and returns an immutable structure, and every encode function does the reverse.
There are also helpers for building ACEs and for adding permissions to an existing descriptor, which
all return new structures rather than changing the ones they're given.
"""
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

import uuid

from typing import List, Union

from ms_winstructs import logging_utils
from ms_winstructs.core.byte_cursor import ByteCursor
from ms_winstructs.core.decode_policy import DecodePolicy
from ms_winstructs.core.structure import Structure
from ms_winstructs.exceptions import SecurityDescriptorEncodeException
from ms_winstructs.security.ace import (
    ACE,
    AccessAllowedAce,
    AccessAllowedObjectAce,
)
from ms_winstructs.security.acl import ACL
from ms_winstructs.security.security_constants import (
    ACL_REVISION,
    ACL_REVISION_DS,
    DACL,
    AccessMask,
)
from ms_winstructs.security.security_descriptor import SelfRelativeSecurityDescriptor
from ms_winstructs.security.sid import ObjectSid

logger = logging_utils.get_logger()


def decode_sid(data: bytes, policy: DecodePolicy = None) -> ObjectSid:
    """ Decode a SID from the start of a bytestring. """
    return ObjectSid.from_bytes(data, policy)


def encode_sid(sid: ObjectSid) -> bytes:
    return _encode(sid, ObjectSid)


def decode_ace(data: bytes, policy: DecodePolicy = None) -> ACE:
    """ Decode a single ACE, header and body, from the start of a bytestring. """
    return ACE.from_bytes(data, policy)


def encode_ace(ace: ACE) -> bytes:
    return _encode(ace, ACE)


def decode_acl(data: bytes, policy: DecodePolicy = None) -> ACL:
    """ Decode an ACL and exactly as many ACEs as its header says it holds. """
    return ACL.from_bytes(data, policy)


def encode_acl(acl: ACL) -> bytes:
    return _encode(acl, ACL)


def decode_security_descriptor(data: bytes, policy: DecodePolicy = None,
                               offset: int = 0) -> SelfRelativeSecurityDescriptor:
    """ Decode a self-relative security descriptor.
    :param data: The buffer holding the security descriptor.
    :param policy: How to treat anomalies. Defaults to recording them on the result.
    :param offset: Where in the buffer the security descriptor's header starts. The offsets inside the
                   security descriptor are relative to this, not to the start of the buffer.
    """
    return SelfRelativeSecurityDescriptor.from_cursor(ByteCursor(data, start=offset), policy)


def encode_security_descriptor(security_descriptor: SelfRelativeSecurityDescriptor) -> bytes:
    return _encode(security_descriptor, SelfRelativeSecurityDescriptor)


def format_sid(sid: ObjectSid) -> str:
    """ Format a SID in its canonical S-R-A-S1-S2... string form. """
    if not isinstance(sid, ObjectSid):
        raise SecurityDescriptorEncodeException('Can only format ObjectSid values, not {!r}'.format(sid))
    return sid.to_canonical_string_format()


def parse_sid(sid_string: str) -> ObjectSid:
    return ObjectSid.from_canonical_string_format(sid_string)


def _encode(structure: Structure, expected_class) -> bytes:
    if not isinstance(structure, expected_class):
        raise SecurityDescriptorEncodeException('Expected a {} to encode, not {!r}'
                                                .format(expected_class.REPR_NAME, structure))
    return structure.get_data()


def _to_sid(sid: Union[str, ObjectSid]) -> ObjectSid:
    if isinstance(sid, ObjectSid):
        return sid
    return ObjectSid.from_canonical_string_format(sid)


def create_ace_for_allow_access(sid: Union[str, ObjectSid], access_mask: int, ace_flags: int = 0x00) -> ACE:
    """ Construct an Access Control Entry (ACE) granting the provided SID the provided permission
    on the object to which the ACE is attached.
    If we're building an ACE from scratch, it's typically not inherited and not propagated to children,
    so the ACE flags (which are all about inheritance and auditing) default to 0.
    """
    body = AccessAllowedAce.create(access_mask, _to_sid(sid))
    return ACE.create(body, ace_flags=ace_flags)


def create_ace_for_allow_object_operation_or_property_access(sid: Union[str, ObjectSid],
                                                             privilege_or_property_guid: Union[str, uuid.UUID],
                                                             access_type: int, ace_flags: int = 0x00) -> ACE:
    """ Construct an Access Control Entry (ACE) granting the provided SID access to a specific
    privilege or property of the object to which the ACE is attached. The access type could be
    invoking a privileged operation (control access), or reading/writing a property.
    The object type is set to the privilege or property guid, since that is the "object" being
    granted access to. There's no inherited object type.
    """
    body = AccessAllowedObjectAce.create(access_type, _to_sid(sid), object_type=privilege_or_property_guid)
    return ACE.create(body, ace_flags=ace_flags)


def add_permissions_to_security_descriptor(current_security_descriptor: SelfRelativeSecurityDescriptor,
                                           sid: Union[str, ObjectSid],
                                           access_masks: List[int] = None,
                                           privilege_guids: List[str] = None,
                                           read_property_guids: List[str] = None,
                                           write_property_guids: List[str] = None) -> SelfRelativeSecurityDescriptor:
    """ Given a security descriptor, an SID to add permissions for, an optional list of access masks,
    and optional lists of privilege and property guids, we construct new ACE entries for every access
    mask and guid we want to add, and return a new security descriptor whose DACL has them appended.

    If the security descriptor has no DACL, a new one is created. Object ACEs need the directory
    service ACL revision, so the DACL's revision is raised to it if any are added.
    """
    new_aces = []
    access_masks = access_masks if access_masks is not None else []
    for a_mask in access_masks:
        new_aces.append(create_ace_for_allow_access(sid, a_mask))

    guid_access_type_tuples = []
    if privilege_guids:
        guid_access_type_tuples.extend([(guid, AccessMask.ADS_RIGHT_DS_CONTROL_ACCESS) for guid in privilege_guids])
    if read_property_guids:
        guid_access_type_tuples.extend([(guid, AccessMask.ADS_RIGHT_DS_READ_PROP) for guid in read_property_guids])
    if write_property_guids:
        guid_access_type_tuples.extend([(guid, AccessMask.ADS_RIGHT_DS_WRITE_PROP) for guid in write_property_guids])
    for guid, access_type in guid_access_type_tuples:
        new_aces.append(create_ace_for_allow_object_operation_or_property_access(sid, guid, access_type))

    if not new_aces:
        return current_security_descriptor

    dacl = current_security_descriptor.dacl
    if dacl is None:
        dacl = ACL.create()
    dacl = dacl.with_appended_aces(new_aces)
    if guid_access_type_tuples and dacl.revision < ACL_REVISION_DS:
        dacl = dacl.copy_with({ACL_REVISION: ACL_REVISION_DS})
    logger.debug('Adding %s ACEs for %s to a DACL that had %s', len(new_aces), sid,
                 dacl.ace_count - len(new_aces))
    return current_security_descriptor.copy_with({DACL: dacl})


def add_permissions_to_security_descriptor_dacl(current_security_descriptor_bytes: bytes,
                                                sid: Union[str, ObjectSid],
                                                access_masks: List[int] = None,
                                                privilege_guids: List[str] = None,
                                                read_property_guids: List[str] = None,
                                                write_property_guids: List[str] = None) -> bytes:
    """ The same as add_permissions_to_security_descriptor, but working on the encoded bytes of a
    security descriptor and returning the encoded bytes of the new one.
    """
    current_sd = decode_security_descriptor(current_security_descriptor_bytes)
    new_sd = add_permissions_to_security_descriptor(current_sd, sid, access_masks, privilege_guids,
                                                    read_property_guids, write_property_guids)
    return new_sd.get_data()
