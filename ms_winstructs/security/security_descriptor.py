""" Self-relative security descriptors, as described in MS-DTYP 2.4.6
https://msdn.microsoft.com/en-us/library/cc230366.aspx

A self-relative security descriptor is a 20 byte header followed by its owner SID, group SID, SACL
and DACL. The header doesn't hold those parts, it holds offsets to them. Offsets are measured from
the start of the header, which isn't necessarily the start of the buffer it was found in (NTFS $Secure
streams and registry hives hold many of them back to back), and an offset of zero means the part is
absent.
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

from typing import Optional

from ms_winstructs import logging_utils
from ms_winstructs.core.byte_cursor import ByteCursor
from ms_winstructs.core.decode_policy import DEFAULT_DECODE_POLICY, AnomalyKind, DecodePolicy
from ms_winstructs.core.structure import Structure
from ms_winstructs.exceptions import SecurityDescriptorEncodeException
from ms_winstructs.security.acl import ACL
from ms_winstructs.security.security_constants import (
    CONTROL,
    DACL,
    GROUP_SID,
    KNOWN_SECURITY_DESCRIPTOR_REVISIONS,
    OFFSET_DACL,
    OFFSET_GROUP,
    OFFSET_OWNER,
    OFFSET_SACL,
    OWNER_SID,
    REVISION,
    SACL,
    SBZ1,
    SECURITY_DESCRIPTOR_HEADER_SIZE,
    SECURITY_DESCRIPTOR_REVISION,
    SecurityDescriptorControl,
    get_flag_names,
)
from ms_winstructs.security.sid import ObjectSid

logger = logging_utils.get_logger()

# the order the parts are written in after the header, along with the header field holding each one's offset
PART_LAYOUT = (
    (OFFSET_OWNER, OWNER_SID),
    (OFFSET_GROUP, GROUP_SID),
    (OFFSET_SACL, SACL),
    (OFFSET_DACL, DACL),
)
PART_CLASSES = {
    OWNER_SID: ObjectSid,
    GROUP_SID: ObjectSid,
    SACL: ACL,
    DACL: ACL,
}
# the control bit that says whether each ACL is present
ACL_PRESENCE_FLAGS = (
    (SACL, OFFSET_SACL, int(SecurityDescriptorControl.SE_SACL_PRESENT)),
    (DACL, OFFSET_DACL, int(SecurityDescriptorControl.SE_DACL_PRESENT)),
)


def _control_matching_parts(control: int, fields) -> int:
    """ Set or clear the SACL and DACL present bits of a control value to match which ACLs exist. """
    control = int(control)
    for part_field, _, presence_flag in ACL_PRESENCE_FLAGS:
        if fields.get(part_field) is None:
            control &= ~presence_flag
        else:
            control |= presence_flag
    return control


class SelfRelativeSecurityDescriptor(Structure):
    """
    Self-relative security descriptor as described in 2.4.6
    https://msdn.microsoft.com/en-us/library/cc230366.aspx

    All four parts are optional. When encoding, they're laid out after the header in the order owner,
    group, SACL, DACL, every offset is set to where its part actually ended up (or zero if it's
    absent), and the SACL and DACL present control bits are set to match which ACLs there are. Other
    control bits are written back as they were.

    A decoded descriptor's `control` is the value that was read, even where its present bits disagree
    with the parts (a NULL DACL, for example). `encoded_control` is what will be written. Descriptors
    built with `create` or `copy_with` have the present bits fixed up straight away.
    """
    structure = (
        (REVISION, '<B'),
        (SBZ1, '<B'),
        (CONTROL, '<H'),
        (OFFSET_OWNER, '<L'),
        (OFFSET_GROUP, '<L'),
        (OFFSET_SACL, '<L'),
        (OFFSET_DACL, '<L'),
    )
    computed_fields = (OFFSET_OWNER, OFFSET_GROUP, OFFSET_SACL, OFFSET_DACL)
    REPR_NAME = 'SelfRelativeSecurityDescriptor'

    @classmethod
    def create(cls, owner_sid: ObjectSid = None, group_sid: ObjectSid = None, sacl: ACL = None, dacl: ACL = None,
               control: int = SecurityDescriptorControl.SE_SELF_RELATIVE,
               revision: int = SECURITY_DESCRIPTOR_REVISION):
        fields = {
            REVISION: revision,
            SBZ1: 0,
            OWNER_SID: owner_sid,
            GROUP_SID: group_sid,
            SACL: sacl,
            DACL: dacl,
        }
        fields[CONTROL] = _control_matching_parts(control, fields)
        return cls(fields=fields)

    @classmethod
    def from_cursor(cls, cursor: ByteCursor, policy: DecodePolicy = None):
        """ Decode a security descriptor whose header starts at the cursor's position. The offsets in
        the header are resolved against that position, and may point anywhere up to the end of the
        cursor, so this consumes everything left in the cursor.
        """
        policy = policy if policy is not None else DEFAULT_DECODE_POLICY
        region = cursor.sub_cursor(cursor.remaining())
        fields = cls.unpack_fixed_fields(region)
        declared_fields = cls.split_declared_fields(fields)
        declared_fields[CONTROL] = fields[CONTROL]

        # All these fields are optional, if the offset is 0 they are empty
        for offset_field, part_field in PART_LAYOUT:
            offset = fields[offset_field]
            if offset == 0:
                fields[part_field] = None
                continue
            logger.debug('Decoding %s at offset %s', part_field, offset)
            region.seek(offset)
            fields[part_field] = PART_CLASSES[part_field].from_cursor(region, policy)

        # there are also flags indicating if the ACLs are present, and they should agree with the offsets
        anomalies = []
        if fields[REVISION] not in KNOWN_SECURITY_DESCRIPTOR_REVISIONS:
            anomalies.append(policy.report(AnomalyKind.INVALID_REVISION,
                                           'Unknown security descriptor revision {}'.format(fields[REVISION]),
                                           cls.REPR_NAME, 0))
        for part_field, offset_field, presence_flag in ACL_PRESENCE_FLAGS:
            flag_set = fields[CONTROL] & presence_flag == presence_flag
            offset_set = fields[offset_field] != 0
            if flag_set != offset_set:
                anomalies.append(policy.report(AnomalyKind.OFFSET_CONTROL_MISMATCH,
                                               '{} present flag is {} but its offset is {}'
                                               .format(part_field, 'set' if flag_set else 'not set',
                                                       fields[offset_field]),
                                               cls.REPR_NAME, 0))
        return cls(fields=fields, anomalies=anomalies, declared_fields=declared_fields)

    def validate_fields(self):
        for offset_field, part_field in PART_LAYOUT:
            part = self._fields.get(part_field)
            part_class = PART_CLASSES[part_field]
            if part is not None and not isinstance(part, part_class):
                raise SecurityDescriptorEncodeException('Field {} of a security descriptor must be a {} or None, not {!r}'
                                                        .format(part_field, part_class.REPR_NAME, part))
            self._fields[part_field] = part
        Structure.validate_fields(self)

    def copy_with(self, changes):
        fields = dict(self._fields)
        fields.update(changes)
        if isinstance(fields.get(CONTROL), int):
            fields[CONTROL] = _control_matching_parts(fields[CONTROL], fields)
        return type(self)(fields=fields)

    def get_encoded_value(self, field_name: str):
        if field_name == CONTROL:
            return _control_matching_parts(self._fields[CONTROL], self._fields)
        return Structure.get_encoded_value(self, field_name)

    def get_computed_fields(self):
        computed = {}
        offset = SECURITY_DESCRIPTOR_HEADER_SIZE
        for offset_field, part_field in PART_LAYOUT:
            part = self._fields[part_field]
            if part is None:
                computed[offset_field] = 0
            else:
                computed[offset_field] = offset
                offset += len(part.get_data())
        return computed

    def build_data(self):
        data = self.pack_fixed_fields()
        for _, part_field in PART_LAYOUT:
            if self._fields[part_field] is not None:
                data += self._fields[part_field].get_data()
        return data

    def child_structures(self):
        return tuple(self._fields[part_field] for _, part_field in PART_LAYOUT
                     if self._fields[part_field] is not None)

    @property
    def revision(self) -> int:
        return self._fields[REVISION]

    @property
    def control(self) -> int:
        return self._fields[CONTROL]

    @property
    def encoded_control(self) -> int:
        return self.get_encoded_value(CONTROL)

    @property
    def owner_sid(self) -> Optional[ObjectSid]:
        return self._fields[OWNER_SID]

    @property
    def group_sid(self) -> Optional[ObjectSid]:
        return self._fields[GROUP_SID]

    @property
    def sacl(self) -> Optional[ACL]:
        return self._fields[SACL]

    @property
    def dacl(self) -> Optional[ACL]:
        return self._fields[DACL]

    def has_control_flag(self, flag: int) -> bool:
        return self._fields[CONTROL] & flag == flag

    def get_control_flag_names(self):
        return get_flag_names(SecurityDescriptorControl, self._fields[CONTROL])

    def to_dict(self):
        rendered = Structure.to_dict(self)
        rendered['ControlFlags'] = self.get_control_flag_names()
        return rendered

    def __repr__(self):
        return '<{} revision={} control=0x{:04x} owner={} group={} sacl={!r} dacl={!r}>'.format(
            self.REPR_NAME, self._fields[REVISION], self._fields[CONTROL], self._fields[OWNER_SID],
            self._fields[GROUP_SID], self._fields[SACL], self._fields[DACL])
