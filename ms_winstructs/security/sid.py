""" Security identifiers (SIDs), as described in MS-DTYP 2.4.2
https://docs.microsoft.com/en-us/openspecs/windows_protocols/ms-dtyp/78eb9013-1c3a-4970-ad1f-2b1dad588a25

On the wire a SID is a revision byte, a sub-authority count byte, a 6 byte big endian identifier
authority, and then `count` little endian 32-bit sub-authorities. Its canonical string form is
S-<revision>-<authority>-<sub-authority 1>-<sub-authority 2>-...
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

from ldap3.utils.conv import escape_bytes
from struct import pack
from typing import Iterable, List

from ms_winstructs.core.byte_cursor import BIG_ENDIAN, ByteCursor
from ms_winstructs.core.decode_policy import DEFAULT_DECODE_POLICY, AnomalyKind, DecodePolicy
from ms_winstructs.core.structure import Structure
from ms_winstructs.exceptions import InvalidSidStringException, SecurityDescriptorEncodeException
from ms_winstructs.security.security_constants import (
    HEX_AUTHORITY_THRESHOLD,
    IDENTIFIER_AUTHORITY,
    KNOWN_SID_REVISIONS,
    MAX_IDENTIFIER_AUTHORITY,
    MAX_SUB_AUTHORITIES,
    REVISION,
    SID,
    SID_REVISION,
    SUB_AUTHORITY,
    SUB_AUTHORITY_COUNT,
    WellKnownSID,
)

IDENTIFIER_AUTHORITY_SIZE = 6
MAX_SUB_AUTHORITY_VALUE = 0xFFFFFFFF
# the count is a single byte, so this is the most we could ever write
MAX_ENCODABLE_SUB_AUTHORITIES = 0xFF


class ObjectSid(Structure):
    """
    SID as described in 2.4.2
    The sub-authority count is never stored. It's always the length of the sub-authority list,
    so the two can't disagree when the SID is written out.
    """
    structure = (
        (REVISION, '<B'),
        (SUB_AUTHORITY_COUNT, '<B'),
    )
    computed_fields = (SUB_AUTHORITY_COUNT,)
    REPR_NAME = 'ObjectSid'

    @classmethod
    def create(cls, identifier_authority: int, sub_authorities: Iterable[int], revision: int = SID_REVISION):
        return cls(fields={
            REVISION: revision,
            IDENTIFIER_AUTHORITY: identifier_authority,
            SUB_AUTHORITY: tuple(sub_authorities),
        })

    @classmethod
    def from_cursor(cls, cursor: ByteCursor, policy: DecodePolicy = None):
        policy = policy if policy is not None else DEFAULT_DECODE_POLICY
        start = cursor.tell()
        fields = cls.unpack_fixed_fields(cursor)
        fields[IDENTIFIER_AUTHORITY] = cursor.read_uint(IDENTIFIER_AUTHORITY_SIZE, BIG_ENDIAN)
        count = fields[SUB_AUTHORITY_COUNT]
        fields[SUB_AUTHORITY] = tuple(cursor.read_u32() for _ in range(count))

        anomalies = []
        if fields[REVISION] not in KNOWN_SID_REVISIONS:
            anomalies.append(policy.report(AnomalyKind.INVALID_REVISION,
                                           'Unknown SID revision {}'.format(fields[REVISION]),
                                           cls.REPR_NAME, start))
        if count > MAX_SUB_AUTHORITIES:
            anomalies.append(policy.report(AnomalyKind.SUB_AUTHORITY_COUNT,
                                           'SID has {} sub-authorities, more than the maximum of {}'
                                           .format(count, MAX_SUB_AUTHORITIES),
                                           cls.REPR_NAME, start))
        return cls(fields=fields, anomalies=anomalies, declared_fields=cls.split_declared_fields(fields))

    @classmethod
    def from_canonical_string_format(cls, canonical: str):
        """ Parse a SID from its string form, e.g. S-1-5-21-4151808797-3430561092-2843464588-1104
        The authority may be written in decimal, or in hex with a 0x prefix as windows does for
        authorities too big for 32 bits.
        """
        if not isinstance(canonical, str):
            raise InvalidSidStringException('SID strings must be strings, not {}'.format(type(canonical)))
        items = canonical.strip().split('-')
        if len(items) < 3 or items[0].upper() != 'S':
            raise InvalidSidStringException("Input string '{}' is not a valid SID string".format(canonical))
        try:
            revision = int(items[1], 10)
            if items[2].lower().startswith('0x'):
                authority = int(items[2], 16)
            else:
                authority = int(items[2], 10)
            sub_authorities = [int(item, 10) for item in items[3:]]
        except ValueError:
            raise InvalidSidStringException("Input string '{}' is not a valid SID string".format(canonical))

        if len(sub_authorities) > MAX_SUB_AUTHORITIES:
            raise InvalidSidStringException("Input string '{}' has {} sub-authorities, more than the maximum of {}"
                                            .format(canonical, len(sub_authorities), MAX_SUB_AUTHORITIES))
        try:
            return cls.create(authority, sub_authorities, revision=revision)
        except SecurityDescriptorEncodeException as ex:
            raise InvalidSidStringException("Input string '{}' is not a valid SID string: {}"
                                            .format(canonical, ex.message))

    def validate_fields(self):
        Structure.validate_fields(self)
        authority = self._fields.get(IDENTIFIER_AUTHORITY)
        if not isinstance(authority, int) or not 0 <= authority <= MAX_IDENTIFIER_AUTHORITY:
            raise SecurityDescriptorEncodeException('SID identifier authority must be an integer between 0 and {}, '
                                                    'not {!r}'.format(MAX_IDENTIFIER_AUTHORITY, authority))
        sub_authorities = self._fields.get(SUB_AUTHORITY, ())
        if isinstance(sub_authorities, (str, bytes)):
            raise SecurityDescriptorEncodeException('SID sub-authorities must be a sequence of integers, not {!r}'
                                                    .format(sub_authorities))
        sub_authorities = tuple(sub_authorities)
        # only a decoded SID may go past the documented limit, and it has already been reported
        if self.get_declared(SUB_AUTHORITY_COUNT) is None:
            limit = MAX_SUB_AUTHORITIES
        else:
            limit = MAX_ENCODABLE_SUB_AUTHORITIES
        if len(sub_authorities) > limit:
            raise SecurityDescriptorEncodeException('A SID cannot have {} sub-authorities, the most is {}'
                                                    .format(len(sub_authorities), limit))
        for sub_authority in sub_authorities:
            if not isinstance(sub_authority, int) or not 0 <= sub_authority <= MAX_SUB_AUTHORITY_VALUE:
                raise SecurityDescriptorEncodeException('SID sub-authorities must be 32-bit unsigned integers, '
                                                        'not {!r}'.format(sub_authority))
        self._fields[SUB_AUTHORITY] = sub_authorities

    def get_computed_fields(self):
        return {SUB_AUTHORITY_COUNT: len(self._fields[SUB_AUTHORITY])}

    def build_data(self):
        data = self.pack_fixed_fields()
        data += self._fields[IDENTIFIER_AUTHORITY].to_bytes(IDENTIFIER_AUTHORITY_SIZE, BIG_ENDIAN)
        for sub_authority in self._fields[SUB_AUTHORITY]:
            data += pack('<L', sub_authority)
        return data

    @property
    def revision(self) -> int:
        return self._fields[REVISION]

    @property
    def identifier_authority(self) -> int:
        return self._fields[IDENTIFIER_AUTHORITY]

    @property
    def sub_authorities(self) -> List[int]:
        return list(self._fields[SUB_AUTHORITY])

    @property
    def sub_authority_count(self) -> int:
        return len(self._fields[SUB_AUTHORITY])

    @property
    def relative_identifier(self):
        """ The last sub-authority, which is the RID for domain and machine SIDs. """
        if not self._fields[SUB_AUTHORITY]:
            return None
        return self._fields[SUB_AUTHORITY][-1]

    def to_canonical_string_format(self) -> str:
        authority = self._fields[IDENTIFIER_AUTHORITY]
        if authority >= HEX_AUTHORITY_THRESHOLD:
            ans = 'S-%d-0x%012X' % (self._fields[REVISION], authority)
        else:
            ans = 'S-%d-%d' % (self._fields[REVISION], authority)
        for sub_authority in self._fields[SUB_AUTHORITY]:
            ans += '-%d' % sub_authority
        return ans

    def to_ldap_filter_string_format(self) -> str:
        return escape_bytes(self.get_data())

    def get_well_known_name(self):
        return WellKnownSID.get_name_for_sid_string(self.to_canonical_string_format())

    def to_json_value(self):
        return self.to_canonical_string_format()

    def to_dict(self):
        return {SID: self.to_canonical_string_format()}

    def __str__(self):
        return self.to_canonical_string_format()

    def __repr__(self):
        return "{}('{}')".format(self.REPR_NAME, self.to_canonical_string_format())
