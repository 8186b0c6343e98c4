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

from typing import Iterable, List

from ms_winstructs import logging_utils
from ms_winstructs.core.byte_cursor import ByteCursor
from ms_winstructs.core.decode_policy import DEFAULT_DECODE_POLICY, AnomalyKind, DecodePolicy
from ms_winstructs.core.structure import Structure
from ms_winstructs.exceptions import SecurityDescriptorEncodeException
from ms_winstructs.security.ace import ACE
from ms_winstructs.security.security_constants import (
    ACE_COUNT,
    ACES,
    ACL_HEADER_SIZE,
    ACL_REVISION,
    ACL_REVISION_STANDARD,
    ACL_SIZE,
    KNOWN_ACL_REVISIONS,
    SBZ1,
    SBZ2,
)

logger = logging_utils.get_logger()


class ACL(Structure):
    """
    ACL as described in 2.4.5
    https://msdn.microsoft.com/en-us/library/cc230297.aspx

    The number of ACEs read is always the count in the header, no matter how many bytes follow. Each
    ACE is as long as its own header says, so they're read one after another rather than at a fixed
    stride. Once they've all been read, the bytes used are compared against the size in the header.
    Disagreement is an anomaly, and when encoding both the count and the size are recomputed.
    """
    structure = (
        (ACL_REVISION, '<B'),
        (SBZ1, '<B'),
        (ACL_SIZE, '<H'),
        (ACE_COUNT, '<H'),
        (SBZ2, '<H'),
    )
    computed_fields = (ACL_SIZE, ACE_COUNT)
    REPR_NAME = 'ACL'

    @classmethod
    def create(cls, aces: Iterable[ACE] = (), revision: int = ACL_REVISION_STANDARD):
        return cls(fields={ACL_REVISION: revision, SBZ1: 0, SBZ2: 0, ACES: tuple(aces)})

    @classmethod
    def from_cursor(cls, cursor: ByteCursor, policy: DecodePolicy = None):
        policy = policy if policy is not None else DEFAULT_DECODE_POLICY
        start = cursor.tell()
        fields = cls.unpack_fixed_fields(cursor)
        logger.debug('Decoding ACL at offset %s with %s ACEs and a declared size of %s', start,
                     fields[ACE_COUNT], fields[ACL_SIZE])
        aces = []
        for _ in range(fields[ACE_COUNT]):
            aces.append(ACE.from_cursor(cursor, policy))
        fields[ACES] = tuple(aces)

        anomalies = []
        if fields[ACL_REVISION] not in KNOWN_ACL_REVISIONS:
            anomalies.append(policy.report(AnomalyKind.INVALID_REVISION,
                                           'Unknown ACL revision {}'.format(fields[ACL_REVISION]),
                                           cls.REPR_NAME, start))
        consumed = cursor.tell() - start
        if consumed != fields[ACL_SIZE]:
            anomalies.append(policy.report(AnomalyKind.SIZE_MISMATCH,
                                           'ACL declares a size of {} bytes but its header and {} ACEs take {}'
                                           .format(fields[ACL_SIZE], fields[ACE_COUNT], consumed),
                                           cls.REPR_NAME, start))
        return cls(fields=fields, anomalies=anomalies, declared_fields=cls.split_declared_fields(fields))

    def validate_fields(self):
        Structure.validate_fields(self)
        aces = self._fields.get(ACES, ())
        if isinstance(aces, (str, bytes)):
            raise SecurityDescriptorEncodeException('ACL entries must be a sequence of ACEs, not {!r}'.format(aces))
        aces = tuple(aces)
        for ace in aces:
            if not isinstance(ace, ACE):
                raise SecurityDescriptorEncodeException('ACL entries must be ACEs, not {!r}'.format(ace))
        self._fields[ACES] = aces

    def get_computed_fields(self):
        aces = self._fields[ACES]
        # Header size (8 bytes) is included
        return {
            ACL_SIZE: ACL_HEADER_SIZE + sum(len(ace.get_data()) for ace in aces),
            ACE_COUNT: len(aces),
        }

    def build_data(self):
        return self.pack_fixed_fields() + b''.join(ace.get_data() for ace in self._fields[ACES])

    def child_structures(self):
        return self._fields[ACES]

    @property
    def revision(self) -> int:
        return self._fields[ACL_REVISION]

    @property
    def aces(self) -> List[ACE]:
        return list(self._fields[ACES])

    @property
    def ace_count(self) -> int:
        return len(self._fields[ACES])

    def copy_with_aces(self, aces: Iterable[ACE]) -> 'ACL':
        return self.copy_with({ACES: tuple(aces)})

    def with_appended_aces(self, new_aces: Iterable[ACE]) -> 'ACL':
        return self.copy_with_aces(self._fields[ACES] + tuple(new_aces))

    def with_appended_ace(self, new_ace: ACE) -> 'ACL':
        return self.with_appended_aces([new_ace])

    def with_prepended_aces(self, new_aces: Iterable[ACE]) -> 'ACL':
        return self.copy_with_aces(tuple(new_aces) + self._fields[ACES])

    def with_prepended_ace(self, new_ace: ACE) -> 'ACL':
        return self.with_prepended_aces([new_ace])

    def __iter__(self):
        return iter(self._fields[ACES])

    def __repr__(self):
        return '<ACL revision={} aces={!r}>'.format(self._fields[ACL_REVISION], list(self._fields[ACES]))
