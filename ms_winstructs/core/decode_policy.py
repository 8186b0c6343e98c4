""" Configuration for how strictly structures are decoded, and the records used to report anomalies."""
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

from enum import Enum

from ms_winstructs import logging_utils
from ms_winstructs.exceptions import (
    InvalidRevisionException,
    OffsetControlMismatchException,
    SecurityDescriptorDecodeException,
    SizeMismatchException,
)

logger = logging_utils.get_logger()


class AnomalyKind(Enum):
    SIZE_MISMATCH = 'SizeMismatch'
    OFFSET_CONTROL_MISMATCH = 'OffsetControlMismatch'
    INVALID_REVISION = 'InvalidRevision'
    SUB_AUTHORITY_COUNT = 'SubAuthorityCount'


# the exception a strict policy raises for each kind of anomaly. kinds that map to None are only
# ever reported
ANOMALY_EXCEPTION_MAP = {
    AnomalyKind.SIZE_MISMATCH: SizeMismatchException,
    AnomalyKind.OFFSET_CONTROL_MISMATCH: OffsetControlMismatchException,
    AnomalyKind.INVALID_REVISION: InvalidRevisionException,
    AnomalyKind.SUB_AUTHORITY_COUNT: None,
}


class DecodeAnomaly(object):
    """ Something found while decoding that doesn't stop the structure from being decoded, but that
    the caller may care about. Structures pulled out of disk images are frequently a bit off, and
    a partially consistent security descriptor is still useful evidence.
    """

    def __init__(self, kind: AnomalyKind, message: str, structure_name: str, offset: int = None):
        self.kind = kind
        self.message = message
        self.structure_name = structure_name
        self.offset = offset

    def to_dict(self):
        return {
            'kind': self.kind.value,
            'message': self.message,
            'structure': self.structure_name,
            'offset': self.offset,
        }

    def __eq__(self, other):
        if not isinstance(other, DecodeAnomaly):
            return False
        return (self.kind, self.message, self.structure_name, self.offset) == \
            (other.kind, other.message, other.structure_name, other.offset)

    def __hash__(self):
        return hash((self.kind, self.message, self.structure_name, self.offset))

    def __repr__(self):
        return 'DecodeAnomaly(kind={}, message={!r}, structure_name={!r}, offset={})'.format(
            self.kind, self.message, self.structure_name, self.offset)


class DecodePolicy(object):
    """ Controls what happens when decoding finds an anomaly.

    :param strict: If True, size mismatches and offset/control mismatches raise their exceptions
                   instead of being recorded on the decoded structure.
    :param enforce_known_revisions: If True, revisions outside of the known set for a structure
                                    raise an InvalidRevisionException. Otherwise they're recorded.
    """

    def __init__(self, strict: bool = False, enforce_known_revisions: bool = False):
        self._strict = strict
        self._enforce_known_revisions = enforce_known_revisions

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def enforce_known_revisions(self) -> bool:
        return self._enforce_known_revisions

    @classmethod
    def strict_policy(cls):
        return cls(strict=True, enforce_known_revisions=True)

    def should_raise(self, kind: AnomalyKind) -> bool:
        if kind == AnomalyKind.INVALID_REVISION:
            return self._enforce_known_revisions
        if ANOMALY_EXCEPTION_MAP.get(kind) is None:
            return False
        return self._strict

    def report(self, kind: AnomalyKind, message: str, structure_name: str, offset: int = None) -> DecodeAnomaly:
        """ Either raise the exception for an anomaly, or log it and return a record of it for the
        structure being decoded to hold on to.
        """
        if self.should_raise(kind):
            exception_class = ANOMALY_EXCEPTION_MAP.get(kind, SecurityDescriptorDecodeException)
            raise exception_class('{}: {}'.format(structure_name, message))
        logger.warning('Anomaly while decoding %s at offset %s: %s', structure_name, offset, message)
        return DecodeAnomaly(kind, message, structure_name, offset)

    def __repr__(self):
        return 'DecodePolicy(strict={}, enforce_known_revisions={})'.format(self._strict,
                                                                           self._enforce_known_revisions)


# lenient by default. forensic input is expected to be damaged, and callers can opt in to
# failing on anomalies
DEFAULT_DECODE_POLICY = DecodePolicy()
