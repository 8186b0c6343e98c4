""" Access control entries (ACEs), as described in MS-DTYP 2.4.4
https://msdn.microsoft.com/en-us/library/cc230295.aspx

An ACE is a 4 byte header (type, flags, size) followed by a body whose layout depends on the type.
Each known type maps to a body class in ACE_TYPE_MAP. Types we don't know how to read, including
compound ACEs, get a RawAceBody that just holds the body bytes so they survive re-encoding.

The body is decoded from a window exactly as big as the header says it is, so a body that claims
more than the header allows fails with an AceBodyOverrunException instead of running into the ACE
that follows it.
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

from typing import Union

from ms_winstructs import logging_utils
from ms_winstructs.core.byte_cursor import ByteCursor
from ms_winstructs.core.decode_policy import DEFAULT_DECODE_POLICY, AnomalyKind, DecodePolicy
from ms_winstructs.core.structure import Structure
from ms_winstructs.exceptions import AceBodyOverrunException, SecurityDescriptorEncodeException
from ms_winstructs.security.security_constants import (
    ACE_BODY,
    ACE_FLAGS,
    ACE_HEADER_SIZE,
    ACE_SIZE,
    ACE_TYPE,
    ACE_TYPE_NAME,
    APPLICATION_DATA,
    FLAGS,
    GUID_SIZE,
    INHERITED_OBJECT_TYPE,
    MASK,
    OBJECT_TYPE,
    RAW_DATA,
    SID,
    AccessMask,
    AceFlags,
    AceType,
    ObjectAceFlags,
    get_flag_names,
)
from ms_winstructs.security.sid import ObjectSid

logger = logging_utils.get_logger()

# the bits of an object ACE's flags that say which GUIDs follow
GUID_PRESENCE_BITS = int(ObjectAceFlags.ACE_OBJECT_TYPE_PRESENT | ObjectAceFlags.ACE_INHERITED_OBJECT_TYPE_PRESENT)


def _normalize_application_data(structure: Structure):
    data = structure._fields.get(APPLICATION_DATA, b'')
    if data is None:
        data = b''
    if not isinstance(data, (bytes, bytearray)):
        raise SecurityDescriptorEncodeException('Application data for {} must be bytes, not {!r}'
                                                .format(structure.REPR_NAME, data))
    structure._fields[APPLICATION_DATA] = bytes(data)


def _validate_sid(structure: Structure):
    if not isinstance(structure._fields.get(SID), ObjectSid):
        raise SecurityDescriptorEncodeException('{} requires an ObjectSid in field {}, not {!r}'
                                                .format(structure.REPR_NAME, SID, structure._fields.get(SID)))


def _normalize_guid(structure: Structure, field_name: str):
    value = structure._fields.get(field_name)
    if value is None or isinstance(value, uuid.UUID):
        structure._fields[field_name] = value
        return
    try:
        structure._fields[field_name] = uuid.UUID(value)
    except (TypeError, ValueError, AttributeError):
        raise SecurityDescriptorEncodeException('Field {} of {} must be a UUID, a GUID string, or None, not {!r}'
                                                .format(field_name, structure.REPR_NAME, value))


def _read_application_data(structure_class, cursor: ByteCursor, policy: DecodePolicy, start: int):
    """ Read whatever is left of an ACE body after its SID. Only some ACE types carry application
    data. For the rest, leftover bytes mean the declared ACE size is bigger than the body, which is
    reported. The bytes are kept either way so the ACE encodes back to its declared size.
    """
    data = cursor.read_bytes(cursor.remaining())
    anomalies = []
    if data and not structure_class.HAS_APPLICATION_DATA:
        anomalies.append(policy.report(AnomalyKind.SIZE_MISMATCH,
                                       'ACE body has {} bytes left over after its SID'.format(len(data)),
                                       structure_class.REPR_NAME, start))
    return data, anomalies


class AccessAllowedAce(Structure):
    """
    ACCESS_ALLOWED_ACE as described in 2.4.4.2
    https://msdn.microsoft.com/en-us/library/cc230286.aspx

    Anything left in the body after the SID is kept as application data. For callback ACEs that's
    the conditional expression, for resource attribute ACEs it's the claim, and for everything else
    it's slack that some writers leave at the end of an ACE. Slack is a size mismatch anomaly.
    """
    ACE_TYPE = AceType.ACCESS_ALLOWED.value
    structure = (
        (MASK, '<L'),
    )
    REPR_NAME = 'AccessAllowedAce'
    HAS_APPLICATION_DATA = False

    @classmethod
    def create(cls, mask: int, sid: ObjectSid, application_data: bytes = b''):
        return cls(fields={MASK: int(mask), SID: sid, APPLICATION_DATA: application_data})

    @classmethod
    def from_cursor(cls, cursor: ByteCursor, policy: DecodePolicy = None):
        policy = policy if policy is not None else DEFAULT_DECODE_POLICY
        start = cursor.tell()
        fields = cls.unpack_fixed_fields(cursor)
        fields[SID] = ObjectSid.from_cursor(cursor, policy)
        fields[APPLICATION_DATA], anomalies = _read_application_data(cls, cursor, policy, start)
        return cls(fields=fields, anomalies=anomalies)

    def validate_fields(self):
        Structure.validate_fields(self)
        _validate_sid(self)
        _normalize_application_data(self)

    def build_data(self):
        return self.pack_fixed_fields() + self._fields[SID].get_data() + self._fields[APPLICATION_DATA]

    def child_structures(self):
        return (self._fields[SID],)

    @property
    def mask(self) -> int:
        return self._fields[MASK]

    @property
    def sid(self) -> ObjectSid:
        return self._fields[SID]

    @property
    def application_data(self) -> bytes:
        return self._fields[APPLICATION_DATA]

    def has_privilege(self, priv: int) -> bool:
        return self._fields[MASK] & priv == priv

    def to_dict(self):
        rendered = Structure.to_dict(self)
        rendered['MaskNames'] = get_flag_names(AccessMask, self._fields[MASK])
        return rendered


class AccessAllowedObjectAce(Structure):
    """
    ACCESS_ALLOWED_OBJECT_ACE as described in 2.4.4.3
    https://msdn.microsoft.com/en-us/library/cc230289.aspx

    The object type and inherited object type GUIDs are each only present if their bit is set in the
    flags. When encoding, those two bits are always set from whether the GUIDs are there, so they
    can't disagree. Any other flag bits are written back as they were.
    """
    ACE_TYPE = AceType.ACCESS_ALLOWED_OBJECT.value
    structure = (
        (MASK, '<L'),
        (FLAGS, '<L'),
    )
    REPR_NAME = 'AccessAllowedObjectAce'
    HAS_APPLICATION_DATA = False

    @classmethod
    def create(cls, mask: int, sid: ObjectSid, object_type: Union[uuid.UUID, str] = None,
               inherited_object_type: Union[uuid.UUID, str] = None, application_data: bytes = b'',
               flags: int = 0):
        return cls(fields={
            MASK: int(mask),
            FLAGS: flags,
            OBJECT_TYPE: object_type,
            INHERITED_OBJECT_TYPE: inherited_object_type,
            SID: sid,
            APPLICATION_DATA: application_data,
        })

    @classmethod
    def from_cursor(cls, cursor: ByteCursor, policy: DecodePolicy = None):
        policy = policy if policy is not None else DEFAULT_DECODE_POLICY
        start = cursor.tell()
        fields = cls.unpack_fixed_fields(cursor)
        fields[OBJECT_TYPE] = None
        fields[INHERITED_OBJECT_TYPE] = None
        # GUIDs are stored in their little-endian mixed byte order
        if fields[FLAGS] & ObjectAceFlags.ACE_OBJECT_TYPE_PRESENT:
            fields[OBJECT_TYPE] = uuid.UUID(bytes_le=cursor.read_bytes(GUID_SIZE))
        if fields[FLAGS] & ObjectAceFlags.ACE_INHERITED_OBJECT_TYPE_PRESENT:
            fields[INHERITED_OBJECT_TYPE] = uuid.UUID(bytes_le=cursor.read_bytes(GUID_SIZE))
        fields[SID] = ObjectSid.from_cursor(cursor, policy)
        fields[APPLICATION_DATA], anomalies = _read_application_data(cls, cursor, policy, start)
        return cls(fields=fields, anomalies=anomalies)

    def validate_fields(self):
        _normalize_guid(self, OBJECT_TYPE)
        _normalize_guid(self, INHERITED_OBJECT_TYPE)
        flags = self._fields.get(FLAGS, 0)
        if isinstance(flags, int):
            flags = int(flags) & ~GUID_PRESENCE_BITS
            if self._fields[OBJECT_TYPE] is not None:
                flags |= ObjectAceFlags.ACE_OBJECT_TYPE_PRESENT
            if self._fields[INHERITED_OBJECT_TYPE] is not None:
                flags |= ObjectAceFlags.ACE_INHERITED_OBJECT_TYPE_PRESENT
            self._fields[FLAGS] = int(flags)
        Structure.validate_fields(self)
        _validate_sid(self)
        _normalize_application_data(self)

    def build_data(self):
        data = self.pack_fixed_fields()
        if self._fields[OBJECT_TYPE] is not None:
            data += self._fields[OBJECT_TYPE].bytes_le
        if self._fields[INHERITED_OBJECT_TYPE] is not None:
            data += self._fields[INHERITED_OBJECT_TYPE].bytes_le
        return data + self._fields[SID].get_data() + self._fields[APPLICATION_DATA]

    def child_structures(self):
        return (self._fields[SID],)

    @property
    def mask(self) -> int:
        return self._fields[MASK]

    @property
    def flags(self) -> int:
        return self._fields[FLAGS]

    @property
    def object_type(self):
        return self._fields[OBJECT_TYPE]

    @property
    def inherited_object_type(self):
        return self._fields[INHERITED_OBJECT_TYPE]

    @property
    def sid(self) -> ObjectSid:
        return self._fields[SID]

    @property
    def application_data(self) -> bytes:
        return self._fields[APPLICATION_DATA]

    def has_flag(self, flag: int) -> bool:
        return self._fields[FLAGS] & flag == flag

    def has_privilege(self, priv: int) -> bool:
        return self._fields[MASK] & priv == priv

    def to_dict(self):
        rendered = Structure.to_dict(self)
        for field_name in (OBJECT_TYPE, INHERITED_OBJECT_TYPE):
            if self._fields[field_name] is not None:
                rendered[field_name] = str(self._fields[field_name])
        rendered['MaskNames'] = get_flag_names(AccessMask, self._fields[MASK])
        return rendered


class RawAceBody(Structure):
    """ The body of an ACE whose type we don't know how to read (or, for compound ACEs, don't read).
    The bytes are kept exactly as they were so the ACE encodes back to what it was.
    """
    ACE_TYPE = None
    REPR_NAME = 'RawAceBody'

    @classmethod
    def create(cls, raw_data: bytes):
        return cls(fields={RAW_DATA: raw_data})

    @classmethod
    def from_cursor(cls, cursor: ByteCursor, policy: DecodePolicy = None):
        return cls(fields={RAW_DATA: cursor.read_bytes(cursor.remaining())})

    def validate_fields(self):
        data = self._fields.get(RAW_DATA, b'')
        if not isinstance(data, (bytes, bytearray)):
            raise SecurityDescriptorEncodeException('Raw ACE bodies must be bytes, not {!r}'.format(data))
        self._fields[RAW_DATA] = bytes(data)

    def build_data(self):
        return self._fields[RAW_DATA]

    @property
    def raw_data(self) -> bytes:
        return self._fields[RAW_DATA]


class AccessDeniedAce(AccessAllowedAce):
    """
    ACCESS_DENIED_ACE as described in 2.4.4.4
    https://msdn.microsoft.com/en-us/library/cc230291.aspx
    Structure is identical to ACCESS_ALLOWED_ACE
    """
    ACE_TYPE = AceType.ACCESS_DENIED.value
    REPR_NAME = 'AccessDeniedAce'


class AccessDeniedObjectAce(AccessAllowedObjectAce):
    """
    ACCESS_DENIED_OBJECT_ACE as described in 2.4.4.5
    https://msdn.microsoft.com/en-us/library/gg750297.aspx
    Structure is identical to ACCESS_ALLOWED_OBJECT_ACE
    """
    ACE_TYPE = AceType.ACCESS_DENIED_OBJECT.value
    REPR_NAME = 'AccessDeniedObjectAce'


class AccessAllowedCallbackAce(AccessAllowedAce):
    """
    ACCESS_ALLOWED_CALLBACK_ACE as described in 2.4.4.6
    https://msdn.microsoft.com/en-us/library/cc230287.aspx
    The application data holds the conditional expression.
    """
    ACE_TYPE = AceType.ACCESS_ALLOWED_CALLBACK.value
    REPR_NAME = 'AccessAllowedCallbackAce'
    HAS_APPLICATION_DATA = True


class AccessDeniedCallbackAce(AccessAllowedAce):
    """
    ACCESS_DENIED_CALLBACK_ACE as described in 2.4.4.7
    https://msdn.microsoft.com/en-us/library/cc230292.aspx
    """
    ACE_TYPE = AceType.ACCESS_DENIED_CALLBACK.value
    REPR_NAME = 'AccessDeniedCallbackAce'
    HAS_APPLICATION_DATA = True


class AccessAllowedCallbackObjectAce(AccessAllowedObjectAce):
    """
    ACCESS_ALLOWED_CALLBACK_OBJECT_ACE as described in 2.4.4.8
    https://msdn.microsoft.com/en-us/library/cc230288.aspx
    """
    ACE_TYPE = AceType.ACCESS_ALLOWED_CALLBACK_OBJECT.value
    REPR_NAME = 'AccessAllowedCallbackObjectAce'
    HAS_APPLICATION_DATA = True


class AccessDeniedCallbackObjectAce(AccessAllowedObjectAce):
    """
    ACCESS_DENIED_CALLBACK_OBJECT_ACE as described in 2.4.4.9
    https://msdn.microsoft.com/en-us/library/cc230290.aspx
    """
    ACE_TYPE = AceType.ACCESS_DENIED_CALLBACK_OBJECT.value
    REPR_NAME = 'AccessDeniedCallbackObjectAce'
    HAS_APPLICATION_DATA = True


class SystemAuditAce(AccessAllowedAce):
    """
    SYSTEM_AUDIT_ACE as described in 2.4.4.10
    https://msdn.microsoft.com/en-us/library/cc230376.aspx
    """
    ACE_TYPE = AceType.SYSTEM_AUDIT.value
    REPR_NAME = 'SystemAuditAce'


class SystemAlarmAce(AccessAllowedAce):
    """ SYSTEM_ALARM_ACE. Reserved by windows, but laid out like SYSTEM_AUDIT_ACE """
    ACE_TYPE = AceType.SYSTEM_ALARM.value
    REPR_NAME = 'SystemAlarmAce'


class SystemAuditObjectAce(AccessAllowedObjectAce):
    """
    SYSTEM_AUDIT_OBJECT_ACE as described in 2.4.4.11
    https://msdn.microsoft.com/en-us/library/gg750298.aspx
    """
    ACE_TYPE = AceType.SYSTEM_AUDIT_OBJECT.value
    REPR_NAME = 'SystemAuditObjectAce'


class SystemAlarmObjectAce(AccessAllowedObjectAce):
    ACE_TYPE = AceType.SYSTEM_ALARM_OBJECT.value
    REPR_NAME = 'SystemAlarmObjectAce'


class SystemAuditCallbackAce(AccessAllowedAce):
    """
    SYSTEM_AUDIT_CALLBACK_ACE as described in 2.4.4.12
    https://msdn.microsoft.com/en-us/library/cc230377.aspx
    """
    ACE_TYPE = AceType.SYSTEM_AUDIT_CALLBACK.value
    REPR_NAME = 'SystemAuditCallbackAce'
    HAS_APPLICATION_DATA = True


class SystemAlarmCallbackAce(AccessAllowedAce):
    ACE_TYPE = AceType.SYSTEM_ALARM_CALLBACK.value
    REPR_NAME = 'SystemAlarmCallbackAce'
    HAS_APPLICATION_DATA = True


class SystemMandatoryLabelAce(AccessAllowedAce):
    """
    SYSTEM_MANDATORY_LABEL_ACE as described in 2.4.4.13
    https://msdn.microsoft.com/en-us/library/cc230379.aspx
    Structure is identical to ACCESS_ALLOWED_ACE, but with custom masks and meanings.
    """
    ACE_TYPE = AceType.SYSTEM_MANDATORY_LABEL.value
    REPR_NAME = 'SystemMandatoryLabelAce'


class SystemAuditCallbackObjectAce(AccessAllowedObjectAce):
    """
    SYSTEM_AUDIT_CALLBACK_OBJECT_ACE as described in 2.4.4.14
    https://msdn.microsoft.com/en-us/library/cc230378.aspx
    """
    ACE_TYPE = AceType.SYSTEM_AUDIT_CALLBACK_OBJECT.value
    REPR_NAME = 'SystemAuditCallbackObjectAce'
    HAS_APPLICATION_DATA = True


class SystemAlarmCallbackObjectAce(AccessAllowedObjectAce):
    ACE_TYPE = AceType.SYSTEM_ALARM_CALLBACK_OBJECT.value
    REPR_NAME = 'SystemAlarmCallbackObjectAce'
    HAS_APPLICATION_DATA = True


class SystemResourceAttributeAce(AccessAllowedAce):
    """
    SYSTEM_RESOURCE_ATTRIBUTE_ACE as described in 2.4.4.15
    https://msdn.microsoft.com/en-us/library/hh877837.aspx
    The application data holds a CLAIM_SECURITY_ATTRIBUTE_RELATIVE_V1, which is left undecoded.
    """
    ACE_TYPE = AceType.SYSTEM_RESOURCE_ATTRIBUTE.value
    REPR_NAME = 'SystemResourceAttributeAce'
    HAS_APPLICATION_DATA = True


class SystemScopedPolicyIdAce(AccessAllowedAce):
    """
    SYSTEM_SCOPED_POLICY_ID_ACE as described in 2.4.4.16
    https://msdn.microsoft.com/en-us/library/hh877846.aspx
    """
    ACE_TYPE = AceType.SYSTEM_SCOPED_POLICY_ID.value
    REPR_NAME = 'SystemScopedPolicyIdAce'


# All the ACE body types we know how to read, in type order. Compound ACEs are
# missing and get read as raw bodies
ACE_TYPES = [
    AccessAllowedAce,
    AccessDeniedAce,
    SystemAuditAce,
    SystemAlarmAce,
    AccessAllowedObjectAce,
    AccessDeniedObjectAce,
    SystemAuditObjectAce,
    SystemAlarmObjectAce,
    AccessAllowedCallbackAce,
    AccessDeniedCallbackAce,
    AccessAllowedCallbackObjectAce,
    AccessDeniedCallbackObjectAce,
    SystemAuditCallbackAce,
    SystemAlarmCallbackAce,
    SystemAuditCallbackObjectAce,
    SystemAlarmCallbackObjectAce,
    SystemMandatoryLabelAce,
    SystemResourceAttributeAce,
    SystemScopedPolicyIdAce,
]

# A dict of all the ACE types indexed by their type number
ACE_TYPE_MAP = {ace.ACE_TYPE: ace for ace in ACE_TYPES}


class ACE(Structure):
    """
    ACE as described in 2.4.4
    https://msdn.microsoft.com/en-us/library/cc230295.aspx
    """
    structure = (
        #
        # ACE_HEADER as described in 2.4.4.1
        # https://msdn.microsoft.com/en-us/library/cc230296.aspx
        #
        (ACE_TYPE, '<B'),
        (ACE_FLAGS, '<B'),
        (ACE_SIZE, '<H'),
    )
    computed_fields = (ACE_SIZE,)
    REPR_NAME = 'ACE'

    @classmethod
    def create(cls, body: Structure, ace_flags: int = 0, ace_type: int = None):
        """ Wrap an ACE body in a header. The type comes from the body, unless it's a raw body, in which
        case it has to be given.
        """
        if ace_type is None:
            ace_type = body.ACE_TYPE
        return cls(fields={ACE_TYPE: ace_type, ACE_FLAGS: int(ace_flags), ACE_BODY: body})

    @classmethod
    def from_cursor(cls, cursor: ByteCursor, policy: DecodePolicy = None):
        policy = policy if policy is not None else DEFAULT_DECODE_POLICY
        start = cursor.tell()
        # This will parse the header
        fields = cls.unpack_fixed_fields(cursor)
        declared_size = fields[ACE_SIZE]
        if declared_size < ACE_HEADER_SIZE:
            raise AceBodyOverrunException('ACE at offset {} declares a size of {}, smaller than its own {} byte '
                                          'header'.format(start, declared_size, ACE_HEADER_SIZE),
                                          offset=start, requested=ACE_HEADER_SIZE, available=declared_size)
        # the body gets its own window so it can't read into whatever follows this ACE
        body_cursor = cursor.sub_cursor(declared_size - ACE_HEADER_SIZE,
                                        overrun_exception_class=AceBodyOverrunException)
        body_class = ACE_TYPE_MAP.get(fields[ACE_TYPE], RawAceBody)
        logger.debug('Decoding %s byte ACE of type %s at offset %s as %s', declared_size,
                     AceType.get_name_for_value(fields[ACE_TYPE]), start, body_class.REPR_NAME)
        # Now we parse the ACE body according to its type
        fields[ACE_BODY] = body_class.from_cursor(body_cursor, policy)
        return cls(fields=fields, declared_fields=cls.split_declared_fields(fields))

    def validate_fields(self):
        Structure.validate_fields(self)
        body = self._fields.get(ACE_BODY)
        if not isinstance(body, Structure):
            raise SecurityDescriptorEncodeException('An ACE body must be a structure, not {!r}'.format(body))
        if body.ACE_TYPE is not None and body.ACE_TYPE != self._fields[ACE_TYPE]:
            raise SecurityDescriptorEncodeException('An ACE of type {} cannot hold a {} body'
                                                    .format(AceType.get_name_for_value(self._fields[ACE_TYPE]),
                                                            body.REPR_NAME))

    def get_computed_fields(self):
        # include our 4 byte header size in the ACE size, in addition to the size of our body
        return {ACE_SIZE: len(self._fields[ACE_BODY].get_data()) + ACE_HEADER_SIZE}

    def build_data(self):
        return self.pack_fixed_fields() + self._fields[ACE_BODY].get_data()

    def child_structures(self):
        return (self._fields[ACE_BODY],)

    @property
    def ace_type(self) -> int:
        return self._fields[ACE_TYPE]

    @property
    def ace_type_name(self) -> str:
        return AceType.get_name_for_value(self._fields[ACE_TYPE])

    @property
    def ace_flags(self) -> int:
        return self._fields[ACE_FLAGS]

    @property
    def body(self) -> Structure:
        return self._fields[ACE_BODY]

    @property
    def size(self) -> int:
        return self.get_computed_fields()[ACE_SIZE]

    @property
    def sid(self):
        """ The SID the ACE applies to, or None for raw ACEs. """
        return getattr(self._fields[ACE_BODY], 'sid', None)

    @property
    def mask(self):
        return getattr(self._fields[ACE_BODY], 'mask', None)

    def has_flag(self, flag: int) -> bool:
        return self._fields[ACE_FLAGS] & flag == flag

    def to_dict(self):
        return {
            ACE_TYPE: self._fields[ACE_TYPE],
            ACE_TYPE_NAME: self.ace_type_name,
            ACE_FLAGS: get_flag_names(AceFlags, self._fields[ACE_FLAGS]),
            ACE_SIZE: self.size,
            ACE_BODY: self._fields[ACE_BODY].to_json_value(),
        }

    def __repr__(self):
        return '<{} flags=0x{:02x} size={} body={!r}>'.format(self.ace_type_name, self._fields[ACE_FLAGS],
                                                              self.size, self._fields[ACE_BODY])
