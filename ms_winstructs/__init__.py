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

from ms_winstructs.core.byte_cursor import (
    BIG_ENDIAN,
    LITTLE_ENDIAN,
    ByteCursor,
)
from ms_winstructs.core.decode_policy import (
    DEFAULT_DECODE_POLICY,
    AnomalyKind,
    DecodeAnomaly,
    DecodePolicy,
)

from ms_winstructs.security.ace import (
    ACE,
    ACE_TYPE_MAP,
    AccessAllowedAce,
    AccessAllowedCallbackAce,
    AccessAllowedCallbackObjectAce,
    AccessAllowedObjectAce,
    AccessDeniedAce,
    AccessDeniedCallbackAce,
    AccessDeniedCallbackObjectAce,
    AccessDeniedObjectAce,
    RawAceBody,
    SystemAlarmAce,
    SystemAlarmCallbackAce,
    SystemAlarmCallbackObjectAce,
    SystemAlarmObjectAce,
    SystemAuditAce,
    SystemAuditCallbackAce,
    SystemAuditCallbackObjectAce,
    SystemAuditObjectAce,
    SystemMandatoryLabelAce,
    SystemResourceAttributeAce,
    SystemScopedPolicyIdAce,
)
from ms_winstructs.security.acl import ACL
from ms_winstructs.security.security_constants import (
    AccessMask,
    AceFlags,
    AceType,
    ObjectAceFlags,
    SecurityDescriptorControl,
    WellKnownSID,
)
from ms_winstructs.security.security_descriptor import SelfRelativeSecurityDescriptor
from ms_winstructs.security.security_descriptor_utils import (
    add_permissions_to_security_descriptor,
    add_permissions_to_security_descriptor_dacl,
    create_ace_for_allow_access,
    create_ace_for_allow_object_operation_or_property_access,
    decode_ace,
    decode_acl,
    decode_security_descriptor,
    decode_sid,
    encode_ace,
    encode_acl,
    encode_security_descriptor,
    encode_sid,
    format_sid,
    parse_sid,
)
from ms_winstructs.security.sid import ObjectSid

from ms_winstructs.exceptions import *
from ms_winstructs.logging_utils import configure_log_level, get_logger
