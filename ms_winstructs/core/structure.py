""" The base class every binary structure in the library is built on. """
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

import binascii

from struct import error as struct_error, pack
from typing import Dict, Iterable

from ms_winstructs.core.byte_cursor import ByteCursor
from ms_winstructs.core.decode_policy import DecodePolicy
from ms_winstructs.exceptions import SecurityDescriptorEncodeException


class Structure(object):
    """ This class is intended as an extension to python's built in structs which allows its
    sub-classes to define a binary structure that can be decoded from bytes or turned into bytes.

    A structure starts with a fixed run of fields, each defined by a field name and a format
    specification using the format specifiers of the python struct library (e.g. '<H' for a little
    endian unsigned short). Those are read and written generically here. Anything variable
    length that follows (sub-authorities, ACE bodies, ACE lists, offset-addressed parts) is handled
    by the subclass, which overrides `from_cursor` and `build_data`.

    Some fixed fields aren't really data at all, they describe the layout of the rest of the
    structure: counts, sizes and offsets. Those are listed in `computed_fields`. When encoding,
    their value is always recomputed from the actual content rather than trusted from anywhere,
    so a structure can never be written out with a count or size that disagrees with its content.
    The values that were read for them while decoding are kept separately and can be seen with
    `get_declared`.

    Structures are immutable once built. Decoding creates them, or they can be constructed from a
    dictionary of field values. To change a field, use `copy_with` to build a new structure.
    """
    structure = ()
    computed_fields = ()
    REPR_NAME = 'Structure'

    def __init__(self, fields: Dict = None, anomalies: Iterable = None, declared_fields: Dict = None):
        self._fields = {}
        if fields:
            for field_name, value in fields.items():
                if field_name in self.computed_fields:
                    continue
                self._fields[field_name] = value
        self._declared_fields = dict(declared_fields) if declared_fields else {}
        self._own_anomalies = tuple(anomalies) if anomalies else ()
        self._data = None
        self.validate_fields()

    @classmethod
    def from_bytes(cls, data: bytes, policy: DecodePolicy = None):
        """ Decode a structure from the start of a bytestring. Trailing bytes are ignored. """
        return cls.from_cursor(ByteCursor(data), policy)

    @classmethod
    def from_cursor(cls, cursor: ByteCursor, policy: DecodePolicy = None):
        """ Decode a structure from the current position of a cursor, leaving the cursor after it. """
        fields = cls.unpack_fixed_fields(cursor)
        return cls(fields=fields, declared_fields=cls.split_declared_fields(fields))

    @classmethod
    def unpack_fixed_fields(cls, cursor: ByteCursor) -> Dict:
        """ Read each of the fixed fields in our structure, in order, from the cursor. """
        fields = {}
        for field_name, format_spec in cls.structure:
            fields[field_name] = cursor.read_format(format_spec)
        return fields

    @classmethod
    def split_declared_fields(cls, fields: Dict) -> Dict:
        """ Pull the layout fields out of a freshly decoded set of fields. """
        return {field_name: fields[field_name] for field_name in cls.computed_fields if field_name in fields}

    def validate_fields(self):
        """ Make sure every fixed field that isn't computed has a value that fits its format. Subclasses
        extend this with checks on their variable parts.
        """
        for field_name, format_spec in self.structure:
            if field_name in self.computed_fields:
                continue
            if field_name not in self._fields:
                raise SecurityDescriptorEncodeException('Field {} is required for {}'
                                                        .format(field_name, self.REPR_NAME))
            self.pack(format_spec, self._fields[field_name], field_name)

    def get_computed_fields(self) -> Dict:
        """ Compute the values of our layout fields from our actual content. """
        return {}

    def get_declared(self, field_name: str):
        """ Get the value of a layout field as it was read while decoding, or None if this structure
        wasn't decoded or the field isn't a layout field.
        """
        return self._declared_fields.get(field_name)

    def child_structures(self) -> Iterable['Structure']:
        """ The sub-structures we own, in the order they're laid out. """
        return ()

    @property
    def own_anomalies(self):
        return self._own_anomalies

    @property
    def anomalies(self):
        """ All anomalies found decoding this structure and everything in it, in layout order. """
        found = list(self._own_anomalies)
        for child in self.child_structures():
            found.extend(child.anomalies)
        return tuple(found)

    def get_data(self) -> bytes:
        """ If we've ever computed and packed our data before, return that. We can't change, so it
        can't go stale.
        Otherwise, build it.
        """
        if self._data is None:
            self._data = self.build_data()
        return self._data

    def build_data(self) -> bytes:
        return self.pack_fixed_fields()

    def pack_fixed_fields(self) -> bytes:
        """ Pack each of our fixed fields one at a time, using computed values for layout fields.
        Ordering of fields matters, so we use self.structure instead of our fields dictionary.
        """
        computed = self.get_computed_fields()
        data = bytes()
        for field_name, format_spec in self.structure:
            if field_name in self.computed_fields:
                value = computed[field_name]
            else:
                value = self.get_encoded_value(field_name)
            data += self.pack(format_spec, value, field_name)
        return data

    def get_encoded_value(self, field_name: str):
        """ The value to write for a fixed field that isn't a layout field. Usually just the field's
        value, but subclasses can adjust bits that have to agree with their content.
        """
        return self._fields[field_name]

    def pack(self, format_spec: str, value, field_name: str = None) -> bytes:
        """ Given a format specification for encoding a value, pack it into bytes. """
        if value is None:
            raise SecurityDescriptorEncodeException('Trying to pack null value for field {} in {}'
                                                    .format(field_name, self.REPR_NAME))
        try:
            return pack(format_spec, value)
        except struct_error as e:
            raise SecurityDescriptorEncodeException("When packing field '{} | {} | {!r}' in {}: {}"
                                                    .format(field_name, format_spec, value, self.REPR_NAME, e))

    def copy_with(self, changes: Dict):
        """ Build a new structure of the same type with some fields changed. Anomalies and declared
        layout values aren't carried over, since the new structure wasn't decoded from anything.
        """
        fields = dict(self._fields)
        fields.update(changes)
        return type(self)(fields=fields)

    def to_dict(self) -> Dict:
        """ Render the structure as a dictionary that can be dumped to json. """
        rendered = {}
        for field_name, value in self._fields.items():
            rendered[field_name] = render_value(value)
        rendered.update({field_name: value for field_name, value in self.get_computed_fields().items()})
        return rendered

    def to_json_value(self):
        """ The value to use for this structure when it's nested inside another one being rendered. """
        return self.to_dict()

    def keys(self):
        """ The actual fields of our structure are ordered, so this shouldn't be used for iteration
        in any kind of unpacking/packing of our data. But supporting common dict-like operations
        makes it easier to programmatically check presence or absence of various keys and values
        so we support it.
        """
        return self._fields.keys()

    def values(self):
        return self._fields.values()

    def items(self):
        return self._fields.items()

    def __contains__(self, key: str):
        return key in self._fields or key in self.computed_fields

    def __getitem__(self, key: str):
        if key in self.computed_fields:
            return self.get_computed_fields()[key]
        return self._fields[key]

    def __len__(self):
        return len(self.get_data())

    def __str__(self):
        # our data cannot necessarily be encoded as a string, so convert it to hex
        return '0x' + binascii.hexlify(self.get_data()).decode('UTF-8')

    def __eq__(self, other: 'Structure'):
        if not isinstance(other, Structure):
            return False
        return type(other) is type(self) and other.get_data() == self.get_data()

    def __hash__(self):
        return self.get_data().__hash__()

    def __repr__(self):
        return '{}(data={})'.format(self.REPR_NAME, self.get_data())


def render_value(value):
    """ Convert a field value into something json friendly. """
    if isinstance(value, Structure):
        return value.to_json_value()
    if isinstance(value, (bytes, bytearray)):
        return binascii.hexlify(value).decode('UTF-8')
    if isinstance(value, (list, tuple)):
        return [render_value(item) for item in value]
    return value
