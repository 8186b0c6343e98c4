""" A bounds checked reader over an immutable buffer, used by every decoder in the library.

Every decode in this library walks its input through a ByteCursor. A cursor covers a window of a
buffer (the whole buffer by default) and all positions it reports or accepts are relative to the
start of that window. Reading or seeking outside the window raises an exception rather than
returning short data, which is what lets truncated input fail cleanly.
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

from struct import calcsize, unpack_from

from ms_winstructs.exceptions import OutOfBoundsException

LITTLE_ENDIAN = 'little'
BIG_ENDIAN = 'big'


class ByteCursor(object):
    """ Sequential reader over a window of an immutable buffer.

    A cursor never modifies its buffer and the only state it has is its read position. Bytes-like
    input that could be changed by the caller (bytearray, memoryview) is copied into an immutable
    bytes object first.

    The exception raised on an overrun is configurable so that a window carved out for a nested
    structure (like the body of an ACE) can report overruns of its own declared size differently
    from overruns of the underlying buffer.
    """

    def __init__(self, data: bytes, start: int = 0, end: int = None,
                 overrun_exception_class=OutOfBoundsException):
        if not isinstance(data, bytes):
            data = bytes(data)
        if end is None:
            end = len(data)
        if start < 0 or start > len(data):
            raise OutOfBoundsException('Cursor start {} is outside of a buffer of {} bytes'
                                       .format(start, len(data)), offset=start, requested=0,
                                       available=len(data))
        if end < start or end > len(data):
            raise OutOfBoundsException('Cursor end {} is outside of the range {}-{}'
                                       .format(end, start, len(data)), offset=end, requested=0,
                                       available=len(data) - start)
        self._data = data
        self._start = start
        self._end = end
        self._position = start
        self._overrun_exception_class = overrun_exception_class

    def __len__(self):
        return self._end - self._start

    def tell(self) -> int:
        """ The current read position, relative to the start of the window. """
        return self._position - self._start

    def remaining(self) -> int:
        """ The number of bytes left between the read position and the end of the window. """
        return self._end - self._position

    def seek(self, offset: int) -> int:
        """ Move to an absolute offset relative to the start of the window.
        Seeking to exactly the end of the window is allowed, as it is for files; any read from there
        will fail.
        """
        if offset < 0 or offset > len(self):
            raise self._overrun_exception_class('Cannot seek to offset {} in a region of {} bytes'
                                                .format(offset, len(self)), offset=offset, requested=0,
                                                available=len(self))
        self._position = self._start + offset
        return offset

    def _check_available(self, size: int):
        if size < 0:
            raise self._overrun_exception_class('Cannot read a negative number of bytes ({}) at offset {}'
                                                .format(size, self.tell()), offset=self.tell(),
                                                requested=size, available=self.remaining())
        if size > self.remaining():
            raise self._overrun_exception_class('Cannot read {} bytes at offset {}, only {} remain'
                                                .format(size, self.tell(), self.remaining()),
                                                offset=self.tell(), requested=size,
                                                available=self.remaining())

    def read_bytes(self, size: int) -> bytes:
        """ Return a copy of the next `size` bytes and advance past them. """
        self._check_available(size)
        value = self._data[self._position:self._position + size]
        self._position += size
        return value

    def read_uint(self, size: int, byteorder: str = LITTLE_ENDIAN) -> int:
        """ Read an unsigned integer of any width in bytes. SID authorities are 6 byte big endian
        values, which struct has no format code for.
        """
        return int.from_bytes(self.read_bytes(size), byteorder, signed=False)

    def read_u8(self) -> int:
        return self.read_uint(1)

    def read_u16(self, byteorder: str = LITTLE_ENDIAN) -> int:
        return self.read_uint(2, byteorder)

    def read_u32(self, byteorder: str = LITTLE_ENDIAN) -> int:
        return self.read_uint(4, byteorder)

    def read_format(self, format_spec: str):
        """ Read a single value described by a struct format specification, like '<H' or '<L'. """
        size = calcsize(format_spec)
        self._check_available(size)
        value = unpack_from(format_spec, self._data, self._position)[0]
        self._position += size
        return value

    def sub_cursor(self, size: int, overrun_exception_class=None) -> 'ByteCursor':
        """ Carve a window of `size` bytes off the front of what remains and advance past it.
        The bytes must all exist in this cursor; reads beyond the end of the new window raise
        `overrun_exception_class`, which defaults to this cursor's own overrun exception.
        """
        self._check_available(size)
        if overrun_exception_class is None:
            overrun_exception_class = self._overrun_exception_class
        window = ByteCursor(self._data, self._position, self._position + size,
                            overrun_exception_class=overrun_exception_class)
        self._position += size
        return window
