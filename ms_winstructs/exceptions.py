""" Exceptions used within the library """
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


class MsWinstructsException(Exception):
    """ A parent class for all other exceptions so that users can have a catch-all exception for
    functional issues that still doesn't blind them to things like accidentally providing a string
    where a number is needed.
    """
    def __init__(self, exception_str):
        self.message = exception_str
        super().__init__(self.message)


class SecurityDescriptorDecodeException(MsWinstructsException):
    """ An exception raised when errors occur decoding a security descriptor or any of the structures
    it is built from (SIDs, ACLs, ACEs).
    """
    def __init__(self, exception_str):
        super().__init__(exception_str)


class SecurityDescriptorEncodeException(MsWinstructsException):
    """ An exception raised when errors occur encoding a security descriptor or any of the structures
    it is built from.
    """
    def __init__(self, exception_str):
        super().__init__(exception_str)


class OutOfBoundsException(SecurityDescriptorDecodeException):
    """ An exception raised when a read or seek would go past the end of the buffer being decoded.
    The offset is relative to the start of the region being decoded.
    """
    def __init__(self, exception_str, offset: int = None, requested: int = None, available: int = None):
        self.offset = offset
        self.requested = requested
        self.available = available
        super().__init__(exception_str)


class AceBodyOverrunException(SecurityDescriptorDecodeException):
    """ An exception raised when the type specific body of an ACE would extend past the size declared
    in the ACE header.
    """
    def __init__(self, exception_str, offset: int = None, requested: int = None, available: int = None):
        self.offset = offset
        self.requested = requested
        self.available = available
        super().__init__(exception_str)


class SizeMismatchException(SecurityDescriptorDecodeException):
    """ An exception raised in strict mode when an ACL's declared size disagrees with the size of the
    entries actually decoded from it.
    """
    def __init__(self, exception_str):
        super().__init__(exception_str)


class OffsetControlMismatchException(SecurityDescriptorDecodeException):
    """ An exception raised in strict mode when a security descriptor's control flags disagree with
    which of its offsets are set.
    """
    def __init__(self, exception_str):
        super().__init__(exception_str)


class InvalidRevisionException(SecurityDescriptorDecodeException):
    """ An exception raised when a structure has a revision outside of the known set, and the caller
    asked for known revisions to be enforced.
    """
    def __init__(self, exception_str):
        super().__init__(exception_str)


class InvalidSidStringException(MsWinstructsException):
    """ An exception raised when a string can't be parsed as a SID in canonical S-R-A-S1-S2... form """
    def __init__(self, exception_str):
        super().__init__(exception_str)
