# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Utility classes for mediadissect.

You should not rely on the interfaces here being stable. They are
intended for internal use in mediadissect only.
"""

from __future__ import annotations

import contextlib
import errno
import os
import struct
from collections.abc import Iterator
from typing import IO

from ._filething import FileThing


class MediaDissectError(Exception):
    """Base class for all custom exceptions in mediadissect"""

    __module__ = "mediadissect"


class cdata:
    """C character buffer to Python numeric type conversions.

    The ``*_from`` variants take an offset and raise ``cdata.error`` if the
    buffer is too short.
    """

    error = struct.error

    uint8 = staticmethod(lambda data: struct.unpack('>B', data)[0])

    short_be = staticmethod(lambda data: struct.unpack('>h', data)[0])
    ushort_be = staticmethod(lambda data: struct.unpack('>H', data)[0])

    int_be = staticmethod(lambda data: struct.unpack('>i', data)[0])
    uint_be = staticmethod(lambda data: struct.unpack('>I', data)[0])

    longlong_be = staticmethod(lambda data: struct.unpack('>q', data)[0])
    ulonglong_be = staticmethod(lambda data: struct.unpack('>Q', data)[0])

    short_be_from = staticmethod(
        lambda data, offset=0: struct.unpack_from('>h', data, offset)[0])
    ushort_be_from = staticmethod(
        lambda data, offset=0: struct.unpack_from('>H', data, offset)[0])
    int_be_from = staticmethod(
        lambda data, offset=0: struct.unpack_from('>i', data, offset)[0])
    uint_be_from = staticmethod(
        lambda data, offset=0: struct.unpack_from('>I', data, offset)[0])
    ulonglong_be_from = staticmethod(
        lambda data, offset=0: struct.unpack_from('>Q', data, offset)[0])

    test_bit = staticmethod(lambda value, n: bool((value >> n) & 1))


def get_size(fileobj: IO[bytes]) -> int:
    """Returns the size of the file.
    The position when passed in will be preserved if no error occurs.

    Raises:
        IOError
    """

    old_pos = fileobj.tell()
    try:
        return fileobj.seek(0, 2)
    finally:
        fileobj.seek(old_pos, 0)


def read_full(fileobj: IO[bytes], size: int) -> bytes:
    """Like fileobj.read but raises IOError if not all requested data is
    returned.

    If you want to distinguish IOError and the EOS case, better handle
    the error yourself instead of using this.

    Raises:
        IOError
        ValueError
    """

    if size < 0:
        raise ValueError("size must not be negative")

    data = fileobj.read(size)
    if len(data) != size:
        raise IOError(errno.EIO, "not enough data: expected %d, got %d" % (
            size, len(data)))
    return data


def _is_fileobj(obj: object) -> bool:
    return hasattr(obj, "read") and hasattr(obj, "seek")


@contextlib.contextmanager
def openfile(
        filething: str | bytes | os.PathLike[str] | IO[bytes] | FileThing,
) -> Iterator[FileThing]:
    """Yields a FileThing for a path or a seekable binary file object.

    Files opened here are closed on every exit path; file objects passed
    in are left open.

    Raises:
        OSError: the path can't be opened
        TypeError: not a path or file object
    """

    if isinstance(filething, FileThing):
        yield filething
        return

    if _is_fileobj(filething):
        fileobj = filething
        name = getattr(fileobj, "name", None)
        if not isinstance(name, str):
            name = None
        yield FileThing(fileobj, None, name)
        return

    if not isinstance(filething, (str, bytes, os.PathLike)):
        raise TypeError("expected a path or a file object, got %r" % (
            type(filething).__name__,))

    filename = os.fspath(filething)
    with open(filename, "rb") as fileobj:
        name = os.fsdecode(filename)
        yield FileThing(fileobj, filename, name)


def find_terminator(data: bytes, width: int = 1, start: int = 0) -> int:
    """Returns the index of the first null terminator or -1.

    For width 2 only pairs starting at an even distance from `start`
    count, so a zero high byte followed by a zero low byte of the next
    code unit is not taken for a terminator.
    """

    if width == 1:
        return data.find(b"\x00", start)

    term = b"\x00" * width
    index = start
    while index + width <= len(data):
        if data[index:index + width] == term:
            return index
        index += width
    return -1


def fourcc(name: bytes) -> str:
    """Returns a printable version of a four character code.

    0xA9 is shown as the copyright sign, other non printable bytes as '?'.
    """

    chars: list[str] = []
    for byte in bytearray(name):
        if byte == 0xA9:
            chars.append("©")
        elif 0x20 <= byte <= 0x7E:
            chars.append(chr(byte))
        else:
            chars.append("?")
    return "".join(chars)
