# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""iTunes metadata as stored in the `data` child of an ilst item."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import Final, NamedTuple, override

from .._util import cdata
from ._util import BoxDecodeError


class AtomDataType(IntEnum):
    """The well-known type of a `data` box payload.

    Other type codes are kept as plain integers and treated as binary.
    """

    IMPLICIT = 0
    """for use with tags for which no type needs to be indicated because
       only one type is allowed"""

    UTF8 = 1
    """without any count or null terminator"""

    UTF16 = 2
    """also known as UTF-16BE"""

    JPEG = 13
    """a JPEG image"""

    PNG = 14
    """PNG image"""

    INTEGER = 21
    """a signed big-endian integer with length one of { 1,2,4,8 } bytes"""

    UNSIGNED_INTEGER = 22
    """an unsigned big-endian integer with length one of { 1,2,4,8 } bytes"""

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]


_TYPE_LABELS: Final = {
    AtomDataType.IMPLICIT: "Implicit",
    AtomDataType.UTF8: "UTF-8",
    AtomDataType.UTF16: "UTF-16 BE",
    AtomDataType.JPEG: "JPEG Image",
    AtomDataType.PNG: "PNG Image",
    AtomDataType.INTEGER: "Signed Integer",
    AtomDataType.UNSIGNED_INTEGER: "Unsigned Integer",
}


def get_data_type_label(data_type: int) -> str:
    if isinstance(data_type, AtomDataType):
        return data_type.label
    return f"Binary (0x{data_type:02X})"


class ItunesText(NamedTuple):
    text: str

    def pprint(self) -> str:
        return f"Value: \"{self.text}\""


class ItunesInteger(NamedTuple):
    value: int

    def pprint(self) -> str:
        return f"Value: {self.value}"


class ItunesUnsignedInteger(NamedTuple):
    value: int

    def pprint(self) -> str:
        return f"Value: {self.value}"


class ItunesImage(NamedTuple):
    """Cover art, only the format and size are kept"""

    format: str
    size: int

    def pprint(self) -> str:
        return f"Value: {self.format} image, {self.size} bytes"


class ItunesBinary(NamedTuple):
    data: bytes

    def pprint(self) -> str:
        return f"Value: Binary data, {len(self.data)} bytes"


class TrackNumber(NamedTuple):
    number: int
    total: int

    def pprint(self) -> str:
        if self.total:
            return f"Value: Track {self.number} of {self.total}"
        return f"Value: Track {self.number}"


class DiskNumber(NamedTuple):
    number: int
    total: int

    def pprint(self) -> str:
        if self.total:
            return f"Value: Disk {self.number} of {self.total}"
        return f"Value: Disk {self.number}"


ItunesContent = (ItunesText | ItunesInteger | ItunesUnsignedInteger |
                 ItunesImage | ItunesBinary | TrackNumber | DiskNumber)

_INT_FORMATS: Final = {1: "b", 2: "h", 4: "i", 8: "q"}


def _parse_int(payload: bytes, signed: bool) -> int:
    fmt = _INT_FORMATS.get(len(payload))
    if fmt is None:
        kind = "signed" if signed else "unsigned"
        raise BoxDecodeError(
            f"Invalid {kind} integer size: {len(payload)} bytes")
    if not signed:
        fmt = fmt.upper()
    return struct.unpack(">" + fmt, payload)[0]


def _parse_pair(box_type: bytes, payload: bytes) -> TrackNumber | DiskNumber:
    # reserved, number, total
    number = cdata.ushort_be_from(payload, 2)
    total = cdata.ushort_be_from(payload, 4)
    if box_type == b"trkn":
        return TrackNumber(number, total)
    return DiskNumber(number, total)


class ItunesMetadata:
    """A decoded iTunes `data` box.

    Attributes:
        data_type (AtomDataType | int): the type code, an int for
            unknown types
        content (ItunesContent): the decoded value
    """

    data_type: AtomDataType | int
    content: ItunesContent

    def __init__(self, data_type: AtomDataType | int, content: ItunesContent):
        self.data_type = data_type
        self.content = content

    @classmethod
    def parse(cls, box_type: bytes, data: bytes) -> ItunesMetadata:
        """Decodes the payload of a `data` box.

        Args:
            box_type: the type of the enclosing item box, e.g. b"trkn"
            data: the `data` box payload: version, 3 byte type,
                4 reserved bytes and the value
        Raises:
            BoxDecodeError
        """

        if len(data) < 8:
            raise BoxDecodeError("iTunes data box too short")

        flags = cdata.uint_be(b"\x00" + data[1:4])
        type_code = flags & 0xFF
        data_type: AtomDataType | int
        try:
            data_type = AtomDataType(type_code)
        except ValueError:
            data_type = type_code
        payload = data[8:]
        is_pair = box_type in (b"trkn", b"disk") and len(payload) >= 6

        content: ItunesContent
        if data_type == AtomDataType.IMPLICIT:
            if is_pair:
                content = _parse_pair(box_type, payload)
            else:
                content = ItunesText(payload.decode("utf-8", "replace"))
        elif data_type == AtomDataType.UTF8:
            content = ItunesText(payload.decode("utf-8", "replace"))
        elif data_type == AtomDataType.UTF16:
            # a trailing odd byte is dropped
            even = payload[:len(payload) & ~1]
            content = ItunesText(even.decode("utf-16-be", "replace"))
        elif data_type == AtomDataType.INTEGER:
            content = ItunesInteger(_parse_int(payload, True))
        elif data_type == AtomDataType.UNSIGNED_INTEGER:
            if is_pair:
                content = _parse_pair(box_type, payload)
            else:
                content = ItunesUnsignedInteger(_parse_int(payload, False))
        elif data_type == AtomDataType.JPEG:
            content = ItunesImage("JPEG", len(payload))
        elif data_type == AtomDataType.PNG:
            content = ItunesImage("PNG", len(payload))
        else:
            content = ItunesBinary(payload)

        return cls(data_type, content)

    @property
    def data_type_label(self) -> str:
        return get_data_type_label(self.data_type)

    def pprint(self) -> str:
        return f"Data Type: {self.data_type_label}\n{self.content.pprint()}"

    @override
    def __repr__(self) -> str:
        return "<{} data_type={!r} content={!r}>".format(
            type(self).__name__, self.data_type, self.content)
