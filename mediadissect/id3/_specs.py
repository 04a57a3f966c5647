# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

from enum import IntEnum, IntFlag
from typing import TYPE_CHECKING, Final, override

from .._util import find_terminator
from ._util import (
    MAX_EMBED_DEPTH,
    ID3BadTerminatorError,
    ID3BadTextError,
    ID3DepthError,
    ID3JunkFrameError,
    ID3TooShortError,
    ID3UnknownEncodingError,
)

if TYPE_CHECKING:
    from ._frames import FrameContent, FrameList
    from ._tags import ID3Header


class PictureType(IntEnum):
    """Enumeration of image types defined by the ID3 standard for the APIC
    frame.
    """

    OTHER = 0
    """Other"""

    FILE_ICON = 1
    """32x32 pixels 'file icon' (PNG only)"""

    OTHER_FILE_ICON = 2
    """Other file icon"""

    COVER_FRONT = 3
    """Cover (front)"""

    COVER_BACK = 4
    """Cover (back)"""

    LEAFLET_PAGE = 5
    """Leaflet page"""

    MEDIA = 6
    """Media (e.g. label side of CD)"""

    LEAD_ARTIST = 7
    """Lead artist/lead performer/soloist"""

    ARTIST = 8
    """Artist/performer"""

    CONDUCTOR = 9
    """Conductor"""

    BAND = 10
    """Band/Orchestra"""

    COMPOSER = 11
    """Composer"""

    LYRICIST = 12
    """Lyricist/text writer"""

    RECORDING_LOCATION = 13
    """Recording Location"""

    DURING_RECORDING = 14
    """During recording"""

    DURING_PERFORMANCE = 15
    """During performance"""

    SCREEN_CAPTURE = 16
    """Movie/video screen capture"""

    FISH = 17
    """A bright coloured fish"""

    ILLUSTRATION = 18
    """Illustration"""

    BAND_LOGOTYPE = 19
    """Band/artist logotype"""

    PUBLISHER_LOGOTYPE = 20
    """Publisher/Studio logotype"""

    @property
    def description(self) -> str:
        return _PICTURE_TYPE_DESCRIPTIONS[self]


_PICTURE_TYPE_DESCRIPTIONS: Final = {
    PictureType.OTHER: "Other",
    PictureType.FILE_ICON: "32x32 pixels 'file icon' (PNG only)",
    PictureType.OTHER_FILE_ICON: "Other file icon",
    PictureType.COVER_FRONT: "Cover (front)",
    PictureType.COVER_BACK: "Cover (back)",
    PictureType.LEAFLET_PAGE: "Leaflet page",
    PictureType.MEDIA: "Media (e.g. label side of CD)",
    PictureType.LEAD_ARTIST: "Lead artist/lead performer/soloist",
    PictureType.ARTIST: "Artist/performer",
    PictureType.CONDUCTOR: "Conductor",
    PictureType.BAND: "Band/Orchestra",
    PictureType.COMPOSER: "Composer",
    PictureType.LYRICIST: "Lyricist/text writer",
    PictureType.RECORDING_LOCATION: "Recording Location",
    PictureType.DURING_RECORDING: "During recording",
    PictureType.DURING_PERFORMANCE: "During performance",
    PictureType.SCREEN_CAPTURE: "Movie/video screen capture",
    PictureType.FISH: "A bright coloured fish",
    PictureType.ILLUSTRATION: "Illustration",
    PictureType.BAND_LOGOTYPE: "Band/artist logotype",
    PictureType.PUBLISHER_LOGOTYPE: "Publisher/Studio logotype",
}


def get_picture_type_description(value: int) -> str:
    try:
        return PictureType(value).description
    except ValueError:
        return "Unknown"


class CTOCFlags(IntFlag):

    TOP_LEVEL = 0x2
    """Identifies the CTOC root frame"""

    ORDERED = 0x1
    """Child elements are ordered"""


class Encoding(IntEnum):
    """Text Encoding"""

    LATIN1 = 0
    """ISO-8859-1"""

    UTF16 = 1
    """UTF-16 with BOM"""

    UTF16BE = 2
    """UTF-16BE without BOM"""

    UTF8 = 3
    """UTF-8"""

    @property
    def terminator(self) -> bytes:
        if self in (Encoding.UTF16, Encoding.UTF16BE):
            return b"\x00\x00"
        return b"\x00"

    @property
    def label(self) -> str:
        return _ENCODING_LABELS[self]

    def is_valid_for_version(self, version: int) -> bool:
        """UTF-16BE and UTF-8 were only added with ID3v2.4"""

        return self in (Encoding.LATIN1, Encoding.UTF16) or version >= 4


_ENCODING_LABELS: Final = {
    Encoding.LATIN1: "ISO-8859-1",
    Encoding.UTF16: "UTF-16 with BOM",
    Encoding.UTF16BE: "UTF-16BE",
    Encoding.UTF8: "UTF-8",
}


def _decode_utf16(data: bytes, encoding: Encoding) -> str:
    codec = "utf-16-be"
    if encoding == Encoding.UTF16:
        if data[:2] == b"\xff\xfe":
            codec = "utf-16-le"
            data = data[2:]
        elif data[:2] == b"\xfe\xff":
            data = data[2:]

    if len(data) % 2:
        raise ID3BadTextError("UTF-16 data length must be even")
    try:
        return data.decode(codec)
    except UnicodeDecodeError as e:
        raise ID3BadTextError(f"invalid UTF-16 sequence: {e}") from e


def decode_text(data: bytes, encoding: Encoding) -> str:
    """Decodes a single string, without any terminator handling.

    ISO-8859-1 can't fail and UTF-8 replaces invalid sequences, UTF-16
    data of odd length or with lone surrogates raises.

    Raises:
        ID3BadTextError
    """

    if encoding == Encoding.LATIN1:
        return data.decode("latin-1")
    elif encoding == Encoding.UTF8:
        return data.decode("utf-8", "replace")
    return _decode_utf16(data, encoding)


def split_terminated(data: bytes, encoding: Encoding) -> tuple[bytes, bytes, bool]:
    """Splits at the first terminator of the encoding.

    Returns the data before the terminator, the data after it and whether
    a terminator was found. For UTF-16 only code unit aligned terminators
    count.
    """

    term = encoding.terminator
    index = find_terminator(data, len(term))
    if index == -1:
        return data, b"", False
    return data[:index], data[index + len(term):], True


def decode_text_list(data: bytes, encoding: Encoding) -> list[str]:
    """Decodes a list of terminator separated strings.

    Empty strings are dropped, a missing final terminator is fine.

    Raises:
        ID3BadTextError
    """

    values: list[str] = []
    while data:
        chunk, data, _found = split_terminated(data, encoding)
        value = decode_text(chunk, encoding)
        if value:
            values.append(value)
    return values


class Spec[T]:
    """Reads one field of a frame.

    `read` gets the remaining frame data and returns the value and the
    data left over for the following specs.
    """

    handle_nodata: bool = False
    """If reading empty data is possible"""

    name: str
    default: T

    def __init__(self, name: str, default: T):
        self.name = name
        self.default = default

    @override
    def __hash__(self) -> int:
        raise TypeError("Spec objects are unhashable")

    def read(self, header: ID3Header, frame: FrameContent,
             data: bytes) -> tuple[T, bytes]:
        """
        Returns:
            (value: object, left_data: bytes)
        Raises:
            ID3JunkFrameError
        """

        raise NotImplementedError


class ByteSpec(Spec[int]):

    def __init__(self, name: str, default: int = 0):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        return bytearray(data)[0], data[1:]


class PictureTypeSpec(ByteSpec):
    """Unknown picture types are kept as plain integers."""

    def __init__(self, name: str, default: int = PictureType.COVER_FRONT):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        value, data = ByteSpec.read(self, header, frame, data)
        try:
            return PictureType(value), data
        except ValueError:
            return value, data


class CTOCFlagsSpec(ByteSpec):

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        value, data = ByteSpec.read(self, header, frame, data)
        return CTOCFlags(value), data


class EncodingSpec(ByteSpec):
    """The text encoding byte.

    Encodings the tag version doesn't define are rejected.
    """

    def __init__(self, name: str, default: Encoding = Encoding.UTF16):
        super().__init__(name, default)

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        enc, data = super().read(header, frame, data)
        try:
            encoding = Encoding(enc)
        except ValueError:
            raise ID3UnknownEncodingError(
                f"Unknown text encoding: {enc}") from None

        if not encoding.is_valid_for_version(header.version[1]):
            raise ID3UnknownEncodingError(
                f"{encoding.label} not allowed in ID3v2.{header.version[1]}")
        return encoding, data


class SizedIntegerSpec(Spec[int]):
    """A big endian unsigned integer of fixed size."""

    def __init__(self, name: str, size: int, default: int = 0):
        super().__init__(name, default)
        self._size = size

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        if len(data) < self._size:
            raise ID3TooShortError(f"missing {self.name}")
        return int.from_bytes(data[:self._size], "big"), data[self._size:]


class StringSpec(Spec[str]):
    """A fixed size payload, like the three character language code."""

    def __init__(self, name: str, length: int, default: str | None = None):
        if default is None:
            default = " " * length
        super().__init__(name, default)
        self.len = length

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        if len(data) < self.len:
            raise ID3TooShortError(f"{self.name} needs {self.len} bytes")
        chunk = data[:self.len]
        return chunk.decode("utf-8", "replace"), data[self.len:]


class Latin1TextSpec(Spec[str]):
    """ISO-8859-1 text up to the first null byte.

    If `terminated` is set the null byte is required.
    """

    handle_nodata = True

    def __init__(self, name: str, default: str = "", terminated: bool = False):
        super().__init__(name, default)
        self.terminated = terminated

    @override
    def read(self, header: ID3Header, frame: FrameContent,
             data: bytes) -> tuple[str, bytes]:
        if b'\x00' in data:
            data, ret = data.split(b'\x00', 1)
        elif self.terminated:
            raise ID3BadTerminatorError(f"{self.name} not null-terminated")
        else:
            ret = b''
        return data.decode('latin1'), ret


class EncodedTextSpec(Spec[str]):
    """Text in the frame encoding, up to the encoding terminator.

    If `terminated` is set the terminator is required.
    """

    def __init__(self, name: str, default: str = "", terminated: bool = False):
        super().__init__(name, default)
        self.terminated = terminated

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        encoding = frame.encoding
        chunk, data, found = split_terminated(data, encoding)
        if self.terminated and not found:
            raise ID3BadTerminatorError(
                f"{self.name} not properly terminated")
        return decode_text(chunk, encoding), data


class EncodedTextListSpec(Spec[list[str]]):
    """All remaining data as a list of terminator separated strings."""

    def __init__(self, name: str, default: list[str] | None = None):
        super().__init__(name, default or [])

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        return decode_text_list(data, frame.encoding), b""


class BinaryDataSpec(Spec[bytes]):

    handle_nodata: bool = True

    def __init__(self, name: str, default: bytes = b"",
                 max_size: int | None = None):
        super().__init__(name, default)
        self.max_size = max_size

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        if self.max_size is not None and len(data) > self.max_size:
            raise ID3JunkFrameError(
                f"{self.name} too long (max {self.max_size} bytes)")
        return data, b''


class Latin1TextListSpec(Spec[list[str]]):
    """An entry count byte followed by null terminated ISO-8859-1 strings."""

    def __init__(self, name: str, default: list[str] | None = None):
        super().__init__(name, default or [])
        self._bspec = ByteSpec("entry_count", default=0)
        self._lspec = Latin1TextSpec("child_element_id", terminated=True)

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        count, data = self._bspec.read(header, frame, data)
        entries: list[str] = []
        for _i in range(count):
            entry, data = self._lspec.read(header, frame, data)
            entries.append(entry)
        return entries, data


class ID3FramesSpec(Spec["FrameList"]):
    """Frames embedded in CHAP and CTOC.

    Offsets of the embedded frames are relative to the start of the data
    left for this spec.
    """

    handle_nodata = True

    def __init__(self, name: str):
        super().__init__(name, None)

    @override
    def read(self, header: ID3Header, frame: FrameContent, data: bytes):
        from ._frames import read_frames

        depth = frame._depth + 1
        if depth > MAX_EMBED_DEPTH:
            raise ID3DepthError(
                f"embedded frames nested deeper than {MAX_EMBED_DEPTH}")
        return read_frames(header, data, depth), b""

