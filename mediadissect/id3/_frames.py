# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
import zlib
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, NamedTuple, override

from .._constants import get_frame_description
from .._util import cdata
from ._specs import (
    BinaryDataSpec,
    CTOCFlags,
    CTOCFlagsSpec,
    EncodedTextListSpec,
    EncodedTextSpec,
    Encoding,
    EncodingSpec,
    ID3FramesSpec,
    Latin1TextListSpec,
    Latin1TextSpec,
    PictureTypeSpec,
    SizedIntegerSpec,
    Spec,
    StringSpec,
    get_picture_type_description,
)
from ._util import (
    ID3BadCompressedData,
    ID3EncryptionUnsupportedError,
    ID3JunkFrameError,
    ID3TooShortError,
    decode_synchsafe,
    is_valid_frame_for_version,
    looks_like_frame_id,
    unsynch,
)

if TYPE_CHECKING:
    from ._tags import ID3Header

logger = logging.getLogger(__name__)

FRAME_HEADER_SIZE: Final = 10


class FrameContent:
    """Decoded payload of an ID3v2 frame.

    Each subclass describes its layout with a list of specs which are read
    in order. Specs in `_optionalspec` are only read while data is left.
    """

    _framespec: Sequence[Spec[Any]] = []
    _optionalspec: Sequence[Spec[Any]] = []

    _depth: int = 0

    def __init__(self, **kwargs: object):
        for checker in self._framespec:
            setattr(self, checker.name, kwargs.get(checker.name, checker.default))
        for checker in self._optionalspec:
            setattr(self, checker.name, kwargs.get(checker.name, checker.default))

    @override
    def __repr__(self) -> str:
        kw: list[str] = []
        for attr in list(self._framespec) + list(self._optionalspec):
            if hasattr(self, attr.name):
                kw.append(f'{attr.name}={getattr(self, attr.name)!r}')
        return '{}({})'.format(type(self).__name__, ', '.join(kw))

    @override
    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(
            getattr(self, spec.name) == getattr(other, spec.name)
            for spec in list(self._framespec) + list(self._optionalspec))

    __hash__ = None  # type: ignore[assignment]

    def _readData(self, header: ID3Header, data: bytes) -> bytes:
        """Raises ID3JunkFrameError; Returns leftover data"""

        for reader in self._framespec:
            if len(data) or reader.handle_nodata:
                value, data = reader.read(header, self, data)
            else:
                raise ID3TooShortError(f"no data left for {reader.name}")
            setattr(self, reader.name, value)

        for reader in self._optionalspec:
            if len(data) or reader.handle_nodata:
                value, data = reader.read(header, self, data)
            else:
                break
            setattr(self, reader.name, value)

        return data

    @classmethod
    def _fromData(cls, header: ID3Header, data: bytes, depth: int = 0):
        """Construct the content from the (flag processed) frame payload.

        Raises:
            ID3JunkFrameError
        """

        content = cls()
        content._depth = depth
        content._readData(header, data)
        return content

    def pprint(self) -> str:
        """Return a human-readable representation of the content."""
        return f"{type(self).__name__}={self._pprint()}"

    def _pprint(self) -> str:
        return "[unrepresentable data]"


class TextFrame(FrameContent):
    """Text strings.

    All T*** frames except TXXX. The payload can hold several null
    separated strings, empty ones are dropped.
    """

    encoding: Encoding
    strings: list[str]

    _framespec = [
        EncodingSpec("encoding"),
        EncodedTextListSpec("strings"),
    ]

    @property
    def text(self) -> str:
        """The first string or an empty one"""

        return self.strings[0] if self.strings else ""

    @override
    def _pprint(self) -> str:
        return " / ".join(self.strings)


class UrlFrame(FrameContent):
    """A web link, all W*** frames except WXXX."""

    url: str

    _framespec = [Latin1TextSpec("url")]

    @override
    def _pprint(self) -> str:
        return self.url


class UserTextFrame(FrameContent):
    """User defined text (TXXX)"""

    encoding: Encoding
    desc: str
    value: str

    _framespec = [
        EncodingSpec("encoding"),
        EncodedTextSpec("desc"),
    ]

    _optionalspec = [EncodedTextSpec("value")]

    @override
    def _pprint(self) -> str:
        return f"{self.desc}={self.value}"


class UserUrlFrame(FrameContent):
    """User defined URL (WXXX)

    The description uses the frame encoding, the link is always
    ISO-8859-1.
    """

    encoding: Encoding
    desc: str
    url: str

    _framespec = [
        EncodingSpec("encoding"),
        EncodedTextSpec("desc"),
    ]

    _optionalspec = [Latin1TextSpec("url")]

    @override
    def _pprint(self) -> str:
        return f"{self.desc}={self.url}"


class CommentFrame(FrameContent):
    """Comments (COMM) and unsynchronised lyrics (USLT)

    Needs at least one byte after the encoding and the language code.
    """

    encoding: Encoding
    lang: str
    desc: str
    text: str

    _framespec = [
        EncodingSpec("encoding"),
        StringSpec("lang", 3, "XXX"),
        EncodedTextSpec("desc"),
    ]

    _optionalspec = [EncodedTextSpec("text")]

    @override
    def _pprint(self) -> str:
        return f"{self.desc}={self.lang}={self.text}"


class PictureFrame(FrameContent):
    """Attached (or linked) Picture (APIC).

    Attributes:
        encoding (Encoding): text encoding for the description
        mime (str): a MIME type (e.g. ``image/jpeg``) or ``-->`` if the data
            is a URI pointing to the image
        type (PictureType): the type of the image, unknown types stay ints
        desc (str): a text description of the image
        data (bytes): raw image data
    """

    encoding: Encoding
    mime: str
    type: int
    desc: str
    data: bytes

    _framespec = [
        EncodingSpec("encoding"),
        Latin1TextSpec("mime", terminated=True),
        PictureTypeSpec("type"),
        EncodedTextSpec("desc", terminated=True),
        BinaryDataSpec("data"),
    ]

    @property
    def type_description(self) -> str:
        return get_picture_type_description(self.type)

    @override
    def _pprint(self) -> str:
        return (f"{self.desc} ({self.mime}, {len(self.data)} bytes, "
                f"{self.type_description})")


class UniqueFileIdFrame(FrameContent):
    """Unique file identifier (UFID).

    The identifier is at most 64 bytes.
    """

    owner: str
    data: bytes

    _framespec = [
        Latin1TextSpec("owner", terminated=True),
        BinaryDataSpec("data", max_size=64),
    ]

    @override
    def _pprint(self) -> str:
        return f"{self.owner}={self.data!r}"


class ChapterFrame(FrameContent):
    """Chapter (CHAP)

    Offsets of 0xFFFFFFFF mean the byte offsets are unused and only the
    times should be used.
    """

    UNUSED: Final = 0xFFFFFFFF

    element_id: str
    start_time: int
    end_time: int
    start_offset: int
    end_offset: int
    sub_frames: FrameList

    _framespec = [
        Latin1TextSpec("element_id", terminated=True),
        SizedIntegerSpec("start_time", 4, default=0),
        SizedIntegerSpec("end_time", 4, default=0),
        SizedIntegerSpec("start_offset", 4, default=0xffffffff),
        SizedIntegerSpec("end_offset", 4, default=0xffffffff),
        ID3FramesSpec("sub_frames"),
    ]

    @override
    def _pprint(self) -> str:
        frame_pprint = ""
        for frame in self.sub_frames or []:
            for line in frame.pprint().splitlines():
                frame_pprint += "\n" + " " * 4 + line
        return f"{self.element_id} time={self.start_time}..{self.end_time} " \
               f"offset={self.start_offset}..{self.end_offset}{frame_pprint}"


class TableOfContentsFrame(FrameContent):
    """Table of contents (CTOC)

    element_id is the identifier of this CTOC frame, child_element_ids
    references other CHAP or CTOC frames.
    """

    element_id: str
    flags: CTOCFlags
    child_element_ids: list[str]
    sub_frames: FrameList

    _framespec = [
        Latin1TextSpec("element_id", terminated=True),
        CTOCFlagsSpec("flags", default=0),
        Latin1TextListSpec("child_element_ids"),
        ID3FramesSpec("sub_frames"),
    ]

    @property
    def top_level(self) -> bool:
        return bool(self.flags & CTOCFlags.TOP_LEVEL)

    @property
    def ordered(self) -> bool:
        return bool(self.flags & CTOCFlags.ORDERED)

    @override
    def _pprint(self) -> str:
        frame_pprint = ""
        for frame in self.sub_frames or []:
            for line in frame.pprint().splitlines():
                frame_pprint += "\n" + " " * 4 + line
        return "{} flags={} child_element_ids={}{}".format(
            self.element_id, int(self.flags),
            ",".join(self.child_element_ids), frame_pprint)


class BinaryFrame(FrameContent):
    """Opaque payload.

    Used for frames which aren't decoded and for all frames whose typed
    decoding failed.
    """

    data: bytes

    _framespec = [BinaryDataSpec("data")]

    @override
    def _pprint(self) -> str:
        return f"[{len(self.data)} bytes]"


_CONTENT_CLASSES: Final = {
    "TXXX": UserTextFrame,
    "WXXX": UserUrlFrame,
    "COMM": CommentFrame,
    "USLT": CommentFrame,
    "APIC": PictureFrame,
    "UFID": UniqueFileIdFrame,
    "CHAP": ChapterFrame,
    "CTOC": TableOfContentsFrame,
}


def get_content_class(frame_id: str, version: int) -> type[FrameContent]:
    """Returns the content class used for a frame id in ID3v2.<version>.

    Ids the version doesn't define are always binary.
    """

    if not is_valid_frame_for_version(frame_id, version):
        return BinaryFrame
    if frame_id in _CONTENT_CLASSES:
        return _CONTENT_CLASSES[frame_id]
    if frame_id.startswith("T"):
        return TextFrame
    if frame_id.startswith("W"):
        return UrlFrame
    return BinaryFrame


class Frame:
    """Fundamental unit of ID3 data.

    Attributes:
        id (str): the four character frame id
        size (int): the size from the frame header
        flags (int): the frame format flags
        offset (int): position of the frame header in the tag data (or in
            the parent payload for embedded frames)
        data (bytes): the raw payload, as stored in the tag
        content (FrameContent): the decoded payload, BinaryFrame if the
            frame isn't known or couldn't be decoded
        error (ID3JunkFrameError): why decoding failed, or None
    """

    FLAG23_ALTERTAG: Final = 0x8000
    FLAG23_ALTERFILE: Final = 0x4000
    FLAG23_READONLY: Final = 0x2000
    FLAG23_COMPRESS: Final = 0x0080
    FLAG23_ENCRYPT: Final = 0x0040
    FLAG23_GROUP: Final = 0x0020

    FLAG24_ALTERTAG: Final = 0x4000
    FLAG24_ALTERFILE: Final = 0x2000
    FLAG24_READONLY: Final = 0x1000
    FLAG24_GROUPID: Final = 0x0040
    FLAG24_COMPRESS: Final = 0x0008
    FLAG24_ENCRYPT: Final = 0x0004
    FLAG24_UNSYNCH: Final = 0x0002
    FLAG24_DATALEN: Final = 0x0001

    id: str
    size: int
    flags: int
    offset: int
    data: bytes
    content: FrameContent
    error: ID3JunkFrameError | None

    def __init__(self, frame_id: str, size: int, flags: int, offset: int,
                 data: bytes):
        self.id = frame_id
        self.size = size
        self.flags = flags
        self.offset = offset
        self.data = data
        self.content = BinaryFrame(data=data)
        self.error = None

    @property
    def description(self) -> str:
        return get_frame_description(self.id)

    @property
    def embedded_frames(self) -> FrameList | None:
        """Frames nested in CHAP or CTOC, None for all other frames"""

        return getattr(self.content, "sub_frames", None)

    def _payload(self, header: ID3Header) -> bytes:
        """Returns the payload with the frame format flags applied.

        Raises:
            ID3JunkFrameError
        """

        data = self.data
        tflags = self.flags

        if header.version >= header._V24:
            if tflags & (Frame.FLAG24_COMPRESS | Frame.FLAG24_DATALEN):
                # The data length indicator is only informational
                if len(data) < 4:
                    raise ID3TooShortError("frame too small for data length")
                data = data[4:]
            if tflags & Frame.FLAG24_UNSYNCH:
                data = unsynch.decode(data)
            if tflags & Frame.FLAG24_ENCRYPT:
                raise ID3EncryptionUnsupportedError("frame is encrypted")
            if tflags & Frame.FLAG24_COMPRESS:
                try:
                    data = zlib.decompress(data)
                except zlib.error as err:
                    raise ID3BadCompressedData(f'zlib: {err}') from err
        else:
            if tflags & Frame.FLAG23_COMPRESS:
                if len(data) < 4:
                    raise ID3TooShortError(f'frame too small: {data!r}')
                data = data[4:]
            if tflags & Frame.FLAG23_ENCRYPT:
                raise ID3EncryptionUnsupportedError("frame is encrypted")
            if tflags & Frame.FLAG23_COMPRESS:
                try:
                    data = zlib.decompress(data)
                except zlib.error as err:
                    raise ID3BadCompressedData(f'zlib: {err}') from err

        return data

    def _decode(self, header: ID3Header, depth: int = 0) -> None:
        cls = get_content_class(self.id, header.version[1])
        if cls is BinaryFrame:
            return

        try:
            self.content = cls._fromData(header, self._payload(header), depth)
        except ID3JunkFrameError as e:
            logger.debug("frame %s at %d: %s", self.id, self.offset, e)
            self.content = BinaryFrame(data=self.data)
            self.error = e

    def pprint(self) -> str:
        """Return a human-readable representation of the frame."""

        text = f"{self.id}={self.content._pprint()}"
        if self.error is not None:
            text += f" (error: {self.error})"
        return text

    @override
    def __repr__(self) -> str:
        return "<{} id={!r} size={!r} flags=0x{:04x} offset={!r} content={!r}>".format(
            type(self).__name__, self.id, self.size, self.flags, self.offset,
            self.content)


class FrameIssueKind(Enum):
    """Things noticed while walking frames or reading the tag header"""

    SKIPPED_UNKNOWN = "skipped unknown frame"
    EMPTY = "skipped empty frame"
    SIZE_EXCEEDS_BUFFER = "frame size exceeds buffer"
    BAD_SYNCHSAFE = "invalid synchsafe integer"
    TAG_TRUNCATED = "tag truncated"


class FrameIssue(NamedTuple):
    kind: FrameIssueKind
    offset: int
    frame_id: str | None
    size: int
    message: str

    def pprint(self) -> str:
        where = f"{self.frame_id} " if self.frame_id else ""
        return f"{self.kind.value}: {where}at {self.offset}: {self.message}"


class FrameList(list[Frame]):
    """Decoded frames in stored order.

    `issues` lists the frames which were skipped and why iteration halted.
    """

    issues: list[FrameIssue]

    def __init__(self, frames: Sequence[Frame] = (),
                 issues: Sequence[FrameIssue] = ()):
        super().__init__(frames)
        self.issues = list(issues)

    def getall(self, frame_id: str) -> list[Frame]:
        """Return all frames with the given id"""

        return [frame for frame in self if frame.id == frame_id]


def read_frames(header: ID3Header, data: bytes, depth: int = 0,
                start: int = 0) -> FrameList:
    """Walks the frames in `data` from `start` until the padding or the end.

    The same walk is used for the tag and for frames embedded in CHAP and
    CTOC, `header` decides the version rules. Frame offsets are positions
    in `data`.
    """

    version = header.version[1]
    frames = FrameList()
    issues = frames.issues
    pos = start

    while pos + FRAME_HEADER_SIZE <= len(data):
        raw_id = data[pos:pos + 4]
        if not looks_like_frame_id(raw_id):
            # padding
            break

        frame_id = raw_id.decode("ascii")
        size_data = data[pos + 4:pos + 8]
        if version == 4:
            size = decode_synchsafe(size_data)
        else:
            size = cdata.uint_be(size_data)
        flags = cdata.ushort_be(data[pos + 8:pos + 10])
        remaining = len(data) - pos - FRAME_HEADER_SIZE

        if not is_valid_frame_for_version(frame_id, version):
            issues.append(FrameIssue(
                FrameIssueKind.SKIPPED_UNKNOWN, pos, frame_id, size,
                f"not a valid ID3v2.{version} frame"))
            logger.info("skipping unknown frame %s at %d", frame_id, pos)
            if 0 < size <= remaining:
                pos += FRAME_HEADER_SIZE + size
            else:
                pos += 1
            continue

        if size == 0:
            issues.append(FrameIssue(
                FrameIssueKind.EMPTY, pos, frame_id, size, "empty frame"))
            pos += FRAME_HEADER_SIZE
            continue

        if size > remaining:
            issues.append(FrameIssue(
                FrameIssueKind.SIZE_EXCEEDS_BUFFER, pos, frame_id, size,
                f"size {size} exceeds remaining {remaining} bytes"))
            logger.warning("frame %s at %d: size %d exceeds remaining %d bytes",
                           frame_id, pos, size, remaining)
            break

        payload = data[pos + FRAME_HEADER_SIZE:pos + FRAME_HEADER_SIZE + size]
        frame = Frame(frame_id, size, flags, pos, payload)
        frame._decode(header, depth)
        frames.append(frame)
        pos += FRAME_HEADER_SIZE + size

    return frames
