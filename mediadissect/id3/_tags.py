# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
import struct
from typing import IO, Final, override

from .._util import cdata, get_size, read_full
from ._frames import Frame, FrameIssue, FrameIssueKind, FrameList, read_frames
from ._util import (
    BitPaddedInt,
    ID3BadExtendedHeaderError,
    ID3NoHeaderError,
    ID3UnsupportedVersionError,
    decode_synchsafe,
    error,
    unsynch,
)

logger = logging.getLogger(__name__)

HEADER_SIZE: Final = 10


class ID3Header:
    """The ten byte ID3v2 tag header.

    Attributes:
        version (tuple[int, int, int]): e.g. (2, 4, 0)
        flags (int): the raw header flags
        size (int): the tag size from the header, without the header itself
        issues (list[FrameIssue]): problems with the header which didn't
            stop decoding
    """

    _V24: Final = (2, 4, 0)
    _V23: Final = (2, 3, 0)

    F_UNSYNCH: Final = 0x80
    F_EXTENDED: Final = 0x40
    F_EXPERIMENTAL: Final = 0x20
    F_FOOTER: Final = 0x10

    version: tuple[int, int, int]
    flags: int
    size: int
    issues: list[FrameIssue]

    def __init__(self, fileobj: IO[bytes] | None = None):
        """Raises ID3NoHeaderError, ID3UnsupportedVersionError or error"""

        self.issues = []

        if fileobj is None:
            # empty header, used before loading
            self.version = self._V24
            self.flags = 0
            self.size = 0
            return

        data = fileobj.read(HEADER_SIZE)
        if len(data) != HEADER_SIZE:
            raise ID3NoHeaderError("Header too short: %d bytes" % len(data))

        id3, vmaj, vrev, flags, size_data = struct.unpack('>3sBBB4s', data)
        if id3 != b'ID3':
            raise ID3NoHeaderError(f"{id3!r} doesn't start with an ID3 tag")

        if vmaj not in [3, 4]:
            raise ID3UnsupportedVersionError(f"ID3v2.{vmaj} not supported")

        self.version = (2, vmaj, vrev)
        self.flags = flags
        self.size = decode_synchsafe(size_data)

        if not BitPaddedInt.has_valid_padding(size_data):
            self.issues.append(FrameIssue(
                FrameIssueKind.BAD_SYNCHSAFE, 6, None, self.size,
                f"tag size {size_data!r} has high bits set"))
            logger.warning("ID3 tag size %r is not synchsafe, using the "
                           "lower 7 bits of each byte", size_data)

    @property
    def major_version(self) -> int:
        return self.version[1]

    @property
    def minor_version(self) -> int:
        return self.version[2]

    @property
    def f_unsynch(self) -> bool:
        return bool(self.flags & self.F_UNSYNCH)

    @property
    def f_extended(self) -> bool:
        return bool(self.flags & self.F_EXTENDED)

    @property
    def f_experimental(self) -> bool:
        return bool(self.flags & self.F_EXPERIMENTAL)

    @property
    def f_footer(self) -> bool:
        """Only defined for ID3v2.4"""

        return self.version >= self._V24 and bool(self.flags & self.F_FOOTER)

    def flag_names(self) -> list[str]:
        names: list[str] = []
        if self.f_unsynch:
            names.append("unsynchronisation")
        if self.f_extended:
            names.append("extended header")
        if self.f_experimental:
            names.append("experimental")
        if self.f_footer:
            names.append("footer present")
        return names

    def pprint(self) -> str:
        flags = ", ".join(self.flag_names()) or "none"
        return (f"ID3v2.{self.major_version}.{self.minor_version}, "
                f"flags: 0x{self.flags:02x} ({flags}), size: {self.size} bytes")

    @override
    def __repr__(self) -> str:
        return "<{} version={!r} flags=0x{:02x} size={!r}>".format(
            type(self).__name__, self.version, self.flags, self.size)


def parse_extended_header(header: ID3Header, data: bytes) -> tuple[int, int]:
    """Returns the extended header size and where the frames start.

    The size is synchsafe in ID3v2.4 and a plain integer in ID3v2.3.

    Raises:
        ID3BadExtendedHeaderError
    """

    if len(data) < 4:
        raise ID3BadExtendedHeaderError("extended header too short")

    if header.version >= header._V24:
        extsize = decode_synchsafe(data[:4])
    else:
        extsize = cdata.uint_be(data[:4])

    frame_start = 4 + extsize
    if frame_start > len(data):
        raise ID3BadExtendedHeaderError(
            f"extended header size {extsize} exceeds the tag size "
            f"{len(data)}")
    return extsize, frame_start


class ID3Tags:
    """A decoded ID3v2.3 or ID3v2.4 tag.

    Attributes:
        header (ID3Header): the tag header
        frames (FrameList): all decoded frames in stored order
        extended_header_size (int | None): None without extended header
        frame_start (int): offset of the first frame in the tag data
        has_tag (bool): False until a tag was loaded
    """

    header: ID3Header
    frames: FrameList
    extended_header_size: int | None
    frame_start: int
    has_tag: bool

    def __init__(self, fileobj: IO[bytes] | None = None):
        self.header = ID3Header()
        self.frames = FrameList()
        self.extended_header_size = None
        self.frame_start = 0
        self.has_tag = False
        self._truncated: list[FrameIssue] = []
        if fileobj is not None:
            self.load(fileobj)

    def load(self, fileobj: IO[bytes]) -> None:
        """Decodes the tag at the current file position.

        Raises:
            ID3NoHeaderError
            ID3UnsupportedVersionError
            ID3BadExtendedHeaderError
            error
        """

        try:
            self.header = header = ID3Header(fileobj)
            available = get_size(fileobj) - fileobj.tell()
            size = header.size
            if size > available:
                self._truncated = [FrameIssue(
                    FrameIssueKind.TAG_TRUNCATED, 0, None, size,
                    f"tag size {size} but only {available} bytes left")]
                logger.warning("ID3 tag claims %d bytes, file has %d",
                               size, available)
                size = available
            data = read_full(fileobj, size)
        except IOError as e:
            raise error(e) from e

        if header.f_unsynch:
            data = unsynch.decode(data)

        if header.f_extended:
            self.extended_header_size, self.frame_start = \
                parse_extended_header(header, data)

        self.frames = read_frames(header, data, start=self.frame_start)
        self.has_tag = True

    @property
    def version_major(self) -> int:
        return self.header.major_version

    @property
    def version_minor(self) -> int:
        return self.header.minor_version

    @property
    def flags(self) -> int:
        return self.header.flags

    @property
    def declared_size(self) -> int:
        return self.header.size

    @property
    def issues(self) -> list[FrameIssue]:
        """Header warnings followed by skipped frames and the halt reason"""

        return self.header.issues + self._truncated + self.frames.issues

    def getall(self, frame_id: str) -> list[Frame]:
        """Return all frames with the given id"""

        return self.frames.getall(frame_id)

    def __iter__(self):
        return iter(self.frames)

    def __len__(self) -> int:
        return len(self.frames)

    def pprint(self) -> str:
        """
        Returns:
            text: tags in a human readable form, one frame per line
        """

        if not self.has_tag:
            return "No ID3v2 header found"

        lines = [frame.pprint() for frame in self.frames]
        lines.extend(issue.pprint() for issue in self.issues)
        return "\n".join(lines)
