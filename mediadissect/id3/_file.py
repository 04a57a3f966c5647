# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
from typing import IO, override

from .._file import Dissector
from ._tags import ID3Tags
from ._util import error

logger = logging.getLogger(__name__)


def detect_mpeg_sync(header: bytes) -> bool:
    """Whether the data starts with an MPEG audio frame sync.

    Files starting with audio data have no ID3v2 tag at all, they are
    still routed to the ID3v2.3 dissector.
    """

    return len(header) >= 2 and header[0] == 0xFF and \
        header[1] & 0xE0 == 0xE0


def _has_id3_version(header: bytes, major: int) -> bool:
    return len(header) >= 4 and header[:3] == b"ID3" and header[3] == major


class ID3v23Dissector(Dissector):
    """ID3v2.3 tags, and MPEG streams without a tag"""

    media_type = "ID3v2.3"
    name = "ID3v2.3 Dissector"

    @override
    @staticmethod
    def can_handle(header: bytes) -> bool:
        return _has_id3_version(header, 3) or detect_mpeg_sync(header)

    @override
    @classmethod
    def dissect(cls, fileobj: IO[bytes]) -> ID3Tags:
        """Returns an empty model with `has_tag` False for MPEG streams
        without a tag.

        Raises mediadissect.id3.error
        """

        try:
            start = fileobj.tell()
            magic = fileobj.read(3)
            fileobj.seek(start)
        except IOError as e:
            raise error(e) from e

        if magic != b"ID3":
            logger.debug("no ID3v2 header, stream starts with %r", magic)
            return ID3Tags()
        return ID3Tags(fileobj)


class ID3v24Dissector(Dissector):
    """ID3v2.4 tags"""

    media_type = "ID3v2.4"
    name = "ID3v2.4 Dissector"

    @override
    @staticmethod
    def can_handle(header: bytes) -> bool:
        return _has_id3_version(header, 4)

    @override
    @classmethod
    def dissect(cls, fileobj: IO[bytes]) -> ID3Tags:
        """Raises mediadissect.id3.error"""

        return ID3Tags(fileobj)
