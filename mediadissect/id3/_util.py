# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

from typing import Final

from .._util import MediaDissectError

MAX_EMBED_DEPTH: Final = 20
"""Maximum nesting of CHAP/CTOC embedded frames"""


class error(MediaDissectError):
    pass


class ID3NoHeaderError(error, ValueError):
    pass


class ID3UnsupportedVersionError(error, NotImplementedError):
    pass


class ID3BadExtendedHeaderError(error, ValueError):
    pass


class ID3JunkFrameError(error, ValueError):
    """The content of a single frame couldn't be decoded.

    Never fatal for the tag, the frame falls back to binary content.
    """


class ID3TooShortError(ID3JunkFrameError):
    pass


class ID3BadTerminatorError(ID3JunkFrameError):
    pass


class ID3UnknownEncodingError(ID3JunkFrameError):
    pass


class ID3BadTextError(ID3JunkFrameError):
    pass


class ID3DepthError(ID3JunkFrameError):
    pass


class ID3BadCompressedData(ID3JunkFrameError):
    pass


class ID3EncryptionUnsupportedError(ID3JunkFrameError, NotImplementedError):
    pass


class unsynch:
    @staticmethod
    def decode(value: bytes) -> bytes:
        """Removes unsynchronisation in a single pass.

        Every 0xFF 0x00 pair becomes 0xFF. Unlike a strict decoder this
        never fails, invalid sequences are passed through as is.
        """

        return value.replace(b"\xff\x00", b"\xff")


class BitPaddedInt(int):
    """An integer stored with only the low `bits` of each byte in use.

    With the default of 7 bits this decodes ID3v2 synchsafe integers, the
    high bit of every byte is ignored.
    """

    bits: int
    bigendian: bool

    def __new__(cls, value: bytes | int, bits: int = 7, bigendian: bool = True):
        mask = (1 << bits) - 1
        numeric_value = 0
        shift = 0

        if isinstance(value, int):
            while value:
                numeric_value += (value & mask) << shift
                value >>= 8
                shift += bits
        elif isinstance(value, bytes):
            bytes_ = bytearray(value)
            if bigendian:
                bytes_.reverse()
            for byte in bytes_:
                numeric_value += (byte & mask) << shift
                shift += bits
        else:
            raise TypeError

        self = int.__new__(cls, numeric_value)
        self.bits = bits
        self.bigendian = bigendian
        return self

    @staticmethod
    def has_valid_padding(value: bytes | int, bits: int = 7) -> bool:
        """Whether the padding bits are all zero"""

        assert bits <= 8

        mask = (((1 << (8 - bits)) - 1) << bits)

        if isinstance(value, int):
            while value:
                if value & mask:
                    return False
                value >>= 8
        elif isinstance(value, bytes):
            for byte in bytearray(value):
                if byte & mask:
                    return False
        else:
            raise TypeError

        return True


def decode_synchsafe(data: bytes) -> int:
    """Returns the 28 bit value of a 4 byte synchsafe integer.

    The high bit of each byte is ignored, check has_valid_padding() to
    find out if it was set.

    Raises:
        ID3TooShortError
    """

    if len(data) < 4:
        raise ID3TooShortError("synchsafe integer needs 4 bytes")
    return int(BitPaddedInt(data[:4]))


TEXT_FRAMES_V23: Final = frozenset([
    "TALB", "TBPM", "TCOM", "TCON", "TCOP", "TDAT", "TDLY", "TENC", "TEXT",
    "TFLT", "TIME", "TIT1", "TIT2", "TIT3", "TKEY", "TLAN", "TLEN", "TMED",
    "TOAL", "TOFN", "TOLY", "TOPE", "TORY", "TOWN", "TPE1", "TPE2", "TPE3",
    "TPE4", "TPOS", "TPUB", "TRCK", "TRDA", "TRSN", "TRSO", "TSIZ", "TSRC",
    "TSSE", "TYER", "TXXX",
])

TEXT_FRAMES_V24: Final = frozenset([
    "TALB", "TBPM", "TCOM", "TCON", "TCOP", "TDEN", "TDLY", "TDOR", "TDRC",
    "TDRL", "TDTG", "TENC", "TEXT", "TFLT", "TIPL", "TIT1", "TIT2", "TIT3",
    "TKEY", "TLAN", "TLEN", "TMCL", "TMED", "TMOO", "TOAL", "TOFN", "TOLY",
    "TOPE", "TOWN", "TPE1", "TPE2", "TPE3", "TPE4", "TPOS", "TPRO", "TPUB",
    "TRCK", "TRSN", "TRSO", "TSOA", "TSOP", "TSOT", "TSRC", "TSSE", "TSST",
    "TXXX",
])

URL_FRAMES: Final = frozenset([
    "WCOM", "WCOP", "WOAF", "WOAR", "WOAS", "WORS", "WPAY", "WPUB", "WXXX",
])

OTHER_FRAMES_V23: Final = frozenset([
    "UFID", "MCDI", "ETCO", "MLLT", "SYTC", "USLT", "SYLT", "COMM", "RVAD",
    "EQUA", "RVRB", "PCNT", "POPM", "RBUF", "AENC", "LINK", "POSS", "USER",
    "OWNE", "COMR", "ENCR", "GRID", "PRIV", "GEOB", "IPLS", "APIC", "CHAP",
    "CTOC",
])

OTHER_FRAMES_V24: Final = frozenset([
    "UFID", "MCDI", "ETCO", "MLLT", "SYTC", "USLT", "SYLT", "COMM", "RVA2",
    "EQU2", "RVRB", "PCNT", "POPM", "RBUF", "AENC", "LINK", "POSS", "USER",
    "OWNE", "COMR", "ENCR", "GRID", "PRIV", "GEOB", "APIC", "SEEK", "ASPI",
    "SIGN", "CHAP", "CTOC",
])

FRAMES_V23: Final = TEXT_FRAMES_V23 | URL_FRAMES | OTHER_FRAMES_V23
FRAMES_V24: Final = TEXT_FRAMES_V24 | URL_FRAMES | OTHER_FRAMES_V24

_FRAMES_BY_VERSION: Final = {3: FRAMES_V23, 4: FRAMES_V24}


def looks_like_frame_id(data: bytes) -> bool:
    """Whether the four bytes could start a frame header.

    Anything else (a null byte or non alphanumeric ASCII) marks the start
    of the padding.
    """

    return len(data) == 4 and data.isalnum()


def is_valid_frame_for_version(frame_id: str, version: int) -> bool:
    """Whether the frame id is defined by ID3v2.<version>.

    Only major versions 3 and 4 are supported, anything else is never
    valid.
    """

    return frame_id in _FRAMES_BY_VERSION.get(version, frozenset())
