# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Decoders for the payload of leaf boxes.

Each class takes the box payload (without the box header) and raises
BoxDecodeError if it is too short for the fixed part of the layout.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final, override

from .._constants import get_handler_name
from .._util import cdata, fourcc
from ._util import BoxDecodeError


def _text(data: bytes) -> str:
    return data.decode("utf-8", "replace").rstrip("\x00")


def _version_flags(data: bytes) -> tuple[int, int]:
    return data[0], cdata.uint_be(b"\x00" + data[1:4])


class BoxContent:
    """Base class for decoded leaf boxes.

    Attributes:
        version (int): the full box version, 0 for plain boxes
    """

    _min_size: int = 0
    _box_type: str = ""

    version: int = 0

    def __init__(self, data: bytes):
        self._check_size(data, self._min_size)
        self._parse(data)

    def _check_size(self, data: bytes, size: int) -> None:
        if len(data) < size:
            raise BoxDecodeError(
                f"{self._box_type} box too short: {len(data)} < {size} bytes")

    def _parse(self, data: bytes) -> None:
        raise NotImplementedError

    def _lines(self) -> list[str]:
        return [f"Version: {self.version}"]

    def pprint(self) -> str:
        return "\n".join(self._lines())

    @override
    def __repr__(self) -> str:
        attrs = ", ".join(f"{k}={v!r}" for k, v in sorted(vars(self).items()))
        return f"{type(self).__name__}({attrs})"


class FileTypeBox(BoxContent):
    """ftyp

    Attributes:
        major_brand (str)
        minor_version (int)
        compatible_brands (list[str])
    """

    _min_size = 8
    _box_type = "ftyp"

    @override
    def _parse(self, data: bytes) -> None:
        self.major_brand = fourcc(data[:4])
        self.minor_version = cdata.uint_be(data[4:8])
        self.compatible_brands = [
            fourcc(data[i:i + 4]) for i in range(8, len(data) - 3, 4)]

    @override
    def _lines(self) -> list[str]:
        lines = [f"Major Brand: '{self.major_brand}'",
                 f"Minor Version: {self.minor_version}"]
        if self.compatible_brands:
            brands = ", ".join(f"'{b}'" for b in self.compatible_brands)
            lines.append(f"Compatible Brands: {brands}")
        return lines


class _TimedHeaderBox(BoxContent):
    """Shared layout of mvhd and mdhd.

    Version 1 uses 64 bit times and durations, version 0 32 bit ones.
    Times count seconds since 1904-01-01.
    """

    creation_time: int
    modification_time: int
    timescale: int
    duration: int

    _min_size = 4

    def _parse_times(self, data: bytes) -> int:
        """Returns the offset after the duration"""

        self.version = data[0]
        if self.version == 1:
            self._check_size(data, 36)
            self.creation_time = cdata.ulonglong_be_from(data, 4)
            self.modification_time = cdata.ulonglong_be_from(data, 12)
            self.timescale = cdata.uint_be_from(data, 20)
            self.duration = cdata.ulonglong_be_from(data, 24)
            return 32
        else:
            self._check_size(data, 24)
            self.creation_time = cdata.uint_be_from(data, 4)
            self.modification_time = cdata.uint_be_from(data, 8)
            self.timescale = cdata.uint_be_from(data, 12)
            self.duration = cdata.uint_be_from(data, 16)
            return 20

    @property
    def length(self) -> float:
        """Duration in seconds, 0 if the timescale is 0"""

        if not self.timescale:
            return 0.0
        return self.duration / self.timescale

    @override
    def _lines(self) -> list[str]:
        return [
            f"Version: {self.version}",
            f"Creation Time: {self.creation_time} (Mac epoch)",
            f"Modification Time: {self.modification_time} (Mac epoch)",
            f"Timescale: {self.timescale} units/second",
            f"Duration: {self.duration} units ({self.length:.2f} seconds)",
        ]


class MovieHeaderBox(_TimedHeaderBox):
    """mvhd

    Attributes:
        rate (float): preferred playback rate, 1.0 is normal speed
        volume (float): preferred volume, 1.0 is full volume
    """

    _box_type = "mvhd"

    @override
    def _parse(self, data: bytes) -> None:
        rate_offset = self._parse_times(data)
        self._check_size(data, rate_offset + 8)
        self.rate = cdata.int_be_from(data, rate_offset) / 65536.0
        self.volume = cdata.short_be_from(data, rate_offset + 4) / 256.0

    @override
    def _lines(self) -> list[str]:
        return super()._lines() + [
            f"Preferred Rate: {self.rate:.2f}",
            f"Preferred Volume: {self.volume:.2f}",
        ]


class MediaHeaderBox(_TimedHeaderBox):
    """mdhd

    Attributes:
        language (str): ISO 639-2/T code packed as three 5 bit letters
    """

    _box_type = "mdhd"

    @override
    def _parse(self, data: bytes) -> None:
        lang_offset = self._parse_times(data)
        self._check_size(data, lang_offset + 2)
        code = cdata.ushort_be_from(data, lang_offset)
        self.language = "".join(
            chr(((code >> shift) & 0x1F) + 0x60) for shift in (10, 5, 0))

    @override
    def _lines(self) -> list[str]:
        return super()._lines() + [f"Language: {self.language}"]


class TrackHeaderBox(BoxContent):
    """tkhd

    Attributes:
        flags (int): 24 bit box flags, see the TRACK_* constants
        creation_time (int)
        modification_time (int)
        track_id (int)
        duration (int): in movie timescale units
        layer (int)
        alternate_group (int)
        volume (float)
        width (float): in pixels
        height (float): in pixels
    """

    TRACK_ENABLED: Final = 0x01
    TRACK_IN_MOVIE: Final = 0x02
    TRACK_IN_PREVIEW: Final = 0x04

    _min_size = 4
    _box_type = "tkhd"

    @override
    def _parse(self, data: bytes) -> None:
        self.version, self.flags = _version_flags(data)
        if self.version == 1:
            self._check_size(data, 40)
            self.creation_time = cdata.ulonglong_be_from(data, 4)
            self.modification_time = cdata.ulonglong_be_from(data, 12)
            self.track_id = cdata.uint_be_from(data, 20)
            self.duration = cdata.ulonglong_be_from(data, 28)
            base = 36
        else:
            self._check_size(data, 28)
            self.creation_time = cdata.uint_be_from(data, 4)
            self.modification_time = cdata.uint_be_from(data, 8)
            self.track_id = cdata.uint_be_from(data, 12)
            self.duration = cdata.uint_be_from(data, 20)
            base = 24

        # reserved, layer, alternate group, volume, reserved, matrix,
        # width, height
        self._check_size(data, base + 60)
        self.layer = cdata.short_be_from(data, base + 8)
        self.alternate_group = cdata.short_be_from(data, base + 10)
        self.volume = cdata.short_be_from(data, base + 12) / 256.0
        self.width = cdata.uint_be_from(data, base + 52) / 65536.0
        self.height = cdata.uint_be_from(data, base + 56) / 65536.0

    @property
    def enabled(self) -> bool:
        return bool(self.flags & self.TRACK_ENABLED)

    @property
    def in_movie(self) -> bool:
        return bool(self.flags & self.TRACK_IN_MOVIE)

    @property
    def in_preview(self) -> bool:
        return bool(self.flags & self.TRACK_IN_PREVIEW)

    @override
    def _lines(self) -> list[str]:
        return [
            f"Version: {self.version}",
            f"Flags: 0x{self.flags:06X} (Track enabled: {self.enabled}, "
            f"In movie: {self.in_movie}, In preview: {self.in_preview})",
            f"Creation Time: {self.creation_time} (Mac epoch)",
            f"Modification Time: {self.modification_time} (Mac epoch)",
            f"Track ID: {self.track_id}",
            f"Duration: {self.duration} units",
            f"Layer: {self.layer}",
            f"Alternate Group: {self.alternate_group}",
            f"Volume: {self.volume:.2f}",
            f"Width: {self.width:.2f} pixels",
            f"Height: {self.height:.2f} pixels",
        ]


class HandlerBox(BoxContent):
    """hdlr

    Attributes:
        handler_type (str): e.g. 'soun' or 'vide'
        manufacturer (str): often empty
        name (str)
    """

    _min_size = 24
    _box_type = "hdlr"

    @override
    def _parse(self, data: bytes) -> None:
        self.version = data[0]
        self.handler_type = _text(data[8:12])
        self.manufacturer = _text(data[12:16])
        self.name = _text(data[24:])

    @property
    def handler_name(self) -> str:
        return get_handler_name(self.handler_type)

    @override
    def _lines(self) -> list[str]:
        lines = [f"Version: {self.version}",
                 f"Handler Type: '{self.handler_type}' ({self.handler_name})"]
        if any(c.isalnum() for c in self.manufacturer):
            lines.append(f"Manufacturer: '{self.manufacturer}'")
        if self.name:
            lines.append(f"Name: \"{self.name}\"")
        return lines


class VideoMediaHeaderBox(BoxContent):
    """vmhd

    Attributes:
        graphics_mode (int)
        opcolor (tuple[int, int, int]): red, green, blue
    """

    _min_size = 12
    _box_type = "vmhd"

    @override
    def _parse(self, data: bytes) -> None:
        self.version = data[0]
        self.graphics_mode = cdata.ushort_be_from(data, 4)
        self.opcolor = tuple(
            cdata.ushort_be_from(data, offset) for offset in (6, 8, 10))

    @override
    def _lines(self) -> list[str]:
        red, green, blue = self.opcolor
        return super()._lines() + [
            f"Graphics Mode: {self.graphics_mode}",
            f"OpColor: R={red}, G={green}, B={blue}",
        ]


class SoundMediaHeaderBox(BoxContent):
    """smhd

    Attributes:
        balance (float): 0 is center, -1 full left, 1 full right
    """

    _min_size = 8
    _box_type = "smhd"

    @override
    def _parse(self, data: bytes) -> None:
        self.version = data[0]
        self.balance = cdata.short_be_from(data, 4) / 256.0

    @override
    def _lines(self) -> list[str]:
        return super()._lines() + [
            f"Balance: {self.balance:.2f} "
            "(0=center, -1=full left, 1=full right)"]


class NullMediaHeaderBox(BoxContent):
    """nmhd"""

    _min_size = 4
    _box_type = "nmhd"

    @override
    def _parse(self, data: bytes) -> None:
        self.version = data[0]


class _CountBox(BoxContent):
    """Full boxes followed by an entry count and a table we don't decode"""

    _min_size = 8
    _count_label = ""

    entry_count: int

    @override
    def _parse(self, data: bytes) -> None:
        self.version = data[0]
        self.entry_count = cdata.uint_be_from(data, 4)

    @override
    def _lines(self) -> list[str]:
        label = f" {self._count_label}" if self._count_label else ""
        return super()._lines() + [
            f"Entry Count: {self.entry_count}{label}"]


class DataReferenceBox(_CountBox):
    """dref, the url/urn entries follow but are not decoded here"""

    _box_type = "dref"


class TimeToSampleBox(_CountBox):
    _box_type = "stts"
    _count_label = "time-to-sample entries"


class SampleToChunkBox(_CountBox):
    _box_type = "stsc"
    _count_label = "sample-to-chunk entries"


class ChunkOffsetBox(_CountBox):
    _box_type = "stco"
    _count_label = "chunk offsets (32-bit)"


class ChunkOffset64Box(_CountBox):
    _box_type = "co64"
    _count_label = "chunk offsets (64-bit)"


class EditListBox(_CountBox):
    _box_type = "elst"
    _count_label = "edit list entries"


class SampleDescriptionBox(_CountBox):
    """stsd

    Attributes:
        entries (list[str]): the format of each sample entry, e.g. 'mp4a'.
            Can be shorter than entry_count if the box is truncated.
    """

    _box_type = "stsd"

    @override
    def _parse(self, data: bytes) -> None:
        super()._parse(data)
        self.entries: list[str] = []
        offset = 8
        for _ in range(self.entry_count):
            if offset + 8 > len(data):
                break
            entry_size = cdata.uint_be_from(data, offset)
            self.entries.append(fourcc(data[offset + 4:offset + 8]))
            if entry_size == 0:
                break
            offset += entry_size

    @override
    def _lines(self) -> list[str]:
        lines = super()._lines()
        if self.entries:
            entries = ", ".join(f"'{e}'" for e in self.entries)
            lines.append(f"Sample Entries: {entries}")
        return lines


class SampleSizeBox(BoxContent):
    """stsz

    Attributes:
        sample_size (int): 0 if every sample has its own size
        sample_count (int)
    """

    _min_size = 12
    _box_type = "stsz"

    @override
    def _parse(self, data: bytes) -> None:
        self.version = data[0]
        self.sample_size = cdata.uint_be_from(data, 4)
        self.sample_count = cdata.uint_be_from(data, 8)

    @override
    def _lines(self) -> list[str]:
        lines = super()._lines()
        if self.sample_size == 0:
            lines.append("Sample Size: Variable")
            lines.append(
                f"Sample Count: {self.sample_count} (with individual sizes)")
        else:
            lines.append(f"Sample Size: {self.sample_size} bytes (constant)")
            lines.append(f"Sample Count: {self.sample_count}")
        return lines


class UrlEntryBox(BoxContent):
    """url

    Attributes:
        flags (int)
        location (str)
    """

    SELF_CONTAINED: Final = 0x000001

    _min_size = 4
    _box_type = "url "

    @override
    def _parse(self, data: bytes) -> None:
        self.version, self.flags = _version_flags(data)
        if self.self_contained:
            self.location = "(data in same file)"
        else:
            self.location = _text(data[4:])

    @property
    def self_contained(self) -> bool:
        """The media data is in the same file, no location is stored"""

        return bool(self.flags & self.SELF_CONTAINED)

    @override
    def _lines(self) -> list[str]:
        lines = super()._lines() + [f"Flags: 0x{self.flags:06X}"]
        if self.location:
            lines.append(f"Location: {self.location}")
        return lines


class UrnEntryBox(BoxContent):
    """urn

    Attributes:
        flags (int)
        name (str)
        location (str)
    """

    _min_size = 4
    _box_type = "urn "

    @override
    def _parse(self, data: bytes) -> None:
        self.version, self.flags = _version_flags(data)
        self.name = ""
        self.location = ""
        payload = data[4:]
        end = payload.find(b"\x00")
        if end != -1:
            self.name = _text(payload[:end])
            self.location = _text(payload[end + 1:])

    @override
    def _lines(self) -> list[str]:
        lines = super()._lines() + [f"Flags: 0x{self.flags:06X}"]
        if self.name:
            lines.append(f"Name: {self.name}")
        if self.location:
            lines.append(f"Location: {self.location}")
        return lines


class ChapterBox(BoxContent):
    """chap track reference

    Attributes:
        track_ids (list[int])
    """

    _min_size = 4
    _box_type = "chap"

    @override
    def _parse(self, data: bytes) -> None:
        self.track_ids = [
            cdata.uint_be_from(data, i) for i in range(0, len(data) - 3, 4)]

    @override
    def _lines(self) -> list[str]:
        return [f"Chapter Track IDs: {self.track_ids}"]


class MetadataMeanBox(BoxContent):
    """mean, the namespace of a freeform (----) iTunes item"""

    _min_size = 4
    _box_type = "mean"

    @override
    def _parse(self, data: bytes) -> None:
        self.version = data[0]
        self.namespace = _text(data[4:])

    @override
    def _lines(self) -> list[str]:
        return super()._lines() + [f"Namespace: {self.namespace}"]


class MetadataNameBox(BoxContent):
    """name, the key of a freeform (----) iTunes item"""

    _min_size = 4
    _box_type = "name"

    @override
    def _parse(self, data: bytes) -> None:
        self.version = data[0]
        self.name = _text(data[4:])

    @override
    def _lines(self) -> list[str]:
        return super()._lines() + [f"Name: {self.name}"]


_BOX_DECODERS: Final[dict[bytes, Callable[[bytes], BoxContent]]] = {
    b"ftyp": FileTypeBox,
    b"mvhd": MovieHeaderBox,
    b"tkhd": TrackHeaderBox,
    b"mdhd": MediaHeaderBox,
    b"hdlr": HandlerBox,
    b"vmhd": VideoMediaHeaderBox,
    b"smhd": SoundMediaHeaderBox,
    b"nmhd": NullMediaHeaderBox,
    b"dref": DataReferenceBox,
    b"stsd": SampleDescriptionBox,
    b"stts": TimeToSampleBox,
    b"stsc": SampleToChunkBox,
    b"stsz": SampleSizeBox,
    b"stco": ChunkOffsetBox,
    b"co64": ChunkOffset64Box,
    b"elst": EditListBox,
    b"url ": UrlEntryBox,
    b"urn ": UrnEntryBox,
    b"chap": ChapterBox,
    b"mean": MetadataMeanBox,
    b"name": MetadataNameBox,
}


def get_box_decoder(name: bytes) -> Callable[[bytes], BoxContent] | None:
    """Returns the decoder for a leaf box type or None"""

    return _BOX_DECODERS.get(name)
