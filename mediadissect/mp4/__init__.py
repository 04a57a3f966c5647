# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Read the box structure of ISO base media files.

This covers MPEG-4 (MP4, M4A, M4B, ...), QuickTime and 3GPP files which
all share the same layout of nested size/type prefixed boxes (atoms).
Some leaf boxes are decoded further, see mediadissect.mp4._boxes, and
iTunes metadata items are decoded from their `data` child.

The structure is described in ISO/IEC 14496-12, the iTunes extensions
in Apple's QuickTime File Format documentation.
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Callable, Container, Iterator, Sequence
from typing import IO, override

from .._constants import ISOBMFF_BRANDS, get_box_description
from .._file import Dissector
from .._util import fourcc, get_size, read_full
from ._boxes import BoxContent, get_box_decoder
from ._itunes import (
    AtomDataType,
    DiskNumber,
    ItunesBinary,
    ItunesImage,
    ItunesInteger,
    ItunesMetadata,
    ItunesText,
    ItunesUnsignedInteger,
    TrackNumber,
)
from ._util import (
    MAX_DEPTH,
    MAX_LEAF_SIZE,
    _SKIP_SIZE,
    AtomDepthError,
    AtomError,
    AtomHeaderError,
    AtomRangeError,
    AtomSizeError,
    BoxDecodeError,
    error,
    is_container,
    is_itunes_container,
)

logger = logging.getLogger(__name__)


class Atom:
    """An individual atom.

    Attributes:
        offset (int): location of the atom in the file
        name (bytes): four byte type of the atom
        length (int): length of this atom, including the header
        header_size (int): 8, or 16 for atoms with a 64 bit length
        is_container (bool): if the atom holds child atoms
        children (list[Atom]): child atoms, empty for leaf atoms
        data (bytes): the payload of leaf atoms, empty if it wasn't read
        content (BoxContent | None): the decoded payload of known leaf atoms
        itunes_content (ItunesMetadata | None): decoded iTunes metadata
            for item atoms like b"\\xa9nam" or b"trkn"
        error (BoxDecodeError | None): why the payload couldn't be decoded
    """

    offset: int
    name: bytes
    length: int
    header_size: int
    is_container: bool
    children: list[Atom]
    data: bytes
    content: BoxContent | None
    itunes_content: ItunesMetadata | None
    error: BoxDecodeError | None

    def __init__(self, offset: int, name: bytes, length: int,
                 header_size: int = 8):
        self.offset = offset
        self.name = name
        self.length = length
        self.header_size = header_size
        self.is_container = is_container(name)
        self.children = []
        self.data = b""
        self.content = None
        self.itunes_content = None
        self.error = None

    @classmethod
    def _read_header(cls, fileobj: IO[bytes], offset: int, end: int) -> Atom:
        """Reads and validates the atom header at `offset`.

        Raises:
            AtomHeaderError
            AtomSizeError
            AtomRangeError
            IOError
        """

        fileobj.seek(offset, 0)
        data = fileobj.read(8)
        if len(data) < 8 or end - offset < 8:
            raise AtomHeaderError(
                f"truncated atom header at 0x{offset:08X}")

        length, name = struct.unpack(">I4s", data)
        header_size = 8
        if length == 1:
            data = fileobj.read(8)
            if len(data) < 8 or end - offset < 16:
                raise AtomHeaderError(
                    f"truncated 64 bit atom length at 0x{offset:08X}")
            length, = struct.unpack(">Q", data)
            header_size = 16
        elif length == 0:
            # extends to the end of the parent
            length = end - offset

        if length < header_size:
            raise AtomSizeError(
                f"invalid atom size {length} at offset 0x{offset:08X} "
                "(smaller than header)")
        if offset + length > end:
            raise AtomRangeError(
                f"atom at offset 0x{offset:08X} extends beyond parent "
                f"(size: {length}, available: {end - offset})")

        return cls(offset, name, length, header_size)

    def _parse(self, fileobj: IO[bytes], level: int) -> None:
        if self.is_container:
            start = self.offset + self.header_size
            end = self.offset + self.length
            skip = _SKIP_SIZE.get(self.name, 0)
            if skip and end - start >= skip:
                start += skip
            parse_atoms(fileobj, start, end, self.children, level + 1)
            if is_itunes_container(self.name):
                self._parse_itunes()
            return

        size = self.data_size
        if not 0 < size <= MAX_LEAF_SIZE:
            return

        fileobj.seek(self.offset + self.header_size, 0)
        self.data = read_full(fileobj, size)
        decoder = get_box_decoder(self.name)
        if decoder is None:
            return
        try:
            self.content = decoder(self.data)
        except BoxDecodeError as e:
            logger.debug("%r at 0x%08X: %s", self.name, self.offset, e)
            self.error = e

    def _parse_itunes(self) -> None:
        for child in self.children:
            if child.name == b"data":
                break
        else:
            return

        if not child.data:
            return
        try:
            self.itunes_content = ItunesMetadata.parse(self.name, child.data)
        except BoxDecodeError as e:
            logger.debug("ignoring iTunes metadata in %r: %s", self.name, e)

    @property
    def type(self) -> str:
        """The atom name for display, 0xA9 shown as the copyright sign"""

        return fourcc(self.name)

    @property
    def description(self) -> str:
        return get_box_description(self.type)

    @property
    def data_size(self) -> int:
        return self.length - self.header_size

    def findall(self, name: bytes, recursive: bool = False) -> Iterator[Atom]:
        """Recursively find all child atoms by specified name."""

        for child in self.children:
            if child.name == name:
                yield child
            if recursive:
                yield from child.findall(name, True)

    def __getitem__(self, remaining: Sequence[bytes]) -> Atom:
        """Look up a child atom, potentially recursively.

        e.g. atom[b'udta', b'meta'] => <Atom name=b'meta' ...>
        """

        if not remaining:
            return self
        elif not self.is_container:
            raise KeyError(f"{self.name!r} is not a container")
        for child in self.children:
            if child.name == remaining[0]:
                return child[remaining[1:]]
        raise KeyError(f"{remaining[0]!r} not found")

    def pprint(self, indent: int = 0, hidden: Container[bytes] = (),
               dump: Callable[[Atom], str] | None = None) -> str:
        """Returns the atom and its children, one level per indent.

        Args:
            indent: the nesting level of this atom
            hidden: atom names to leave out together with their children
            dump: returns extra text for atoms with a payload,
                e.g. a hex dump
        """

        if self.name in hidden:
            return ""

        prefix = "    " * indent
        lines = [f"{prefix}Box at offset 0x{self.offset:08X}: "
                 f"'{self.type}' ({self.description}) - "
                 f"Size: {self.length} bytes"]

        for extra in (self.itunes_content, self.content):
            if extra is not None:
                lines.extend(f"{prefix}    {line}"
                             for line in extra.pprint().splitlines())

        if dump is not None and self.data:
            lines.append(f"{prefix}    Raw data:")
            lines.extend(f"{prefix}    {line}"
                         for line in dump(self).splitlines())
            lines.append("")

        for child in self.children:
            text = child.pprint(indent + 1, hidden, dump)
            if text:
                lines.append(text)
        return "\n".join(lines)

    @override
    def __repr__(self) -> str:
        cls = type(self).__name__
        if not self.is_container:
            return "<%s name=%r length=%r offset=%r>" % (
                cls, self.name, self.length, self.offset)
        else:
            children = "\n".join([" " + line for child in self.children
                                  for line in repr(child).splitlines()])
            return "<%s name=%r length=%r offset=%r\n%s>" % (
                cls, self.name, self.length, self.offset, children)


def parse_atoms(fileobj: IO[bytes], start: int, end: int, atoms: list[Atom],
                level: int = 0) -> None:
    """Parses all atoms in [start, end) and appends them to `atoms`.

    Each atom is appended before its children are parsed, so after an
    error `atoms` holds everything up to the failing atom.

    Raises:
        AtomError
        IOError
    """

    if level > MAX_DEPTH:
        raise AtomDepthError(
            f"maximum atom nesting depth {MAX_DEPTH} exceeded at "
            f"0x{start:08X}")

    offset = start
    while offset < end:
        atom = Atom._read_header(fileobj, offset, end)
        atoms.append(atom)
        atom._parse(fileobj, level)
        offset += atom.length


class Atoms:
    """Root atoms in a given file.

    Attributes:
        atoms (list[Atom]): the top-level atoms
    """

    atoms: list[Atom]

    def __init__(self, fileobj: IO[bytes] | None = None):
        self.atoms = []
        if fileobj is not None:
            self.load(fileobj)

    def load(self, fileobj: IO[bytes]) -> None:
        """Parses the whole file.

        Raises:
            AtomError: with the atoms parsed so far in `atoms`
            error
        """

        self.atoms = []
        try:
            end = get_size(fileobj)
            parse_atoms(fileobj, 0, end, self.atoms)
        except AtomError as e:
            e.atoms = self.atoms
            raise
        except IOError as e:
            raise error(e) from e

    @property
    def file_type(self) -> Atom | None:
        """The leading ftyp atom, if any"""

        if self.atoms and self.atoms[0].name == b"ftyp":
            return self.atoms[0]
        return None

    def path(self, *names: bytes) -> list[Atom]:
        """Look up and return the complete path of an atom.

        For example, atoms.path(b'moov', b'udta', b'meta') will return a
        list of three atoms, corresponding to the moov, udta, and meta
        atoms.
        """

        path: list[Atom] = []
        for name in names:
            if path:
                path.append(path[-1][name, ])
            else:
                path.append(self[name, ])
        return path

    def findall(self, name: bytes, recursive: bool = False) -> Iterator[Atom]:
        for atom in self.atoms:
            if atom.name == name:
                yield atom
            if recursive:
                yield from atom.findall(name, True)

    def __contains__(self, names: bytes | Sequence[bytes]) -> bool:
        try:
            self[names]
        except KeyError:
            return False
        return True

    def __getitem__(self, names: bytes | Sequence[bytes]) -> Atom:
        """Look up a child atom.

        'names' may be a list of atoms ([b'moov', b'udta']) or a bytes
        object specifying the complete path (b'moov.udta').
        """

        if isinstance(names, bytes):
            names = names.split(b".")

        for child in self.atoms:
            if child.name == names[0]:
                return child[names[1:]]
        raise KeyError(f"{names[0]!r} not found")

    def __iter__(self) -> Iterator[Atom]:
        return iter(self.atoms)

    def __len__(self) -> int:
        return len(self.atoms)

    def pprint(self, hidden: Container[bytes] = (),
               dump: Callable[[Atom], str] | None = None) -> str:
        texts = (atom.pprint(0, hidden, dump) for atom in self.atoms)
        return "\n".join(text for text in texts if text)

    @override
    def __repr__(self) -> str:
        return "\n".join([repr(child) for child in self.atoms])


class IsobmffDissector(Dissector):
    """Files starting with an ftyp box with a known major brand"""

    media_type = "ISOBMFF"
    name = "ISO Base Media File Format Dissector"

    @override
    @staticmethod
    def can_handle(header: bytes) -> bool:
        return len(header) >= 12 and header[4:8] == b"ftyp" and \
            header[8:12] in ISOBMFF_BRANDS

    @override
    @classmethod
    def dissect(cls, fileobj: IO[bytes]) -> Atoms:
        """Raises mediadissect.mp4.error"""

        return Atoms(fileobj)


__all__ = [
    "Atom", "Atoms", "AtomDataType", "AtomDepthError", "AtomError",
    "AtomHeaderError", "AtomRangeError", "AtomSizeError", "BoxContent",
    "BoxDecodeError", "DiskNumber", "IsobmffDissector", "ItunesBinary",
    "ItunesImage", "ItunesInteger", "ItunesMetadata", "ItunesText",
    "ItunesUnsignedInteger", "MAX_DEPTH", "MAX_LEAF_SIZE", "TrackNumber",
    "error", "parse_atoms",
]
