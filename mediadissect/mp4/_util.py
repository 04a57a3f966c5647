# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from .._util import MediaDissectError

if TYPE_CHECKING:
    from . import Atom


MAX_DEPTH: Final = 20
"""Maximum box nesting level"""

MAX_LEAF_SIZE: Final = 1 << 20
"""Leaf payloads larger than this are not read"""


class error(MediaDissectError):
    pass


class AtomError(error, ValueError):
    """The box tree couldn't be parsed further.

    Attributes:
        atoms (list[Atom]): the top level boxes parsed before the failure,
            including the box the failure happened in
    """

    atoms: list[Atom]

    def __init__(self, *args: object):
        super().__init__(*args)
        self.atoms = []


class AtomHeaderError(AtomError):
    pass


class AtomSizeError(AtomError):
    pass


class AtomRangeError(AtomError):
    pass


class AtomDepthError(AtomError):
    pass


class BoxDecodeError(error, ValueError):
    """The payload of a single leaf box couldn't be decoded.

    Never fatal, the box keeps its raw data.
    """


# This is not an exhaustive list of container atoms, only the ones
# with children in a layout this module knows. dref stays a leaf so its
# entry count gets decoded, see _SKIP_SIZE for walking its entries.
_CONTAINERS: Final = frozenset([
    b"moov", b"trak", b"edts", b"mdia", b"minf", b"dinf", b"stbl", b"mvex",
    b"moof", b"traf", b"mfra", b"meta", b"ipro", b"udta", b"tref", b"ilst",
])

_ITUNES_CONTAINERS: Final = frozenset([
    b"trkn", b"disk", b"tmpo", b"covr", b"aART", b"----", b"gnre", b"hdvd",
    b"pgap", b"pcst", b"cpil", b"rtng", b"stik", b"tven", b"tves", b"tvnn",
    b"tvsh", b"tvsn", b"apID", b"akID", b"atID", b"cnID", b"geID", b"plID",
    b"sfID", b"soaa", b"soal", b"soar", b"soco", b"sonm", b"sosn", b"xid ",
    b"keyw", b"catg", b"purl", b"egid", b"desc", b"ldes", b"sdes",
])

# full box containers, version/flags (and entry count) before the children
_SKIP_SIZE: Final = {b"meta": 4, b"dref": 8}


def is_itunes_container(name: bytes) -> bool:
    """Whether the box holds iTunes metadata in a `data` child"""

    return name[:1] == b"\xa9" or name in _ITUNES_CONTAINERS


def is_container(name: bytes) -> bool:
    return name in _CONTAINERS or is_itunes_container(name)
