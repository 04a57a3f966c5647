# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
import os
from typing import IO, Any, Final, override

from ._filething import FileThing
from ._util import MediaDissectError, openfile

logger = logging.getLogger(__name__)

PROBE_SIZE: Final = 12
"""Number of bytes read from the start of a file for format detection"""


class Dissector:
    """Base class for format dissectors.

    A dissector looks at the first bytes of a file to decide if it can
    handle it and decodes the whole file into a model.

    Attributes:
        media_type (str): short name of the handled format
        name (str): display name of the dissector
    """

    media_type: str = "Unknown"
    name: str = "Unknown Format Dissector"

    @staticmethod
    def can_handle(header: bytes) -> bool:
        """Returns if the dissector can handle a file starting with `header`.

        `header` holds at most PROBE_SIZE bytes, it can be shorter for
        small files.
        """

        raise NotImplementedError

    @classmethod
    def dissect(cls, fileobj: IO[bytes]) -> Any:
        """Decodes the file, starting at the current position.

        Raises:
            MediaDissectError
        """

        raise NotImplementedError


class UnknownDissector(Dissector):
    """Fallback for files no other dissector accepts; never reads anything"""

    @override
    @staticmethod
    def can_handle(header: bytes) -> bool:
        return True

    @override
    @classmethod
    def dissect(cls, fileobj: IO[bytes]) -> None:
        return None


def get_dissectors() -> list[type[Dissector]]:
    """Returns the dissectors in probing order, the first match wins"""

    from mediadissect.id3 import ID3v23Dissector, ID3v24Dissector
    from mediadissect.mp4 import IsobmffDissector

    return [ID3v23Dissector, ID3v24Dissector, IsobmffDissector]


def probe(header: bytes) -> type[Dissector]:
    """Returns the dissector for a file starting with `header`.

    Falls back to UnknownDissector.
    """

    for dissector in get_dissectors():
        if dissector.can_handle(header):
            return dissector
    return UnknownDissector


class DissectResult:
    """The outcome of dissecting a file.

    Attributes:
        dissector (type[Dissector]): the dissector which was used
        model: the decoded model, None for unknown files
        filename (str | None): the file name if known
    """

    def __init__(self, dissector: type[Dissector], model: Any,
                 filename: str | None = None):
        self.dissector = dissector
        self.model = model
        self.filename = filename

    @property
    def media_type(self) -> str:
        return self.dissector.media_type

    def pprint(self) -> str:
        """Print the dissector name and the decoded model"""

        lines = [f"{self.media_type} ({self.dissector.name})"]
        if self.model is not None:
            text = self.model.pprint()
            if text:
                lines.append(text)
        return "\n".join(lines)

    @override
    def __repr__(self) -> str:
        return "<{} dissector={} filename={!r}>".format(
            type(self).__name__, self.dissector.__name__, self.filename)


def File(filething: str | bytes | os.PathLike[str] | IO[bytes] | FileThing,
         ) -> DissectResult:
    """Guess the format of the file and dissect it.

    Args:
        filething: a path or a seekable binary file object
    Returns:
        DissectResult: the dissector used and the decoded model
    Raises:
        MediaDissectError: the file couldn't be decoded
        OSError: the path couldn't be opened

    The first bytes of the file are used to pick the dissector, see probe().
    """

    with openfile(filething) as ft:
        fileobj = ft.fileobj
        try:
            fileobj.seek(0)
            header = fileobj.read(PROBE_SIZE)
            fileobj.seek(0)
        except IOError as e:
            raise MediaDissectError(e) from e

        dissector = probe(header)
        logger.debug("%s: using %s", ft.name, dissector.name)
        model = dissector.dissect(fileobj)
        return DissectResult(dissector, model, ft.name)
