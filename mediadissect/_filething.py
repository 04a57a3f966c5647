# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from typing import IO, NamedTuple


class FileThing(NamedTuple):
    """
    filename is None if the source is not a filename.
    name is a filename which can be used for display purposes.
    """
    fileobj: IO[bytes]
    filename: str | bytes | None
    name: str | None
