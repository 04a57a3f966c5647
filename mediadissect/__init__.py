# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""mediadissect decodes the structure of media container files.

    import mediadissect
    result = mediadissect.File(filename)
    print(result.pprint())

The format is picked from the first bytes of the file. ID3v2 tags are
decoded into frames (see mediadissect.id3), ISO base media files (MP4,
M4A, QuickTime, 3GPP) into a tree of boxes (see mediadissect.mp4).
"""

from typing import Final

from mediadissect._util import MediaDissectError
from mediadissect._file import File, DissectResult, Dissector, \
    UnknownDissector, PROBE_SIZE, get_dissectors, probe

version: Final = (1, 0, 0)
"""Version tuple."""

version_string: Final = ".".join(map(str, version))
"""Version string."""

__all__ = ["File", "DissectResult", "Dissector", "UnknownDissector",
           "MediaDissectError", "PROBE_SIZE", "get_dissectors", "probe",
           "version", "version_string"]
