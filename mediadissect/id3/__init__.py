# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""ID3v2.3 and ID3v2.4 tag reading.

This is based off of the following references:

* http://id3.org/id3v2.4.0-structure
* http://id3.org/id3v2.4.0-frames
* http://id3.org/id3v2.3.0
* http://id3.org/id3v2-chapters-1.0

Frames are decoded into a content object depending on the frame id, see
:class:`FrameContent`. Frames which can't be decoded keep their raw data
in a :class:`BinaryFrame` and the reason in `Frame.error`.

You are probably interested in the :class:`ID3Tags` class to start with.
"""

from ._file import ID3v23Dissector as ID3v23Dissector, \
    ID3v24Dissector as ID3v24Dissector, detect_mpeg_sync as detect_mpeg_sync
from ._tags import ID3Tags as ID3Tags, ID3Header as ID3Header
from ._specs import Encoding as Encoding, PictureType as PictureType, \
    CTOCFlags as CTOCFlags
from ._frames import Frame as Frame, FrameContent as FrameContent, \
    TextFrame as TextFrame, UrlFrame as UrlFrame, \
    UserTextFrame as UserTextFrame, UserUrlFrame as UserUrlFrame, \
    CommentFrame as CommentFrame, PictureFrame as PictureFrame, \
    UniqueFileIdFrame as UniqueFileIdFrame, ChapterFrame as ChapterFrame, \
    TableOfContentsFrame as TableOfContentsFrame, BinaryFrame as BinaryFrame, \
    FrameIssue as FrameIssue, FrameIssueKind as FrameIssueKind, \
    FrameList as FrameList, read_frames as read_frames
from ._util import error as error, ID3NoHeaderError as ID3NoHeaderError, \
    ID3UnsupportedVersionError as ID3UnsupportedVersionError, \
    ID3BadExtendedHeaderError as ID3BadExtendedHeaderError, \
    ID3JunkFrameError as ID3JunkFrameError, \
    ID3TooShortError as ID3TooShortError, \
    ID3BadTerminatorError as ID3BadTerminatorError, \
    ID3UnknownEncodingError as ID3UnknownEncodingError, \
    ID3BadTextError as ID3BadTextError, ID3DepthError as ID3DepthError, \
    ID3BadCompressedData as ID3BadCompressedData, \
    ID3EncryptionUnsupportedError as ID3EncryptionUnsupportedError, \
    MAX_EMBED_DEPTH as MAX_EMBED_DEPTH
