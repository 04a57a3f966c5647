# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Constants used by mediadissect for reporting."""

from __future__ import annotations

from types import MappingProxyType
from typing import Final

FRAME_DESCRIPTIONS: Final = MappingProxyType({
    "TIT1": "Content group description",
    "TIT2": "Title/songname/content description",
    "TIT3": "Subtitle/Description refinement",
    "TALB": "Album/Movie/Show title",
    "TOAL": "Original album/movie/show title",
    "TRCK": "Track number/Position in set",
    "TPOS": "Part of a set",
    "TSST": "Set subtitle",
    "TSRC": "ISRC (international standard recording code)",
    "TPE1": "Lead performer(s)/Soloist(s)",
    "TPE2": "Band/orchestra/accompaniment",
    "TPE3": "Conductor/performer refinement",
    "TPE4": "Interpreted, remixed, or otherwise modified by",
    "TOPE": "Original artist(s)/performer(s)",
    "TEXT": "Lyricist/Text writer",
    "TOLY": "Original lyricist(s)/text writer(s)",
    "TCOM": "Composer",
    "TMCL": "Musician credits list",
    "TIPL": "Involved people list",
    "TENC": "Encoded by",
    "TBPM": "BPM (beats per minute)",
    "TLEN": "Length",
    "TKEY": "Initial key",
    "TLAN": "Language(s)",
    "TCON": "Content type",
    "TFLT": "File type",
    "TMED": "Media type",
    "TMOO": "Mood",
    "TCOP": "Copyright message",
    "TPRO": "Produced notice",
    "TPUB": "Publisher",
    "TOWN": "File owner/licensee",
    "TRSN": "Internet radio station name",
    "TRSO": "Internet radio station owner",
    "TOFN": "Original filename",
    "TDLY": "Playlist delay",
    "TDEN": "Encoding time",
    "TDOR": "Original release time",
    "TDRC": "Recording time",
    "TDRL": "Release time",
    "TDTG": "Tagging time",
    "TSSE": "Software/Hardware and settings used for encoding",
    "TSOA": "Album sort order",
    "TSOP": "Performer sort order",
    "TSOT": "Title sort order",
    "TXXX": "User defined text information frame",

    # v2.3 only
    "TDAT": "Date",
    "TIME": "Time",
    "TORY": "Original release year",
    "TRDA": "Recording dates",
    "TSIZ": "Size",
    "TYER": "Year",
    "IPLS": "Involved people list",
    "RVAD": "Relative volume adjustment",
    "EQUA": "Equalisation",

    # v2.4 only
    "RVA2": "Relative volume adjustment (2)",
    "EQU2": "Equalisation (2)",
    "SEEK": "Seek frame",
    "ASPI": "Audio seek point index",
    "SIGN": "Signature frame",

    "WCOM": "Commercial information",
    "WCOP": "Copyright/Legal information",
    "WOAF": "Official audio file webpage",
    "WOAR": "Official artist/performer webpage",
    "WOAS": "Official audio source webpage",
    "WORS": "Official internet radio station homepage",
    "WPAY": "Payment",
    "WPUB": "Publishers official webpage",
    "WXXX": "User defined URL link frame",

    "MCDI": "Music CD identifier",
    "ETCO": "Event timing codes",
    "MLLT": "MPEG location lookup table",
    "SYTC": "Synchronized tempo codes",
    "USLT": "Unsychronized lyric/text transcription",
    "SYLT": "Synchronized lyric/text",
    "COMM": "Comments",
    "RVRB": "Reverb",
    "PCNT": "Play counter",
    "POPM": "Popularimeter",
    "RBUF": "Recommended buffer size",
    "AENC": "Audio encryption",
    "LINK": "Linked information",
    "POSS": "Position synchronisation frame",
    "USER": "Terms of use",
    "OWNE": "Ownership frame",
    "COMR": "Commercial frame",
    "ENCR": "Encryption method registration",
    "GRID": "Group identification registration",
    "PRIV": "Private frame",
    "GEOB": "General encapsulated object",
    "UFID": "Unique file identifier",
    "APIC": "Attached picture",

    # ID3v2 Chapter Frame Addendum
    "CHAP": "Chapter frame",
    "CTOC": "Table of contents frame",
})

UNKNOWN_FRAME_DESCRIPTION: Final = "Unknown frame type"


def get_frame_description(frame_id: str) -> str:
    """Returns a human readable description for an ID3v2 frame id"""

    return FRAME_DESCRIPTIONS.get(frame_id, UNKNOWN_FRAME_DESCRIPTION)


BOX_DESCRIPTIONS: Final = MappingProxyType({
    "ftyp": "File Type and Compatibility",
    "moov": "Movie Metadata Container",
    "mdat": "Media Data",
    "free": "Free Space",
    "skip": "Free Space",
    "moof": "Movie Fragment",
    "mfra": "Movie Fragment Random Access",
    "meta": "Metadata Container",
    "pdin": "Progressive Download Information",
    "styp": "Segment Type",
    "sidx": "Segment Index",

    "mvhd": "Movie Header",
    "trak": "Track Container",
    "mvex": "Movie Extends",
    "udta": "User Data",
    "iods": "Initial Object Descriptor",

    "tkhd": "Track Header",
    "tref": "Track Reference",
    "edts": "Edit List Container",
    "mdia": "Media Container",

    "chap": "Chapter Track Reference",
    "tmcd": "Timecode Track Reference",
    "sync": "Sync Track Reference",
    "scpt": "Script Track Reference",
    "ssrc": "Non-Primary Source",
    "cdsc": "Content Description Track Reference",

    "elst": "Edit List",

    "mdhd": "Media Header",
    "hdlr": "Handler Reference",
    "minf": "Media Information",

    "vmhd": "Video Media Header",
    "smhd": "Sound Media Header",
    "hmhd": "Hint Media Header",
    "nmhd": "Null Media Header",
    "dinf": "Data Information",
    "stbl": "Sample Table",

    "dref": "Data Reference",
    "url ": "Data Entry URL",
    "urn ": "Data Entry URN",

    "stsd": "Sample Description",
    "stts": "Time-to-Sample",
    "ctts": "Composition Time-to-Sample",
    "stsc": "Sample-to-Chunk",
    "stsz": "Sample Sizes",
    "stz2": "Compact Sample Sizes",
    "stco": "Chunk Offset (32-bit)",
    "co64": "Chunk Offset (64-bit)",
    "stss": "Sync Sample Table",
    "stsh": "Shadow Sync Sample",
    "padb": "Padding Bits",
    "stdp": "Sample Degradation Priority",
    "sdtp": "Sample Dependency",
    "sbgp": "Sample-to-Group",
    "sgpd": "Sample Group Description",
    "subs": "Sub-Sample Information",

    "mehd": "Movie Extends Header",
    "trex": "Track Extends Defaults",
    "leva": "Level Assignment",

    "mfhd": "Movie Fragment Header",
    "traf": "Track Fragment",

    "tfhd": "Track Fragment Header",
    "trun": "Track Fragment Run",
    "tfdt": "Track Fragment Decode Time",

    "tfra": "Track Fragment Random Access",
    "mfro": "Movie Fragment Random Access Offset",

    "iloc": "Item Location",
    "ipro": "Item Protection",
    "iinf": "Item Information",
    "xml ": "XML Metadata",
    "bxml": "Binary XML Metadata",
    "pitm": "Primary Item",
    "idat": "Item Data",
    "iref": "Item Reference",

    "cprt": "Copyright",
    "name": "Name",
    "©nam": "Name (iTunes)",
    "©ART": "Artist (iTunes)",
    "©alb": "Album (iTunes)",
    "©day": "Year (iTunes)",
    "©cmt": "Comment (iTunes)",
    "©gen": "Genre (iTunes)",
    "©too": "Encoding Tool (iTunes)",
    "©wrt": "Composer (iTunes)",
    "©grp": "Grouping (iTunes)",
    "©lyr": "Lyrics (iTunes)",
    "trkn": "Track Number (iTunes)",
    "disk": "Disk Number (iTunes)",
    "tmpo": "Tempo (iTunes)",
    "covr": "Cover Art (iTunes)",
    "aART": "Album Artist (iTunes)",
    "----": "Custom iTunes Metadata",
    "ilst": "iTunes Metadata List",
    "mean": "iTunes Metadata Mean",
    "data": "iTunes Metadata Data",
    "keyw": "Keywords",
    "catg": "Category",
    "purl": "Podcast URL",
    "egid": "Episode Global Unique ID",
    "desc": "Description",
    "ldes": "Long Description",
    "sdes": "Short Description",

    # sample entries, video
    "avc1": "AVC/H.264 Video",
    "avc2": "AVC/H.264 Video (parameter sets in-band)",
    "avc3": "AVC/H.264 Video (no parameter sets)",
    "avc4": "AVC/H.264 Video (parameter sets in-band, no SPS/PPS)",
    "hvc1": "HEVC/H.265 Video",
    "hev1": "HEVC/H.265 Video (parameter sets in-band)",
    "mp4v": "MPEG-4 Visual",
    "s263": "H.263 Video",
    "vp08": "VP8 Video",
    "vp09": "VP9 Video",
    "av01": "AV1 Video",
    "dvh1": "Dolby Vision H.265",
    "dvhe": "Dolby Vision H.265 (profile 8)",
    "mjp2": "Motion JPEG 2000",

    # sample entries, audio
    "mp4a": "MPEG-4 Audio (AAC)",
    "samr": "AMR Narrow-Band Audio",
    "sawb": "AMR Wide-Band Audio",
    "sawp": "AMR Wide-Band+ Audio",
    "ac-3": "AC-3 Audio (Dolby Digital)",
    "ec-3": "Enhanced AC-3 Audio (Dolby Digital Plus)",
    "dtsc": "DTS Coherent Acoustics",
    "dtsh": "DTS-HD High Resolution",
    "dtsl": "DTS-HD Master Audio",
    "dtse": "DTS Express",
    "alac": "Apple Lossless Audio",
    "fLaC": "FLAC Audio",
    "Opus": "Opus Audio",
    "mp3 ": "MPEG-1/2 Audio Layer III",
    "alaw": "A-law Audio",
    "ulaw": "μ-law Audio",
    "sowt": "PCM Signed Little-Endian",
    "twos": "PCM Signed Big-Endian",
    "raw ": "PCM Uncompressed",
    "lpcm": "Linear PCM",

    # sample entries, text and subtitles
    "tx3g": "3GPP Timed Text",
    "text": "QuickTime Text",
    "wvtt": "WebVTT Subtitle",
    "stpp": "XML Subtitle",
    "c608": "CEA-608 Closed Captions",
    "c708": "CEA-708 Closed Captions",

    # sample entries, metadata
    "mett": "Metadata Text",
    "metx": "Metadata XML",
    "urim": "URI Metadata",

    "sinf": "Protection Scheme Information",
    "frma": "Original Format",
    "schm": "Scheme Type",
    "schi": "Scheme Information",
    "encv": "Encrypted Video Sample Entry",
    "enca": "Encrypted Audio Sample Entry",
    "enct": "Encrypted Text Sample Entry",

    "rinf": "Restricted Scheme Information",
    "trgr": "Track Grouping",
    "grpl": "Group List",
})

UNKNOWN_BOX_DESCRIPTION: Final = "Unknown Box Type"


def get_box_description(box_type: str) -> str:
    """Returns a human readable description for an ISOBMFF box type"""

    return BOX_DESCRIPTIONS.get(box_type, UNKNOWN_BOX_DESCRIPTION)


HANDLER_NAMES: Final = MappingProxyType({
    "vide": "Video Track",
    "soun": "Audio Track",
    "hint": "Hint Track",
    "meta": "Metadata Track",
    "mdir": "Metadata Directory",
    "auxv": "Auxiliary Video Track",
    "text": "Text/Subtitle Track",
    "sbtl": "Subtitle Track",
    "subt": "Subtitle Track",
    "clcp": "Closed Caption Track",
    "tmcd": "Timecode Track",
})

UNKNOWN_HANDLER_NAME: Final = "Unknown Handler"


def get_handler_name(handler_type: str) -> str:
    """Returns a label for an hdlr handler type"""

    return HANDLER_NAMES.get(handler_type, UNKNOWN_HANDLER_NAME)


ISOBMFF_BRANDS: Final = frozenset([
    b"isom", b"iso2", b"iso3", b"iso4", b"iso5", b"iso6",
    b"mp41", b"mp42", b"mp71",
    b"M4A ", b"M4V ", b"M4P ", b"M4B ",
    b"qt  ", b"mqt ",
    b"3gp4", b"3gp5", b"3gp6", b"3gp7", b"3gp8", b"3gp9",
    b"3g2a", b"3g2b", b"3g2c",
    b"mmp4", b"avc1", b"MSNV",
    b"dash", b"msdh", b"msix",
])
"""Major brands accepted when probing for an ISOBMFF file"""
