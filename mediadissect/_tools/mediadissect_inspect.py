# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Show the decoded structure of media files."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable
from typing import Final

from ._util import SignalHandler, format_hexdump

_sig = SignalHandler()

# technical boxes only shown with --verbose
HIDDEN_BOXES: Final = frozenset([
    b"mdat", b"free", b"stts", b"stsc", b"stsz", b"stco", b"co64"])

DUMP_LIMIT: Final = 128
"""Bytes shown for pictures in hex dumps"""


class Arguments(argparse.Namespace):
    header: bool = False
    frames: bool = False
    all: bool = False
    verbose: bool = False
    dump: bool = False
    files: list[str] = []

    @property
    def show_header(self) -> bool:
        return self.all or self.header or not self.frames

    @property
    def show_frames(self) -> bool:
        return self.all or self.frames or not self.header


def _dump_atom(atom) -> str:
    # JPEG or PNG cover art, also other large data boxes
    limited = atom.name == b"data" and (
        len(atom.data) > 1024 or atom.data[3:4] in (b"\x0d", b"\x0e"))
    return format_hexdump(atom.data, 0, DUMP_LIMIT if limited else None)


def _print_atoms(atoms: Iterable, args: Arguments) -> None:
    hidden = frozenset() if args.verbose else HIDDEN_BOXES
    dump = _dump_atom if args.dump else None
    for atom in atoms:
        text = atom.pprint(0, hidden, dump)
        if text:
            print(text)


def _print_id3(tags, args: Arguments) -> None:
    if not tags.has_tag:
        print("No ID3v2 header found")
        print("")
        return

    header = tags.header
    if args.show_header:
        print("ID3v2 Header Found:")
        print(f"  Version: 2.{header.major_version}.{header.minor_version}")
        print(f"  Flags: 0x{header.flags:02X}")
        names = header.flag_names()
        if names:
            print(f"  Active: {', '.join(names)}")
        print(f"  Tag Size: {header.size} bytes")
        if tags.extended_header_size is not None:
            print(f"  Extended Header Size: {tags.extended_header_size} bytes")
        print("")

    if args.show_frames:
        print(f"ID3v2.{header.major_version} Frames:")
        for frame in tags.frames:
            print(f"  {frame.pprint()}")
            if args.dump and frame.data:
                limit = DUMP_LIMIT if frame.id == "APIC" else None
                for line in format_hexdump(frame.data, 0, limit).splitlines():
                    print(f"    {line}")
        for issue in tags.issues:
            print(f"  {issue.pprint()}")
        print("")


def _print_isobmff(atoms, args: Arguments) -> None:
    if args.show_header:
        print("ISO Base Media File Format Header:")
        if atoms.file_type is not None:
            print(atoms.file_type.pprint())
        print("")

    if args.show_frames:
        print("Box Structure:")
        _print_atoms(atoms, args)
        print("")


def inspect(filename: str, args: Arguments) -> bool:
    """Prints the structure of one file, returns False if it failed"""

    from mediadissect import File, MediaDissectError
    from mediadissect.id3 import ID3Tags
    from mediadissect.mp4 import AtomError, Atoms

    print("--", filename)
    try:
        result = File(filename)
    except AtomError as err:
        if args.show_frames and err.atoms:
            print("Box Structure (incomplete):")
            _print_atoms(err.atoms, args)
        print(f"ERROR: {err}")
        return False
    except (MediaDissectError, OSError) as err:
        print(f"ERROR: {err}")
        return False

    print(f"Detected format: {result.media_type} ({result.dissector.name})")
    print("")
    if isinstance(result.model, ID3Tags):
        _print_id3(result.model, args)
    elif isinstance(result.model, Atoms):
        _print_isobmff(result.model, args)
    else:
        print("- Unknown file type")
        print("")
    return True


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(usage="%(prog)s [options] FILE [FILE...]")
    parser.add_argument("--header", action="store_true",
                        help="Show only the header information")
    parser.add_argument("--frames", action="store_true",
                        help="Show only the frames or boxes")
    parser.add_argument("--all", action="store_true",
                        help="Show header and frames (the default)")
    parser.add_argument("--verbose", action="store_true",
                        help="Show technical boxes and debug messages")
    parser.add_argument("--dump", action="store_true",
                        help="Add hex dumps of the raw payloads")
    parser.add_argument("files", nargs="+", metavar="FILE",
                        help="Files to inspect")

    args = parser.parse_args(argv[1:], namespace=Arguments())

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s")

    failed = False
    for filename in args.files:
        if not inspect(filename, args):
            failed = True
        print("")
    return 1 if failed else 0


def entry_point() -> None:
    _sig.init()
    sys.exit(main(sys.argv))
