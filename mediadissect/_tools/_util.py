# Copyright (C) 2026  The mediadissect authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import os
import signal
from types import FrameType


def format_hexdump(data: bytes, base_offset: int = 0,
                   max_bytes: int | None = None) -> str:
    """Returns a classic hex dump, 16 bytes per line.

    Each line holds the offset, the bytes in two groups of eight and the
    printable ASCII characters. With `max_bytes` only that many bytes are
    shown, followed by a ``<truncated>`` line.
    """

    truncated = max_bytes is not None and len(data) > max_bytes
    if truncated:
        data = data[:max_bytes]

    lines: list[str] = []
    for start in range(0, len(data), 16):
        chunk = data[start:start + 16]
        line = f"{base_offset + start:08X}  "
        for i in range(16):
            if i == 8:
                line += " "
            line += f"{chunk[i]:02X} " if i < len(chunk) else "   "
        ascii_ = "".join(
            chr(b) if 0x20 <= b <= 0x7E else "." for b in chunk)
        lines.append(f"{line} |{ascii_}|\n")

    if truncated:
        lines.append("<truncated>\n")
    return "".join(lines)


class SignalHandler:

    def init(self) -> None:
        _ = signal.signal(signal.SIGINT, self._handler)
        _ = signal.signal(signal.SIGTERM, self._handler)
        if os.name != "nt":
            _ = signal.signal(signal.SIGHUP, self._handler)

    def _handler(self, signum: int, frame: FrameType | None) -> None:
        raise SystemExit("Aborted...")
