
import signal

from mediadissect._tools._util import format_hexdump, SignalHandler

from tests import TestCase


class Tformat_hexdump(TestCase):

    def test_empty(self):
        self.assertEqual(format_hexdump(b""), "")

    def test_full_line(self):
        self.assertEqual(
            format_hexdump(b"0123456789:;<=>?"),
            "00000000  30 31 32 33 34 35 36 37  38 39 3A 3B 3C 3D 3E 3F "
            " |0123456789:;<=>?|\n")

    def test_partial_line(self):
        self.assertEqual(
            format_hexdump(b"ABC"),
            "00000000  41 42 43" + " " * 42 + "|ABC|\n")

    def test_lines_aligned(self):
        lines = format_hexdump(bytes(range(40))).splitlines()
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[1][:8], "00000010")
        self.assertEqual(lines[0].index("|"), lines[2].index("|"))

    def test_unprintable(self):
        text = format_hexdump(b"\x00a\x7f\xff")
        self.assertTrue(text.endswith("|.a..|\n"))

    def test_base_offset(self):
        text = format_hexdump(b"x", base_offset=0x1234)
        self.assertTrue(text.startswith("00001234  78 "))

    def test_max_bytes(self):
        text = format_hexdump(b"\x00" * 100, max_bytes=32)
        lines = text.splitlines()
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[-1], "<truncated>")

    def test_max_bytes_not_reached(self):
        text = format_hexdump(b"\x00" * 32, max_bytes=32)
        self.assertFalse("<truncated>" in text)


class TSignalHandler(TestCase):

    def test_handler(self):
        handler = SignalHandler()
        self.assertRaises(SystemExit, handler._handler, signal.SIGINT, None)
        self.assertFalse(hasattr(handler, "_interrupted"))

    def test_init(self):
        old = signal.getsignal(signal.SIGINT)
        try:
            handler = SignalHandler()
            handler.init()
            self.assertEqual(signal.getsignal(signal.SIGINT), handler._handler)
        finally:
            signal.signal(signal.SIGINT, old)
            signal.signal(signal.SIGTERM, signal.SIG_DFL)
            if hasattr(signal, "SIGHUP"):
                signal.signal(signal.SIGHUP, signal.SIG_DFL)
