import re
import os
import sys
import struct
import contextlib
from io import StringIO
from tempfile import mkstemp
from unittest import TestCase as BaseTestCase

try:
    import pytest
except ImportError:
    raise SystemExit("pytest missing: sudo apt-get install python-pytest")


def get_temp_file(data=b"", ext=""):
    """Returns a file with the extension containing data"""

    fd, filename = mkstemp(suffix=ext)
    with os.fdopen(fd, "wb") as h:
        h.write(data)
    return filename


@contextlib.contextmanager
def capture_output():
    """
    with capture_output() as (stdout, stderr):
        some_action()
    print stdout.getvalue(), stderr.getvalue()
    """

    err = StringIO()
    out = StringIO()
    old_err = sys.stderr
    old_out = sys.stdout
    sys.stderr = err
    sys.stdout = out

    try:
        yield (out, err)
    finally:
        sys.stderr = old_err
        sys.stdout = old_out


def synchsafe(value):
    """Encodes a 28 bit value as 4 synchsafe bytes"""

    return bytes([(value >> shift) & 0x7F for shift in (21, 14, 7, 0)])


def id3_frame(frame_id, payload, version=4, flags=0, size=None):
    """Returns a frame header followed by the payload"""

    if size is None:
        size = len(payload)
    size_data = synchsafe(size) if version == 4 else struct.pack(">I", size)
    return frame_id.encode("ascii") + size_data + \
        struct.pack(">H", flags) + payload


def id3_tag(body, version=4, flags=0, size=None, revision=0):
    """Returns a tag header followed by the body"""

    if size is None:
        size = len(body)
    return b"ID3" + bytes([version, revision, flags]) + synchsafe(size) + body


def box(name, payload=b"", size=None):
    """Returns an ISOBMFF box"""

    if size is None:
        size = len(payload) + 8
    return struct.pack(">I4s", size, name) + payload


def full_box(name, payload=b"", version=0, flags=0):
    return box(name, struct.pack(">I", (version << 24) | flags) + payload)


class TestCase(BaseTestCase):

    def failUnlessRaisesRegexp(self, exc, re_, fun, *args, **kwargs):
        def wrapped(*args, **kwargs):
            try:
                fun(*args, **kwargs)
            except Exception as e:
                self.failUnless(re.search(re_, str(e)))
                raise
        self.failUnlessRaises(exc, wrapped, *args, **kwargs)

    # silence deprec warnings about useless renames
    failUnless = BaseTestCase.assertTrue
    failIf = BaseTestCase.assertFalse
    failUnlessEqual = BaseTestCase.assertEqual
    failUnlessRaises = BaseTestCase.assertRaises
    failUnlessAlmostEqual = BaseTestCase.assertAlmostEqual
    failIfEqual = BaseTestCase.assertNotEqual
    failIfAlmostEqual = BaseTestCase.assertNotAlmostEqual
    assertEquals = BaseTestCase.assertEqual
    assertNotEquals = BaseTestCase.assertNotEqual
    assert_ = BaseTestCase.assertTrue

    def assertReallyEqual(self, a, b):
        self.assertEqual(a, b)
        self.assertEqual(b, a)
        self.assertTrue(a == b)
        self.assertTrue(b == a)
        self.assertFalse(a != b)
        self.assertFalse(b != a)

    def assertReallyNotEqual(self, a, b):
        self.assertNotEqual(a, b)
        self.assertNotEqual(b, a)
        self.assertFalse(a == b)
        self.assertFalse(b == a)
        self.assertTrue(a != b)
        self.assertTrue(b != a)


def unit(run=[], exitfirst=False):
    args = []

    if run:
        args.append("-k")
        args.append(" or ".join(run))

    if exitfirst:
        args.append("-x")

    args.append("tests")

    return pytest.main(args=args)
