
import os
from io import BytesIO

from mediadissect._filething import FileThing
from mediadissect._util import cdata, get_size, read_full, openfile, \
    find_terminator, fourcc, MediaDissectError
from tests import TestCase, get_temp_file


class Tcdata(TestCase):

    ZERO = staticmethod(lambda s: b"\x00" * s)
    LEONE = staticmethod(lambda s: b"\x01" + b"\x00" * (s - 1))
    BEONE = staticmethod(lambda s: b"\x00" * (s - 1) + b"\x01")
    NEGONE = staticmethod(lambda s: b"\xff" * s)

    def test_char(self):
        self.failUnlessEqual(cdata.uint8(b"\x7f"), 127)
        self.failUnlessEqual(cdata.uint8(b"\xff"), 255)

    def test_short(self):
        self.failUnlessEqual(cdata.short_be(self.ZERO(2)), 0)
        self.failUnlessEqual(cdata.short_be(self.BEONE(2)), 1)
        self.failUnlessEqual(cdata.short_be(self.NEGONE(2)), -1)
        self.failUnlessEqual(cdata.ushort_be(self.NEGONE(2)), 65535)

    def test_int(self):
        self.failUnlessEqual(cdata.int_be(self.ZERO(4)), 0)
        self.failUnlessEqual(cdata.int_be(self.BEONE(4)), 1)
        self.failUnlessEqual(cdata.int_be(self.LEONE(4)), 1 << 24)
        self.failUnlessEqual(cdata.int_be(self.NEGONE(4)), -1)
        self.failUnlessEqual(cdata.uint_be(self.NEGONE(4)), 2 ** 32 - 1)

    def test_longlong(self):
        self.failUnlessEqual(cdata.longlong_be(self.BEONE(8)), 1)
        self.failUnlessEqual(cdata.longlong_be(self.NEGONE(8)), -1)
        self.failUnlessEqual(cdata.ulonglong_be(self.NEGONE(8)), 2 ** 64 - 1)

    def test_from(self):
        data = b"\xff\xff\x00\x00\x00\x01\x00\x02"
        self.assertEqual(cdata.short_be_from(data, 0), -1)
        self.assertEqual(cdata.ushort_be_from(data, 0), 65535)
        self.assertEqual(cdata.uint_be_from(data, 2), 1)
        self.assertEqual(cdata.int_be_from(data, 4), 0x10002)
        self.assertEqual(cdata.ulonglong_be_from(b"\x00" * 7 + b"\x05"), 5)

    def test_from_too_short(self):
        self.assertRaises(cdata.error, cdata.uint_be_from, b"\x00" * 5, 2)

    def test_test_bit(self):
        self.failUnless(cdata.test_bit(1, 0))
        self.failIf(cdata.test_bit(1, 1))
        self.failUnless(cdata.test_bit(2, 1))
        self.failUnless(cdata.test_bit(0x80, 7))


class Tget_size(TestCase):

    def test_get_size(self):
        f = BytesIO(b"foo")
        f.seek(1, 0)
        self.assertEqual(f.tell(), 1)
        self.assertEqual(get_size(f), 3)
        self.assertEqual(f.tell(), 1)


class Tread_full(TestCase):

    def test_read_full(self):
        fileobj = BytesIO()
        self.assertRaises(ValueError, read_full, fileobj, -1)
        self.assertRaises(IOError, read_full, fileobj, 1)

        for i in [0, 1]:
            fileobj = BytesIO(b"\x00" * i)
            self.assertEqual(read_full(fileobj, i), b"\x00" * i)
            fileobj = BytesIO(b"\x00" * (i + 1))
            self.assertEqual(read_full(fileobj, i), b"\x00" * i)


class Topenfile(TestCase):

    def setUp(self):
        self.filename = get_temp_file(b"hello")

    def tearDown(self):
        os.remove(self.filename)

    def test_path(self):
        with openfile(self.filename) as ft:
            self.assertEqual(ft.filename, self.filename)
            self.assertEqual(ft.fileobj.read(), b"hello")
            fileobj = ft.fileobj
        self.assertTrue(fileobj.closed)

    def test_path_closed_on_error(self):
        try:
            with openfile(self.filename) as ft:
                fileobj = ft.fileobj
                raise MediaDissectError("fail")
        except MediaDissectError:
            pass
        self.assertTrue(fileobj.closed)

    def test_pathlike(self):
        import pathlib
        with openfile(pathlib.Path(self.filename)) as ft:
            self.assertEqual(ft.fileobj.read(), b"hello")

    def test_fileobj(self):
        fileobj = BytesIO(b"abc")
        with openfile(fileobj) as ft:
            self.assertTrue(ft.fileobj is fileobj)
            self.assertEqual(ft.filename, None)
        self.assertFalse(fileobj.closed)

    def test_filething(self):
        thing = FileThing(BytesIO(b""), None, "foo")
        with openfile(thing) as ft:
            self.assertTrue(ft is thing)

    def test_type_error(self):
        def open_int():
            with openfile(42):
                pass
        self.assertRaises(TypeError, open_int)

    def test_missing(self):
        def open_missing():
            with openfile(self.filename + "-nope"):
                pass
        self.assertRaises(OSError, open_missing)


class Tfind_terminator(TestCase):

    def test_single(self):
        self.assertEqual(find_terminator(b"ab\x00cd"), 2)
        self.assertEqual(find_terminator(b"abcd"), -1)
        self.assertEqual(find_terminator(b"\x00a\x00", start=1), 2)

    def test_double_aligned(self):
        # the zero pair at 1..3 spans two code units
        self.assertEqual(find_terminator(b"a\x00\x00b\x00\x00", 2), 4)
        self.assertEqual(find_terminator(b"\x00\x00", 2), 0)
        self.assertEqual(find_terminator(b"a\x00\x00", 2), -1)

    def test_double_start(self):
        self.assertEqual(find_terminator(b"\x00\x00a\x00\x00\x00", 2, 2), 4)


class Tfourcc(TestCase):

    def test_plain(self):
        self.assertEqual(fourcc(b"moov"), "moov")
        self.assertEqual(fourcc(b"url "), "url ")

    def test_copyright(self):
        self.assertEqual(fourcc(b"\xa9nam"), "©nam")

    def test_unprintable(self):
        self.assertEqual(fourcc(b"\x00ab\xff"), "?ab?")
