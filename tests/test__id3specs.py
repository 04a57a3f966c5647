
from mediadissect.id3._specs import ByteSpec, EncodingSpec, StringSpec, \
    BinaryDataSpec, EncodedTextSpec, Latin1TextSpec, SizedIntegerSpec, \
    PictureTypeSpec, CTOCFlagsSpec, Latin1TextListSpec, EncodedTextListSpec, \
    Encoding, PictureType, CTOCFlags, decode_text, split_terminated, \
    decode_text_list, get_picture_type_description
from mediadissect.id3._frames import TextFrame
from mediadissect.id3._tags import ID3Header
from mediadissect.id3._util import ID3TooShortError, ID3BadTerminatorError, \
    ID3UnknownEncodingError, ID3BadTextError, ID3JunkFrameError
from tests import TestCase


def header(version=4):
    h = ID3Header()
    h.version = (2, version, 0)
    return h


def frame(encoding):
    f = TextFrame()
    f.encoding = encoding
    return f


class SpecSanityChecks(TestCase):

    def test_bytespec(self):
        s = ByteSpec('name')
        self.assertEquals((97, b'bcdefg'), s.read(None, None, b'abcdefg'))

    def test_encodingspec(self):
        s = EncodingSpec('name')
        self.assertEquals(
            (Encoding.UTF8, b'abcdefg'), s.read(header(), None, b'\x03abcdefg'))
        self.assertRaises(
            ID3UnknownEncodingError, s.read, header(), None, b'\x04abcdefg')

    def test_encodingspec_version(self):
        s = EncodingSpec('name')
        self.assertEquals(
            (Encoding.UTF16, b''), s.read(header(3), None, b'\x01'))
        self.assertRaises(
            ID3UnknownEncodingError, s.read, header(3), None, b'\x02ab')
        self.assertRaises(
            ID3UnknownEncodingError, s.read, header(3), None, b'\x03ab')

    def test_stringspec(self):
        s = StringSpec('name', 3)
        self.assertEquals(('abc', b'defg'), s.read(None, None, b'abcdefg'))
        self.assertRaises(ID3TooShortError, s.read, None, None, b'ab')

    def test_binarydataspec(self):
        s = BinaryDataSpec('name')
        self.assertEquals((b'abcdefg', b''), s.read(None, None, b'abcdefg'))
        self.assertEquals((b'', b''), s.read(None, None, b''))

    def test_binarydataspec_max_size(self):
        s = BinaryDataSpec('name', max_size=2)
        self.assertEquals((b'ab', b''), s.read(None, None, b'ab'))
        self.assertRaises(ID3JunkFrameError, s.read, None, None, b'abc')

    def test_encodedtextspec(self):
        s = EncodedTextSpec('name')
        f = frame(Encoding.LATIN1)
        self.assertEquals(('abcd', b'fg'), s.read(None, f, b'abcd\x00fg'))
        self.assertEquals(('abcd', b''), s.read(None, f, b'abcd'))

    def test_encodedtextspec_terminated(self):
        s = EncodedTextSpec('name', terminated=True)
        f = frame(Encoding.LATIN1)
        self.assertRaises(ID3BadTerminatorError, s.read, None, f, b'abcd')

    def test_encodedtextspec_utf16(self):
        s = EncodedTextSpec('name')
        f = frame(Encoding.UTF16)
        data = b'\xff\xfea\x00b\x00\x00\x00rest'
        self.assertEquals(('ab', b'rest'), s.read(None, f, data))

    def test_latin1textspec(self):
        s = Latin1TextSpec('name')
        self.assertEquals(('ab\xe4', b'cd'), s.read(None, None, b'ab\xe4\x00cd'))
        self.assertEquals(('abcd', b''), s.read(None, None, b'abcd'))

    def test_latin1textspec_terminated(self):
        s = Latin1TextSpec('name', terminated=True)
        self.assertRaises(ID3BadTerminatorError, s.read, None, None, b'abcd')
        self.assertEquals(('', b'x'), s.read(None, None, b'\x00x'))

    def test_sizedintegerspec(self):
        s = SizedIntegerSpec('name', 4)
        self.assertEquals(
            (0x01020304, b'x'), s.read(None, None, b'\x01\x02\x03\x04x'))
        self.assertRaises(ID3TooShortError, s.read, None, None, b'\x01')

    def test_picturetypespec(self):
        s = PictureTypeSpec('name')
        value, rest = s.read(None, None, b'\x03x')
        self.assertTrue(value is PictureType.COVER_FRONT)
        self.assertEquals(rest, b'x')
        value, rest = s.read(None, None, b'\x42')
        self.assertEquals(value, 0x42)
        self.assertFalse(isinstance(value, PictureType))

    def test_ctocflagsspec(self):
        s = CTOCFlagsSpec('name')
        value, rest = s.read(None, None, b'\x03')
        self.assertEquals(value, CTOCFlags.TOP_LEVEL | CTOCFlags.ORDERED)

    def test_latin1textlistspec(self):
        s = Latin1TextListSpec('name')
        self.assertEquals(
            (['ch1', 'ch2'], b'rest'),
            s.read(None, None, b'\x02ch1\x00ch2\x00rest'))
        self.assertEquals(([], b'x'), s.read(None, None, b'\x00x'))
        self.assertRaises(
            ID3BadTerminatorError, s.read, None, None, b'\x02ch1\x00ch2')

    def test_encodedtextlistspec(self):
        s = EncodedTextListSpec('name')
        f = frame(Encoding.UTF8)
        self.assertEquals(
            (['a', 'b'], b''), s.read(None, f, b'a\x00\x00b\x00'))

    def test_spec_unhashable(self):
        self.assertRaises(TypeError, hash, ByteSpec('name'))


class TEncoding(TestCase):

    def test_terminator(self):
        self.assertEqual(Encoding.LATIN1.terminator, b"\x00")
        self.assertEqual(Encoding.UTF8.terminator, b"\x00")
        self.assertEqual(Encoding.UTF16.terminator, b"\x00\x00")
        self.assertEqual(Encoding.UTF16BE.terminator, b"\x00\x00")

    def test_valid_for_version(self):
        self.assertTrue(Encoding.LATIN1.is_valid_for_version(3))
        self.assertTrue(Encoding.UTF16.is_valid_for_version(3))
        self.assertFalse(Encoding.UTF16BE.is_valid_for_version(3))
        self.assertFalse(Encoding.UTF8.is_valid_for_version(3))
        for enc in Encoding:
            self.assertTrue(enc.is_valid_for_version(4))

    def test_label(self):
        self.assertEqual(Encoding.UTF8.label, "UTF-8")


class TDecodeText(TestCase):

    def test_latin1(self):
        self.assertEqual(decode_text(b"\xe4", Encoding.LATIN1), "\xe4")

    def test_utf8_replace(self):
        self.assertEqual(decode_text(b"a\xff", Encoding.UTF8), "a\ufffd")

    def test_utf16_bom(self):
        self.assertEqual(decode_text(b"\xff\xfea\x00", Encoding.UTF16), "a")
        self.assertEqual(decode_text(b"\xfe\xff\x00a", Encoding.UTF16), "a")

    def test_utf16_no_bom_is_big_endian(self):
        self.assertEqual(decode_text(b"\x00a", Encoding.UTF16), "a")

    def test_utf16be(self):
        self.assertEqual(decode_text(b"\x00a\x00b", Encoding.UTF16BE), "ab")

    def test_utf16_odd(self):
        self.assertRaises(
            ID3BadTextError, decode_text, b"\xff\xfea", Encoding.UTF16)
        self.assertRaises(
            ID3BadTextError, decode_text, b"\x00a\x00", Encoding.UTF16BE)

    def test_utf16_lone_surrogate(self):
        self.assertRaises(
            ID3BadTextError, decode_text, b"\xd8\x00", Encoding.UTF16BE)

    def test_split_terminated(self):
        self.assertEqual(
            split_terminated(b"ab\x00cd", Encoding.LATIN1), (b"ab", b"cd", True))
        self.assertEqual(
            split_terminated(b"abcd", Encoding.LATIN1), (b"abcd", b"", False))

    def test_split_terminated_aligned(self):
        # 'a' followed by U+0100 contains an unaligned zero pair
        data = b"\x00a\x01\x00\x00\x00x\x00"
        self.assertEqual(
            split_terminated(data, Encoding.UTF16BE),
            (b"\x00a\x01\x00", b"x\x00", True))

    def test_decode_text_list(self):
        self.assertEqual(
            decode_text_list(b"a\x00b\x00\x00c", Encoding.LATIN1),
            ["a", "b", "c"])
        self.assertEqual(decode_text_list(b"", Encoding.LATIN1), [])
        self.assertEqual(decode_text_list(b"\x00", Encoding.LATIN1), [])


class TPictureType(TestCase):

    def test_description(self):
        self.assertEqual(PictureType.COVER_FRONT.description, "Cover (front)")
        self.assertEqual(get_picture_type_description(3), "Cover (front)")
        self.assertEqual(get_picture_type_description(0x42), "Unknown")
