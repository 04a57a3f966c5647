
import os
import struct
from io import BytesIO

import mediadissect
from mediadissect import File, DissectResult, Dissector, UnknownDissector, \
    MediaDissectError, PROBE_SIZE, get_dissectors, probe
from mediadissect.id3 import ID3v23Dissector, ID3v24Dissector, ID3Tags
from mediadissect.mp4 import IsobmffDissector, Atoms
from tests import TestCase, get_temp_file, id3_frame, id3_tag, box


FTYP = box(b"ftyp", b"isom\x00\x00\x00\x00")


class TMetadata(TestCase):

    def test_version(self):
        self.assertTrue(isinstance(mediadissect.version, tuple))
        self.assertEqual(
            mediadissect.version_string,
            ".".join(map(str, mediadissect.version)))

    def test_exceptions(self):
        self.assertTrue(issubclass(mediadissect.id3.error, MediaDissectError))
        self.assertTrue(issubclass(mediadissect.mp4.error, MediaDissectError))


class TProbe(TestCase):

    def test_order(self):
        self.assertEqual(
            get_dissectors(),
            [ID3v23Dissector, ID3v24Dissector, IsobmffDissector])

    def test_id3(self):
        self.assertTrue(probe(b"ID3\x03\x00\x00") is ID3v23Dissector)
        self.assertTrue(probe(b"ID3\x04\x00\x00") is ID3v24Dissector)
        self.assertTrue(probe(b"ID3\x02\x00\x00") is UnknownDissector)

    def test_mpeg_sync(self):
        self.assertTrue(probe(b"\xff\xfb\x90\x64") is ID3v23Dissector)

    def test_isobmff(self):
        self.assertTrue(probe(FTYP[:PROBE_SIZE]) is IsobmffDissector)

    def test_isobmff_brand_allow_list(self):
        header = FTYP[:8] + b"\x01\x02\x03\x04"
        self.assertTrue(probe(header) is UnknownDissector)
        for brand in [b"M4A ", b"qt  ", b"3gp6", b"dash", b"avc1"]:
            self.assertTrue(probe(FTYP[:8] + brand) is IsobmffDissector)

    def test_unknown(self):
        self.assertTrue(probe(b"") is UnknownDissector)
        self.assertTrue(probe(b"RIFF\x00\x00\x00\x00WAVE") is UnknownDissector)

    def test_unknown_dissector(self):
        fileobj = BytesIO(b"abc")
        self.assertEqual(UnknownDissector.dissect(fileobj), None)
        self.assertEqual(fileobj.tell(), 0)
        self.assertTrue(UnknownDissector.can_handle(b""))

    def test_labels(self):
        for dissector in get_dissectors() + [UnknownDissector]:
            self.assertTrue(issubclass(dissector, Dissector))
            self.assertTrue(dissector.media_type)
            self.assertTrue(dissector.name)

    def test_base_dissector(self):
        self.assertRaises(NotImplementedError, Dissector.can_handle, b"")
        self.assertRaises(NotImplementedError, Dissector.dissect, BytesIO())


class TFile(TestCase):

    def test_fileobj(self):
        data = id3_tag(id3_frame("TIT2", b"\x00Hello"))
        fileobj = BytesIO(data)
        fileobj.seek(5)
        result = File(fileobj)
        self.assertTrue(isinstance(result, DissectResult))
        self.assertTrue(result.dissector is ID3v24Dissector)
        self.assertTrue(isinstance(result.model, ID3Tags))
        self.assertEqual(result.model.frames[0].content.text, "Hello")
        self.assertEqual(result.filename, None)
        self.assertFalse(fileobj.closed)

    def test_unknown(self):
        result = File(BytesIO(b"not a media file"))
        self.assertTrue(result.dissector is UnknownDissector)
        self.assertEqual(result.model, None)
        self.assertEqual(result.media_type, "Unknown")
        self.assertEqual(result.pprint(), "Unknown (Unknown Format Dissector)")

    def test_empty(self):
        result = File(BytesIO(b""))
        self.assertTrue(result.dissector is UnknownDissector)

    def test_short_isobmff(self):
        result = File(BytesIO(FTYP))
        self.assertTrue(isinstance(result.model, Atoms))
        self.assertEqual(len(result.model), 1)

    def test_error(self):
        data = FTYP + struct.pack(">I4s", 2, b"free")
        self.assertRaises(MediaDissectError, File, BytesIO(data))

    def test_repr(self):
        result = File(BytesIO(FTYP))
        self.assertEqual(
            repr(result),
            "<DissectResult dissector=IsobmffDissector filename=None>")

    def test_missing_path(self):
        self.assertRaises(OSError, File, "/dev/null/nope")


class TFilePath(TestCase):

    def setUp(self):
        self.filename = get_temp_file(FTYP + box(b"free", b"abc"), ".mp4")

    def tearDown(self):
        os.remove(self.filename)

    def test_path(self):
        result = File(self.filename)
        self.assertEqual(result.filename, self.filename)
        self.assertEqual([a.name for a in result.model], [b"ftyp", b"free"])

    def test_pathlike(self):
        import pathlib
        result = File(pathlib.Path(self.filename))
        self.assertEqual(result.filename, self.filename)

    def test_pprint(self):
        lines = File(self.filename).pprint().splitlines()
        self.assertEqual(
            lines[0], "ISOBMFF (ISO Base Media File Format Dissector)")
        self.assertTrue(lines[1].startswith("Box at offset 0x00000000: 'ftyp'"))
