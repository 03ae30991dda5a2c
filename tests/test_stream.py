"""Tests for the byte decoding front end."""

import unittest
from pathlib import Path

from pipehtml import ByteStreamParser, IncompleteDocumentError, parse_bytes, parse_file

RESOURCES = Path(__file__).parent / "resources"


class TestDecoding(unittest.TestCase):
    def test_utf8_default(self):
        parser = parse_bytes("<html><p>café ☕</p></html>".encode())
        assert parser.encoding == "utf-8"
        assert parser.result.find_element_by_tag_name("p").text_content == "café ☕"

    def test_initial_encoding_normalised(self):
        assert ByteStreamParser("latin-1").encoding == "iso8859-1"
        assert ByteStreamParser("UTF8").encoding == "utf-8"

    def test_unknown_initial_encoding(self):
        with self.assertRaises(LookupError):
            ByteStreamParser("no-such-codec")

    def test_multibyte_sequence_split_across_feeds(self):
        parser = ByteStreamParser()
        parser.feed(b"<html>caf\xc3")
        parser.feed(b"\xa9</html>")
        document = parser.close()
        assert document.document_element.text_content == "café"

    def test_byte_order_mark(self):
        parser = parse_bytes(b"\xef\xbb\xbf<html></html>")
        assert parser.result.document_element.tag_name == "html"

    def test_incomplete_input(self):
        parser = ByteStreamParser()
        parser.feed(b"<html><p")
        with self.assertRaises(IncompleteDocumentError):
            parser.close()


class TestCharsetSwitch(unittest.TestCase):
    def test_latin1_resource(self):
        parser = parse_file(RESOURCES / "html_with_latin1_charset.html")
        assert parser.encoding == "iso8859-1"
        assert parser.doc_type == "html"
        document = parser.result
        assert document.find_element_by_tag_name("title").text_content == "café"
        assert document.find_element_by_tag_name("p").text_content == "naïve"

    def test_latin1_resource_small_chunks(self):
        parser = parse_file(RESOURCES / "html_with_latin1_charset.html", chunk_size=3)
        assert parser.result.find_element_by_tag_name("p").text_content == "naïve"

    def test_switch_applies_after_tag(self):
        data = b'<html><head><meta charset="windows-1252"><title>\x93q\x94</title></head></html>'
        parser = parse_bytes(data)
        assert parser.encoding == "cp1252"
        assert parser.result.find_element_by_tag_name("title").text_content == "“q”"

    def test_same_codec_keeps_decoder(self):
        parser = parse_bytes('<html><head><meta charset="UTF-8"></head><p>é</p></html>'.encode())
        assert parser.encoding == "utf-8"
        assert parser.result.find_element_by_tag_name("p").text_content == "é"

    def test_unknown_charset_keeps_current_codec(self):
        seen = []
        data = '<html><head><meta charset="x-unknown"></head><body>é</body></html>'.encode()
        parser = parse_bytes(data, charset_callback=seen.append)
        assert seen == ["x-unknown"]
        assert parser.encoding == "utf-8"
        assert parser.result.find_element_by_tag_name("body").text_content == "é"

    def test_callback_sees_announcement(self):
        seen = []
        parse_file(RESOURCES / "html_with_latin1_charset.html", charset_callback=seen.append)
        assert seen == ["iso-8859-1"]


if __name__ == "__main__":
    unittest.main()
