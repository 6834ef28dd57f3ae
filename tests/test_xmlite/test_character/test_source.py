"""Tests for input decoding."""

import pytest

from xmlite.character import BYTE_ORDER_MARK, decode_source
from xmlite.shared import UnexpectedContentError


class TestDecodeSource:
    """Test conversion of caller input into text."""

    def test_str_returned_unchanged(self):
        """Test text input."""
        assert decode_source("<a/>") == "<a/>"

    def test_bytes_decoded_as_utf8(self):
        """Test UTF-8 bytes input."""
        assert decode_source("<café/>".encode("utf-8")) == "<café/>"

    def test_bytearray_accepted(self):
        """Test bytearray input."""
        assert decode_source(bytearray(b"<a/>")) == "<a/>"

    def test_bom_stripped_from_bytes(self):
        """Test UTF-8 byte-order mark removal."""
        assert decode_source(b"\xef\xbb\xbf<a/>") == "<a/>"

    def test_bom_stripped_from_str(self):
        """Test byte-order mark removal from text."""
        assert decode_source(BYTE_ORDER_MARK + "<a/>") == "<a/>"

    def test_invalid_utf8_raises_error(self):
        """Test undecodable bytes are reported as unexpected content."""
        with pytest.raises(UnexpectedContentError, match="not valid UTF-8.*at byte 3") as exc_info:
            decode_source(b"<a>\xff</a>")

        assert exc_info.value.position is None
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    @pytest.mark.parametrize("data", [None, 42, ["<a/>"]])
    def test_unsupported_type_raises_error(self, data):
        """Test that other input types are rejected."""
        with pytest.raises(TypeError, match="XML input must be str or bytes"):
            decode_source(data)
