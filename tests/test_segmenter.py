"""Tests for the block segmenter."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from nofmt.formatting.ir import Block, Document
from nofmt.formatting.segmenter import BlockSegmenter, iter_lines, segment


def _lines(doc: Document) -> list[list[bytes]]:
    return [block.lines for block in doc.blocks]


class TestBlockSegmenter:
    """Tests for the BlockSegmenter class."""

    @pytest.fixture
    def segmenter(self) -> BlockSegmenter:
        """Create a segmenter instance."""
        return BlockSegmenter()

    def test_no_pragmas(self, segmenter: BlockSegmenter):
        """Test that a file without pragmas is one formatted block."""
        doc = segmenter.parse(b"package main\n\nfunc main() {}\n")

        assert doc.tags == [True]
        assert doc.blocks[0].lines == [b"package main\n", b"\n", b"func main() {}\n"]

    def test_empty_input(self, segmenter: BlockSegmenter):
        """Test that empty input still yields one formatted block."""
        doc = segmenter.parse(b"")

        assert doc.tags == [True]
        assert doc.blocks[0].lines == []
        assert doc.to_bytes() == b""

    def test_scenario_nofmt_region(self, segmenter: BlockSegmenter):
        """Test three code lines, a nofmt region, then two code lines."""
        src = (
            b"a := 1\n"
            b"b := 2\n"
            b"c := 3\n"
            b"// go:nofmt\n"
            b"raw  one\n"
            b"raw  two\n"
            b"// go:fmt\n"
            b"d := 4\n"
            b"e := 5\n"
        )
        doc = segmenter.parse(src)

        assert doc.tags == [True, False, True]
        assert doc.blocks[0].lines[-1] == b"// go:nofmt\n"
        assert doc.blocks[1].lines == [b"raw  one\n", b"raw  two\n"]
        assert doc.blocks[2].lines[0] == b"// go:fmt\n"
        assert len(doc.blocks[2]) == 3

    def test_block_comment_hides_pragma(self, segmenter: BlockSegmenter):
        """Test that go:nofmt inside a multi-line block comment is inert."""
        src = b"x := 1\n/* start\ngo:nofmt\n// go:nofmt\nend */\ny := 2\n"
        doc = segmenter.parse(src)

        assert doc.tags == [True]
        assert doc.to_bytes() == src

    def test_block_comment_inside_unformatted_region(self, segmenter: BlockSegmenter):
        """Test that a comment span stays in the block it started in."""
        src = b"// go:nofmt\n/*\n// go:fmt\n*/\nx  :=  1\n"
        doc = segmenter.parse(src)

        assert doc.tags == [True, False]
        assert doc.blocks[1].lines == [b"/*\n", b"// go:fmt\n", b"*/\n", b"x  :=  1\n"]

    def test_raw_string_hides_pragma(self, segmenter: BlockSegmenter):
        """Test that a pragma line inside a raw string is inert."""
        src = b"s := `\n// go:nofmt\n`\n"
        doc = segmenter.parse(src)

        assert doc.tags == [True]

    def test_trailing_comment_does_not_switch(self, segmenter: BlockSegmenter):
        """Test that a pragma after code does not switch blocks."""
        doc = segmenter.parse(b"x = 1 // go:nofmt\ny = 2\n")

        assert doc.tags == [True]

    def test_repeated_pragmas_are_absorbed(self, segmenter: BlockSegmenter):
        """Test that switching to the current tag adds no empty block."""
        src = b"// go:fmt\na\n// go:nofmt\n// go:nofmt\nb\n// go:fmt\n// go:fmt\nc\n"
        doc = segmenter.parse(src)

        assert doc.tags == [True, False, True]
        assert _lines(doc) == [
            [b"// go:fmt\n", b"a\n", b"// go:nofmt\n"],
            [b"// go:nofmt\n", b"b\n"],
            [b"// go:fmt\n", b"// go:fmt\n", b"c\n"],
        ]

    def test_first_line_nofmt(self, segmenter: BlockSegmenter):
        """Test a go:nofmt on the very first line."""
        doc = segmenter.parse(b"// go:nofmt\nx  =  1\n")

        assert doc.tags == [True, False]
        assert doc.blocks[0].lines == [b"// go:nofmt\n"]

    def test_final_line_without_newline(self, segmenter: BlockSegmenter):
        """Test that an unterminated last line is kept."""
        src = b"// go:nofmt\nx  =  1\n// go:fmt\ny = 2"
        doc = segmenter.parse(src)

        assert doc.tags == [True, False, True]
        assert doc.blocks[2].lines == [b"// go:fmt\n", b"y = 2"]

    def test_crlf_line_endings(self, segmenter: BlockSegmenter):
        """Test that CRLF files segment and reassemble unchanged."""
        src = b"a\r\n// go:nofmt\r\nb\r\n// go:fmt\r\nc\r\n"
        doc = segmenter.parse(src)

        assert doc.tags == [True, False, True]
        assert doc.to_bytes() == src

    def test_invalid_utf8_is_kept(self, segmenter: BlockSegmenter):
        """Test that undecodable bytes pass through untouched."""
        src = b"s := \"\xff\xfe\"\n// go:nofmt\n\xc3(\n"
        doc = segmenter.parse(src)

        assert doc.tags == [True, False]
        assert doc.to_bytes() == src

    def test_go_source(self, segmenter: BlockSegmenter, go_source: bytes):
        """Test the full Go sample."""
        doc = segmenter.parse(go_source)

        assert doc.tags == [True, False, True, False]
        assert doc.blocks[1].lines[0] == b"type foo struct {\n"
        assert doc.blocks[2].lines[:2] == [b"// go:fmt\n", b"// go:fmt\n"]
        assert doc.to_bytes() == go_source

    def test_parse_lines(self, segmenter: BlockSegmenter):
        """Test segmenting an iterable of lines directly."""
        doc = segmenter.parse_lines([b"a\n", b"//go:nofmt\n", b"b\n"])

        assert doc.tags == [True, False]

    def test_segment_helper(self):
        """Test the module-level helper."""
        assert segment(b"x\n").tags == [True]


class TestIterLines:
    """Tests for raw line splitting."""

    def test_split_on_newline_only(self):
        """Test that carriage returns and form feeds do not split lines."""
        assert list(iter_lines(b"a\rb\x0cc\nd")) == [b"a\rb\x0cc\n", b"d"]

    def test_blank_lines(self):
        """Test that blank lines are kept."""
        assert list(iter_lines(b"\n\n")) == [b"\n", b"\n"]


class TestDocument:
    """Tests for the Document and Block models."""

    def test_tags_and_bytes(self):
        """Test tag listing and reassembly."""
        doc = Document(blocks=[Block(True, [b"a\n"]), Block(False, [b"b\n"])])

        assert doc.tags == [True, False]
        assert doc.to_bytes() == b"a\nb\n"
        assert len(doc) == 2
        assert [block.formatted for block in doc] == [True, False]


_LINE = st.one_of(
    st.sampled_from(
        [
            b"// go:nofmt\n",
            b"// go:fmt\n",
            b"/* open\n",
            b"close */\n",
            b"x := `raw\n",
            b"`\n",
            b"s := \"// go:nofmt\"\n",
            b"\n",
        ]
    ),
    st.binary(max_size=20),
)


class TestSegmenterProperties:
    """Property-based checks for segmentation invariants."""

    @given(st.lists(_LINE, max_size=30).map(b"".join))
    @settings(max_examples=200)
    def test_lossless(self, data: bytes):
        """Concatenating all blocks reproduces the input."""
        assert segment(data).to_bytes() == data

    @given(st.lists(_LINE, max_size=30).map(b"".join))
    @settings(max_examples=200)
    def test_tags_alternate(self, data: bytes):
        """The list is never empty, starts formatted and alternates."""
        tags = segment(data).tags

        assert tags
        assert tags[0] is True
        assert all(a != b for a, b in zip(tags, tags[1:]))

