"""
Driver Tests - Paginate whole files, read the output back through the slots.
"""

import os
import tempfile
from pathlib import Path

import pytest

import paginator.driver
from paginator.driver import paginate_file
from paginator.errors import PageReadError, PageWriteError, TrailerError
from paginator.geometry import PageGeometry
from paginator.reader import PageFileReader, read_chunk


DEFAULT = PageGeometry.default()
SMALL = PageGeometry(line_width=10, lines_per_page=3, reserved_tail_chars=2, trailer_number_width=1)


@pytest.fixture
def workdir():
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


def run(workdir: Path, data: bytes, geometry: PageGeometry = DEFAULT, **kwargs):
    src = workdir / "input.txt"
    src.write_bytes(data)
    out = workdir / "output.txt"
    result = paginate_file(src, out, geometry, **kwargs)
    return result, out


def trailer_at(raw: bytes, pos: int) -> bytes:
    return raw[pos:pos + 5]


class TestPaginateFile:

    def test_empty_input(self, workdir):
        result, out = run(workdir, b"")
        assert result.pages == 1
        assert result.bytes_read == 0
        assert out.read_bytes() == b"\x0c\x01\x00\x00\x00"

    def test_short_input_single_trimmed_page(self, workdir):
        result, out = run(workdir, b"hello world")
        assert result.pages == 1
        assert out.read_bytes() == b"hello world\x0c\x01\x00\x00\x00"

    def test_word_stream_scenario(self, workdir):
        data = b"word " * 400
        result, out = run(workdir, data)
        assert result.pages == 2
        assert result.bytes_read == len(data)

        raw = out.read_bytes()
        page1 = (b"word " * 15 + b"\n") * 24 + b"word " * 14 + b"\n"
        page2 = b"word " * 15 + b"\n" + b"word " * 11
        assert raw[:len(page1)] == page1
        assert trailer_at(raw, len(page1)) == b"\x0c\x01\x00\x00\x00"
        assert raw[2000:] == page2 + b"\x0c\x02\x00\x00\x00"

    def test_gap_after_short_page_is_zero(self, workdir):
        _, out = run(workdir, b"word " * 400)
        raw = out.read_bytes()
        assert raw[1900:2000] == b"\x00" * 100

    def test_long_token(self, workdir):
        result, out = run(workdir, b"q" * 200)
        assert result.pages == 1
        raw = out.read_bytes()
        assert raw.split(b"\n")[0] == b"q" * 79

    def test_short_chunk_that_overflows_one_page(self, workdir):
        # Under one raw window, but more than one wrapped page
        data = b"word " * 398
        result, out = run(workdir, data)
        assert result.pages == 2
        assert result.bytes_read == len(data)
        pages = PageFileReader.read(out)
        assert b"".join(p.replace(b"\n", b"") for p in pages) == data

    def test_exact_window_input(self, workdir):
        data = b"x" * DEFAULT.page_capacity_bytes
        result, out = run(workdir, data)
        assert result.pages == 2
        pages = PageFileReader.read(out)
        assert b"".join(p.replace(b"\n", b"") for p in pages) == data

    def test_many_pages_content_preserved(self, workdir):
        data = b"the quick brown fox jumps over the lazy dog " * 1000
        result, out = run(workdir, data, max_workers=4)
        assert result.pages > 20
        assert result.bytes_read == len(data)

        with PageFileReader.open(out) as reader:
            assert reader.page_count == result.pages
            assert reader.validate()
            pages = list(reader.pages())
        assert b"".join(p.replace(b"\n", b"") for p in pages) == data

    def test_slot_offsets(self, workdir):
        data = b"lorem ipsum dolor sit amet " * 400
        result, out = run(workdir, data)
        raw = out.read_bytes()
        with PageFileReader.open(out) as reader:
            for n in range(1, result.pages + 1):
                start = (n - 1) * DEFAULT.slot_size
                page = reader.get_page(n)
                assert raw[start:start + len(page)] == page
                trailer = reader.trailer(n)
                assert trailer.marker == DEFAULT.trailer_marker
                assert trailer.page_number == n

    def test_full_pages_line_layout(self, workdir):
        data = b"alpha beta gamma delta " * 500
        result, out = run(workdir, data)
        pages = PageFileReader.read(out)
        for page in pages[:-1]:
            lines = page.split(b"\n")
            assert lines.pop() == b""
            assert len(lines) == DEFAULT.lines_per_page
            for line in lines:
                assert len(line) <= DEFAULT.line_width - 1
                assert line.endswith(b" ")

    def test_small_geometry(self, workdir):
        data = b"aaaa bbbb cccc dddd eeee ffff gggg"
        result, out = run(workdir, data, SMALL)
        pages = PageFileReader.read(out, SMALL)
        assert pages[0] == b"aaaa \nbbbb \ncccc \n"
        assert b"".join(p.replace(b"\n", b"") for p in pages) == data
        assert len(pages) == result.pages

    def test_output_truncated(self, workdir):
        out = workdir / "output.txt"
        out.write_bytes(b"\xff" * 10_000)
        run(workdir, b"fresh")
        assert out.read_bytes() == b"fresh\x0c\x01\x00\x00\x00"

    def test_missing_input(self, workdir):
        with pytest.raises(PageReadError):
            paginate_file(workdir / "nope.txt", workdir / "output.txt")

    def test_unwritable_output(self, workdir):
        src = workdir / "input.txt"
        src.write_bytes(b"data")
        (workdir / "out").mkdir()
        with pytest.raises(PageWriteError):
            paginate_file(src, workdir / "out")


class TestWriteFailures:

    @pytest.fixture
    def reads(self, monkeypatch):
        calls = []

        def counting_read_chunk(source, offset, size):
            calls.append(offset)
            return read_chunk(source, offset, size)

        monkeypatch.setattr(paginator.driver, "read_chunk", counting_read_chunk)
        return calls

    def test_failed_write_stops_reading(self, workdir, monkeypatch, reads):
        def broken_pwrite(fd, data, offset):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr("paginator.writer.os.pwrite", broken_pwrite)
        with pytest.raises(PageWriteError) as excinfo:
            run(workdir, b"word " * 40_000, max_pending_writes=1)
        assert excinfo.value.page_number == 1
        assert len(reads) == 1

    def test_failure_partway_through(self, workdir, monkeypatch, reads):
        real_pwrite = os.pwrite

        def failing_from_page_three(fd, data, offset):
            if offset >= 2 * DEFAULT.slot_size:
                raise OSError(5, "Input/output error")
            return real_pwrite(fd, data, offset)

        monkeypatch.setattr("paginator.writer.os.pwrite", failing_from_page_three)
        with pytest.raises(PageWriteError) as excinfo:
            run(workdir, b"word " * 40_000, max_pending_writes=1)
        assert excinfo.value.page_number == 3
        assert len(reads) == 3

    def test_pending_writes_bounded(self, workdir, reads):
        data = b"word " * 40_000
        result, out = run(workdir, data, max_workers=2, max_pending_writes=4)
        assert result.pages == len(reads)
        with PageFileReader.open(out) as reader:
            assert reader.validate()
        assert result.bytes_read == len(data)

    def test_invalid_pending_limit(self, workdir):
        with pytest.raises(ValueError):
            run(workdir, b"abc", max_pending_writes=0)


class TestPageFileReader:

    def test_empty_page(self, workdir):
        _, out = run(workdir, b"")
        with PageFileReader.open(out) as reader:
            assert reader.page_count == 1
            assert reader.get_page(1) == b""
            assert reader.trailer(1).page_number == 1
            assert reader.validate()

    def test_page_out_of_range(self, workdir):
        _, out = run(workdir, b"abc")
        with PageFileReader.open(out) as reader:
            with pytest.raises(IndexError):
                reader.slot(2)
            with pytest.raises(IndexError):
                reader.slot(0)

    def test_corrupt_trailer(self, workdir):
        _, out = run(workdir, b"abc")
        raw = bytearray(out.read_bytes())
        raw[-4] = 7
        out.write_bytes(bytes(raw))
        with PageFileReader.open(out) as reader:
            assert not reader.validate()
            assert reader.trailer_offset(1) is None
            with pytest.raises(TrailerError):
                reader.get_page(1)

    def test_empty_file_is_invalid(self, workdir):
        out = workdir / "output.txt"
        out.write_bytes(b"")
        with PageFileReader.open(out) as reader:
            assert reader.page_count == 0
            assert not reader.validate()

    def test_trailer_pattern_inside_content(self, workdir):
        data = b"abc\x0c\x01\x00\x00\x00tail"
        _, out = run(workdir, data)
        with PageFileReader.open(out) as reader:
            assert reader.get_page(1) == data
            assert reader.validate()

    def test_corrupt_trailer_with_pattern_inside_content(self, workdir):
        data = b"abc\x0c\x01\x00\x00\x00tail"
        _, out = run(workdir, data)
        raw = bytearray(out.read_bytes())
        raw[len(data)] = 0
        out.write_bytes(bytes(raw))
        with PageFileReader.open(out) as reader:
            assert not reader.validate()
            with pytest.raises(TrailerError):
                reader.get_page(1)

    def test_trailer_followed_by_padding(self, workdir):
        _, out = run(workdir, b"word " * 400)
        with PageFileReader.open(out) as reader:
            assert reader.trailer_offset(1) == 1895
