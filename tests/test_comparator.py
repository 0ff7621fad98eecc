"""
Unit tests for ContentComparatorImpl (byte-exact duplicate verification).
"""
import pytest

from mirrorlink.core.comparator import ContentComparatorImpl
from mirrorlink.core.errors import FileUnreadable
from conftest import write_file


class TestSameContent:

    def test_identical_files(self, temp_dir):
        a = write_file(temp_dir / "a.bin", b"\xff" * 16)
        b = write_file(temp_dir / "b.bin", b"\xff" * 16)

        assert ContentComparatorImpl().same_content(str(a), str(b))

    def test_empty_files_are_equal(self, temp_dir):
        a = write_file(temp_dir / "a.bin", b"")
        b = write_file(temp_dir / "b.bin", b"")

        assert ContentComparatorImpl().same_content(str(a), str(b))

    def test_last_byte_differs_across_chunks(self, temp_dir):
        """The mismatch is found in the final chunk, not only in the first."""
        content = b"A" * 100
        a = write_file(temp_dir / "a.bin", content)
        b = write_file(temp_dir / "b.bin", content[:-1] + b"B")

        assert not ContentComparatorImpl(chunk_size=16).same_content(str(a), str(b))

    def test_prefix_is_not_equal(self, temp_dir):
        a = write_file(temp_dir / "a.bin", b"abc")
        b = write_file(temp_dir / "b.bin", b"abcd")

        assert not ContentComparatorImpl().same_content(str(a), str(b))

    def test_comparisons_counted(self, temp_dir):
        a = write_file(temp_dir / "a.bin", b"x")
        comparator = ContentComparatorImpl()
        comparator.same_content(str(a), str(a))
        comparator.same_content(str(a), str(a))

        assert comparator.comparisons == 2


class TestUnreadable:

    def test_missing_file(self, temp_dir):
        """Verification failures name the file and the comparison step."""
        a = write_file(temp_dir / "a.bin", b"x")
        missing = temp_dir / "gone.bin"

        with pytest.raises(FileUnreadable) as exc_info:
            ContentComparatorImpl().same_content(str(a), str(missing))

        assert exc_info.value.path == str(missing)
        assert exc_info.value.operation == "Comparing file"

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            ContentComparatorImpl(chunk_size=-1)
