"""
Tests for ConvertUtils formatting helpers.
"""
import sys
from datetime import datetime, timedelta, timezone

import pytest

from mirrorlink.utils.convert_utils import ConvertUtils


class TestBytesToHuman:

    @pytest.mark.parametrize("size, expected", [
        (0, "0.00B"),
        (1023, "1023.00B"),
        (1024, "1.00KB"),
        (1536, "1.50KB"),
        (1024 ** 2, "1.00MB"),
        (-5, "0B"),
    ])
    def test_values(self, size, expected):
        assert ConvertUtils.bytes_to_human(size) == expected


class TestDatetimeToRfc3339:

    def test_utc(self):
        value = datetime(2010, 5, 1, 12, 15, 2, tzinfo=timezone.utc)
        assert ConvertUtils.datetime_to_rfc3339(value) == "2010-05-01T12:15:02Z"

    def test_offset_converted_to_utc(self):
        value = datetime(2010, 5, 1, 14, 15, 2, tzinfo=timezone(timedelta(hours=2)))
        assert ConvertUtils.datetime_to_rfc3339(value) == "2010-05-01T12:15:02Z"

    def test_naive_taken_as_utc(self):
        assert ConvertUtils.datetime_to_rfc3339(datetime(2010, 5, 1)) == "2010-05-01T00:00:00Z"


class TestThroughput:

    def test_mbps(self):
        assert ConvertUtils.mbps(1_000_000, 2.0) == pytest.approx(4.0)

    def test_zero_time(self):
        assert ConvertUtils.mbps(1_000_000, 0) == 0.0


class TestFsNameToText:

    def test_valid_name_unchanged(self):
        assert ConvertUtils.fs_name_to_text("ünï/a b.txt") == "ünï/a b.txt"

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX filesystem names are bytes")
    def test_undecodable_bytes_replaced(self):
        name = b"bad\xff.bin".decode("utf-8", "surrogateescape")
        assert ConvertUtils.fs_name_to_text(name) == "bad�.bin"
