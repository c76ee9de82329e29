"""Tests for staging files and numeric value formatting."""
import os

import pytest

from mysql_upload.errors import StagingError
from mysql_upload.staging import csv_writer, format_value, staged_payload, values_writer


def test_staged_file_exists_only_inside_context(tmp_path):
    with staged_payload(csv_writer(b"a,b\n", 4), tmp_path) as path:
        assert os.path.exists(path)
        with open(path, "rb") as fh:
            assert fh.read() == b"a,b\n"

    assert not os.path.exists(path)
    assert list(tmp_path.iterdir()) == []


def test_staged_file_removed_when_body_raises(tmp_path):
    with pytest.raises(RuntimeError):
        with staged_payload(csv_writer(b"x", 1), tmp_path) as path:
            raise RuntimeError("query failed")

    assert not os.path.exists(path)


def test_staged_file_removed_when_already_deleted(tmp_path):
    with staged_payload(csv_writer(b"x", 1), tmp_path) as path:
        os.unlink(path)

    assert list(tmp_path.iterdir()) == []


def test_concurrent_stagings_get_distinct_files(tmp_path):
    with staged_payload(csv_writer(b"1", 1), tmp_path) as first:
        with staged_payload(csv_writer(b"2", 1), tmp_path) as second:
            assert first != second
            assert len(list(tmp_path.iterdir())) == 2


def test_write_failure_removes_partial_file(tmp_path):
    with pytest.raises(StagingError):
        with staged_payload(values_writer([1.0, None], 2), tmp_path):
            pass

    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize("value,expected", [
    (0.0, "0"),
    (-0.0, "-0"),
    (1.5, "1.5"),
    (-2.0, "-2"),
    (3.333333333, "3.333333333"),
    (1e-300, "1e-300"),
    (1.5e300, "1.5e+300"),
    (123456789012.0, "1.23456789e+11"),
    (0.1 + 0.2, "0.3"),
])
def test_format_value(value, expected):
    assert format_value(value) == expected


@pytest.mark.parametrize("value", [
    0.0, -7.25, 1e-12, 6.02214076e23, -1.2345678901e200,
    2.2250738585072014e-308, 3.14159265358979, 1234567890.123,
])
def test_format_value_keeps_ten_significant_digits(value):
    parsed = float(format_value(value))

    assert parsed == pytest.approx(value, rel=5e-10, abs=0.0)


def test_values_writer_output(tmp_path):
    with staged_payload(values_writer([1.5, -2.0, 3.333333333], 3), tmp_path) as path:
        with open(path, "rb") as fh:
            assert fh.read() == b"1.5\n-2\n3.333333333\n"
