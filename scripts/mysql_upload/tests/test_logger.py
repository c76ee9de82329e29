"""Tests for structured log formatting and stream routing."""
from mysql_upload.logger import LogLevel, StructuredLogger


def test_errors_and_warnings_go_to_stderr(capsys):
    logger = StructuredLogger(show_timestamp=False)
    logger.error("write failed", path="/tmp/x.csv")
    logger.warning("slow")
    logger.info("connected")
    logger.success("inserted 2 rows")

    captured = capsys.readouterr()
    assert captured.err == (
        "[ERROR] mysql_uploader: write failed (path=/tmp/x.csv)\n"
        "[WARNING] mysql_uploader: slow\n"
    )
    assert captured.out == (
        "[INFO] mysql_uploader: connected\n"
        "[SUCCESS] mysql_uploader: inserted 2 rows\n"
    )


def test_debug_filtered_below_min_level(capsys):
    StructuredLogger(show_timestamp=False).debug("hidden")
    StructuredLogger(min_level=LogLevel.DEBUG, show_timestamp=False).debug("shown")

    assert capsys.readouterr().out == "[DEBUG] mysql_uploader: shown\n"


def test_every_public_method_is_documented():
    for name in ("debug", "info", "success", "warning", "error"):
        assert getattr(StructuredLogger, name).__doc__
