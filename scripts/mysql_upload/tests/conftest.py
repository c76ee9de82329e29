"""Shared fixtures: fake mysql-connector connections and a quiet logger."""
import re
from pathlib import Path
from typing import List, Optional
from unittest.mock import MagicMock

import pytest

from mysql_upload.logger import LogLevel, StructuredLogger, set_logger
from mysql_upload.loader import MySQLBulkLoader


INFILE_RE = re.compile(r"LOAD DATA LOCAL INFILE '([^']+)'")


class FakeCursor:
    def __init__(self, connection: "FakeConnection"):
        self.connection = connection
        self.rowcount = -1
        self.closed = False

    def execute(self, query: str):
        self.connection.queries.append(query)
        path = Path(INFILE_RE.search(query).group(1))
        # Capture what the server would have read
        self.connection.staged_paths.append(path)
        self.connection.staged_contents.append(path.read_bytes())
        if self.connection.query_error is not None:
            raise self.connection.query_error
        self.rowcount = self.connection.rowcount

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, rowcount: int = 0, query_error: Optional[Exception] = None):
        self.rowcount = rowcount
        self.query_error = query_error
        self.queries: List[str] = []
        self.staged_paths: List[Path] = []
        self.staged_contents: List[bytes] = []
        self.closed = False
        self.connect_kwargs = {}

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def quiet_logger():
    set_logger(StructuredLogger(min_level=LogLevel.INFO, show_timestamp=False))
    yield
    set_logger(None)


@pytest.fixture
def fake_connection():
    return FakeConnection(rowcount=2)


@pytest.fixture
def connect(fake_connection):
    def _connect(**kwargs):
        fake_connection.connect_kwargs = kwargs
        return fake_connection
    return MagicMock(side_effect=_connect)


@pytest.fixture
def loader(tmp_path, connect):
    return MySQLBulkLoader(temp_dir=tmp_path, connect=connect)
