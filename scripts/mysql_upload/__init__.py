"""
MySQL bulk uploader.

Stages CSV buffers or numeric columns in a temporary file and loads them
with a single LOAD DATA LOCAL INFILE statement.
"""

from .errors import ErrorKind, UploadResult
from .loader import (
    BulkLoader,
    MySQLBulkLoader,
    UnsupportedBulkLoader,
    get_loader,
    upload_csv_to_mysql,
    upload_to_mysql_from_doubles,
)

__version__ = "1.0.0"

__all__ = [
    "BulkLoader",
    "ErrorKind",
    "MySQLBulkLoader",
    "UnsupportedBulkLoader",
    "UploadResult",
    "get_loader",
    "upload_csv_to_mysql",
    "upload_to_mysql_from_doubles",
]
