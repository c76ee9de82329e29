"""
Bulk loader for MySQL using LOAD DATA LOCAL INFILE.

Each upload runs STAGE_FILE -> CONNECT -> QUERY -> CLEANUP. Any failure
skips straight to CLEANUP; the staging file is always deleted and an
opened connection is always closed before the call returns. Failures are
logged to stderr and returned as a failed UploadResult, never raised.

Table and column names are interpolated into the statement as given,
inside backticks and without escaping. Only pass trusted identifiers.
"""
from abc import ABC, abstractmethod
from contextlib import closing
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

import mysql.connector
from mysql.connector.conversion import MySQLConverter

from .config import (
    DEFAULT_PORT,
    ERR_CONNECTION_FAILED,
    ERR_INVALID_ARGS,
    ERR_QUERY_FAILED,
    ERR_UNSUPPORTED,
    MSG_CONNECTING_DB,
    MSG_LOADING,
    MSG_STAGING,
    UploadConfig,
    upload_enabled,
)
from .errors import (
    ArgumentError,
    DatabaseConnectionError,
    QueryError,
    UnsupportedError,
    UploadError,
    UploadResult,
)
from .logger import get_logger
from .metrics import MetricsCollector
from .staging import PayloadWriter, csv_writer, staged_payload, values_writer


CsvPayload = Union[bytes, bytearray, memoryview, str]


def build_csv_statement(escaped_path: str, table: str) -> str:
    return (
        f"LOAD DATA LOCAL INFILE '{escaped_path}' INTO TABLE `{table}` "
        "FIELDS TERMINATED BY ',' ENCLOSED BY '\"' "
        "LINES TERMINATED BY '\\n' IGNORE 1 ROWS;"
    )


def build_values_statement(escaped_path: str, table: str, column: str) -> str:
    return (
        f"LOAD DATA LOCAL INFILE '{escaped_path}' INTO TABLE `{table}` "
        "FIELDS TERMINATED BY ',' LINES TERMINATED BY '\\n' "
        f"(`{column}`);"
    )


def _require(**fields):
    """Raise ArgumentError naming every empty required field."""
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ArgumentError(f"{ERR_INVALID_ARGS}: empty {', '.join(missing)}")


class BulkLoader(ABC):
    """Interface shared by the working loader and the unsupported stub."""

    @abstractmethod
    def upload_csv(
        self,
        host: str,
        user: str,
        password: Optional[str],
        database: str,
        table: str,
        csv_data: Optional[CsvPayload],
        csv_size: Optional[int] = None,
    ) -> UploadResult:
        """Load a CSV buffer (header row skipped) into ``table``."""

    @abstractmethod
    def upload_doubles(
        self,
        host: str,
        user: str,
        password: Optional[str],
        database: str,
        table: str,
        column: str,
        values: Optional[Sequence[float]],
        count: Optional[int] = None,
    ) -> UploadResult:
        """Load one value per row into ``table``.``column``."""


class UnsupportedBulkLoader(BulkLoader):
    """Stand-in used when MySQL upload support is disabled."""

    def __init__(self):
        self.logger = get_logger()

    def _unsupported(self) -> UploadResult:
        error = UnsupportedError(ERR_UNSUPPORTED)
        self.logger.error(str(error))
        return UploadResult.failure(error)

    def upload_csv(
        self,
        host: str,
        user: str,
        password: Optional[str],
        database: str,
        table: str,
        csv_data: Optional[CsvPayload],
        csv_size: Optional[int] = None,
    ) -> UploadResult:
        return self._unsupported()

    def upload_doubles(
        self,
        host: str,
        user: str,
        password: Optional[str],
        database: str,
        table: str,
        column: str,
        values: Optional[Sequence[float]],
        count: Optional[int] = None,
    ) -> UploadResult:
        return self._unsupported()


class MySQLBulkLoader(BulkLoader):
    """
    Loads payloads through mysql-connector with local infile enabled.

    Args:
        port: Server port
        temp_dir: Directory for staging files (system temp dir when None)
        metrics: Collector for phase timings and row counts
        connect: Connection factory, ``mysql.connector.connect`` by default
    """

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        temp_dir: Optional[Union[str, Path]] = None,
        metrics: Optional[MetricsCollector] = None,
        connect: Optional[Callable] = None,
    ):
        self.port = port
        self.temp_dir = temp_dir
        self.metrics = metrics or MetricsCollector()
        self.connect = connect or mysql.connector.connect
        self.logger = get_logger()

    def upload_csv(
        self,
        host: str,
        user: str,
        password: Optional[str],
        database: str,
        table: str,
        csv_data: Optional[CsvPayload],
        csv_size: Optional[int] = None,
    ) -> UploadResult:
        try:
            _require(host=host, user=user, database=database, table=table)
            if csv_data is None and (csv_size or 0) > 0:
                raise ArgumentError(f"{ERR_INVALID_ARGS}: no CSV buffer for {csv_size} bytes")
            if csv_size is not None and csv_size < 0:
                raise ArgumentError(f"{ERR_INVALID_ARGS}: negative size {csv_size}")

            if isinstance(csv_data, str):
                csv_data = csv_data.encode("utf-8")
            data = bytes(csv_data or b"")
            size = len(data) if csv_size is None else csv_size

            return self._load(
                host, user, password, database, table,
                writer=csv_writer(data, size),
                statement=lambda path: build_csv_statement(path, table),
            )
        except UploadError as e:
            return self._fail(e)

    def upload_doubles(
        self,
        host: str,
        user: str,
        password: Optional[str],
        database: str,
        table: str,
        column: str,
        values: Optional[Sequence[float]],
        count: Optional[int] = None,
    ) -> UploadResult:
        try:
            _require(host=host, user=user, database=database, table=table, column=column)
            if values is None and (count or 0) > 0:
                raise ArgumentError(f"{ERR_INVALID_ARGS}: no values for count {count}")
            if count is not None and count < 0:
                raise ArgumentError(f"{ERR_INVALID_ARGS}: negative count {count}")

            values = values if values is not None else []
            n = len(values) if count is None else count

            return self._load(
                host, user, password, database, table,
                writer=values_writer(values, n),
                statement=lambda path: build_values_statement(path, table, column),
            )
        except UploadError as e:
            return self._fail(e)

    def _load(
        self,
        host: str,
        user: str,
        password: Optional[str],
        database: str,
        table: str,
        writer: PayloadWriter,
        statement: Callable[[str], str],
    ) -> UploadResult:
        self.logger.debug(MSG_STAGING, table=table)
        self.metrics.start_timer("stage")
        with staged_payload(writer, self.temp_dir) as path:
            self.metrics.stop_timer("stage")

            conn = self._open_connection(host, user, password, database)
            with closing(conn):
                query = statement(MySQLConverter().escape(path))
                rows = self._execute(conn, query)

        self.metrics.record_count("rows_loaded", rows)
        self.logger.success(f"inserted {rows} rows", table=table)
        return UploadResult.success(rows)

    def _open_connection(self, host, user, password, database):
        self.logger.debug(MSG_CONNECTING_DB, host=host, port=self.port, database=database)
        self.metrics.start_timer("connect")
        try:
            return self.connect(
                host=host,
                port=self.port,
                user=user,
                password=password or "",
                database=database,
                allow_local_infile=True,
                autocommit=True,
            )
        except mysql.connector.Error as e:
            raise DatabaseConnectionError(f"{ERR_CONNECTION_FAILED}: {e}") from e
        finally:
            self.metrics.stop_timer("connect")

    def _execute(self, conn, query: str) -> int:
        self.logger.debug(MSG_LOADING, query=query)
        self.metrics.start_timer("query")
        try:
            with closing(conn.cursor()) as cursor:
                cursor.execute(query)
                return cursor.rowcount
        except mysql.connector.Error as e:
            raise QueryError(f"{ERR_QUERY_FAILED}: {e}") from e
        finally:
            self.metrics.stop_timer("query")

    def _fail(self, error: UploadError) -> UploadResult:
        self.metrics.record_count("uploads_failed")
        self.logger.error(str(error), kind=error.kind.value)
        return UploadResult.failure(error)


def get_loader(
    config: Optional[UploadConfig] = None,
    metrics: Optional[MetricsCollector] = None,
) -> BulkLoader:
    """
    Select the loader for the current capability setting.

    Without a config the MYSQL_UPLOAD environment flag decides.
    """
    enabled = config.mysql_upload if config is not None else upload_enabled()
    if not enabled:
        return UnsupportedBulkLoader()
    if config is None:
        return MySQLBulkLoader(metrics=metrics)
    return MySQLBulkLoader(port=config.port, temp_dir=config.temp_dir, metrics=metrics)


def upload_csv_to_mysql(
    host: str,
    user: str,
    password: Optional[str],
    database: str,
    table: str,
    csv_data: Optional[CsvPayload],
    csv_size: Optional[int] = None,
    loader: Optional[BulkLoader] = None,
) -> UploadResult:
    """
    Bulk-load a CSV buffer with a header row into ``table``.

    Returns:
        UploadResult carrying the affected-row count on success
    """
    loader = loader or get_loader()
    return loader.upload_csv(host, user, password, database, table, csv_data, csv_size)


def upload_to_mysql_from_doubles(
    host: str,
    user: str,
    password: Optional[str],
    database: str,
    table: str,
    column: str,
    values: Optional[Sequence[float]],
    count: Optional[int] = None,
    loader: Optional[BulkLoader] = None,
) -> UploadResult:
    """Bulk-load a sequence of floats into a single column (legacy path)."""
    loader = loader or get_loader()
    return loader.upload_doubles(host, user, password, database, table, column, values, count)
