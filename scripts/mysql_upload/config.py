"""
Configuration management for the MySQL bulk uploader.
Handles environment variables, constants, and runtime parameters.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv


DEFAULT_PORT = 3306

# Staging file naming
STAGING_PREFIX = "nvcsv_mysql_"
STAGING_SUFFIX = ".csv"

# Numeric payload line format (general format, 10 significant digits)
VALUE_FORMAT = "%0.10g"

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class UploadConfig:
    """Connection parameters and runtime settings for an upload."""

    host: str
    user: str
    database: str
    table: str
    password: str = ""
    port: int = DEFAULT_PORT

    # Capability gate: when False every upload reports unsupported
    mysql_upload: bool = True

    # Staging directory (system temp dir when None)
    temp_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "UploadConfig":
        """
        Load configuration from environment variables.

        Args:
            env_file: Optional .env file; defaults to ./.env when present.
                Real environment variables take precedence over the file.
        """
        env_path = env_file or Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)

        host = os.getenv("MYSQL_HOST")
        user = os.getenv("MYSQL_USER")
        database = os.getenv("MYSQL_DB")
        table = os.getenv("MYSQL_TABLE")

        if not all([host, user, database, table]):
            missing = []
            if not host:
                missing.append("MYSQL_HOST")
            if not user:
                missing.append("MYSQL_USER")
            if not database:
                missing.append("MYSQL_DB")
            if not table:
                missing.append("MYSQL_TABLE")
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

        port_str = os.getenv("MYSQL_PORT", str(DEFAULT_PORT))
        try:
            port = int(port_str)
        except ValueError as exc:
            raise ValueError(f"Invalid port in MYSQL_PORT: {port_str!r}") from exc

        temp_dir = os.getenv("MYSQL_UPLOAD_TMPDIR")

        return cls(
            host=host,
            user=user,
            database=database,
            table=table,
            password=os.getenv("MYSQL_PASS", ""),
            port=port,
            mysql_upload=upload_enabled(),
            temp_dir=Path(temp_dir) if temp_dir else None,
        )


def upload_enabled() -> bool:
    """Check the MYSQL_UPLOAD capability flag (enabled unless explicitly off)."""
    return os.getenv("MYSQL_UPLOAD", "1").strip().lower() not in _FALSE_VALUES


# Message constants
MSG_STAGING = "Staging payload"
MSG_CONNECTING_DB = "Establishing database connection"
MSG_LOADING = "Issuing LOAD DATA LOCAL INFILE"
MSG_UPLOAD_COMPLETE = "Upload completed successfully"
MSG_CLEANUP = "Cleaning up resources"

# Error messages
ERR_INVALID_ARGS = "invalid args"
ERR_TEMP_FILE = "failed to create temp file"
ERR_WRITE_FAILED = "write failed"
ERR_CONNECTION_FAILED = "mysql connect failed"
ERR_QUERY_FAILED = "mysql query failed"
ERR_UNSUPPORTED = (
    "compiled without MYSQL_UPLOAD support. "
    "Set MYSQL_UPLOAD=1 to enable uploads."
)
