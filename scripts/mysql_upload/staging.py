"""
Staging files for LOAD DATA LOCAL INFILE.

A staging file is created atomically with ``tempfile.mkstemp``, written
once, handed to the server by path and removed when the context exits,
whatever the outcome.
"""
import os
import tempfile
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional, Sequence, Union

from .config import ERR_TEMP_FILE, ERR_WRITE_FAILED, STAGING_PREFIX, STAGING_SUFFIX, VALUE_FORMAT
from .errors import StagingError
from .logger import get_logger


PayloadWriter = Callable[[BinaryIO], None]


@contextmanager
def staged_payload(
    write: PayloadWriter,
    temp_dir: Optional[Union[str, Path]] = None,
) -> Iterator[str]:
    """
    Write a payload to a fresh staging file and yield its path.

    Args:
        write: Callable that writes the payload into the open binary file
        temp_dir: Directory for the file (system temp dir when None)

    Raises:
        StagingError: File could not be created or fully written
    """
    logger = get_logger()

    try:
        fd, path = tempfile.mkstemp(
            prefix=STAGING_PREFIX,
            suffix=STAGING_SUFFIX,
            dir=str(temp_dir) if temp_dir is not None else None,
        )
    except OSError as e:
        raise StagingError(f"{ERR_TEMP_FILE}: {e}") from e

    try:
        try:
            with os.fdopen(fd, "wb") as fh:
                write(fh)
                fh.flush()
        except OSError as e:
            raise StagingError(f"{ERR_WRITE_FAILED} for {path}: {e}") from e

        logger.debug("Staging file written", path=path, size=os.path.getsize(path))
        yield path
    finally:
        with suppress(FileNotFoundError):
            os.unlink(path)
        logger.debug("Staging file removed", path=path)


def csv_writer(data: bytes, size: int) -> PayloadWriter:
    """Writer for the first ``size`` bytes of an opaque CSV buffer."""
    def _write(fh: BinaryIO):
        written = fh.write(data[:size])
        if written != size:
            raise StagingError(f"{ERR_WRITE_FAILED}: wrote {written} of {size} bytes")
    return _write


def format_value(value: float) -> str:
    """Format one value the way the numeric payload stores it."""
    return VALUE_FORMAT % value


def values_writer(values: Sequence[float], count: int) -> PayloadWriter:
    """Writer for one formatted value per line."""
    def _write(fh: BinaryIO):
        if count > len(values):
            raise StagingError(f"{ERR_WRITE_FAILED}: expected {count} values, got {len(values)}")
        for value in values[:count]:
            try:
                line = format_value(float(value))
            except (TypeError, ValueError, OverflowError) as e:
                raise StagingError(f"{ERR_WRITE_FAILED}: {value!r} is not numeric") from e
            fh.write(f"{line}\n".encode("ascii"))
    return _write
