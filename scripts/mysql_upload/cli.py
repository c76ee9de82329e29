#!/usr/bin/env python3
"""
Command line driver for the MySQL bulk uploader.

Connection parameters come from the environment (or a .env file):

    MYSQL_HOST   - MySQL host
    MYSQL_USER   - MySQL username
    MYSQL_PASS   - MySQL password (optional)
    MYSQL_DB     - Database name
    MYSQL_TABLE  - Table name

Examples:

    mysql-upload csv products.csv
    mysql-upload values readings.txt --column reading
"""
import sys
import argparse
from pathlib import Path
from typing import List, Optional

from mysql_upload.config import UploadConfig
from mysql_upload.loader import get_loader
from mysql_upload.logger import StructuredLogger, LogLevel, get_logger, set_logger
from mysql_upload.metrics import MetricsCollector


def _load_config(args) -> Optional[UploadConfig]:
    logger = get_logger()
    try:
        return UploadConfig.from_env(env_file=Path(args.env_file) if args.env_file else None)
    except ValueError as e:
        logger.error(str(e))
        return None


def _read_file(path: Path) -> Optional[bytes]:
    logger = get_logger()
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.error("Cannot read input file", file=str(path), error=e.strerror or str(e))
        return None

    if not data:
        logger.error("File is empty", file=str(path))
        return None

    logger.info(f"Read {len(data)} bytes", file=str(path))
    return data


def parse_values(text: str) -> List[float]:
    """Parse one float per non-blank line."""
    values = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            values.append(float(line))
        except ValueError:
            raise ValueError(f"Line {lineno}: not a number: {line!r}") from None
    return values


def csv_command(args) -> int:
    """Upload a CSV file (with header row)."""
    logger = get_logger()

    config = _load_config(args)
    if config is None:
        return 1

    data = _read_file(Path(args.file))
    if data is None:
        return 1

    logger.info(
        "Uploading to MySQL",
        host=config.host,
        user=config.user,
        db=config.database,
        table=config.table,
    )

    metrics = MetricsCollector()
    loader = get_loader(config, metrics)
    result = loader.upload_csv(
        config.host, config.user, config.password,
        config.database, config.table, data, len(data),
    )
    return _finish(args, result, metrics)


def values_command(args) -> int:
    """Upload one numeric value per line into a single column."""
    logger = get_logger()

    config = _load_config(args)
    if config is None:
        return 1

    data = _read_file(Path(args.file))
    if data is None:
        return 1

    try:
        values = parse_values(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        logger.error("Invalid values file", file=args.file, error=str(e))
        return 1

    logger.info(
        "Uploading values to MySQL",
        host=config.host,
        db=config.database,
        table=config.table,
        column=args.column,
        count=len(values),
    )

    metrics = MetricsCollector()
    loader = get_loader(config, metrics)
    result = loader.upload_doubles(
        config.host, config.user, config.password,
        config.database, config.table, args.column, values, len(values),
    )
    return _finish(args, result, metrics)


def _finish(args, result, metrics: MetricsCollector) -> int:
    logger = get_logger()
    if args.verbose:
        print(metrics.format_summary())

    if result:
        logger.success("Upload successful!", rows=result.rows)
        return 0

    logger.error("Upload failed!", reason=result.error.value)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mysql-upload",
        description="Bulk-load files into MySQL with LOAD DATA LOCAL INFILE",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging and print upload metrics'
    )
    parser.add_argument(
        '--env-file',
        type=str,
        help='Path to a .env file (default: ./.env when present)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    csv_parser = subparsers.add_parser('csv', help='Upload a CSV file with a header row')
    csv_parser.add_argument('file', help='CSV file to upload')

    values_parser = subparsers.add_parser('values', help='Upload one number per line into a column')
    values_parser.add_argument('file', help='Text file with one value per line')
    values_parser.add_argument(
        '--column',
        type=str,
        required=True,
        help='Target column name'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = LogLevel.DEBUG if args.verbose else LogLevel.INFO
    set_logger(StructuredLogger(min_level=log_level))

    try:
        if args.command == 'csv':
            return csv_command(args)
        elif args.command == 'values':
            return values_command(args)
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        get_logger().warning("Operation cancelled by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
