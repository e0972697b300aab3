from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from .config import Config, default_config, load_config
from .errors import HasherError
from .logging_ import setup_logging
from .manifest import create_manifest
from .validate import create_validation

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_INVALID = 3

USAGE = """
Usage :
    Create hash file:
        hasher -h <manifestFile> <directory> [<validationFile>]

    Validate hash file:
        hasher -v <manifestFile> <directory> [<validationFile>]

    Options:
        --config PATH      YAML config file
        --log-level LEVEL  DEBUG, INFO, WARNING or ERROR
        --help             show this message
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hasher",
        description="Fingerprint a directory tree and validate it later",
        usage=USAGE,
        add_help=False,
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-h", dest="mode", action="store_const", const="build", help="create hash file"
    )
    mode.add_argument(
        "-v",
        dest="mode",
        action="store_const",
        const="validate",
        help="validate hash file",
    )
    parser.add_argument("--help", action="help", help="show this message")
    parser.add_argument("--config", default=None, help="path to config file")
    parser.add_argument("--log-level", default=None, help="override log level")
    parser.add_argument("paths", nargs="*", help="manifest, directory, validation file")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def run(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config) if args.config else default_config()
    except (OSError, ValueError, TypeError, yaml.YAMLError) as exc:
        sys.stderr.write(f"config error: {exc}\n")
        return EXIT_FATAL

    setup_logging(
        args.log_level or config.log_level,
        log_dir=config.logging.dir,
        log_file=config.logging.file_name,
        max_mb=config.logging.max_mb,
        backup_count=config.logging.backup_count,
        use_json=config.logging.json,
        to_console=config.logging.to_console,
    )

    paths = list(args.paths)
    if len(paths) == 1 or len(paths) > 3:
        sys.stderr.write(USAGE)
        logger.error("expected 2 or 3 paths, got %d", len(paths))
        return EXIT_USAGE

    mode = args.mode or "validate"
    manifest_path, directory, validation_path = _resolve_paths(paths, config)
    if args.mode is None or not paths:
        logger.info(USAGE)
        flag = "-h" if mode == "build" else "-v"
        logger.info(
            "defaulting to 'hasher %s %s %s %s'",
            flag,
            manifest_path,
            directory,
            validation_path,
        )

    try:
        if mode == "build":
            create_manifest(
                manifest_path,
                directory,
                validation_path,
                algorithm=config.hashing.algorithm,
                chunk_size=config.hashing.chunk_size,
                queue_size=config.walk.queue_size,
            )
            return EXIT_OK

        report = create_validation(
            manifest_path,
            directory,
            validation_path,
            chunk_size=config.hashing.chunk_size,
            queue_size=config.walk.queue_size,
        )
    except HasherError as exc:
        logger.error("%s", exc)
        return EXIT_FATAL

    if not report.all_valid and config.validation.fail_on_invalid:
        return EXIT_INVALID
    return EXIT_OK


def _resolve_paths(paths: List[str], config: Config) -> tuple[str, str, str]:
    manifest_path = str(config.defaults.manifest_file)
    directory = str(config.defaults.directory)
    validation_path = str(config.defaults.validation_file)
    if paths:
        manifest_path, directory = paths[0], paths[1]
    if len(paths) > 2:
        validation_path = paths[2]
    return manifest_path, directory, validation_path


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
