"""Command line interface for pdrive."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import httpx
from rich.logging import RichHandler

from . import __version__
from .cli_progress import UploadProgressDisplay, console, render_configuration_summary
from .config import Config, apply_env_file, default_config_path, default_env_file, load_config
from .exceptions import ConfigError, PdriveError
from .orchestrator import UploadOrchestrator

logger = logging.getLogger(__name__)


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug or --log-level is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if silent or (not debug and not log_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        env_level = os.getenv("LOG_LEVEL")
        fallback = getattr(logging, (env_level or "INFO").upper(), logging.INFO)
        level = getattr(logging, log_level.upper(), fallback)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
        console=console,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return logging.getLevelName(level)


def _validate_config(config: Config, config_path: Path) -> None:
    defaults = Config()
    if config.api_url == defaults.api_url:
        raise ConfigError(f"api_url is not configured (edit {config_path} or set PDRIVE_API_URL)")
    if config.token == defaults.token:
        raise ConfigError(f"token is not configured (edit {config_path} or set PDRIVE_TOKEN)")


def _mask_token(token: str) -> str:
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"


async def _run_upload(
    source: Path,
    config: Config,
    display: UploadProgressDisplay,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    async with UploadOrchestrator(config, transport=transport) as orchestrator:
        display.attach(orchestrator.events)
        result = await orchestrator.upload(source)

    logger.info(
        "Uploaded %s: parts=%d multipart=%s url=%s",
        result.filename,
        result.parts,
        result.multipart,
        result.url,
    )
    return result.url


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdrive",
        description="Upload a file to the configured object-storage API and print its URL.",
    )
    parser.add_argument("file", type=Path, help="Path of the file to upload")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file path (default: per-user pdrive settings location)",
    )
    parser.add_argument(
        "-j",
        "--concurrency",
        type=int,
        default=None,
        help="Parallel part uploads for large files (default from config)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors and the URL")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"pdrive {__version__}",
    )
    return parser


def run_cli(
    argv: Optional[Sequence[str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or default_env_file()
    if used_env_file is not None:
        try:
            apply_env_file(Path(used_env_file))
        except ConfigError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    source = Path(args.file).expanduser()
    if not source.exists():
        print(f"ERROR: file does not exist: {source}", file=sys.stderr)
        return 1
    if not source.is_file():
        print(f"ERROR: not a regular file: {source}", file=sys.stderr)
        return 1

    config_path = args.config or default_config_path()
    try:
        config = load_config(config_path).with_concurrency(args.concurrency)
        _validate_config(config, config_path)
    except PdriveError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if not args.silent:
        render_configuration_summary(
            {
                "File": str(source),
                "API": config.api_url,
                "Token": _mask_token(config.token),
                "Concurrency": config.concurrent_requests,
                "Config File": str(config_path),
                "Env File": str(used_env_file) if used_env_file else "-",
                "Logging": effective_log_mode,
            }
        )

    display = UploadProgressDisplay(source, quiet=args.silent)
    try:
        url = asyncio.run(_run_upload(source, config, display, transport=transport))
    except (PdriveError, OSError, httpx.HTTPError) as exc:
        display.complete(success=False)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        display.complete(success=False, error="cancelled")
        print("Cancelled.", file=sys.stderr)
        return 130

    display.complete(success=True)
    print(url)
    return 0


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
