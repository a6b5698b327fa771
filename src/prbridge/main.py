"""Process entry point for the GitHub PR bridge."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from .cli import parse_args
from .config import load_config
from .credentials import CredentialStore, mask_token
from .dispatcher import ToolDispatcher
from .errors import ConfigurationError
from .github_client import GitHubClient
from .server import serve
from .tools import ToolContext

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2


def configure_logging(level: str) -> None:
    """Send diagnostics to stderr; stdout carries protocol messages only."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Wire configuration, credentials, client and dispatcher, then serve.

    Returns:
        Process exit code: ``0`` once the client disconnects, ``2`` for configuration errors and
        ``1`` for anything unexpected.
    """
    try:
        args = parse_args(argv)
        configure_logging(args.log_level)
        load_dotenv()

        config = load_config(api_url=args.api_url, timeout_seconds=args.timeout)

        credentials = CredentialStore()
        if config.github_token:
            credentials.initialize(config.github_token)
            logger.info("Using token from environment", extra={"token": mask_token(config.github_token)})
        else:
            logger.info("No GITHUB_TOKEN set; waiting for set-credential")

        client = GitHubClient(config=config, credentials=credentials)
        dispatcher = ToolDispatcher(ToolContext(credentials=credentials, client=client))
        asyncio.run(serve(dispatcher))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIGURATION
    except KeyboardInterrupt:
        return EXIT_OK
    except Exception:  # noqa: BLE001
        logger.exception("Bridge terminated unexpectedly")
        return EXIT_UNEXPECTED

    return EXIT_OK


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
