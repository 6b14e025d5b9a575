"""PokeMath - OAuth session lifecycle for the PokeMath web app.

Serves the auth API routes (callback, signout, signin) that establish
and terminate a user's session before handing off to the app pages.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pokemath.config import Settings

__version__ = "0.1.0"


def _setup_logging() -> None:
    """Configure logging to both console and rotating file."""
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)
    log_file = log_dir / f"pokemath.{os.getpid()}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Per-request chatter; auth outcomes are logged by pokemath.auth.flow
    for name in ("uvicorn.access", "stytch", "aiohttp.access"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info("Logging configured. Log file: %s", log_file.absolute())


def _log_startup(settings: Settings) -> None:
    """Log which Auth Service and redirect targets this process uses."""
    if settings.dev.auth_mock:
        logging.warning("DEV__AUTH_MOCK is enabled: using the mock Auth Service")
    else:
        logging.info(
            "Auth Service: Stytch %s project %s",
            settings.stytch.environment,
            settings.stytch.project_id or "(unset)",
        )
    logging.info(
        "Redirects: landing %s, default next %s, local only %s",
        settings.app.landing_path,
        settings.app.default_next_path,
        settings.app.local_redirects_only,
    )
    logging.info("PokeMath %s listening on %s", __version__, settings.app.base_url)


def main() -> None:
    """Entry point for the PokeMath application."""
    from nicegui import app, ui

    from pokemath.api import router
    from pokemath.config import get_settings

    _setup_logging()

    app.include_router(router)

    settings = get_settings()
    _log_startup(settings)

    port = settings.app.port
    storage_secret = settings.app.storage_secret.get_secret_value()

    reload = os.environ.get("POKEMATH_RELOAD", "1") != "0"
    ui.run(
        host="0.0.0.0",  # nosec B104
        port=port,
        reload=reload,
        storage_secret=storage_secret,
        show=False,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
