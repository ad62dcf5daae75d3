# streamfinder/config.py

import configparser
import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

# --- Constants ---
TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
POSTER_BASE_URL = "https://image.tmdb.org/t/p/w600_and_h900_bestv2"
DEFAULT_LANGUAGE = "en-US"
DEFAULT_REGION = "US"
DEFAULT_TIMEOUT_SECONDS = 30.0
INLINE_RESULTS_PER_TYPE = 10
MAX_INLINE_RESULTS = 20
CLI_PAGE_SIZE = 20
CONFIG_FILE = "config.ini"

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)
logging.getLogger("httpx").setLevel(logging.WARNING)


@dataclass(frozen=True)
class AppConfig:
    """Runtime settings resolved from the environment and config.ini."""

    tmdb_token: str
    telegram_token: str | None = None
    language: str = DEFAULT_LANGUAGE
    region: str = DEFAULT_REGION
    timeout: float = DEFAULT_TIMEOUT_SECONDS


def get_configuration(
    require_telegram: bool = True, config_path: str = CONFIG_FILE
) -> AppConfig:
    """
    Reads the TMDB and Telegram credentials plus optional TMDB settings.

    Credentials come from the environment (a local .env file is loaded first).
    A config.ini file is optional; its [tmdb] section can override language,
    region and timeout, and [telegram] bot_token is used when TELEGRAM_TOKEN
    is not set.
    """
    load_dotenv()

    parser = configparser.ConfigParser()
    if os.path.exists(config_path):
        with open(config_path, encoding="utf-8") as f:
            parser.read_file(f)
        logger.info(f"[CONFIG] Loaded settings from '{config_path}'.")

    tmdb_token = os.environ.get("TMDB_TOKEN", "").strip()
    if not tmdb_token:
        logger.critical("TMDB_TOKEN is not set. Export it or add it to your .env file.")
        sys.exit(1)

    telegram_token = os.environ.get("TELEGRAM_TOKEN", "").strip() or parser.get(
        "telegram", "bot_token", fallback=""
    ).strip()
    if telegram_token == "PLACE_TOKEN_HERE":
        telegram_token = ""
    if require_telegram and not telegram_token:
        logger.critical(
            "TELEGRAM_TOKEN is not set. It is required to run the inline bot."
        )
        sys.exit(1)

    return AppConfig(
        tmdb_token=tmdb_token,
        telegram_token=telegram_token or None,
        **_load_tmdb_settings(parser),
    )


def _load_tmdb_settings(config: configparser.ConfigParser) -> dict:
    """Reads the optional [tmdb] section, falling back to defaults."""
    language = config.get("tmdb", "language", fallback=DEFAULT_LANGUAGE).strip()
    region = config.get("tmdb", "region", fallback=DEFAULT_REGION).strip().upper()

    try:
        timeout = config.getfloat(
            "tmdb", "timeout", fallback=DEFAULT_TIMEOUT_SECONDS
        )
    except ValueError as e:
        logger.critical(f"Invalid timeout in [tmdb] section: {e}")
        sys.exit(1)
    if timeout <= 0:
        logger.critical("The [tmdb] timeout must be a positive number of seconds.")
        sys.exit(1)

    if config.has_section("tmdb"):
        logger.info(
            f"[CONFIG] TMDB settings: language={language}, region={region}, timeout={timeout}s"
        )

    return {
        "language": language or DEFAULT_LANGUAGE,
        "region": region or DEFAULT_REGION,
        "timeout": timeout,
    }
