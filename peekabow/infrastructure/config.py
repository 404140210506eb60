"""
Token settings for peekabow.

Tokens are read from a TOML file, by default ~/.config/peekabow/config.toml
(override the path with $PEEKABOW_CONFIG):

    [token]
    github = "xxx..."
    zenhub = "yyy..."

$GITHUB_TOKEN and $ZENHUB_TOKEN, from the environment or a .env file, take
precedence over the file.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from peekabow.domain.models import Credentials
from peekabow.domain.exceptions import ConfigurationException

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/peekabow/config.toml")
EXAMPLE_CONFIG = '[token]\ngithub = "xxx..."\nzenhub = "yyy..."'


def config_path() -> Path:
    return Path(os.getenv("PEEKABOW_CONFIG") or DEFAULT_CONFIG_PATH).expanduser()


def _read_token_table(path: Path) -> dict:
    if not path.is_file():
        logger.info(f"No token file at {path}.")
        return {}

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationException(str(path), f"Token file is not valid TOML: {e}.") from e

    tokens = data.get("token", {})
    if not isinstance(tokens, dict):
        raise ConfigurationException(str(path), "[token] must be a table.")
    return tokens


def load_credentials(path: Optional[Union[str, Path]] = None) -> Credentials:
    """
    Loads the GitHub and ZenHub tokens.

    Raises:
        ConfigurationException: If either token ends up empty.
    """
    load_dotenv()

    path = Path(path).expanduser() if path else config_path()
    tokens = _read_token_table(path)

    github_token = os.getenv("GITHUB_TOKEN") or tokens.get("github") or ""
    zenhub_token = os.getenv("ZENHUB_TOKEN") or tokens.get("zenhub") or ""

    if not isinstance(github_token, str) or not isinstance(zenhub_token, str):
        raise ConfigurationException(str(path), "Tokens must be strings.")

    if not github_token or not zenhub_token:
        raise ConfigurationException(str(path))

    return Credentials(github_token=github_token, zenhub_token=zenhub_token)
