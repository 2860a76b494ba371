"""
Common utilities for Mapradar CLI.
"""

import logging
import os
from typing import Dict

logger = logging.getLogger(__name__)


def load_dotenv(path: str = ".env", populateEnv: bool = True, override: bool = False) -> Dict[str, str]:
    """
    Simple dotenv file loader.
    Read file line by line and put KEY=VALUE pairs into dictionary.
    Empty lines, comments and an optional `export ` prefix are skipped.

    Args:
        path: Path to .env file (default ".env"), missing file is not an error
        populateEnv: Whether to populate environment variables (default True)
        override: Whether to replace variables already set in environment (default False)

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    if not os.path.isfile(path):
        logger.debug(f"No dotenv file at {path}")
        return ret

    with open(path, "rt", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[len("export ") :]

            key, sep, value = line.partition("=")
            if not sep or not key.strip():
                continue
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            ret[key.strip()] = value

    if populateEnv:
        for k, v in ret.items():
            if override or k not in os.environ:
                os.environ[k] = v
    logger.debug(f"Loaded {len(ret)} variables from {path}")
    return ret
