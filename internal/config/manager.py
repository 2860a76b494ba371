"""
Configuration management for Mapradar CLI.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "mapradar.toml"
API_KEY_ENV = "MAPRADAR_API_KEY"


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholder with actual value.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in configuration values.

    Strings get placeholders replaced, dicts and lists are processed
    recursively, everything else is returned unchanged.
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Loads Mapradar CLI configuration from TOML files, dood!

    Configuration is optional: without any file all getters return empty
    sections and the CLI relies on flags and environment variables.
    """

    def __init__(
        self,
        configPath: Optional[str] = None,
        configDirs: Optional[List[str]] = None,
        dotEnvFile: Optional[str] = ".env",
    ):
        """Initialize ConfigManager.

        Args:
            configPath: Main TOML file. When None, DEFAULT_CONFIG_PATH is used if it exists.
                An explicitly passed path must exist.
            configDirs: Directories scanned recursively for additional .toml files
            dotEnvFile: dotenv file loaded into environment before substitution (None to skip)
        """
        self.config_path = configPath
        self.config_dirs = configDirs or []
        if dotEnvFile:
            utils.load_dotenv(path=dotEnvFile)
        self.config: Dict[str, Any] = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory, dood!"""
        dirPath = Path(directory)

        if not dirPath.is_dir():
            logger.warning(f"Config directory {directory} does not exist or is not a directory, skipping")
            return []

        tomlFiles = [tomlFile for tomlFile in dirPath.rglob("*.toml") if tomlFile.is_file()]
        return sorted(tomlFiles)  # Sort for consistent ordering

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries, newConfig wins."""
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """Load main config file and merge config directories on top of it.

        Exits with status 1 if an explicitly passed config file is missing
        or can't be parsed.
        """
        config: Dict[str, Any] = {}

        configFile = Path(self.config_path or DEFAULT_CONFIG_PATH)
        if configFile.exists():
            try:
                with open(configFile, "rb") as f:
                    config = tomli.load(f)
                logger.info(f"Loaded main config from {configFile}")
            except (OSError, tomli.TOMLDecodeError) as e:
                logger.error(f"Failed to load configuration {configFile}: {e}")
                sys.exit(1)
        elif self.config_path is not None:
            logger.error(f"Configuration file {self.config_path} not found!")
            sys.exit(1)
        else:
            logger.debug(f"No {DEFAULT_CONFIG_PATH} found, using defaults")

        for configDir in self.config_dirs:
            tomlFiles = self._findTomlFilesRecursive(configDir)
            logger.debug(f"Found {len(tomlFiles)} .toml files in {configDir}")

            for tomlFile in tomlFiles:
                try:
                    with open(tomlFile, "rb") as f:
                        dirConfig = tomli.load(f)
                    config = self._mergeConfigs(config, dirConfig)
                    logger.debug(f"Merged config from {tomlFile}")
                except (OSError, tomli.TOMLDecodeError) as e:
                    # Continue with other files instead of exiting
                    logger.error(f"Failed to load config file {tomlFile}: {e}")

        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getMapradarConfig(self) -> Dict[str, Any]:
        """
        Get Mapradar API configuration

        Returns:
            Dict with Mapradar settings (api-key, base-url, timeout)
        """
        return self.get("mapradar", {})

    def getApiKey(self, cliValue: Optional[str] = None) -> Optional[str]:
        """Resolve API key: command line, then environment, then config file."""
        for candidate in (cliValue, os.getenv(API_KEY_ENV), self.getMapradarConfig().get("api-key")):
            # Unresolved ${VAR} placeholders don't count
            if candidate and "${" not in str(candidate):
                return str(candidate)
        return None
