"""
Configuration loader for kmsctl.

Settings are layered: built-in defaults, then the JSON config file,
then environment variables. Command-line flags are applied last by
the CLI itself.
"""
import os
import json
from pathlib import Path
from typing import Dict, Any
from colorama import Fore, Style

from .logger import get_logger

log = get_logger(__name__)


# Default configuration. Keys here are the only ones accepted by --config.
DEFAULT_CONFIG: Dict[str, Any] = {
    "region": "eu-west-1",
    "profile": "",
    "credentials": "~/.aws/credentials",
    "access_key": "",
    "secret_key": "",
    "session_token": "",
    "bucket": "",
    "kms": "",
    "output_dir": "./secrets",
    "format": "text",
    "editor": "vim",
}

# Environment variables mapped onto config keys. Where several variables
# feed the same key, the first one set wins.
ENV_OVERRIDES: Dict[str, tuple] = {
    "region": ("AWS_DEFAULT_REGION", "AWS_REGION"),
    "profile": ("AWS_DEFAULT_PROFILE", "AWS_PROFILE"),
    "credentials": ("AWS_SHARED_CREDENTIALS_FILE",),
    "access_key": ("AWS_ACCESS_KEY_ID",),
    "secret_key": ("AWS_SECRET_ACCESS_KEY",),
    "session_token": ("AWS_SESSION_TOKEN",),
    "bucket": ("AWS_SECRETS_BUCKET", "AWS_S3_BUCKET"),
    "kms": ("AWS_KMS_ID",),
    "output_dir": ("KMSCTL_OUTPUT_DIR",),
    "editor": ("EDITOR",),
}

# Config keys which are never echoed in full
SENSITIVE_KEYS = ('secret', 'token', 'access_key')


class ConfigLoader:
    """Handles loading and saving the kmsctl configuration."""

    @staticmethod
    def get_config_path():
        """
        Get full path to the configuration file.

        ``$KMSCTL_CONFIG`` takes precedence over ``~/.kmsctl/config.json``.

        Returns:
            Path to config file
        """
        override = os.environ.get("KMSCTL_CONFIG", "").strip()
        if override:
            return Path(override).expanduser()
        return Path.home() / ".kmsctl" / "config.json"

    @staticmethod
    def load_config_file():
        """
        Load the JSON config file if one exists.

        Returns:
            Dictionary of settings from the file, empty if missing or unreadable
        """
        config_path = ConfigLoader.get_config_path()
        if not config_path.exists():
            return {}

        try:
            with open(config_path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.warning("Ignoring unreadable config file %s: %s", config_path, e)
            return {}

        if not isinstance(data, dict):
            log.warning("Ignoring config file %s: not a JSON object", config_path)
            return {}
        return data

    @staticmethod
    def apply_environment(config, environ=None):
        """
        Overlay environment variables onto a config dictionary.

        Args:
            config: Configuration dictionary, updated in place
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            The updated configuration dictionary
        """
        environ = os.environ if environ is None else environ
        for key, names in ENV_OVERRIDES.items():
            for name in names:
                value = environ.get(name, "")
                if value:
                    config[key] = value
                    break
        return config

    @staticmethod
    def load_config(environ=None):
        """
        Load the effective configuration.

        Returns:
            Configuration dictionary with defaults, file and environment applied
        """
        config = dict(DEFAULT_CONFIG)
        for key, value in ConfigLoader.load_config_file().items():
            if key in DEFAULT_CONFIG:
                config[key] = value
            else:
                log.warning("Unknown key '%s' in config file, ignoring", key)
        return ConfigLoader.apply_environment(config, environ)

    @staticmethod
    def save_config_file(config):
        """
        Write the config file, creating its directory when required.

        Args:
            config: Dictionary to persist

        Returns:
            Path to the written file
        """
        config_path = ConfigLoader.get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            json.dump(config, f, indent=2)
        return config_path


def mask_value(key, value):
    """Mask sensitive config values for display."""
    if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
        if value and len(str(value)) > 4:
            return f"{str(value)[:4]}...{'*' * 8}"
    return value


def handle_config_update(config_json_string):
    """Handle the --config update command.

    Args:
        config_json_string: JSON string with config updates

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        config_updates = json.loads(config_json_string)
    except json.JSONDecodeError as e:
        print(f"{Fore.RED}[error] invalid JSON in --config argument: {e}{Style.RESET_ALL}")
        return 1

    if not isinstance(config_updates, dict):
        print(f"{Fore.RED}[error] --config must be a JSON object (dictionary){Style.RESET_ALL}")
        return 1

    invalid_keys = [key for key in config_updates if key not in DEFAULT_CONFIG]
    if invalid_keys:
        print(f"{Fore.RED}[error] invalid configuration key(s): {', '.join(invalid_keys)}{Style.RESET_ALL}")
        print(f"\n{Fore.YELLOW}Valid keys:{Style.RESET_ALL}")
        for key in sorted(DEFAULT_CONFIG):
            print(f"  • {key}")
        return 1

    current_config = ConfigLoader.load_config_file()
    current_config.update(config_updates)

    try:
        config_path = ConfigLoader.save_config_file(current_config)
    except OSError as e:
        print(f"{Fore.RED}[error] failed to update configuration: {e}{Style.RESET_ALL}")
        return 1

    print(f"{Fore.GREEN}Configuration updated successfully{Style.RESET_ALL}")
    for key, value in config_updates.items():
        print(f"  {key}: {mask_value(key, value)}")
    print(f"{Fore.CYAN}Config file: {config_path}{Style.RESET_ALL}")
    return 0
