"""
Configuration module for the Rock-Paper-Scissors-Minus-One client
Centralizes all constants, settings, and configuration with validation
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union


class ConfigError(Exception):
    """Configuration validation error"""
    pass


def _safe_int_env(name: str, default: int, min_val: int = None, max_val: int = None) -> int:
    """
    Safely parse integer environment variable with bounds.
    Falls back to default on invalid values.
    """
    logger_local = logging.getLogger(__name__)
    try:
        value = int(os.getenv(name, str(default)))
        if min_val is not None:
            value = max(min_val, value)
        if max_val is not None:
            value = min(max_val, value)
        return value
    except (ValueError, TypeError):
        logger_local.warning(f"Invalid {name}, using default {default}")
        return default


def _safe_float_env(name: str, default: float, min_val: float = None, max_val: float = None) -> float:
    """
    Safely parse float environment variable with bounds.
    Falls back to default on invalid values.
    """
    logger_local = logging.getLogger(__name__)
    try:
        value = float(os.getenv(name, str(default)))
        if min_val is not None:
            value = max(min_val, value)
        if max_val is not None:
            value = min(max_val, value)
        return value
    except (ValueError, TypeError):
        logger_local.warning(f"Invalid {name}, using default {default}")
        return default


GATEWAY_KINDS = frozenset(["http", "simulated"])


class Config:
    """
    Configuration management with:
    - Input validation
    - Environment variable support
    - Safe defaults
    - JSON overlay files
    """

    # ========== Game Settings ==========
    GAME = {
        'game_endpoint': 'game/rock-paper-scissors-minus-one',
        'game_id': _safe_int_env('RPS_GAME_ID', 1104, 1),
        'default_mode': os.getenv('RPS_DEFAULT_MODE', 'coins'),
        'gateway': os.getenv('RPS_GATEWAY', 'http'),
        'reveal_delay': _safe_float_env('RPS_REVEAL_DELAY', 1.0, 0.0, 10.0),
        'required_choices': 2,
        'default_bet_tiers': (1, 5, 10),
    }

    # ========== Simulated Backend ==========
    SIMULATION = {
        'starting_balance': _safe_int_env('RPS_SIM_BALANCE', 1000, 0),
        'win_multiplier': 2,
        'seed': None,
    }

    # ========== Network Settings ==========
    NETWORK = {
        'base_url': os.getenv('RPS_BASE_URL', 'https://backend-staging.dingdingding.world'),
        'timeout': _safe_float_env('RPS_HTTP_TIMEOUT', 10.0, 0.1, 120.0),
        'max_auth_retries': 1,
    }

    # ========== Authentication ==========
    AUTH = {
        'access_token': os.getenv('RPS_ACCESS_TOKEN', ''),
        'refresh_path': 'auth/refresh_token',
    }

    # ========== Logging Settings ==========
    LOGGING = {
        'level': os.getenv('LOG_LEVEL', 'INFO'),
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'date_format': '%Y-%m-%d %H:%M:%S',
        'max_bytes': 5 * 1024 * 1024,
        'backup_count': 3,
        'console_output': True,
        'json_logs': False,
    }

    # ========== File Settings ==========
    @classmethod
    def get_files_config(cls) -> dict:
        """Get file configuration with lazy initialization to avoid import issues"""
        return {
            'config_dir': Path(os.getenv(
                'RPS_CONFIG_DIR',
                str(Path.home() / '.rps_minus_one')
            )),
            'log_dir': Path(os.getenv(
                'RPS_LOG_DIR',
                str(Path.home() / '.rps_minus_one' / 'logs')
            )),
        }

    def __init__(
        self,
        config_file: Optional[str] = None,
        validate: bool = True,
        ensure_directories: bool = True,
    ):
        """
        Initialize configuration with optional validation

        Args:
            config_file: Optional path to JSON config file
            validate: Whether to validate configuration on init
            ensure_directories: Create required directories on init
        """
        self._lock = threading.RLock()
        self._files_config: Optional[dict] = None
        self.config_file = config_file
        self._custom_settings = {}
        self._logger = None  # Will be set after logger initialization

        if ensure_directories:
            self.ensure_directories()

        if config_file:
            self.load_from_file(config_file)

        if validate:
            self.validate()

    @property
    def FILES(self) -> dict:
        """Cached file configuration"""
        with self._lock:
            if self._files_config is None:
                self._files_config = self.get_files_config()
            return self._files_config

    def ensure_directories(self) -> Dict[str, bool]:
        """Ensure all required directories exist, track success."""
        status: Dict[str, bool] = {}
        logger_local = self._logger or logging.getLogger(__name__)
        for key in ['config_dir', 'log_dir']:
            path = self.FILES[key]
            try:
                path.mkdir(parents=True, exist_ok=True)
                status[key] = path.exists() and path.is_dir()
            except OSError as e:
                logger_local.warning(f"Could not create {key}: {e}")
                status[key] = False
        self._directory_status = status
        return status

    def validate(self):
        """
        Validate all configuration values

        Raises:
            ConfigError: If configuration is invalid
        """
        errors = []

        # Validate game settings
        if self.get('game', 'gateway') not in GATEWAY_KINDS:
            errors.append(f"Invalid gateway: {self.get('game', 'gateway')}")
        if self.get('game', 'default_mode') not in ('coins', 'sweeps'):
            errors.append(f"Invalid default mode: {self.get('game', 'default_mode')}")
        if self.get('game', 'reveal_delay') < 0:
            errors.append("reveal_delay cannot be negative")
        tiers = self.get('game', 'default_bet_tiers')
        if not tiers or any(t <= 0 for t in tiers):
            errors.append("default_bet_tiers must be non-empty and positive")

        # Validate simulation
        if self.get('simulation', 'starting_balance') < 0:
            errors.append("starting_balance cannot be negative")
        if self.get('simulation', 'win_multiplier') < 1:
            errors.append("win_multiplier must be at least 1")

        # Validate NETWORK
        if not str(self.get('network', 'base_url')).startswith(('http://', 'https://')):
            errors.append(f"Invalid base_url: {self.get('network', 'base_url')}")
        if self.get('network', 'timeout', 0) <= 0:
            errors.append("Network timeout must be positive")

        # Validate logging
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if str(self.get('logging', 'level')).upper() not in valid_levels:
            errors.append(f"Invalid log level: {self.get('logging', 'level')}")

        # Validate directory creation status
        if hasattr(self, '_directory_status'):
            for key, success in self._directory_status.items():
                if not success:
                    errors.append(f"Required directory {key} could not be created")

        if errors:
            raise ConfigError("Configuration validation failed:\n" + "\n".join(errors))

    def load_from_file(self, filepath: Union[str, Path]):
        """
        Load configuration overlay from JSON file

        Args:
            filepath: Path to JSON configuration file
        """
        filepath = Path(filepath)

        try:
            if not filepath.exists():
                if self._logger:
                    self._logger.warning(f"Config file not found: {filepath}")
                return

            with open(filepath, 'r') as f:
                data = json.load(f)

            if not isinstance(data, dict):
                raise ConfigError(f"Config file must contain a JSON object: {filepath}")

            with self._lock:
                self._custom_settings = {
                    section.lower(): dict(values)
                    for section, values in data.items()
                    if isinstance(values, dict)
                }

            if self._logger:
                self._logger.info(f"Loaded configuration from {filepath}")

        except json.JSONDecodeError as e:
            error_msg = f"Invalid JSON in config file: {e}"
            if self._logger:
                self._logger.error(error_msg)
            raise ConfigError(error_msg)
        except OSError as e:
            error_msg = f"Error loading config file: {e}"
            if self._logger:
                self._logger.error(error_msg)
            raise ConfigError(error_msg)

    def save_to_file(self, filepath: Union[str, Path]):
        """
        Save current configuration to JSON file

        The access token is never written out.

        Args:
            filepath: Path where to save the configuration
        """
        filepath = Path(filepath)
        config_dict = self.to_dict()
        config_dict.pop('files', None)
        config_dict['auth'] = {k: v for k, v in config_dict['auth'].items() if k != 'access_token'}

        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2, default=str)

        if self._logger:
            self._logger.info(f"Saved configuration to {filepath}")

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get configuration value with support for custom settings

        Args:
            section: Configuration section name
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        with self._lock:
            section_lower = section.lower()
            if section_lower in self._custom_settings:
                if key in self._custom_settings[section_lower]:
                    return self._custom_settings[section_lower][key]

            section_attr = section.upper()
            if hasattr(self, section_attr):
                section_dict = getattr(self, section_attr)
                if isinstance(section_dict, dict):
                    return section_dict.get(key, default)

        return default

    def set(self, section: str, key: str, value: Any):
        """
        Set a configuration value

        Args:
            section: Configuration section name
            key: Configuration key
            value: Value to set
        """
        with self._lock:
            section_lower = section.lower()
            if section_lower not in self._custom_settings:
                self._custom_settings[section_lower] = {}
            self._custom_settings[section_lower][key] = value

    def set_logger(self, logger):
        """Set logger instance after logger initialization"""
        self._logger = logger

    def section(self, name: str) -> dict:
        """Section dict with custom settings applied on top"""
        base = dict(getattr(self, name.upper(), {}) or {})
        with self._lock:
            base.update(self._custom_settings.get(name.lower(), {}))
        return base

    def to_dict(self) -> dict:
        """Export entire configuration as dictionary"""
        return {
            'game': self.section('game'),
            'simulation': self.section('simulation'),
            'network': self.section('network'),
            'auth': self.section('auth'),
            'logging': self.section('logging'),
            'files': {k: str(v) for k, v in self.FILES.items()},
        }


# Create global configuration instance.
#
# Keep this import side-effect free. Runtime initialization (logging
# configuration, directory creation, validation) happens in the explicit
# startup path (see `src/main.py`).
config = Config(validate=False, ensure_directories=False)
