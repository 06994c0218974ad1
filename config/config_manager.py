"""Configuration management module for application settings."""

import json
import shutil
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from config.constants import (
    ADBConstants,
    ApplicationConstants,
    LoggingConstants,
    UIConstants,
)
from utils import common

logger = common.get_logger('config_manager')


@dataclass
class AdbSettings:
    """adb location, timeouts and install flags."""
    adb_path: str = ''
    command_timeout: int = ADBConstants.DEFAULT_COMMAND_TIMEOUT
    install_timeout: int = ADBConstants.INSTALL_COMMAND_TIMEOUT
    replace_existing: bool = True
    allow_downgrade: bool = False
    allow_test_apk: bool = False


@dataclass
class UISettings:
    """UI configuration settings."""
    window_width: int = UIConstants.WINDOW_WIDTH
    window_height: int = UIConstants.WINDOW_HEIGHT
    auto_refresh_interval: int = 0
    first_run_completed: bool = False


@dataclass
class LoggingSettings:
    """Logging configuration."""
    log_level: str = LoggingConstants.DEFAULT_LOG_LEVEL


@dataclass
class AppConfig:
    """Main application configuration."""
    adb: AdbSettings
    ui: UISettings
    logging: LoggingSettings
    version: str = ApplicationConstants.APP_VERSION


class ConfigManager:
    """Manages application configuration persistence and validation."""

    DEFAULT_CONFIG_PATH = f'~/{ApplicationConstants.CONFIG_FILE_NAME}'
    BACKUP_CONFIG_PATH = f'~/{ApplicationConstants.BACKUP_CONFIG_FILE_NAME}'

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path or self.DEFAULT_CONFIG_PATH).expanduser()
        if config_path:
            self.backup_path = self.config_path.with_name(self.config_path.stem + '.backup.json')
        else:
            self.backup_path = Path(self.BACKUP_CONFIG_PATH).expanduser()
        self._config: Optional[AppConfig] = None
        self._ensure_config_dir()

    def _ensure_config_dir(self):
        """Ensure configuration directory exists."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

    def _create_default_config(self) -> AppConfig:
        """Create default configuration."""
        return AppConfig(
            adb=AdbSettings(),
            ui=UISettings(),
            logging=LoggingSettings(),
        )

    def _validate_config(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and clean configuration dictionary."""
        default_config = asdict(self._create_default_config())

        # Merge with defaults for missing keys; unknown keys are dropped
        def merge_dict(default: Dict, user: Dict) -> Dict:
            result = default.copy()
            for key, value in user.items():
                if key in result:
                    if isinstance(value, dict) and isinstance(result[key], dict):
                        result[key] = merge_dict(result[key], value)
                    else:
                        result[key] = value
            return result

        validated = merge_dict(default_config, config_dict if isinstance(config_dict, dict) else {})

        adb_settings = validated['adb']
        if not isinstance(adb_settings.get('adb_path'), str):
            adb_settings['adb_path'] = ''
            logger.warning('adb_path invalid, reset to auto-detect')
        if not isinstance(adb_settings.get('command_timeout'), int) or \
                adb_settings['command_timeout'] < ADBConstants.MIN_COMMAND_TIMEOUT:
            adb_settings['command_timeout'] = ADBConstants.DEFAULT_COMMAND_TIMEOUT
            logger.warning('Command timeout too low, reset to %s seconds', ADBConstants.DEFAULT_COMMAND_TIMEOUT)
        if not isinstance(adb_settings.get('install_timeout'), int) or \
                adb_settings['install_timeout'] < ADBConstants.MIN_INSTALL_TIMEOUT:
            adb_settings['install_timeout'] = ADBConstants.INSTALL_COMMAND_TIMEOUT
            logger.warning('Install timeout too low, reset to %s seconds', ADBConstants.INSTALL_COMMAND_TIMEOUT)
        for flag, default in (('replace_existing', True), ('allow_downgrade', False), ('allow_test_apk', False)):
            if not isinstance(adb_settings.get(flag), bool):
                adb_settings[flag] = default
                logger.warning('%s invalid, reset to %s', flag, default)

        ui_settings = validated['ui']
        if not isinstance(ui_settings.get('auto_refresh_interval'), int) or ui_settings['auto_refresh_interval'] < 0:
            ui_settings['auto_refresh_interval'] = 0
            logger.warning('Auto refresh interval invalid, auto refresh disabled')
        if not isinstance(ui_settings.get('first_run_completed'), bool):
            ui_settings['first_run_completed'] = False
        for key, minimum in (('window_width', UIConstants.WINDOW_MIN_WIDTH), ('window_height', UIConstants.WINDOW_MIN_HEIGHT)):
            if not isinstance(ui_settings.get(key), int) or ui_settings[key] < minimum:
                ui_settings[key] = default_config['ui'][key]

        logging_settings = validated['logging']
        level = str(logging_settings.get('log_level', '')).upper()
        if level not in LoggingConstants.VALID_LOG_LEVELS:
            logging_settings['log_level'] = LoggingConstants.DEFAULT_LOG_LEVEL
            logger.warning('Log level invalid, reset to %s', LoggingConstants.DEFAULT_LOG_LEVEL)
        else:
            logging_settings['log_level'] = level

        return validated

    def _config_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        validated_dict = self._validate_config(config_dict)
        return AppConfig(
            adb=AdbSettings(**validated_dict['adb']),
            ui=UISettings(**validated_dict['ui']),
            logging=LoggingSettings(**validated_dict['logging']),
            version=validated_dict.get('version', ApplicationConstants.APP_VERSION),
        )

    def _read_file(self, path: Path) -> AppConfig:
        with open(path, 'r', encoding='utf-8') as f:
            return self._config_from_dict(json.load(f))

    def load_config(self) -> AppConfig:
        """Load configuration from file."""
        if self._config is not None:
            return self._config

        try:
            if self.config_path.exists():
                self._config = self._read_file(self.config_path)
                logger.info('Configuration loaded from %s', self.config_path)
            else:
                self._config = self._create_default_config()
                logger.info('Created default configuration')

        except (OSError, ValueError, TypeError) as e:
            logger.error('Failed to load config: %s', e)
            self._config = self._load_backup()

        return self._config

    def _load_backup(self) -> AppConfig:
        if not self.backup_path.exists():
            return self._create_default_config()
        try:
            logger.info('Attempting to load from backup')
            config = self._read_file(self.backup_path)
            logger.info('Configuration loaded from backup')
            return config
        except (OSError, ValueError, TypeError) as backup_error:
            logger.error('Backup config also failed: %s', backup_error)
            return self._create_default_config()

    def save_config(self, config: Optional[AppConfig] = None):
        """Save configuration to file."""
        if config is None:
            config = self._config

        if config is None:
            logger.warning('No configuration to save')
            return

        if self.config_path.exists():
            try:
                shutil.copy2(self.config_path, self.backup_path)
            except OSError as e:
                logger.warning('Failed to create config backup: %s', e)

        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(config), f, indent=4, ensure_ascii=False)
        except OSError as e:
            logger.error('Failed to save config: %s', e)
            raise

        self._config = config
        logger.info('Configuration saved to %s', self.config_path)

    def get_adb_settings(self) -> AdbSettings:
        """Get adb settings."""
        return self.load_config().adb

    def get_ui_settings(self) -> UISettings:
        """Get UI settings."""
        return self.load_config().ui

    def get_logging_settings(self) -> LoggingSettings:
        """Get logging settings."""
        return self.load_config().logging

    def update_adb_settings(self, **kwargs):
        """Update adb settings."""
        config = self.load_config()
        for key, value in kwargs.items():
            if hasattr(config.adb, key):
                setattr(config.adb, key, value)
        self.save_config(config)

    def update_ui_settings(self, **kwargs):
        """Update UI settings."""
        config = self.load_config()
        for key, value in kwargs.items():
            if hasattr(config.ui, key):
                setattr(config.ui, key, value)
        self.save_config(config)

    def mark_first_run_completed(self) -> bool:
        """Record that the guide was shown; return True if this was the first run."""
        if self.get_ui_settings().first_run_completed:
            return False
        self.update_ui_settings(first_run_completed=True)
        return True

    def reset_to_defaults(self):
        """Reset configuration to defaults."""
        self._config = self._create_default_config()
        self.save_config()
        logger.info('Configuration reset to defaults')
