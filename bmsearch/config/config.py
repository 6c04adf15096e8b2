import os
import sys
import codecs
import configparser
from typing import Any, Optional
import logging
from logging.handlers import RotatingFileHandler


class ConfigError(Exception):
    """Base exception for configuration-related errors."""
    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""
    pass


class ConfigFileError(ConfigError):
    """Raised when there are issues with the configuration file."""
    pass


LOGGER_NAME = "bmsearch"

DEFAULT_CONFIG_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "bmsearch.conf")


class Config:
    """Manages search configuration and logging setup.

    Starts from the shipped ``bmsearch.conf``, overlays an INI file when one
    is given, validates the result, and initializes the ``bmsearch`` logger
    with a console handler and an optional rotating file handler.

    Attributes:
        match_prefix (str): Literal written before every matching line.
        encoding (Optional[str]): Encoding for input files, platform default if None.
        report_stats (bool): Whether to log matcher statistics after a run.
        log_level (str): Logging level (e.g., "INFO", "DEBUG").
        log_file (Optional[str]): Path to log file (if specified).
        logger (Optional[logging.Logger]): Configured logger instance.
    """

    VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
    REQUIRED_SECTIONS = ('SEARCH', 'LOGGING')

    def __init__(self, config_file: Optional[str] = None, log_level: Optional[str] = None,
                 defaults_file: str = DEFAULT_CONFIG_FILE) -> None:
        """Initializes the configuration.

        Args:
            config_file: Path to the configuration INI file, or None for defaults.
            log_level: Overrides ``LOGGING.LEVEL`` when given.
            defaults_file: INI file providing every setting's default value.

        Raises:
            ConfigFileError: If a config file does not exist or cannot be read.
            ConfigValidationError: If settings are missing or invalid.
        """
        self.config_file = config_file
        self.defaults_file = defaults_file
        self.config = configparser.ConfigParser(interpolation=None)
        self.config.optionxform = str.upper
        self.logger: Optional[logging.Logger] = None

        try:
            self._load_defaults()
            if self.config_file is not None:
                self._load_config_file()
            self._parse_configuration()
            if log_level is not None:
                self.log_level = log_level.strip()
            self._validate_config()
            self._initiate_logger()
        except (ConfigFileError, ConfigValidationError):
            raise
        except Exception as e:
            raise ConfigError(f"Unexpected error during configuration initialization: {e}") from e

    def _read_ini(self, path: str) -> None:
        """Reads one INI file into the parser, later files overriding earlier ones.

        Raises:
            ConfigFileError: If file doesn't exist, can't be read, or has parsing errors.
        """
        if not os.path.exists(path):
            raise ConfigFileError(f"Configuration file '{path}' not found")

        if not os.access(path, os.R_OK):
            raise ConfigFileError(f"Configuration file '{path}' is not readable")

        try:
            self.config.read(path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigFileError(f"Failed to parse configuration file '{path}': {e}") from e

    def _load_defaults(self) -> None:
        """Loads the defaults file, which must define every required section."""
        self._read_ini(self.defaults_file)
        missing_sections = [section for section in self.REQUIRED_SECTIONS if section not in self.config]
        if missing_sections:
            raise ConfigFileError(f"Missing required sections in defaults file '{self.defaults_file}': {missing_sections}")

    def _load_config_file(self) -> None:
        """Loads and parses the configuration file on top of the defaults.

        Raises:
            ConfigFileError: If file doesn't exist, can't be read, has parsing
                errors, or introduces unknown sections.
        """
        self._read_ini(self.config_file)

        unknown_sections = [section for section in self.config.sections() if section not in self.REQUIRED_SECTIONS]
        if unknown_sections:
            raise ConfigFileError(f"Unknown sections in config file: {unknown_sections}")

    def _get_bool(self, section: str, key: str) -> bool:
        """Retrieves a boolean value from config.

        Raises:
            ConfigValidationError: If value is empty or cannot be converted to bool.
        """
        value = self.config[section].get(key)
        if not value or not value.strip():
            raise ConfigValidationError(f"Configuration '{section}.{key}' is empty")

        try:
            return self.config[section].getboolean(key)
        except ValueError as e:
            raise ConfigValidationError(f"Invalid boolean value for '{section}.{key}': '{value}'. Use true/false, yes/no, or 1/0") from e

    def _get_required_str(self, section: str, key: str) -> str:
        """Retrieves a required string value from config.

        Raises:
            ConfigValidationError: If value is missing or empty.
        """
        value = self.config[section].get(key)
        if not value or not value.strip():
            raise ConfigValidationError(f"Required configuration '{section}.{key}' is empty")
        return value.strip()

    def _get_optional_str(self, section: str, key: str) -> Optional[str]:
        """Retrieves an optional string value, None if empty."""
        value = self.config[section].get(key)
        if not value or not value.strip():
            return None
        return value.strip()

    def _get_literal(self, section: str, key: str) -> str:
        """Retrieves a value verbatim, removing one pair of surrounding double quotes.

        INI values lose leading and trailing whitespace; quoting keeps it.
        """
        value = self.config[section].get(key, "").strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        return value

    def _parse_configuration(self) -> None:
        """Parses all configuration values."""
        self.match_prefix = self._get_literal("SEARCH", "MATCH_PREFIX")
        self.encoding = self._get_optional_str("SEARCH", "ENCODING")
        self.report_stats = self._get_bool("SEARCH", "REPORT_STATS")

        self.log_level = self._get_required_str("LOGGING", "LEVEL")
        self.log_file = self._get_optional_str("LOGGING", "FILE")

    def _create_log_file(self, log_path: str) -> None:
        """Creates a log file and its directory structure if needed.

        Raises:
            ConfigError: If log file or directory cannot be created.
        """
        try:
            directory = os.path.dirname(log_path)
            if directory:
                if not os.path.exists(directory):
                    os.makedirs(directory, mode=0o755)
                elif not os.access(directory, os.W_OK):
                    raise ConfigError(f"Log directory '{directory}' is not writable")

            if os.path.exists(log_path) and not os.access(log_path, os.W_OK):
                raise ConfigError(f"Log file '{log_path}' is not writable")
        except OSError as e:
            raise ConfigError(f"Failed to create log file or directory for '{log_path}': {e}") from e

    def _validate_config(self) -> None:
        """Validates all configuration settings.

        Raises:
            ConfigValidationError: If any settings are invalid.
        """
        if self.encoding:
            try:
                codecs.lookup(self.encoding)
            except LookupError as e:
                raise ConfigValidationError(f"Unknown encoding '{self.encoding}'") from e

        if "\n" in self.match_prefix or "\r" in self.match_prefix:
            raise ConfigValidationError("Match prefix must not contain line breaks")

        if self.log_level.upper() not in self.VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"Invalid log level '{self.log_level}'. "
                f"Valid options: {', '.join(sorted(self.VALID_LOG_LEVELS))}"
            )

        if self.log_file:
            log_dir = os.path.dirname(self.log_file)
            if log_dir and not os.path.exists(log_dir):
                parent_dir = os.path.dirname(log_dir)
                if parent_dir and not os.path.exists(parent_dir):
                    raise ConfigValidationError(f"Log file parent directory does not exist: '{parent_dir}'")

    def _initiate_logger(self) -> None:
        """Initializes the logger with console and file handlers.

        Sets up:
            - Logging format.
            - Console handler (stderr).
            - File handler (if `log_file` is specified).
            - Log rotation (10MB per file, max 3 backups).

        Raises:
            ConfigError: If logger setup fails.
        """
        log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        formatter = logging.Formatter(log_format)
        log_level = getattr(logging, self.log_level.upper())

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(log_level)

        # Clear existing handlers to avoid duplicates
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(log_level)
        self.logger.addHandler(console_handler)

        if self.log_file:
            try:
                self._create_log_file(self.log_file)
                file_handler = RotatingFileHandler(
                    self.log_file,
                    maxBytes=10 * 1024 * 1024,  # 10MB
                    backupCount=3,
                    encoding="utf-8",
                )
                file_handler.setFormatter(formatter)
                file_handler.setLevel(log_level)
                self.logger.addHandler(file_handler)
            except Exception as e:
                raise ConfigError(f"Failed to initialize file logging for '{self.log_file}': {e}") from e

    @property
    def debug(self) -> bool:
        return self.log_level.upper() == "DEBUG"

    def get(self, section: str, key: str) -> Any:
        """Retrieves a raw value from the configuration.

        Raises:
            ConfigError: If section doesn't exist.
        """
        if section not in self.config:
            raise ConfigError(f"Configuration section '{section}' not found")
        return self.config[section].get(key)

    def __str__(self) -> str:
        """Returns a string representation of key settings."""
        return (
            f"Config(match_prefix={self.match_prefix!r}, encoding={self.encoding!r}, "
            f"report_stats={self.report_stats}, log_level='{self.log_level}', "
            f"log_file={self.log_file!r})"
        )
