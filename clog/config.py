"""
Configuration System - logging configuration for clog destinations

Provides centralized configuration loading from multiple sources
with precedence handling and environment variable substitution.
"""

import os
import re
import sys
from pathlib import Path
from beartype.typing import Any, Dict, Optional, Tuple

import yaml

from clog.destination import Destination
from clog.levels import InitMode, LogLevel, OutputAttribute, OutputFormat


class LoggingConfig:
    """
    Centralized logging configuration.

    Reads from file, environment variables, or keyword overrides with
    proper precedence handling.

    Example configuration file (clog_config.yml):
        logging:
          level: INFO
          format: text          # text, xml, csv or json
          attributes: time,file # or a list: [time, file, func, colored]
          output: file          # stderr, stdout, file
          file_path: /var/log/app/app.log
          mode: truncate        # truncate or append
          time_format: "%H:%M:%S"
    """

    DEFAULT_CONFIG = {
        "level": "ALL",
        "format": "text",
        "attributes": "minimal",
        "output": "stderr",  # stderr, stdout, file
        "file_path": None,
        "mode": "truncate",
        "time_format": "%H:%M:%S",
    }

    ENV_MAPPINGS = {
        "CLOG_LEVEL": "level",
        "CLOG_FORMAT": "format",
        "CLOG_ATTRIBUTES": "attributes",
        "CLOG_OUTPUT": "output",
        "CLOG_FILE": "file_path",
        "CLOG_MODE": "mode",
        "CLOG_TIME_FORMAT": "time_format",
    }

    VALID_OUTPUTS = ["stderr", "stdout", "file"]

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from multiple sources.

        Precedence: Environment > File > Default

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary

        Example:
            config = LoggingConfig.load("clog_config.yml")
        """
        config = cls.DEFAULT_CONFIG.copy()

        # 1. Load from file
        if config_path and Path(config_path).exists():
            file_config = cls._load_from_file(config_path)
            if file_config and isinstance(file_config.get("logging"), dict):
                config.update(file_config["logging"])

        # 2. Override with environment variables
        config = cls._apply_env_overrides(config)

        # 3. Substitute environment variables in values
        config = cls._substitute_env_vars(config)

        return config

    @classmethod
    def _load_from_file(cls, config_path: str) -> Optional[Dict[str, Any]]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary or None if error
        """
        try:
            with open(config_path) as f:
                content = yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            sys.stderr.write(f"Error loading config file {config_path}: {e}\n")
            return None
        if not isinstance(content, dict):
            sys.stderr.write(f"Error loading config file {config_path}: expected a mapping at top level\n")
            return None
        return content

    @classmethod
    def _apply_env_overrides(cls, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides.

        Environment variables:
            CLOG_LEVEL: Filter level (TRACE, DEBUG, ..., FATAL, ALL, NONE)
            CLOG_FORMAT: Output format (text, xml, csv, json)
            CLOG_ATTRIBUTES: Comma-separated output attributes (time,file,func,colored,verbose)
            CLOG_OUTPUT: Output destination (stderr, stdout, file)
            CLOG_FILE: Log file path
            CLOG_MODE: File open mode (truncate, append)
            CLOG_TIME_FORMAT: strftime() pattern of the time attribute

        Args:
            config: Configuration dictionary

        Returns:
            Updated configuration dictionary
        """
        for env_var, config_key in cls.ENV_MAPPINGS.items():
            if env_var in os.environ:
                config[config_key] = os.environ[env_var]

        return config

    @classmethod
    def _substitute_env_vars(cls, config: Any) -> Any:
        """
        Recursively substitute environment variables in configuration.

        Supports ${VAR_NAME} syntax.

        Example:
            file_path: /var/log/${ENVIRONMENT}/app.log
            With ENVIRONMENT=production, becomes:
            file_path: /var/log/production/app.log

        Args:
            config: Configuration value (string, dict, list, etc.)

        Returns:
            Configuration with substituted values
        """
        if isinstance(config, str):

            def replace_env(match):
                var_name = match.group(1)
                return os.environ.get(var_name, match.group(0))

            return re.sub(r"\$\{([^}]+)\}", replace_env, config)

        elif isinstance(config, dict):
            return {k: cls._substitute_env_vars(v) for k, v in config.items()}

        elif isinstance(config, list):
            return [cls._substitute_env_vars(item) for item in config]

        else:
            return config

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> Tuple[bool, str]:
        """
        Validate configuration.

        Args:
            config: Configuration dictionary

        Returns:
            Tuple of (is_valid, error_message)

        Example:
            is_valid, error = LoggingConfig.validate(config)
            if not is_valid:
                print(f"Invalid configuration: {error}")
        """
        try:
            LogLevel.parse(config.get("level", "ALL"))
            output_format = OutputFormat.parse(config.get("format", "text"))
            OutputAttribute.parse(config.get("attributes") or "minimal")
            mode = InitMode.parse(config.get("mode", "truncate"))
        except ValueError as e:
            return False, str(e)

        output = config.get("output", "stderr")
        if output not in cls.VALID_OUTPUTS:
            return False, f"Invalid output '{output}'. Must be one of: {', '.join(cls.VALID_OUTPUTS)}"

        if output == "file" and not config.get("file_path"):
            return False, "file_path required when output is 'file'"

        if output == "file" and mode is InitMode.APPEND and output_format.wraps_document:
            return False, f"Mode 'append' cannot be used with the {output_format.value} format"

        return True, ""

    @classmethod
    def setup_logging(
        cls, config_path: Optional[str] = None, destination: Optional[Destination] = None, **overrides
    ) -> bool:
        """
        Initialize a destination based on configuration.

        Args:
            config_path: Path to configuration file
            destination: Destination to initialize (default: the shared clog destination)
            **overrides: Configuration overrides (e.g., level="DEBUG")

        Returns:
            True iff the destination was initialized

        Example:
            LoggingConfig.setup_logging(
                config_path="clog_config.yml",
                level="DEBUG",
                format="csv"
            )
        """
        if destination is None:
            from clog import get_destination

            destination = get_destination()

        # Load configuration
        config = cls.load(config_path)
        config.update({key: value for key, value in overrides.items() if value is not None})

        is_valid, error = cls.validate(config)
        if not is_valid:
            sys.stderr.write(f"Warning: invalid logging configuration: {error}\n")
            return False

        output_format = OutputFormat.parse(config["format"])
        attributes = OutputAttribute.parse(config.get("attributes") or "minimal")

        destination.terminate()
        destination.set_filter_level(config["level"])
        destination.set_time_format(config.get("time_format") or "%H:%M:%S")

        output = config.get("output", "stderr")
        if output == "file":
            return destination.initialize_to_file(config["file_path"], config["mode"], output_format, attributes)
        stream = sys.stdout if output == "stdout" else sys.stderr
        return destination.initialize(stream, output_format, attributes)
