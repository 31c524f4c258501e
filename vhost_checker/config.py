"""Checker configuration."""

import ipaddress
import os
import re
import socket
import sys
import yaml


# nginx server_name directive with a single host name
DEFAULT_DOMAIN_PATTERN = r'^\s+server_name\s+([a-zA-Z0-9._-]+);$'

ADDRESS_FAMILIES = {
    'any': socket.AF_UNSPEC,
    'ipv4': socket.AF_INET,
    'ipv6': socket.AF_INET6,
}


class ConfigError(Exception):
    """Raised when the checker cannot be configured or fed."""


class CheckerConfig:
    """Settings for one checker run.

    Built from the ``config`` section of the settings file. Unknown keys
    are ignored.
    """

    def __init__(self, config=None):
        """Initialize checker configuration.

        Args:
            config: Configuration dictionary

        Raises:
            ConfigError: If a value is out of range or malformed
        """
        if config is None:
            config = {}

        self.workers = self._positive_int(config, 'workers', 10)
        self.expected_addresses = self._addresses(config, 'expected_addresses')
        self.uri1 = config.get('uri1', '/')
        self.uri2 = config.get('uri2', '/robots.txt')
        self.http_timeout = self._positive_number(config, 'http_timeout', 5)
        self.fail_on_http_status = bool(config.get('fail_on_http_status', False))
        self.time_log_format = config.get('time_log_format', '%Y-%m-%d %H:%M:%S')
        self.time_file_format = config.get('time_file_format', '%Y%m%d-%H%M')
        self.log_dir = config.get('log_dir') or default_log_dir()
        self.logfile = config.get('logfile')

        family = config.get('address_family', 'any')
        if family not in ADDRESS_FAMILIES:
            raise ConfigError(f"address_family must be one of {sorted(ADDRESS_FAMILIES)}, got {family!r}")
        self.address_family = ADDRESS_FAMILIES[family]

        pattern = config.get('domain_pattern', DEFAULT_DOMAIN_PATTERN)
        try:
            self.domain_pattern = re.compile(pattern)
        except re.error as e:
            raise ConfigError(f"Invalid domain_pattern {pattern!r}: {e}")
        if self.domain_pattern.groups < 1:
            raise ConfigError(f"domain_pattern {pattern!r} needs a capture group for the domain")

        for name in ('uri1', 'uri2'):
            if not str(getattr(self, name)).startswith('/'):
                raise ConfigError(f"{name} must start with '/'")

    @staticmethod
    def _addresses(config, key):
        value = config.get(key) or []
        if not isinstance(value, (list, tuple)) or not all(isinstance(a, str) for a in value):
            raise ConfigError(f"{key} must be a list of IP addresses, got {value!r}")
        try:
            return frozenset(normalize_address(a) for a in value)
        except ValueError as e:
            raise ConfigError(f"{key}: {e}")

    @staticmethod
    def _positive_int(config, key, default):
        value = config.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"{key} must be a positive integer, got {value!r}")
        return value

    @staticmethod
    def _positive_number(config, key, default):
        value = config.get(key, default)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigError(f"{key} must be a positive number, got {value!r}")
        return value


def normalize_address(address):
    """Return the canonical text form of an IP address.

    Raises:
        ValueError: If the text is not an IP address
    """
    return str(ipaddress.ip_address(address.strip()))


def default_log_dir():
    """Directory holding the entry script, where run logs are written."""
    return os.path.dirname(os.path.abspath(sys.argv[0] or '.'))


def load_config(path):
    """Load checker settings from a YAML file.

    Args:
        path: Path to the settings file

    Returns:
        CheckerConfig: Settings from the file's ``config`` section

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse settings file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    return CheckerConfig(data.get('config') or {})
