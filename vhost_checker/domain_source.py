"""Domain discovery from web server configuration files."""

import logging

from .config import ConfigError


log = logging.getLogger(__name__)


def parse_domains(text, pattern):
    """Extract unique domain names from configuration text.

    Each line is matched on its own; the first capture group of a
    matching line is the domain.

    Args:
        text: Configuration file contents
        pattern: Compiled regular expression with one capture group

    Returns:
        set: Unique domain names
    """
    domains = set()
    for line in text.splitlines():
        match = pattern.search(line)
        if match and match.group(1):
            domains.add(match.group(1))
    return domains


def read_domains(path, pattern):
    """Read a configuration file and return its domains.

    Raises:
        ConfigError: If the file cannot be read
    """
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            text = f.read()
    except OSError as e:
        raise ConfigError(f"Error opening provided config file {path}: {e}")

    domains = parse_domains(text, pattern)
    log.debug(f"Found {len(domains)} domains in {path}")
    return domains
