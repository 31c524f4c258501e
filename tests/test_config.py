"""
Tests for checker configuration.
"""

import socket

import pytest

from vhost_checker.config import CheckerConfig, ConfigError, load_config, DEFAULT_DOMAIN_PATTERN


class TestCheckerConfig:
    """Test building configuration from a dictionary."""

    def test_defaults(self):
        """Test defaults when no configuration is given."""
        config = CheckerConfig()

        assert config.workers == 10
        assert config.expected_addresses == frozenset()
        assert config.uri1 == '/'
        assert config.uri2 == '/robots.txt'
        assert config.http_timeout == 5
        assert config.fail_on_http_status is False
        assert config.address_family == socket.AF_UNSPEC
        assert config.domain_pattern.pattern == DEFAULT_DOMAIN_PATTERN
        assert config.time_log_format == '%Y-%m-%d %H:%M:%S'
        assert config.time_file_format == '%Y%m%d-%H%M'
        assert config.log_dir

    def test_values_from_dict(self, tmp_path):
        """Test that configured values override the defaults."""
        config = CheckerConfig({
            'workers': 3,
            'expected_addresses': ['192.0.2.10', '192.0.2.11'],
            'uri1': '/health',
            'uri2': '/status',
            'http_timeout': 2.5,
            'address_family': 'ipv4',
            'log_dir': str(tmp_path),
        })

        assert config.workers == 3
        assert config.expected_addresses == {'192.0.2.10', '192.0.2.11'}
        assert config.uri1 == '/health'
        assert config.uri2 == '/status'
        assert config.http_timeout == 2.5
        assert config.address_family == socket.AF_INET
        assert config.log_dir == str(tmp_path)

    @pytest.mark.parametrize('workers', [0, -1, 'ten', True, 1.5])
    def test_invalid_workers(self, workers):
        """Test that the pool size must be a positive integer."""
        with pytest.raises(ConfigError, match='workers'):
            CheckerConfig({'workers': workers})

    def test_invalid_timeout(self):
        """Test that the timeout must be positive."""
        with pytest.raises(ConfigError, match='http_timeout'):
            CheckerConfig({'http_timeout': 0})

    def test_invalid_address_family(self):
        """Test unknown address families are rejected."""
        with pytest.raises(ConfigError, match='address_family'):
            CheckerConfig({'address_family': 'ipx'})

    def test_pattern_must_compile(self):
        """Test a broken regular expression is a configuration error."""
        with pytest.raises(ConfigError, match='Invalid domain_pattern'):
            CheckerConfig({'domain_pattern': 'server_name ([a-z'})

    def test_pattern_needs_capture_group(self):
        """Test a pattern without a group cannot yield a domain."""
        with pytest.raises(ConfigError, match='capture group'):
            CheckerConfig({'domain_pattern': r'server_name \S+;'})

    def test_uri_must_be_absolute_path(self):
        """Test request paths are appended to the domain as-is."""
        with pytest.raises(ConfigError, match='uri2'):
            CheckerConfig({'uri2': 'robots.txt'})


class TestLoadConfig:
    """Test loading settings from YAML."""

    def test_load_config_section(self, tmp_path):
        """Test settings are read from the config section."""
        path = tmp_path / 'vhost-checker.yml'
        path.write_text(
            "config:\n"
            "  workers: 4\n"
            "  expected_addresses:\n"
            "    - 192.0.2.10\n"
            "  domain_pattern: '^\\s*server_name\\s+(\\S+);'\n"
        )

        config = load_config(str(path))

        assert config.workers == 4
        assert config.expected_addresses == {'192.0.2.10'}
        assert config.domain_pattern.search('server_name a.example.com;').group(1) == 'a.example.com'

    def test_empty_file_gives_defaults(self, tmp_path):
        """Test an empty settings file is valid."""
        path = tmp_path / 'vhost-checker.yml'
        path.write_text('')

        assert load_config(str(path)).workers == 10

    def test_missing_file(self, tmp_path):
        """Test a missing settings file is a configuration error."""
        with pytest.raises(ConfigError, match='Cannot read settings file'):
            load_config(str(tmp_path / 'missing.yml'))

    def test_invalid_yaml(self, tmp_path):
        """Test unparsable YAML is a configuration error."""
        path = tmp_path / 'vhost-checker.yml'
        path.write_text('config: [workers: 3\n')

        with pytest.raises(ConfigError, match='Cannot parse settings file'):
            load_config(str(path))

    def test_top_level_must_be_mapping(self, tmp_path):
        """Test a list at the top level is rejected."""
        path = tmp_path / 'vhost-checker.yml'
        path.write_text('- workers\n')

        with pytest.raises(ConfigError, match='mapping'):
            load_config(str(path))


class TestExpectedAddresses:
    """Test validation of the web server address list."""

    @pytest.mark.parametrize('value', ['192.0.2.10', 3232235786, {'ip': '192.0.2.10'}, [192]])
    def test_must_be_list_of_strings(self, value):
        """Test a scalar or non-string entry is rejected instead of split up."""
        with pytest.raises(ConfigError, match='expected_addresses must be a list'):
            CheckerConfig({'expected_addresses': value})

    def test_must_be_ip_addresses(self):
        """Test a host name is not accepted as an address."""
        with pytest.raises(ConfigError, match='expected_addresses'):
            CheckerConfig({'expected_addresses': ['web1.example.com']})

    def test_addresses_are_normalized(self):
        """Test IPv6 entries are stored in canonical form."""
        config = CheckerConfig({'expected_addresses': ['2001:DB8:0:0::10', ' 192.0.2.10 ']})

        assert config.expected_addresses == {'2001:db8::10', '192.0.2.10'}

    def test_scalar_from_yaml(self, tmp_path):
        """Test a single address written without a list fails to load."""
        path = tmp_path / 'vhost-checker.yml'
        path.write_text("config:\n  expected_addresses: 192.0.2.10\n")

        with pytest.raises(ConfigError, match='expected_addresses'):
            load_config(str(path))
