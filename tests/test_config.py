import pytest
import yaml
from pathlib import Path
from dnstest.config import HarnessConfig
from dnstest.implementation import Bind, Hickory, NameServerConfig, ResolverConfig, Unbound
from dnstest.exceptions import (
    ConfigFileMissingError,
    ConfigParsingError,
    ConfigValidationError,
    InvalidRepositoryError,
)
import copy

BASE_CONFIG = {
    'name': 'dnssec-interop',
    'servers': {
        'root': {
            'implementation': 'bind',
            'config': {'kind': 'name-server', 'origin': '.'},
        },
        'tld': {
            'config': {'kind': 'name-server', 'origin': 'com.'},
        },
        'resolver': {
            'implementation': 'hickory',
            'repository': 'https://github.com/hickory-dns/hickory-dns.git',
            'config': {'kind': 'resolver', 'use_dnssec': True, 'netmask': '172.28.0.0/24'},
        },
    }
}

@pytest.fixture
def create_config_file(tmp_path: Path):
    """A pytest fixture to create a temporary harness.yml file."""
    def _create_file(config_data: dict) -> Path:
        config_file = tmp_path / "harness.yml"
        with open(config_file, 'w') as f:
            yaml.dump(config_data, f, sort_keys=False)
        return config_file
    return _create_file

class TestHarnessLoading:
    """Tests for basic loading and validation success/failure."""

    def test_load_valid_harness_successfully(self, create_config_file):
        """Should load a well-formed harness and resolve every server."""
        harness = HarnessConfig(str(create_config_file(BASE_CONFIG)))
        assert harness.name == 'dnssec-interop'
        assert harness.server_names == ['root', 'tld', 'resolver']

        servers = {name: (impl, conf) for name, impl, conf in harness.servers()}
        assert servers['root'] == (Bind(), NameServerConfig(origin='.'))
        assert servers['tld'][0] == Unbound()
        assert isinstance(servers['resolver'][0], Hickory)
        assert servers['resolver'][1] == ResolverConfig(use_dnssec=True, netmask='172.28.0.0/24')

    def test_file_not_found_raises_error(self):
        with pytest.raises(ConfigFileMissingError):
            HarnessConfig("non_existent_harness.yml")

    def test_invalid_yaml_raises_error(self, tmp_path):
        config_file = tmp_path / "invalid.yml"
        config_file.write_text("key: value: another")

        with pytest.raises(ConfigParsingError, match="Error parsing YAML file"):
            HarnessConfig(str(config_file))

    def test_non_mapping_document_raises_error(self, tmp_path):
        config_file = tmp_path / "list.yml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigParsingError, match="containing a dictionary"):
            HarnessConfig(str(config_file))

    def test_missing_name_raises_error(self, create_config_file):
        invalid_config = copy.deepcopy(BASE_CONFIG)
        del invalid_config['name']

        with pytest.raises(ConfigValidationError, match="name\n  Field required"):
            HarnessConfig(str(create_config_file(invalid_config)))


class TestHarnessValidationLogic:
    """Tests for per-server validation rules."""

    def test_unknown_config_kind(self, create_config_file):
        invalid_config = copy.deepcopy(BASE_CONFIG)
        invalid_config['servers']['root']['config']['kind'] = 'forwarder'

        with pytest.raises(ConfigValidationError):
            HarnessConfig(str(create_config_file(invalid_config)))

    def test_unknown_implementation(self, create_config_file):
        invalid_config = copy.deepcopy(BASE_CONFIG)
        invalid_config['servers']['root']['implementation'] = 'knot'

        with pytest.raises(ConfigValidationError):
            HarnessConfig(str(create_config_file(invalid_config)))

    def test_hickory_without_repository(self, create_config_file):
        invalid_config = copy.deepcopy(BASE_CONFIG)
        del invalid_config['servers']['resolver']['repository']

        with pytest.raises(ConfigValidationError, match="'hickory' requires a 'repository'"):
            HarnessConfig(str(create_config_file(invalid_config)))

    def test_repository_on_other_implementation(self, create_config_file):
        invalid_config = copy.deepcopy(BASE_CONFIG)
        invalid_config['servers']['root']['repository'] = 'https://example.com/bind9.git'

        with pytest.raises(ConfigValidationError, match="'repository' cannot be used with 'bind'"):
            HarnessConfig(str(create_config_file(invalid_config)))

    def test_invalid_repository(self, create_config_file):
        invalid_config = copy.deepcopy(BASE_CONFIG)
        invalid_config['servers']['resolver']['repository'] = 'not a url'

        with pytest.raises(InvalidRepositoryError):
            HarnessConfig(str(create_config_file(invalid_config)))

    def test_relative_repository_next_to_harness(self, create_config_file, tmp_path):
        (tmp_path / "hickory-dns").mkdir()
        config = copy.deepcopy(BASE_CONFIG)
        config['servers']['resolver']['repository'] = 'hickory-dns'

        harness = HarnessConfig(str(create_config_file(config)))
        resolver = dict((name, impl) for name, impl, _ in harness.servers())['resolver']
        assert resolver.repository.as_str() == str(tmp_path / "hickory-dns")

    def test_invalid_netmask(self, create_config_file):
        invalid_config = copy.deepcopy(BASE_CONFIG)
        invalid_config['servers']['resolver']['config']['netmask'] = 'everyone'

        with pytest.raises(ConfigValidationError, match="netmask"):
            HarnessConfig(str(create_config_file(invalid_config)))

    @pytest.mark.parametrize("server_name", ["../outside", "a/b", "..", "a\\b"])
    def test_server_name_must_be_one_path_segment(self, create_config_file, server_name):
        invalid_config = copy.deepcopy(BASE_CONFIG)
        invalid_config['servers'][server_name] = invalid_config['servers'].pop('root')

        with pytest.raises(ConfigValidationError, match="must be a single path segment"):
            HarnessConfig(str(create_config_file(invalid_config)))

    def test_injected_origin_rejected(self, create_config_file):
        invalid_config = copy.deepcopy(BASE_CONFIG)
        invalid_config['servers']['tld']['config']['origin'] = 'com" IN { type primary; };\nzone "evil.'

        with pytest.raises(ConfigValidationError, match="origin"):
            HarnessConfig(str(create_config_file(invalid_config)))


class TestHarnessPlan:

    def test_plan_every_server(self, create_config_file):
        artifacts = HarnessConfig(str(create_config_file(BASE_CONFIG))).plan()
        assert list(artifacts) == ['root', 'tld', 'resolver']
        assert artifacts['root'].cmd_args == ['named', '-g', '-d5']
        assert artifacts['tld'].conf_file_path == '/etc/nsd/nsd.conf'
        assert 'name: com.' in artifacts['tld'].config_text
        assert artifacts['resolver'].pidfile is None
