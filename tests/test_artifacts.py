import logging

import pytest

from dnstest.artifacts import ServerArtifacts, plan
from dnstest.implementation import Bind, Hickory, NameServerConfig, ResolverConfig, Role, Unbound
from dnstest.exceptions import UnsupportedRoleError

REPO_URL = "https://github.com/hickory-dns/hickory-dns.git"


class TestPlan:

    def test_unbound_name_server(self):
        artifacts = plan(Unbound(), NameServerConfig(origin="example.com."))
        assert artifacts == ServerArtifacts(
            implementation="unbound",
            role=Role.NAME_SERVER,
            conf_file_path="/etc/nsd/nsd.conf",
            config_text=Unbound().format_config(NameServerConfig(origin="example.com.")),
            cmd_args=["nsd", "-d"],
            pidfile="/tmp/nsd.pid",
        )

    def test_bind_resolver(self):
        artifacts = plan(Bind(), ResolverConfig(use_dnssec=True, netmask="0.0.0.0/0"))
        assert artifacts.role is Role.RESOLVER
        assert artifacts.cmd_args == ["named", "-g", "-d5"]
        assert artifacts.pidfile == "/tmp/named.pid"
        assert "dnssec-validation auto;" in artifacts.config_text

    def test_hickory_resolver_has_no_pidfile(self, caplog):
        with caplog.at_level(logging.WARNING, logger="dnstest.artifacts"):
            artifacts = plan(Hickory(REPO_URL), ResolverConfig(netmask="0.0.0.0/0"))
        assert artifacts.pidfile is None
        assert artifacts.cmd_args == ["hickory-dns", "-d"]
        assert artifacts.conf_file_path == "/etc/named.toml"
        assert "no pidfile defined" in caplog.text

    def test_hickory_name_server_fails_fast(self):
        with pytest.raises(UnsupportedRoleError):
            plan(Hickory(REPO_URL), NameServerConfig(origin="example.com."))

    def test_json_dump_uses_role_value(self):
        artifacts = plan(Unbound(), ResolverConfig(netmask="0.0.0.0/0"))
        dumped = artifacts.model_dump(mode="json")
        assert dumped["role"] == "resolver"
        assert dumped["implementation"] == "unbound"
