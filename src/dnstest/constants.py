from typing import Tuple

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "impl": "dnstest.implementation",
    "repo": "dnstest.repository",
    "tpl": "dnstest.templates",
    "art": "dnstest.artifacts",
    "conf": "dnstest.config",
    "cli": "dnstest.cli",
}

# Top-level modules within dnstest for auto-prefixing
KNOWN_TOP_MODULES = {
    "implementation",
    "repository",
    "templates",
    "artifacts",
    "config",
    "cli",
    "utils",
    "exceptions",
}

LOG_LEVELS_ENV = "DNST_LOG_LEVELS"

# --- Templates ---
TEMPLATES_PACKAGE = "dnstest.resources.templates"

BIND_RESOLVER_TEMPLATE = "named.resolver.conf.jinja"
BIND_NAME_SERVER_TEMPLATE = "named.name-server.conf.jinja"
HICKORY_RESOLVER_TEMPLATE = "hickory.resolver.toml.jinja"
UNBOUND_RESOLVER_TEMPLATE = "unbound.conf.jinja"
NSD_NAME_SERVER_TEMPLATE = "nsd.conf.jinja"

# --- Config file locations ---
# These must match what the server binaries look for.
BIND_CONF_FILE = "/etc/bind/named.conf"
HICKORY_CONF_FILE = "/etc/named.toml"
NSD_CONF_FILE = "/etc/nsd/nsd.conf"
UNBOUND_CONF_FILE = "/etc/unbound/unbound.conf"

# --- Command lines (foreground, verbose) ---
BIND_CMD: Tuple[str, ...] = ("named", "-g", "-d5")
HICKORY_CMD: Tuple[str, ...] = ("hickory-dns", "-d")
NSD_CMD: Tuple[str, ...] = ("nsd", "-d")
UNBOUND_CMD: Tuple[str, ...] = ("unbound", "-d")

# --- PID files ---
BIND_PIDFILE = "/tmp/named.pid"
NSD_PIDFILE = "/tmp/nsd.pid"
UNBOUND_PIDFILE = "/tmp/unbound.pid"

# --- Harness output ---
PLAN_FILENAME = "plan.yml"
