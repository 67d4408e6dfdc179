"""
DNS server implementations and the artifacts needed to run them.

An `Implementation` is one of a closed set of variants (`Bind`, `Hickory`,
`Unbound`). Given a `Role` or a `Config` it answers four questions for the
process supervisor:

- what goes in the config file (`format_config`)
- where the config file lives (`conf_file_path`)
- how to launch the server in the foreground (`cmd_args`)
- where the server writes its pid (`pidfile`)

Combinations without a defined answer raise instead of returning a
placeholder, so a misconfigured harness fails at setup time.
"""

import ipaddress
import logging
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, FrozenSet, List, Literal, Optional, Union, override

from dnslib import DNSLabel
from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import constants, templates
from .exceptions import (
    FeatureNotImplementedError,
    InvalidRepositoryError,
    UnsupportedFeatureError,
    UnsupportedRoleError,
)
from .repository import Repository

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(rb"[A-Za-z0-9_-]{1,63}")


# -------------------------
#
#   ROLE
#
# -------------------------

class Role(str, Enum):
    """The function a running server instance performs."""
    NAME_SERVER = "name-server"
    RESOLVER = "resolver"

    def is_resolver(self) -> bool:
        return self is Role.RESOLVER

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Accepts either the value (`name-server`) or the member name (`NAME_SERVER`)."""
        norm = value.strip().lower().replace("_", "-")
        for role in cls:
            if role.value == norm:
                return role
        raise UnsupportedFeatureError(f"Unknown role '{value}', expected one of {[r.value for r in cls]}")

    def __str__(self) -> str:
        return self.value


# -------------------------
#
#   CONFIG
#
# -------------------------

class NameServerConfig(BaseModel):
    """Parameters of an authoritative name server: the zone it owns."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["name-server"] = "name-server"
    origin: str

    @field_validator("origin")
    @classmethod
    def check_fqdn(cls, value: str) -> str:
        if not value.endswith("."):
            raise ValueError(f"origin '{value}' must be fully qualified (end with '.')")
        if value == ".":
            return value
        if ".." in value:
            raise ValueError(f"origin '{value}' has an empty label")
        try:
            labels = DNSLabel(value[:-1]).label
        except UnicodeError as e:
            raise ValueError(f"origin '{value}' is not a valid domain name: {e}")
        # rendered verbatim into config files, so only hostname characters
        if not all(_LABEL_RE.fullmatch(part) for part in labels):
            raise ValueError(f"origin '{value}' has an invalid or overlong label")
        if len(value) > 255:
            raise ValueError(f"origin '{value}' exceeds 255 octets")
        return value

    @property
    def role(self) -> Role:
        return Role.NAME_SERVER


class ResolverConfig(BaseModel):
    """Parameters of a recursive resolver."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["resolver"] = "resolver"
    use_dnssec: bool = False
    netmask: str

    @field_validator("netmask")
    @classmethod
    def check_netmask(cls, value: str) -> str:
        # non-strict: "10.0.0.1/8" is accepted as written
        ipaddress.ip_network(value, strict=False)
        return value

    @property
    def role(self) -> Role:
        return Role.RESOLVER


Config = Annotated[Union[NameServerConfig, ResolverConfig], Field(discriminator="kind")]


# -------------------------
#
#   IMPLEMENTATION
#
# -------------------------

class Implementation(BaseModel, ABC):
    """
    Abstract DNS server software product.

    Subclasses declare which roles they can run in and fill in the lookup
    tables. The base class does the dispatch and the role checks.
    """
    model_config = ConfigDict(frozen=True)

    name: ClassVar[str]
    supported_roles: ClassVar[FrozenSet[Role]] = frozenset(Role)

    @classmethod
    def default(cls) -> "Implementation":
        return Unbound()

    @classmethod
    def from_name(cls, name: str, repository: Optional[Union[Repository, str]] = None) -> "Implementation":
        """
        Builds a variant from its display name.

        Only `hickory` takes a repository, and requires one.
        """
        impl_class = IMPLEMENTATIONS.get(name.strip().lower())
        if not impl_class:
            raise UnsupportedFeatureError(
                f"Unknown implementation '{name}', expected one of {sorted(IMPLEMENTATIONS)}"
            )
        if impl_class is Hickory:
            if repository is None:
                raise InvalidRepositoryError("hickory requires a repository")
            return Hickory(repository)
        if repository is not None:
            raise InvalidRepositoryError(f"{impl_class.name} does not take a repository")
        return impl_class()

    def is_bind(self) -> bool:
        return isinstance(self, Bind)

    def supports(self, role: Role) -> bool:
        return role in self.supported_roles

    def _check_role(self, role: Role):
        if not self.supports(role):
            raise UnsupportedRoleError(f"{self} acting in `{role}` role is currently not supported")

    def format_config(self, config: Config) -> str:
        """Renders the config file content for `config` on this implementation."""
        role = config.role
        self._check_role(role)
        template = self._template(role)

        if isinstance(config, ResolverConfig):
            params: Dict[str, Any] = {"use_dnssec": config.use_dnssec, "netmask": config.netmask}
        else:
            params = {"fqdn": config.origin}

        logger.debug(f"[{self}] Formatting {role} config from '{template}'")
        return templates.render_named(template, **params)

    def cmd_args(self, role: Role) -> List[str]:
        """The command line that runs the server in the foreground with debug logging."""
        self._check_role(role)
        return list(self._cmd(role))

    @abstractmethod
    def _template(self, role: Role) -> str:
        """Name of the config template for `role`."""
        pass

    @abstractmethod
    def _cmd(self, role: Role) -> tuple:
        pass

    @abstractmethod
    def conf_file_path(self, role: Role) -> str:
        """Where the server binary expects its config file."""
        pass

    @abstractmethod
    def pidfile(self, role: Role) -> str:
        """Where the running server writes its process id."""
        pass

    def __str__(self) -> str:
        return self.name


class Bind(Implementation):
    """BIND 9; `named` serves both roles."""
    name: ClassVar[str] = "bind"

    @override
    def _template(self, role: Role) -> str:
        if role.is_resolver():
            return constants.BIND_RESOLVER_TEMPLATE
        return constants.BIND_NAME_SERVER_TEMPLATE

    @override
    def _cmd(self, role: Role) -> tuple:
        return constants.BIND_CMD

    @override
    def conf_file_path(self, role: Role) -> str:
        return constants.BIND_CONF_FILE

    @override
    def pidfile(self, role: Role) -> str:
        return constants.BIND_PIDFILE


class Hickory(Implementation):
    """Hickory DNS built from `repository`. Resolver only."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: ClassVar[str] = "hickory"
    supported_roles: ClassVar[FrozenSet[Role]] = frozenset({Role.RESOLVER})

    repository: Repository

    def __init__(self, repository: Union[Repository, str], **data):
        if isinstance(repository, str):
            repository = Repository(repository)
        super().__init__(repository=repository, **data)

    @override
    def _template(self, role: Role) -> str:
        return constants.HICKORY_RESOLVER_TEMPLATE

    @override
    def _cmd(self, role: Role) -> tuple:
        return constants.HICKORY_CMD

    @override
    def conf_file_path(self, role: Role) -> str:
        return constants.HICKORY_CONF_FILE

    @override
    def pidfile(self, role: Role) -> str:
        raise FeatureNotImplementedError(f"{self} has no pidfile defined for the `{role}` role")


class Unbound(Implementation):
    """The NLnet Labs suite: `nsd` as name server, `unbound` as resolver."""
    name: ClassVar[str] = "unbound"

    @override
    def _template(self, role: Role) -> str:
        if role.is_resolver():
            return constants.UNBOUND_RESOLVER_TEMPLATE
        return constants.NSD_NAME_SERVER_TEMPLATE

    @override
    def _cmd(self, role: Role) -> tuple:
        if role.is_resolver():
            return constants.UNBOUND_CMD
        return constants.NSD_CMD

    @override
    def conf_file_path(self, role: Role) -> str:
        if role.is_resolver():
            return constants.UNBOUND_CONF_FILE
        return constants.NSD_CONF_FILE

    @override
    def pidfile(self, role: Role) -> str:
        if role.is_resolver():
            return constants.UNBOUND_PIDFILE
        return constants.NSD_PIDFILE


IMPLEMENTATIONS = {cls.name: cls for cls in (Bind, Hickory, Unbound)}
