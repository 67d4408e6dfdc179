"""
DNST (DNS Test) artifacts

Maps a test intent ("run this DNS server as a name server or a resolver,
with these parameters") onto what a supervisor needs to start it: the
rendered config, where to write it, the command line and the pid file.

Main modules:
- implementation: Role, Config and the Bind / Hickory / Unbound variants
- repository: validated source checkout or URL for built-from-source servers
- templates: bundled Jinja2 config templates
- artifacts: the per-server artifact bundle
- config: harness file loading and validation
- utils: logging setup

Quick start example:
```python
from dnstest import Bind, ResolverConfig, Role

config = ResolverConfig(use_dnssec=True, netmask="0.0.0.0/0")
Bind().format_config(config)
Bind().cmd_args(Role.RESOLVER)   # ['named', '-g', '-d5']
```
"""

__version__ = "0.3.0"

from .repository import Repository
from .implementation import (
    Role,
    Config,
    NameServerConfig,
    ResolverConfig,
    Implementation,
    Bind,
    Hickory,
    Unbound,
)
from .artifacts import ServerArtifacts, plan
from .config import HarnessConfig, HarnessModel
from .exceptions import (
    DNSTestError,
    ConfigurationError,
    ConfigValidationError,
    DefinitionError,
    InvalidRepositoryError,
    ArtifactError,
    TemplateError,
    UnsupportedFeatureError,
    UnsupportedRoleError,
    FeatureNotImplementedError,
)

__all__ = [
    # Version
    '__version__',
    # Model
    'Repository',
    'Role',
    'Config',
    'NameServerConfig',
    'ResolverConfig',
    'Implementation',
    'Bind',
    'Hickory',
    'Unbound',
    # Artifacts
    'ServerArtifacts',
    'plan',
    # Harness
    'HarnessConfig',
    'HarnessModel',
    # Exceptions
    'DNSTestError',
    'ConfigurationError',
    'ConfigValidationError',
    'DefinitionError',
    'InvalidRepositoryError',
    'ArtifactError',
    'TemplateError',
    'UnsupportedFeatureError',
    'UnsupportedRoleError',
    'FeatureNotImplementedError',
]
