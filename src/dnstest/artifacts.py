from typing import List, Optional
import logging

from pydantic import BaseModel, ConfigDict

from .implementation import Config, Implementation, Role
from .exceptions import FeatureNotImplementedError

logger = logging.getLogger(__name__)


class ServerArtifacts(BaseModel):
    """
        Class represents everything a supervisor needs to start one server.
    """
    model_config = ConfigDict(frozen=True)

    implementation: str
    role: Role
    conf_file_path: str
    config_text: str
    cmd_args: List[str]
    pidfile: Optional[str] = None


def plan(implementation: Implementation, config: Config) -> ServerArtifacts:
    """
    Collects the artifacts of `implementation` running with `config`.

    An unsupported role raises. A pidfile that is not defined for the
    implementation is recorded as None, the supervisor then has to track
    the process itself.
    """
    role = config.role
    config_text = implementation.format_config(config)
    cmd_args = implementation.cmd_args(role)

    try:
        pidfile = implementation.pidfile(role)
    except FeatureNotImplementedError as e:
        logger.warning(f"[{implementation}] {e}")
        pidfile = None

    artifacts = ServerArtifacts(
        implementation=str(implementation),
        role=role,
        conf_file_path=implementation.conf_file_path(role),
        config_text=config_text,
        cmd_args=cmd_args,
        pidfile=pidfile,
    )
    logger.debug(f"[{implementation}] Planned {role}: {' '.join(cmd_args)}")
    return artifacts
