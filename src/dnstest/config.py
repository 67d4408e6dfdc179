import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Iterator, List, Literal, Optional, Tuple
from pydantic import BaseModel, Field, ValidationError, model_validator, ConfigDict

from .artifacts import ServerArtifacts, plan
from .implementation import Config, Hickory, Implementation
from .exceptions import (
    ConfigParsingError,
    ConfigFileMissingError,
    ConfigValidationError,
)


logger = logging.getLogger(__name__)


class ServerModel(BaseModel):
    """
        Class Config-Validation Model describe one entry of `servers`
    """
    implementation: Literal["bind", "hickory", "unbound"] = Implementation.default().name
    repository: Optional[str] = None
    config: Config
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode='after')
    def check_repository(self) -> 'ServerModel':
        """ Only hickory is built from a repository, and it always is"""
        if self.implementation == Hickory.name and not self.repository:
            raise ValueError("'hickory' requires a 'repository'.")
        if self.implementation != Hickory.name and self.repository:
            raise ValueError(f"'repository' cannot be used with '{self.implementation}'.")
        return self


class HarnessModel(BaseModel):
    """
        Class Config-Validation Model desribe top-level of a harness file
    """
    name: str
    servers: Dict[str, ServerModel] = Field(default_factory=dict)
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode='after')
    def check_server_names(self) -> 'HarnessModel':
        """ Server names become directory names below the render output"""
        for name in self.servers:
            if not name or name in (".", "..") or "/" in name or "\\" in name:
                raise ValueError(f"Invalid server name '{name}': must be a single path segment.")
        return self


class HarnessConfig:
    """
    Loads and validates a harness YAML file using Pydantic models, then
    resolves every server into an `Implementation` and its `Config`.
    """
    def __init__(self, config_path: str):
        self.path = Path(config_path)
        logger.info(f"Loading harness from '{self.path}'...")
        raw_data = self._load_raw_config()

        logger.info("Validating harness structure with Pydantic...")
        try:
            self.model = HarnessModel.model_validate(raw_data)
            logger.debug(f"Harness model validated successfully: \n{self.model.model_dump_json(indent=2)}")
        except ValidationError as e:
            raise ConfigValidationError(f"Harness validation failed:\n{e}")

        self._servers: Dict[str, Tuple[Implementation, Config]] = {
            name: (self._resolve_implementation(server), server.config)
            for name, server in self.model.servers.items()
        }
        logger.info(f"Harness '{self.name}' defines {len(self._servers)} server(s).")

    def _load_raw_config(self) -> Dict[str, Any]:
        try:
            content = self.path.read_text(encoding='utf-8')
            config_data = yaml.safe_load(content)
            if not isinstance(config_data, dict):
                raise ConfigParsingError("Harness file must be a YAML document containing a dictionary.")
            logger.debug(f"Successfully parsed YAML from '{self.path}'.")
            return config_data
        except FileNotFoundError:
            raise ConfigFileMissingError(f"Harness file not found at: {self.path}")
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing YAML file: {e}")

    def _resolve_implementation(self, server: ServerModel) -> Implementation:
        repository = server.repository
        if repository and not Path(repository).is_absolute():
            # relative local checkouts are looked up next to the harness file
            candidate = self.path.parent / repository
            if candidate.exists():
                repository = str(candidate)
        return Implementation.from_name(server.implementation, repository)

    @property
    def name(self) -> str:
        return self.model.name

    @property
    def server_names(self) -> List[str]:
        return list(self._servers)

    def servers(self) -> Iterator[Tuple[str, Implementation, Config]]:
        for name, (implementation, config) in self._servers.items():
            yield name, implementation, config

    def plan(self) -> Dict[str, ServerArtifacts]:
        """Artifacts of every server, keyed by server name."""
        return {name: plan(implementation, config) for name, implementation, config in self.servers()}
