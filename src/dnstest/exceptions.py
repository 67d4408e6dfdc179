class DNSTestError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to loading and parsing the harness file ---
class ConfigurationError(DNSTestError):
    """Base class for errors encountered while finding, reading, or parsing harness files."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when the harness file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML harness file is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when the harness file fails structural validation (e.g., Pydantic)."""

    pass


# --- 2. Errors related to the definitions handed to the dispatcher ---
class DefinitionError(DNSTestError):
    """Base class for errors in the logical definition of a server."""

    pass


class InvalidRepositoryError(DefinitionError, ValueError):
    """Raised when a repository is neither an existing local path nor a well-formed URL."""

    pass


# --- 3. Errors that occur while producing artifacts ---
class ArtifactError(DNSTestError):
    """Base class for errors that occur during the generation of server artifacts."""

    pass


class TemplateError(ArtifactError):
    """Raised when a config template is missing or cannot be rendered."""

    pass


class UnsupportedFeatureError(ArtifactError):
    """Raised when a requested feature is not supported."""

    pass


class UnsupportedRoleError(UnsupportedFeatureError):
    """Raised when an implementation cannot act in the requested role."""

    pass


class FeatureNotImplementedError(UnsupportedFeatureError, NotImplementedError):
    """Raised when an artifact is not yet defined for an implementation."""

    pass
