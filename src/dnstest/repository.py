import logging
from pathlib import Path

from pydantic import AnyUrl, TypeAdapter, ValidationError

from .exceptions import InvalidRepositoryError

logger = logging.getLogger(__name__)

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _is_url(value: str) -> bool:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


class Repository:
    """
    A source tree or build artifact to run, either a local path that exists
    or a well-formed URL. Validated once at construction and immutable after.
    """

    __slots__ = ("_inner",)

    def __init__(self, value: str):
        if not isinstance(value, str) or not value:
            raise InvalidRepositoryError(f"{value!r} is not a valid repository")
        if not (Path(value).exists() or _is_url(value)):
            raise InvalidRepositoryError(f"{value} is not a valid repository")
        object.__setattr__(self, "_inner", value)
        logger.debug(f"Accepted repository '{value}'")

    def as_str(self) -> str:
        return self._inner

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __str__(self) -> str:
        return self._inner

    def __repr__(self) -> str:
        return f"Repository({self._inner!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Repository):
            return NotImplemented
        return self._inner == other._inner

    def __hash__(self) -> int:
        return hash(self._inner)
