"""
Config template loading and rendering.

Templates ship as package resources and are rendered with Jinja2. Rendering
is strict: a parameter the template uses but the caller did not pass is an
error rather than an empty string.
"""

import logging
from functools import lru_cache
from importlib import resources
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

from . import constants
from .exceptions import TemplateError

logger = logging.getLogger(__name__)

_ENV = Environment(undefined=StrictUndefined, keep_trailing_newline=True)


@lru_cache(maxsize=None)
def load_template(name: str) -> str:
    """Reads a bundled template source by file name."""
    try:
        source = resources.files(constants.TEMPLATES_PACKAGE).joinpath(name).read_text(encoding='utf-8')
    except FileNotFoundError:
        raise TemplateError(f"Config template '{name}' not found.")
    logger.debug(f"Loaded template '{name}' ({len(source)} bytes)")
    return source


def render(source: str, **params: Any) -> str:
    """Renders a template source with the given named parameters."""
    try:
        return _ENV.from_string(source).render(**params)
    except UndefinedError as e:
        raise TemplateError(f"Missing template parameter: {e}")
    except TemplateSyntaxError as e:
        raise TemplateError(f"Invalid template at line {e.lineno}: {e.message}")


def render_named(name: str, **params: Any) -> str:
    """Loads a bundled template and renders it."""
    logger.debug(f"Rendering '{name}' with {sorted(params)}")
    return render(load_template(name), **params)
