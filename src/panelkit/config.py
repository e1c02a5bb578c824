"""Admin configuration loading and error page template lookup."""

import logging
from pathlib import Path
from typing import Any, Mapping, NamedTuple, Optional, Union

import yaml

from panelkit.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_EXCEPTION_TEMPLATE = "@admin/default/exception.html"
DEFAULT_LAYOUT_TEMPLATE = "@admin/default/layout.html"


class TemplatePaths(NamedTuple):
    exception: str
    layout: str


def _lookup(config: Optional[Mapping[str, Any]], *keys: str) -> Any:
    current: Any = config
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def template_paths(config: Mapping[str, Any], entity_name: Optional[str] = None) -> TemplatePaths:
    """Pick the error page templates for *entity_name*.

    Each template is taken from the entity's ``templates`` section, then from
    ``design.templates``, then from the built-in defaults.

    Examples:
        >>> config = {"entities": {"product": {"templates": {"exception": "custom.html"}}}}
        >>> template_paths(config, "product")
        TemplatePaths(exception='custom.html', layout='@admin/default/layout.html')
        >>> template_paths({}, None).exception
        '@admin/default/exception.html'
    """
    entity_config = _lookup(config, "entities", entity_name) if entity_name is not None else None

    def pick(key: str, default: str) -> str:
        for candidate in (
            _lookup(entity_config, "templates", key),
            _lookup(config, "design", "templates", key),
        ):
            if candidate is not None:
                return candidate
        return default

    return TemplatePaths(
        exception=pick("exception", DEFAULT_EXCEPTION_TEMPLATE),
        layout=pick("layout", DEFAULT_LAYOUT_TEMPLATE),
    )


def load_config(path: Union[str, Path]) -> dict:
    """Read the admin configuration mapping from a YAML file.

    Raises:
        ConfigurationError: If the file is not valid YAML or its top level
            is not a mapping.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        logger.debug("Configuration file %s is empty", path)
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"The admin configuration in {path} must be a mapping, got {type(data).__name__}"
        )
    return data
