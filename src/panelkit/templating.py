"""Jinja2 environment serving the bundled and application templates."""

from typing import Any, Iterable, Mapping, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, PrefixLoader, select_autoescape

TEMPLATE_NAMESPACE = "@admin"


def create_environment(search_paths: Iterable[str] = ()) -> Environment:
    """Build an environment where ``@admin/...`` names the packaged templates."""
    return Environment(
        loader=ChoiceLoader(
            [
                PrefixLoader({TEMPLATE_NAMESPACE: PackageLoader("panelkit", "templates")}),
                FileSystemLoader([str(p) for p in search_paths]),
            ]
        ),
        autoescape=select_autoescape(["html", "htm", "xml", "twig"]),
    )


class TemplateEngine:
    """Renders templates by path with a mapping of variables."""

    def __init__(self, environment: Optional[Environment] = None, search_paths: Iterable[str] = ()) -> None:
        self.environment = environment if environment is not None else create_environment(search_paths)

    def render(self, template_path: str, variables: Optional[Mapping[str, Any]] = None) -> str:
        template = self.environment.get_template(template_path)
        return template.render(**dict(variables or {}))
