"""Tests for the admin configuration helpers."""

import tempfile
import unittest
from pathlib import Path

from panelkit.config import (
    DEFAULT_EXCEPTION_TEMPLATE,
    DEFAULT_LAYOUT_TEMPLATE,
    TemplatePaths,
    load_config,
    template_paths,
)
from panelkit.exceptions import ConfigurationError


class TestTemplatePaths(unittest.TestCase):
    def test_entity_override_beats_design(self) -> None:
        config = {
            "entities": {"product": {"templates": {"exception": "custom.twig"}}},
            "design": {"templates": {"exception": "design.twig"}},
        }
        self.assertEqual(template_paths(config, "product").exception, "custom.twig")

    def test_entity_exception_override_keeps_default_layout(self) -> None:
        config = {"entities": {"product": {"templates": {"exception": "custom.twig"}}}}
        self.assertEqual(
            template_paths(config, "product"),
            TemplatePaths(exception="custom.twig", layout=DEFAULT_LAYOUT_TEMPLATE),
        )

    def test_design_override_used_without_entity_override(self) -> None:
        config = {
            "entities": {"product": {"templates": {}}},
            "design": {"templates": {"exception": "design/exception.html", "layout": "design/layout.html"}},
        }
        self.assertEqual(
            template_paths(config, "product"),
            TemplatePaths("design/exception.html", "design/layout.html"),
        )

    def test_design_override_used_for_unknown_entity(self) -> None:
        config = {"design": {"templates": {"layout": "design/layout.html"}}}
        paths = template_paths(config, "category")
        self.assertEqual(paths.layout, "design/layout.html")
        self.assertEqual(paths.exception, DEFAULT_EXCEPTION_TEMPLATE)

    def test_built_in_defaults(self) -> None:
        self.assertEqual(
            template_paths({}, None),
            TemplatePaths(DEFAULT_EXCEPTION_TEMPLATE, DEFAULT_LAYOUT_TEMPLATE),
        )

    def test_null_sections_are_skipped(self) -> None:
        config = {"entities": {"product": None}, "design": {"templates": None}}
        self.assertEqual(template_paths(config, "product").exception, DEFAULT_EXCEPTION_TEMPLATE)


class TestLoadConfig(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "admin.yaml"

    def test_loads_mapping(self) -> None:
        self.path.write_text(
            "design:\n  templates:\n    layout: my/layout.html\n",
            encoding="utf-8",
        )
        config = load_config(self.path)
        self.assertEqual(template_paths(config).layout, "my/layout.html")

    def test_empty_file_is_empty_mapping(self) -> None:
        self.path.write_text("", encoding="utf-8")
        self.assertEqual(load_config(str(self.path)), {})

    def test_non_mapping_raises(self) -> None:
        self.path.write_text("- a\n- b\n", encoding="utf-8")
        with self.assertRaises(ConfigurationError):
            load_config(self.path)

    def test_invalid_yaml_raises(self) -> None:
        self.path.write_text("design: [unclosed\n", encoding="utf-8")
        with self.assertRaises(ConfigurationError):
            load_config(self.path)


if __name__ == "__main__":
    unittest.main()
