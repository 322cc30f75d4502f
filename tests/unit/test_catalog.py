"""Unit tests for the security-template catalog."""

from pathlib import Path

import pytest

from easycert.catalog import (
    TemplateCatalog,
    TemplateNotFoundError,
    load_default_templates,
    load_templates_file,
    parse_templates,
)
from easycert.models import SecurityFacts, SecurityTemplate

DEFAULT_IDS = {"software-development", "ecommerce", "consulting", "small-business"}


class TestDefaultTemplates:
    """Tests for the built-in templates."""

    def test_four_defaults(self) -> None:
        """Test the packaged YAML holds the four presets."""
        templates = load_default_templates()
        assert {t.id for t in templates} == DEFAULT_IDS
        assert all(t.is_default for t in templates)

    def test_defaults_are_sufficient(self) -> None:
        """Test each preset alone is enough to infer scenarios."""
        for template in load_default_templates():
            assert template.facts.is_sufficient, template.id
            assert template.facts.existing_measures, template.id

    def test_small_business_content(self) -> None:
        """Test one preset's content in detail."""
        catalog = TemplateCatalog.with_defaults()
        template = catalog.get("small-business")
        assert template.industry == "General"
        assert template.facts.threats[0] == "Malware"
        assert "Contraseñas débiles" in template.facts.vulnerabilities


class TestParseTemplates:
    """Tests for parse_templates() and file loading."""

    def test_invalid_document(self) -> None:
        """Test a document without a templates list raises."""
        with pytest.raises(ValueError, match="'templates' list"):
            parse_templates({"items": []})

    def test_invalid_entry(self) -> None:
        """Test a non-mapping entry raises."""
        with pytest.raises(ValueError, match="Invalid template entry"):
            parse_templates({"templates": ["nope"]})

    def test_load_file(self, tmp_path: Path) -> None:
        """Test loading user templates from YAML."""
        path = tmp_path / "templates.yaml"
        path.write_text(
            "templates:\n"
            "  - id: clinic\n"
            "    name: Clínica\n"
            "    industry: Salud\n"
            "    template:\n"
            "      informationAssets: [Historias clínicas]\n",
            encoding="utf-8",
        )
        [template] = load_templates_file(path)
        assert template.id == "clinic"
        assert template.facts.information_assets == ["Historias clínicas"]
        assert template.is_default is False

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_templates_file(tmp_path / "missing.yaml")


class TestTemplateCatalog:
    """Tests for TemplateCatalog."""

    @pytest.fixture
    def catalog(self) -> TemplateCatalog:
        """Return a catalog with the defaults."""
        return TemplateCatalog.with_defaults()

    def test_len_and_contains(self, catalog: TemplateCatalog) -> None:
        """Test size and membership."""
        assert len(catalog) == 4
        assert "ecommerce" in catalog
        assert "unknown" not in catalog

    def test_get_unknown_raises(self, catalog: TemplateCatalog) -> None:
        """Test get() raises a KeyError subclass."""
        with pytest.raises(TemplateNotFoundError) as exc_info:
            catalog.get("unknown")
        assert isinstance(exc_info.value, KeyError)
        assert str(exc_info.value) == "Security template not found: unknown"

    def test_find_unknown_returns_none(self, catalog: TemplateCatalog) -> None:
        """Test find() returns None."""
        assert catalog.find("unknown") is None

    def test_list_sorted_by_name(self, catalog: TemplateCatalog) -> None:
        """Test templates are listed by name."""
        names = [t.name for t in catalog.list_templates()]
        assert names == sorted(names)

    def test_by_industry(self, catalog: TemplateCatalog) -> None:
        """Test industry filtering is case-insensitive."""
        [template] = catalog.by_industry(" tecnología ")
        assert template.id == "software-development"
        assert catalog.by_industry("Minería") == []

    def test_register_and_remove(self, catalog: TemplateCatalog) -> None:
        """Test adding and removing a custom template."""
        custom = SecurityTemplate(
            id="clinic", name="Clínica", industry="Salud", facts=SecurityFacts(["Historias"])
        )
        catalog.register(custom)
        assert catalog.get("clinic") is custom

        catalog.remove("clinic")
        assert "clinic" not in catalog

    def test_register_duplicate_raises(self, catalog: TemplateCatalog) -> None:
        """Test ids cannot be silently overwritten."""
        duplicate = SecurityTemplate(id="ecommerce", name="Otra", industry="X")
        with pytest.raises(ValueError, match="already registered"):
            catalog.register(duplicate)

        catalog.register(duplicate, replace=True)
        assert catalog.get("ecommerce").name == "Otra"

    def test_remove_unknown_raises(self, catalog: TemplateCatalog) -> None:
        """Test removing an unknown id raises."""
        with pytest.raises(TemplateNotFoundError):
            catalog.remove("unknown")
