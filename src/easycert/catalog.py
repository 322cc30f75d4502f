"""Catalog of security templates.

The catalog holds named, industry-tagged presets of security facts. Four
defaults ship with the package as YAML data; more can be registered at
runtime or loaded from a YAML file with the same layout:

    templates:
      - id: small-business
        name: "Pequeño Negocio (Genérica)"
        industry: "General"
        template:
          informationAssets: [...]
          threats: [...]
          vulnerabilities: [...]
          existingMeasures: [...]
"""

import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from easycert.models.security import SecurityTemplate

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_RESOURCE = "security_templates.yaml"


class TemplateNotFoundError(KeyError):
    """Raised when a security template id is not in the catalog."""

    def __init__(self, template_id: str) -> None:
        super().__init__(template_id)
        self.template_id = template_id

    def __str__(self) -> str:
        return f"Security template not found: {self.template_id}"


def parse_templates(data: Any, is_default: bool = False) -> list[SecurityTemplate]:
    """Build templates from parsed YAML data.

    Args:
        data: Parsed document with a top-level ``templates`` list
        is_default: Mark the templates as built-in

    Returns:
        Parsed templates in document order

    Raises:
        ValueError: If the document layout is invalid
    """
    if not isinstance(data, dict) or not isinstance(data.get("templates"), list):
        raise ValueError("Template document must contain a 'templates' list")

    templates = []
    for entry in data["templates"]:
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid template entry: {entry!r}")
        template = SecurityTemplate.from_dict(entry)
        template.is_default = is_default or template.is_default
        templates.append(template)
    return templates


def load_default_templates() -> list[SecurityTemplate]:
    """Load the built-in templates shipped with the package."""
    text = (
        resources.files("easycert.data")
        .joinpath(DEFAULT_TEMPLATES_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return parse_templates(yaml.safe_load(text), is_default=True)


def load_templates_file(path: Path) -> list[SecurityTemplate]:
    """Load templates from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document layout is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Template file not found: {path}")
    with open(path, encoding="utf-8") as f:
        return parse_templates(yaml.safe_load(f))


class TemplateCatalog:
    """Registry of security templates by id."""

    def __init__(self, templates: list[SecurityTemplate] | None = None) -> None:
        self._templates: dict[str, SecurityTemplate] = {}
        for template in templates or []:
            self.register(template)

    @classmethod
    def with_defaults(cls) -> "TemplateCatalog":
        """Create a catalog preloaded with the built-in templates."""
        catalog = cls(load_default_templates())
        logger.debug("Loaded %d default security templates", len(catalog))
        return catalog

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def register(self, template: SecurityTemplate, replace: bool = False) -> None:
        """Add a template to the catalog.

        Args:
            template: Template to add
            replace: Allow overwriting an existing id

        Raises:
            ValueError: If the id is taken and replace is False
        """
        if template.id in self._templates and not replace:
            raise ValueError(f"Security template already registered: {template.id}")
        self._templates[template.id] = template

    def get(self, template_id: str) -> SecurityTemplate:
        """Get a template by id.

        Raises:
            TemplateNotFoundError: If the id is unknown
        """
        try:
            return self._templates[template_id]
        except KeyError:
            raise TemplateNotFoundError(template_id) from None

    def find(self, template_id: str) -> SecurityTemplate | None:
        """Get a template by id, or None."""
        return self._templates.get(template_id)

    def list_templates(self) -> list[SecurityTemplate]:
        """All templates sorted by name."""
        return sorted(self._templates.values(), key=lambda t: t.name)

    def by_industry(self, industry: str) -> list[SecurityTemplate]:
        """Templates whose industry matches (case-insensitive)."""
        wanted = industry.strip().lower()
        return [t for t in self.list_templates() if t.industry.lower() == wanted]

    def remove(self, template_id: str) -> None:
        """Remove a template.

        Raises:
            TemplateNotFoundError: If the id is unknown
        """
        if template_id not in self._templates:
            raise TemplateNotFoundError(template_id)
        del self._templates[template_id]
