"""Risk-assessment report rendering.

Renders an organization and its risk scenarios to Markdown using Jinja2
templates shipped with the package. Output is deterministic: the same
organization, scenarios and generation date always produce the same text.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from easycert.models.organization import Organization
from easycert.models.risk import RiskLevel, RiskScenario
from easycert.renderers.filters import group_by_level, human_date, md_cell
from easycert.risk.matrix import RISK_MATRIX

logger = logging.getLogger(__name__)

RISK_ASSESSMENT_TEMPLATE = "risk_assessment.md.j2"
DOCUMENT_VERSION = "1.0"

# Sections 4-7: one per SecurityFacts container
FACT_SECTIONS: tuple[dict[str, str], ...] = (
    {
        "field": "information_assets",
        "title": "Inventario de Activos de Información",
        "intro": "Los siguientes activos de información han sido identificados:",
        "empty": "No se han registrado activos de información.",
    },
    {
        "field": "threats",
        "title": "Amenazas Identificadas",
        "intro": "Las siguientes amenazas han sido identificadas:",
        "empty": "No se han registrado amenazas.",
    },
    {
        "field": "vulnerabilities",
        "title": "Vulnerabilidades Identificadas",
        "intro": "Las siguientes vulnerabilidades han sido identificadas:",
        "empty": "No se han registrado vulnerabilidades.",
    },
    {
        "field": "existing_measures",
        "title": "Controles Existentes",
        "intro": "Los siguientes controles ya están implementados:",
        "empty": "No se han registrado controles existentes.",
    },
)

TREATMENT_PLAN: dict[RiskLevel, dict[str, Any]] = {
    RiskLevel.HIGH: {
        "heading": "Riesgos de Nivel Alto (Prioridad Inmediata)",
        "option": "Mitigar",
        "controls_label": "Controles recomendados",
        "deadline": True,
    },
    RiskLevel.MEDIUM: {
        "heading": "Riesgos de Nivel Medio (Planificación a Corto Plazo)",
        "option": "Mitigar",
        "controls_label": "Controles recomendados",
        "deadline": True,
    },
    RiskLevel.LOW: {
        "heading": "Riesgos de Nivel Bajo (Monitoreo)",
        "option": "Aceptar/Monitorear",
        "controls_label": "Controles adicionales (opcional)",
        "deadline": False,
    },
}


def format_datetime(dt: datetime | str | None) -> str:
    """Format datetime for display in documents.

    Args:
        dt: Datetime object or ISO string

    Returns:
        Formatted date string
    """
    if dt is None:
        return "N/A"

    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt)
        except ValueError:
            return dt

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


class ReportRenderer:
    """Renders ISO 27001 risk-assessment documents to Markdown.

    Usage:
        renderer = ReportRenderer()
        markdown = renderer.render_risk_assessment(organization)
    """

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader("easycert", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._env.filters["format_datetime"] = format_datetime
        self._env.filters["human_date"] = human_date
        self._env.filters["md_cell"] = md_cell
        self._env.filters["group_by_level"] = group_by_level

    def render_risk_assessment(
        self,
        organization: Organization,
        risk_scenarios: list[RiskScenario] | None = None,
        generated_at: datetime | None = None,
    ) -> str:
        """Render the risk-assessment document for an organization.

        Args:
            organization: Organization being assessed
            risk_scenarios: Scenarios to report (the organization's own if None)
            generated_at: Document date (now if None)

        Returns:
            Rendered markdown string

        Raises:
            ValueError: If the template cannot be loaded or rendered
        """
        scenarios = organization.risk_scenarios if risk_scenarios is None else risk_scenarios
        if not scenarios:
            logger.info("No risk scenarios for %s; rendering pending assessment", organization.name)

        context = self._build_context(organization, scenarios, generated_at or datetime.now(UTC))

        try:
            template = self._env.get_template(RISK_ASSESSMENT_TEMPLATE)
            rendered = template.render(**context)
        except TemplateError as e:
            logger.error("Template rendering failed: %s", e)
            raise ValueError(f"Template rendering failed: {e}") from e

        logger.info("Rendered risk assessment (%d characters)", len(rendered))
        return rendered

    def _build_context(
        self,
        organization: Organization,
        scenarios: list[RiskScenario],
        generated_at: datetime,
    ) -> dict[str, Any]:
        facts = organization.security_facts
        return {
            "organization": organization,
            "risk_scenarios": list(scenarios),
            "generated_at": generated_at,
            "version": DOCUMENT_VERSION,
            "levels": [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH],
            "matrix": RISK_MATRIX,
            "treatment": TREATMENT_PLAN,
            "fact_sections": [
                {**section, "items": list(getattr(facts, section["field"]))}
                for section in FACT_SECTIONS
            ],
        }

    def render_to_file(
        self,
        organization: Organization,
        output_path: Path,
        risk_scenarios: list[RiskScenario] | None = None,
        generated_at: datetime | None = None,
    ) -> Path:
        """Render the risk assessment and write it to a file.

        Args:
            organization: Organization being assessed
            output_path: Path to write output file
            risk_scenarios: Scenarios to report (the organization's own if None)
            generated_at: Document date (now if None)

        Returns:
            Path to written file
        """
        content = self.render_risk_assessment(organization, risk_scenarios, generated_at)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote risk assessment to %s", output_path)

        return output_path
