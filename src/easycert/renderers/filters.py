"""Jinja2 filters for the risk-assessment report.

Scenario fields come from an external model or from user input, so anything
placed in a Markdown table cell goes through ``md_cell`` first.
"""

import re
from collections.abc import Iterable
from datetime import UTC, datetime

from easycert.models.risk import RiskLevel, RiskScenario

SPANISH_MONTHS: tuple[str, ...] = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)

# Treatment-plan order: most urgent first
LEVEL_ORDER: tuple[RiskLevel, ...] = (RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW)

_WHITESPACE_RUN_RE = re.compile(r"\s+")


def md_cell(value: object) -> str:
    """Make a value safe to place inside a Markdown table cell.

    Pipes are escaped and line breaks collapsed, so one value always stays
    in one cell.

    Examples:
        >>> md_cell("Web | API")
        'Web \\\\| API'
        >>> md_cell("línea 1\\nlínea 2")
        'línea 1 línea 2'
    """
    if value is None:
        return ""
    if isinstance(value, RiskLevel):
        value = value.value
    text = _WHITESPACE_RUN_RE.sub(" ", str(value)).strip()
    return text.replace("|", "\\|")


def human_date(dt: datetime | None) -> str:
    """Format a date in long Spanish form, e.g. ``18 de octubre de 2026``."""
    if dt is None:
        return "N/A"
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return f"{dt.day} de {SPANISH_MONTHS[dt.month - 1]} de {dt.year}"


def group_by_level(
    scenarios: Iterable[RiskScenario],
) -> list[tuple[RiskLevel, list[RiskScenario]]]:
    """Group scenarios by risk level, highest level first.

    Levels with no scenarios are left out; scenario order within a level is
    preserved.
    """
    groups: dict[RiskLevel, list[RiskScenario]] = {level: [] for level in LEVEL_ORDER}
    for scenario in scenarios:
        groups[scenario.risk_level].append(scenario)
    return [(level, groups[level]) for level in LEVEL_ORDER if groups[level]]
