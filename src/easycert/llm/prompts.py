"""LLM prompt templates for risk scenario inference.

The prompt is a deterministic function of the security facts: the same facts
always produce the same prompt text, which keeps AI runs auditable.
"""

import json

from easycert.models.security import SecurityFacts

MIN_SCENARIOS = 7
MAX_SCENARIOS = 10

RISK_SYSTEM_PROMPT = (
    "Eres un experto en seguridad de la información y análisis de riesgos ISO 27001"
)

# Shape shown to the model; keys match RiskScenario.to_dict()
SCENARIO_EXAMPLE = {
    "id": "R01",
    "asset": "[nombre de activo específico]",
    "threat": "[nombre de amenaza específica]",
    "vulnerability": "[nombre de vulnerabilidad específica]",
    "probability": "[Alto/Medio/Bajo]",
    "impact": "[Alto/Medio/Bajo]",
    "riskLevel": "[Alto/Medio/Bajo]",
    "controls": ["control 1", "control 2", "control 3"],
}

_RULES = """Asegúrate de que:
- Cada escenario relacione un activo específico, una amenaza específica y una vulnerabilidad relevante
- El nivel de riesgo sea coherente con la probabilidad e impacto (Alto+Alto=Alto, Alto+Medio=Alto, Medio+Medio=Medio, etc.)
- Los controles sugeridos sean específicos y relevantes para la vulnerabilidad y amenaza
- Los controles tengan en cuenta las medidas existentes (no repetir lo que ya existe)
- Los controles sean realistas y efectivos según ISO 27001

IMPORTANTE: Responde únicamente con el array JSON, sin texto adicional."""


def format_bullets(items: list[str]) -> str:
    """Render labels as a bulleted list (empty string for no items)."""
    return "\n".join(f"- {item}" for item in items)


def build_risk_prompt(facts: SecurityFacts) -> str:
    """Build the user prompt asking for risk scenarios.

    Args:
        facts: Organization security facts

    Returns:
        Prompt text embedding the four fact containers
    """
    example = json.dumps([SCENARIO_EXAMPLE], ensure_ascii=False, indent=2)
    # Show "..." after the first object to signal more entries are expected
    example = example[:-2] + ",\n  ...\n]"

    sections = [
        "Como experto en seguridad de la información y análisis de riesgos ISO 27001, "
        "necesito generar escenarios de riesgo.",
        "Información disponible:",
        f"Activos de información:\n{format_bullets(facts.information_assets)}",
        f"Amenazas:\n{format_bullets(facts.threats)}",
        f"Vulnerabilidades:\n{format_bullets(facts.vulnerabilities)}",
        f"Medidas existentes:\n{format_bullets(facts.existing_measures)}",
        f"Genera {MIN_SCENARIOS}-{MAX_SCENARIOS} escenarios de riesgo "
        f"con el siguiente formato JSON:\n{example}",
        _RULES,
    ]
    return "\n\n".join(sections)
