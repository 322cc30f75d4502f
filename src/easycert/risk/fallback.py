"""Deterministic rule-based scenario generator.

Used when no LLM is configured, or when the LLM path fails at any stage.
Reads nothing but its argument and never fails: the same facts always give
the same scenarios.

Heuristics are plain keyword tables matched as case-insensitive substrings:
- WEAKNESS_KEYWORDS in a vulnerability raise probability to Alto
- SENSITIVE_ASSET_KEYWORDS in an asset raise impact to Alto
- THREAT_CONTROLS maps a threat category to recommended controls
"""

from easycert.models.risk import RiskLevel, RiskScenario, format_scenario_id
from easycert.models.security import SecurityFacts
from easycert.risk.matrix import risk_level

MAX_FALLBACK_SCENARIOS = 5

WEAKNESS_KEYWORDS: tuple[str, ...] = ("débil", "falta", "insuficiente")

SENSITIVE_ASSET_KEYWORDS: tuple[str, ...] = ("cliente", "financier", "crítico")

# First matching key wins, in this order
THREAT_CONTROLS: dict[str, tuple[str, ...]] = {
    "malware": (
        "Implementar solución antimalware avanzada",
        "Actualizar regularmente el sistema operativo y aplicaciones",
        "Realizar escaneos de vulnerabilidades periódicos",
    ),
    "acceso no autorizado": (
        "Implementar autenticación multifactor",
        "Revisar permisos de acceso regularmente",
        "Establecer política de contraseñas robustas",
    ),
    "fuga de información": (
        "Implementar cifrado de datos sensibles",
        "Establecer controles de acceso granulares",
        "Implementar solución DLP (Prevención de Pérdida de Datos)",
    ),
    "phishing": (
        "Implementar filtrado de correo avanzado",
        "Realizar formación de concienciación en seguridad",
        "Implementar autenticación multifactor",
    ),
    "denegación de servicio": (
        "Implementar protección DDoS",
        "Configurar balanceadores de carga",
        "Establecer límites de tasa de conexión",
    ),
    "error humano": (
        "Implementar programa de concienciación en seguridad",
        "Establecer procedimientos operativos estándar",
        "Implementar controles técnicos preventivos",
    ),
}

GENERIC_CONTROLS: tuple[str, ...] = (
    "Implementar controles técnicos adecuados",
    "Establecer políticas y procedimientos",
    "Realizar revisiones periódicas",
)


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def estimate_probability(vulnerability: str) -> RiskLevel:
    """Alto for vulnerabilities describing a weakness, otherwise Medio."""
    return RiskLevel.HIGH if _contains_any(vulnerability, WEAKNESS_KEYWORDS) else RiskLevel.MEDIUM


def estimate_impact(asset: str) -> RiskLevel:
    """Alto for sensitive assets, otherwise Medio."""
    return (
        RiskLevel.HIGH if _contains_any(asset, SENSITIVE_ASSET_KEYWORDS) else RiskLevel.MEDIUM
    )


def suggest_controls(threat: str) -> list[str]:
    """Controls for the first threat category found in the label."""
    lowered = threat.lower()
    for category, controls in THREAT_CONTROLS.items():
        if category in lowered:
            return list(controls)
    return list(GENERIC_CONTROLS)


def generate_fallback_scenarios(facts: SecurityFacts) -> list[RiskScenario]:
    """Synthesize up to five scenarios from the facts.

    Scenario ``i`` pairs asset ``i`` with threat and vulnerability ``i``
    taken modulo their list lengths.

    Args:
        facts: Organization security facts

    Returns:
        Scenarios R01..R05 (fewer with fewer assets); empty if the facts
        lack assets, threats or vulnerabilities
    """
    facts = facts.normalized()
    if not facts.is_sufficient:
        return []

    assets = facts.information_assets
    threats = facts.threats
    vulnerabilities = facts.vulnerabilities

    scenarios: list[RiskScenario] = []
    for i in range(min(MAX_FALLBACK_SCENARIOS, len(assets))):
        asset = assets[i]
        threat = threats[i % len(threats)]
        vulnerability = vulnerabilities[i % len(vulnerabilities)]

        probability = estimate_probability(vulnerability)
        impact = estimate_impact(asset)

        scenarios.append(
            RiskScenario(
                id=format_scenario_id(i + 1),
                asset=asset,
                threat=threat,
                vulnerability=vulnerability,
                probability=probability,
                impact=impact,
                risk_level=risk_level(probability, impact),
                controls=suggest_controls(threat),
            )
        )

    return scenarios
