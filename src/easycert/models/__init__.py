"""EasyCert data models.

This module exports all core entities used throughout the application:
- RiskLevel: Low/Medium/High severity scale
- RiskScenario: Scored asset/threat/vulnerability tuple with controls
- SecurityFacts: Assets, threats, vulnerabilities and existing measures
- SecurityTemplate: Industry preset of SecurityFacts
- Organization: Organization with its facts and inferred scenarios
- LLMConfig: Text-generation backend configuration
"""

from easycert.models.llm_config import LLMConfig
from easycert.models.organization import Organization
from easycert.models.risk import RiskLevel, RiskScenario
from easycert.models.security import (
    SecurityFacts,
    SecurityTemplate,
    merge_security_facts,
)

__all__ = [
    "LLMConfig",
    "Organization",
    "RiskLevel",
    "RiskScenario",
    "SecurityFacts",
    "SecurityTemplate",
    "merge_security_facts",
]
