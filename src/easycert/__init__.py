"""EasyCert - ISO 27001 risk inference and assessment.

EasyCert turns an organization's security facts (information assets, threats,
vulnerabilities and existing measures) into scored, cross-referenced risk
scenarios, and renders them into a risk-assessment report.

Core principles:
- Total inference: a run always ends in a concrete scenario list
- Deterministic fallback: same facts without an LLM always give the same result
- Untrusted generator output is repaired field by field, never trusted blindly
- Scenario lists are replaced wholesale, never edited in place
"""

__version__ = "0.1.0"
__author__ = "EasyCert Contributors"
