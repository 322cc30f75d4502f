"""EasyCert document templates.

Jinja2-based rendering of ISO 27001 documents with deterministic output.
"""

from easycert.templates.renderer import ReportRenderer, format_datetime

__all__ = ["ReportRenderer", "format_datetime"]
