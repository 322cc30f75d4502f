"""Jinja2 filters used by the report templates."""

from easycert.renderers.filters import group_by_level, human_date, md_cell

__all__ = ["group_by_level", "human_date", "md_cell"]
