"""Packaged data files (built-in security templates)."""
