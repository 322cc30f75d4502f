"""Entry point for running EasyCert as a module.

Usage:
    python -m easycert [command] [options]

Example:
    python -m easycert infer facts.yaml --json
    python -m easycert check
"""

from easycert.cli import app

if __name__ == "__main__":
    app()
