"""CLI entry point.

Allows running the CLI as a module: python -m paperrank.cli
"""

from paperrank.cli import app

if __name__ == "__main__":
    app()
