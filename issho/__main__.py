"""
Entry point for ``python -m issho``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
