"""Allow ``python -m qualityhub``."""

from .cli import app

if __name__ == "__main__":
    app()
