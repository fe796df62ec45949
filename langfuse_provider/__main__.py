"""Entry point for python -m langfuse_provider."""

from langfuse_provider.cli import app

if __name__ == "__main__":
    app()
