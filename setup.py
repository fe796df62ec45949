"""Package setup for langfuse-provider."""

from setuptools import setup, find_packages

setup(
    name="langfuse-provider",
    version="0.1.0",
    description="Declarative management of Langfuse organizations, projects, API keys and memberships",
    packages=find_packages(include=["langfuse_provider", "langfuse_provider.*"]),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.24.0",
        "pydantic>=2.0.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0", "fastapi>=0.100.0"],
    },
    entry_points={
        "console_scripts": [
            "langfuse-provider=langfuse_provider.cli:app",
        ],
    },
)
