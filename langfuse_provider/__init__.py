"""Langfuse provider: declarative management of Langfuse organizations, projects, keys and members."""

__version__ = "0.1.0"
