"""Shared testing helpers for the quizdrill test suite."""

from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "WorkspaceBuilder",
    "build_tree",
]
