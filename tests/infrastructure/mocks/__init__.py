"""Mock collaborators for capture controller tests."""

from .backend_mocks import FakeBackend, wait_for_condition

__all__ = ["FakeBackend", "wait_for_condition"]
