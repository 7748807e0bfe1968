"""Test helpers shared by the suite."""

from shared.testing.environment import apply_required_test_environment

__all__ = ["apply_required_test_environment"]
