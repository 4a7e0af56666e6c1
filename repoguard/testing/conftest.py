"""
Pytest plugin for repoguard testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["repoguard.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from repoguard.testing.fixtures import (
    mock_github,
    mock_jira,
    policies,
    settings,
    signed_delivery,
)

__all__ = [
    "mock_github",
    "mock_jira",
    "policies",
    "settings",
    "signed_delivery",
]
