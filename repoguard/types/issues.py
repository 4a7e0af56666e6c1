"""Issue tracker data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Issue:
    """A created Jira issue."""

    issue_id: str
    key: str
    url: str  # API self link
