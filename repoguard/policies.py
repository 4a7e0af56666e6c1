"""
Desired-state policy documents.

Two JSON documents live in the policy directory:

``permissions.json``::

    {
      "exceptions": {"repositories": ["sandbox"]},
      "default": {"teams": [
        {"name": "Developers", "slug": "developers", "permission": "push"}
      ]}
    }

``visibility.json``::

    {"default": "private", "exceptions": {"repositories": ["docs"]}}

Both are loaded once and shared read-only between reconciliations.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from repoguard.exceptions import PolicyError

PERMISSIONS_FILE = "permissions.json"
VISIBILITY_FILE = "visibility.json"

VISIBILITY_VALUES = ("private", "public")


@dataclass(frozen=True)
class TeamPolicy:
    """A team that every non-excepted repository must grant access to."""

    name: str
    slug: str
    permission: str


@dataclass(frozen=True)
class AccessPolicy:
    """Team grants every repository should have, minus exempt repositories."""

    teams: tuple[TeamPolicy, ...]
    exception_repositories: frozenset[str] = frozenset()

    def is_exempt(self, repository_name: str) -> bool:
        return repository_name in self.exception_repositories

    @classmethod
    def from_dict(cls, data: Any) -> "AccessPolicy":
        """
        Build an access policy from its JSON document.

        Raises:
            PolicyError: If the document does not have the expected shape
        """
        if not isinstance(data, dict):
            raise PolicyError("Access policy must be a JSON object")

        teams_data = _get_path(data, "default", "teams", default=[])
        if not isinstance(teams_data, list):
            raise PolicyError("Access policy 'default.teams' must be a list")

        teams = []
        for index, entry in enumerate(teams_data):
            if not isinstance(entry, dict):
                raise PolicyError(f"Access policy team #{index} must be an object")
            missing = [k for k in ("name", "slug", "permission") if not entry.get(k)]
            if missing:
                raise PolicyError(
                    f"Access policy team #{index} is missing {', '.join(missing)}"
                )
            teams.append(TeamPolicy(
                name=str(entry["name"]),
                slug=str(entry["slug"]),
                permission=str(entry["permission"]),
            ))

        return cls(
            teams=tuple(teams),
            exception_repositories=_exception_set(data, "Access policy"),
        )


@dataclass(frozen=True)
class VisibilityPolicy:
    """Default repository visibility, inverted for exception repositories."""

    default: str = "private"
    exception_repositories: frozenset[str] = frozenset()

    def desired_private(self, repository_name: str) -> bool:
        """Whether the named repository should be private."""
        default_private = self.default == "private"
        excepted = repository_name in self.exception_repositories
        return default_private != excepted

    @classmethod
    def from_dict(cls, data: Any) -> "VisibilityPolicy":
        """
        Build a visibility policy from its JSON document.

        Raises:
            PolicyError: If the document does not have the expected shape
        """
        if not isinstance(data, dict):
            raise PolicyError("Visibility policy must be a JSON object")

        default = data.get("default")
        if default not in VISIBILITY_VALUES:
            raise PolicyError(
                f"Visibility policy 'default' must be one of {VISIBILITY_VALUES}, got {default!r}"
            )

        return cls(
            default=default,
            exception_repositories=_exception_set(data, "Visibility policy"),
        )


@dataclass(frozen=True)
class PolicySet:
    """The policies a reconciliation is evaluated against."""

    access: AccessPolicy
    visibility: VisibilityPolicy


def load_policies(policy_dir: str | Path) -> PolicySet:
    """
    Load both policy documents from a directory.

    Args:
        policy_dir: Directory containing permissions.json and visibility.json

    Returns:
        PolicySet with both policies

    Raises:
        PolicyError: If a document is missing, is not valid JSON, or is malformed
    """
    base = Path(policy_dir)
    return PolicySet(
        access=AccessPolicy.from_dict(_read_json(base / PERMISSIONS_FILE)),
        visibility=VisibilityPolicy.from_dict(_read_json(base / VISIBILITY_FILE)),
    )


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise PolicyError(f"Policy document not found: {path}") from e
    except json.JSONDecodeError as e:
        raise PolicyError(f"Policy document {path} is not valid JSON: {e}") from e


def _get_path(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    current: Any = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def _exception_set(data: dict[str, Any], label: str) -> frozenset[str]:
    repositories = _get_path(data, "exceptions", "repositories", default=[])
    if not isinstance(repositories, list):
        raise PolicyError(f"{label} 'exceptions.repositories' must be a list")
    return frozenset(str(name) for name in repositories)
