"""Tool catalog and handlers exposed through the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping

from .aggregation import VALID_STATES, collect_pull_requests
from .credentials import CredentialStore
from .errors import InvalidArgumentsError, NotFoundError
from .github_client import GitHubClient


@dataclass(frozen=True)
class ToolContext:
    """Per-dispatcher state handed to every handler call."""

    credentials: CredentialStore
    client: GitHubClient


Handler = Callable[[ToolContext, Mapping[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class ToolSpec:
    """A named tool with its input schema and handler."""

    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: Handler

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def _require(arguments: Mapping[str, Any], name: str) -> Any:
    value = arguments.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidArgumentsError(f"Missing required argument: {name}")
    return value


def _require_str(arguments: Mapping[str, Any], name: str) -> str:
    return str(_require(arguments, name)).strip()


def _require_int(arguments: Mapping[str, Any], name: str) -> int:
    value = _require(arguments, name)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidArgumentsError(f"Invalid value for '{name}': expected an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentsError(f"Invalid value for '{name}': expected an integer.") from exc


def _optional_bool(arguments: Mapping[str, Any], name: str, default: bool = False) -> bool:
    """Read a boolean flag, falling back to ``default`` for malformed values."""
    value = arguments.get(name)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return default


def _optional_state(arguments: Mapping[str, Any]) -> str:
    value = arguments.get("state")
    if isinstance(value, str) and value in VALID_STATES:
        return value
    return "all"


def set_credential(context: ToolContext, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    token = _require_str(arguments, "token")
    context.credentials.initialize(token)
    return {"message": "GitHub token set successfully", "ready": context.credentials.is_ready()}


def list_pull_requests(context: ToolContext, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    owner = _require_str(arguments, "owner")
    repo = _require_str(arguments, "repo")
    state = _optional_state(arguments)

    pull_requests = collect_pull_requests(
        context.client,
        owner,
        repo,
        state=state,
        include_comments=_optional_bool(arguments, "include_comments"),
        include_checks=_optional_bool(arguments, "include_checks"),
    )

    return {
        "repository": f"{owner}/{repo}",
        "total_count": len(pull_requests),
        "state_filter": state,
        "pull_requests": [pr.to_dict() for pr in pull_requests],
    }


def get_pr_comments(context: ToolContext, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    owner = _require_str(arguments, "owner")
    repo = _require_str(arguments, "repo")
    pull_number = _require_int(arguments, "pull_number")

    comments = context.client.get_pull_request_comments(owner, repo, pull_number)

    return {
        "repository": f"{owner}/{repo}",
        "pull_request": pull_number,
        "total_comments": len(comments),
        "comments": [comment.to_dict() for comment in comments],
    }


def get_pr_checks(context: ToolContext, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Locate the pull request in the full listing and report CI for its head commit."""
    owner = _require_str(arguments, "owner")
    repo = _require_str(arguments, "repo")
    pull_number = _require_int(arguments, "pull_number")

    pull_requests = context.client.list_pull_requests(owner, repo, "all")
    pr = next((candidate for candidate in pull_requests if candidate.number == pull_number), None)
    if pr is None:
        raise NotFoundError(f"Pull request #{pull_number} not found")

    check_runs, statuses = context.client.get_ci_state(owner, repo, pr.head.sha)

    return {
        "repository": f"{owner}/{repo}",
        "pull_request": pull_number,
        "head_sha": pr.head.sha,
        "check_runs": [run.to_dict() for run in check_runs],
        "statuses": [status.to_dict() for status in statuses],
    }


_OWNER = {"type": "string", "description": "Repository owner (user or organization)"}
_REPO = {"type": "string", "description": "Repository name"}
_PULL_NUMBER = {"type": "number", "description": "Pull request number"}


def build_catalog() -> List[ToolSpec]:
    """Return the fixed tool catalog in presentation order."""
    return [
        ToolSpec(
            name="set-credential",
            description="Set the GitHub personal access token for authentication",
            input_schema={
                "type": "object",
                "properties": {
                    "token": {"type": "string", "description": "GitHub personal access token"},
                },
                "required": ["token"],
            },
            handler=set_credential,
        ),
        ToolSpec(
            name="list-pull-requests",
            description=(
                "List all pull requests in a repository with full details including creator, "
                "labels, and optionally comments and pipeline status"
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "owner": _OWNER,
                    "repo": _REPO,
                    "state": {
                        "type": "string",
                        "enum": list(VALID_STATES),
                        "description": "State of pull requests to fetch (default: all)",
                        "default": "all",
                    },
                    "include_comments": {
                        "type": "boolean",
                        "description": "Include all comments for each PR (may slow down the request)",
                        "default": False,
                    },
                    "include_checks": {
                        "type": "boolean",
                        "description": "Include CI/CD check runs and status for each PR",
                        "default": False,
                    },
                },
                "required": ["owner", "repo"],
            },
            handler=list_pull_requests,
        ),
        ToolSpec(
            name="get-pr-comments",
            description="Get all comments (issue comments and review comments) for a specific pull request",
            input_schema={
                "type": "object",
                "properties": {"owner": _OWNER, "repo": _REPO, "pull_number": _PULL_NUMBER},
                "required": ["owner", "repo", "pull_number"],
            },
            handler=get_pr_comments,
        ),
        ToolSpec(
            name="get-pr-checks",
            description="Get CI/CD check runs and status for a specific pull request",
            input_schema={
                "type": "object",
                "properties": {"owner": _OWNER, "repo": _REPO, "pull_number": _PULL_NUMBER},
                "required": ["owner", "repo", "pull_number"],
            },
            handler=get_pr_checks,
        ),
    ]
