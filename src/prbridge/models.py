"""Domain models for GitHub pull-request data returned by the bridge.

Every record is an immutable snapshot built fresh for a single tool call.
Sequence fields are tuples so records can be shared and compared safely.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

UNKNOWN_LOGIN = "unknown"

ISSUE_COMMENT = "issue"
REVIEW_COMMENT = "review"


@dataclass(frozen=True, slots=True)
class UserRef:
    """Author of a pull request or comment."""

    login: str
    avatar_url: str = ""
    html_url: str = ""


@dataclass(frozen=True, slots=True)
class Assignee:
    login: str
    avatar_url: str = ""


@dataclass(frozen=True, slots=True)
class Label:
    """Label triple; upstream bare-string labels normalize to ``color=""``."""

    name: str
    color: str = ""
    description: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Milestone:
    title: str
    state: str


@dataclass(frozen=True, slots=True)
class BranchRef:
    """A branch name paired with the commit it points at."""

    ref: str
    sha: str


@dataclass(frozen=True, slots=True)
class Reviewer:
    login: str


@dataclass(frozen=True, slots=True)
class Team:
    name: str


@dataclass(frozen=True, slots=True)
class CommentRecord:
    """A single pull-request comment from either comment source.

    ``source`` is ``"issue"`` for general discussion comments and ``"review"``
    for inline code-review comments.
    """

    id: int
    user: UserRef
    body: str
    created_at: str
    updated_at: str
    html_url: str
    source: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["user"] = {"login": self.user.login, "avatar_url": self.user.avatar_url}
        return data


@dataclass(frozen=True, slots=True)
class CheckApp:
    name: str


@dataclass(frozen=True, slots=True)
class CheckRunRecord:
    """A CI check run attached to a commit."""

    id: int
    name: str
    status: str
    conclusion: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    html_url: Optional[str] = None
    app: Optional[CheckApp] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class StatusRecord:
    """A legacy commit status. Several records may share a ``context``."""

    state: str
    context: str
    created_at: str
    description: Optional[str] = None
    target_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class PullRequestRecord:
    """Full pull-request detail, optionally enriched with comments and CI state.

    The enrichment fields stay ``None`` unless the caller asked for them, and
    ``to_dict`` omits them entirely in that case.
    """

    number: int
    title: str
    state: str
    merged: bool
    created_at: str
    updated_at: str
    closed_at: Optional[str]
    merged_at: Optional[str]
    draft: bool
    user: UserRef
    assignees: Tuple[Assignee, ...]
    labels: Tuple[Label, ...]
    milestone: Optional[Milestone]
    head: BranchRef
    base: BranchRef
    html_url: str
    body: Optional[str]
    comments: int
    review_comments: int
    commits: int
    additions: int
    deletions: int
    changed_files: int
    mergeable: Optional[bool]
    mergeable_state: Optional[str]
    requested_reviewers: Tuple[Reviewer, ...]
    requested_teams: Tuple[Team, ...]
    comments_list: Optional[Tuple[CommentRecord, ...]] = None
    check_runs: Optional[Tuple[CheckRunRecord, ...]] = None
    statuses: Optional[Tuple[StatusRecord, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.comments_list is None:
            del data["comments_list"]
        else:
            data["comments_list"] = [comment.to_dict() for comment in self.comments_list]
        if self.check_runs is None:
            del data["check_runs"]
        if self.statuses is None:
            del data["statuses"]
        return data
