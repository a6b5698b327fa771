"""GitHub REST API client for pull-request data retrieval."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

import requests

from . import __version__
from .config import Config
from .credentials import CredentialStore
from .errors import MissingCredentialError, UpstreamError
from .models import (
    ISSUE_COMMENT,
    REVIEW_COMMENT,
    UNKNOWN_LOGIN,
    Assignee,
    BranchRef,
    CheckApp,
    CheckRunRecord,
    CommentRecord,
    Label,
    Milestone,
    PullRequestRecord,
    Reviewer,
    StatusRecord,
    Team,
    UserRef,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse GitHub ISO8601 timestamps into timezone-aware datetimes."""
    if not value:
        return None

    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def merge_comments(
    issue_comments: Iterable[CommentRecord],
    review_comments: Iterable[CommentRecord],
) -> List[CommentRecord]:
    """Merge both comment sources into one stream ordered by creation time.

    ``sorted`` is stable, so comments sharing a timestamp keep their
    concatenation order: discussion comments before review comments.
    """
    combined = [*issue_comments, *review_comments]
    return sorted(combined, key=lambda comment: parse_timestamp(comment.created_at) or _EPOCH)


class GitHubClient:
    """Read-only client for GitHub pull requests, comments and CI state.

    The client never stores a token itself. Each public operation reads the
    current token from the shared ``CredentialStore`` once, up front, and uses
    that value for every request the operation issues.
    """

    _API_VERSION = "2022-11-28"
    _PAGE_SIZE = 100

    def __init__(self, config: Config, credentials: CredentialStore) -> None:
        """Initialize a GitHub API client.

        Args:
            config: Validated runtime configuration (API URL, timeout).
            credentials: Shared token cell consulted before every operation.
        """
        self._credentials = credentials
        self._base_url = config.api_url.rstrip("/")
        self._timeout_seconds = config.timeout_seconds

        self._session = self._new_session()

    def _new_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self._API_VERSION,
                "User-Agent": f"github-pr-bridge/{__version__}",
            }
        )
        return session

    def _require_token(self) -> str:
        token = self._credentials.token
        if not token:
            raise MissingCredentialError(
                "GitHub token not available. Set the GITHUB_TOKEN environment variable "
                "or call the set-credential tool."
            )
        return token

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def _error_detail(self, response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return response.text

    def _request(
        self,
        url: str,
        token: str,
        params: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
    ) -> requests.Response:
        """Execute a single authenticated GET.

        Raises:
            UpstreamError: On transport failure or HTTP >= 400.
        """
        try:
            response = (session or self._session).get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise UpstreamError(f"GitHub request failed: GET {url}: {exc}") from exc

        if response.status_code >= 400:
            raise UpstreamError(
                "GitHub API request failed: "
                f"GET {url} returned {response.status_code} - {self._error_detail(response)}",
                status_code=response.status_code,
            )
        return response

    def _decode(self, response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"GitHub API returned invalid JSON: GET {url}") from exc

    def _get_json(self, path: str, token: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = self._build_url(path)
        payload = self._decode(self._request(url, token, params=params), url)
        if not isinstance(payload, dict):
            raise UpstreamError(f"GitHub API returned unexpected payload shape: GET {url}")
        return payload

    def _paginate(
        self,
        path: str,
        token: str,
        params: Optional[Dict[str, Any]] = None,
        items_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> List[Dict[str, Any]]:
        """Collect every page of a list endpoint by following ``Link: rel="next"``.

        ``items_key`` names the wrapping field for endpoints that return an
        object instead of a bare list (check runs).
        """
        url: Optional[str] = self._build_url(path)
        query: Optional[Dict[str, Any]] = dict(params or {})
        query["per_page"] = self._PAGE_SIZE
        items: List[Dict[str, Any]] = []

        while url:
            response = self._request(url, token, params=query, session=session)
            payload = self._decode(response, url)

            if items_key is not None:
                page = payload.get(items_key) if isinstance(payload, dict) else None
            else:
                page = payload
            if not isinstance(page, list):
                raise UpstreamError(f"GitHub API returned unexpected payload shape: GET {url}")
            items.extend(page)

            # The next link already carries the query string.
            url = (response.links or {}).get("next", {}).get("url")
            query = None

        return items

    def _to_user(self, item: Optional[Dict[str, Any]]) -> UserRef:
        user = item or {}
        return UserRef(
            login=user.get("login") or UNKNOWN_LOGIN,
            avatar_url=user.get("avatar_url") or "",
            html_url=user.get("html_url") or "",
        )

    def _to_label(self, item: Any) -> Label:
        if isinstance(item, str):
            return Label(name=item)
        return Label(
            name=item.get("name") or "",
            color=item.get("color") or "",
            description=item.get("description") or None,
        )

    def _to_branch(self, item: Optional[Dict[str, Any]]) -> BranchRef:
        branch = item or {}
        return BranchRef(ref=branch.get("ref") or "", sha=branch.get("sha") or "")

    def _to_pull_request(self, item: Dict[str, Any]) -> PullRequestRecord:
        milestone = item.get("milestone")
        merged_at = item.get("merged_at")
        merged = item.get("merged")

        return PullRequestRecord(
            number=int(item["number"]),
            title=item.get("title") or "",
            state=item.get("state") or "",
            merged=bool(merged) if merged is not None else merged_at is not None,
            created_at=item.get("created_at") or "",
            updated_at=item.get("updated_at") or "",
            closed_at=item.get("closed_at"),
            merged_at=merged_at,
            draft=bool(item.get("draft") or False),
            user=self._to_user(item.get("user")),
            assignees=tuple(
                Assignee(login=a.get("login") or UNKNOWN_LOGIN, avatar_url=a.get("avatar_url") or "")
                for a in item.get("assignees") or []
            ),
            labels=tuple(self._to_label(label) for label in item.get("labels") or []),
            milestone=(
                Milestone(title=milestone.get("title") or "", state=milestone.get("state") or "")
                if milestone
                else None
            ),
            head=self._to_branch(item.get("head")),
            base=self._to_branch(item.get("base")),
            html_url=item.get("html_url") or "",
            body=item.get("body"),
            comments=int(item.get("comments") or 0),
            review_comments=int(item.get("review_comments") or 0),
            commits=int(item.get("commits") or 0),
            additions=int(item.get("additions") or 0),
            deletions=int(item.get("deletions") or 0),
            changed_files=int(item.get("changed_files") or 0),
            mergeable=item.get("mergeable"),
            mergeable_state=item.get("mergeable_state"),
            requested_reviewers=tuple(
                Reviewer(login=r if isinstance(r, str) else r.get("login") or UNKNOWN_LOGIN)
                for r in item.get("requested_reviewers") or []
            ),
            requested_teams=tuple(Team(name=t.get("name") or "") for t in item.get("requested_teams") or []),
        )

    def _to_comment(self, item: Dict[str, Any], source: str) -> CommentRecord:
        return CommentRecord(
            id=int(item["id"]),
            user=self._to_user(item.get("user")),
            body=item.get("body") or "",
            created_at=item.get("created_at") or "",
            updated_at=item.get("updated_at") or "",
            html_url=item.get("html_url") or "",
            source=source,
        )

    def _to_check_run(self, item: Dict[str, Any]) -> CheckRunRecord:
        app = item.get("app")
        return CheckRunRecord(
            id=int(item["id"]),
            name=item.get("name") or "",
            status=item.get("status") or "",
            conclusion=item.get("conclusion"),
            started_at=item.get("started_at"),
            completed_at=item.get("completed_at"),
            html_url=item.get("html_url"),
            app=CheckApp(name=app.get("name") or "") if app else None,
        )

    def _to_status(self, item: Dict[str, Any]) -> StatusRecord:
        return StatusRecord(
            state=item.get("state") or "",
            context=item.get("context") or "",
            created_at=item.get("created_at") or "",
            description=item.get("description"),
            target_url=item.get("target_url"),
        )

    def get_pull_request(self, owner: str, repo: str, number: int, token: Optional[str] = None) -> PullRequestRecord:
        """Fetch and normalize the full detail record of one pull request."""
        token = token or self._require_token()
        payload = self._get_json(f"repos/{owner}/{repo}/pulls/{number}", token)
        return self._to_pull_request(payload)

    def list_pull_requests(self, owner: str, repo: str, state: str = "all") -> List[PullRequestRecord]:
        """List pull requests with full detail, most recently updated first.

        The summary listing lacks counters and mergeability, so every listed
        pull request is fetched again individually, one at a time in listing
        order.
        """
        token = self._require_token()
        logger.info(
            "Fetching pull requests",
            extra={"repository": f"{owner}/{repo}", "state": state},
        )

        summaries = self._paginate(
            f"repos/{owner}/{repo}/pulls",
            token,
            params={"state": state, "sort": "updated", "direction": "desc"},
        )
        logger.info(
            "Fetched pull request summaries",
            extra={"repository": f"{owner}/{repo}", "count": len(summaries)},
        )

        return [self.get_pull_request(owner, repo, int(summary["number"]), token=token) for summary in summaries]

    def get_pull_request_comments(self, owner: str, repo: str, number: int) -> List[CommentRecord]:
        """Return discussion and inline review comments as one chronological list."""
        token = self._require_token()

        issue_comments = self._paginate(f"repos/{owner}/{repo}/issues/{number}/comments", token)
        review_comments = self._paginate(f"repos/{owner}/{repo}/pulls/{number}/comments", token)

        return merge_comments(
            (self._to_comment(item, ISSUE_COMMENT) for item in issue_comments),
            (self._to_comment(item, REVIEW_COMMENT) for item in review_comments),
        )

    def list_check_runs(
        self,
        owner: str,
        repo: str,
        ref: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> List[CheckRunRecord]:
        token = token or self._require_token()
        items = self._paginate(
            f"repos/{owner}/{repo}/commits/{ref}/check-runs",
            token,
            items_key="check_runs",
            session=session,
        )
        return [self._to_check_run(item) for item in items]

    def list_statuses(
        self,
        owner: str,
        repo: str,
        ref: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> List[StatusRecord]:
        token = token or self._require_token()
        items = self._paginate(f"repos/{owner}/{repo}/commits/{ref}/statuses", token, session=session)
        return [self._to_status(item) for item in items]

    def _tolerant(self, label: str, ref: str, fetch: Callable[[requests.Session], List[T]]) -> List[T]:
        """Run ``fetch`` on its own session; any failure yields an empty list."""
        session = self._new_session()
        try:
            return fetch(session)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Ignoring failed CI fetch",
                extra={
                    "resource": label,
                    "ref": ref,
                    "status_code": getattr(exc, "status_code", None),
                    "error": f"{type(exc).__name__}: {exc}",
                },
            )
            return []
        finally:
            session.close()

    def get_ci_state(self, owner: str, repo: str, ref: str) -> Tuple[List[CheckRunRecord], List[StatusRecord]]:
        """Fetch check runs and commit statuses for ``ref`` concurrently.

        Both requests are in flight together and joined before returning. A
        failure on either side, including a malformed item, yields an empty
        list for that side only.
        """
        token = self._require_token()

        with ThreadPoolExecutor(max_workers=2) as executor:
            check_runs_future = executor.submit(
                self._tolerant,
                "check_runs",
                ref,
                lambda session: self.list_check_runs(owner, repo, ref, token=token, session=session),
            )
            statuses_future = executor.submit(
                self._tolerant,
                "statuses",
                ref,
                lambda session: self.list_statuses(owner, repo, ref, token=token, session=session),
            )
            return check_runs_future.result(), statuses_future.result()
