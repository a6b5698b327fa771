"""Tests for pull-request enrichment and state filtering."""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prbridge.aggregation import collect_pull_requests, filter_by_state
from prbridge.errors import UpstreamError
from prbridge.models import (
    BranchRef,
    CheckRunRecord,
    CommentRecord,
    PullRequestRecord,
    StatusRecord,
    UserRef,
)


def _record(number: int, state: str = "open", merged: bool = False) -> PullRequestRecord:
    return PullRequestRecord(
        number=number,
        title=f"PR {number}",
        state=state,
        merged=merged,
        created_at="2026-01-01T00:00:00Z",
        updated_at="2026-01-02T00:00:00Z",
        closed_at="2026-01-03T00:00:00Z" if state == "closed" else None,
        merged_at="2026-01-03T00:00:00Z" if merged else None,
        draft=False,
        user=UserRef(login="octocat"),
        assignees=(),
        labels=(),
        milestone=None,
        head=BranchRef(ref=f"feature-{number}", sha=f"sha-{number}"),
        base=BranchRef(ref="main", sha="base"),
        html_url="",
        body=None,
        comments=0,
        review_comments=0,
        commits=1,
        additions=1,
        deletions=0,
        changed_files=1,
        mergeable=None,
        mergeable_state=None,
        requested_reviewers=(),
        requested_teams=(),
    )


def _comment(comment_id: int) -> CommentRecord:
    return CommentRecord(comment_id, UserRef(login="a"), "hi", "2026-01-01T00:00:00Z", "", "", "issue")


def test_default_flags_skip_enrichment_and_omit_fields():
    """Verify no comments or CI data is fetched or serialized by default."""
    client = Mock()
    client.list_pull_requests.return_value = [_record(1), _record(2)]

    prs = collect_pull_requests(client, "o", "r")

    client.list_pull_requests.assert_called_once_with("o", "r", "all")
    client.get_pull_request_comments.assert_not_called()
    client.get_ci_state.assert_not_called()
    data = prs[0].to_dict()
    assert "comments_list" not in data
    assert "check_runs" not in data
    assert "statuses" not in data


def test_enrichment_attaches_comments_and_ci_state_in_listing_order():
    """Verify each PR gets its own comments and CI state for its head commit."""
    client = Mock()
    client.list_pull_requests.return_value = [_record(9), _record(4)]
    client.get_pull_request_comments.side_effect = lambda owner, repo, number: [_comment(number * 10)]
    client.get_ci_state.side_effect = lambda owner, repo, ref: (
        [CheckRunRecord(id=1, name=f"build-{ref}", status="completed")],
        [StatusRecord(state="success", context="ci", created_at="2026-01-01T00:00:00Z")],
    )

    prs = collect_pull_requests(client, "o", "r", include_comments=True, include_checks=True)

    assert [pr.number for pr in prs] == [9, 4]
    assert [c.id for c in prs[0].comments_list] == [90]
    assert prs[1].check_runs[0].name == "build-sha-4"
    assert [call.args[2] for call in client.get_ci_state.call_args_list] == ["sha-9", "sha-4"]
    data = prs[0].to_dict()
    assert data["comments_list"][0]["id"] == 90
    assert data["statuses"][0]["state"] == "success"


def test_empty_ci_state_is_attached_as_empty_lists():
    """Verify degraded CI results still produce present-but-empty fields."""
    client = Mock()
    client.list_pull_requests.return_value = [_record(1)]
    client.get_ci_state.return_value = ([], [])

    prs = collect_pull_requests(client, "o", "r", include_checks=True)

    data = prs[0].to_dict()
    assert list(data["check_runs"]) == []
    assert list(data["statuses"]) == []
    assert "comments_list" not in data


def test_comment_failure_fails_whole_collection():
    """Verify comment enrichment errors propagate instead of degrading."""
    client = Mock()
    client.list_pull_requests.return_value = [_record(1), _record(2)]
    client.get_pull_request_comments.side_effect = UpstreamError("GitHub API request failed", status_code=502)

    with pytest.raises(UpstreamError):
        collect_pull_requests(client, "o", "r", include_comments=True)


def test_open_filter_returns_only_open_pull_requests():
    """Verify a repository with #1 open and #2 closed+merged yields only #1 for state=open."""
    client = Mock()
    client.list_pull_requests.return_value = [_record(1, "open"), _record(2, "closed", merged=True)]

    prs = collect_pull_requests(client, "o", "r", state="open")

    assert [pr.number for pr in prs] == [1]
    client.list_pull_requests.assert_called_once_with("o", "r", "open")


@pytest.mark.parametrize(
    "state, expected",
    [("open", [1, 3]), ("closed", [2]), ("all", [1, 2, 3])],
)
def test_filter_by_state(state, expected):
    """Verify the post-enrichment filter matches on record state."""
    prs = [_record(1, "open"), _record(2, "closed"), _record(3, "open")]

    assert [pr.number for pr in filter_by_state(prs, state)] == expected
