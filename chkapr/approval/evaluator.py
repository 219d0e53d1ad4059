"""Decide which pull requests are approved changes of a release.

A pull request counts when, checked in this order:
1. it has at least one commit,
2. it carries a label named after the release tag,
3. it contains the tagged commit or the release's previous canary commit,
4. a member of the approvable team approved it.

Output keeps the input order of the pull requests.
"""

from __future__ import annotations

from dataclasses import dataclass

from chkapr.approval.errors import (
    GateError,
    PullRequestListMissing,
    ReleaseInvalid,
    ReleaseMissing,
)
from chkapr.approval.model import PullRequestRecord, ReleaseDescriptor, Snapshot
from chkapr.core.result import Err, Ok, Result

APPROVAL_PREFIX = "Approval: "


@dataclass(frozen=True, slots=True)
class GateReport:
    release: ReleaseDescriptor
    approved: tuple[PullRequestRecord, ...]

    @property
    def has_approvals(self) -> bool:
        return len(self.approved) > 0

    def lines(self) -> list[str]:
        """Release summary first, then one ``Approval:`` line per pull request."""
        out = [self.release.format_summary()]
        out.extend(f"{APPROVAL_PREFIX}{pr.format_summary()}" for pr in self.approved)
        return out


def rejection_reason(
    pr: PullRequestRecord,
    *,
    release: ReleaseDescriptor,
    parent: str | None,
    approvable_team_slug: str,
) -> str | None:
    """Return why ``pr`` fails the gate, or None if it passes."""
    if not pr.has_any_commits():
        return "no commits"
    if not pr.has_label(release.tag_name):
        return f"missing label {release.tag_name}"
    if not (pr.has_commit(release.commit_id) or (parent is not None and pr.has_commit(parent))):
        return f"does not contain {release.tag_name} or its parent"
    if not pr.is_approved(approvable_team_slug):
        return f"not approved by {approvable_team_slug}"
    return None


def select_approved(
    release: ReleaseDescriptor,
    pull_requests: tuple[PullRequestRecord, ...] | list[PullRequestRecord],
    approvable_team_slug: str,
) -> tuple[PullRequestRecord, ...]:
    """Return the pull requests approved for ``release``, in input order.

    An invalid release approves nothing.
    """
    if not release.is_valid():
        return ()

    parent = release.resolved_parent_commit_id()
    return tuple(
        pr
        for pr in pull_requests
        if rejection_reason(
            pr, release=release, parent=parent, approvable_team_slug=approvable_team_slug
        )
        is None
    )


def explain(
    release: ReleaseDescriptor,
    pull_requests: tuple[PullRequestRecord, ...] | list[PullRequestRecord],
    approvable_team_slug: str,
) -> list[tuple[PullRequestRecord, str | None]]:
    """Pair every pull request with its rejection reason (None when approved)."""
    parent = release.resolved_parent_commit_id()
    return [
        (
            pr,
            rejection_reason(
                pr, release=release, parent=parent, approvable_team_slug=approvable_team_slug
            ),
        )
        for pr in pull_requests
    ]


def evaluate(snapshot: Snapshot, approvable_team_slug: str) -> Result[GateReport, GateError]:
    """Run the gate over a snapshot.

    A missing or malformed release and a missing pull request list are
    errors. An empty approved set is a successful report.
    """
    release = snapshot.release
    if release is None:
        return Err(ReleaseMissing(repository=snapshot.repository))
    if not release.is_valid():
        return Err(ReleaseInvalid(tag_name=release.tag_name, summary=release.format_summary()))

    pull_requests = snapshot.pull_requests
    if pull_requests is None:
        return Err(PullRequestListMissing(repository=snapshot.repository))

    approved = select_approved(release, pull_requests, approvable_team_slug)
    return Ok(GateReport(release=release, approved=approved))
