"""Snapshot entities the approval gate decides on.

All entities are frozen: they are built once by the snapshot decoder and only
queried afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParentCommit:
    commit_id: str
    authored_by_committer: bool


@dataclass(frozen=True, slots=True)
class ReleaseDescriptor:
    """A release tag and the parents of the commit it points to."""

    tag_name: str
    commit_id: str
    # None when the source sent no parent list at all.
    parent_commit_ids: tuple[ParentCommit, ...] | None = None

    def is_valid(self) -> bool:
        return self.tag_name != "" and self.commit_id != ""

    def resolved_parent_commit_id(self) -> str | None:
        """Return the previous canary point.

        That is the first committer-authored parent, in source order. Returns
        None when no parent list was sent, and also when the list has no
        committer-authored parent.
        """
        if self.parent_commit_ids is None:
            return None
        for parent in self.parent_commit_ids:
            if parent.authored_by_committer:
                return parent.commit_id
        return None

    def format_summary(self) -> str:
        if self.is_valid():
            return f"{self.tag_name}({self.commit_id})"
        return f"The structure of release is not correct. [name: {self.tag_name}]"


@dataclass(frozen=True, slots=True)
class TeamRoster:
    slug: str
    member_logins: tuple[str, ...] = ()

    def has_member(self, login: str) -> bool:
        return login in self.member_logins


@dataclass(frozen=True, slots=True)
class Review:
    """An approving review and, when GitHub resolved it, the author's team."""

    author_login: str
    author_team: TeamRoster | None = None

    def is_approved_by(self, approvable_team_slug: str) -> bool:
        """True if the author is a member of the team ``approvable_team_slug``."""
        team = self.author_team
        if team is None or team.slug != approvable_team_slug:
            return False
        return team.has_member(self.author_login)


@dataclass(frozen=True, slots=True)
class PullRequestRecord:
    number: int
    commit_ids: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()
    reviews: tuple[Review, ...] = ()

    def has_any_commits(self) -> bool:
        return len(self.commit_ids) > 0

    def has_label(self, name: str) -> bool:
        return name in self.labels

    def has_commit(self, commit_id: str) -> bool:
        return commit_id in self.commit_ids

    def is_approved(self, approvable_team_slug: str) -> bool:
        return any(r.is_approved_by(approvable_team_slug) for r in self.reviews)

    def format_summary(self) -> str:
        return f"Pull Requests (#{self.number})"


@dataclass(frozen=True, slots=True)
class Snapshot:
    """One fetch of a repository: its release and candidate pull requests.

    ``release`` and ``pull_requests`` are None when GitHub did not return
    them, which is not the same as an empty pull request list.
    """

    repository: str
    release: ReleaseDescriptor | None
    pull_requests: tuple[PullRequestRecord, ...] | None
