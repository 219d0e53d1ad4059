"""Decode GitHub GraphQL responses into a Snapshot.

The decoder is lenient with individual entries (a node without the fields we
need is skipped) but keeps the difference between a missing connection and an
empty one: ``pullRequests.nodes: null`` decodes to ``None``, ``[]`` to ``()``.
"""

from __future__ import annotations

import json
from pathlib import Path

from chkapr.approval.errors import SnapshotInvalid
from chkapr.approval.model import (
    ParentCommit,
    PullRequestRecord,
    ReleaseDescriptor,
    Review,
    Snapshot,
    TeamRoster,
)
from chkapr.core.result import Err, Ok, Result
from chkapr.core.structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_nodes,
    get_raw_str,
    get_str,
    get_table,
)


def _decode_team(author: StrDict) -> TeamRoster | None:
    org = get_table(author, "organization")
    if org is None:
        return None
    team = get_table(org, "team")
    if team is None:
        return None
    slug = get_raw_str(team, "slug")
    if slug is None:
        return None

    members: list[str] = []
    for node in get_nodes(team, "members") or []:
        login = get_raw_str(node, "login")
        if login is not None:
            members.append(login)
    return TeamRoster(slug=slug, member_logins=tuple(members))


def _decode_review(node: StrDict) -> Review | None:
    author = get_table(node, "author")
    if author is None:
        # Deleted accounts come back as a null author.
        return None
    login = get_raw_str(author, "login")
    if login is None:
        return None
    return Review(author_login=login, author_team=_decode_team(author))


def _decode_pull_request(node: StrDict) -> PullRequestRecord | None:
    number = get_int(node, "number")
    if number is None:
        return None

    commit_ids: list[str] = []
    for item in get_nodes(node, "commits") or []:
        commit = get_table(item, "commit")
        oid = get_raw_str(commit, "oid") if commit is not None else None
        if oid is not None:
            commit_ids.append(oid)

    labels: list[str] = []
    for item in get_nodes(node, "labels") or []:
        name = get_raw_str(item, "name")
        if name is not None:
            labels.append(name)

    reviews: list[Review] = []
    for item in get_nodes(node, "reviews") or []:
        review = _decode_review(item)
        if review is not None:
            reviews.append(review)

    return PullRequestRecord(
        number=number,
        commit_ids=tuple(commit_ids),
        labels=tuple(labels),
        reviews=tuple(reviews),
    )


def _decode_release(data: StrDict) -> ReleaseDescriptor:
    tag_name = get_raw_str(data, "tagName") or ""
    target = get_table(get_table(data, "tag") or {}, "target") or {}
    commit_id = get_raw_str(target, "oid") or ""

    parents: tuple[ParentCommit, ...] | None = None
    parent_nodes = get_nodes(target, "parents")
    if parent_nodes is not None:
        decoded: list[ParentCommit] = []
        for item in parent_nodes:
            oid = get_raw_str(item, "oid")
            if oid is None:
                continue
            decoded.append(
                ParentCommit(
                    commit_id=oid,
                    authored_by_committer=get_bool(item, "authoredByCommitter") is True,
                )
            )
        parents = tuple(decoded)

    return ReleaseDescriptor(tag_name=tag_name, commit_id=commit_id, parent_commit_ids=parents)


def _graphql_error_message(root: StrDict) -> str | None:
    errors = get_list(root, "errors")
    if not errors:
        return None
    first = as_str_dict(errors[0])
    if first is None:
        return "GraphQL returned errors"
    return get_str(first, "message") or "GraphQL returned errors"


def decode_snapshot(payload: object, *, source: str | None = None) -> Result[Snapshot, SnapshotInvalid]:
    """Decode a parsed GraphQL response.

    Args:
        payload: The JSON document as returned by ``json.loads``.
        source: Where the payload came from, for error messages.

    Returns:
        Ok(Snapshot), or Err(SnapshotInvalid) when there is no repository
        object to decode.
    """
    root = as_str_dict(payload)
    if root is None:
        return Err(SnapshotInvalid(reason="response is not a JSON object", source=source))

    data = get_table(root, "data")
    repository = get_table(data, "repository") if data is not None else None
    if repository is None:
        message = _graphql_error_message(root)
        return Err(
            SnapshotInvalid(
                reason=message or "response has no data.repository",
                source=source,
            )
        )

    release_data = get_table(repository, "release")
    release = _decode_release(release_data) if release_data is not None else None

    pull_requests: tuple[PullRequestRecord, ...] | None = None
    pr_nodes = get_nodes(repository, "pullRequests")
    if pr_nodes is not None:
        records: list[PullRequestRecord] = []
        for node in pr_nodes:
            record = _decode_pull_request(node)
            if record is not None:
                records.append(record)
        pull_requests = tuple(records)

    return Ok(
        Snapshot(
            repository=get_raw_str(repository, "name") or "",
            release=release,
            pull_requests=pull_requests,
        )
    )


def parse_snapshot(text: str, *, source: str | None = None) -> Result[Snapshot, SnapshotInvalid]:
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(SnapshotInvalid(reason=f"invalid JSON: {e}", source=source))
    return decode_snapshot(obj, source=source)


def load_snapshot(path: Path) -> Result[Snapshot, SnapshotInvalid]:
    """Read a saved GraphQL response from disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(SnapshotInvalid(reason=f"cannot read snapshot: {e}", source=str(path)))
    except UnicodeDecodeError as e:
        return Err(SnapshotInvalid(reason=f"snapshot is not UTF-8: {e}", source=str(path)))
    return parse_snapshot(text, source=str(path))


def graphql_error_message(text: str) -> str | None:
    """Return the first GraphQL error message in a raw response, if any."""
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError:
        return None
    root = as_str_dict(obj)
    if root is None:
        return None
    return _graphql_error_message(root)
