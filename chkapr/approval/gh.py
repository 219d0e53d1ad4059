from __future__ import annotations

import shutil
from pathlib import Path
from time import sleep

from chkapr.approval.errors import FetchFailed, GateError, GhMissing
from chkapr.approval.model import Snapshot
from chkapr.approval.snapshot import graphql_error_message, parse_snapshot
from chkapr.approval.timeouts import (
    GH_READ_RETRY_ATTEMPTS,
    GH_READ_RETRY_DELAY_SECONDS,
    GH_TIMEOUT_SECONDS,
)
from chkapr.core.config import GateSettings
from chkapr.core.result import Err, Ok, Result
from chkapr.platform.process import ProcessError
from chkapr.platform.process import run as run_process

PULL_REQUEST_LIMIT = 5
COMMIT_LIMIT = 10
LABEL_LIMIT = 10
REVIEW_LIMIT = 10
PARENT_LIMIT = 2

SNAPSHOT_QUERY = f"""
query ($owner: String!, $team: String!, $base: String!, $head: String!, $name: String!, $tagName: String!) {{
  repository(name: $name, owner: $owner) {{
    name
    pullRequests(first: {PULL_REQUEST_LIMIT}, baseRefName: $base, headRefName: $head, orderBy: {{field: CREATED_AT, direction: DESC}}) {{
      nodes {{
        number
        commits(last: {COMMIT_LIMIT}) {{
          nodes {{
            commit {{
              oid
            }}
          }}
        }}
        labels(last: {LABEL_LIMIT}) {{
          nodes {{
            name
          }}
        }}
        reviews(states: APPROVED, last: {REVIEW_LIMIT}) {{
          nodes {{
            author {{
              login
              ... on User {{
                organization(login: $owner) {{
                  team(slug: $team) {{
                    slug
                    members {{
                      nodes {{
                        login
                      }}
                    }}
                  }}
                }}
              }}
            }}
          }}
        }}
      }}
    }}
    release(tagName: $tagName) {{
      tagName
      tag {{
        target {{
          oid
          ... on Commit {{
            parents(last: {PARENT_LIMIT}) {{
              nodes {{
                authoredByCommitter
                oid
              }}
            }}
          }}
        }}
      }}
    }}
  }}
}}
"""


def _is_transient_gh_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "timed out",
        "timeout",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "network is unreachable",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    return any(marker in text for marker in markers)


def ensure_gh_available() -> Result[None, GhMissing]:
    if shutil.which("gh") is None:
        return Err(GhMissing())
    return Ok(None)


def query_variables(settings: GateSettings) -> dict[str, str]:
    return {
        "owner": settings.organization,
        "team": settings.approvable_team,
        "base": settings.base_ref,
        "head": settings.head_ref,
        "name": settings.repository or "",
        "tagName": settings.target,
    }


def build_command(settings: GateSettings) -> list[str]:
    cmd = ["gh", "api", "graphql", "-f", f"query={SNAPSHOT_QUERY}"]
    for key, value in query_variables(settings).items():
        cmd.extend(["-f", f"{key}={value}"])
    return cmd


def run_graphql(
    *,
    cwd: Path,
    settings: GateSettings,
    timeout: float = GH_TIMEOUT_SECONDS,
    retry_attempts: int = GH_READ_RETRY_ATTEMPTS,
) -> Result[str, FetchFailed]:
    """Run the snapshot query, retrying transient gh failures."""
    cmd = build_command(settings)
    extra_env = {"GH_TOKEN": settings.github_token} if settings.github_token else None
    repository = f"{settings.organization}/{settings.repository}"

    attempts = max(1, retry_attempts)
    for attempt in range(attempts):
        result = run_process(cmd, cwd=cwd, extra_env=extra_env, timeout=timeout)
        if isinstance(result, Ok):
            return result

        error = result.error
        if attempt < attempts - 1 and _is_transient_gh_error(error):
            sleep(GH_READ_RETRY_DELAY_SECONDS * (attempt + 1))
            continue

        # gh exits non-zero on any GraphQL error, even with partial data
        hint = graphql_error_message(error.stdout) or error.stderr.strip() or None
        return Err(FetchFailed(repository=repository, hint=hint))

    return Err(FetchFailed(repository=repository))


def fetch_snapshot(
    *,
    cwd: Path,
    settings: GateSettings,
    timeout: float = GH_TIMEOUT_SECONDS,
    retry_attempts: int = GH_READ_RETRY_ATTEMPTS,
) -> Result[Snapshot, GateError]:
    available = ensure_gh_available()
    if isinstance(available, Err):
        return available

    raw = run_graphql(cwd=cwd, settings=settings, timeout=timeout, retry_attempts=retry_attempts)
    if isinstance(raw, Err):
        return raw

    return parse_snapshot(raw.value, source="gh api graphql")
