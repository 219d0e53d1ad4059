from __future__ import annotations

# gh api graphql
GH_TIMEOUT_SECONDS = 60.0

# The query is a read, so transient failures are retried
GH_READ_RETRY_ATTEMPTS = 3
GH_READ_RETRY_DELAY_SECONDS = 1.0
