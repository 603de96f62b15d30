"""Domain models for stored reviews.

Parse-once pattern: the metadata dotfile stored next to each review file is
parsed into a typed model at the boundary.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from enum import Enum

_PR_URL_RE = re.compile(r"^https?://[^/]+/([^/]+)/([^/]+)/pull/(\d+)/?$")
_PR_HANDLE_RE = re.compile(r"^([^/\s]+)/([^/\s#]+)[/#](\d+)$")


class ReviewStatus(Enum):
    """Lifecycle state of a review file."""

    NEW = "NEW"
    REVIEWED = "REVIEWED"
    SUBMITTED = "SUBMITTED"


@dataclass
class ReviewMetadata:
    """Metadata dotfile for a single review.

    Attributes:
        original: The diff text the review file was rendered from, used to tell
            a stale review apart from an edited one
        submitted: Seconds since the epoch of the last submission, if any
        commit_id: Head commit of the pull request when the review was fetched
    """

    original: str
    submitted: int | None = None
    commit_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ReviewMetadata:
        return cls(
            original=data.get("original", ""),
            submitted=data.get("submitted"),
            commit_id=data.get("commit_id"),
        )

    @classmethod
    def from_json(cls, text: str) -> ReviewMetadata:
        return cls.from_dict(json.loads(text))

    def to_json(self) -> str:
        return json.dumps(asdict(self))


@dataclass(frozen=True)
class PullRequestRef:
    """Identifies a pull request as owner/repo/number."""

    owner: str
    repo: str
    number: int

    @property
    def handle(self) -> str:
        """Handle such as "owner/repo/24"."""
        return f"{self.owner}/{self.repo}/{self.number}"

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_string(cls, value: str, default_repository: str | None = None) -> PullRequestRef:
        """Parse a pull request reference.

        Accepts "owner/repo/24", "owner/repo#24", a pull request URL, or a
        bare number when a default repository is configured.

        Raises:
            ValueError: If the value cannot be parsed
        """
        value = value.strip()
        match = _PR_URL_RE.match(value) or _PR_HANDLE_RE.match(value)
        if match:
            return cls(match.group(1), match.group(2), int(match.group(3)))

        if value.isdigit():
            if not default_repository or "/" not in default_repository:
                raise ValueError(
                    f"Invalid PR reference: {value}. A bare number needs a configured "
                    "repository (owner/repo)"
                )
            owner, repo = default_repository.split("/", 1)
            return cls(owner, repo, int(value))

        raise ValueError(
            f"Invalid PR reference: {value}. Expected owner/repo/NUMBER, "
            "owner/repo#NUMBER, or a pull request URL"
        )
