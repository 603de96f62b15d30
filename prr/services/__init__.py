"""Services for prr.

Services encapsulate business logic and orchestrate domain models.
They receive dependencies via constructor injection.
"""

from prr.services.alignment import AlignmentEngine
from prr.services.comment_assembler import CommentAssembler
from prr.services.git_operations import GitApplyError, GitOperationsService, GitRepositoryError
from prr.services.github_review import GitHubReviewService, ReviewSubmissionError
from prr.services.review_parser import ReviewParser, parse_review
from prr.services.review_store import ReviewStore, ReviewStoreError

__all__ = [
    "AlignmentEngine",
    "CommentAssembler",
    "GitApplyError",
    "GitHubReviewService",
    "GitOperationsService",
    "GitRepositoryError",
    "ReviewParser",
    "ReviewStore",
    "ReviewStoreError",
    "ReviewSubmissionError",
    "parse_review",
]
