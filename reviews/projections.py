"""Модели чтения, которые возвращают репозиторий и сервисы"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .models import PullRequest


@dataclass(frozen=True)
class TeamMemberProjection:
    user_id: str
    username: str
    is_active: bool


@dataclass(frozen=True)
class TeamProjection:
    team_name: str
    members: tuple


@dataclass(frozen=True)
class UserProjection:
    user_id: str
    username: str
    team_name: str
    is_active: bool


@dataclass(frozen=True)
class PullRequestShort:
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str


@dataclass(frozen=True)
class PullRequestProjection:
    """
    PR вместе с текущими ревьюверами

    Единый результат создания, мержа и переназначения.
    """
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    team_name: str
    assigned_reviewers: tuple
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, pr: PullRequest, reviewer_ids) -> 'PullRequestProjection':
        return cls(
            pull_request_id=pr.id,
            pull_request_name=pr.title,
            author_id=pr.author_id,
            status=pr.status,
            team_name=pr.team_id,
            assigned_reviewers=tuple(reviewer_ids),
            created_at=pr.created_at,
            merged_at=pr.merged_at,
        )


@dataclass(frozen=True)
class ReviewerReplacement:
    pull_request_id: str
    old_user_id: str
    new_user_id: str


@dataclass(frozen=True)
class BulkDeactivation:
    team_name: str
    deactivated: tuple
    reassigned: tuple
