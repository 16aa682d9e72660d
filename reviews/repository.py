"""
Доступ к таблицам команд, пользователей и PR

Методы, первым аргументом принимающие ``Transaction``, работают внутри
открытой вызывающим транзакции: из них сервисы собирают многошаговые
операции. Остальные методы открывают свою короткую транзакцию или читают
в autocommit.

Отсутствие строки - исключение ``DoesNotExist`` модели, ошибки БД
пробрасываются как есть. Перевод в ``DomainError`` делают сервисы; исключение -
``create_team``, которая сама владеет своей транзакцией.
"""

from datetime import datetime
from typing import Iterable, Optional

from django.db import DEFAULT_DB_ALIAS
from django.db.models import Count, Q

from .errors import DomainError, ErrorCode
from .models import PullRequest, PullRequestReviewer, Team, TeamMember, User
from .projections import (
    PullRequestProjection,
    PullRequestShort,
    TeamMemberProjection,
    TeamProjection,
    UserProjection,
)
from .transactions import Transaction


class ReviewRepository:

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def _alias(self, tx: Optional[Transaction]) -> str:
        if tx is None:
            return self.using
        tx.ensure_active()
        return tx.using

    # --- Teams ---

    def team_exists(self, team_name: str, tx: Transaction = None) -> bool:
        return Team.objects.using(self._alias(tx)).filter(name=team_name).exists()

    def create_team(self, team_name: str, members_data: list) -> TeamProjection:
        """
        Создает команду и добавляет в нее пользователей

        Пользователи создаются или обновляются (имя и флаг активности) и
        переносятся в новую команду. Все выполняется в одной транзакции.

        Raises:
            DomainError: TEAM_EXISTS, если команда уже существует
        """
        with Transaction(self.using) as tx:
            if self.team_exists(team_name, tx=tx):
                raise DomainError(ErrorCode.TEAM_EXISTS)

            Team.objects.using(tx.using).create(name=team_name)
            for member_data in members_data:
                self._upsert_member(tx, team_name, member_data)

        return self.get_team(team_name)

    def _upsert_member(self, tx: Transaction, team_name: str, member_data: dict) -> None:
        user_id = member_data['user_id']
        if not user_id:
            return

        User.objects.using(tx.using).update_or_create(
            id=user_id,
            defaults={
                'username': member_data['username'],
                'is_active': member_data['is_active'],
            },
        )

        # Пользователь состоит не более чем в одной команде
        memberships = TeamMember.objects.using(tx.using)
        memberships.filter(user_id=user_id).exclude(team_id=team_name).delete()
        memberships.get_or_create(team_id=team_name, user_id=user_id)

    def get_team(self, team_name: str) -> TeamProjection:
        team = Team.objects.using(self.using).get(name=team_name)
        members = (
            User.objects.using(self.using)
            .filter(memberships__team=team)
            .order_by('id')
        )
        return TeamProjection(
            team_name=team.name,
            members=tuple(
                TeamMemberProjection(user_id=user.id, username=user.username, is_active=user.is_active)
                for user in members
            ),
        )

    def team_member_ids(self, tx: Transaction, team_name: str, user_ids: Iterable[str] = None) -> list:
        queryset = User.objects.using(self._alias(tx)).filter(memberships__team_id=team_name)
        if user_ids:
            queryset = queryset.filter(id__in=list(user_ids))
        return list(queryset.order_by('id').values_list('id', flat=True))

    # --- Users ---

    def set_user_active(self, user_id: str, is_active: bool) -> UserProjection:
        with Transaction(self.using) as tx:
            updated = User.objects.using(tx.using).filter(id=user_id).update(is_active=is_active)
            if not updated:
                raise User.DoesNotExist(f"User '{user_id}' not found")
            user = User.objects.using(tx.using).get(id=user_id)
            team_name = self._team_name_of(tx, user_id)

        return UserProjection(
            user_id=user.id,
            username=user.username,
            team_name=team_name or '',
            is_active=user.is_active,
        )

    def _team_name_of(self, tx: Transaction, user_id: str) -> Optional[str]:
        return (
            TeamMember.objects.using(self._alias(tx))
            .filter(user_id=user_id)
            .order_by('id')
            .values_list('team_id', flat=True)
            .first()
        )

    def get_author_team(self, tx: Transaction, user_id: str) -> str:
        """
        Возвращает название команды пользователя

        Raises:
            User.DoesNotExist: пользователь не найден
            TeamMember.DoesNotExist: у пользователя нет команды
        """
        alias = self._alias(tx)
        if not User.objects.using(alias).filter(id=user_id).exists():
            raise User.DoesNotExist(f"User '{user_id}' not found")
        team_name = self._team_name_of(tx, user_id)
        if team_name is None:
            raise TeamMember.DoesNotExist(f"User '{user_id}' has no team")
        return team_name

    def select_eligible_reviewers(
        self,
        tx: Transaction,
        team_name: str,
        exclude_ids: Iterable[str],
        only_active: bool = True,
    ) -> list:
        """Участники команды без exclude_ids; по умолчанию только активные"""
        queryset = (
            User.objects.using(self._alias(tx))
            .filter(memberships__team_id=team_name)
            .exclude(id__in=list(exclude_ids))
        )
        if only_active:
            queryset = queryset.filter(is_active=True)
        return list(queryset.order_by('id').values_list('id', flat=True))

    def deactivate_users(self, tx: Transaction, user_ids: Iterable[str]) -> int:
        return User.objects.using(self._alias(tx)).filter(id__in=list(user_ids)).update(is_active=False)

    # --- Pull requests ---

    def pr_exists(self, pr_id: str, tx: Transaction = None) -> bool:
        return PullRequest.objects.using(self._alias(tx)).filter(id=pr_id).exists()

    def insert_pr(
        self,
        tx: Transaction,
        pr_id: str,
        title: str,
        author_id: str,
        team_name: str,
        created_at: datetime = None,
    ) -> None:
        """Вставляет PR в статусе OPEN, уникальность id проверяет вызывающий"""
        fields = {
            'id': pr_id,
            'title': title,
            'author_id': author_id,
            'team_id': team_name,
            'status': PullRequest.Status.OPEN,
        }
        if created_at is not None:
            fields['created_at'] = created_at
        PullRequest.objects.using(self._alias(tx)).create(**fields)

    def lock_pr_status(self, tx: Transaction, pr_id: str) -> PullRequest.Status:
        """
        Читает статус PR через ``SELECT ... FOR UPDATE``

        Блокировка строки держится до конца tx, поэтому мерж и переназначение
        одного PR выполняются строго по очереди.
        """
        status = (
            PullRequest.objects.using(self._alias(tx))
            .select_for_update()
            .values_list('status', flat=True)
            .get(id=pr_id)
        )
        return PullRequest.Status(status)

    def get_pr_owner(self, tx: Transaction, pr_id: str) -> tuple:
        """Возвращает (author_id, team_name) PR"""
        return (
            PullRequest.objects.using(self._alias(tx))
            .values_list('author_id', 'team_id')
            .get(id=pr_id)
        )

    def mark_merged(self, tx: Transaction, pr_id: str, merged_at: datetime) -> None:
        PullRequest.objects.using(self._alias(tx)).filter(id=pr_id).update(
            status=PullRequest.Status.MERGED,
            merged_at=merged_at,
        )

    def open_prs_reviewed_by(self, tx: Transaction, user_ids: Iterable[str]) -> list:
        return list(
            PullRequest.objects.using(self._alias(tx))
            .filter(status=PullRequest.Status.OPEN, reviewer_links__user_id__in=list(user_ids))
            .order_by('id')
            .values_list('id', flat=True)
            .distinct()
        )

    def get_pr(self, pr_id: str) -> PullRequestProjection:
        pr = PullRequest.objects.using(self.using).get(id=pr_id)
        return PullRequestProjection.from_model(pr, self.list_reviewers(None, pr_id))

    def get_prs_for_user(self, user_id: str) -> list:
        """PR, где пользователь назначен ревьювером (для неизвестного пользователя - пустой список)"""
        prs = (
            PullRequest.objects.using(self.using)
            .filter(reviewer_links__user_id=user_id)
            .order_by('created_at', 'id')
        )
        return [
            PullRequestShort(
                pull_request_id=pr.id,
                pull_request_name=pr.title,
                author_id=pr.author_id,
                status=pr.status,
            )
            for pr in prs
        ]

    # --- Reviewers ---

    def list_reviewers(self, tx: Optional[Transaction], pr_id: str) -> list:
        return list(
            PullRequestReviewer.objects.using(self._alias(tx))
            .filter(pull_request_id=pr_id)
            .order_by('id')
            .values_list('user_id', flat=True)
        )

    def add_reviewer(self, tx: Transaction, pr_id: str, user_id: str) -> None:
        PullRequestReviewer.objects.using(self._alias(tx)).create(pull_request_id=pr_id, user_id=user_id)

    def remove_reviewer(self, tx: Transaction, pr_id: str, user_id: str) -> int:
        deleted, _ = (
            PullRequestReviewer.objects.using(self._alias(tx))
            .filter(pull_request_id=pr_id, user_id=user_id)
            .delete()
        )
        return deleted

    # --- Statistics ---

    def review_stats(self) -> dict:
        user_review_stats = (
            User.objects.using(self.using)
            .annotate(
                prs_reviewed=Count('review_links'),
                open_prs_reviewed=Count(
                    'review_links', filter=Q(review_links__pull_request__status=PullRequest.Status.OPEN)
                ),
                merged_prs_reviewed=Count(
                    'review_links', filter=Q(review_links__pull_request__status=PullRequest.Status.MERGED)
                ),
            )
            .filter(prs_reviewed__gt=0)
            .values('id', 'username', 'prs_reviewed', 'open_prs_reviewed', 'merged_prs_reviewed')
            .order_by('-prs_reviewed', 'id')
        )

        pr_reviewer_stats = (
            PullRequest.objects.using(self.using)
            .annotate(reviewers_count=Count('reviewer_links'))
            .values('id', 'title', 'status', 'team_id', 'reviewers_count', 'created_at', 'merged_at')
            .order_by('-created_at', 'id')
        )

        return {
            'user_review_stats': list(user_review_stats),
            'pr_reviewer_stats': list(pr_reviewer_stats),
        }
