import structlog
from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from django.utils import timezone

from .errors import DomainError, ErrorCode
from .models import PullRequest, Team, User
from .projections import BulkDeactivation, PullRequestProjection, ReviewerReplacement, TeamProjection, UserProjection
from .repository import ReviewRepository
from .selection import RandomReviewerSelector, ReviewerSelector
from .transactions import Transaction

logger = structlog.get_logger(__name__)

DEFAULT_REVIEWERS_PER_PR = 2


def reviewers_per_pr() -> int:
    return getattr(settings, 'PRREVIEW', {}).get('REVIEWERS_PER_PR', DEFAULT_REVIEWERS_PER_PR)


class TeamService:
    """
    Сервис для управления командами и пользователями
    """

    def __init__(self, repository: ReviewRepository = None, selector: ReviewerSelector = None):
        self.repository = repository or ReviewRepository()
        self.selector = selector or RandomReviewerSelector()

    def create_team(self, team_name: str, members_data: list) -> TeamProjection:
        """
        Создает команду с пользователями

        Args:
            team_name: Название команды
            members_data: Список словарей user_id / username / is_active

        Returns:
            TeamProjection: Созданная команда

        Raises:
            DomainError: TEAM_EXISTS, если команда уже существует
        """
        try:
            team = self.repository.create_team(team_name, members_data)
        except IntegrityError:
            # Параллельный запрос успел создать команду с тем же именем
            if self.repository.team_exists(team_name):
                raise DomainError(ErrorCode.TEAM_EXISTS) from None
            raise

        logger.info('team_created', team_name=team_name, members=len(team.members))
        return team

    def get_team(self, team_name: str) -> TeamProjection:
        try:
            return self.repository.get_team(team_name)
        except Team.DoesNotExist:
            raise DomainError(ErrorCode.TEAM_NOT_FOUND, f"Team '{team_name}' not found") from None

    def bulk_deactivate(self, team_name: str, user_ids: list = None) -> BulkDeactivation:
        """
        Массовая деактивация пользователей команды с безопасным переназначением открытых PR

        Каждый уходящий ревьювер открытого PR заменяется случайным активным
        участником команды PR (не автором, не текущим ревьювером и не одним из
        деактивируемых). Если замены нет, ревьювер остается на PR.

        Args:
            team_name: Название команды
            user_ids: Кого деактивировать; пусто - всю команду

        Returns:
            BulkDeactivation: Деактивированные пользователи и сделанные замены
        """
        with Transaction(self.repository.using) as tx:
            if not self.repository.team_exists(team_name, tx=tx):
                raise DomainError(ErrorCode.TEAM_NOT_FOUND, f"Team '{team_name}' not found")

            leaving = self.repository.team_member_ids(tx, team_name, user_ids)
            if not leaving:
                return BulkDeactivation(team_name=team_name, deactivated=(), reassigned=())

            replacements = []
            for pr_id in self.repository.open_prs_reviewed_by(tx, leaving):
                replacements.extend(self._replace_leaving_reviewers(tx, pr_id, set(leaving)))

            self.repository.deactivate_users(tx, leaving)

        logger.info(
            'team_members_deactivated',
            team_name=team_name,
            deactivated=len(leaving),
            reassigned=len(replacements),
        )
        return BulkDeactivation(team_name=team_name, deactivated=tuple(leaving), reassigned=tuple(replacements))

    def _replace_leaving_reviewers(self, tx: Transaction, pr_id: str, leaving: set) -> list:
        # PR мог быть смержен параллельно, пока мы ждали блокировку
        if self.repository.lock_pr_status(tx, pr_id) != PullRequest.Status.OPEN:
            return []

        author_id, owning_team = self.repository.get_pr_owner(tx, pr_id)
        current = self.repository.list_reviewers(tx, pr_id)

        replacements = []
        for old_id in [reviewer_id for reviewer_id in current if reviewer_id in leaving]:
            candidates = self.repository.select_eligible_reviewers(
                tx, owning_team, {author_id, *current, *leaving}
            )
            if not candidates:
                continue

            new_id = self.selector.pick_one(candidates)
            self.repository.remove_reviewer(tx, pr_id, old_id)
            self.repository.add_reviewer(tx, pr_id, new_id)

            current = [new_id if reviewer_id == old_id else reviewer_id for reviewer_id in current]
            replacements.append(ReviewerReplacement(pull_request_id=pr_id, old_user_id=old_id, new_user_id=new_id))

        return replacements


class UserService:
    """
    Сервис для управления пользователями
    """

    def __init__(self, repository: ReviewRepository = None):
        self.repository = repository or ReviewRepository()

    def set_user_active(self, user_id: str, is_active: bool) -> UserProjection:
        try:
            user = self.repository.set_user_active(user_id, is_active)
        except User.DoesNotExist:
            raise DomainError(ErrorCode.USER_NOT_FOUND, f"User '{user_id}' not found") from None

        logger.info('user_activity_changed', user_id=user_id, is_active=user.is_active)
        return user

    def get_review_assignments(self, user_id: str) -> list:
        return self.repository.get_prs_for_user(user_id)


class PullRequestService:
    """
    Сервис для управления Pull Request'ами

    Создание, мерж и переназначение ревьюверов. Каждая операция целиком
    выполняется в одной транзакции; мерж и переназначение первым делом
    блокируют строку PR.
    """

    def __init__(
        self,
        repository: ReviewRepository = None,
        selector: ReviewerSelector = None,
        reviewers_count: int = None,
    ):
        self.repository = repository or ReviewRepository()
        self.selector = selector or RandomReviewerSelector()
        self.reviewers_count = reviewers_per_pr() if reviewers_count is None else reviewers_count

    def create_pull_request(self, pr_id: str, pr_name: str, author_id: str) -> PullRequestProjection:
        """
        Создает PR и назначает до reviewers_count ревьюверов из команды автора

        Raises:
            DomainError: PR_EXISTS, AUTHOR_MISSING
        """
        try:
            with Transaction(self.repository.using) as tx:
                # Проверяем, существует ли PR
                if self.repository.pr_exists(pr_id, tx=tx):
                    raise DomainError(ErrorCode.PR_EXISTS)

                # Автор должен существовать и состоять в команде
                try:
                    team_name = self.repository.get_author_team(tx, author_id)
                except ObjectDoesNotExist:
                    raise DomainError(
                        ErrorCode.AUTHOR_MISSING, f"Author '{author_id}' not found or has no team"
                    ) from None

                self.repository.insert_pr(tx, pr_id, pr_name, author_id, team_name, created_at=timezone.now())

                # При создании флаг активности не учитывается, в отличие от переназначения
                candidates = self.repository.select_eligible_reviewers(
                    tx, team_name, {author_id}, only_active=False
                )
                reviewers = self.selector.pick(candidates, self.reviewers_count)
                for reviewer_id in reviewers:
                    self.repository.add_reviewer(tx, pr_id, reviewer_id)
        except IntegrityError:
            # Параллельное создание с тем же id: второй получает нарушение уникальности
            if self.repository.pr_exists(pr_id):
                raise DomainError(ErrorCode.PR_EXISTS) from None
            raise

        logger.info('pr_created', pr_id=pr_id, author_id=author_id, team_name=team_name, reviewers=reviewers)
        return self.repository.get_pr(pr_id)

    def merge_pull_request(self, pr_id: str) -> PullRequestProjection:
        """
        Помечает PR как MERGED; повторный мерж ничего не меняет

        Raises:
            DomainError: PR_NOT_FOUND
        """
        with Transaction(self.repository.using) as tx:
            pr_status = self._lock(tx, pr_id)
            merged_now = pr_status != PullRequest.Status.MERGED
            if merged_now:
                self.repository.mark_merged(tx, pr_id, timezone.now())

        if merged_now:
            logger.info('pr_merged', pr_id=pr_id)
        return self.repository.get_pr(pr_id)

    def reassign_reviewer(self, pr_id: str, old_user_id: str) -> tuple:
        """
        Заменяет ревьювера old_user_id случайным активным участником команды PR

        Кандидаты исключают автора и всех текущих ревьюверов, поэтому замена
        никогда не дублирует уже назначенного.

        Returns:
            tuple: (id нового ревьювера, PullRequestProjection)

        Raises:
            DomainError: PR_NOT_FOUND, PR_MERGED, NOT_ASSIGNED, NO_CANDIDATE
        """
        with Transaction(self.repository.using) as tx:
            if self._lock(tx, pr_id) == PullRequest.Status.MERGED:
                raise DomainError(ErrorCode.PR_MERGED)

            current = self.repository.list_reviewers(tx, pr_id)
            if old_user_id not in current:
                raise DomainError(ErrorCode.NOT_ASSIGNED)

            author_id, team_name = self.repository.get_pr_owner(tx, pr_id)
            candidates = self.repository.select_eligible_reviewers(tx, team_name, {author_id, *current})
            if not candidates:
                raise DomainError(ErrorCode.NO_CANDIDATE)

            new_user_id = self.selector.pick_one(candidates)
            self.repository.remove_reviewer(tx, pr_id, old_user_id)
            self.repository.add_reviewer(tx, pr_id, new_user_id)

        logger.info('reviewer_reassigned', pr_id=pr_id, old_user_id=old_user_id, new_user_id=new_user_id)
        return new_user_id, self.repository.get_pr(pr_id)

    def _lock(self, tx: Transaction, pr_id: str) -> PullRequest.Status:
        try:
            return self.repository.lock_pr_status(tx, pr_id)
        except PullRequest.DoesNotExist:
            raise DomainError(ErrorCode.PR_NOT_FOUND, f"PR '{pr_id}' not found") from None


class StatsService:
    """
    Сервис для сбора статистики
    """

    def __init__(self, repository: ReviewRepository = None):
        self.repository = repository or ReviewRepository()

    def get_review_stats(self) -> dict:
        """
        Returns:
            dict: Статистика по пользователям и PR
        """
        return self.repository.review_stats()
