from django.test import TestCase

from reviews.errors import DomainError, ErrorCode
from reviews.models import PullRequest, PullRequestReviewer, User
from reviews.services import UserService
from reviews.tests.utils import make_team, make_user


class UserServiceTest(TestCase):
    def setUp(self):
        self.service = UserService()
        self.team = make_team("backend", ("u1", True), ("u2", True))

        # Создаем PR где u2 - ревьювер
        self.pr = PullRequest.objects.create(id="pr-1", title="Test PR", author_id="u1", team=self.team)
        PullRequestReviewer.objects.create(pull_request=self.pr, user_id="u2")

    def test_set_user_active_success(self):
        """Тест успешного изменения активности пользователя"""
        user = self.service.set_user_active("u1", False)

        self.assertEqual(user.user_id, "u1")
        self.assertEqual(user.team_name, "backend")
        self.assertFalse(user.is_active)

        # Проверяем что данные сохранились в БД
        self.assertFalse(User.objects.get(id="u1").is_active)

    def test_set_user_active_without_team(self):
        """У пользователя без команды team_name - пустая строка"""
        make_user("loner", is_active=False)

        user = self.service.set_user_active("loner", True)

        self.assertEqual(user.team_name, "")
        self.assertTrue(user.is_active)

    def test_set_user_active_not_found(self):
        """Тест изменения активности несуществующего пользователя"""
        with self.assertRaises(DomainError) as context:
            self.service.set_user_active("nonexistent", True)

        self.assertEqual(context.exception.code, ErrorCode.USER_NOT_FOUND)

    def test_get_review_assignments_success(self):
        """Тест успешного получения PR пользователя как ревьювера"""
        assigned_prs = self.service.get_review_assignments("u2")

        self.assertEqual(len(assigned_prs), 1)
        self.assertEqual(assigned_prs[0].pull_request_id, "pr-1")
        self.assertEqual(assigned_prs[0].author_id, "u1")
        self.assertEqual(assigned_prs[0].status, PullRequest.Status.OPEN)

    def test_get_review_assignments_empty(self):
        """Автор своего PR не видит его в списке на ревью"""
        self.assertEqual(self.service.get_review_assignments("u1"), [])

    def test_get_review_assignments_unknown_user(self):
        """Для неизвестного пользователя список пустой"""
        self.assertEqual(self.service.get_review_assignments("nonexistent"), [])

    def test_get_review_assignments_multiple_prs(self):
        """Тест получения нескольких PR пользователя"""
        pr2 = PullRequest.objects.create(id="pr-2", title="Another PR", author_id="u1", team=self.team)
        PullRequestReviewer.objects.create(pull_request=pr2, user_id="u2")

        assigned_prs = self.service.get_review_assignments("u2")

        self.assertEqual({pr.pull_request_id for pr in assigned_prs}, {"pr-1", "pr-2"})
