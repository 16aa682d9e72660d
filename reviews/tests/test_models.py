from django.db import IntegrityError, transaction
from django.test import TestCase

from reviews.models import PullRequest, PullRequestReviewer, Team, TeamMember, User


class TeamModelTest(TestCase):
    def test_create_team(self):
        """Тест создания команды"""
        team = Team.objects.create(name="backend")
        self.assertEqual(team.name, "backend")
        self.assertEqual(str(team), "backend")

    def test_team_unique_name(self):
        """Тест уникальности имени команды"""
        Team.objects.create(name="backend")
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Team.objects.create(name="backend")


class UserModelTest(TestCase):
    def setUp(self):
        self.team = Team.objects.create(name="backend")
        self.user = User.objects.create(id="user1", username="John Doe", is_active=True)

    def test_create_user(self):
        """Тест создания пользователя"""
        self.assertEqual(self.user.id, "user1")
        self.assertEqual(self.user.username, "John Doe")
        self.assertTrue(self.user.is_active)
        self.assertEqual(str(self.user), "John Doe (user1)")

    def test_user_team_membership(self):
        """Тест связи пользователя с командой"""
        self.assertFalse(self.user.teams.exists())

        TeamMember.objects.create(team=self.team, user=self.user)

        self.assertEqual(list(self.user.teams.values_list("name", flat=True)), ["backend"])
        self.assertIn(self.user, self.team.members.all())

    def test_membership_is_unique(self):
        TeamMember.objects.create(team=self.team, user=self.user)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                TeamMember.objects.create(team=self.team, user=self.user)


class PullRequestModelTest(TestCase):
    def setUp(self):
        self.team = Team.objects.create(name="backend")
        self.author = User.objects.create(id="author1", username="Author")
        self.reviewer1 = User.objects.create(id="reviewer1", username="Reviewer 1")
        self.reviewer2 = User.objects.create(id="reviewer2", username="Reviewer 2")

    def _create_pr(self):
        return PullRequest.objects.create(id="pr-1", title="Test PR", author=self.author, team=self.team)

    def test_create_pull_request(self):
        """Тест создания PR"""
        pr = self._create_pr()
        PullRequestReviewer.objects.create(pull_request=pr, user=self.reviewer1)
        PullRequestReviewer.objects.create(pull_request=pr, user=self.reviewer2)

        self.assertEqual(pr.id, "pr-1")
        self.assertEqual(pr.title, "Test PR")
        self.assertEqual(pr.author, self.author)
        self.assertEqual(pr.status, PullRequest.Status.OPEN)
        self.assertEqual(pr.reviewers.count(), 2)
        self.assertIn(self.reviewer1, pr.reviewers.all())
        self.assertIn(pr, self.reviewer2.assigned_prs.all())

    def test_reviewer_pair_is_unique(self):
        pr = self._create_pr()
        PullRequestReviewer.objects.create(pull_request=pr, user=self.reviewer1)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                PullRequestReviewer.objects.create(pull_request=pr, user=self.reviewer1)

    def test_pr_status_constraint(self):
        """В базе допустимы только статусы OPEN и MERGED"""
        self._create_pr()
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                PullRequest.objects.filter(id="pr-1").update(status="CLOSED")

    def test_pr_string_representation(self):
        """Тест строкового представления PR"""
        pr = self._create_pr()
        self.assertEqual(str(pr), "Test PR (pr-1)")
