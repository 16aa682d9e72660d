from django.db.transaction import TransactionManagementError
from django.test import TestCase, TransactionTestCase

from reviews.models import PullRequest, PullRequestReviewer, TeamMember, User
from reviews.repository import ReviewRepository
from reviews.tests.utils import make_team, make_user
from reviews.transactions import Transaction


class ReviewRepositoryTest(TestCase):
    def setUp(self):
        self.repository = ReviewRepository()
        self.team = make_team("backend", ("a1", True), ("m1", True), ("m2", False), ("m3", True))

    def test_select_eligible_reviewers(self):
        with Transaction() as tx:
            active = self.repository.select_eligible_reviewers(tx, "backend", {"a1"})
            everyone = self.repository.select_eligible_reviewers(tx, "backend", {"a1"}, only_active=False)

        self.assertEqual(active, ["m1", "m3"])
        self.assertEqual(everyone, ["m1", "m2", "m3"])

    def test_select_eligible_reviewers_unknown_team(self):
        with Transaction() as tx:
            self.assertEqual(self.repository.select_eligible_reviewers(tx, "nope", set()), [])

    def test_get_author_team(self):
        make_user("loner")

        with Transaction() as tx:
            self.assertEqual(self.repository.get_author_team(tx, "a1"), "backend")
            with self.assertRaises(User.DoesNotExist):
                self.repository.get_author_team(tx, "ghost")
            with self.assertRaises(TeamMember.DoesNotExist):
                self.repository.get_author_team(tx, "loner")

    def test_insert_and_lock_pr(self):
        with Transaction() as tx:
            self.repository.insert_pr(tx, "pr-1", "Title", "a1", "backend")
            self.repository.add_reviewer(tx, "pr-1", "m1")
            self.assertEqual(self.repository.lock_pr_status(tx, "pr-1"), PullRequest.Status.OPEN)
            self.assertEqual(self.repository.get_pr_owner(tx, "pr-1"), ("a1", "backend"))

        pr = self.repository.get_pr("pr-1")
        self.assertEqual(pr.status, PullRequest.Status.OPEN)
        self.assertEqual(pr.assigned_reviewers, ("m1",))

    def test_lock_pr_status_not_found(self):
        with Transaction() as tx:
            with self.assertRaises(PullRequest.DoesNotExist):
                self.repository.lock_pr_status(tx, "missing")

    def test_remove_reviewer(self):
        pr = PullRequest.objects.create(id="pr-1", title="T", author_id="a1", team=self.team)
        PullRequestReviewer.objects.create(pull_request=pr, user_id="m1")

        with Transaction() as tx:
            self.assertEqual(self.repository.remove_reviewer(tx, "pr-1", "m1"), 1)
            self.assertEqual(self.repository.remove_reviewer(tx, "pr-1", "m1"), 0)
            self.assertEqual(self.repository.list_reviewers(tx, "pr-1"), [])

    def test_transaction_scoped_methods_need_open_transaction(self):
        """Методы с tx не работают с неоткрытым или уже закрытым хэндлом"""
        tx = Transaction()
        with self.assertRaises(TransactionManagementError):
            self.repository.lock_pr_status(tx, "pr-1")

        with tx:
            pass
        with self.assertRaises(TransactionManagementError):
            self.repository.add_reviewer(tx, "pr-1", "m1")

    def test_transaction_handle_cannot_be_reentered(self):
        tx = Transaction()
        with tx:
            with self.assertRaises(TransactionManagementError):
                tx.__enter__()


class TransactionRollbackTest(TransactionTestCase):
    """Проверки вне оберточной транзакции TestCase"""

    def test_exception_rolls_back(self):
        make_team("backend", ("a1", True))
        repository = ReviewRepository()

        with self.assertRaises(RuntimeError):
            with Transaction() as tx:
                repository.insert_pr(tx, "pr-1", "Title", "a1", "backend")
                raise RuntimeError("abort")

        self.assertFalse(repository.pr_exists("pr-1"))

    def test_commit_on_success(self):
        make_team("backend", ("a1", True))
        repository = ReviewRepository()

        with Transaction() as tx:
            repository.insert_pr(tx, "pr-1", "Title", "a1", "backend")
            self.assertTrue(tx.active)

        self.assertFalse(tx.active)
        self.assertTrue(repository.pr_exists("pr-1"))
