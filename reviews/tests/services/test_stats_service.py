from django.test import TestCase
from django.utils import timezone

from reviews.models import PullRequest, PullRequestReviewer
from reviews.services import StatsService
from reviews.tests.utils import make_team


class StatsServiceTest(TestCase):
    def setUp(self):
        self.team = make_team("backend", ("u1", True), ("u2", True), ("u3", True))
        open_pr = PullRequest.objects.create(id="pr-open", title="Open", author_id="u1", team=self.team)
        merged_pr = PullRequest.objects.create(
            id="pr-merged", title="Merged", author_id="u1", team=self.team,
            status=PullRequest.Status.MERGED, merged_at=timezone.now(),
        )
        PullRequestReviewer.objects.create(pull_request=open_pr, user_id="u2")
        PullRequestReviewer.objects.create(pull_request=open_pr, user_id="u3")
        PullRequestReviewer.objects.create(pull_request=merged_pr, user_id="u2")

    def test_user_review_stats(self):
        stats = StatsService().get_review_stats()

        by_user = {row['id']: row for row in stats['user_review_stats']}
        self.assertEqual(set(by_user), {"u2", "u3"})
        self.assertEqual(by_user["u2"]['prs_reviewed'], 2)
        self.assertEqual(by_user["u2"]['open_prs_reviewed'], 1)
        self.assertEqual(by_user["u2"]['merged_prs_reviewed'], 1)
        self.assertEqual(by_user["u3"]['prs_reviewed'], 1)
        self.assertEqual(stats['user_review_stats'][0]['id'], "u2")

    def test_pr_reviewer_stats(self):
        stats = StatsService().get_review_stats()

        by_pr = {row['id']: row for row in stats['pr_reviewer_stats']}
        self.assertEqual(by_pr["pr-open"]['reviewers_count'], 2)
        self.assertEqual(by_pr["pr-merged"]['reviewers_count'], 1)
        self.assertEqual(by_pr["pr-merged"]['team_id'], "backend")
        self.assertIsNotNone(by_pr["pr-merged"]['merged_at'])
