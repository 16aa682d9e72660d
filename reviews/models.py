from django.db import models
from django.utils import timezone


class Team(models.Model):
    name = models.CharField(max_length=100, primary_key=True)
    members = models.ManyToManyField('User', through='TeamMember', related_name='teams', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'teams'


class User(models.Model):
    id = models.CharField(max_length=50, primary_key=True)
    username = models.CharField(max_length=100, db_column='name')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.username} ({self.id})"

    class Meta:
        db_table = 'users'


class TeamMember(models.Model):
    team = models.ForeignKey(Team, on_delete=models.CASCADE, db_column='team_name', related_name='memberships')
    user = models.ForeignKey(User, on_delete=models.CASCADE, db_column='user_id', related_name='memberships')

    def __str__(self):
        return f"{self.user_id} in {self.team_id}"

    class Meta:
        db_table = 'team_members'
        constraints = [
            models.UniqueConstraint(fields=['team', 'user'], name='uq_team_members_team_user'),
        ]


class PullRequest(models.Model):
    class Status(models.TextChoices):
        OPEN = 'OPEN', 'Open'
        MERGED = 'MERGED', 'Merged'

    id = models.CharField(max_length=100, primary_key=True)
    title = models.CharField(max_length=200)
    author = models.ForeignKey(User, on_delete=models.CASCADE, db_column='author_id', related_name='authored_prs')
    # Команда автора на момент создания, дальше не меняется
    team = models.ForeignKey(Team, on_delete=models.CASCADE, db_column='team_name', related_name='pull_requests')
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.OPEN)
    reviewers = models.ManyToManyField(
        User, through='PullRequestReviewer', related_name='assigned_prs', blank=True
    )
    created_at = models.DateTimeField(default=timezone.now)
    merged_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.title} ({self.id})"

    class Meta:
        db_table = 'prs'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status__in=['OPEN', 'MERGED']),
                name='ck_prs_status',
            ),
        ]


class PullRequestReviewer(models.Model):
    pull_request = models.ForeignKey(
        PullRequest, on_delete=models.CASCADE, db_column='pr_id', related_name='reviewer_links'
    )
    user = models.ForeignKey(User, on_delete=models.CASCADE, db_column='user_id', related_name='review_links')
    assigned_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"{self.user_id} reviews {self.pull_request_id}"

    class Meta:
        db_table = 'pr_reviewers'
        constraints = [
            models.UniqueConstraint(fields=['pull_request', 'user'], name='uq_pr_reviewers_pr_user'),
        ]
