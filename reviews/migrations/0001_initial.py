import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Team',
            fields=[
                ('name', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'teams',
            },
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('username', models.CharField(db_column='name', max_length=100)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'users',
            },
        ),
        migrations.CreateModel(
            name='TeamMember',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('team', models.ForeignKey(
                    db_column='team_name',
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='memberships',
                    to='reviews.team',
                )),
                ('user', models.ForeignKey(
                    db_column='user_id',
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='memberships',
                    to='reviews.user',
                )),
            ],
            options={
                'db_table': 'team_members',
                'constraints': [
                    models.UniqueConstraint(fields=('team', 'user'), name='uq_team_members_team_user'),
                ],
            },
        ),
        migrations.AddField(
            model_name='team',
            name='members',
            field=models.ManyToManyField(
                blank=True, related_name='teams', through='reviews.TeamMember', to='reviews.user'
            ),
        ),
        migrations.CreateModel(
            name='PullRequest',
            fields=[
                ('id', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('status', models.CharField(
                    choices=[('OPEN', 'Open'), ('MERGED', 'Merged')], default='OPEN', max_length=10
                )),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('merged_at', models.DateTimeField(blank=True, null=True)),
                ('author', models.ForeignKey(
                    db_column='author_id',
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='authored_prs',
                    to='reviews.user',
                )),
                ('team', models.ForeignKey(
                    db_column='team_name',
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='pull_requests',
                    to='reviews.team',
                )),
            ],
            options={
                'db_table': 'prs',
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('status__in', ['OPEN', 'MERGED'])),
                        name='ck_prs_status',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='PullRequestReviewer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('assigned_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('pull_request', models.ForeignKey(
                    db_column='pr_id',
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='reviewer_links',
                    to='reviews.pullrequest',
                )),
                ('user', models.ForeignKey(
                    db_column='user_id',
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='review_links',
                    to='reviews.user',
                )),
            ],
            options={
                'db_table': 'pr_reviewers',
                'constraints': [
                    models.UniqueConstraint(fields=('pull_request', 'user'), name='uq_pr_reviewers_pr_user'),
                ],
            },
        ),
        migrations.AddField(
            model_name='pullrequest',
            name='reviewers',
            field=models.ManyToManyField(
                blank=True,
                related_name='assigned_prs',
                through='reviews.PullRequestReviewer',
                to='reviews.user',
            ),
        ),
    ]
