from rest_framework import serializers


class TeamMemberSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=50)
    username = serializers.CharField(max_length=100)
    is_active = serializers.BooleanField()


class TeamSerializer(serializers.Serializer):
    team_name = serializers.CharField(max_length=100)
    members = TeamMemberSerializer(many=True)


class TeamAddSerializer(serializers.Serializer):
    team_name = serializers.CharField(max_length=100)
    members = TeamMemberSerializer(many=True, required=False)


class UserSerializer(serializers.Serializer):
    user_id = serializers.CharField()
    username = serializers.CharField()
    team_name = serializers.CharField(allow_blank=True)
    is_active = serializers.BooleanField()


class SetIsActiveSerializer(serializers.Serializer):
    user_id = serializers.CharField()
    is_active = serializers.BooleanField()


class PullRequestSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField()
    pull_request_name = serializers.CharField()
    author_id = serializers.CharField()
    status = serializers.CharField()
    team_name = serializers.CharField()
    assigned_reviewers = serializers.ListField(child=serializers.CharField())
    createdAt = serializers.DateTimeField(source='created_at', format='%Y-%m-%dT%H:%M:%SZ')
    mergedAt = serializers.DateTimeField(source='merged_at', format='%Y-%m-%dT%H:%M:%SZ', allow_null=True)


class PullRequestShortSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField()
    pull_request_name = serializers.CharField()
    author_id = serializers.CharField()
    status = serializers.CharField()


class PullRequestCreateSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(max_length=100)
    pull_request_name = serializers.CharField(max_length=200)
    author_id = serializers.CharField(max_length=50)


class PullRequestMergeSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(max_length=100)


class PullRequestReassignSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(max_length=100)
    old_user_id = serializers.CharField(max_length=50, required=False)
    old_reviewer_id = serializers.CharField(max_length=50, required=False)

    def validate(self, attrs):
        # old_reviewer_id - старое имя поля, принимаем оба
        old_user_id = attrs.get('old_user_id') or attrs.get('old_reviewer_id')
        if not old_user_id:
            raise serializers.ValidationError('old_user_id is required')
        return {'pull_request_id': attrs['pull_request_id'], 'old_user_id': old_user_id}


class BulkDeactivateSerializer(serializers.Serializer):
    team_name = serializers.CharField(max_length=100)
    user_ids = serializers.ListField(child=serializers.CharField(max_length=50), required=False)


class ReviewerReplacementSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField()
    old_user_id = serializers.CharField()
    new_user_id = serializers.CharField()


class BulkDeactivationSerializer(serializers.Serializer):
    team_name = serializers.CharField()
    deactivated = serializers.ListField(child=serializers.CharField())
    reassigned = ReviewerReplacementSerializer(many=True)


class UserReviewStatsSerializer(serializers.Serializer):
    id = serializers.CharField()
    username = serializers.CharField()
    prs_reviewed = serializers.IntegerField()
    open_prs_reviewed = serializers.IntegerField()
    merged_prs_reviewed = serializers.IntegerField()


class PRReviewerStatsSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField(source='title')
    status = serializers.CharField()
    team_name = serializers.CharField(source='team_id')
    reviewers_count = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    merged_at = serializers.DateTimeField(allow_null=True)


class StatsSerializer(serializers.Serializer):
    user_review_stats = UserReviewStatsSerializer(many=True)
    pr_reviewer_stats = PRReviewerStatsSerializer(many=True)
