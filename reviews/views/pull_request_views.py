from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..errors import DomainError
from ..serializers import (
    PullRequestCreateSerializer,
    PullRequestMergeSerializer,
    PullRequestReassignSerializer,
    PullRequestSerializer,
)
from ..services import PullRequestService
from .errors import domain_error_response, server_error_response, validation_error_response

pull_request_service = PullRequestService()


@api_view(['POST'])
def pullrequest_create(request):
    """POST /pullRequest/create - Создать PR и автоматически назначить до 2 ревьюверов"""
    try:
        request_serializer = PullRequestCreateSerializer(data=request.data)
        if not request_serializer.is_valid():
            return validation_error_response(request_serializer.errors)

        data = request_serializer.validated_data
        pr = pull_request_service.create_pull_request(
            data['pull_request_id'], data['pull_request_name'], data['author_id']
        )

        return Response({
            'pr': PullRequestSerializer(pr).data
        }, status=status.HTTP_201_CREATED)

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response()


@api_view(['POST'])
def pullrequest_merge(request):
    """POST /pullRequest/merge - Пометить PR как MERGED (идемпотентно)"""
    try:
        request_serializer = PullRequestMergeSerializer(data=request.data)
        if not request_serializer.is_valid():
            return validation_error_response(request_serializer.errors)

        pr = pull_request_service.merge_pull_request(request_serializer.validated_data['pull_request_id'])

        return Response({
            'pr': PullRequestSerializer(pr).data
        })

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response()


@api_view(['POST'])
def pullrequest_reassign(request):
    """POST /pullRequest/reassign - Переназначить ревьювера"""
    try:
        request_serializer = PullRequestReassignSerializer(data=request.data)
        if not request_serializer.is_valid():
            return validation_error_response(request_serializer.errors)

        data = request_serializer.validated_data
        new_reviewer_id, pr = pull_request_service.reassign_reviewer(data['pull_request_id'], data['old_user_id'])

        return Response({
            'pr': PullRequestSerializer(pr).data,
            'replaced_by': new_reviewer_id
        })

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response()
