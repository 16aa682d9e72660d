from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..errors import DomainError
from ..serializers import PullRequestShortSerializer, SetIsActiveSerializer, UserSerializer
from ..services import UserService
from .errors import domain_error_response, error_response, server_error_response, validation_error_response

user_service = UserService()


@api_view(['POST'])
def user_set_active(request):
    """POST /users/setIsActive - Установить флаг активности пользователя"""
    try:
        request_serializer = SetIsActiveSerializer(data=request.data)
        if not request_serializer.is_valid():
            return validation_error_response(request_serializer.errors)

        data = request_serializer.validated_data
        user = user_service.set_user_active(data['user_id'], data['is_active'])

        return Response({
            'user': UserSerializer(user).data
        })

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response()


@api_view(['GET'])
def users_get_review(request):
    """GET /users/getReview - Получить PR'ы, где пользователь назначен ревьювером"""
    try:
        user_id = request.query_params.get('user_id')

        if not user_id:
            return error_response(
                'VALIDATION_ERROR', 'user_id parameter is required', status.HTTP_400_BAD_REQUEST
            )

        assigned_prs = user_service.get_review_assignments(user_id)

        return Response({
            'user_id': user_id,
            'pull_requests': PullRequestShortSerializer(assigned_prs, many=True).data
        })

    except Exception:
        return server_error_response()
