from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..errors import DomainError
from ..serializers import BulkDeactivateSerializer, BulkDeactivationSerializer, TeamAddSerializer, TeamSerializer
from ..services import TeamService
from .errors import domain_error_response, error_response, server_error_response, validation_error_response

team_service = TeamService()


@api_view(['POST'])
def team_add(request):
    """POST /team/add - Создать команду с участниками"""
    try:
        request_serializer = TeamAddSerializer(data=request.data)
        if not request_serializer.is_valid():
            return validation_error_response(request_serializer.errors)

        data = request_serializer.validated_data
        team = team_service.create_team(data['team_name'], data.get('members', []))

        return Response({
            'team': TeamSerializer(team).data
        }, status=status.HTTP_201_CREATED)

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response()


@api_view(['GET'])
def team_get(request):
    """GET /team/get - Получить команду с участниками"""
    try:
        team_name = request.query_params.get('team_name')

        if not team_name:
            return error_response(
                'VALIDATION_ERROR', 'team_name parameter is required', status.HTTP_400_BAD_REQUEST
            )

        team = team_service.get_team(team_name)
        return Response(TeamSerializer(team).data)

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response()


@api_view(['POST'])
def team_bulk_deactivate(request):
    """POST /team/bulkDeactivate - Деактивировать участников команды и переназначить их открытые PR"""
    try:
        request_serializer = BulkDeactivateSerializer(data=request.data)
        if not request_serializer.is_valid():
            return validation_error_response(request_serializer.errors)

        data = request_serializer.validated_data
        result = team_service.bulk_deactivate(data['team_name'], data.get('user_ids'))

        return Response(BulkDeactivationSerializer(result).data)

    except DomainError as e:
        return domain_error_response(e)
    except Exception:
        return server_error_response()
