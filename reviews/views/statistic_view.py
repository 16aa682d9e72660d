from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers import StatsSerializer
from ..services import StatsService
from .errors import server_error_response

stats_service = StatsService()


@api_view(['GET'])
def stats_overview(request):
    """
    GET /statistic - Общая статистика назначений
    """
    try:
        stats = stats_service.get_review_stats()
        return Response(StatsSerializer(stats).data)

    except Exception:
        return server_error_response()
