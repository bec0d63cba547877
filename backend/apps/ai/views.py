"""Views for the AI app."""
import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.game.exceptions import InvariantViolation

from .conf import EngineConfig, shared_heuristic_cache
from .serializers import EvaluatePositionSerializer
from .services.analysis import analyze

logger = logging.getLogger(__name__)


class EvaluatePositionView(APIView):
    """Rank the legal plays for a position and roll."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        """Analyze a position."""
        serializer = EvaluatePositionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            evaluation = serializer.to_request()
            result = analyze(
                evaluation,
                config=EngineConfig.from_settings(),
                cache=shared_heuristic_cache(),
            )
        except InvariantViolation:
            logger.exception("Board invariant broken during analysis")
            return Response(
                {'error': 'Internal error while analyzing the position.'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        except ValueError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response(result.to_dict())
