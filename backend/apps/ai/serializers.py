"""Serializers for the AI app."""
from rest_framework import serializers

from apps.game.exceptions import ParseError
from apps.game.notation import parse_submove

from .conf import EngineConfig
from .services.analysis import EvaluationRequest


class EvaluatePositionSerializer(serializers.Serializer):
    """
    Validate an evaluation request.

    Field names follow the JSON the client sends (camelCase).
    """

    position = serializers.CharField(trim_whitespace=False)
    playerToMove = serializers.ChoiceField(choices=[1, 2])
    dice = serializers.ListField(
        child=serializers.IntegerField(min_value=1, max_value=6),
        min_length=2,
        max_length=2,
        required=False,
        allow_null=True,
    )
    alreadyUsedSubmoves = serializers.ListField(
        child=serializers.CharField(),
        required=False,
        default=list,
    )
    numSimulations = serializers.IntegerField(min_value=0, required=False, default=0)
    maxTopMoves = serializers.IntegerField(min_value=1)
    heuristicWeight = serializers.FloatField()
    mcWeight = serializers.FloatField()
    debug = serializers.BooleanField(required=False, default=False)
    deadlineSeconds = serializers.FloatField(min_value=0.001, required=False, allow_null=True)
    seed = serializers.IntegerField(required=False, allow_null=True)

    def validate_numSimulations(self, value):
        """Cap rollout trials at MAX_SIMULATIONS from BACKGAMMON_ENGINE."""
        limit = EngineConfig.from_settings().max_simulations
        if value > limit:
            raise serializers.ValidationError(
                f"Ensure this value is less than or equal to {limit}."
            )
        return value

    def validate_alreadyUsedSubmoves(self, value):
        """Parse each submove so bad notation fails before analysis."""
        try:
            return [parse_submove(text) for text in value]
        except ParseError as e:
            raise serializers.ValidationError(str(e))

    def to_request(self) -> EvaluationRequest:
        """Build the service request from validated data."""
        data = self.validated_data
        dice = data.get('dice')
        return EvaluationRequest(
            position=data['position'],
            player_to_move=data['playerToMove'],
            dice=tuple(dice) if dice else None,
            heuristic_weight=data['heuristicWeight'],
            mc_weight=data['mcWeight'],
            max_top_moves=data['maxTopMoves'],
            already_used_submoves=tuple(data['alreadyUsedSubmoves']),
            num_simulations=data['numSimulations'],
            debug=data['debug'],
            deadline_seconds=data.get('deadlineSeconds'),
            seed=data.get('seed'),
        )
