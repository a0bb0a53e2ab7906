from rest_framework import serializers

from apps.cards.models import CardType

from .models import LEGACY_ACTION_ALIASES, CommandAction, CommandLedgerEntry


class CommandLedgerEntrySerializer(serializers.ModelSerializer):
    unitNumber = serializers.CharField(source='unit_number', read_only=True)
    cardType = serializers.CharField(source='card_type', read_only=True)
    actionLabel = serializers.CharField(source='get_action_display', read_only=True)
    timestamp = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = CommandLedgerEntry
        fields = ['id', 'unitNumber', 'cardType', 'action', 'actionLabel', 'success', 'timestamp']
        read_only_fields = fields


class ElevatorCommandSerializer(serializers.Serializer):
    unitNumber = serializers.CharField(max_length=10, trim_whitespace=True)
    cardType = serializers.ChoiceField(choices=CardType.choices)
    action = serializers.CharField(max_length=10)

    def validate_action(self, value):
        """
        Acepta ACTIVATE/DEACTIVATE y los valores heredados ENCENDER/APAGAR
        """
        normalized = value.strip().upper()
        normalized = LEGACY_ACTION_ALIASES.get(normalized, normalized)
        if normalized not in CommandAction.values:
            raise serializers.ValidationError(
                'La acción debe ser ACTIVATE o DEACTIVATE (ENCENDER o APAGAR)'
            )
        return CommandAction(normalized).value


class LedgerQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=500, default=50)
    offset = serializers.IntegerField(min_value=0, default=0)
    unitNumber = serializers.CharField(max_length=10, required=False)
    fromTime = serializers.DateTimeField(required=False)
    toTime = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        from_time = attrs.get('fromTime')
        to_time = attrs.get('toTime')
        if from_time and to_time and from_time > to_time:
            raise serializers.ValidationError({'fromTime': 'fromTime debe ser anterior a toTime'})
        return attrs


class StatsQuerySerializer(serializers.Serializer):
    lookbackDays = serializers.IntegerField(min_value=0, max_value=3650, default=7)


class SummarySerializer(serializers.Serializer):
    totalCount = serializers.IntegerField(source='total_count')
    successCount = serializers.IntegerField(source='success_count')
    countToday = serializers.IntegerField(source='count_today')
    countLast7Days = serializers.IntegerField(source='count_last_7_days')


class ApartmentStatsSerializer(serializers.Serializer):
    unitNumber = serializers.CharField(source='unit_number')
    totalCommands = serializers.IntegerField(source='total_commands')
    successfulCommands = serializers.IntegerField(source='successful_commands')
    commandsInWindow = serializers.IntegerField(source='commands_in_window')


class CardTypeStatsSerializer(serializers.Serializer):
    cardType = serializers.CharField(source='card_type')
    label = serializers.CharField()
    totalCommands = serializers.IntegerField(source='total_commands')
    successfulCommands = serializers.IntegerField(source='successful_commands')


class DayStatsSerializer(serializers.Serializer):
    date = serializers.DateField(source='day')
    totalCommands = serializers.IntegerField(source='total_commands')
    successfulCommands = serializers.IntegerField(source='successful_commands')
