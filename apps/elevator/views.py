from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .serializers import (
    ApartmentStatsSerializer,
    CardTypeStatsSerializer,
    CommandLedgerEntrySerializer,
    DayStatsSerializer,
    ElevatorCommandSerializer,
    LedgerQuerySerializer,
    StatsQuerySerializer,
    SummarySerializer,
)
from .services import CommandLedger, DecisionReason, ElevatorCommandService
from .statistics import ElevatorStatistics

DENIED_RESPONSES = {
    DecisionReason.CARD_NOT_FOUND: (
        status.HTTP_404_NOT_FOUND,
        'Tarjeta no encontrada para este apartamento',
    ),
    DecisionReason.CARD_INACTIVE: (
        status.HTTP_400_BAD_REQUEST,
        'La tarjeta está inactiva',
    ),
}


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def send_command(request):
    """
    Enviar un comando al ascensor. Todo intento queda registrado.
    """
    serializer = ElevatorCommandSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    result = ElevatorCommandService.send_command(
        unit_number=data['unitNumber'],
        card_type=data['cardType'],
        action=data['action'],
    )
    entry = CommandLedgerEntrySerializer(result.entry).data

    if not result.allowed:
        status_code, message = DENIED_RESPONSES[result.decision.reason]
        return Response({
            'error': result.decision.reason,
            'message': message,
            'allowed': False,
            'entry': entry,
        }, status=status_code)

    return Response({
        'message': 'Comando enviado exitosamente',
        'allowed': True,
        'entry': entry,
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def elevator_status(request):
    """
    Estado del ascensor: último comando y resumen de uso
    """
    latest = CommandLedger.latest_entry()
    return Response({
        'message': 'Estado del ascensor obtenido exitosamente',
        'connected': True,
        'lastEntry': CommandLedgerEntrySerializer(latest).data if latest else None,
        'summary': SummarySerializer(ElevatorStatistics.summary()).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def elevator_logs(request):
    """
    Registros de comandos paginados, más recientes primero
    """
    query = LedgerQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    params = query.validated_data
    limit, offset = params['limit'], params['offset']

    entries, total = CommandLedger.list_entries(
        unit_number=params.get('unitNumber'),
        from_time=params.get('fromTime'),
        to_time=params.get('toTime'),
        limit=limit,
        offset=offset,
    )

    return Response({
        'message': 'Registros de comandos obtenidos exitosamente',
        'entries': CommandLedgerEntrySerializer(entries, many=True).data,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'page': offset // limit + 1,
        },
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def elevator_stats(request):
    """
    Estadísticas por apartamento, tipo de tarjeta y día
    """
    query = StatsQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    lookback_days = query.validated_data['lookbackDays']

    stats = ElevatorStatistics.detailed_stats(lookback_days)

    return Response({
        'message': 'Estadísticas obtenidas exitosamente',
        'lookbackDays': lookback_days,
        'byApartment': ApartmentStatsSerializer(stats['by_apartment'], many=True).data,
        'byCardType': CardTypeStatsSerializer(stats['by_card_type'], many=True).data,
        'byDay': DayStatsSerializer(stats['by_day'], many=True).data,
    })
