import logging

from django.db.models import Count, Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.cards.models import Card
from apps.elevator.serializers import SummarySerializer
from apps.elevator.statistics import ElevatorStatistics

from .serializers import ProfileUpdateSerializer, UserSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def profile(request):
    """
    Perfil del usuario autenticado
    """
    user = request.user

    if request.method == 'GET':
        return Response({'user': UserSerializer(user).data})

    if request.method == 'DELETE':
        email = user.email
        # Las tarjetas y la bitácora pertenecen al apartamento, no al usuario
        user.delete()
        logger.info(f"Cuenta eliminada: {email}")
        return Response({'message': 'Cuenta eliminada exitosamente'}, status=status.HTTP_200_OK)

    serializer = ProfileUpdateSerializer(user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    logger.info(f"Perfil actualizado: {user.email}")

    return Response({
        'message': 'Perfil actualizado exitosamente',
        'user': serializer.data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_stats(request):
    """
    Tarjetas del apartamento del usuario y resumen de sus comandos
    """
    user = request.user

    cards = Card.objects.filter(apartment_identifier=user.apartment_identifier).aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(is_active=True)),
    )
    summary = ElevatorStatistics.summary(unit_number=user.unit_number)

    return Response({
        'apartmentId': user.apartment_identifier,
        'cards': {
            'totalCards': cards['total'],
            'activeCards': cards['active'],
        },
        'commands': SummarySerializer(summary).data,
    })
