import logging

from django.db.models import Count, Q
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.cards.models import Card

from .models import Apartment
from .serializers import ApartmentDetailSerializer, ApartmentSerializer, ApartmentWriteSerializer
from .services import ApartmentLifecycleService

logger = logging.getLogger(__name__)


def card_stats_for(apartments):
    """
    Total de tarjetas y tarjetas activas por identificador de apartamento,
    en una sola consulta
    """
    identifiers = [apartment.apartment_identifier for apartment in apartments]
    rows = (
        Card.objects
        .filter(apartment_identifier__in=identifiers)
        .values('apartment_identifier')
        .annotate(total=Count('id'), active=Count('id', filter=Q(is_active=True)))
    )
    return {
        row['apartment_identifier']: {'totalCards': row['total'], 'activeCards': row['active']}
        for row in rows
    }


class ApartmentViewSet(viewsets.ModelViewSet):
    queryset = Apartment.objects.all()
    serializer_class = ApartmentSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ['unit_number']
    ordering_fields = ['floor', 'unit_number', 'created_at']
    ordering = ['floor', 'unit_number']
    lookup_value_regex = r'\d+'

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return ApartmentDetailSerializer
        if self.action in ['create', 'update', 'partial_update']:
            return ApartmentWriteSerializer
        return ApartmentSerializer

    def _list_response(self, apartments):
        apartments = list(apartments)
        serializer = ApartmentSerializer(
            apartments, many=True, context={'card_stats': card_stats_for(apartments)}
        )
        return serializer.data

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        return Response(self._list_response(queryset))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        apartment = ApartmentLifecycleService.create_apartment(
            floor=serializer.validated_data['floor'],
            unit_number=serializer.validated_data['unitNumber'],
        )
        return Response(ApartmentDetailSerializer(apartment).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        apartment = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        apartment = ApartmentLifecycleService.update_apartment(
            apartment,
            floor=serializer.validated_data.get('floor'),
            unit_number=serializer.validated_data.get('unitNumber'),
        )
        return Response(ApartmentDetailSerializer(apartment).data)

    def destroy(self, request, *args, **kwargs):
        apartment = ApartmentLifecycleService.delete_apartment(int(kwargs['pk']))
        return Response({
            'message': f'Apartamento {apartment.unit_number} eliminado exitosamente',
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path=r'floor/(?P<floor>\d+)')
    def by_floor(self, request, floor=None):
        """
        Obtener los apartamentos de un piso
        """
        floor = int(floor)
        if floor < 1:
            raise ValidationError({'floor': 'El piso debe ser un número positivo'})

        apartments = self.get_queryset().filter(floor=floor).order_by('unit_number')
        data = self._list_response(apartments)
        return Response({
            'floor': floor,
            'apartments': data,
            'total': len(data),
        })
