import logging

from django_filters import rest_framework as filters
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Card
from .serializers import CardCreateSerializer, CardSerializer, CardUpdateSerializer
from .services import CardRegistry

logger = logging.getLogger(__name__)


class CardFilter(filters.FilterSet):
    apartmentId = filters.CharFilter(field_name='apartment_identifier')
    cardType = filters.CharFilter(field_name='card_type')
    isActive = filters.BooleanFilter(field_name='is_active')

    class Meta:
        model = Card
        fields = ['apartmentId', 'cardType', 'isActive']


class CardViewSet(viewsets.ModelViewSet):
    queryset = Card.objects.all()
    serializer_class = CardSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [filters.DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = CardFilter
    search_fields = ['name', 'apartment_identifier']
    ordering_fields = ['apartment_identifier', 'card_type', 'last_used_at', 'created_at']
    ordering = ['apartment_identifier', 'card_type']

    def get_serializer_class(self):
        if self.action == 'create':
            return CardCreateSerializer
        if self.action in ['update', 'partial_update']:
            return CardUpdateSerializer
        return CardSerializer

    def update(self, request, *args, **kwargs):
        # PUT y PATCH aceptan solo los campos enviados
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        logger.info(f"Tarjeta {instance.id} ({instance.apartment_identifier}/{instance.card_type}) eliminada")
        instance.delete()

    @action(detail=False, methods=['get'], url_path=r'apartment/(?P<apartment_identifier>[^/.]+)')
    def by_apartment(self, request, apartment_identifier=None):
        """
        Obtener las tarjetas de un apartamento
        """
        cards = self.get_queryset().filter(apartment_identifier=apartment_identifier).order_by('card_type')
        serializer = CardSerializer(cards, many=True)
        return Response({
            'apartmentId': apartment_identifier,
            'cards': serializer.data,
            'total': len(serializer.data),
        })

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        """
        Activar una tarjeta
        """
        card = CardRegistry.set_active(self.get_object().id, True)
        return Response(CardSerializer(card).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        """
        Desactivar una tarjeta
        """
        card = CardRegistry.set_active(self.get_object().id, False)
        return Response(CardSerializer(card).data, status=status.HTTP_200_OK)
