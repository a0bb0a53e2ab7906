from rest_framework import serializers

from apps.cards.models import Card
from apps.cards.serializers import CardSerializer

from .models import MAX_FLOOR, MIN_FLOOR, Apartment


class ApartmentSerializer(serializers.ModelSerializer):
    unitNumber = serializers.CharField(source='unit_number', read_only=True)
    apartmentId = serializers.CharField(source='apartment_identifier', read_only=True)
    stats = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Apartment
        fields = ['id', 'floor', 'unitNumber', 'apartmentId', 'stats', 'createdAt', 'updatedAt']

    def get_stats(self, obj):
        card_stats = self.context.get('card_stats')
        if card_stats is not None:
            return card_stats.get(obj.apartment_identifier, {'totalCards': 0, 'activeCards': 0})

        cards = Card.objects.filter(apartment_identifier=obj.apartment_identifier)
        return {
            'totalCards': cards.count(),
            'activeCards': cards.filter(is_active=True).count(),
        }


class ApartmentDetailSerializer(ApartmentSerializer):
    cards = serializers.SerializerMethodField()

    class Meta(ApartmentSerializer.Meta):
        fields = ApartmentSerializer.Meta.fields + ['cards']

    def get_cards(self, obj):
        cards = Card.objects.filter(apartment_identifier=obj.apartment_identifier).order_by('card_type')
        return CardSerializer(cards, many=True).data


class ApartmentWriteSerializer(serializers.Serializer):
    floor = serializers.IntegerField(min_value=MIN_FLOOR, max_value=MAX_FLOOR)
    unitNumber = serializers.CharField(max_length=10, trim_whitespace=True)

    def validate(self, attrs):
        if self.partial and not attrs:
            raise serializers.ValidationError('No se enviaron campos para actualizar')
        return attrs
