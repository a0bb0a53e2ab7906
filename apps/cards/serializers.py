from rest_framework import serializers

from apps.apartments.identifiers import unit_number_from_apartment_id

from .models import Card, CardType
from .services import CardRegistry


class CardSerializer(serializers.ModelSerializer):
    apartmentId = serializers.CharField(source='apartment_identifier', read_only=True)
    cardType = serializers.CharField(source='card_type', read_only=True)
    cardTypeLabel = serializers.CharField(source='get_card_type_display', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    lastUsedAt = serializers.DateTimeField(source='last_used_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Card
        fields = [
            'id', 'apartmentId', 'cardType', 'cardTypeLabel', 'name',
            'isActive', 'lastUsedAt', 'createdAt', 'updatedAt'
        ]


class CardCreateSerializer(serializers.Serializer):
    """
    Alta de tarjeta. Las tarjetas creadas por la API empiezan inactivas.
    """
    apartmentId = serializers.CharField(max_length=20, trim_whitespace=True)
    cardType = serializers.ChoiceField(choices=CardType.choices)
    name = serializers.CharField(max_length=100, trim_whitespace=True)

    def validate_apartmentId(self, value):
        if not unit_number_from_apartment_id(value):
            raise serializers.ValidationError("Formato de apartamento inválido, se espera 'apt-<número>'")
        return value

    def create(self, validated_data):
        return CardRegistry.create_card(
            apartment_identifier=validated_data['apartmentId'],
            card_type=validated_data['cardType'],
            name=validated_data['name'],
        )

    def to_representation(self, instance):
        return CardSerializer(instance).data


class CardUpdateSerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source='is_active', required=False)

    class Meta:
        model = Card
        fields = ['name', 'isActive']
        extra_kwargs = {'name': {'required': False}}

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('No se enviaron campos para actualizar')
        return attrs

    def to_representation(self, instance):
        return CardSerializer(instance).data
