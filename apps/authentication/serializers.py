from django.contrib.auth.password_validation import validate_password
from django.db import IntegrityError, transaction
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from apps.apartments.identifiers import parse_apartment_id
from apps.cards.services import CardRegistry
from apps.core.exceptions import EmailAlreadyRegistered
from apps.users.models import User
from apps.users.serializers import UserSerializer


class ResidentTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Serializer personalizado para JWT que incluye información adicional del usuario.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)

        # Agregar información personalizada al token
        token['email'] = user.email
        token['name'] = user.name

        return token

    def validate(self, attrs):
        data = super().validate(attrs)

        return {
            'message': 'Inicio de sesión exitoso',
            'user': UserSerializer(self.user).data,
            'tokens': {
                'access': data['access'],
                'refresh': data['refresh'],
            },
        }


class UserRegistrationSerializer(serializers.Serializer):
    """
    Registro de residentes. El apartamento se indica como "apt-<unidad>" y
    sus tarjetas por defecto se crean si aún no existen.
    """
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])
    name = serializers.CharField(max_length=255, trim_whitespace=True)
    apartmentId = serializers.CharField(max_length=20, trim_whitespace=True)

    def validate_email(self, value):
        value = User.objects.normalize_email(value)
        if User.objects.filter(email__iexact=value).exists():
            raise EmailAlreadyRegistered()
        return value

    def validate_apartmentId(self, value):
        parsed = parse_apartment_id(value)
        if parsed is None:
            raise serializers.ValidationError(
                'El ID del apartamento debe tener el formato apt-<número>, por ejemplo apt-201'
            )
        return value

    def create(self, validated_data):
        apartment_identifier = validated_data['apartmentId']
        parsed = parse_apartment_id(apartment_identifier)

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=validated_data['email'],
                    password=validated_data['password'],
                    name=validated_data['name'],
                    apartment_identifier=apartment_identifier,
                    floor=parsed.floor,
                    unit_number=parsed.unit_number,
                )
                CardRegistry.provision_default_cards(apartment_identifier)
        except IntegrityError:
            raise EmailAlreadyRegistered()

        return user

    def to_representation(self, instance):
        return UserSerializer(instance).data


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()
