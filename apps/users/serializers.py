from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from apps.core.exceptions import EmailAlreadyRegistered

from .models import User


class UserSerializer(serializers.ModelSerializer):
    apartmentId = serializers.CharField(source='apartment_identifier', read_only=True)
    unitNumber = serializers.CharField(source='unit_number', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'apartmentId', 'floor', 'unitNumber', 'createdAt', 'updatedAt']
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """
    Actualización parcial del perfil: nombre, email y/o contraseña.
    """
    password = serializers.CharField(write_only=True, required=False, validators=[validate_password])

    class Meta:
        model = User
        fields = ['name', 'email', 'password']
        extra_kwargs = {
            'name': {'required': False, 'allow_blank': False},
            'email': {'required': False, 'validators': []},
        }

    def validate_email(self, value):
        """
        Validar que el email sea único (excluyendo el usuario actual).
        """
        value = User.objects.normalize_email(value)
        if User.objects.filter(email__iexact=value).exclude(id=self.instance.id).exists():
            raise EmailAlreadyRegistered()
        return value

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('No se enviaron campos para actualizar')
        return attrs

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance

    def to_representation(self, instance):
        return UserSerializer(instance).data
