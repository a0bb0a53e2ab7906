import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from apps.authentication.serializers import (
    LogoutSerializer,
    ResidentTokenObtainPairSerializer,
    UserRegistrationSerializer,
)
from apps.users.serializers import UserSerializer

logger = logging.getLogger(__name__)


class ResidentTokenObtainPairView(TokenObtainPairView):
    """
    Vista personalizada para obtener token JWT con información adicional del usuario.
    """
    serializer_class = ResidentTokenObtainPairSerializer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    Registro de nuevos residentes.
    """
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()

    # Generar tokens JWT
    refresh = ResidentTokenObtainPairSerializer.get_token(user)
    logger.info(f"Usuario registrado: {user.email} ({user.apartment_identifier})")

    return Response({
        'message': 'Usuario registrado exitosamente',
        'user': serializer.data,
        'tokens': {
            'access': str(refresh.access_token),
            'refresh': str(refresh),
        }
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """
    Cerrar sesión del usuario invalidando su refresh token.
    """
    serializer = LogoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        RefreshToken(serializer.validated_data['refresh']).blacklist()
    except TokenError as e:
        raise ValidationError({'refresh': str(e)})

    logger.info(f"Sesión cerrada: {request.user.email}")
    return Response({
        'message': 'Sesión cerrada exitosamente'
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """
    Obtener el usuario autenticado.
    """
    return Response({'user': UserSerializer(request.user).data})
