import logging

import jwt
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from .exceptions import TokenExpired

logger = logging.getLogger(__name__)


class ResidentJWTAuthentication(JWTAuthentication):
    """
    Autenticación JWT que distingue un token expirado (401) de uno
    malformado o con firma inválida (403).
    """

    def get_validated_token(self, raw_token):
        try:
            return super().get_validated_token(raw_token)
        except InvalidToken:
            if self._is_expired(raw_token):
                logger.info("Token JWT expirado")
                raise TokenExpired()
            logger.warning("Token JWT inválido")
            raise

    @staticmethod
    def _is_expired(raw_token):
        if isinstance(raw_token, bytes):
            raw_token = raw_token.decode('utf-8', errors='replace')
        try:
            jwt.decode(
                raw_token,
                options={'verify_signature': False, 'verify_exp': True},
            )
        except jwt.ExpiredSignatureError:
            return True
        except jwt.PyJWTError:
            return False
        return False
