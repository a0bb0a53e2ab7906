from rest_framework.exceptions import AuthenticationFailed


class TokenExpired(AuthenticationFailed):
    default_detail = 'Token expirado'
    default_code = 'token_expired'
