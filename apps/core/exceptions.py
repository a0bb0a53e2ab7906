"""
Errores de dominio.

Los servicios lanzan estas excepciones y `apps.core.handlers` las traduce a
respuestas HTTP.
"""
from rest_framework import status


class DomainError(Exception):
    error_kind = 'Internal'
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Algo salió mal'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(DomainError):
    error_kind = 'NotFound'
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Recurso no encontrado'


class ApartmentNotFound(NotFoundError):
    default_message = 'Apartamento no encontrado'


class CardNotFound(NotFoundError):
    default_message = 'Tarjeta no encontrada'


class ConflictError(DomainError):
    error_kind = 'Conflict'
    status_code = status.HTTP_409_CONFLICT
    default_message = 'El recurso ya existe'


class ApartmentAlreadyExists(ConflictError):
    default_message = 'El apartamento ya existe'


class CardAlreadyExists(ConflictError):
    default_message = 'Ya existe una tarjeta de este tipo para el apartamento'


class EmailAlreadyRegistered(ConflictError):
    default_message = 'El email ya está registrado'


class CommandDispatchError(DomainError):
    """No se pudo procesar un comando del ascensor."""
    default_message = 'Error al procesar el comando del ascensor'


class ImmutableLedgerEntry(DomainError):
    default_message = 'Los registros de comandos no se pueden modificar'
