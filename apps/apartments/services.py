import logging
from typing import Optional

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from apps.cards.models import Card
from apps.cards.services import CardRegistry
from apps.core.exceptions import ApartmentAlreadyExists, ApartmentNotFound, ConflictError
from apps.elevator.services import CommandLedger
from apps.users.models import User

from .identifiers import build_apartment_id
from .models import Apartment

logger = logging.getLogger(__name__)


class ApartmentLifecycleService:
    """
    Servicio para crear, actualizar y eliminar apartamentos junto con sus
    tarjetas y su historial de comandos
    """

    @staticmethod
    def create_apartment(floor: int, unit_number: str) -> Apartment:
        """
        Crea el apartamento y sus tres tarjetas por defecto en una sola transacción
        """
        if Apartment.objects.filter(unit_number=unit_number).exists():
            raise ApartmentAlreadyExists()

        try:
            with transaction.atomic():
                apartment = Apartment.objects.create(floor=floor, unit_number=unit_number)
                CardRegistry.provision_default_cards(apartment.apartment_identifier)
        except IntegrityError:
            raise ApartmentAlreadyExists()

        logger.info(f"Apartamento {unit_number} creado en el piso {floor}")
        return apartment

    @staticmethod
    def update_apartment(apartment: Apartment, floor: Optional[int] = None, unit_number: Optional[str] = None) -> Apartment:
        if floor is None and unit_number is None:
            raise ValidationError({'non_field_errors': ['No se enviaron campos para actualizar']})

        old_identifier = apartment.apartment_identifier
        unit_changed = unit_number is not None and unit_number != apartment.unit_number

        with transaction.atomic():
            if unit_changed:
                if Apartment.objects.filter(unit_number=unit_number).exclude(id=apartment.id).exists():
                    raise ApartmentAlreadyExists()
                new_identifier = build_apartment_id(unit_number)
                if Card.objects.filter(apartment_identifier=new_identifier).exists():
                    raise ConflictError(f"Ya existen tarjetas para {new_identifier}")
                apartment.unit_number = unit_number

            if floor is not None:
                apartment.floor = floor

            apartment.save()

            if unit_changed:
                moved = CardRegistry.rekey(old_identifier, apartment.apartment_identifier)
                logger.info(f"{moved} tarjetas reasignadas de {old_identifier} a {apartment.apartment_identifier}")

            # Los residentes siguen al apartamento
            residents = User.objects.filter(apartment_identifier=old_identifier).update(
                apartment_identifier=apartment.apartment_identifier,
                unit_number=apartment.unit_number,
                floor=apartment.floor,
            )
            if residents:
                logger.info(f"{residents} residentes actualizados a {apartment.apartment_identifier}")

        return apartment

    @staticmethod
    def delete_apartment(apartment_id: int) -> Apartment:
        """
        Elimina las tarjetas, los registros de comandos y el apartamento
        """
        with transaction.atomic():
            apartment = Apartment.objects.select_for_update().filter(id=apartment_id).first()
            if apartment is None:
                raise ApartmentNotFound()

            cards_deleted = CardRegistry.delete_for_apartment(apartment.apartment_identifier)
            entries_deleted = CommandLedger.purge_unit(apartment.unit_number)
            apartment.delete()

        logger.info(
            f"Apartamento {apartment.unit_number} eliminado junto con "
            f"{cards_deleted} tarjetas y {entries_deleted} registros de comandos"
        )
        return apartment
