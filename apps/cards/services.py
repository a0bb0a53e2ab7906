import logging
from datetime import datetime
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.core.exceptions import CardAlreadyExists, CardNotFound

from .models import DEFAULT_CARDS, Card

logger = logging.getLogger(__name__)


class CardRegistry:
    """
    Servicio para gestionar las tarjetas de acceso de cada apartamento
    """

    @staticmethod
    def find_card(apartment_identifier: str, card_type: str, for_update: bool = False) -> Optional[Card]:
        """
        Busca la tarjeta de un tipo para un apartamento. Con for_update=True
        bloquea la fila hasta el fin de la transacción en curso.
        """
        queryset = Card.objects.filter(
            apartment_identifier=apartment_identifier,
            card_type=card_type,
        )
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.first()

    @staticmethod
    def create_card(apartment_identifier: str, card_type: str, name: str, is_active: bool = False) -> Card:
        if Card.objects.filter(apartment_identifier=apartment_identifier, card_type=card_type).exists():
            raise CardAlreadyExists()

        try:
            with transaction.atomic():
                card = Card.objects.create(
                    apartment_identifier=apartment_identifier,
                    card_type=card_type,
                    name=name,
                    is_active=is_active,
                )
        except IntegrityError:
            # Otra petición creó la misma tarjeta entre la verificación y el insert
            raise CardAlreadyExists()

        logger.info(f"Tarjeta {card_type} creada para {apartment_identifier}")
        return card

    @staticmethod
    def set_active(card_id: int, active: bool) -> Card:
        updated = Card.objects.filter(id=card_id).update(
            is_active=active,
            updated_at=timezone.now(),
        )
        if not updated:
            raise CardNotFound()

        logger.info(f"Tarjeta {card_id} {'activada' if active else 'desactivada'}")
        return Card.objects.get(id=card_id)

    @staticmethod
    def touch_last_used(card: Card, timestamp: Optional[datetime] = None) -> Card:
        timestamp = timestamp or timezone.now()
        Card.objects.filter(id=card.id).update(last_used_at=timestamp, updated_at=timestamp)
        card.last_used_at = timestamp
        card.updated_at = timestamp
        return card

    @staticmethod
    def provision_default_cards(apartment_identifier: str) -> List[Card]:
        """
        Crea las tarjetas por defecto (A activa, B y C inactivas) que aún no
        existan para el apartamento. Retorna solo las tarjetas creadas.
        """
        existing_types = set(
            Card.objects.filter(apartment_identifier=apartment_identifier)
            .values_list('card_type', flat=True)
        )

        created = []
        for card_type, name, is_active in DEFAULT_CARDS:
            if card_type in existing_types:
                continue
            created.append(CardRegistry.create_card(apartment_identifier, card_type, name, is_active))

        return created

    @staticmethod
    def delete_for_apartment(apartment_identifier: str) -> int:
        deleted, _ = Card.objects.filter(apartment_identifier=apartment_identifier).delete()
        return deleted

    @staticmethod
    def rekey(old_identifier: str, new_identifier: str) -> int:
        """
        Reasigna las tarjetas de un apartamento a un nuevo identificador
        """
        return Card.objects.filter(apartment_identifier=old_identifier).update(
            apartment_identifier=new_identifier,
            updated_at=timezone.now(),
        )
