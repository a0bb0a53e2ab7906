"""
Autorización, registro y despacho de comandos del ascensor.

Cada intento de comando deja exactamente un registro en la bitácora
(comandos_ascensor), tanto si se autoriza como si se rechaza.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from django.db import transaction
from django.db.models import QuerySet

from apps.apartments.identifiers import build_apartment_id
from apps.cards.models import Card
from apps.cards.services import CardRegistry
from apps.core.exceptions import CommandDispatchError

from .models import CommandLedgerEntry

logger = logging.getLogger(__name__)


class DecisionReason:
    AUTHORIZED = 'Authorized'
    CARD_NOT_FOUND = 'CardNotFound'
    CARD_INACTIVE = 'CardInactive'


@dataclass
class AuthorizationDecision:
    allowed: bool
    reason: str
    card: Optional[Card] = None


@dataclass
class CommandResult:
    decision: AuthorizationDecision
    entry: CommandLedgerEntry

    @property
    def allowed(self):
        return self.decision.allowed


class CommandAuthorizer:
    """
    Valida un comando (unidad, tipo de tarjeta, acción) contra el estado de
    las tarjetas. Debe ejecutarse dentro de una transacción: la tarjeta queda
    bloqueada hasta que se registra el comando.
    """

    @staticmethod
    def authorize(unit_number: str, card_type: str, action: str) -> AuthorizationDecision:
        apartment_identifier = build_apartment_id(unit_number)
        card = CardRegistry.find_card(apartment_identifier, card_type, for_update=True)

        if card is None:
            return AuthorizationDecision(allowed=False, reason=DecisionReason.CARD_NOT_FOUND)

        if not card.is_active:
            return AuthorizationDecision(allowed=False, reason=DecisionReason.CARD_INACTIVE, card=card)

        CardRegistry.touch_last_used(card)
        return AuthorizationDecision(allowed=True, reason=DecisionReason.AUTHORIZED, card=card)


class CommandLedger:
    """
    Bitácora de solo inserción de los comandos del ascensor
    """

    # Filtros permitidos: nombre público -> lookup del ORM
    FILTER_LOOKUPS = {
        'unit_number': 'unit_number',
        'from_time': 'created_at__gte',
        'to_time': 'created_at__lte',
    }

    @staticmethod
    def record(unit_number: str, card_type: str, action: str, success: bool) -> CommandLedgerEntry:
        return CommandLedgerEntry.objects.create(
            unit_number=unit_number,
            card_type=card_type,
            action=action,
            success=success,
        )

    @classmethod
    def filtered(cls, **filters) -> QuerySet:
        lookups = {}
        for name, value in filters.items():
            if name not in cls.FILTER_LOOKUPS:
                raise ValueError(f"Filtro no permitido: {name}")
            if value is not None and value != '':
                lookups[cls.FILTER_LOOKUPS[name]] = value
        return CommandLedgerEntry.objects.filter(**lookups)

    @classmethod
    def list_entries(
        cls,
        unit_number: Optional[str] = None,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[list, int]:
        """
        Retorna una página de registros (más recientes primero) y el total
        de registros que cumplen los filtros.
        """
        queryset = cls.filtered(unit_number=unit_number, from_time=from_time, to_time=to_time)
        total = queryset.count()
        page = list(queryset.order_by('-created_at', '-id')[offset:offset + limit])
        return page, total

    @staticmethod
    def latest_entry() -> Optional[CommandLedgerEntry]:
        return CommandLedgerEntry.objects.order_by('-created_at', '-id').first()

    @staticmethod
    def purge_unit(unit_number: str) -> int:
        deleted, _ = CommandLedgerEntry.objects.filter(unit_number=unit_number).delete()
        return deleted


class ElevatorCommandService:
    """
    Orquesta autorización, registro en bitácora y despacho de un comando
    """

    @staticmethod
    def send_command(unit_number: str, card_type: str, action: str) -> CommandResult:
        try:
            with transaction.atomic():
                decision = CommandAuthorizer.authorize(unit_number, card_type, action)
                entry = CommandLedger.record(unit_number, card_type, action, decision.allowed)
        except Exception as e:
            logger.error(
                f"Error procesando comando {action} para {unit_number}/{card_type}: {e}",
                exc_info=True,
            )
            ElevatorCommandService._record_failure(unit_number, card_type, action)
            raise CommandDispatchError() from e

        if decision.allowed:
            ElevatorCommandService._dispatch(entry)
        else:
            logger.warning(
                f"Comando {action} rechazado para {unit_number}/{card_type}: {decision.reason}"
            )

        return CommandResult(decision=decision, entry=entry)

    @staticmethod
    def _record_failure(unit_number: str, card_type: str, action: str) -> None:
        try:
            CommandLedger.record(unit_number, card_type, action, False)
        except Exception as e:
            logger.error(f"No se pudo registrar el comando fallido de {unit_number}/{card_type}: {e}")

    @staticmethod
    def _dispatch(entry: CommandLedgerEntry) -> None:
        # El canal de actuación es síncrono y no reporta fallos
        logger.info(
            f"Comando {entry.action} enviado al ascensor para la unidad "
            f"{entry.unit_number} con tarjeta {entry.card_type}"
        )
