from django.db import models
from django.utils import timezone

from apps.cards.models import CardType
from apps.core.exceptions import ImmutableLedgerEntry


class CommandAction(models.TextChoices):
    ACTIVATE = 'ACTIVATE', 'Encender'
    DEACTIVATE = 'DEACTIVATE', 'Apagar'


# Valores heredados que la API sigue aceptando como entrada
LEGACY_ACTION_ALIASES = {
    'ENCENDER': CommandAction.ACTIVATE,
    'APAGAR': CommandAction.DEACTIVATE,
}


class CommandLedgerEntry(models.Model):
    """
    Registro inmutable de un intento de comando al ascensor, autorizado o no.

    Solo se escribe mediante CommandLedger.record y solo se elimina junto
    con su apartamento.
    """
    unit_number = models.CharField(max_length=10, db_index=True)
    card_type = models.CharField(max_length=1, choices=CardType.choices)
    action = models.CharField(max_length=10, choices=CommandAction.choices)
    success = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'comandos_ascensor'
        verbose_name = 'Comando de Ascensor'
        verbose_name_plural = 'Comandos de Ascensor'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['unit_number', 'created_at'], name='comando_unidad_fecha_idx'),
        ]

    def __str__(self):
        result = 'OK' if self.success else 'FALLIDO'
        return f"{self.unit_number} {self.card_type} {self.get_action_display()} [{result}]"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableLedgerEntry()
        super().save(*args, **kwargs)
