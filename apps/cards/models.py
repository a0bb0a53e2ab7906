from django.db import models

from apps.core.models import TimeStampedModel


class CardType(models.TextChoices):
    PRINCIPAL = 'A', 'Principal'
    SECUNDARIA = 'B', 'Secundaria'
    INVITADOS = 'C', 'Invitados'


# Tarjetas que se crean con cada apartamento: (tipo, nombre, activa)
DEFAULT_CARDS = (
    (CardType.PRINCIPAL, 'Tarjeta Principal', True),
    (CardType.SECUNDARIA, 'Tarjeta Secundaria', False),
    (CardType.INVITADOS, 'Tarjeta de Invitados', False),
)


class Card(TimeStampedModel):
    """
    Tarjeta de acceso al ascensor. Pertenece a un apartamento a través de
    su identificador ("apt-" + número de unidad).
    """
    apartment_identifier = models.CharField(max_length=20, db_index=True)
    card_type = models.CharField(max_length=1, choices=CardType.choices)
    name = models.CharField(max_length=100)
    is_active = models.BooleanField(default=False)
    last_used_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'tarjetas'
        verbose_name = 'Tarjeta'
        verbose_name_plural = 'Tarjetas'
        ordering = ['apartment_identifier', 'card_type']
        constraints = [
            models.UniqueConstraint(
                fields=['apartment_identifier', 'card_type'],
                name='unique_card_type_per_apartment',
            ),
        ]

    def __str__(self):
        return f"{self.apartment_identifier} - {self.name} ({self.card_type})"
