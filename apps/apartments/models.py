from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.models import TimeStampedModel

from .identifiers import build_apartment_id

MIN_FLOOR = 1
MAX_FLOOR = 50


class Apartment(TimeStampedModel):
    """
    Apartamento del edificio. El número de unidad es único en todo el
    edificio y define el identificador "apt-<unidad>" de sus tarjetas.
    """
    floor = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_FLOOR), MaxValueValidator(MAX_FLOOR)]
    )
    unit_number = models.CharField(max_length=10, unique=True)

    class Meta:
        db_table = 'apartamentos'
        verbose_name = 'Apartamento'
        verbose_name_plural = 'Apartamentos'
        ordering = ['floor', 'unit_number']

    def __str__(self):
        return f"Piso {self.floor} - {self.unit_number}"

    @property
    def apartment_identifier(self):
        return build_apartment_id(self.unit_number)
