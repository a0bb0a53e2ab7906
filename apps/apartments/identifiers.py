"""
Convención del identificador de apartamento: "apt-" + número de unidad.

Tarjetas y usuarios referencian al apartamento por este string, no por una
clave foránea. Toda construcción y lectura del identificador pasa por aquí.
"""
import re
from collections import namedtuple

APARTMENT_ID_PREFIX = 'apt-'

# Primer dígito = piso, todos los dígitos = número de unidad
APARTMENT_ID_PATTERN = re.compile(r'apt-(\d)(\d+)')

ParsedApartmentId = namedtuple('ParsedApartmentId', ['floor', 'unit_number'])


def build_apartment_id(unit_number):
    return f"{APARTMENT_ID_PREFIX}{unit_number}"


def unit_number_from_apartment_id(apartment_identifier):
    if apartment_identifier and apartment_identifier.startswith(APARTMENT_ID_PREFIX):
        return apartment_identifier[len(APARTMENT_ID_PREFIX):]
    return None


def parse_apartment_id(apartment_identifier):
    """
    Extrae piso y número de unidad de un identificador como "apt-201".

    El piso se toma del primer dígito y no se valida contra la tabla de
    apartamentos. Retorna None si el formato no coincide.
    """
    match = APARTMENT_ID_PATTERN.fullmatch(apartment_identifier or '')
    if match is None:
        return None
    floor_digit, rest = match.groups()
    return ParsedApartmentId(floor=int(floor_digit), unit_number=floor_digit + rest)
