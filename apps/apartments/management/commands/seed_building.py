from django.core.management.base import BaseCommand, CommandError

from apps.apartments.models import MAX_FLOOR, MIN_FLOOR, Apartment
from apps.apartments.services import ApartmentLifecycleService


class Command(BaseCommand):
    help = 'Crear los apartamentos del edificio con sus tarjetas por defecto'

    def add_arguments(self, parser):
        parser.add_argument('--floors', type=int, default=5, help='Cantidad de pisos')
        parser.add_argument('--units-per-floor', type=int, default=4, help='Apartamentos por piso')

    def handle(self, *args, **options):
        floors = options['floors']
        units_per_floor = options['units_per_floor']

        if not MIN_FLOOR <= floors <= MAX_FLOOR:
            raise CommandError(f'La cantidad de pisos debe estar entre {MIN_FLOOR} y {MAX_FLOOR}')
        if not 1 <= units_per_floor <= 99:
            raise CommandError('La cantidad de apartamentos por piso debe estar entre 1 y 99')

        self.stdout.write(self.style.SUCCESS('Creando apartamentos del edificio...'))

        created = 0
        for floor in range(1, floors + 1):
            for index in range(1, units_per_floor + 1):
                unit_number = f"{floor}{index:02d}"
                if Apartment.objects.filter(unit_number=unit_number).exists():
                    self.stdout.write(self.style.WARNING(f'[INFO] Apartamento ya existe: {unit_number}'))
                    continue

                ApartmentLifecycleService.create_apartment(floor=floor, unit_number=unit_number)
                created += 1
                self.stdout.write(self.style.SUCCESS(f'[OK] Apartamento creado: {unit_number}'))

        self.stdout.write(self.style.SUCCESS(f'[SUCCESS] {created} apartamentos creados'))
