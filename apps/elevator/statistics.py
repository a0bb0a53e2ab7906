"""
Estadísticas de uso del ascensor calculadas sobre la bitácora de comandos.

Todo se calcula en cada llamada; no hay caché.
"""
from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Optional

from django.db.models import Count, Q
from django.db.models.functions import TruncDate
from django.utils import timezone

from apps.cards.models import CardType

from .models import CommandLedgerEntry


class ElevatorStatistics:

    @staticmethod
    def window_start(days_back: int) -> datetime:
        """
        Medianoche local de hace `days_back` días (0 = inicio de hoy)
        """
        day = timezone.localdate() - timedelta(days=days_back)
        return timezone.make_aware(datetime.combine(day, time.min))

    @classmethod
    def summary(cls, unit_number: Optional[str] = None) -> Dict[str, int]:
        queryset = CommandLedgerEntry.objects.all()
        if unit_number is not None:
            queryset = queryset.filter(unit_number=unit_number)

        today_start = cls.window_start(0)
        week_start = cls.window_start(7)

        return queryset.aggregate(
            total_count=Count('id'),
            success_count=Count('id', filter=Q(success=True)),
            count_today=Count('id', filter=Q(created_at__gte=today_start)),
            count_last_7_days=Count('id', filter=Q(created_at__gte=week_start)),
        )

    @classmethod
    def detailed_stats(cls, lookback_days: int = 7) -> Dict[str, List[Dict[str, Any]]]:
        if lookback_days < 0:
            raise ValueError('lookback_days debe ser mayor o igual a 0')

        start = cls.window_start(lookback_days)
        window = CommandLedgerEntry.objects.filter(created_at__gte=start)

        return {
            'by_apartment': cls._by_apartment(window, start),
            'by_card_type': cls._by_card_type(window),
            'by_day': cls._by_day(window),
        }

    @staticmethod
    def _by_apartment(window, start):
        # Totales históricos de las unidades con actividad en la ventana
        rows = (
            CommandLedgerEntry.objects
            .filter(unit_number__in=window.values('unit_number'))
            .values('unit_number')
            .annotate(
                total_commands=Count('id'),
                successful_commands=Count('id', filter=Q(success=True)),
                commands_in_window=Count('id', filter=Q(created_at__gte=start)),
            )
            .order_by('-total_commands', 'unit_number')
        )
        return list(rows)

    @staticmethod
    def _by_card_type(window):
        counts = {
            row['card_type']: row
            for row in window.values('card_type').annotate(
                total_commands=Count('id'),
                successful_commands=Count('id', filter=Q(success=True)),
            )
        }

        result = []
        for card_type in CardType:
            row = counts.get(card_type.value, {})
            result.append({
                'card_type': card_type.value,
                'label': card_type.label,
                'total_commands': row.get('total_commands', 0),
                'successful_commands': row.get('successful_commands', 0),
            })
        return result

    @staticmethod
    def _by_day(window):
        rows = (
            window
            .annotate(day=TruncDate('created_at'))
            .values('day')
            .annotate(
                total_commands=Count('id'),
                successful_commands=Count('id', filter=Q(success=True)),
            )
            .order_by('-day')
        )
        return list(rows)
