from .params import DateRangeParams, apply_date_range, provide_date_range
from .service import provide_history_service

__all__ = [
    'DateRangeParams',
    'apply_date_range',
    'provide_date_range',
    'provide_history_service',
]
