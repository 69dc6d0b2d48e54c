# flavorworld/utils/__init__.py
from .datetime_utils import DateTimeUtils, EPOCH_MIN

__all__ = ['DateTimeUtils', 'EPOCH_MIN']
