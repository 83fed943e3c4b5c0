# catcare/models/__init__.py
from .cat import Cat, CatGender
from .care_log import CareLog, LogType, parse_weight

__all__ = ['Cat', 'CatGender', 'CareLog', 'LogType', 'parse_weight']
