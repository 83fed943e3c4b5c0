# catcare/models/care_log.py
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from marshmallow import ValidationError

from catcare.utils.datetime_utils import DateTimeUtils


class LogType(Enum):
    """케어 기록 유형. 값은 저장소에 그대로 기록되는 문자열입니다."""
    FEEDING = "Alimentazione"
    LITTER = "Lettiera"
    WEIGHT = "Peso"
    MEDICAL = "Medico"
    GROOMING = "Toelettatura"
    OTHER = "Altro"

    @classmethod
    def from_input(cls, raw: Any) -> "LogType":
        """
        요청으로 들어온 값을 LogType으로 변환합니다.
        저장값('Peso')과 멤버 이름('WEIGHT', 대소문자 무시) 모두 허용하며,
        그 외의 값은 ValidationError를 발생시킵니다.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            candidate = raw.strip()
            for member in cls:
                if candidate == member.value or candidate.upper() == member.name:
                    return member
        allowed = ', '.join(m.name for m in cls)
        raise ValidationError(f"알 수 없는 기록 유형입니다: {raw!r} (허용: {allowed})", 'type')

    @classmethod
    def from_stored(cls, raw: Any, log_id: Optional[str] = None) -> "LogType":
        """저장소에서 읽은 값을 변환합니다. 알 수 없는 값은 OTHER로 대체합니다."""
        try:
            return cls(raw)
        except ValueError:
            logging.warning(f"Invalid LogType value '{raw}' for log {log_id}. Defaulting to OTHER.")
            return cls.OTHER


def parse_weight(value: Any) -> Optional[float]:
    """
    체중 기록의 value를 숫자로 변환합니다.
    비어 있거나, 숫자가 아니거나, 음수/무한대인 경우 None을 반환합니다.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip().replace(',', '.'))
    except ValueError:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


@dataclass
class CareLog:
    """
    Firestore 'care_logs' 컬렉션 문서 구조.
    생성 이후 변경되지 않는 추가 전용(append-only) 기록입니다.
    """
    log_id: str
    catId: str
    type: LogType
    timestamp: datetime  # UTC, 저장 시 고정 길이 ISO-8601 문자열
    notes: str = ""
    value: Optional[str] = None
    sequence: int = 0    # 고양이별 삽입 순번

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CareLog":
        return cls(
            log_id=data['log_id'],
            catId=data['catId'],
            type=LogType.from_stored(data.get('type'), data.get('log_id')),
            timestamp=DateTimeUtils.validate_datetime_field(data.get('timestamp'), 'timestamp'),
            notes=data.get('notes') or "",
            value=data.get('value'),
            sequence=data.get('sequence') or 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리로 변환합니다."""
        return {
            'log_id': self.log_id,
            'catId': self.catId,
            'type': self.type.value,
            'timestamp': DateTimeUtils.to_iso_string(self.timestamp),
            'notes': self.notes,
            'value': self.value,
            'sequence': self.sequence,
        }
