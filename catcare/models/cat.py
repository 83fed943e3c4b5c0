# catcare/models/cat.py
import logging
import math
from dataclasses import dataclass, asdict, fields
from enum import Enum
from typing import Any, Dict

from marshmallow import ValidationError

DEFAULT_BREED = "Misto"
DEFAULT_IMAGE_URL = "https://picsum.photos/200"


class CatGender(Enum):
    MALE = "Maschio"
    FEMALE = "Femmina"
    OTHER = "Altro"

    @classmethod
    def from_value(cls, value: Any) -> "CatGender":
        """저장된 문자열을 Enum으로 변환합니다. 알 수 없는 값은 OTHER로 취급합니다."""
        for member in cls:
            if member.value == value:
                return member
        return cls.OTHER


def require_non_negative(value: Any, field_name: str) -> float:
    """유한한 0 이상의 숫자인지 검증하고 float으로 반환합니다."""
    if isinstance(value, bool):
        raise ValidationError("숫자여야 합니다.", field_name)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("숫자여야 합니다.", field_name)
    if not math.isfinite(number) or number < 0:
        raise ValidationError("0 이상의 유한한 숫자여야 합니다.", field_name)
    return number


@dataclass
class Cat:
    """
    Firestore 'cats' 컬렉션 문서 구조.
    weight는 가장 최근 체중(WEIGHT) 기록의 값을 따라가며,
    기록이 없으면 프로필 생성 시 입력한 값을 유지합니다.
    """
    cat_id: str
    name: str
    breed: str = DEFAULT_BREED
    age: float = 0.0
    weight: float = 0.0
    imageUrl: str = DEFAULT_IMAGE_URL
    gender: str = CatGender.MALE.value
    log_sequence: int = 0  # 같은 timestamp를 가진 기록의 삽입 순서를 보존하기 위한 카운터

    @property
    def gender_kind(self) -> CatGender:
        return CatGender.from_value(self.gender)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cat":
        """Firestore 문서 딕셔너리로부터 Cat 인스턴스를 생성합니다."""
        known = {f.name for f in fields(cls)}
        processed_data = {k: v for k, v in data.items() if k in known}

        unknown = set(data) - known
        if unknown:
            logging.warning(f"Ignoring unknown fields {sorted(unknown)} on cat {data.get('cat_id')}")

        for numeric in ('age', 'weight'):
            if processed_data.get(numeric) is not None:
                processed_data[numeric] = float(processed_data[numeric])
        if processed_data.get('log_sequence') is None:
            processed_data['log_sequence'] = 0

        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
