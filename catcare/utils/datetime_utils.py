# catcare/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간/날짜 처리를 위한 유틸리티 모듈

- 모든 시각은 UTC timezone-aware datetime으로 다룹니다.
- 케어 기록의 timestamp는 Firestore에 고정 길이 ISO-8601 문자열로 저장합니다.
  (마이크로초까지 항상 포함하므로 문자열 정렬 = 시간순 정렬)
"""

import logging
from datetime import datetime, timezone
from typing import Any
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

ISO_FORMAT = '%Y-%m-%dT%H:%M:%S.%fZ'


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 UTC datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00
        """
        try:
            if not iso_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)

            # timezone-naive인 경우 UTC로 가정
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)

            return dt.astimezone(timezone.utc)

        except Exception as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 고정 길이 ISO 문자열(YYYY-MM-DDTHH:MM:SS.ffffffZ)로 변환"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt.strftime(ISO_FORMAT)

    @staticmethod
    def to_chart_label(dt: datetime) -> str:
        """체중 그래프 x축용 짧은 날짜 라벨 (예: 'Oct 18')"""
        return f"{dt.strftime('%b')} {dt.day}"

    @staticmethod
    def to_local_date_string(dt: datetime) -> str:
        """AI 프롬프트용 이탈리아식 날짜 문자열 (dd/mm/yyyy)"""
        return dt.strftime('%d/%m/%Y')

    @staticmethod
    def validate_datetime_field(value: Any, field_name: str = "datetime") -> datetime:
        """
        저장소에서 읽거나 요청으로 받은 datetime 값을 검증하고 UTC datetime으로 변환

        Raises:
            ValueError: 잘못된 형식이거나 파싱할 수 없는 경우
        """
        try:
            if value is None:
                raise ValueError(f"{field_name}은 필수 필드입니다")

            if isinstance(value, str):
                return DateTimeUtils.parse_iso_datetime(value)

            elif isinstance(value, datetime):
                if value.tzinfo is None:
                    return value.replace(tzinfo=timezone.utc)
                return value.astimezone(timezone.utc)

            else:
                raise ValueError(f"{field_name}은 문자열 또는 datetime 객체여야 합니다")

        except Exception as e:
            logger.error(f"{field_name} 검증 실패: {value} - {e}")
            raise ValueError(f"잘못된 {field_name} 형식입니다: {value}")

