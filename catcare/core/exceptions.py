# catcare/core/exceptions.py
"""
도메인 전역에서 사용하는 예외 정의.

입력 오류는 marshmallow의 ValidationError를 그대로 사용합니다.
스키마 검증과 서비스 계층 검증이 같은 에러 핸들러(400)로 모이도록 하기 위함입니다.
"""
from typing import List, Optional

from marshmallow import ValidationError

__all__ = ['ValidationError', 'NotFoundError', 'DependencyError', 'CascadeDeleteError']


class NotFoundError(LookupError):
    """존재하지 않는 고양이(또는 기록) ID를 참조한 경우."""


class DependencyError(RuntimeError):
    """Firestore 등 외부 저장소 호출이 실패한 경우."""


class CascadeDeleteError(DependencyError):
    """
    연쇄 삭제 도중 하위 기록 삭제가 실패한 경우.
    부모(고양이) 문서는 삭제되지 않은 상태로 남으며, 전체 삭제를 다시 시도할 수 있습니다.
    """

    def __init__(self, message: str, deleted_log_ids: Optional[List[str]] = None,
                 failed_log_id: Optional[str] = None):
        super().__init__(message)
        self.deleted_log_ids = list(deleted_log_ids or [])
        self.failed_log_id = failed_log_id
