# catcare/api/care_logs/services.py
import logging
from typing import Any, List, Optional

from firebase_admin import firestore
from marshmallow import ValidationError

from catcare.core.config import MAX_LOG_LIMIT
from catcare.core.exceptions import NotFoundError
from catcare.models.cat import Cat
from catcare.models.care_log import CareLog, LogType, parse_weight
from catcare.services.firestore_service import store_errors
from catcare.utils.datetime_utils import DateTimeUtils


class CareLogService:
    """케어 기록의 생성 및 조회를 전담하는 서비스 클래스."""

    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.cats_ref = self.db.collection('cats')
        self.logs_ref = self.db.collection('care_logs')
        logging.info("CareLogService initialized.")

    def _get_cat(self, cat_id: str) -> Cat:
        with store_errors(f"get cat {cat_id}"):
            doc = self.cats_ref.document(cat_id).get()
        if not doc.exists:
            raise NotFoundError(f"해당 ID의 고양이를 찾을 수 없습니다: {cat_id}")
        return Cat.from_dict(doc.to_dict())

    def _query_for_cat(self, cat_id: str):
        """catId 색인을 사용하는 최신순 기본 쿼리 (timestamp, 삽입 순번 내림차순)."""
        return self.logs_ref \
            .where('catId', '==', cat_id) \
            .order_by('timestamp', direction=firestore.Query.DESCENDING) \
            .order_by('sequence', direction=firestore.Query.DESCENDING)

    def add_log(self, cat_id: str, log_type: Any, value: Any = None, notes: Optional[str] = None) -> CareLog:
        """
        케어 기록을 추가합니다.

        체중(WEIGHT) 기록은 기록 저장과 고양이 체중 갱신을 하나의 일괄 쓰기(batch)로
        커밋하므로 두 값이 어긋난 상태로 남지 않습니다.
        """
        log_type = LogType.from_input(log_type)
        value_str = None if value is None or str(value).strip() == "" else str(value).strip()

        weight = None
        if log_type is LogType.WEIGHT:
            weight = parse_weight(value_str)
            if weight is None:
                raise ValidationError("체중 기록에는 0 이상의 숫자 값이 필요합니다.", 'value')

        cat = self._get_cat(cat_id)

        log_ref = self.logs_ref.document()
        new_log = CareLog(
            log_id=log_ref.id,
            catId=cat_id,
            type=log_type,
            timestamp=DateTimeUtils.now(),
            notes=notes or "",
            value=value_str,
            sequence=cat.log_sequence + 1
        )

        cat_updates = {'log_sequence': new_log.sequence}
        if weight is not None:
            cat_updates['weight'] = weight

        batch = self.db.batch()
        batch.set(log_ref, new_log.to_dict())
        batch.update(self.cats_ref.document(cat_id), cat_updates)
        with store_errors(f"add log for cat {cat_id}"):
            batch.commit()

        if weight is not None:
            logging.info(f"Weight observation applied for cat {cat_id}: {weight} kg (log {new_log.log_id})")
        else:
            logging.info(f"Care log created for cat {cat_id} (type: {log_type.name})")
        return new_log

    def list_logs_for_cat(self, cat_id: str, limit: int = MAX_LOG_LIMIT, verify_cat: bool = True) -> List[CareLog]:
        """
        고양이의 최근 기록을 최신순으로 최대 limit개 반환합니다. 기록이 없으면 빈 리스트.
        호출자가 이미 고양이를 조회했다면 verify_cat=False로 중복 조회를 생략합니다.
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_LOG_LIMIT:
            raise ValidationError(f"limit은 1 이상 {MAX_LOG_LIMIT} 이하의 정수여야 합니다.", 'limit')

        if verify_cat:
            self._get_cat(cat_id)

        with store_errors(f"list logs for cat {cat_id}"):
            docs = self._query_for_cat(cat_id).limit(limit).stream()
            return [CareLog.from_dict(doc.to_dict()) for doc in docs]

    def latest_weight_log(self, cat_id: str) -> Optional[CareLog]:
        """숫자로 해석 가능한 값을 가진 가장 최근의 체중 기록을 찾습니다."""
        with store_errors(f"scan weight logs for cat {cat_id}"):
            for doc in self._query_for_cat(cat_id).stream():
                log = CareLog.from_dict(doc.to_dict())
                if log.type is LogType.WEIGHT and parse_weight(log.value) is not None:
                    return log
        return None

    def log_refs_for_cat(self, cat_id: str) -> list:
        """연쇄 삭제용: 해당 고양이의 모든 기록 문서 참조를 반환합니다."""
        with store_errors(f"collect logs for cat {cat_id}"):
            return [doc.reference for doc in self.logs_ref.where('catId', '==', cat_id).stream()]
