# catcare/services/firestore_service.py
import logging
from contextlib import contextmanager
from typing import Iterable, List

from catcare.core.exceptions import CascadeDeleteError, DependencyError


@contextmanager
def store_errors(action: str):
    """
    Firestore 호출 블록에서 발생한 예외를 기록하고 DependencyError로 변환합니다.
    도메인 예외(NotFoundError, ValidationError)는 이 블록 밖에서 발생시켜야 합니다.
    """
    try:
        yield
    except DependencyError:
        raise
    except Exception as e:
        logging.error(f"Firestore {action} 실패: {e}", exc_info=True)
        raise DependencyError(f"저장소 요청에 실패했습니다 ({action}).") from e


class DeletionPlan:
    """
    하위 문서를 모두 삭제한 뒤 마지막에 상위 문서를 삭제하는 순차 삭제 계획.

    Firestore 일괄 쓰기(batch)는 500건 제한이 있고 부분 실패 시점을 알려주지 않으므로,
    문서를 하나씩 순서대로 삭제합니다. 하위 문서 삭제가 하나라도 실패하면
    상위 문서는 남겨두고 CascadeDeleteError를 발생시킵니다 (고아 문서 방지).
    """

    def __init__(self, label: str):
        self.label = label
        self.dependents = []
        self.parent = None

    def add_dependents(self, refs: Iterable) -> "DeletionPlan":
        self.dependents.extend(refs)
        return self

    def set_parent(self, ref) -> "DeletionPlan":
        self.parent = ref
        return self

    def execute(self) -> List[str]:
        """계획을 실행하고 삭제된 하위 문서 ID 목록을 반환합니다."""
        deleted: List[str] = []
        for ref in self.dependents:
            try:
                ref.delete()
            except Exception as e:
                logging.error(
                    f"Cascade delete aborted for {self.label}: dependent {ref.id} failed "
                    f"after {len(deleted)}/{len(self.dependents)} deletions: {e}",
                    exc_info=True
                )
                raise CascadeDeleteError(
                    f"하위 기록 삭제 중 오류가 발생하여 {self.label} 삭제를 중단했습니다. 다시 시도해주세요.",
                    deleted_log_ids=deleted,
                    failed_log_id=ref.id
                ) from e
            deleted.append(ref.id)

        if self.parent is not None:
            with store_errors(f"delete {self.label}"):
                self.parent.delete()

        logging.info(f"Deletion plan for {self.label} completed ({len(deleted)} dependents removed)")
        return deleted
