# catcare/api/cats/services.py
import logging
import uuid
from typing import Any, Dict, List, Tuple

from firebase_admin import firestore
from marshmallow import ValidationError

from catcare.api.care_logs.services import CareLogService
from catcare.core.exceptions import NotFoundError
from catcare.models.cat import Cat, CatGender, DEFAULT_BREED, DEFAULT_IMAGE_URL, require_non_negative
from catcare.models.care_log import parse_weight
from catcare.services.firestore_service import DeletionPlan, store_errors

EDITABLE_FIELDS = ('name', 'breed', 'age', 'imageUrl', 'gender')


class CatService:
    """고양이 프로필의 생성, 수정, 체중 동기화 및 연쇄 삭제를 전담하는 서비스."""

    def __init__(self, care_log_service: CareLogService, db=None):
        self.db = db or firestore.client()
        self.cats_ref = self.db.collection('cats')
        self.care_log_service = care_log_service
        logging.info("CatService initialized with dependencies.")

    def _get_cat_ref(self, cat_id: str):
        """존재하는 고양이 문서의 참조를 반환합니다. 없으면 NotFoundError."""
        cat_ref = self.cats_ref.document(cat_id)
        with store_errors(f"get cat {cat_id}"):
            doc = cat_ref.get()
        if not doc.exists:
            raise NotFoundError(f"해당 ID의 고양이를 찾을 수 없습니다: {cat_id}")
        return cat_ref

    def create_cat(self, cat_data: Dict[str, Any]) -> Cat:
        """새 고양이 프로필을 등록합니다. 케어 기록은 생성하지 않습니다."""
        name = (cat_data.get('name') or '').strip()
        if not name:
            raise ValidationError("이름은 필수 입력 항목입니다.", 'name')

        age = cat_data.get('age')
        weight = cat_data.get('weight')
        new_cat = Cat(
            cat_id=str(uuid.uuid4()),
            name=name,
            breed=(cat_data.get('breed') or '').strip() or DEFAULT_BREED,
            age=require_non_negative(age, 'age') if age is not None else 0.0,
            weight=require_non_negative(weight, 'weight') if weight is not None else 0.0,
            imageUrl=cat_data.get('imageUrl') or DEFAULT_IMAGE_URL,
            gender=(cat_data.get('gender') or '').strip() or CatGender.MALE.value
        )

        with store_errors("create cat"):
            self.cats_ref.document(new_cat.cat_id).set(new_cat.to_dict())

        logging.info(f"Cat profile created: {new_cat.cat_id} ({new_cat.name})")
        return new_cat

    def list_cats(self) -> List[Cat]:
        with store_errors("list cats"):
            return [Cat.from_dict(doc.to_dict()) for doc in self.cats_ref.stream()]

    def get_cat(self, cat_id: str) -> Cat:
        with store_errors(f"get cat {cat_id}"):
            doc = self.cats_ref.document(cat_id).get()
        if not doc.exists:
            raise NotFoundError(f"해당 ID의 고양이를 찾을 수 없습니다: {cat_id}")
        return Cat.from_dict(doc.to_dict())

    def update_cat(self, cat_id: str, update_data: Dict[str, Any]) -> Cat:
        """프로필 정보를 부분 업데이트합니다. 체중은 update_cat_weight로만 변경합니다."""
        changes = {k: v for k, v in update_data.items() if k in EDITABLE_FIELDS}
        if not changes:
            raise ValidationError("수정할 데이터가 제공되지 않았습니다.")

        if 'name' in changes:
            changes['name'] = (changes['name'] or '').strip()
            if not changes['name']:
                raise ValidationError("이름은 비워둘 수 없습니다.", 'name')
        if 'breed' in changes:
            changes['breed'] = (changes['breed'] or '').strip() or DEFAULT_BREED
        if 'age' in changes:
            changes['age'] = require_non_negative(changes['age'], 'age')
        if 'imageUrl' in changes:
            changes['imageUrl'] = changes['imageUrl'] or DEFAULT_IMAGE_URL
        if 'gender' in changes:
            changes['gender'] = (changes['gender'] or '').strip() or CatGender.MALE.value

        cat_ref = self._get_cat_ref(cat_id)
        with store_errors(f"update cat {cat_id}"):
            cat_ref.update(changes)

        logging.info(f"Cat profile updated for {cat_id} with fields: {list(changes.keys())}")
        return self.get_cat(cat_id)

    def update_cat_weight(self, cat_id: str, weight: Any) -> Cat:
        """
        고양이의 현재 체중만 덮어씁니다. 체중 기록은 만들지 않습니다.
        기록과 함께 반영해야 하는 경우 CareLogService.add_log(WEIGHT)를 사용하세요.
        """
        weight = require_non_negative(weight, 'weight')
        cat_ref = self._get_cat_ref(cat_id)
        with store_errors(f"update weight for cat {cat_id}"):
            cat_ref.update({'weight': weight})

        logging.info(f"Cat weight updated for {cat_id}: {weight} kg")
        return self.get_cat(cat_id)

    def reconcile_weight(self, cat_id: str) -> Tuple[Cat, bool]:
        """
        가장 최근 체중 기록과 프로필 체중이 다르면 기록 값으로 맞춥니다.
        (변경 후 고양이, 변경 여부)를 반환합니다.
        """
        cat = self.get_cat(cat_id)
        latest = self.care_log_service.latest_weight_log(cat_id)
        if latest is None:
            return cat, False

        logged_weight = parse_weight(latest.value)
        if logged_weight == cat.weight:
            return cat, False

        logging.warning(
            f"Weight mismatch for cat {cat_id}: profile={cat.weight}, "
            f"latest log {latest.log_id}={logged_weight}. Reconciling."
        )
        with store_errors(f"reconcile weight for cat {cat_id}"):
            self.cats_ref.document(cat_id).update({'weight': logged_weight})
        return self.get_cat(cat_id), True

    def delete_cat(self, cat_id: str) -> None:
        """
        고양이와 모든 케어 기록을 삭제합니다.
        기록을 먼저 하나씩 삭제하고, 모두 성공한 경우에만 고양이 문서를 삭제합니다.
        """
        cat_ref = self._get_cat_ref(cat_id)
        log_refs = self.care_log_service.log_refs_for_cat(cat_id)

        plan = DeletionPlan(label=f"cat {cat_id}")
        plan.add_dependents(log_refs).set_parent(cat_ref)
        deleted = plan.execute()

        logging.info(f"Cat {cat_id} deleted together with {len(deleted)} care logs")
