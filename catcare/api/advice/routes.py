# catcare/api/advice/routes.py
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from catcare.core.exceptions import DependencyError, NotFoundError
from catcare.utils.datetime_utils import DateTimeUtils
from .schemas import (
    AdviceRequestSchema,
    AdviceResponseSchema,
    VisionIdentifyRequestSchema,
    VisionIdentifyResponseSchema
)

advice_bp = Blueprint('advice_bp', __name__)


@advice_bp.route('/cats/<string:cat_id>/advice', methods=['POST'])
def ask_advice(cat_id: str):
    """고양이의 프로필과 최근 기록을 참고하여 AI에게 질문합니다."""
    cat_service = current_app.services['cats']
    log_service = current_app.services['care_logs']
    advice_service = current_app.services['advice']
    try:
        data = AdviceRequestSchema().load(request.get_json(silent=True) or {})
        cat = cat_service.get_cat(cat_id)
        recent_logs = log_service.list_logs_for_cat(
            cat_id, current_app.config.get('ADVICE_LOG_LIMIT', 10), verify_cat=False
        )
        # AI 호출 실패는 서비스에서 안내 문구로 대체되므로 여기서 별도 처리하지 않습니다.
        answer = advice_service.request_advice(cat, recent_logs, data['question'])
        result = {"text": answer, "timestamp": DateTimeUtils.to_iso_string(DateTimeUtils.now())}
        return jsonify(AdviceResponseSchema().dump(result)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except NotFoundError as e:
        return jsonify({"error_code": "CAT_NOT_FOUND", "message": str(e)}), 404
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502


@advice_bp.route('/vision/identify', methods=['POST'])
def identify_from_image():
    """고양이 사진으로 품종 또는 건강 이슈를 분석합니다."""
    advice_service = current_app.services['advice']
    try:
        data = VisionIdentifyRequestSchema().load(request.get_json(silent=True) or {})
        text = advice_service.identify_breed_or_issue(data['image_base64'], data['prompt'])
        return jsonify(VisionIdentifyResponseSchema().dump({"text": text})), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
