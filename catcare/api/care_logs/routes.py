# catcare/api/care_logs/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from catcare.core.exceptions import DependencyError, NotFoundError
from .analytics import weight_series, weight_trend
from .schemas import (
    CareLogCreateSchema,
    CareLogQuerySchema,
    CareLogResponseSchema,
    WeightSeriesResponseSchema
)

care_logs_bp = Blueprint('care_logs_bp', __name__)


@care_logs_bp.route('/<string:cat_id>/logs', methods=['POST'])
def create_care_log(cat_id: str):
    """케어 기록 생성 API. 체중 기록이면 프로필 체중도 함께 갱신됩니다."""
    service = current_app.services['care_logs']
    try:
        validated_data = CareLogCreateSchema().load(request.get_json(silent=True) or {})
        new_log = service.add_log(
            cat_id,
            validated_data['type'],
            value=validated_data.get('value'),
            notes=validated_data.get('notes')
        )
        return jsonify(CareLogResponseSchema().dump(new_log)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except NotFoundError as e:
        return jsonify({"error_code": "CAT_NOT_FOUND", "message": str(e)}), 404
    except DependencyError as e:
        logging.error(f"기록 생성 API 오류 (cat_id: {cat_id}): {e}")
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502


@care_logs_bp.route('/<string:cat_id>/logs', methods=['GET'])
def list_care_logs(cat_id: str):
    """
    최근 케어 기록을 최신순으로 조회합니다.

    쿼리 파라미터:
    - limit: 조회 개수 제한 (1-100, 기본값: 100)
    """
    service = current_app.services['care_logs']
    try:
        params = CareLogQuerySchema().load(request.args)
        logs = service.list_logs_for_cat(cat_id, params['limit'])
        return jsonify(CareLogResponseSchema(many=True).dump(logs)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except NotFoundError as e:
        return jsonify({"error_code": "CAT_NOT_FOUND", "message": str(e)}), 404
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502


@care_logs_bp.route('/<string:cat_id>/weight-series', methods=['GET'])
def get_weight_series(cat_id: str):
    """최근 기록에서 체중 시계열과 추세를 계산하여 반환합니다."""
    cat_service = current_app.services['cats']
    log_service = current_app.services['care_logs']
    try:
        cat = cat_service.get_cat(cat_id)
        logs = log_service.list_logs_for_cat(
            cat_id, current_app.config.get('DEFAULT_LOG_LIMIT', 100), verify_cat=False
        )
        series = weight_series(logs)
        result = {
            "cat_id": cat.cat_id,
            "current_weight": cat.weight,
            "series": series,
            "trend": weight_trend(series).value
        }
        return jsonify(WeightSeriesResponseSchema().dump(result)), 200
    except NotFoundError as e:
        return jsonify({"error_code": "CAT_NOT_FOUND", "message": str(e)}), 404
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502
