# catcare/api/cats/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from catcare.core.exceptions import CascadeDeleteError, DependencyError, NotFoundError
from .schemas import (
    CatCreateSchema,
    CatUpdateSchema,
    CatWeightSchema,
    CatResponseSchema,
    WeightReconcileResponseSchema
)

cats_bp = Blueprint('cats_bp', __name__)


@cats_bp.route('/', methods=['GET'])
def list_cats():
    """등록된 모든 고양이 프로필을 조회합니다."""
    cat_service = current_app.services['cats']
    try:
        cats = cat_service.list_cats()
        return jsonify(CatResponseSchema(many=True).dump(cats)), 200
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502


@cats_bp.route('/', methods=['POST'])
def create_cat():
    """고양이 프로필 등록 API."""
    cat_service = current_app.services['cats']
    try:
        validated_data = CatCreateSchema().load(request.get_json(silent=True) or {})
        new_cat = cat_service.create_cat(validated_data)
        return jsonify(CatResponseSchema().dump(new_cat)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502


@cats_bp.route('/<string:cat_id>', methods=['GET'])
def get_cat(cat_id: str):
    """특정 고양이의 프로필을 조회합니다."""
    cat_service = current_app.services['cats']
    try:
        cat = cat_service.get_cat(cat_id)
        return jsonify(CatResponseSchema().dump(cat)), 200
    except NotFoundError as e:
        return jsonify({"error_code": "CAT_NOT_FOUND", "message": str(e)}), 404
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502


@cats_bp.route('/<string:cat_id>', methods=['PATCH'])
def update_cat(cat_id: str):
    """고양이 프로필 정보를 수정합니다 (부분 업데이트)."""
    cat_service = current_app.services['cats']
    try:
        update_data = CatUpdateSchema().load(request.get_json(silent=True) or {})
        updated_cat = cat_service.update_cat(cat_id, update_data)
        return jsonify(CatResponseSchema().dump(updated_cat)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except NotFoundError as e:
        return jsonify({"error_code": "CAT_NOT_FOUND", "message": str(e)}), 404
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502


@cats_bp.route('/<string:cat_id>', methods=['DELETE'])
def delete_cat(cat_id: str):
    """고양이 프로필과 모든 케어 기록을 삭제합니다."""
    cat_service = current_app.services['cats']
    try:
        cat_service.delete_cat(cat_id)
        return '', 204
    except NotFoundError as e:
        return jsonify({"error_code": "CAT_NOT_FOUND", "message": str(e)}), 404
    except CascadeDeleteError as e:
        logging.error(f"Cascade delete incomplete (cat_id: {cat_id}, failed log: {e.failed_log_id})")
        return jsonify({
            "error_code": "CASCADE_DELETE_INCOMPLETE",
            "message": str(e),
            "deleted_log_ids": e.deleted_log_ids,
            "failed_log_id": e.failed_log_id
        }), 502
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502


@cats_bp.route('/<string:cat_id>/weight', methods=['PUT'])
def update_cat_weight(cat_id: str):
    """프로필 체중만 직접 수정합니다 (체중 기록은 생성하지 않음)."""
    cat_service = current_app.services['cats']
    try:
        data = CatWeightSchema().load(request.get_json(silent=True) or {})
        updated_cat = cat_service.update_cat_weight(cat_id, data['weight'])
        return jsonify(CatResponseSchema().dump(updated_cat)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except NotFoundError as e:
        return jsonify({"error_code": "CAT_NOT_FOUND", "message": str(e)}), 404
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502


@cats_bp.route('/<string:cat_id>/weight/reconcile', methods=['POST'])
def reconcile_cat_weight(cat_id: str):
    """최근 체중 기록과 프로필 체중이 다르면 기록 값으로 맞춥니다."""
    cat_service = current_app.services['cats']
    try:
        cat, reconciled = cat_service.reconcile_weight(cat_id)
        return jsonify(WeightReconcileResponseSchema().dump({"cat": cat, "reconciled": reconciled})), 200
    except NotFoundError as e:
        return jsonify({"error_code": "CAT_NOT_FOUND", "message": str(e)}), 404
    except DependencyError as e:
        return jsonify({"error_code": "STORE_UNAVAILABLE", "message": str(e)}), 502
