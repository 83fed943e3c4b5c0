# catcare/api/cats/schemas.py
from marshmallow import Schema, fields, validate, ValidationError


def not_blank(value: str):
    if not value or not value.strip():
        raise ValidationError("빈 값은 허용되지 않습니다.")


class CatCreateSchema(Schema):
    """POST /api/cats/ 고양이 프로필 등록 요청 스키마."""
    name = fields.Str(required=True, validate=[validate.Length(min=1, max=50), not_blank])
    breed = fields.Str(required=False, allow_none=True, validate=validate.Length(max=50))
    age = fields.Float(required=False, allow_none=True, validate=validate.Range(min=0))
    weight = fields.Float(required=False, allow_none=True, validate=validate.Range(min=0))
    imageUrl = fields.Str(required=False, allow_none=True)
    gender = fields.Str(required=False, allow_none=True, validate=validate.Length(max=30))


class CatUpdateSchema(Schema):
    """PATCH /api/cats/<cat_id> 프로필 수정을 위한 스키마 (부분 업데이트용, 체중 제외)."""
    name = fields.Str(validate=[validate.Length(min=1, max=50), not_blank])
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    age = fields.Float(validate=validate.Range(min=0))
    imageUrl = fields.Str(allow_none=True)
    gender = fields.Str(allow_none=True, validate=validate.Length(max=30))


class CatWeightSchema(Schema):
    """PUT /api/cats/<cat_id>/weight 체중 직접 수정 요청 스키마."""
    weight = fields.Float(required=True, validate=validate.Range(min=0))


class CatResponseSchema(Schema):
    """고양이 프로필 응답 스키마."""
    cat_id = fields.Str(dump_only=True)
    name = fields.Str()
    breed = fields.Str()
    age = fields.Float()
    weight = fields.Float()
    imageUrl = fields.Str()
    gender = fields.Str()


class WeightReconcileResponseSchema(Schema):
    cat = fields.Nested(CatResponseSchema)
    reconciled = fields.Bool()
