# catcare/api/advice/schemas.py
from marshmallow import Schema, fields, validate

from catcare.api.cats.schemas import not_blank


class AdviceRequestSchema(Schema):
    """POST /api/cats/<cat_id>/advice 요청 스키마."""
    question = fields.Str(required=True, validate=[validate.Length(min=1, max=2000), not_blank])


class AdviceResponseSchema(Schema):
    text = fields.Str()
    timestamp = fields.Str()


class VisionIdentifyRequestSchema(Schema):
    """POST /api/vision/identify 요청 스키마."""
    image_base64 = fields.Str(required=True, validate=not_blank,
                              error_messages={"required": "base64로 인코딩된 이미지(image_base64)는 필수입니다."})
    prompt = fields.Str(required=True, validate=[validate.Length(min=1, max=1000), not_blank])


class VisionIdentifyResponseSchema(Schema):
    text = fields.Str()
