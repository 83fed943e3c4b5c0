# catcare/api/care_logs/schemas.py
from marshmallow import Schema, fields, validate, validates

from catcare.models.care_log import LogType
from catcare.utils.datetime_utils import DateTimeUtils


class CareLogCreateSchema(Schema):
    """
    POST /api/cats/<cat_id>/logs 요청 본문 스키마.
    type은 저장값('Peso') 또는 이름('WEIGHT') 모두 허용합니다.
    """
    type = fields.Str(required=True)
    value = fields.Raw(required=False, allow_none=True, load_default=None)
    notes = fields.Str(required=False, allow_none=True, load_default="", validate=validate.Length(max=1000))

    @validates('type')
    def validate_type(self, value, **kwargs):
        """허용되지 않은 유형이면 LogType.from_input이 ValidationError를 발생시킵니다."""
        LogType.from_input(value)


class CareLogQuerySchema(Schema):
    """GET /api/cats/<cat_id>/logs 쿼리 파라미터 검증 스키마."""
    limit = fields.Int(validate=validate.Range(min=1, max=100), load_default=100)


class CareLogResponseSchema(Schema):
    """개별 기록 응답 스키마."""
    log_id = fields.Str(dump_only=True)
    catId = fields.Str(dump_only=True)
    type = fields.Function(lambda log: log.type.value)
    type_key = fields.Function(lambda log: log.type.name)
    timestamp = fields.Function(lambda log: DateTimeUtils.to_iso_string(log.timestamp))
    notes = fields.Str()
    value = fields.Str(allow_none=True)


class WeightPointSchema(Schema):
    timestamp = fields.Function(lambda point: DateTimeUtils.to_iso_string(point.timestamp))
    date = fields.Str()
    weight = fields.Float()


class WeightSeriesResponseSchema(Schema):
    """GET /api/cats/<cat_id>/weight-series 응답 스키마."""
    cat_id = fields.Str()
    current_weight = fields.Float()
    series = fields.List(fields.Nested(WeightPointSchema))
    trend = fields.Str()
