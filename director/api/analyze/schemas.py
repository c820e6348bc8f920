# director/api/analyze/schemas.py
from marshmallow import Schema, fields, validate, post_load, EXCLUDE

from director.models.snapshot import ShotAction, ShotTemplate, TargetBox


class TargetBoxSchema(Schema):
    """캡처 화면 좌표계(px) 기준의 관심 영역 {x, y, width, height}"""
    x = fields.Float(required=True)
    y = fields.Float(required=True)
    width = fields.Float(required=True, validate=validate.Range(min=0, min_inclusive=False, error="width는 0보다 커야 합니다."))
    height = fields.Float(required=True, validate=validate.Range(min=0))

    @post_load
    def make_target_box(self, data, **kwargs):
        return TargetBox(**data)


class AnalyzeRequestSchema(Schema):
    """
    POST /api/analyze
    장면 분석 요청의 데이터 형식을 정의하고 유효성을 검사합니다.
    """
    image = fields.Str(required=True, validate=validate.Length(min=1),
                       error_messages={"required": "분석할 이미지(image)는 필수입니다."})
    template = fields.Str(load_default=None, allow_none=True,
                          validate=validate.OneOf([t.value for t in ShotTemplate]))
    target_locked = fields.Nested(TargetBoxSchema, data_key='targetLocked', load_default=None, allow_none=True)

    class Meta:
        unknown = EXCLUDE

    @post_load
    def to_template_enum(self, data, **kwargs):
        if data.get('template'):
            data['template'] = ShotTemplate(data['template'])
        return data


class AnalyzeResponseSchema(Schema):
    """분석 성공 응답: {action, advice}"""
    action = fields.Enum(ShotAction, by_value=True, required=True)
    advice = fields.Str(required=True)

