# director/api/snapshots/schemas.py
from marshmallow import Schema, fields, post_load, EXCLUDE, ValidationError

from director.api.analyze.schemas import TargetBoxSchema
from director.models.snapshot import Snapshot, ShotAction, ShotTemplate
from director.utils.datetime_utils import DateTimeUtils


class SnapshotSchema(Schema):
    """
    히스토리 항목의 JSON 형식을 정의합니다.
    - dump: 서버가 GET /api/snapshots 응답을 만들 때 사용
    - load: 클라이언트가 응답을 Snapshot 객체로 되돌릴 때 사용
    필드명은 클라이언트와 약속된 camelCase를 사용합니다.
    """
    id = fields.Str(attribute='snapshot_id', required=True)
    advice = fields.Str(required=True)
    action = fields.Enum(ShotAction, by_value=True, allow_none=True, load_default=None)
    template = fields.Enum(ShotTemplate, by_value=True, allow_none=True, load_default=None)
    targetLocked = fields.Nested(TargetBoxSchema, attribute='target_locked', allow_none=True, load_default=None)
    createdAt = fields.Method('dump_created_at', deserialize='load_created_at', attribute='created_at', required=True)

    class Meta:
        unknown = EXCLUDE

    def dump_created_at(self, obj):
        return DateTimeUtils.to_iso_string(obj.created_at)

    def load_created_at(self, value):
        try:
            return DateTimeUtils.parse_iso_datetime(value)
        except ValueError as e:
            raise ValidationError(str(e))

    @post_load
    def make_snapshot(self, data, **kwargs):
        return Snapshot(**data)
