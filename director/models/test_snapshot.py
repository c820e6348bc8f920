# director/models/test_snapshot.py
from datetime import datetime, timezone

from director.models.snapshot import Snapshot, ShotAction, ShotTemplate, TargetBox


def test_target_box_from_points_is_axis_normalized():
    """어느 방향으로 드래그해도 좌상단 기준 사각형이 만들어져야 함"""
    box = TargetBox.from_points((120, 90), (20, 30))
    assert box == TargetBox(x=20, y=30, width=100, height=60)


def test_target_box_lockable_threshold():
    assert not TargetBox(0, 0, 10, 40).is_lockable()
    assert TargetBox(0, 0, 10.5, 0).is_lockable()


def test_template_values():
    assert ShotTemplate('under-angle') is ShotTemplate.UNDER_ANGLE
    assert [t.value for t in ShotTemplate] == ['overhead', 'under-angle', 'wide', 'portrait']


def test_document_round_trip():
    created = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    snapshot = Snapshot(
        snapshot_id='abc',
        advice='Lower the frame for drama.',
        action=ShotAction.LEFT,
        template=ShotTemplate.OVERHEAD,
        target_locked=TargetBox(10, 20, 100, 50),
        created_at=created,
    )

    document = snapshot.to_document()
    assert document['action'] == 'LEFT'
    assert document['template'] == 'overhead'
    assert document['target_locked'] == {'x': 10, 'y': 20, 'width': 100, 'height': 50}

    assert Snapshot.from_document(document) == snapshot


def test_document_without_optional_fields():
    document = Snapshot(snapshot_id='x', advice='Hold steady.').to_document()
    restored = Snapshot.from_document(document)
    assert restored.action is None
    assert restored.template is None
    assert restored.target_locked is None
