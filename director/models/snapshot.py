# director/models/snapshot.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from director.utils.datetime_utils import DateTimeUtils

# 드래그로 만든 박스가 타겟으로 확정되기 위한 최소 너비 (px)
MIN_TARGET_WIDTH = 10


class ShotAction(Enum):
    """AI가 돌려주는 카메라 이동 지시를 정의하는 Enum 클래스"""
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    FORWARD = "FORWARD"
    BACKWARD = "BACKWARD"
    OK = "OK"


class ShotTemplate(Enum):
    """사용자가 고를 수 있는 구도 프리셋"""
    OVERHEAD = "overhead"
    UNDER_ANGLE = "under-angle"
    WIDE = "wide"
    PORTRAIT = "portrait"


@dataclass(frozen=True)
class TargetBox:
    """캡처 화면 좌표계(px) 기준의 관심 영역"""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_points(cls, start: tuple, end: tuple) -> "TargetBox":
        """두 점(드래그 시작점, 현재점)을 감싸는 축 정렬 사각형을 만듭니다."""
        (x0, y0), (x1, y1) = start, end
        return cls(
            x=min(x0, x1),
            y=min(y0, y1),
            width=abs(x1 - x0),
            height=abs(y1 - y0),
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["TargetBox"]:
        if not data:
            return None
        return cls(x=data['x'], y=data['y'], width=data['width'], height=data['height'])

    def is_lockable(self) -> bool:
        return self.width > MIN_TARGET_WIDTH

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class Snapshot:
    """
    Firestore 'snapshots' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    분석 1회당 정확히 한 번 생성되며 이후 수정/삭제되지 않습니다.
    """
    snapshot_id: str
    advice: str
    action: Optional[ShotAction] = None
    template: Optional[ShotTemplate] = None
    target_locked: Optional[TargetBox] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    def to_document(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리로 변환합니다. Enum은 문자열 값으로 저장됩니다."""
        return DateTimeUtils.for_firestore({
            'snapshot_id': self.snapshot_id,
            'advice': self.advice,
            'action': self.action.value if self.action else None,
            'template': self.template.value if self.template else None,
            'target_locked': self.target_locked.to_dict() if self.target_locked else None,
            'created_at': self.created_at,
        })

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "Snapshot":
        """Firestore 문서 딕셔너리로부터 Snapshot 인스턴스를 생성합니다."""
        processed = DateTimeUtils.from_firestore(dict(data))
        return cls(
            snapshot_id=processed['snapshot_id'],
            advice=processed['advice'],
            action=ShotAction(processed['action']) if processed.get('action') else None,
            template=ShotTemplate(processed['template']) if processed.get('template') else None,
            target_locked=TargetBox.from_dict(processed.get('target_locked')),
            created_at=processed['created_at'],
        )
