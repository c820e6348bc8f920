# director/client/capture_surface.py
"""
카메라 화면(Capture Surface)

- 마우스/터치 드래그로 관심 영역(타겟 박스)을 지정하는 제스처 상태 머신
- 현재 영상 프레임을 JPEG data URL로 캡처하는 기능
"""

import base64
import logging
from typing import Callable, Optional, Tuple, Dict, Any

import cv2

from director.models.snapshot import TargetBox

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
TargetCallback = Callable[[Optional[TargetBox]], None]


def local_point(event: Dict[str, Any], origin: Point = (0, 0)) -> Point:
    """
    마우스/터치 이벤트에서 화면 기준 좌표를 추출합니다.
    터치 이벤트는 첫 번째 손가락(touches[0])의 좌표를 사용합니다.
    """
    source = event['touches'][0] if event.get('touches') else event
    return source['clientX'] - origin[0], source['clientY'] - origin[1]


class SelectionGesture:
    """
    Idle -> Dragging(down) -> Idle(up, 타겟 확정 또는 해제)

    - down: 시작점을 기록하고 이전 선택 박스를 지웁니다.
    - move: 시작점과 현재점을 감싸는 사각형을 실시간 선택 영역으로 갱신합니다.
    - up: 너비가 최소값(10px)을 넘으면 타겟으로 확정, 아니면 '타겟 없음'을 알립니다.
    """

    def __init__(self, on_target_locked: Optional[TargetCallback] = None):
        self.on_target_locked = on_target_locked
        self.anchor: Optional[Point] = None
        self.current_box: Optional[TargetBox] = None

    @property
    def is_dragging(self) -> bool:
        return self.anchor is not None

    def pointer_down(self, event: Dict[str, Any], origin: Point = (0, 0)) -> None:
        self.anchor = local_point(event, origin)
        self.current_box = None

    def pointer_move(self, event: Dict[str, Any], origin: Point = (0, 0)) -> Optional[TargetBox]:
        if not self.is_dragging:
            return None
        self.current_box = TargetBox.from_points(self.anchor, local_point(event, origin))
        return self.current_box

    def pointer_up(self, event: Optional[Dict[str, Any]] = None) -> Optional[TargetBox]:
        # touchend에는 좌표가 없으므로 마지막 move 결과를 기준으로 판단합니다.
        locked = self.current_box if self.current_box and self.current_box.is_lockable() else None
        if locked is None:
            self.current_box = None
        self.anchor = None

        if self.on_target_locked:
            self.on_target_locked(locked)
        return locked


class CaptureSurface:
    """
    라이브 카메라 피드를 감싸는 화면 컴포넌트.
    프레임 소스는 cv2.VideoCapture와 같은 isOpened()/read() 인터페이스를 따릅니다.
    """

    EVENT_HANDLERS = {
        'mousedown': 'pointer_down', 'touchstart': 'pointer_down',
        'mousemove': 'pointer_move', 'touchmove': 'pointer_move',
        'mouseup': 'pointer_up', 'touchend': 'pointer_up',
    }

    def __init__(self, frame_source, on_target_locked: Optional[TargetCallback] = None,
                 jpeg_quality: int = 92):
        self.frame_source = frame_source
        self.jpeg_quality = jpeg_quality
        self.gesture = SelectionGesture(on_target_locked)

    def handle_event(self, event_type: str, event: Optional[Dict[str, Any]] = None,
                     origin: Point = (0, 0)) -> Optional[TargetBox]:
        """
        마우스/터치 이벤트를 같은 제스처 상태 머신으로 전달합니다.
        어떤 이벤트 타입이 들어왔는지에 따라 down/move/up을 고릅니다.
        """
        handler_name = self.EVENT_HANDLERS.get(event_type)
        if handler_name is None:
            raise ValueError(f"'{event_type}'은(는) 지원하지 않는 이벤트 타입입니다.")
        if handler_name == 'pointer_up':
            return self.gesture.pointer_up(event)
        handler = getattr(self.gesture, handler_name)
        return handler(event or {}, origin)

    @property
    def selection(self) -> Optional[TargetBox]:
        return self.gesture.current_box

    def capture(self) -> Optional[str]:
        """
        현재 프레임을 JPEG로 인코딩해 data URL로 반환합니다.
        장치가 준비되지 않았거나 프레임을 읽지 못하면 None을 반환합니다.
        """
        if self.frame_source is None or not self.frame_source.isOpened():
            logger.warning("카메라가 준비되지 않아 캡처를 건너뜁니다.")
            return None

        ok, frame = self.frame_source.read()
        if not ok or frame is None:
            logger.warning("카메라 프레임을 읽지 못했습니다.")
            return None

        ok, buffer = cv2.imencode('.jpg', frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
        if not ok:
            logger.warning("프레임 JPEG 인코딩에 실패했습니다.")
            return None

        return "data:image/jpeg;base64," + base64.b64encode(buffer.tobytes()).decode('utf-8')

    def release(self) -> None:
        if self.frame_source is not None:
            self.frame_source.release()
