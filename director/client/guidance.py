# director/client/guidance.py
from typing import Optional, Dict, Any, List
from datetime import datetime

from director.models.snapshot import ShotAction
from director.utils.datetime_utils import DateTimeUtils
from .analyze_client import AnalyzeClient, HistoryError

# 방향 지시별 표시 기호와 짧은 이동 안내
ACTION_CUES = {
    ShotAction.UP: ("↑", "Tilt the camera up"),
    ShotAction.DOWN: ("↓", "Tilt the camera down"),
    ShotAction.LEFT: ("←", "Pan to the left"),
    ShotAction.RIGHT: ("→", "Pan to the right"),
    ShotAction.FORWARD: ("⇡", "Move closer"),
    ShotAction.BACKWARD: ("⇣", "Step back"),
    ShotAction.OK: ("✓", "Hold the shot"),
}


class GuidancePresenter:
    """
    분석 결과({action, advice})를 화면용 안내로 바꿔 보여주는 컴포넌트.
    dismiss()는 현재 표시 중인 결과만 지우며 히스토리에는 영향을 주지 않습니다.
    """

    def __init__(self):
        self.current: Optional[Dict[str, Any]] = None

    @property
    def is_visible(self) -> bool:
        return bool(self.current and self.current.get('action'))

    def show(self, result: Optional[Dict[str, Any]]) -> None:
        self.current = result

    def dismiss(self) -> None:
        self.current = None

    def render(self) -> Optional[str]:
        """표시할 결과가 없으면 None을 반환합니다."""
        if not self.is_visible:
            return None
        glyph, hint = ACTION_CUES[self.current['action']]
        return f'{glyph}  {hint}\nAI Cinematographer: "{self.current.get("advice", "")}"'


class HistoryDrawer:
    """이전 AI 지시 목록(Shot History)을 보여주는 서랍 컴포넌트"""

    EMPTY_MESSAGE = "No shots analyzed yet."
    LOADING_MESSAGE = "Loading history..."

    def __init__(self, client: AnalyzeClient):
        self.client = client

    def render(self, reference: Optional[datetime] = None) -> List[str]:
        if self.client.history.is_loading:
            return [self.LOADING_MESSAGE]
        try:
            snapshots = self.client.fetch_history()
        except HistoryError as e:
            return [str(e)]

        if not snapshots:
            return [self.EMPTY_MESSAGE]

        reference = reference or DateTimeUtils.now()
        lines = []
        for shot in snapshots:
            action = shot.action.value if shot.action else "-"
            age = DateTimeUtils.time_ago(shot.created_at, reference) if shot.created_at else "just now"
            lines.append(f"[{action}] {shot.advice} ({age})")
        return lines
