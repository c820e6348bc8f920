# director/client/session.py
import logging
from typing import Optional, Dict, Any

from director.models.snapshot import ShotTemplate, TargetBox
from .analyze_client import AnalyzeClient, AnalyzeError
from .capture_surface import CaptureSurface
from .guidance import GuidancePresenter, HistoryDrawer

logger = logging.getLogger(__name__)


class DirectorSession:
    """
    카메라 화면, 템플릿 선택, 분석 클라이언트, 안내 표시를 한데 묶는 화면 단위 컴포넌트.
    캡처 기능은 이 세션이 소유하며, 캡처 버튼에는 trigger_capture 콜백을 그대로 넘겨줍니다.
    """

    def __init__(self, frame_source, client: AnalyzeClient,
                 presenter: Optional[GuidancePresenter] = None):
        self.client = client
        self.presenter = presenter or GuidancePresenter()
        self.history_drawer = HistoryDrawer(client)
        self.surface = CaptureSurface(frame_source, on_target_locked=self.set_target_box)
        self.template: Optional[ShotTemplate] = None
        self.target_box: Optional[TargetBox] = None
        self.last_error: Optional[str] = None

    @property
    def is_analyzing(self) -> bool:
        return self.client.is_pending

    def set_target_box(self, box: Optional[TargetBox]) -> None:
        self.target_box = box

    def select_template(self, template: Optional[ShotTemplate]) -> None:
        """같은 템플릿을 다시 고르면 선택이 해제됩니다."""
        self.template = None if template == self.template else template

    def trigger_capture(self) -> Optional[Dict[str, Any]]:
        """
        현재 프레임을 캡처해 분석을 요청합니다.
        분석이 진행 중이거나 카메라가 준비되지 않았으면 아무것도 하지 않습니다.
        """
        if self.is_analyzing:
            logger.info("분석이 진행 중이므로 캡처 요청을 무시합니다.")
            return None

        image = self.surface.capture()
        if image is None:
            return None

        self.presenter.dismiss()
        self.last_error = None
        return self.client.submit(
            image,
            template=self.template,
            target_box=self.target_box,
            on_success=self.presenter.show,
            on_error=self._report_error,
        )

    def _report_error(self, error: AnalyzeError) -> None:
        self.last_error = str(error)
        logger.warning(f"Analysis Failed: {self.last_error}")
