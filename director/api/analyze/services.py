# director/api/analyze/services.py
import logging
from typing import Optional, Dict, Any

from director.models.snapshot import ShotTemplate, TargetBox
from director.services.openai_service import OpenAIService
from director.services.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class SceneAnalysisService:
    """
    장면 분석 요청을 처리하는 서비스 클래스.
    - AI 분석이 완전히 성공한 뒤에만 스냅샷을 저장합니다.
    - 저장까지 끝난 결과만 호출자에게 반환합니다.
    """

    def __init__(self, openai_service: OpenAIService, snapshot_store: SnapshotStore):
        self.openai_service = openai_service
        self.snapshot_store = snapshot_store

    def analyze(self, image: str, template: Optional[ShotTemplate] = None,
                target_locked: Optional[TargetBox] = None) -> Dict[str, Any]:
        """
        1. AI에게 이미지를 분석시켜 {action, advice}를 받습니다.
        2. 결과를 스냅샷으로 저장합니다. (저장 실패 시 예외가 그대로 전파됩니다)
        3. 저장된 결과의 {action, advice}를 반환합니다.
        """
        result = self.openai_service.analyze_scene(image, template, target_locked)

        snapshot = self.snapshot_store.create(
            advice=result['advice'],
            action=result['action'],
            template=template,
            target_locked=target_locked,
        )
        logger.info(f"장면 분석 완료 (snapshot: {snapshot.snapshot_id}, template: {template.value if template else None})")

        return {'action': snapshot.action, 'advice': snapshot.advice}
