# director/client/analyze_client.py
import logging
from typing import Callable, Optional, Dict, Any, List

import requests
from marshmallow import ValidationError

from director.api.analyze.schemas import AnalyzeRequestSchema, AnalyzeResponseSchema, TargetBoxSchema
from director.api.snapshots.schemas import SnapshotSchema
from director.models.snapshot import Snapshot, ShotTemplate, TargetBox

logger = logging.getLogger(__name__)

ANALYZE_PATH = '/api/analyze'
SNAPSHOTS_PATH = '/api/snapshots'


class AnalyzeError(Exception):
    """장면 분석 요청이 실패했을 때 화면에 보여줄 메시지를 담는 예외"""


class HistoryError(Exception):
    """히스토리 목록을 가져오지 못했을 때 발생하는 예외"""


def _error_message(response: requests.Response, fallback: str) -> str:
    """서버가 내려준 message가 있으면 그대로, 없으면 기본 문구를 사용합니다."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get('message'):
        return body['message']
    return fallback


class SnapshotHistory:
    """
    GET /api/snapshots 결과를 캐시하는 히스토리 데이터 소스.
    분석이 성공하면 invalidate()로 캐시를 비워 다음 조회 때 새로 가져옵니다.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.is_loading = False
        self.error: Optional[str] = None
        self._cache: Optional[List[Snapshot]] = None

    @property
    def is_stale(self) -> bool:
        return self._cache is None

    def invalidate(self) -> None:
        self._cache = None

    def fetch(self, force: bool = False) -> List[Snapshot]:
        """
        최신순 스냅샷 목록을 반환합니다. 캐시가 유효하면 네트워크를 타지 않습니다.

        :raises HistoryError: 요청 실패 또는 응답 형식 오류 시
        """
        if self._cache is not None and not force:
            return self._cache

        self.is_loading = True
        self.error = None
        try:
            response = self.session.get(self.base_url + SNAPSHOTS_PATH)
            if not response.ok:
                raise HistoryError("Failed to fetch history")
            self._cache = SnapshotSchema(many=True).load(response.json())
            return self._cache
        except (requests.RequestException, ValueError, ValidationError) as e:
            logger.error(f"히스토리 조회 실패: {e}")
            self.error = "Failed to fetch history"
            raise HistoryError(self.error) from e
        except HistoryError as e:
            self.error = str(e)
            raise
        finally:
            self.is_loading = False


class AnalyzeClient:
    """
    캡처한 프레임을 서버로 보내 분석 결과를 받아오는 클라이언트.
    - is_pending: 요청이 진행 중인지 여부 (화면에서 캡처 버튼 비활성화에 사용)
    - 성공 시 히스토리 캐시를 무효화합니다.
    - 자동 재시도는 하지 않습니다.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 history: Optional[SnapshotHistory] = None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.history = history or SnapshotHistory(self.base_url, self.session)
        self.is_pending = False
        self.result: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None

    def _build_payload(self, image: str, template: Optional[ShotTemplate],
                       target_box: Optional[TargetBox]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'image': image}
        if template:
            payload['template'] = template.value
        if target_box:
            payload['targetLocked'] = TargetBoxSchema().dump(target_box)
        # 서버와 같은 스키마로 미리 검증해 잘못된 요청은 보내지 않습니다.
        AnalyzeRequestSchema().load(payload)
        return payload

    def submit(self, image: str, template: Optional[ShotTemplate] = None,
               target_box: Optional[TargetBox] = None,
               on_success: Optional[Callable[[Dict[str, Any]], None]] = None,
               on_error: Optional[Callable[[AnalyzeError], None]] = None) -> Optional[Dict[str, Any]]:
        """
        분석 요청을 1회 전송합니다.

        :return: 성공 시 {'action': ShotAction, 'advice': str}, 실패 시 None
        """
        self.is_pending = True
        self.result = None
        self.error = None
        try:
            payload = self._build_payload(image, template, target_box)
            response = self.session.post(self.base_url + ANALYZE_PATH, json=payload)
            if not response.ok:
                raise AnalyzeError(_error_message(response, "Failed to analyze scene"))
            result = AnalyzeResponseSchema().load(response.json())
        except AnalyzeError as e:
            failure = e
        except (requests.RequestException, ValueError, ValidationError) as e:
            logger.error(f"장면 분석 요청 실패: {e}")
            failure = AnalyzeError("Failed to analyze scene")
        else:
            failure = None
        finally:
            self.is_pending = False

        if failure is not None:
            self.error = str(failure)
            if on_error:
                on_error(failure)
            return None

        self.result = result
        self.history.invalidate()
        if on_success:
            on_success(result)
        return result

    def fetch_history(self, force: bool = False) -> List[Snapshot]:
        """히스토리 서랍의 데이터 소스. 마지막 분석 성공 이후의 목록은 캐시에서 돌려줍니다."""
        return self.history.fetch(force)
