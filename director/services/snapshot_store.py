# director/services/snapshot_store.py
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from flask import Flask
from firebase_admin import firestore

from director.models.snapshot import Snapshot, ShotAction, ShotTemplate, TargetBox
from director.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


class SnapshotStoreError(RuntimeError):
    """스냅샷 저장소를 사용할 수 없을 때 발생하는 예외"""


class SnapshotStore(ABC):
    """
    분석 기록(Snapshot)을 보관하는 추가 전용(append-only) 저장소의 공통 인터페이스.
    - id와 created_at은 저장소가 생성 시점에 부여합니다.
    - 수정/삭제 기능은 제공하지 않습니다.
    """

    def create(self, advice: str, action: Optional[ShotAction] = None,
               template: Optional[ShotTemplate] = None,
               target_locked: Optional[TargetBox] = None) -> Snapshot:
        snapshot = Snapshot(
            snapshot_id=str(uuid.uuid4()),
            advice=advice,
            action=action,
            template=template,
            target_locked=target_locked,
            created_at=DateTimeUtils.now(),
        )
        self._append(snapshot)
        logger.info(f"스냅샷 저장 성공 (id: {snapshot.snapshot_id}, action: {action.value if action else None})")
        return snapshot

    @abstractmethod
    def list(self) -> List[Snapshot]:
        """created_at 내림차순(최신순)으로 전체 기록을 반환합니다."""

    @abstractmethod
    def _append(self, snapshot: Snapshot) -> None:
        """생성된 스냅샷을 저장소에 기록합니다."""


class InMemorySnapshotStore(SnapshotStore):
    """
    프로세스 메모리에 기록을 보관하는 저장소.
    Firebase 자격 증명이 없는 로컬 개발 및 테스트 환경에서 사용합니다.
    """

    def __init__(self):
        self._records: List[Snapshot] = []
        self._lock = threading.Lock()

    def _append(self, snapshot: Snapshot) -> None:
        with self._lock:
            self._records.append(snapshot)

    def list(self) -> List[Snapshot]:
        with self._lock:
            newest_inserted_first = list(reversed(self._records))
        # 안정 정렬이므로 created_at이 같으면 나중에 저장된 기록이 앞에 옵니다.
        return sorted(newest_inserted_first, key=lambda s: s.created_at, reverse=True)


class FirestoreSnapshotStore(SnapshotStore):
    """
    Firestore 컬렉션에 기록을 보관하는 저장소.
    실제 클라이언트는 init_app 메서드를 통해 설정됩니다.
    """

    def __init__(self, db=None, collection_name: str = 'snapshots'):
        self.db = db
        self.collection_name = collection_name
        self.collection_ref = db.collection(collection_name) if db is not None else None

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 Firestore 컬렉션 참조를 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        self.collection_name = app.config.get('SNAPSHOTS_COLLECTION', self.collection_name)
        self.db = firestore.client()
        self.collection_ref = self.db.collection(self.collection_name)
        logging.info(f"FirestoreSnapshotStore: '{self.collection_name}' 컬렉션이 연결되었습니다.")

    def _ensure_ready(self):
        if self.collection_ref is None:
            raise RuntimeError("FirestoreSnapshotStore가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

    def _append(self, snapshot: Snapshot) -> None:
        self._ensure_ready()
        try:
            self.collection_ref.document(snapshot.snapshot_id).set(snapshot.to_document())
        except Exception as e:
            logger.error(f"Firestore 저장 실패 (Collection: {self.collection_name}): {e}", exc_info=True)
            raise SnapshotStoreError("스냅샷을 저장하지 못했습니다.") from e

    def list(self) -> List[Snapshot]:
        self._ensure_ready()
        try:
            query = self.collection_ref.order_by('created_at', direction=firestore.Query.DESCENDING)
            return [Snapshot.from_document(doc.to_dict()) for doc in query.stream()]
        except Exception as e:
            logger.error(f"Firestore 조회 실패 (Collection: {self.collection_name}): {e}", exc_info=True)
            raise SnapshotStoreError("스냅샷 목록을 조회하지 못했습니다.") from e


def create_snapshot_store(app: Flask) -> SnapshotStore:
    """설정값(SNAPSHOT_STORE)에 맞는 저장소 인스턴스를 생성합니다."""
    backend = app.config.get('SNAPSHOT_STORE', 'firestore')
    if backend == 'memory':
        return InMemorySnapshotStore()
    if backend == 'firestore':
        store = FirestoreSnapshotStore()
        store.init_app(app)
        return store
    raise ValueError(f"'{backend}'은(는) 지원하지 않는 SNAPSHOT_STORE 값입니다.")
