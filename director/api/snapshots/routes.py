# director/api/snapshots/routes.py
import logging
from flask import Blueprint, jsonify, current_app

from .schemas import SnapshotSchema

logger = logging.getLogger(__name__)

snapshots_bp = Blueprint('snapshots_bp', __name__)


@snapshots_bp.route('', methods=['GET'])
def list_snapshots():
    """
    저장된 분석 기록을 최신순(createdAt 내림차순)으로 조회합니다.
    기록이 없으면 빈 배열을 반환합니다.
    """
    snapshot_store = current_app.services['snapshots']
    try:
        snapshots = snapshot_store.list()
        return jsonify(SnapshotSchema(many=True).dump(snapshots)), 200
    except Exception as e:
        logger.error(f"스냅샷 목록 조회 실패: {e}", exc_info=True)
        return jsonify({"message": "Failed to fetch snapshots"}), 500
