# director/api/analyze/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from .schemas import AnalyzeRequestSchema, AnalyzeResponseSchema

logger = logging.getLogger(__name__)

analyze_bp = Blueprint('analyze_bp', __name__)


@analyze_bp.route('', methods=['POST'])
def analyze_scene():
    """
    캡처된 프레임을 분석해 카메라 이동 지시와 촬영 조언을 반환합니다.
    - 성공 시, 결과는 이미 히스토리에 저장된 상태입니다.
    - 요청 형식이 잘못되면 AI를 호출하지 않고 400을 반환합니다.
    """
    analysis_service = current_app.services['scene_analysis']
    try:
        data = AnalyzeRequestSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        logger.warning(f"장면 분석 요청 형식 오류: {err.messages}")
        return jsonify({"message": "Invalid analysis request", "details": err.messages}), 400

    try:
        result = analysis_service.analyze(
            image=data['image'],
            template=data['template'],
            target_locked=data['target_locked'],
        )
        return jsonify(AnalyzeResponseSchema().dump(result)), 200
    except Exception as e:
        logger.error(f"Analysis error: {e}", exc_info=True)
        return jsonify({"message": "Failed to analyze image"}), 500
