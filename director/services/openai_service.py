# director/services/openai_service.py
import json
import logging
from typing import Optional, Dict, Any
from flask import Flask
from marshmallow import Schema, fields, validate, ValidationError
from openai import OpenAI

from director.models.snapshot import ShotAction, ShotTemplate, TargetBox

logger = logging.getLogger(__name__)

ROLE_STATEMENT = (
    "You are a professional videography guide. "
    "Analyze the image to provide optimal angles and lighting."
)

REPLY_INSTRUCTIONS = (
    "Return a JSON object with:\n"
    '- "action": One of "UP", "DOWN", "LEFT", "RIGHT", "FORWARD", "BACKWARD", "OK" '
    "indicating how the user should move the camera.\n"
    '- "advice": A short, cinematic tip (max 15 words).'
)


class AnalysisFailedError(RuntimeError):
    """AI 분석 결과를 얻지 못했을 때 발생하는 예외"""


class GuidanceReplySchema(Schema):
    """모델 응답 JSON의 형식을 검증합니다. 정의되지 않은 키는 무시합니다."""
    action = fields.Str(required=True, validate=validate.OneOf([a.value for a in ShotAction]))
    advice = fields.Str(required=True, validate=validate.Length(min=1))

    class Meta:
        unknown = 'exclude'


def build_system_prompt(template: Optional[ShotTemplate] = None,
                        target_locked: Optional[TargetBox] = None) -> str:
    """
    역할 문장에 템플릿, 타겟 좌표 안내를 조건부로 덧붙여 시스템 프롬프트를 구성합니다.
    """
    lines = [ROLE_STATEMENT]
    if template:
        lines.append(f'The user wants a "{template.value}" shot.')
    if target_locked:
        lines.append(
            f"A target is locked at position: x={target_locked.x}, y={target_locked.y}, "
            f"width={target_locked.width}, height={target_locked.height}."
        )
    lines.append(REPLY_INSTRUCTIONS)
    return "\n".join(lines)


def parse_guidance_reply(content: Optional[str]) -> Dict[str, Any]:
    """
    모델이 돌려준 문자열을 {'action': ShotAction, 'advice': str}로 파싱합니다.

    :raises AnalysisFailedError: 내용이 없거나 JSON/스키마 검증에 실패한 경우
    """
    if not content:
        raise AnalysisFailedError("No response from AI")
    try:
        raw = json.loads(content)
    except json.JSONDecodeError as e:
        raise AnalysisFailedError(f"AI 응답을 JSON으로 해석할 수 없습니다: {e}") from e
    if not isinstance(raw, dict):
        raise AnalysisFailedError("AI 응답이 JSON 객체가 아닙니다.")
    try:
        reply = GuidanceReplySchema().load(raw)
    except ValidationError as err:
        raise AnalysisFailedError(f"AI 응답 형식이 올바르지 않습니다: {err.messages}") from err
    return {'action': ShotAction(reply['action']), 'advice': reply['advice']}


class OpenAIService:
    """
    OpenAI Vision API 연동을 담당하는 서비스 클래스.
    캡처된 프레임을 분석해 카메라 이동 지시와 짧은 촬영 조언을 돌려줍니다.
    """

    def __init__(self, client: Optional[OpenAI] = None):
        """
        실제 클라이언트는 init_app 메서드를 통해 설정됩니다.
        테스트에서는 대역(client)을 직접 주입할 수 있습니다.
        """
        self.client = client
        self.model = "gpt-4o"
        self.image_detail = "low"

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 클라이언트를 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        self.model = app.config.get('OPENAI_VISION_MODEL', self.model)
        self.image_detail = app.config.get('OPENAI_IMAGE_DETAIL', self.image_detail)
        if self.client is not None:
            return

        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OPENAI_API_KEY 설정이 .env 파일에 필요합니다.")

        self.client = OpenAI(api_key=api_key, base_url=app.config.get('OPENAI_BASE_URL') or None)
        logging.info("OpenAIService: OpenAI API 서비스가 성공적으로 초기화되었습니다.")

    def analyze_scene(self, image: str, template: Optional[ShotTemplate] = None,
                      target_locked: Optional[TargetBox] = None) -> Dict[str, Any]:
        """
        이미지(base64 data URL)를 분석하여 카메라 이동 지시를 생성합니다.

        :param image: 캡처된 프레임 (data:image/jpeg;base64,...)
        :param template: 선택된 구도 프리셋 (선택)
        :param target_locked: 사용자가 지정한 관심 영역 (선택)
        :return: {'action': ShotAction, 'advice': str}
        :raises AnalysisFailedError: 호출 실패, 빈 응답, 파싱 실패 시
        """
        if not self.client:
            raise RuntimeError("OpenAIService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": build_system_prompt(template, target_locked)
                    },
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": "Analyze this scene."},
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": image,
                                    "detail": self.image_detail
                                }
                            }
                        ]
                    }
                ],
                response_format={"type": "json_object"},
            )
        except Exception as e:
            logger.error(f"OpenAI Vision 호출 실패: {e}", exc_info=True)
            raise AnalysisFailedError("AI 서비스 호출에 실패했습니다.") from e

        choices = getattr(response, 'choices', None) or []
        content = choices[0].message.content if choices else None
        return parse_guidance_reply(content)
