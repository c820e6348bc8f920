# conftest.py
"""
테스트 공용 픽스처

사용법: python -m pytest -v
"""

from types import SimpleNamespace
from unittest.mock import MagicMock
from urllib.parse import urlsplit

import numpy as np
import pytest

from director import create_app
from director.services.openai_service import OpenAIService
from director.services.snapshot_store import InMemorySnapshotStore

BASE_URL = 'http://director.test'


def make_completion(content):
    """OpenAI chat.completions.create 응답 형태를 흉내 낸 객체"""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeCamera:
    """cv2.VideoCapture 대역: isOpened()/read()/release()만 제공합니다."""

    def __init__(self, opened=True, frame=None):
        self.opened = opened
        self.frame = frame
        self.released = False
        self.reads = 0

    def isOpened(self):
        return self.opened

    def read(self):
        self.reads += 1
        return self.frame is not None, self.frame

    def release(self):
        self.released = True


class _TestResponse:
    """Flask 테스트 응답을 requests.Response처럼 보이게 감쌉니다."""

    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.ok = response.status_code < 400

    def json(self):
        return self._response.get_json()


class FlaskTestSession:
    """AnalyzeClient가 requests.Session 대신 Flask 테스트 클라이언트를 쓰도록 연결합니다."""

    def __init__(self, test_client):
        self.test_client = test_client
        self.requests = []

    def post(self, url, json=None):
        self.requests.append(('POST', url, json))
        return _TestResponse(self.test_client.post(urlsplit(url).path, json=json))

    def get(self, url):
        self.requests.append(('GET', url, None))
        return _TestResponse(self.test_client.get(urlsplit(url).path))


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion(
        '{"action": "LEFT", "advice": "Lower the frame for drama."}'
    )
    return client


@pytest.fixture
def snapshot_store():
    return InMemorySnapshotStore()


@pytest.fixture
def app(openai_client, snapshot_store):
    return create_app('testing', services={
        'openai': OpenAIService(client=openai_client),
        'snapshots': snapshot_store,
    })


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def http_session(client):
    return FlaskTestSession(client)


@pytest.fixture
def frame():
    return np.zeros((48, 64, 3), dtype=np.uint8)


@pytest.fixture
def camera(frame):
    return FakeCamera(frame=frame)


@pytest.fixture
def reply_factory():
    return make_completion


@pytest.fixture
def camera_factory():
    return FakeCamera
