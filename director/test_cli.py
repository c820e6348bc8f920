# director/test_cli.py
import pytest
from typer.testing import CliRunner

from director import cli
from director.client.analyze_client import AnalyzeClient

BASE_URL = 'http://director.test'

runner = CliRunner()


@pytest.fixture
def wired_cli(monkeypatch, camera, http_session):
    """CLI가 가짜 카메라와 테스트 서버를 사용하도록 연결합니다."""
    monkeypatch.setattr(cli.cv2, 'VideoCapture', lambda index: camera)
    monkeypatch.setattr(cli, '_make_client', lambda server_url: AnalyzeClient(BASE_URL, session=http_session))
    return http_session


def test_capture_prints_guidance(wired_cli, camera):
    result = runner.invoke(cli.app, ['capture', '--template', 'wide', '--target', '0,0,120,80'])

    assert result.exit_code == 0
    assert 'Pan to the left' in result.output
    _, _, payload = wired_cli.requests[-1]
    assert payload['template'] == 'wide'
    assert payload['targetLocked'] == {'x': 0, 'y': 0, 'width': 120, 'height': 80}
    assert camera.released


def test_capture_drops_too_narrow_target(wired_cli):
    result = runner.invoke(cli.app, ['capture', '--target', '0,0,5,80'])

    assert result.exit_code == 0
    _, _, payload = wired_cli.requests[-1]
    assert 'targetLocked' not in payload


def test_capture_rejects_unknown_template(wired_cli):
    result = runner.invoke(cli.app, ['capture', '--template', 'fisheye'])

    assert result.exit_code != 0
    assert wired_cli.requests == []


def test_capture_reports_failure(wired_cli, openai_client, reply_factory):
    openai_client.chat.completions.create.return_value = reply_factory(None)

    result = runner.invoke(cli.app, ['capture'])

    assert result.exit_code == 1


def test_history_lists_previous_shots(wired_cli):
    runner.invoke(cli.app, ['capture'])

    result = runner.invoke(cli.app, ['history'])

    assert result.exit_code == 0
    assert '[LEFT] Lower the frame for drama.' in result.output


def test_history_when_empty(wired_cli):
    result = runner.invoke(cli.app, ['history'])

    assert result.exit_code == 0
    assert 'No shots analyzed yet.' in result.output
