# director/cli.py
"""
로컬 카메라로 한 장면을 캡처해 분석 서버에 보내고 안내를 출력하는 커맨드라인 도구

사용법:
    director capture --template wide --target 120,80,200,150
    director history
"""

import logging
import os
from typing import Optional

import cv2
import typer
from dotenv import load_dotenv

from director.client.analyze_client import AnalyzeClient
from director.client.guidance import HistoryDrawer
from director.client.session import DirectorSession
from director.models.snapshot import ShotTemplate, TargetBox

load_dotenv()

logger = logging.getLogger(__name__)

app = typer.Typer(help="Camera guidance director.", no_args_is_help=True)

DEFAULT_SERVER_URL = 'http://127.0.0.1:5000'


def _parse_target(value: Optional[str]) -> Optional[TargetBox]:
    if not value:
        return None
    try:
        x, y, width, height = (float(part) for part in value.split(','))
    except ValueError:
        raise typer.BadParameter("target는 'x,y,width,height' 형식이어야 합니다.")
    box = TargetBox(x=x, y=y, width=width, height=height)
    # 최소 너비를 넘지 못한 박스는 타겟이 없는 것으로 취급합니다.
    return box if box.is_lockable() else None


def _make_client(server_url: Optional[str]) -> AnalyzeClient:
    return AnalyzeClient(server_url or os.getenv('DIRECTOR_SERVER_URL', DEFAULT_SERVER_URL))


@app.command()
def capture(
    template: Optional[str] = typer.Option(
        None, "--template", "-t",
        help="Composition preset: " + ", ".join(t.value for t in ShotTemplate),
    ),
    target: Optional[str] = typer.Option(None, "--target", help="Locked target as x,y,width,height"),
    camera_index: Optional[int] = typer.Option(None, "--camera", "-c", help="Camera device index"),
    server_url: Optional[str] = typer.Option(None, "--server", "-s", help="Analysis server base URL"),
) -> None:
    """Capture one frame and print the camera guidance."""
    try:
        shot_template = ShotTemplate(template) if template else None
    except ValueError:
        raise typer.BadParameter(f"'{template}'은(는) 지원하지 않는 템플릿입니다.")

    index = camera_index if camera_index is not None else int(os.getenv('CAMERA_INDEX', 0))
    session = DirectorSession(cv2.VideoCapture(index), _make_client(server_url))
    session.select_template(shot_template)
    session.set_target_box(_parse_target(target))

    try:
        result = session.trigger_capture()
    finally:
        session.surface.release()

    if result is None:
        message = session.last_error or "Camera is not ready."
        typer.echo(f"Analysis Failed: {message}", err=True)
        raise typer.Exit(code=1)

    typer.echo(session.presenter.render())


@app.command()
def history(
    server_url: Optional[str] = typer.Option(None, "--server", "-s", help="Analysis server base URL"),
) -> None:
    """Print previous AI directions, newest first."""
    client = _make_client(server_url)
    drawer = HistoryDrawer(client)
    for line in drawer.render():
        typer.echo(line)
    if client.history.error:
        raise typer.Exit(code=1)


if __name__ == '__main__':
    app()
