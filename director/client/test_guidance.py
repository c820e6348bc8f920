# director/client/test_guidance.py
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from director.client.analyze_client import HistoryError
from director.client.guidance import GuidancePresenter, HistoryDrawer
from director.models.snapshot import Snapshot, ShotAction


def test_presenter_renders_nothing_without_result():
    presenter = GuidancePresenter()
    assert presenter.render() is None
    presenter.show(None)
    assert presenter.render() is None


def test_presenter_renders_direction_and_advice():
    presenter = GuidancePresenter()
    presenter.show({'action': ShotAction.RIGHT, 'advice': 'Reveal the skyline.'})

    rendered = presenter.render()

    assert rendered.startswith('→  Pan to the right')
    assert '"Reveal the skyline."' in rendered


def test_dismiss_clears_only_local_state():
    presenter = GuidancePresenter()
    presenter.show({'action': ShotAction.OK, 'advice': 'Perfect.'})

    presenter.dismiss()

    assert not presenter.is_visible
    assert presenter.render() is None


def _client(snapshots=None, error=None, loading=False):
    client = MagicMock()
    client.history.is_loading = loading
    if error:
        client.fetch_history.side_effect = HistoryError(error)
    else:
        client.fetch_history.return_value = snapshots or []
    return client


def test_drawer_states():
    assert HistoryDrawer(_client(loading=True)).render() == [HistoryDrawer.LOADING_MESSAGE]
    assert HistoryDrawer(_client()).render() == ["No shots analyzed yet."]
    assert HistoryDrawer(_client(error='Failed to fetch history')).render() == ['Failed to fetch history']


def test_drawer_lists_snapshots_with_relative_age():
    now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    snapshots = [
        Snapshot(snapshot_id='2', advice='Hold it.', action=ShotAction.OK, created_at=now - timedelta(minutes=3)),
        Snapshot(snapshot_id='1', advice='Go low.', action=None, created_at=now - timedelta(days=1)),
    ]
    drawer = HistoryDrawer(_client(snapshots))

    assert drawer.render(reference=now) == [
        '[OK] Hold it. (3 minutes ago)',
        '[-] Go low. (1 day ago)',
    ]
