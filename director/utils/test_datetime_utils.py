# director/utils/test_datetime_utils.py
"""
시간 유틸리티 기능 테스트

사용법: python -m pytest director/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, timedelta, timezone
from director.utils.datetime_utils import DateTimeUtils

def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc  # UTC로 정규화되어야 함

def test_to_iso_string_uses_z_suffix():
    """응답용 ISO 문자열은 'Z' 접미사를 사용"""
    dt = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert DateTimeUtils.to_iso_string(dt) == "2024-01-15T10:30:00Z"
    # naive datetime은 UTC로 간주
    assert DateTimeUtils.to_iso_string(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00Z"

def test_iso_round_trip_keeps_instant():
    dt = datetime(2024, 3, 1, 8, 0, 5, 123000, tzinfo=timezone.utc)
    assert DateTimeUtils.parse_iso_datetime(DateTimeUtils.to_iso_string(dt)) == dt

def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'created_at': datetime(2024, 1, 15, 10, 30),
        'nested': [{'created_at': datetime(2024, 1, 1)}],
        'advice': 'keep',
    }

    converted = DateTimeUtils.for_firestore(test_data)

    assert converted['created_at'].tzinfo == timezone.utc
    assert converted['nested'][0]['created_at'].tzinfo == timezone.utc
    assert converted['advice'] == 'keep'

def test_from_firestore_handles_timestamp_like_objects():
    class FakeTimestamp:
        def timestamp(self):
            return 0

    converted = DateTimeUtils.from_firestore({'created_at': FakeTimestamp()})
    assert converted['created_at'] == datetime(1970, 1, 1, tzinfo=timezone.utc)

def test_time_ago():
    """히스토리 상대 시간 표시 테스트"""
    ref = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    assert DateTimeUtils.time_ago(ref - timedelta(seconds=10), ref) == "just now"
    assert DateTimeUtils.time_ago(ref - timedelta(minutes=1), ref) == "1 minute ago"
    assert DateTimeUtils.time_ago(ref - timedelta(minutes=5), ref) == "5 minutes ago"
    assert DateTimeUtils.time_ago(ref - timedelta(hours=3), ref) == "3 hours ago"
    assert DateTimeUtils.time_ago(ref - timedelta(days=2), ref) == "2 days ago"

def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")
