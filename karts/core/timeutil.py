from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def utcnow_iso() -> str:
    """서버 시각 (ISO-8601, UTC). 문서 저장 시 타임스탬프로 사용한다."""
    return utcnow().isoformat()


def epoch_millis() -> int:
    return int(utcnow().timestamp() * 1000)
