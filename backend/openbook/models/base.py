from datetime import datetime
from typing import Optional, Union


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse a SQLite timestamp (CURRENT_TIMESTAMP or isoformat) into a datetime"""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp for API payloads"""
    return value.isoformat() if value else None
