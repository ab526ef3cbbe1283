import pytz
from flask import current_app


def get_app_timezone():
    """Timezone hiển thị, lấy từ APP_TIMEZONE (mặc định UTC)"""
    name = current_app.config.get('APP_TIMEZONE') or 'UTC'
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        current_app.logger.warning(f"⚠️ Unknown APP_TIMEZONE '{name}', falling back to UTC")
        return pytz.utc


def utc_to_local(dt):
    """Chuyển datetime UTC (naive) sang timezone của app"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(get_app_timezone())


def isoformat_local(dt):
    local = utc_to_local(dt)
    return local.isoformat() if local else None
