import pytz
from quizbuilder.config import settings

def convert_to_local(utc_time):
    """Convert a naive UTC timestamp (as returned by SQLite) to the configured timezone"""
    if utc_time.tzinfo is None:
        utc_time = utc_time.replace(tzinfo=pytz.UTC)
    return utc_time.astimezone(pytz.timezone(settings.timezone))
