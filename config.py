import logging
import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE_NAME = "Asia/Tokyo"


@dataclass(frozen=True)
class Settings:
    calendar1_url: str
    calendar2_url: str
    timezone: ZoneInfo


def get_timezone() -> ZoneInfo:
    tz_name = os.getenv("TIMEZONE", DEFAULT_TIMEZONE_NAME)
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Invalid TIMEZONE %s, falling back to %s", tz_name, DEFAULT_TIMEZONE_NAME)
        return ZoneInfo(DEFAULT_TIMEZONE_NAME)


def get_settings() -> Settings:
    """
    환경 변수(.env 포함)에서 설정을 읽습니다. 호출할 때마다 새로 읽습니다.
    """
    settings = Settings(
        calendar1_url=os.getenv("PUBLIC_CALENDAR_URL_1", ""),
        calendar2_url=os.getenv("PUBLIC_CALENDAR_URL_2", ""),
        timezone=get_timezone(),
    )
    if not settings.calendar1_url:
        logger.warning("PUBLIC_CALENDAR_URL_1 is not set")
    if not settings.calendar2_url:
        logger.warning("PUBLIC_CALENDAR_URL_2 is not set")
    return settings
