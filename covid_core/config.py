from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

ECDC_CASE_DISTRIBUTION_URL = "https://opendata.ecdc.europa.eu/covid19/casedistribution/json/"


class Settings(BaseModel):
    data_url: str = os.getenv("COVID_DATA_URL", ECDC_CASE_DISTRIBUTION_URL)
    request_timeout: float = float(os.getenv("COVID_REQUEST_TIMEOUT", "30"))

    items_per_page: int = int(os.getenv("COVID_ITEMS_PER_PAGE", "10"))
    max_page_buttons: int = int(os.getenv("COVID_MAX_PAGE_BUTTONS", "5"))
    # The original UI alerted above this page size; we log instead.
    large_page_warning: int = int(os.getenv("COVID_LARGE_PAGE_WARNING", "1000"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic root handler for applications embedding the core."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
