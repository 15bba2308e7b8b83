import logging
import os


class Config:
    LOG_LEVEL: str = os.environ.get("TABLE_REFINE_LOG_LEVEL", "INFO")
    DATE_FORMAT: str = os.environ.get("TABLE_REFINE_DATE_FORMAT", "%Y-%m-%d")
    PREVIEW_ROWS: int = int(os.environ.get("TABLE_REFINE_PREVIEW_ROWS", "10"))
    PREVIEW_COLUMNS: int = int(os.environ.get("TABLE_REFINE_PREVIEW_COLUMNS", "10"))
    DEFAULT_MODEL: str = os.environ.get("DEFAULT_MODEL", "gemini-2.5-flash")


def configure_logging(level: str | None = None):
    """Set up root logging at the configured level."""
    logging.basicConfig(level=(level or Config.LOG_LEVEL).upper())
