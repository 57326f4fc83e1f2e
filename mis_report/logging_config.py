"""
Process-wide logging setup.
"""
import logging
from typing import Optional

from mis_report.config import config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None):
    """Configure root logging once; Streamlit reruns leave existing handlers alone."""
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format=LOG_FORMAT,
    )
