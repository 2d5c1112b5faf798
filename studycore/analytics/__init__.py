"""
Analytics package exports.
"""

from studycore.analytics.constants import RISK_LEVELS, REVLOG_COLUMNS
from studycore.analytics.metrics import build_risk_frame, summarize_risk_levels
from studycore.analytics.queries import export_review_log_csv, review_logs_to_frame

__all__ = [
    "RISK_LEVELS",
    "REVLOG_COLUMNS",
    "build_risk_frame",
    "summarize_risk_levels",
    "export_review_log_csv",
    "review_logs_to_frame",
]
