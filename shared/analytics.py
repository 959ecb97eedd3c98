"""
Analytics event helpers.

No vendor is wired in: every event is written to the log so it can be
inspected locally. `ENABLE_ANALYTICS` only changes the log level.
"""

import logging
from typing import Any, Dict, Optional

from .config import get_settings

logger = logging.getLogger(__name__)

WEB_VITALS = ("FCP", "LCP", "CLS", "FID", "TTFB", "INP")


def _log_event(name: str, properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    event = {"name": name, "properties": properties or {}}
    level = logging.INFO if get_settings().enable_analytics else logging.DEBUG
    logger.log(level, "[Analytics] %s %s", name, event["properties"])
    return event


def init_analytics() -> bool:
    """Returns whether analytics is enabled for this process."""
    enabled = get_settings().enable_analytics
    logger.info("[Analytics] %s", "enabled (log only)" if enabled else "disabled")
    return enabled


def track_event(name: str, properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return _log_event(name, properties)


def track_page_view(path: str, properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return _log_event("page_view", {"path": path, **(properties or {})})


def track_interaction(element: str, action: str, properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return _log_event("interaction", {"element": element, "action": action, **(properties or {})})


def track_ai_usage(mode: str, provider: str, success: bool, duration_ms: Optional[int] = None) -> Dict[str, Any]:
    properties: Dict[str, Any] = {"mode": mode, "provider": provider, "success": success}
    if duration_ms is not None:
        properties["durationMs"] = duration_ms
    return _log_event("ai_tutor_usage", properties)


def track_performance(metric: str, value: float, properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return _log_event("performance", {"metric": metric, "value": value, **(properties or {})})


def track_error(error: str, properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return _log_event("error", {"error": error, **(properties or {})})


def track_conversion(goal: str, value: Optional[float] = None) -> Dict[str, Any]:
    properties: Dict[str, Any] = {"goal": goal}
    if value is not None:
        properties["value"] = value
    return _log_event("conversion", properties)


def report_web_vitals(name: str, value: float, metric_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Record a Core Web Vitals sample; other metric names are ignored."""
    if name not in WEB_VITALS:
        return None
    return track_performance(name, value, {"id": metric_id} if metric_id else None)
