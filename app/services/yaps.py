# =============================================================================
# YAPS Formatting - Display Labels & Compact Values for Engagement Metrics
# =============================================================================
#
# Turns a raw UserProfile into the labelled, formatted metric list the
# search UI renders.
#
# FORMAT RULES (format_yaps_value):
#   0            → "0"
#   < 1          → 4 decimals   (0.1234)
#   < 1,000      → 2 decimals   (12.35)
#   < 1,000,000  → thousands    (12.3K)
#   otherwise    → millions     (4.5M)
# =============================================================================

from __future__ import annotations

import math

from app.models.responses import UserMetrics, UserProfile, YapsMetric, YapsValue

# Shortest window first, all-time total last.
YAPS_PERIODS: tuple[str, ...] = (
    "yaps_l24h",
    "yaps_l48h",
    "yaps_l7d",
    "yaps_l30d",
    "yaps_l3m",
    "yaps_l6m",
    "yaps_l12m",
    "yaps_all",
)

_TIME_LABELS = {
    "yaps_l24h": "Last 24 Hours",
    "yaps_l48h": "Last 48 Hours",
    "yaps_l7d": "Last 7 Days",
    "yaps_l30d": "Last 30 Days",
    "yaps_l3m": "Last 3 Months",
    "yaps_l6m": "Last 6 Months",
    "yaps_l12m": "Last 12 Months",
    "yaps_all": "All Time",
}


def time_label(period: str) -> str:
    """Display label for a YAPS field name; unknown names are returned as-is."""
    return _TIME_LABELS.get(period, period)


def format_yaps_value(value: YapsValue | None) -> str:
    """
    Format a YAPS score for compact display.

    Numeric strings are parsed. Anything that is not a finite number is
    returned as its string form, unformatted; None formats as "".
    """
    try:
        num = float(value)
    except (TypeError, ValueError):
        return "" if value is None else str(value)
    if not math.isfinite(num):
        return str(value)

    if num == 0:
        return "0"
    if num < 1:
        return f"{num:.4f}"
    if num < 1_000:
        return f"{num:.2f}"
    if num < 1_000_000:
        return f"{num / 1_000:.1f}K"
    return f"{num / 1_000_000:.1f}M"


def build_metrics(profile: UserProfile) -> UserMetrics:
    """
    Build the labelled metric list and summary sentence for a profile.

    Windows the upstream did not send are left out of the list.
    """
    metrics = [
        YapsMetric(
            period=period,
            label=time_label(period),
            value=value,
            formatted=format_yaps_value(value),
        )
        for period in YAPS_PERIODS
        if (value := getattr(profile, period)) is not None
    ]

    summary = (
        f"{profile.username} has accumulated "
        f"{format_yaps_value(profile.yaps_all) or '0'} total YAPS, with "
        f"{format_yaps_value(profile.yaps_l30d) or '0'} YAPS in the last 30 days."
    )

    return UserMetrics(
        user_id=profile.user_id,
        username=profile.username,
        metrics=metrics,
        summary=summary,
    )
