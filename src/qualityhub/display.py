"""Small display helpers shared by issue messages and renderers."""


def format_duration(ms: float) -> str:
    """Human-readable duration: ``850ms``, ``2.5s``, ``5m 3s``."""
    if ms < 1000:
        return f"{int(ms)}ms"
    seconds = ms / 1000
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    remaining = int(seconds % 60 + 0.5)
    return f"{minutes}m {remaining}s"


def delta_string(current: float, previous: float, higher_is_better: bool = True) -> str:
    """Arrow plus signed difference, e.g. ``▲ +2.0%``; empty when unchanged."""
    diff = current - previous
    if abs(diff) < 0.05:
        return ""
    sign = "+" if diff > 0 else ""
    improved = diff > 0 if higher_is_better else diff < 0
    arrow = "▲" if improved else "▼"
    return f"{arrow} {sign}{diff:.1f}%"


def percent_change(current: float, previous: float) -> float:
    """Relative change from ``previous`` to ``current`` in percent."""
    return (current - previous) / previous * 100
