from impact_analyzer.api import (
    analyze_routes,
    report_routes,
)

__all__ = [
    "analyze_routes",
    "report_routes",
]
