"""
Analytics services.

metrics, pricing, forecast and aggregation are pure calculations;
analytics_service wires them to the database.
"""

__all__ = [
    "metrics",
    "pricing",
    "forecast",
    "aggregation",
    "analytics_service",
    "mock_data",
    "report_service",
]
