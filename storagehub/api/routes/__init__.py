from storagehub.api.routes.units import router as units_router
from storagehub.api.routes.customers import router as customers_router
from storagehub.api.routes.metrics import router as metrics_router
from storagehub.api.routes.forecast import router as forecast_router
from storagehub.api.routes.alerts import router as alerts_router
from storagehub.api.routes.reports import router as reports_router

__all__ = [
    "units_router",
    "customers_router",
    "metrics_router",
    "forecast_router",
    "alerts_router",
    "reports_router",
]
