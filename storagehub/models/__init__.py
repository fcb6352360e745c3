# Import all models so they are registered with Base.metadata
from storagehub.models.customer import Customer
from storagehub.models.unit import Unit
from storagehub.models.metric import MonthlyMetric

__all__ = ["Customer", "Unit", "MonthlyMetric"]
