from .correctness import CorrectnessManager, REPLACEMENT_POLICIES
from .ordering import OrderManager, OrderScope
from .plan import WritePlan
from .retry import RetryPolicy

__all__ = ["CorrectnessManager", "REPLACEMENT_POLICIES", "OrderManager", "OrderScope", "WritePlan", "RetryPolicy"]
