from .checkout import router as checkout_router
from .orders import router as orders_router

__all__ = [
    "checkout_router",
    "orders_router",
]
