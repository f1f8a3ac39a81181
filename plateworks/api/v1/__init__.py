from .orders import router as orders_router
from .resource import router as resource_router
from .templates import router as templates_router

__all__ = ["orders_router", "resource_router", "templates_router"]
