from routers.medicines import router as medicines_router
from routers.doses import router as doses_router
from routers.calendar import router as calendar_router
from routers.stats import router as stats_router

__all__ = [
    "medicines_router",
    "doses_router",
    "calendar_router",
    "stats_router",
]
