from mtgassistant.api.boosters import router as boosters_router
from mtgassistant.api.collection import router as collection_router
from mtgassistant.api.health import router as health_router

__all__ = [
    "boosters_router",
    "collection_router",
    "health_router",
]
