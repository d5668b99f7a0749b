"""Long-lived cache of built model registries, keyed by root type."""
import logging
import threading
from typing import Any, Dict

from src.swagger.model import ModelRegistry
from src.swagger.model_builder import ModelBuilder

logger = logging.getLogger(__name__)


class ModelCache:
    """
    Caches one registry per root type

    Every build runs on its own fresh registry; only the finished registry
    is shared. Safe to use from several threads.
    """

    def __init__(self):
        self._registries: Dict[Any, ModelRegistry] = {}
        self._lock = threading.Lock()

    def get_or_build(self, root: Any) -> ModelRegistry:
        """Return the cached registry of root, building it on first use"""
        with self._lock:
            cached = self._registries.get(root)
            if cached is not None:
                return cached

            builder = ModelBuilder(ModelRegistry())
            builder.add_model(root)
            self._registries[root] = builder.registry
            logger.debug(f"Cached {len(builder.registry)} models for {root!r}")
            return builder.registry

    def invalidate(self, root: Any) -> None:
        with self._lock:
            self._registries.pop(root, None)

    def clear(self) -> None:
        with self._lock:
            self._registries.clear()

    def __contains__(self, root: object) -> bool:
        with self._lock:
            return root in self._registries

    def __len__(self) -> int:
        with self._lock:
            return len(self._registries)
