from __future__ import annotations
import threading
from typing import Dict, List, Optional

from node_telemetry.core.types.link_types import TargetId


class TargetTracker:
    """
    Maps link names to the sampler handle of the target tracking them.

    A single lock guards the whole map. Links come and go rarely, so there is
    no separate read path: lookups take the same lock as mutations. The lock is
    never held across an await.
    """

    def __init__(self) -> None:
        self._targets: Dict[str, TargetId] = {}
        self._lock = threading.Lock()

    def insert(self, name: str, target_id: TargetId) -> Optional[TargetId]:
        """Record `target_id` under `name`, returning the handle it replaced."""
        with self._lock:
            previous = self._targets.get(name)
            self._targets[name] = target_id
            return previous

    def remove(self, name: str) -> Optional[TargetId]:
        """Forget `name`, returning its handle if it was tracked."""
        with self._lock:
            return self._targets.pop(name, None)

    def remove_handle(self, target_id: TargetId) -> List[str]:
        """Forget every name recorded for `target_id`, returning those names."""
        with self._lock:
            names = [name for name, tid in self._targets.items() if tid == target_id]
            for name in names:
                del self._targets[name]
            return names

    def get(self, name: str) -> Optional[TargetId]:
        with self._lock:
            return self._targets.get(name)

    def snapshot(self) -> Dict[str, TargetId]:
        with self._lock:
            return dict(self._targets)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._targets

    def __len__(self) -> int:
        with self._lock:
            return len(self._targets)
