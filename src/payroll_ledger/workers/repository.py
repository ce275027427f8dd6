from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Worker


class WorkerDirectory(Protocol):
    """Read side of the worker registry.

    Note (DIP): ledgers and the settlement engine depend on this interface, not on the store.
    """

    def get(self, worker_id: str) -> Optional[Worker]:
        raise NotImplementedError

    def get_workers_by_folder(self, folder_name: str) -> Sequence[Worker]:
        raise NotImplementedError
