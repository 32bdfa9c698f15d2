"""
Async Facade
============

Asynchronous twins of every repository operation. Each twin submits the
synchronous unit of work to a bounded thread pool and returns a
``concurrent.futures.Future``:

    future = company_repo.create_async(TransportCompany(name="Acme"))
    future.add_done_callback(lambda f: print(f.result().id))

    # or, from asyncio code
    company = await asyncio.wrap_future(company_repo.get_by_id_async(1))

Semantics match the synchronous call exactly; errors arrive through the
future (``result()`` re-raises them) and are never raised on the
submitting thread. Calls submitted concurrently run in no particular
order: chain on the future when one call depends on another. Running
work cannot be cancelled; a caller that stops waiting (``result(timeout=...)``)
leaves it to finish in the pool.
"""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

import structlog

from tms.config import settings
from tms.core.constants import RepositoryMessage
from tms.core.exceptions import RepositoryError

logger = structlog.get_logger(__name__)


def make_worker_pool(max_workers: Optional[int] = None, name: str = "tms-repository") -> ThreadPoolExecutor:
    """
    Create a bounded worker pool for repository calls.

    A single pool may be shared by several repositories; each task opens
    its own session, so no connection is shared between workers.
    """
    return ThreadPoolExecutor(
        max_workers=max_workers or settings.repository_max_workers,
        thread_name_prefix=name,
    )


class AsyncRepositoryMixin:
    """
    Adds ``*_async`` twins and pool management to a repository.

    The host class must call ``_init_worker_pool`` from its constructor
    and provide the synchronous operations plus a ``descriptor``.
    """

    def _init_worker_pool(self, executor: Optional[Executor]) -> None:
        self._executor = executor
        self._owns_executor = executor is None
        self._executor_lock = threading.Lock()

    @property
    def executor(self) -> Executor:
        """The worker pool, created on first use when none was injected."""
        if self._executor is None:
            with self._executor_lock:
                if self._executor is None:
                    self._executor = make_worker_pool(name=f"tms-{self.descriptor.name.lower()}")
        return self._executor

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """
        Run ``fn(*args, **kwargs)`` on the worker pool.

        A pool that refuses work (already shut down) yields a failed future
        instead of raising here.
        """
        try:
            return self.executor.submit(fn, *args, **kwargs)
        except RuntimeError as exc:
            operation = getattr(fn, "__name__", "task")
            logger.warning(
                "repository.pool_rejected",
                entity=self.descriptor.name,
                operation=operation,
                reason=str(exc),
            )
            future: Future = Future()
            future.set_exception(
                RepositoryError(
                    RepositoryMessage.POOL_UNAVAILABLE.format(
                        operation=operation, entity=self.descriptor.name, reason=exc
                    ),
                    details={"entity": self.descriptor.name, "operation": operation},
                    cause=exc,
                )
            )
            return future

    def close(self, wait: bool = True) -> None:
        """Shut down the worker pool if this repository created it."""
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ========================================
    # Async Twins
    # ========================================

    def create_async(self, entity) -> Future:
        return self.submit(self.create, entity)

    def update_async(self, entity) -> Future:
        return self.submit(self.update, entity)

    def delete_async(self, entity) -> Future:
        return self.submit(self.delete, entity)

    def get_by_id_async(self, entity_id, *fetch_relations: str) -> Future:
        return self.submit(self.get_by_id, entity_id, *fetch_relations)

    def get_all_async(self, page, size, order_by=None, ascending=True, *fetch_relations: str) -> Future:
        return self.submit(self.get_all, page, size, order_by, ascending, *fetch_relations)

    def find_by_criteria_async(self, conditions, order_by=None, ascending=True, *fetch_relations: str) -> Future:
        return self.submit(self.find_by_criteria, conditions, order_by, ascending, *fetch_relations)

    def find_with_aggregation_async(
        self, join_relation, aggregation_field, group_by_field, ascending=True, function="sum"
    ) -> Future:
        return self.submit(
            self.find_with_aggregation, join_relation, aggregation_field, group_by_field, ascending, function
        )

    def find_with_join_async(
        self,
        join_field,
        join_condition_field,
        join_condition_value,
        order_by=None,
        ascending=True,
        eager_fetch=False,
        *fetch_relations: str,
    ) -> Future:
        return self.submit(
            self.find_with_join,
            join_field,
            join_condition_field,
            join_condition_value,
            order_by,
            ascending,
            eager_fetch,
            *fetch_relations,
        )

    def get_by_id_and_map_async(self, entity_id, mapper, initializer=None) -> Future:
        return self.submit(self.get_by_id_and_map, entity_id, mapper, initializer)

    def get_all_and_map_async(self, page, size, order_by, ascending, mapper, initializer=None) -> Future:
        return self.submit(self.get_all_and_map, page, size, order_by, ascending, mapper, initializer)

    def update_and_map_async(self, entity, mapper, initializer=None) -> Future:
        return self.submit(self.update_and_map, entity, mapper, initializer)

    def find_related_entities_async(
        self, related_model, relation_field, entity_id, page, size, order_by=None, ascending=True
    ) -> Future:
        return self.submit(
            self.find_related_entities, related_model, relation_field, entity_id, page, size, order_by, ascending
        )

    def count_related_async(self, join_relation, page=0, size=None, order_by=None, ascending=True) -> Future:
        return self.submit(self.count_related, join_relation, page, size, order_by, ascending)

    def exists_async(self) -> Future:
        return self.submit(self.exists)

    def count_async(self) -> Future:
        return self.submit(self.count)
