"""
Repositories
============

Generic persistence operations for every mapped entity.
"""

from tms.repositories.asynchronous import AsyncRepositoryMixin, make_worker_pool
from tms.repositories.descriptor import EntityDescriptor
from tms.repositories.generic import GenericRepository
from tms.repositories.queries import AggregationSpec, JoinSpec, Pagination

__all__ = [
    "GenericRepository",
    "AsyncRepositoryMixin",
    "make_worker_pool",
    "EntityDescriptor",
    "Pagination",
    "JoinSpec",
    "AggregationSpec",
]
