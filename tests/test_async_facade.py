"""
Tests for the *_async twins and worker pool management.
"""

import asyncio
from concurrent.futures import Future, ThreadPoolExecutor

import pytest

from tms.core.constants import ErrorKind
from tms.core.exceptions import NotFoundError, QueryError, RepositoryError, ValidationError
from tms.models import Driver, TransportCompany
from tms.repositories import GenericRepository


class TestAsyncTwins:
    """Async twins return what the sync operations return"""

    def test_create_async(self, company_repo):
        future = company_repo.create_async(TransportCompany(name="Async Co"))

        assert isinstance(future, Future)
        company = future.result(timeout=5)
        assert company.id is not None
        assert company_repo.get_by_id(company.id).name == "Async Co"

    def test_get_all_async_matches_sync(self, company_repo, many_companies):
        page = company_repo.get_all_async(1, 4, "name", False).result(timeout=5)

        assert [c.id for c in page] == [c.id for c in company_repo.get_all(1, 4, "name", False)]

    def test_get_by_id_async_with_fetch(self, populated, company_repo):
        company = company_repo.get_by_id_async(populated.alpha.id, "drivers").result(timeout=5)

        assert len(company.drivers) == 2

    def test_find_by_criteria_async(self, populated, driver_repo):
        drivers = driver_repo.find_by_criteria_async({"family_name": "Dimitrov"}).result(timeout=5)

        assert [d.id for d in drivers] == [populated.dimitrov.id]

    def test_find_with_join_async(self, populated, driver_repo):
        drivers = driver_repo.find_with_join_async(
            "qualifications", "name", "Heavy Duty License", "family_name"
        ).result(timeout=5)

        assert [d.family_name for d in drivers] == ["Georgieva", "Petrov"]

    def test_find_with_aggregation_async(self, populated, company_repo):
        companies = company_repo.find_with_aggregation_async(
            "transport_services", "price", "name", False
        ).result(timeout=5)

        assert [c.name for c in companies] == ["Alpha", "Beta", "Gamma"]

    def test_update_and_delete_async(self, company_repo):
        company = company_repo.create(TransportCompany(name="Before"))
        company.name = "After"

        assert company_repo.update_async(company).result(timeout=5).name == "After"
        assert company_repo.delete_async(company).result(timeout=5) is None
        assert company_repo.count_async().result(timeout=5) == 0

    def test_mapping_twins(self, populated, company_repo):
        name = company_repo.get_by_id_and_map_async(populated.beta.id, lambda c: c.name).result(timeout=5)
        names = company_repo.get_all_and_map_async(0, 2, "name", True, lambda c: c.name).result(timeout=5)

        assert name == "Beta"
        assert names == ["Alpha", "Beta"]

    def test_related_twins(self, populated, qualification_repo, company_repo):
        drivers = qualification_repo.find_related_entities_async(
            Driver, "qualifications", populated.passenger.id, 0, 10
        ).result(timeout=5)
        counts = company_repo.count_related_async("vehicles").result(timeout=5)

        assert [d.id for d in drivers] == [populated.georgieva.id]
        assert counts[populated.gamma.id] == 0

    def test_exists_async(self, qualification_repo):
        assert qualification_repo.exists_async().result(timeout=5) is False

    def test_concurrent_creates(self, company_repo):
        futures = [company_repo.create_async(TransportCompany(name=f"Parallel {i}")) for i in range(8)]

        created = [future.result(timeout=10) for future in futures]

        assert len({company.id for company in created}) == 8
        assert company_repo.count() == 8

    def test_wrap_future_for_asyncio(self, populated, company_repo):
        async def fetch():
            return await asyncio.wrap_future(company_repo.get_by_id_async(populated.gamma.id))

        assert asyncio.run(fetch()).name == "Gamma"


class TestAsyncErrors:
    """Errors surface through the future, never on the submitting thread"""

    def test_not_found_through_future(self, company_repo):
        future = company_repo.get_by_id_async(404)

        assert isinstance(future.exception(timeout=5), NotFoundError)
        with pytest.raises(NotFoundError):
            future.result(timeout=5)

    def test_validation_error_through_future(self, company_repo):
        future = company_repo.create_async(None)

        assert isinstance(future.exception(timeout=5), ValidationError)

    def test_query_error_through_future(self, company_repo):
        future = company_repo.get_all_async(0, 5, "no_such_field")

        assert isinstance(future.exception(timeout=5), QueryError)

    def test_shut_down_pool_yields_failed_future(self, provider):
        pool = ThreadPoolExecutor(max_workers=1)
        pool.shutdown()
        repository = GenericRepository(provider, TransportCompany, pool)

        future = repository.count_async()

        error = future.exception(timeout=1)
        assert isinstance(error, RepositoryError)
        assert error.kind == ErrorKind.REPOSITORY
        assert isinstance(error.__cause__, RuntimeError)


class TestPoolOwnership:
    """Repositories only shut down pools they created"""

    def test_owned_pool_created_lazily(self, provider):
        repository = GenericRepository(provider, TransportCompany)

        assert repository._executor is None
        assert repository.count_async().result(timeout=5) == 0
        assert repository._executor is not None
        repository.close()

    def test_context_manager_closes_owned_pool(self, provider):
        with GenericRepository(provider, TransportCompany) as repository:
            repository.count_async().result(timeout=5)

        assert isinstance(repository.count_async().exception(timeout=1), RepositoryError)

    def test_injected_pool_is_left_running(self, provider, executor):
        repository = GenericRepository(provider, TransportCompany, executor)
        repository.close()

        assert executor.submit(lambda: 42).result(timeout=5) == 42

    def test_submit_runs_arbitrary_work(self, company_repo):
        assert company_repo.submit(sum, [1, 2, 3]).result(timeout=5) == 6
