"""
Transport company service.

Company-level reports built on the generic repositories:
- Companies ranked by revenue (sum of their services' prices)
- Drivers, vehicles and clients of one company
- Drivers holding a qualification
- Services driven per driver

Every repository here shares one worker pool, so the async twins of all
of them are bounded together.
"""

from concurrent.futures import Executor
from decimal import Decimal
from typing import Any, Dict, List, Optional

from tms.config import settings
from tms.database.session import SessionProvider
from tms.models import Client, Driver, Qualification, TransportCompany, TransportService, Vehicle
from tms.repositories import GenericRepository, make_worker_pool
from tms.repositories.generic import require_argument


class TransportCompanyService:
    """
    Reporting queries over companies and what belongs to them.

    Example:
        with TransportCompanyService(provider) as service:
            for company in service.companies_by_revenue():
                print(company.name, service.total_revenue(company.id))

    Raises:
        ValidationError: provider is None
    """

    def __init__(self, provider: SessionProvider, executor: Optional[Executor] = None):
        require_argument(provider, "provider", "TransportCompanyService")
        self._owns_executor = executor is None
        self.executor = executor or make_worker_pool(name="tms-company-service")

        self.companies = GenericRepository(provider, TransportCompany, self.executor)
        self.drivers = GenericRepository(provider, Driver, self.executor)
        self.vehicles = GenericRepository(provider, Vehicle, self.executor)
        self.clients = GenericRepository(provider, Client, self.executor)
        self.qualifications = GenericRepository(provider, Qualification, self.executor)
        self.services = GenericRepository(provider, TransportService, self.executor)

    def close(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ========================================
    # Revenue
    # ========================================

    def companies_by_revenue(self, ascending: bool = False) -> List[TransportCompany]:
        """
        All companies ordered by total service price.

        Companies without services count as the lowest revenue; name breaks
        ties in the same direction.
        """
        return self.companies.find_with_aggregation("transport_services", "price", "name", ascending, "sum")

    def total_revenue(self, company_id: int) -> Decimal:
        """Sum of the prices of every service sold by the company."""
        return self.companies.get_by_id_and_map(
            company_id,
            lambda company: sum((service.price for service in company.transport_services), Decimal("0")),
        )

    def company_summary(self, company_id: int) -> Dict[str, Any]:
        """Company columns plus headcounts, read in one session."""

        def summarize(company: TransportCompany) -> Dict[str, Any]:
            summary = company.to_dict()
            summary["driver_count"] = len(company.drivers)
            summary["vehicle_count"] = len(company.vehicles)
            summary["service_count"] = len(company.transport_services)
            return summary

        return self.companies.get_by_id_and_map(company_id, summarize)

    # ========================================
    # Company Members
    # ========================================

    def drivers_of_company(self, company_id: int) -> List[Driver]:
        """Drivers employed by the company, qualifications loaded."""
        return self.drivers.find_by_criteria(
            {"transport_company.id": company_id}, "family_name", True, "qualifications"
        )

    def vehicles_of_company(self, company_id: int) -> List[Vehicle]:
        """Vehicles owned by the company, by registration plate."""
        return self.vehicles.find_with_join("transport_company", "id", company_id, "registration_plate")

    def clients_of_company(self, company_id: int) -> List[Client]:
        """Clients that bought at least one service from the company."""
        return self.clients.find_with_join("transport_services", "transport_company_id", company_id, "name")

    def drivers_with_qualification(self, qualification_name: str) -> List[Driver]:
        """Drivers holding the named qualification, all their qualifications loaded."""
        return self.drivers.find_with_join(
            "qualifications", "name", qualification_name, "family_name", True, True
        )

    def holders_of_qualification(self, qualification_id: int, page: int = 0, size: Optional[int] = None) -> List[Driver]:
        """Page of drivers holding the qualification, by family name."""
        return self.qualifications.find_related_entities(
            Driver, "qualifications", qualification_id, page, size or settings.default_page_size, "family_name"
        )

    # ========================================
    # Workload
    # ========================================

    def driver_service_counts(self, page: int = 0, size: Optional[int] = None) -> Dict[int, int]:
        """Driver id -> services driven, busiest first."""
        return self.drivers.count_related("transport_services", page, size, "count", False)

    def unpaid_services(self, company_id: int) -> List[TransportService]:
        """Services of the company not yet paid, oldest first, clients loaded."""
        return self.services.find_by_criteria(
            {"transport_company_id": company_id, "is_paid": False}, "starting_date", True, "client"
        )
