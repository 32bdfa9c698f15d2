"""
Test configuration and fixtures
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from tms.database import SessionProvider, create_all_tables
from tms.models import Client, Driver, Qualification, TransportCompany, TransportService, Vehicle
from tms.repositories import GenericRepository


@pytest.fixture(scope="function")
def provider(tmp_path):
    """Fresh file-backed SQLite database for each test"""
    provider = SessionProvider.from_url(f"sqlite:///{tmp_path / 'tms.db'}", echo=False)
    create_all_tables(provider.engine)
    yield provider
    provider.dispose()


@pytest.fixture(scope="function")
def executor():
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="tms-test")
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def company_repo(provider, executor):
    return GenericRepository(provider, TransportCompany, executor)


@pytest.fixture
def driver_repo(provider, executor):
    return GenericRepository(provider, Driver, executor)


@pytest.fixture
def qualification_repo(provider, executor):
    return GenericRepository(provider, Qualification, executor)


@pytest.fixture
def vehicle_repo(provider, executor):
    return GenericRepository(provider, Vehicle, executor)


@pytest.fixture
def client_repo(provider, executor):
    return GenericRepository(provider, Client, executor)


@pytest.fixture
def service_repo(provider, executor):
    return GenericRepository(provider, TransportService, executor)


@pytest.fixture
def populated(company_repo, driver_repo, qualification_repo, vehicle_repo, client_repo, service_repo):
    """
    Small transport network:

    Alpha: drivers Petrov (HDL) and Georgieva (HDL, PT), one truck,
           services priced 1000 (paid) and 2000 (unpaid), both driven by Petrov
    Beta:  driver Dimitrov (no qualifications), one bus, a 500 service
    Gamma: nothing, no address
    """
    alpha = company_repo.create(TransportCompany(name="Alpha", address="1 Vitosha Blvd, Sofia"))
    beta = company_repo.create(TransportCompany(name="Beta", address="7 Main St, Plovdiv"))
    gamma = company_repo.create(TransportCompany(name="Gamma"))

    heavy = qualification_repo.create(
        Qualification(name="Heavy Duty License", description="Trucks over 3.5 tonnes")
    )
    passenger = qualification_repo.create(
        Qualification(name="Passenger Transport", description="Buses carrying passengers")
    )

    petrov = driver_repo.create(
        Driver(
            first_name="Ivan",
            family_name="Petrov",
            salary=Decimal("2500.00"),
            transport_company_id=alpha.id,
            qualifications=[heavy],
        )
    )
    georgieva = driver_repo.create(
        Driver(
            first_name="Maria",
            family_name="Georgieva",
            salary=Decimal("2700.00"),
            transport_company_id=alpha.id,
            qualifications=[heavy, passenger],
        )
    )
    dimitrov = driver_repo.create(
        Driver(first_name="Georgi", family_name="Dimitrov", transport_company_id=beta.id)
    )

    truck = vehicle_repo.create(
        Vehicle(registration_plate="CA1234AB", vehicle_type="truck", transport_company_id=alpha.id)
    )
    bus = vehicle_repo.create(
        Vehicle(registration_plate="PB5678CD", vehicle_type="bus", colour="white", transport_company_id=beta.id)
    )

    market = client_repo.create(Client(name="Fresh Market", telephone="+359888123456", email="orders@market.bg"))
    tours = client_repo.create(Client(name="Rila Tours", telephone="+359877654321", email="booking@rila.bg"))
    idle = client_repo.create(Client(name="Idle Ltd", telephone="+359896112233", email="office@idle.bg"))

    services = [
        service_repo.create(
            TransportService(
                transport_company_id=alpha.id,
                client_id=market.id,
                driver_id=petrov.id,
                vehicle_id=truck.id,
                starting_location="Sofia",
                ending_location="Varna",
                starting_date=date(2024, 3, 1),
                ending_date=date(2024, 3, 2),
                price=Decimal("1000.00"),
                is_paid=True,
            )
        ),
        service_repo.create(
            TransportService(
                transport_company_id=alpha.id,
                client_id=tours.id,
                driver_id=petrov.id,
                vehicle_id=truck.id,
                starting_location="Sofia",
                ending_location="Burgas",
                starting_date=date(2024, 3, 5),
                price=Decimal("2000.00"),
            )
        ),
        service_repo.create(
            TransportService(
                transport_company_id=beta.id,
                client_id=market.id,
                driver_id=dimitrov.id,
                vehicle_id=bus.id,
                starting_location="Plovdiv",
                ending_location="Ruse",
                starting_date=date(2024, 4, 10),
                price=Decimal("500.00"),
                is_delivered=True,
            )
        ),
    ]

    return SimpleNamespace(
        alpha=alpha,
        beta=beta,
        gamma=gamma,
        heavy=heavy,
        passenger=passenger,
        petrov=petrov,
        georgieva=georgieva,
        dimitrov=dimitrov,
        truck=truck,
        bus=bus,
        market=market,
        tours=tours,
        idle=idle,
        services=services,
    )


@pytest.fixture
def many_companies(company_repo):
    """Ten companies named Company 00 .. Company 09"""
    return [
        company_repo.create(TransportCompany(name=f"Company {index:02d}", address=f"{index} Test St"))
        for index in range(10)
    ]
