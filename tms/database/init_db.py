"""
Database initialization and seeding.

This script:
- Creates all database tables
- Seeds qualifications, transport companies and clients from the
  packaged JSON files (each only when its table is empty)
- Can reset the database (drop and recreate)

Usage:
    # Initialize with seed data
    tms-init-db

    # Reset database (drops all tables and recreates)
    tms-init-db --reset

    # Tables only
    tms-init-db --skip-seed
"""

import argparse
from typing import Dict, Optional

import structlog

from tms.core.logging_config import configure_logging
from tms.database.session import SessionProvider, create_all_tables, drop_all_tables
from tms.models import Client, Driver, Qualification, TransportCompany, TransportService, Vehicle
from tms.repositories import GenericRepository
from tms.seeding import GenericSeeder

logger = structlog.get_logger(__name__)


SEED_PLAN = (
    (Qualification, "qualifications.json"),
    (TransportCompany, "companies.json"),
    (Client, "clients.json"),
)

STATUS_MODELS = (TransportCompany, Client, Qualification, Driver, Vehicle, TransportService)


def create_tables(provider: SessionProvider, reset: bool = False) -> None:
    """
    Create all database tables.

    Args:
        provider: Session provider bound to the target database
        reset: If True, drop existing tables first
    """
    if reset:
        print("🗑️  Dropping existing tables...")
        drop_all_tables(provider.engine)
        print("✅ Tables dropped")

    print("📊 Creating database tables...")
    create_all_tables(provider.engine)
    print("✅ Tables created")


def seed_initial_data(provider: SessionProvider) -> Dict[str, int]:
    """
    Seed every entity in SEED_PLAN.

    Returns:
        Entity name -> number of inserted rows
    """
    print("\n🌱 Seeding initial data...")
    inserted = {}
    for model, source in SEED_PLAN:
        with GenericRepository(provider, model) as repository:
            count = GenericSeeder(repository, source).seed()
        inserted[model.__name__] = count
        if count:
            print(f"  ✅ {model.__name__}: {count} inserted from {source}")
        else:
            print(f"  ⏭️  {model.__name__}: already seeded (skipping)")
    print("✅ Seeding complete")
    return inserted


def print_database_status(provider: SessionProvider) -> None:
    """Print current row counts per table."""
    print("\n" + "=" * 60)
    print("📊 Database Status")
    print("=" * 60)

    for model in STATUS_MODELS:
        with GenericRepository(provider, model) as repository:
            print(f"  {model.__name__ + ':':<18}{repository.count()}")

    print("=" * 60)


def initialize_database(
    reset: bool = False,
    skip_seed: bool = False,
    database_url: Optional[str] = None,
) -> None:
    """
    Initialize the database.

    Args:
        reset: Drop existing tables before creating
        skip_seed: Create tables only
        database_url: Target database. Defaults to settings.database_url.
    """
    print("=" * 60)
    print("🗄️  Database Initialization")
    print("=" * 60)

    provider = SessionProvider.from_url(database_url)
    try:
        create_tables(provider, reset=reset)
        if not skip_seed:
            seed_initial_data(provider)
        print_database_status(provider)
    finally:
        provider.dispose()

    logger.info("database.initialized", reset=reset, seeded=not skip_seed)
    print("\n✅ Database initialization complete!")


def main():
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Initialize and seed the transport management database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create tables and seed initial data
  tms-init-db

  # Reset database (drop all tables and recreate)
  tms-init-db --reset

  # Create tables without seeding
  tms-init-db --skip-seed

  # Target another database
  tms-init-db --database-url sqlite:///./data/other.db
        """
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop existing tables before creating (WARNING: deletes all data!)"
    )

    parser.add_argument(
        "--skip-seed",
        action="store_true",
        help="Create tables without loading the seed data"
    )

    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (defaults to DATABASE_URL / settings)"
    )

    args = parser.parse_args()
    configure_logging()

    # Confirm reset if requested
    if args.reset:
        print("⚠️  WARNING: This will DELETE ALL DATA in the database!")
        response = input("Are you sure? Type 'yes' to continue: ")
        if response.lower() != 'yes':
            print("❌ Aborted")
            return

    initialize_database(reset=args.reset, skip_seed=args.skip_seed, database_url=args.database_url)


if __name__ == "__main__":
    main()
