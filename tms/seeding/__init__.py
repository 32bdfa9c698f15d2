"""Idempotent JSON seeding of initial data."""

from tms.seeding.seeder import GenericSeeder

__all__ = ["GenericSeeder"]
