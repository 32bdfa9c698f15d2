"""
Generic Seeder
==============

Loads initial rows for one entity type from a JSON array, exactly once:
if the table already holds any row, seeding is skipped without touching
the source.

Usage:
    seeder = GenericSeeder(GenericRepository(provider, Qualification), "qualifications.json")
    inserted = seeder.seed()

The source is looked up as a filesystem path first. A bare file name
(no directory parts) that is not on disk is then looked up as a packaged
resource under ``tms/seeding/data/``.
"""

import json
from concurrent.futures import Future
from importlib import resources
from pathlib import Path
from typing import Any, List, Optional, Type

import structlog

from tms.core.constants import SEED_RESOURCE_DIR, SEED_RESOURCE_PACKAGE, RepositoryMessage
from tms.core.exceptions import SeedError
from tms.repositories.generic import GenericRepository, require_argument
from tms.schemas import EntitySchema, schema_for, validate_record

logger = structlog.get_logger(__name__)


class GenericSeeder:
    """
    Idempotent bulk loader for one repository.

    Args:
        repository: Repository of the entity type to seed
        source: JSON file path, or the name of a packaged seed file
        schema: Validation schema for each record. Defaults to the schema
            registered for the repository's model.

    Raises:
        ValidationError: repository or source is None
    """

    def __init__(
        self,
        repository: GenericRepository,
        source: str,
        schema: Optional[Type[EntitySchema]] = None,
    ):
        require_argument(repository, "repository", "GenericSeeder")
        require_argument(source, "source", "GenericSeeder")
        self.repository = repository
        self.source = str(source)
        self.schema = schema or schema_for(repository.model)

    @property
    def entity_name(self) -> str:
        return self.repository.descriptor.name

    def seed(self) -> int:
        """
        Insert every valid record when the table is empty.

        Returns:
            Number of inserted rows (0 when the table was already populated)

        Raises:
            SeedError: source missing or not a JSON array
            TransactionError: an insert failed
        """
        if self.repository.exists():
            logger.info("seed.skipped", entity=self.entity_name, reason="table not empty")
            return 0

        records = self.load_records()
        inserted = 0
        for index, record in enumerate(records):
            data, violations = validate_record(self.schema, record)
            if violations:
                logger.warning(
                    "seed.record_skipped",
                    entity=self.entity_name,
                    source=self.source,
                    index=index,
                    violations=violations,
                )
                continue
            self.repository.create(self.repository.model(**data))
            inserted += 1

        logger.info("seed.completed", entity=self.entity_name, source=self.source, inserted=inserted)
        return inserted

    def seed_async(self) -> Future:
        """Run ``seed`` on the repository's worker pool; the future yields the count."""
        return self.repository.submit(self.seed)

    # ========================================
    # Source Loading
    # ========================================

    def load_records(self) -> List[Any]:
        """Read and parse the source into a list of raw records."""
        text = self._read_source()
        try:
            records = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SeedError(
                RepositoryMessage.SEED_SOURCE_UNREADABLE.format(source=self.source, reason=exc),
                source=self.source,
                cause=exc,
            ) from exc

        if not isinstance(records, list):
            raise SeedError(
                RepositoryMessage.SEED_SOURCE_UNREADABLE.format(
                    source=self.source, reason="top-level value is not an array"
                ),
                source=self.source,
            )
        return records

    def _read_source(self) -> str:
        path = Path(self.source)
        try:
            if path.is_file():
                return path.read_text(encoding="utf-8")

            if path.name == self.source:
                resource = resources.files(SEED_RESOURCE_PACKAGE).joinpath(SEED_RESOURCE_DIR).joinpath(path.name)
                if resource.is_file():
                    return resource.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SeedError(
                RepositoryMessage.SEED_SOURCE_UNREADABLE.format(source=self.source, reason=exc),
                source=self.source,
                cause=exc,
            ) from exc

        logger.error("seed.source_missing", entity=self.entity_name, source=self.source)
        raise SeedError(
            RepositoryMessage.SEED_SOURCE_NOT_FOUND.format(source=self.source),
            source=self.source,
        )
