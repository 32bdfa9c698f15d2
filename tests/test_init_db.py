"""
Tests for database initialization and seeding
"""

from tms.database import SessionProvider
from tms.database.init_db import initialize_database, main
from tms.models import Client, Qualification, TransportCompany
from tms.repositories import GenericRepository


def counts(url):
    provider = SessionProvider.from_url(url, echo=False)
    try:
        return {
            model.__name__: GenericRepository(provider, model).count()
            for model in (TransportCompany, Qualification, Client)
        }
    finally:
        provider.dispose()


class TestInitializeDatabase:
    """Test initialize_database()"""

    def test_creates_and_seeds(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'init.db'}"

        initialize_database(database_url=url)

        assert all(count > 0 for count in counts(url).values())

    def test_is_idempotent(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'init.db'}"
        initialize_database(database_url=url)
        first = counts(url)

        initialize_database(database_url=url)

        assert counts(url) == first

    def test_skip_seed(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'init.db'}"

        initialize_database(skip_seed=True, database_url=url)

        assert set(counts(url).values()) == {0}

    def test_reset_drops_data(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'init.db'}"
        initialize_database(database_url=url)

        initialize_database(reset=True, skip_seed=True, database_url=url)

        assert set(counts(url).values()) == {0}


class TestMain:
    """Test the CLI entry point"""

    def test_reset_aborts_without_confirmation(self, tmp_path, monkeypatch, capsys):
        url = f"sqlite:///{tmp_path / 'cli.db'}"
        monkeypatch.setattr("sys.argv", ["tms-init-db", "--reset", "--database-url", url])
        monkeypatch.setattr("builtins.input", lambda prompt: "no")

        main()

        assert "Aborted" in capsys.readouterr().out
        assert not (tmp_path / "cli.db").exists()

    def test_skip_seed_from_cli(self, tmp_path, monkeypatch):
        url = f"sqlite:///{tmp_path / 'cli.db'}"
        monkeypatch.setattr("sys.argv", ["tms-init-db", "--skip-seed", "--database-url", url])

        main()

        assert set(counts(url).values()) == {0}
