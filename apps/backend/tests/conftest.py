from __future__ import annotations

import os
import tempfile
from typing import Generator, Any

import pytest
from sqlalchemy.orm import sessionmaker

from finledger.core.database import Base, get_db, make_engine
from finledger.main import app
from finledger.seed import seed_user


@pytest.fixture(scope="session")
def test_db_url() -> Generator[str, Any, Any]:
    # temporary SQLite file so the developer database is never touched
    fd, path = tempfile.mkstemp(prefix="finledger_test_", suffix=".sqlite3")
    os.close(fd)
    url = f"sqlite:///{path}"
    yield url
    try:
        os.remove(path)
    except OSError:
        pass


@pytest.fixture(scope="session")
def _db_engine(test_db_url: str):
    eng = make_engine(test_db_url, wal=False)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture(scope="session")
def engine(_db_engine):
    return _db_engine


@pytest.fixture(scope="function")
def db_session(_db_engine) -> Generator[Any, Any, Any]:
    # depends on _db_engine so a test-local ``engine`` fixture cannot shadow the database
    engine = _db_engine
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()
    # every test starts from the demo user (id 1) and its default categories
    seed_user(session)
    session.commit()

    try:
        yield session
    finally:
        session.close()
        with engine.connect() as conn:
            if engine.dialect.name == "sqlite":
                conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
            for tbl in reversed(Base.metadata.sorted_tables):
                conn.execute(tbl.delete())
            conn.commit()
            # PRAGMA foreign_keys is a no-op inside a transaction, so re-enable after commit
            if engine.dialect.name == "sqlite":
                conn.exec_driver_sql("PRAGMA foreign_keys=ON")
                conn.commit()


@pytest.fixture()
def demo_user(db_session):
    from finledger import models

    return db_session.query(models.User).filter_by(email="demo@example.com").one()


@pytest.fixture(autouse=True)
def override_dependency(db_session):
    # FastAPI DI override
    def _get_db_override():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c
