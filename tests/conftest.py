import os
import sys
from pathlib import Path
import pytest

# Ensure project root is on sys.path so tests can import 'plateworks' package
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Point settings at a throwaway sqlite file before anything imports the engine
os.environ["DATABASE_URL"] = "sqlite:///./test_plateworks.db"

from plateworks.db import Base, engine, SessionLocal
from plateworks import crud
from plateworks.core.templates import ensure_builtin_templates


@pytest.fixture(autouse=True)
def reset_db():
    # Drop all and re-create so the test DB matches the current models exactly
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        ensure_builtin_templates(session)
        crud.get_or_create_ledger(session)
        session.commit()
    finally:
        session.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
