import os
import random
import tempfile
from pathlib import Path

import pytest

# Point the app at a throwaway SQLite file before db.py is imported.
_TMP = Path(tempfile.mkdtemp(prefix="drills-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'drills.db'}"
os.environ.pop("DRILLS_CONFIG_PATH", None)

import models  # noqa: E402,F401
from db import Base, SessionLocal, engine  # noqa: E402
from store import reset_progress  # noqa: E402

Base.metadata.create_all(engine)


@pytest.fixture(autouse=True)
def _clean_db():
    with SessionLocal() as db:
        reset_progress(db)
    yield


@pytest.fixture
def rng():
    return random.Random(20240607)
