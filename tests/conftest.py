import os
import tempfile

import pytest

# point the app at throwaway storage before anything imports db/settings
_TMP = tempfile.mkdtemp(prefix="question-bank-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP, "test.db")
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["BACKUP_DIR"] = os.path.join(_TMP, "backups")

import models  # noqa: E402,F401
from db import Base, engine  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield
