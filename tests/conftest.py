import pytest, os, sys, tempfile

# Ensure the package is importable from a source checkout
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Point the record store at a throwaway database before the app is imported
_DB_PATH = os.path.join(tempfile.mkdtemp(prefix="aegis-test-"), "aegis.db")
os.environ["DATABASE_URL"] = "sqlite:///" + _DB_PATH  # absolute path -> sqlite:////tmp/...

# Initialize app at module load time
from aegis.main import app, _startup
from aegis.db import init_db, reset_db

init_db()
_startup()

# Reset database before each test for isolation
@pytest.fixture(autouse=True)
def _reset_db():
    reset_db()
    yield
