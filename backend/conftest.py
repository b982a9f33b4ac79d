"""
Pytest configuration file for backend testing.
"""
import sys
from pathlib import Path

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Register the maintenance models with SQLAlchemy before any test builds tables
from modules.maintenance import models  # noqa: E402,F401
