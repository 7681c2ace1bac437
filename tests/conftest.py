import os
import sys

import pytest

# Ensure project root is on sys.path before imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from roi_model.config.models import BusinessParameters  # noqa: E402
from roi_model.engine import compute  # noqa: E402
from roi_model.logging_config import reset_logging  # noqa: E402


# Define pytest markers for test categories
def pytest_configure(config):
    """
    Register custom markers to avoid pytest warnings.
    """
    config.addinivalue_line("markers", "unit: mark a test as a unit test")
    config.addinivalue_line("markers", "integration: mark a test as an integration test")
    config.addinivalue_line("markers", "config: mark a test as a config test")


@pytest.fixture
def default_params():
    # calculator defaults: 3 inspectors at 25M, 30억 revenue, 2 units with new optics
    return BusinessParameters(
        personnel_count=3,
        salary=25_000_000,
        revenue=3_000_000_000,
        ai_units=2,
        use_optics=True,
        misdetect_reduction=0.8,
        quality_defect_reduction=0.9,
        target_ai_personnel=1,
    )


@pytest.fixture
def default_result(default_params):
    return compute(default_params)


@pytest.fixture
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def no_saving_params(default_params):
    # more inspectors after adoption and no quality gains: every year costs more
    return default_params.model_copy(
        update={"target_ai_personnel": 10, "misdetect_reduction": 0.0, "quality_defect_reduction": 0.0}
    )
