#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import io

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from dbgprint import shapes
from dbgprint.emission import configure


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def plain_output():
    """Uncolored, enabled output to sys.stderr for every test, restored from the environment afterwards."""
    configure(color=False, stream=None, enabled=True)
    yield
    configure(reset=True)


@pytest.fixture(autouse=True)
def clean_registry():
    """Undo register_shape() calls made by a test."""
    saved = dict(shapes._SHAPE_REGISTRY)
    yield
    shapes._SHAPE_REGISTRY.clear()
    shapes._SHAPE_REGISTRY.update(saved)


@pytest.fixture
def stream() -> io.StringIO:
    """In-memory diagnostic stream installed as the debug output."""
    buffer = io.StringIO()
    configure(stream=buffer)
    return buffer
