import pytest

from zframework.config import SieveConfig
from zframework.primes import ReferenceSieve


@pytest.fixture(scope="session")
def oracle():
    return ReferenceSieve(200_000)


@pytest.fixture
def config():
    return SieveConfig.default()


@pytest.fixture
def lossy_config():
    """Parameters strong enough for the density filter to drop the prime 5."""
    with pytest.warns(UserWarning, match="prime 5"):
        return SieveConfig(curvature_k=1.0, density_boost=1000.0)
