import pytest

from schedsim.workload_io import DEFAULT_WORKLOAD


@pytest.fixture
def demo_procs():
    return list(DEFAULT_WORKLOAD)
