import pytest
from prometheus_client import CollectorRegistry

from metricgen.config.env_config import EnvConfig
from metricgen.metrics.facade import install_recorder, reset_recorder_lazy
from metricgen.metrics.prometheus_recorder import PrometheusRecorder
from tests.fixtures import SpyRecorder


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """Fresh config cache and recorder singleton for every test."""
    EnvConfig.clear_cache()
    reset_recorder_lazy()
    yield
    EnvConfig.clear_cache()
    reset_recorder_lazy()


@pytest.fixture
def spy():
    recorder = SpyRecorder()
    install_recorder(recorder)
    return recorder


@pytest.fixture
def registry():
    reg = CollectorRegistry()
    install_recorder(PrometheusRecorder(reg))
    return reg
