import pytest

from sasclient.monitoring import get_registry


def test_registry_is_shared():
    assert get_registry() is get_registry()


def test_observations_are_counted():
    registry = get_registry()
    if not registry.enabled:
        pytest.skip("prometheus_client not installed")
    from prometheus_client import REGISTRY

    before = REGISTRY.get_sample_value("sas_transactions_total", {"outcome": "confirmed"}) or 0
    registry.observe_submission("confirmed")
    registry.observe_rpc_error("getBlockHeight", "network")
    registry.observe_confirmation(0.25)
    assert REGISTRY.get_sample_value("sas_transactions_total", {"outcome": "confirmed"}) == before + 1
    assert REGISTRY.get_sample_value("sas_rpc_errors_total", {"method": "getBlockHeight", "kind": "network"}) >= 1
