from types import SimpleNamespace
from typing import Any

from svg_ns_normalizer.integration import HostIntegration, exported_helpers, integrate_with_host, default_integration
from svg_ns_normalizer.normalize.namespace import has_issue, normalize


def test_host_ready_creates_utils_namespace() -> None:
    host = SimpleNamespace()
    integration = HostIntegration()
    assert integration.host_ready(host) is True
    assert integration.integrated is True
    assert host.utils.normalize_svg_namespace is normalize
    assert host.utils.has_svg_namespace_issue is has_issue
    for name in exported_helpers():
        assert callable(getattr(host.utils, name))


def test_host_ready_overwrites_existing_helpers() -> None:
    host = SimpleNamespace(utils=SimpleNamespace(normalize_svg_namespace=lambda s: s, other=1))
    HostIntegration().host_ready(host)
    assert host.utils.normalize_svg_namespace is normalize
    assert host.utils.other == 1


def test_mapping_host() -> None:
    host: dict[str, Any] = {}
    HostIntegration().host_ready(host)
    assert set(host["utils"]) == set(exported_helpers())


def test_host_ready_is_once_only() -> None:
    integration = HostIntegration()
    first = SimpleNamespace()
    second = SimpleNamespace()
    assert integration.host_ready(first) is True
    assert integration.host_ready(second) is True
    assert not hasattr(second, "utils")


def test_missing_host_is_not_integrated() -> None:
    integration = HostIntegration()
    assert integration.host_ready(None) is False
    assert integration.integrated is False


def test_on_integrated_callbacks_fire_once() -> None:
    integration = HostIntegration()
    seen: list[Any] = []
    integration.on_integrated(seen.append)

    host = SimpleNamespace()
    integration.host_ready(host)
    integration.host_ready(host)
    assert seen == [host]

    integration.on_integrated(seen.append)
    assert seen == [host, host]


def test_reset_allows_reintegration() -> None:
    integration = HostIntegration()
    integration.host_ready(SimpleNamespace())
    integration.reset()
    assert integration.integrated is False

    host = SimpleNamespace()
    assert integration.host_ready(host) is True
    assert host.utils.normalize_svg_namespace is normalize


def test_module_level_integration() -> None:
    default_integration.reset()
    host = SimpleNamespace()
    try:
        assert integrate_with_host(host) is True
        assert host.utils.fetch_and_normalize_svg is not None
    finally:
        default_integration.reset()
