"""Publish the normalizer helpers into a host application's utility namespace.

The host announces itself with `host_ready(host)` once it has finished
loading; there is no polling. Code that needs to run after integration
subscribes with `on_integrated`.
"""

from __future__ import annotations

import logging
from threading import Lock
from types import SimpleNamespace
from typing import Any, Callable, Final, MutableMapping

from svg_ns_normalizer import loaders
from svg_ns_normalizer.normalize.namespace import has_issue, normalize

__version__: Final[str] = "1.3.0"

UTILS_ATTR: Final[str] = "utils"


def exported_helpers() -> dict[str, Callable[..., Any]]:
    """Names under which the helpers appear in the host namespace."""
    return {
        "normalize_svg_namespace": normalize,
        "has_svg_namespace_issue": has_issue,
        "fetch_and_normalize_svg": loaders.fetch_and_normalize,
        "svg_to_normalized_data_url": loaders.to_data_url,
        "svg_to_normalized_blob_url": loaders.to_blob_url,
        "load_and_normalize_svg": loaders.load_and_normalize,
        "normalize_svg_element": loaders.normalize_element,
    }


def _host_utils(host: Any) -> Any:
    if isinstance(host, MutableMapping):
        utils = host.get(UTILS_ATTR)
        if utils is None:
            utils = host[UTILS_ATTR] = {}
        return utils
    utils = getattr(host, UTILS_ATTR, None)
    if utils is None:
        utils = SimpleNamespace()
        setattr(host, UTILS_ATTR, utils)
    return utils


def _publish(utils: Any, name: str, fn: Callable[..., Any]) -> None:
    if isinstance(utils, MutableMapping):
        utils[name] = fn
    else:
        setattr(utils, name, fn)


class HostIntegration:
    """Once-only integration with a host application."""

    def __init__(self) -> None:
        self._log = logging.getLogger("svg_ns_normalizer.integration")
        self._lock = Lock()
        self._host: Any = None
        self._integrated = False
        self._callbacks: list[Callable[[Any], None]] = []

    @property
    def integrated(self) -> bool:
        with self._lock:
            return self._integrated

    def host_ready(self, host: Any) -> bool:
        """Install the helpers on `host.utils`; existing entries are overwritten.

        Returns False for a missing host, True otherwise. Calls after the
        first successful one do nothing.
        """
        if host is None:
            return False
        with self._lock:
            if self._integrated:
                return True
            utils = _host_utils(host)
            for name, fn in exported_helpers().items():
                _publish(utils, name, fn)
            self._host = host
            self._integrated = True
            callbacks, self._callbacks = self._callbacks, []

        self._log.info("host_integrated version=%s helpers=%d", __version__, len(exported_helpers()))
        for cb in callbacks:
            cb(host)
        return True

    def on_integrated(self, callback: Callable[[Any], None]) -> None:
        """Run `callback(host)` once integration happens, or now if it already has."""
        with self._lock:
            if not self._integrated:
                self._callbacks.append(callback)
                return
            host = self._host
        callback(host)

    def reset(self) -> None:
        """Forget the current host so a later `host_ready` integrates again."""
        with self._lock:
            self._host = None
            self._integrated = False
            self._callbacks = []
        self._log.info("host_integration_reset")


default_integration = HostIntegration()


def integrate_with_host(host: Any) -> bool:
    return default_integration.host_ready(host)
