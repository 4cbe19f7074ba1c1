"""Cached normalization service shared by the clipboard watcher and the CLI."""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, replace
from threading import Lock

from svg_ns_normalizer.config import AppConfig
from svg_ns_normalizer.normalize.cache import LruCache
from svg_ns_normalizer.normalize.namespace import normalize


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of one normalization. `elapsed_ms` is 0.0 for cache hits."""

    svg_hash: str
    text: str
    changed: bool
    elapsed_ms: float


def svg_hash(svg_text: str) -> str:
    return hashlib.sha256(svg_text.encode("utf-8", errors="surrogatepass")).hexdigest()


class SvgNormalizer:
    """Thread-safe normalizer with an optional result cache."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._log = logging.getLogger("svg_ns_normalizer.normalizer")
        self._cfg_lock = Lock()
        self._cfg = replace(config) if config is not None else AppConfig()

        self._cache_lock = Lock()
        self._cache: LruCache[str, str] | None = None
        self._rebuild_cache()

    def set_config(self, config: AppConfig) -> None:
        with self._cfg_lock:
            self._cfg = replace(config)
        self._rebuild_cache()

    def _rebuild_cache(self) -> None:
        with self._cfg_lock:
            enabled = bool(self._cfg.cache_enabled)
            max_items = int(self._cfg.cache_max_items)
        with self._cache_lock:
            self._cache = LruCache(max_items) if enabled else None

    def normalize(self, svg_text: str) -> NormalizationResult:
        digest = svg_hash(svg_text)

        with self._cfg_lock:
            strip = bool(self._cfg.strip_foreign_prefixes)
        cache_key = f"{digest}:strip={int(strip)}"

        with self._cache_lock:
            cache = self._cache
        if cache is not None:
            hit = cache.get(cache_key)
            if hit is not None:
                return NormalizationResult(svg_hash=digest, text=hit, changed=hit != svg_text, elapsed_ms=0.0)

        t0 = time.perf_counter()
        out = normalize(svg_text, strip_foreign_prefixes=strip)
        dt_ms = (time.perf_counter() - t0) * 1000.0

        if cache is not None:
            cache.put(cache_key, out)

        changed = out != svg_text
        self._log.info(
            "normalized svg_hash=%s ms=%.1f chars=%d changed=%s strip=%s",
            digest[:10],
            dt_ms,
            len(svg_text),
            changed,
            strip,
        )
        return NormalizationResult(svg_hash=digest, text=out, changed=changed, elapsed_ms=dt_ms)
