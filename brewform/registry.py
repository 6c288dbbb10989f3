"""
Delegate serializer registry.

The form codec resolves '+suffix' formats through a CodecRegistry. A
process-wide registry is created on first use (once, under a lock) and can
be replaced with set_codec_registry().
"""

from __future__ import annotations

import logging
import threading

from brewform.delegates import DelegateSerializer, JsonDelegate, YamlDelegate
from brewform.exceptions import DelegateResolutionError

__all__ = [
    'CodecRegistry',
    'default_registry',
    'get_codec_registry',
    'set_codec_registry',
]

logger = logging.getLogger(__name__)


class CodecRegistry:
    """Delegate serializers keyed by MIME type (e.g. 'application/json')."""

    def __init__(self) -> None:
        self._delegates: dict[str, DelegateSerializer] = {}
        self._lock = threading.Lock()

    def register(self, mime_type: str, delegate: DelegateSerializer) -> None:
        """
        Register (or replace) the delegate for a MIME type.

        Raises:
            TypeError: If delegate does not implement DelegateSerializer
        """
        if not isinstance(delegate, DelegateSerializer):
            raise TypeError(f'{type(delegate).__name__} does not implement marshal()')
        with self._lock:
            self._delegates[mime_type] = delegate

    def resolve(self, mime_type: str) -> DelegateSerializer:
        """
        Delegate registered for a MIME type.

        Raises:
            DelegateResolutionError: If nothing is registered for mime_type
        """
        with self._lock:
            delegate = self._delegates.get(mime_type)
            if delegate is None:
                raise DelegateResolutionError(mime_type, sorted(self._delegates))
        return delegate

    def mime_types(self) -> list[str]:
        with self._lock:
            return list(self._delegates)


def default_registry() -> CodecRegistry:
    """Registry with the JSON and YAML delegates."""
    registry = CodecRegistry()
    registry.register(JsonDelegate.mime_type, JsonDelegate())
    registry.register(YamlDelegate.mime_type, YamlDelegate())
    return registry


_registry: CodecRegistry | None = None
_registry_lock = threading.Lock()


def get_codec_registry() -> CodecRegistry:
    """Process-wide registry, created on first call."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                logger.debug('Initializing default codec registry')
                _registry = default_registry()
    return _registry


def set_codec_registry(registry: CodecRegistry | None) -> None:
    """Replace the process-wide registry (None restores lazy default creation)."""
    global _registry
    with _registry_lock:
        _registry = registry
