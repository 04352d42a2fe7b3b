"""Bootstrap (composition root) for PVTRACK.

Assembles the application at runtime: picks a key-value store adapter from a
store URL, builds the service-layer components on top of it, wires them into
command handlers and the message bus, and exposes the query facade.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain).
- This package may import: `pvtrack.adapters`, `pvtrack.service_layer`,
  `pvtrack.interfaces`, `pvtrack.domain`, and `pvtrack.config`.
- Inner layers must not import `pvtrack.bootstrap`.

Public surface:
- Re-export composition factories from this module; keep wiring helpers internal.
- No business rules live here; this is assembly and lifecycle only.
"""

from .bootstrap import AppContainer, UnsupportedStoreUrlError, bootstrap, build_store

__all__ = ["AppContainer", "UnsupportedStoreUrlError", "bootstrap", "build_store"]
