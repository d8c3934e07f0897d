"""Catalog-bound dispatch.

The dev node only serves methods the terminal client knows about, so
handlers are bound to entries of ``rpcscope.methods.DEFAULT_REGISTRY``.
Binding a name outside the catalog fails at import time, and calls are
checked against the catalog's positional arity before a handler runs.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from rpcscope.methods import DEFAULT_REGISTRY, MethodRegistry, MethodSpec
from rpcwire.jsonrpc import INVALID_PARAMS, METHOD_NOT_FOUND

log = logging.getLogger(__name__)

HandlerFn = Callable[[list[Any]], Awaitable[Any]]


class MethodNotFoundError(Exception):
    def __init__(self, method: str) -> None:
        self.method = method
        self.code = METHOD_NOT_FOUND
        super().__init__(f"Method not found: {method}")


class InvalidParamsError(Exception):
    """Raised when positional params are missing, extra or malformed."""

    def __init__(self, message: str) -> None:
        self.code = INVALID_PARAMS
        super().__init__(f"Invalid params: {message}")


class Dispatcher:
    """Routes catalog methods to async handlers.

    Usage::

        dispatcher = Dispatcher()

        @dispatcher.handler("eth_chainId")
        async def chain_id(params):
            return "0x539"

        result = await dispatcher.dispatch("eth_chainId", [])
    """

    def __init__(self, catalog: MethodRegistry = DEFAULT_REGISTRY) -> None:
        self._catalog = catalog
        self._bound: dict[str, tuple[MethodSpec, HandlerFn]] = {}

    def handler(self, method: str) -> Callable[[HandlerFn], HandlerFn]:
        """Decorator binding *fn* to the catalog entry *method*."""
        spec = self._catalog.lookup(method)
        if spec is None:
            raise ValueError(f"{method!r} is not in the method catalog")

        def decorator(fn: HandlerFn) -> HandlerFn:
            self._bound[method] = (spec, fn)
            log.debug("bound %s%s → %s", method, spec.params, fn.__qualname__)
            return fn

        return decorator

    async def dispatch(self, method: str, params: Any) -> Any:
        """Call the handler for *method* with validated positional *params*."""
        bound = self._bound.get(method)
        if bound is None:
            raise MethodNotFoundError(method)
        spec, fn = bound

        if params is None:
            params = []
        if not isinstance(params, list):
            raise InvalidParamsError("expected a positional array")
        if len(params) > len(spec.params):
            raise InvalidParamsError(
                f"{method} takes at most {len(spec.params)} params "
                f"({', '.join(spec.params) or 'none'}), got {len(params)}"
            )
        return await fn(params)
