"""
Price lookup REST API using FastAPI. No secrets, no auth.

GET /price?symbol=AAPL&type=stock   (also served at /api/quote)
  200 {symbol, type, price, cached?}  price may be null: no provider had data
  400 {error: "missing symbol", price: null}
  500 {error, price: null}            unexpected internal failure
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ._version import __version__
from .core.errors import ValidationError
from .service import PriceService, create_default_service

logger = logging.getLogger(__name__)


def create_app(service: Optional[PriceService] = None) -> FastAPI:
    """Build the app; the service (and its cache) lives as long as the app."""
    app = FastAPI(title="Price Resolver API", version=__version__)
    app.state.service = service
    service_lock = threading.Lock()

    def _service(request: Request) -> PriceService:
        with service_lock:
            if request.app.state.service is None:
                request.app.state.service = create_default_service()
            return request.app.state.service

    @app.get("/health")
    def health(request: Request) -> Dict[str, Any]:
        svc = _service(request)
        return {
            "status": "ok",
            "version": __version__,
            "cache_entries": len(svc.cache),
            "providers": svc.chains.get_health(),
        }

    @app.get("/price")
    @app.get("/api/quote")
    def price(
        request: Request, symbol: Optional[str] = None, type: Optional[str] = None
    ) -> JSONResponse:
        try:
            result = _service(request).get_price(type, symbol)
        except ValidationError as exc:
            return JSONResponse({"error": str(exc), "price": None}, status_code=400)
        except Exception as exc:
            logger.exception("Price lookup failed for %r (%r)", symbol, type)
            return JSONResponse(
                {"error": str(exc) or "Unknown error", "price": None}, status_code=500
            )
        return JSONResponse(result.to_payload())

    return app


app = create_app()
