from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rental_quote import __version__
from rental_quote.config.settings import get_settings
from rental_quote.engine import PricingEngine, QuoteValidationError, ResolutionError
from rental_quote.services.quote_service import (
    PricingIn,
    QuoteIn,
    QuoteService,
    format_errors,
)
from rental_quote.api.state import get_engine, get_quote_service

app = FastAPI(
    title="Rental Quote API",
    description="Quote pricing for event equipment rental",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_settings().cors_origin],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"ok": False, "errors": format_errors(exc.errors())})


@app.exception_handler(QuoteValidationError)
async def quote_validation_error_handler(request: Request, exc: QuoteValidationError):
    return JSONResponse(status_code=400, content={"ok": False, "errors": exc.errors})


@app.exception_handler(ResolutionError)
async def resolution_error_handler(request: Request, exc: ResolutionError):
    return JSONResponse(
        status_code=400,
        content={"ok": False, "error": str(exc), "missing": exc.missing},
    )


@app.get("/")
async def root():
    return {"status": "online", "message": "Rental Quote API Active"}


@app.get("/api/health")
async def health(engine: PricingEngine = Depends(get_engine)):
    return {
        "ok": True,
        "iva": engine.settings.iva_rate,
        "catalog": len(engine.catalog),
    }


@app.get("/catalog")
async def get_catalog(search: Optional[str] = None, engine: PricingEngine = Depends(get_engine)):
    # Limit results
    limit = 200 if search else None
    return [product.to_dict() for product in engine.catalog.search(search, limit=limit)]


@app.post("/catalog/reload")
def reload_catalog(engine: PricingEngine = Depends(get_engine)):
    return {"ok": True, "total": engine.reload_data()}


@app.post("/calculate")
async def calculate_quote(req: PricingIn, service: QuoteService = Depends(get_quote_service)):
    result = service.preview(req)
    return {**result.to_dict(), "warnings": result.warnings}


@app.post("/quotes")
def create_quote(req: QuoteIn, service: QuoteService = Depends(get_quote_service)):
    return service.create_quote(req)
