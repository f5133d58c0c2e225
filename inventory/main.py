# inventory/main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from .config import load_settings, static_dir_from_env
from .context import AppContext, build_context
from .core import (
    list_products_logic, create_product_logic, update_product_logic,
    delete_product_logic, dashboard_logic, export_logic
)
from .errors import ConfigurationError, MethodNotAllowedError, StoreError, register_error_handlers
from .models import MessageOut, ProductIn

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.context is None:
        app.state.context = build_context(load_settings())
    app.state.context.seeder.seed_on_startup()
    try:
        yield
    finally:
        app.state.context.close()


def get_context(request: Request) -> AppContext:
    ctx = request.app.state.context
    if ctx is None:
        raise StoreError("product store is not initialised")
    return ctx


def create_app(context: Optional[AppContext] = None, static_dir: Optional[Path] = None) -> FastAPI:
    """
    Build the API. Handlers are plain `def`s so FastAPI runs each request in
    its worker thread pool while the blocking store call is in flight.
    """
    app = FastAPI(title="inventory-api", lifespan=lifespan)
    app.state.context = context
    static_dir = Path(static_dir) if static_dir is not None else static_dir_from_env()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # ---------------------------
    # Home / static assets
    # ---------------------------
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/", include_in_schema=False)
    def home():
        index = static_dir / "index.html"
        if not index.is_file():
            raise HTTPException(status_code=404, detail="Not Found")
        return FileResponse(index)

    # ---------------------------
    # Dashboard
    # ---------------------------
    @app.get("/dashboard", response_class=HTMLResponse)
    def dashboard(ctx: AppContext = Depends(get_context)):
        return HTMLResponse(dashboard_logic(ctx))

    # ---------------------------
    # Product endpoints
    # ---------------------------
    @app.get("/products")
    def list_products(response: Response, ctx: AppContext = Depends(get_context)):
        products, skipped = list_products_logic(ctx)
        response.headers["X-Skipped-Records"] = str(skipped)
        return products

    @app.post("/products", status_code=201)
    def create_product(payload: ProductIn, ctx: AppContext = Depends(get_context)):
        return create_product_logic(ctx, payload)

    @app.put("/products", response_model=MessageOut)
    def update_product(payload: ProductIn, product_id: Optional[str] = Query(None, alias="id"),
                       ctx: AppContext = Depends(get_context)):
        return update_product_logic(ctx, product_id, payload)

    @app.delete("/products", response_model=MessageOut)
    def delete_product(product_id: Optional[str] = Query(None, alias="id"), ctx: AppContext = Depends(get_context)):
        return delete_product_logic(ctx, product_id)

    # ---------------------------
    # Export (manual backup)
    # ---------------------------
    @app.post("/export", response_class=PlainTextResponse)
    def export(ctx: AppContext = Depends(get_context)):
        return PlainTextResponse(export_logic(ctx))

    @app.api_route("/export", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
    def export_wrong_method(request: Request):
        raise MethodNotAllowedError(f"method {request.method} not allowed, use POST")

    return app


app = create_app()


def serve():
    settings = load_settings_or_exit()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
    )
    try:
        context = build_context(settings)
    except StoreError as e:
        logger.error("Cannot start: %s", e)
        raise SystemExit(1)
    uvicorn.run(create_app(context, static_dir=settings.static_dir),
                host=settings.host, port=settings.port)


def load_settings_or_exit():
    try:
        return load_settings()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Cannot start: %s", e)
        raise SystemExit(1)


if __name__ == "__main__":
    serve()
