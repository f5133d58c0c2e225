from typing import Optional, Dict, Any, List, Tuple

from bson import ObjectId

from .context import AppContext
from .dashboard import build_dashboard, render_dashboard
from .errors import ClientInputError, NotFoundError
from .models import Product, ProductIn, _fields_from

# This file contains the logic behind the product, dashboard and export endpoints.

def _parse_product_id(raw: Optional[str]) -> str:
    if not raw:
        raise ClientInputError("missing id parameter")
    if not ObjectId.is_valid(raw):
        raise ClientInputError(f"invalid id: {raw}")
    return raw

# Product endpoints
def list_products_logic(ctx: AppContext) -> Tuple[List[Dict[str, Any]], int]:
    listing = ctx.store.find_all()
    return [p.to_wire() for p in listing.products], listing.skipped

def create_product_logic(ctx: AppContext, payload: ProductIn) -> Dict[str, Any]:
    product = Product(**_fields_from(payload))
    pid = ctx.store.insert(product)
    product.id = pid
    return {"inserted_id": pid, "product": product.to_wire()}

def update_product_logic(ctx: AppContext, raw_id: Optional[str], payload: ProductIn) -> Dict[str, str]:
    pid = _parse_product_id(raw_id)
    if not ctx.store.update_by_id(pid, _fields_from(payload)):
        raise NotFoundError(f"product not found: {pid}")
    return {"message": "Product updated"}

def delete_product_logic(ctx: AppContext, raw_id: Optional[str]) -> Dict[str, str]:
    pid = _parse_product_id(raw_id)
    if not ctx.store.delete_by_id(pid):
        raise NotFoundError(f"product not found: {pid}")
    return {"message": "Product deleted"}

# Dashboard
def dashboard_logic(ctx: AppContext) -> str:
    listing = ctx.store.find_all()
    return render_dashboard(build_dashboard(listing.products))

# Export
def export_logic(ctx: AppContext) -> str:
    ctx.seeder.export()
    return f"Backup saved to {ctx.seeder.seed_file}"
