# inventory/models.py
from pydantic import BaseModel, Field
from typing import Annotated, Optional, List, Dict, Any

# JSON has no NaN/Infinity and BSON stores at most 64-bit ints
Price = Annotated[float, Field(allow_inf_nan=False)]
Stock = Annotated[int, Field(ge=-2**63, le=2**63 - 1)]

class ProductIn(BaseModel):
    """Request body for create/update. Any `id` sent by the client is ignored."""
    name: str
    price: Price
    stock: Stock
    id: Optional[str] = None

class Product(BaseModel):
    id: Optional[str] = None
    name: str
    price: Price
    stock: Stock

    def to_wire(self) -> Dict[str, Any]:
        # id is left out entirely when the store has not assigned one yet
        return self.model_dump(exclude_none=True)

class ProductListing(BaseModel):
    products: List[Product] = []
    skipped: int = 0

class DashboardData(BaseModel):
    total_value: str
    total_value_raw: float
    top_products: List[Product]
    chart_labels: List[str]
    chart_values: List[int]

class MessageOut(BaseModel):
    message: str

def _fields_from(p: ProductIn) -> Dict[str, Any]:
    return {
        "name": p.name,
        "price": p.price,
        "stock": p.stock,
    }
