# sdk/pyinventory.py
import requests
import httpx
from typing import Optional

class InventoryClient:
    def __init__(self, base_url: str = "http://localhost:8080", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    # Products
    def list_products(self):
        r = self.session.get(f"{self.base_url}/products", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def create_product(self, name: str, price: float, stock: int):
        r = self.session.post(f"{self.base_url}/products", json={
            "name": name, "price": price, "stock": stock
        }, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def update_product(self, product_id: str, name: str, price: float, stock: int):
        r = self.session.put(f"{self.base_url}/products", params={"id": product_id}, json={
            "name": name, "price": price, "stock": stock
        }, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_product(self, product_id: str):
        r = self.session.delete(f"{self.base_url}/products", params={"id": product_id}, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Dashboard / backup
    def dashboard_html(self) -> str:
        r = self.session.get(f"{self.base_url}/dashboard", timeout=self.timeout)
        r.raise_for_status()
        return r.text

    def export(self) -> str:
        r = self.session.post(f"{self.base_url}/export", timeout=self.timeout)
        r.raise_for_status()
        return r.text

    # Async listing (example)
    async def list_products_async(self, client: Optional[httpx.AsyncClient] = None):
        if client is not None:
            r = await client.get(f"{self.base_url}/products")
            r.raise_for_status()
            return r.json()
        async with httpx.AsyncClient(timeout=self.timeout) as ac:
            r = await ac.get(f"{self.base_url}/products")
            r.raise_for_status()
            return r.json()


if __name__ == "__main__":
    import argparse
    from rich import print

    parser = argparse.ArgumentParser(description="Inventory API client")
    parser.add_argument("--base-url", default="http://localhost:8080", help="API base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-products", help="List all products")

    cp = subparsers.add_parser("create-product", help="Create a product")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", type=float, required=True, help="Unit price")
    cp.add_argument("--stock", type=int, required=True, help="Units on hand")

    up = subparsers.add_parser("update-product", help="Replace a product's name, price and stock")
    up.add_argument("--product-id", required=True, help="ID of the product")
    up.add_argument("--name", required=True, help="Product name")
    up.add_argument("--price", type=float, required=True, help="Unit price")
    up.add_argument("--stock", type=int, required=True, help="Units on hand")

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True, help="ID of the product")

    subparsers.add_parser("export", help="Save a backup of the store to the seed file")

    args = parser.parse_args()
    c = InventoryClient(base_url=args.base_url)

    if args.command == "list-products":
        print(c.list_products())
    elif args.command == "create-product":
        print(c.create_product(args.name, args.price, args.stock))
    elif args.command == "update-product":
        print(c.update_product(args.product_id, args.name, args.price, args.stock))
    elif args.command == "delete-product":
        print(c.delete_product(args.product_id))
    elif args.command == "export":
        print(c.export())
