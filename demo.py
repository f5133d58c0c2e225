#!/usr/bin/env python
from sdk.pyinventory import InventoryClient

def main():
    c = InventoryClient(base_url="http://127.0.0.1:8080")

    # -----------------------------
    # Create products
    # -----------------------------
    print("Creating products...")
    a = c.create_product("Keyboard", 10.0, 2)
    b = c.create_product("Headphones", 50.0, 1)
    d = c.create_product("Cable", 5.0, 10)
    print(a)
    print(b)
    print(d)

    # -----------------------------
    # List products
    # -----------------------------
    print("\nListing products...")
    print(c.list_products())

    # -----------------------------
    # Update and delete
    # -----------------------------
    print("\nRestocking cables...")
    print(c.update_product(d["inserted_id"], "Cable", 5.0, 25))

    print("\nDeleting headphones...")
    print(c.delete_product(b["inserted_id"]))

    # -----------------------------
    # Backup
    # -----------------------------
    print("\nExporting backup...")
    print(c.export())

if __name__ == "__main__":
    main()
