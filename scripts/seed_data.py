#!/usr/bin/env python3
"""
Seed script: creates random products via the bulk API (no direct ES access).
Run: API must be running.
  python scripts/seed_data.py
  python scripts/seed_data.py --products 500 --batch-size 100
"""

import argparse
import random
import sys

import httpx

API_BASE = "http://localhost:8000/api/v1"

CATALOG = {
    "Electronics": {
        "brands": ["Apple", "Samsung", "Sony", "Lenovo"],
        "names": ["Smartphone", "Laptop", "Tablet", "Smart Watch", "Webcam 4K", "Power Bank"],
    },
    "Audio": {
        "brands": ["Sony", "Bose", "JBL"],
        "names": ["Wireless Headphones", "Bluetooth Speaker", "Streaming Mic", "Earbuds"],
    },
    "Home": {
        "brands": ["Philips", "Bosch", "Ikea"],
        "names": ["Coffee Maker", "Electric Kettle", "Air Fryer", "Blender", "Desk Lamp"],
    },
}

DESCRIPTIONS = [
    "Great for home office and remote work.",
    "High quality build and reliable performance.",
    "Popular choice for developers and designers.",
    "Compact design with long battery life.",
    "Comes with a two year warranty and free shipping.",
]

TAGS = ["new", "sale", "bestseller", "eco", "gift", "premium"]


def random_product() -> dict:
    category = random.choice(list(CATALOG))
    entry = CATALOG[category]
    name = random.choice(entry["names"])
    if random.random() > 0.5:
        name += f" {random.randint(1, 999)}"
    return {
        "name": name,
        "description": random.choice(DESCRIPTIONS),
        "category": category,
        "brand": random.choice(entry["brands"]),
        "price": random.choice([9.99, 24.5, 49.0, 79.9, 99.0, 149.0, 199.99, 349.0, 999.99]),
        "stock": random.choice([0, 1, 5, 20, 100]),
        "rating": round(random.uniform(2.5, 5.0), 1),
        "tags": random.sample(TAGS, k=random.randint(0, 3)),
    }


def main():
    ap = argparse.ArgumentParser(description="Seed products via API")
    ap.add_argument("--products", type=int, default=200, help="Number of products to create")
    ap.add_argument("--batch-size", type=int, default=100, help="Products per bulk request (max 1000)")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    created = 0
    errors = []
    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        remaining = args.products
        while remaining > 0:
            batch = [random_product() for _ in range(min(args.batch_size, remaining))]
            remaining -= len(batch)
            try:
                r = client.post("/products/bulk", json={"products": batch})
                if r.status_code == 201:
                    created += r.json()["count"]
                else:
                    errors.append(f"Bulk: {r.status_code} {r.text[:120]}")
            except httpx.HTTPError as e:
                errors.append(f"Bulk: {e}")
            print(f"  ... {created} products")

    print(f"\nDone. Products created: {created}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
