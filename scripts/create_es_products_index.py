#!/usr/bin/env python3
"""
Create the Elasticsearch products index with raw HTTP (no Python ES client).
The API creates it on startup too; use this to (re)create it by hand:
  python scripts/create_es_products_index.py
  python scripts/create_es_products_index.py --reset-index

Reads ELASTICSEARCH_URL / PRODUCTS_INDEX from .env (default http://localhost:9200, products).
"""

import argparse
import sys

import httpx

from catalog.config import get_settings
from catalog.search.elasticsearch_client import products_index_mappings, products_index_settings


def main():
    ap = argparse.ArgumentParser(description="Create the products index")
    ap.add_argument("--reset-index", action="store_true", help="Delete the index first if it exists")
    args = ap.parse_args()

    settings = get_settings()
    base = settings.elasticsearch_url.rstrip("/")
    url = f"{base}/{settings.products_index}"
    body = {"settings": products_index_settings(), "mappings": products_index_mappings()}

    with httpx.Client(timeout=30.0, verify=settings.elasticsearch_verify_certs) as client:
        r = client.head(url)
        if r.status_code == 200:
            if not args.reset_index:
                print(f"Index '{settings.products_index}' already exists. Use --reset-index to recreate it.")
                return
            client.delete(url).raise_for_status()
            print(f"Deleted index '{settings.products_index}'.")
        r = client.put(url, json=body)
        if r.status_code not in (200, 201):
            print(f"Failed to create index: {r.status_code}")
            print(r.text[:500])
            sys.exit(1)
    print(f"Created index '{settings.products_index}'.")


if __name__ == "__main__":
    main()
