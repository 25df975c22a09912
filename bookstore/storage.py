"""
Document store for the bookstore.

All state lives in three whole JSON documents (products, users, cart).
Every operation reads the entire document, mutates it in memory and
writes the entire document back. There is no locking across that
cycle: two concurrent writers race and the later write silently wins,
discarding the earlier one. That lost-update hazard is an accepted
limitation of flat-file storage.

``read()`` never raises; a missing or malformed document yields a fresh
default. ``write()`` raises ``StorageError`` so callers see the failure.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import StorageError


logger = logging.getLogger(__name__)

PRODUCTS = "products"
USERS = "users"
CART = "cart"

# File name of each collection inside the data directory
COLLECTION_FILES = {
    PRODUCTS: "books.json",
    USERS: "users.json",
    CART: "cart.json",
}


def default_document(collection: str) -> Dict[str, Any]:
    if collection == PRODUCTS:
        return {"products": []}
    if collection == USERS:
        return {"users": []}
    if collection == CART:
        return {"items": [], "total": 0, "totalItems": 0, "lastUpdated": None}
    raise KeyError(f"Unknown collection: {collection}")


class DocumentStore:
    """Maps a collection name to one serialised document."""

    def read(self, collection: str) -> Dict[str, Any]:
        raise NotImplementedError

    def write(self, collection: str, document: Dict[str, Any]) -> None:
        raise NotImplementedError


class JsonDocumentStore(DocumentStore):
    """Collections persisted as JSON files under ``data_dir``."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self._lock = threading.Lock()

    def path_for(self, collection: str) -> Path:
        try:
            return self.data_dir / COLLECTION_FILES[collection]
        except KeyError:
            raise KeyError(f"Unknown collection: {collection}") from None

    def read(self, collection: str) -> Dict[str, Any]:
        path = self.path_for(collection)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return default_document(collection)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s, using an empty document: %s", path, exc)
            return default_document(collection)
        if not isinstance(data, dict):
            logger.warning("Malformed document in %s, using an empty document", path)
            return default_document(collection)
        return data

    def write(self, collection: str, document: Dict[str, Any]) -> None:
        path = self.path_for(collection)
        with self._lock:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with path.open("w", encoding="utf-8") as f:
                    json.dump(document, f, ensure_ascii=False, indent=2)
            except (OSError, TypeError, ValueError) as exc:
                logger.error("Failed to write %s: %s", path, exc)
                raise StorageError(f"Could not save {collection}") from exc


class MemoryDocumentStore(DocumentStore):
    """In-memory store with the same read-whole/write-whole contract."""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None):
        self._documents: Dict[str, Dict[str, Any]] = copy.deepcopy(initial or {})

    def read(self, collection: str) -> Dict[str, Any]:
        if collection not in self._documents:
            return default_document(collection)
        return copy.deepcopy(self._documents[collection])

    def write(self, collection: str, document: Dict[str, Any]) -> None:
        default_document(collection)  # rejects unknown collections
        self._documents[collection] = copy.deepcopy(document)

    def has(self, collection: str) -> bool:
        return collection in self._documents


def load_products(store: DocumentStore) -> List[Dict[str, Any]]:
    products = store.read(PRODUCTS).get("products")
    return products if isinstance(products, list) else []


def save_products(store: DocumentStore, products: List[Dict[str, Any]]) -> None:
    store.write(PRODUCTS, {"products": products})


def load_users(store: DocumentStore) -> List[Dict[str, Any]]:
    users = store.read(USERS).get("users")
    return users if isinstance(users, list) else []


def save_users(store: DocumentStore, users: List[Dict[str, Any]]) -> None:
    store.write(USERS, {"users": users})
