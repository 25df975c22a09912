import pytest
from fastapi.testclient import TestClient

from bookstore.auth import create_access_token, hash_password
from bookstore.checkout.gateway import CheckoutGateway, CheckoutSession
from bookstore.config import Settings, get_settings
from bookstore.deps import get_checkout_gateway, get_store
from bookstore.errors import PaymentError
from bookstore.main import app
from bookstore.storage import MemoryDocumentStore


ADMIN_EMAIL = "admin@bookstore.com"
ADMIN_PASSWORD = "passAdm"
EDITOR_EMAIL = "editor@bookstore.com"
TEST_SECRET = "test-secret"


def make_product(product_id, **overrides):
    product = {
        "id": product_id,
        "title": f"Book {product_id}",
        "author": f"Author {product_id}",
        "isbn": "",
        "category": "General",
        "price": 10.0,
        "discountPrice": None,
        "description": "",
        "imageUrl": "/images/default-book.jpg",
        "stock": 20,
        "isActive": True,
        "featured": False,
        "rating": None,
        "reviewCount": 0,
        "tags": [],
        "createdAt": f"2024-01-{product_id:02d}T10:00:00.000Z",
        "updatedAt": f"2024-01-{product_id:02d}T10:00:00.000Z",
        "createdBy": 1,
    }
    product.update(overrides)
    return product


def sample_products():
    return [
        make_product(1, title="Ion", author="Liviu Rebreanu", category="Clasici",
                     price=39.99, discountPrice=34.99, stock=25, isbn="9789734647712"),
        make_product(2, title="Enigma Otiliei", author="George Călinescu",
                     category="Clasici", price=42.5, stock=8),
        make_product(3, title="Learning React", author="Alex Banks", category="React",
                     price=189.0, stock=0),
        make_product(4, title="Maitreyi", author="Mircea Eliade", category="Clasici",
                     price=29.9, stock=12, isActive=False),
        make_product(5, title="React Hooks in Action", author="John Larsen",
                     category="React Advanced", price=120.0, stock=3),
    ]


class FakeGateway(CheckoutGateway):
    def __init__(self):
        self.sessions = []
        self.statuses = {}
        self.fail = False

    def create_session(self, amount, items, origin):
        if self.fail:
            raise PaymentError("Payment gateway unavailable")
        session_id = f"cs_test_{len(self.sessions) + 1}"
        self.sessions.append({"amount": amount, "items": items, "origin": origin})
        self.statuses[session_id] = "unpaid"
        return CheckoutSession(session_id=session_id, session_url=f"https://pay.test/{session_id}")

    def get_session_status(self, session_id):
        if session_id not in self.statuses:
            raise PaymentError("Payment gateway rejected the request")
        return self.statuses[session_id]


@pytest.fixture(scope="session")
def admin_password_hash():
    return hash_password(ADMIN_PASSWORD)


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path, jwt_secret=TEST_SECRET)


@pytest.fixture
def store(admin_password_hash):
    return MemoryDocumentStore(
        {
            "products": {"products": sample_products()},
            "users": {
                "users": [
                    {
                        "id": 1,
                        "email": ADMIN_EMAIL,
                        "password": admin_password_hash,
                        "role": "admin",
                        "name": "Store Admin",
                    },
                    {
                        "id": 2,
                        "email": EDITOR_EMAIL,
                        "password": admin_password_hash,
                        "role": "editor",
                        "name": "Editor",
                    },
                ]
            },
        }
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(store, settings, gateway):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_checkout_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_access_token(
        {"id": 1, "email": ADMIN_EMAIL, "role": "admin", "name": "Store Admin"}, TEST_SECRET
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def editor_headers():
    token = create_access_token(
        {"id": 2, "email": EDITOR_EMAIL, "role": "editor", "name": "Editor"}, TEST_SECRET
    )
    return {"Authorization": f"Bearer {token}"}
