from __future__ import annotations

import os
import sys
import uuid
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("SUPABASE_URL", "http://auth.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.main import app
from app.models.attribute import AttributeType, AttributeValue
from app.models.base import Base, get_admin_db, get_db
from app.models.comment import Comment
from app.models.product import Product, ProductVariant, VariantAttribute
from app.utils.identity import IdentityError, get_identity_provider


class FakeIdentityProvider:
    """In-memory stand-in for the managed auth provider."""

    def __init__(self):
        self.tokens: dict[str, dict] = {}
        self.accounts: dict[str, tuple[str, dict]] = {}
        self.signed_out: list[str] = []
        self.fail_sign_out = False

    def add_user(self, role: str | None = "customer", email: str | None = None) -> tuple[str, dict]:
        user_id = str(uuid.uuid4())
        user = {
            "id": user_id,
            "email": email or f"{user_id[:8]}@example.com",
            "user_metadata": {"role": role} if role else {},
        }
        token = f"token-{user_id}"
        self.tokens[token] = user
        return token, user

    def sign_up(self, email, password, metadata=None):
        if email in self.accounts:
            raise IdentityError("User already registered", status_code=422)
        user = {"id": str(uuid.uuid4()), "email": email, "user_metadata": dict(metadata or {})}
        self.accounts[email] = (password, user)
        return user

    def sign_in(self, email, password):
        account = self.accounts.get(email)
        if not account or account[0] != password:
            raise IdentityError("Invalid login credentials", status_code=400)
        user = account[1]
        token = f"token-{user['id']}"
        self.tokens[token] = user
        return {"access_token": token, "refresh_token": f"refresh-{user['id']}", "user": user}

    def get_user(self, token):
        user = self.tokens.get(token)
        if not user:
            raise IdentityError("invalid JWT", status_code=401)
        return user

    def sign_out(self, token):
        if self.fail_sign_out:
            raise RuntimeError("auth provider unreachable")
        self.signed_out.append(token)
        self.tokens.pop(token, None)


@pytest.fixture()
def session_factory(tmp_path: Path):
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'store.sqlite3'}", future=True)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    yield factory
    engine.dispose()


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture()
def client(session_factory, identity):
    def _override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_admin_db] = _override_db
    app.dependency_overrides[get_identity_provider] = lambda: identity
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def admin(identity):
    token, user = identity.add_user(role="admin")
    return {"Authorization": f"Bearer {token}"}, user


@pytest.fixture()
def customer(identity):
    token, user = identity.add_user(role="customer")
    return {"Authorization": f"Bearer {token}"}, user


@pytest.fixture()
def make_attribute(db):
    """Create (or reuse) an attribute type and add a value to it."""

    def _make(type_name: str, value: str, metadata: dict | None = None) -> AttributeValue:
        attr_type = db.query(AttributeType).filter(AttributeType.name == type_name).first()
        if not attr_type:
            attr_type = AttributeType(name=type_name, display_name=type_name.title())
            db.add(attr_type)
            db.flush()
        attr_value = AttributeValue(
            attribute_type_id=attr_type.id,
            value=value,
            display_value=value.title(),
            meta=metadata or {},
        )
        db.add(attr_value)
        db.commit()
        db.refresh(attr_value)
        return attr_value

    return _make


@pytest.fixture()
def make_product(db):
    """Create a product with the given variants: list of (stock, [attribute value ids])."""

    def _make(name: str = "Basic Tee", price: float = 20.0, variants=None) -> tuple[Product, list[ProductVariant]]:
        product = Product(name=name, price=price, images=[], stock_quantity=10, category="shirts")
        db.add(product)
        db.commit()
        db.refresh(product)
        created = []
        base = datetime(2024, 1, 1)
        for index, (stock, value_ids) in enumerate(variants or [(10, [])]):
            variant = ProductVariant(
                product_id=product.id,
                sku=f"SKU-{index + 1}",
                price=price,
                stock_quantity=stock,
                is_default=index == 0,
                created_at=base + timedelta(seconds=index),
            )
            db.add(variant)
            db.flush()
            for value_id in value_ids:
                db.add(VariantAttribute(variant_id=variant.id, attribute_value_id=value_id))
            created.append(variant)
        db.commit()
        for variant in created:
            db.refresh(variant)
        return product, created

    return _make


@pytest.fixture()
def make_comment(db):
    def _make(product_id: str, user_id: str, rating: int | None = None, minutes: int = 0, content: str = "Nice") -> Comment:
        comment = Comment(
            product_id=product_id,
            user_id=user_id,
            content=content,
            rating=rating,
            created_at=datetime(2024, 1, 1) + timedelta(minutes=minutes),
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment

    return _make
