"""Tests for the products service."""

import uuid

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from app.errors import UnauthorizedError
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.products import products


def _payload(**overrides):
    data = {"name": "Crude Oil", "commission_usd": 3.0, "tick_size": 0.01, "tick_value": 10.0, "price_quote": 78.5}
    data.update(overrides)
    return ProductCreate(**data)


def test_create_product(db_session):
    product = products.create(db_session, _payload(), is_admin=True)
    assert product.name == "Crude Oil"
    assert float(product.price_quote) == pytest.approx(78.5)


def test_create_product_requires_admin(db_session):
    with pytest.raises(UnauthorizedError):
        products.create(db_session, _payload(), is_admin=False)


def test_product_name_required():
    with pytest.raises(ValidationError):
        _payload(name="")


def test_product_negative_commission_rejected():
    with pytest.raises(ValidationError):
        _payload(commission_usd=-1)


def test_duplicate_product_conflicts(db_session, product):
    with pytest.raises(HTTPException) as exc_info:
        products.create(db_session, _payload(name=product.name), is_admin=True)
    assert exc_info.value.status_code == 409


def test_update_product(db_session, product):
    updated = products.update(db_session, str(product.id), ProductUpdate(commission_usd=4.25), is_admin=True)
    assert float(updated.commission_usd) == pytest.approx(4.25)


def test_delete_product(db_session, product):
    products.delete(db_session, str(product.id), is_admin=True)
    with pytest.raises(HTTPException) as exc_info:
        products.get(db_session, str(product.id))
    assert exc_info.value.status_code == 404


def test_list_products(db_session, product):
    assert product.id in {item.id for item in products.list(db_session)}


def test_get_product_not_found(db_session):
    with pytest.raises(HTTPException) as exc_info:
        products.get(db_session, str(uuid.uuid4()))
    assert exc_info.value.detail == "Product not found"
