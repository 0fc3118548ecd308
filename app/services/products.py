from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.common import apply_ordering, apply_pagination, commit_or_raise, get_or_404, require_admin
from app.services.response import ListResponseMixin

NAME_TAKEN = "A product with this name already exists"


class Products(ListResponseMixin):
    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        order_by: str = "created_at",
        order_dir: str = "desc",
        limit: int = 50,
        offset: int = 0,
    ) -> list[Product]:
        query = db.query(Product)
        if search:
            query = query.filter(Product.name.ilike(f"%{search.strip()}%"))
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Product.created_at, "name": Product.name, "commission_usd": Product.commission_usd},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def get(db: Session, product_id: str) -> Product:
        return get_or_404(db, Product, product_id)

    @staticmethod
    def create(db: Session, payload: ProductCreate, is_admin: bool) -> Product:
        require_admin(is_admin)
        product = Product(**payload.model_dump())
        db.add(product)
        commit_or_raise(db, "Failed to add product", conflict_detail=NAME_TAKEN)
        db.refresh(product)
        return product

    @staticmethod
    def update(db: Session, product_id: str, payload: ProductUpdate, is_admin: bool) -> Product:
        require_admin(is_admin)
        product = get_or_404(db, Product, product_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(product, field, value)
        commit_or_raise(db, "Failed to update product", conflict_detail=NAME_TAKEN)
        db.refresh(product)
        return product

    @staticmethod
    def delete(db: Session, product_id: str, is_admin: bool) -> None:
        require_admin(is_admin)
        product = get_or_404(db, Product, product_id)
        db.delete(product)
        commit_or_raise(db, "Failed to delete product")


products = Products()
