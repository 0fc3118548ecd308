from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.schemas.common import ListResponse
from app.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.services.products import products

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ListResponse[ProductRead])
def list_products(
    search: str | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return products.list_response(db, search, order_by, order_dir, limit, offset)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return products.get(db, product_id)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db), auth=Depends(get_current_user)):
    return products.create(db, payload, is_admin=auth["is_admin"])


@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return products.update(db, product_id, payload, is_admin=auth["is_admin"])


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: str, db: Session = Depends(get_db), auth=Depends(get_current_user)):
    products.delete(db, product_id, is_admin=auth["is_admin"])
