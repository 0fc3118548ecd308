from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.schemas.client import ClientCreate, ClientRead, ClientUpdate, DailyMarginCreate
from app.schemas.common import ListResponse
from app.services.clients import clients

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=ListResponse[ClientRead])
def list_clients(
    agent_id: str | None = None,
    search: str | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return clients.list_response(db, agent_id, search, order_by, order_dir, limit, offset)


@router.get("/{client_id}", response_model=ClientRead)
def get_client(client_id: str, db: Session = Depends(get_db)):
    return clients.get(db, client_id)


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(payload: ClientCreate, db: Session = Depends(get_db), auth=Depends(get_current_user)):
    return clients.create(db, payload, is_admin=auth["is_admin"])


@router.patch("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: str,
    payload: ClientUpdate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return clients.update(db, client_id, payload, is_admin=auth["is_admin"])


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: str, db: Session = Depends(get_db), auth=Depends(get_current_user)):
    clients.delete(db, client_id, is_admin=auth["is_admin"])


@router.post("/{client_id}/daily-margin", response_model=ClientRead)
def add_daily_margin(
    client_id: str,
    payload: DailyMarginCreate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return clients.add_daily_margin(
        db,
        client_id,
        payload.margin_in,
        payload.overall_margin,
        payload.entry_date,
        is_admin=auth["is_admin"],
    )
