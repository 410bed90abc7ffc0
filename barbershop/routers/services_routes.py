# barbershop/routers/services_routes.py

from typing import List

from fastapi import APIRouter, Depends

from barbershop.deps import get_store
from barbershop.errors import NotFoundError
from barbershop.models import Service
from barbershop.schemas import ServicePublic
from barbershop.store import SqlStore

router = APIRouter(
    prefix="/services",
    tags=["services"],
)


@router.get("", response_model=List[ServicePublic])
def list_services(store: SqlStore = Depends(get_store)):
    return store.list(Service, order_by=Service.id)


@router.get("/{service_id}", response_model=ServicePublic)
def get_service(service_id: int, store: SqlStore = Depends(get_store)):
    service = store.get(Service, service_id)
    if service is None:
        raise NotFoundError("Service not found")
    return service
