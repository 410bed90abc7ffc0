# barbershop/routers/client_details_routes.py

from fastapi import APIRouter, Depends

from barbershop.auth import get_current_user
from barbershop.booking import find_client_detail
from barbershop.deps import get_store, require_admin
from barbershop.errors import NotFoundError
from barbershop.models import ClientDetail, User
from barbershop.schemas import ClientDetailPublic, ClientDetailUpdate
from barbershop.store import SqlStore

router = APIRouter(
    prefix="/client-details",
    tags=["client-details"],
)


@router.get("/{user_id}", response_model=ClientDetailPublic)
def get_client_detail(
    user_id: int,
    store: SqlStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    require_admin(current_user)
    detail = find_client_detail(store, user_id)
    if detail is None:
        raise NotFoundError("Client detail not found")
    return detail


@router.put("/{user_id}", response_model=ClientDetailPublic)
def update_client_detail(
    user_id: int,
    updates: ClientDetailUpdate,
    store: SqlStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    require_admin(current_user)

    if store.get(User, user_id) is None:
        raise NotFoundError("User not found")

    changes = updates.model_dump(exclude_unset=True, exclude_none=True)
    detail = find_client_detail(store, user_id)
    if detail is None:
        # Accounts created before client records existed
        return store.insert(ClientDetail(user_id=user_id, **changes))
    return store.update(detail, changes)
