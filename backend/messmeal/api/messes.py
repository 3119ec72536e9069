from fastapi import APIRouter, Depends, HTTPException, Query

from messmeal.api.deps import page_params, require_admin, require_user
from messmeal.schemas.mess import AddressRead, MessIn, MessPage, MessRead, OwnerRead
from messmeal.storage.db import get_session
from messmeal.storage.models import MESS_TYPES, Mess
from messmeal.storage.repositories import get_mess, list_messes, save_mess, search_messes

router = APIRouter(prefix="/mess")


def mess_read(mess: Mess) -> MessRead:
    return MessRead(
        id=mess.id,
        name=mess.name,
        type=mess.type,
        phone=mess.phone,
        status=mess.status,
        address=AddressRead(street=mess.street, area=mess.area, city=mess.city, postalCode=mess.postal_code),
        owner=OwnerRead(name=mess.owner_name, phone=mess.owner_phone),
        created_at=mess.created_at,
        updated_at=mess.updated_at,
    )


@router.get("/all", response_model=MessPage)
def list_all_messes(paging: dict = Depends(page_params), _user=Depends(require_user)) -> MessPage:
    with get_session() as session:
        messes, total = list_messes(session, **paging)
        return MessPage(
            messes=[mess_read(m) for m in messes],
            total=total,
            limit=paging["limit"],
            skip=paging["skip"],
        )


@router.get("/search", response_model=list[MessRead])
def search(q: str = Query(default=""), _user=Depends(require_user)) -> list[MessRead]:
    if not q.strip():
        return []
    with get_session() as session:
        return [mess_read(m) for m in search_messes(session, q)]


@router.post("/add", response_model=MessRead, status_code=201)
def add_mess(body: MessIn, _admin=Depends(require_admin)) -> MessRead:
    """Create a mess, or update it in place when the body carries an id."""
    if body.type not in MESS_TYPES:
        raise HTTPException(status_code=422, detail=f"Unknown mess type '{body.type}'")
    with get_session() as session:
        if body.id is not None:
            mess = get_mess(session, body.id)
            if mess is None:
                raise HTTPException(status_code=404, detail="Mess not found")
        else:
            mess = Mess(name=body.name)
        mess.name = body.name.strip()
        mess.type = body.type
        mess.phone = body.phone.strip()
        mess.status = body.status
        mess.street = body.address.street.strip()
        mess.area = body.address.area.strip()
        mess.city = body.address.city.strip()
        mess.postal_code = body.address.postal_code
        mess.owner_name = body.owner.name.strip()
        mess.owner_phone = body.owner.phone.strip()
        return mess_read(save_mess(session, mess))
