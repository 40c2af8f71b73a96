from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from wms.api.deps import log_action, require_permission
from wms.db.session import get_db
from wms.models.location import Location
from wms.models.user import User
from wms.schemas.location import LocationCreate, LocationRead
from wms.services.inventory import location_volume_used


router = APIRouter()


def serialize_location(db: Session, location: Location) -> dict:
    return LocationRead(
        id=location.id,
        name=location.name,
        description=location.description,
        max_capacity_m3=location.max_capacity_m3,
        current_volume_m3=round(location_volume_used(db, location.id), 4),
    ).model_dump()


@router.get("")
def list_locations(
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("locations:view")),
) -> list[dict]:
    rows = db.scalars(select(Location).order_by(Location.name.asc())).all()
    return [serialize_location(db, row) for row in rows]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_location(
    payload: LocationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("locations:write")),
) -> dict:
    if db.scalar(select(Location.id).where(Location.name == payload.name)):
        raise HTTPException(status_code=409, detail="Location name already exists")

    location = Location(**payload.model_dump())
    db.add(location)
    db.flush()
    log_action(db, current_user.id, "create", "location", location.id, location.name)
    db.commit()
    db.refresh(location)
    return serialize_location(db, location)
