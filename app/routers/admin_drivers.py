# app/routers/admin_drivers.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..admin.security import require_admin
from ..schemas.driver import DriverCreate, DriverUpdate, ActiveIn, TagIn
from ..services.driver import (
    list_drivers,
    list_active_drivers,
    create_driver,
    update_driver,
    set_active,
    remove_driver,
    add_tag,
    remove_tag,
)

# всё здесь только для админа
router = APIRouter(tags=["admin-drivers"], dependencies=[Depends(require_admin)])


@router.get("/api/admin/drivers")
def api_admin_drivers(db: Session = Depends(get_db)):
    return list_drivers(db)


@router.get("/api/admin/drivers/active")
def api_admin_active_drivers(db: Session = Depends(get_db)):
    # для выпадающего списка «назначить водителя»
    return [{"id": u.id, "full_name": u.full_name, "email": u.email} for u in list_active_drivers(db)]


@router.post("/api/admin/drivers", status_code=201)
def api_admin_create_driver(body: DriverCreate, db: Session = Depends(get_db)):
    u = create_driver(db, body.model_dump())
    return {"ok": True, "message": "Driver created successfully", "driver_id": u.id}


@router.patch("/api/admin/drivers/{driver_id}")
def api_admin_update_driver(driver_id: int, body: DriverUpdate, db: Session = Depends(get_db)):
    update_driver(db, driver_id, body.model_dump(exclude_unset=True))
    return {"ok": True, "message": "Driver updated successfully"}


@router.post("/api/admin/drivers/{driver_id}/active")
def api_admin_driver_active(driver_id: int, body: ActiveIn, db: Session = Depends(get_db)):
    p = set_active(db, driver_id, body.is_active)
    return {"ok": True, "driver_id": driver_id, "is_active": p.is_active}


@router.delete("/api/admin/drivers/{driver_id}")
def api_admin_remove_driver(driver_id: int, db: Session = Depends(get_db)):
    reassigned = remove_driver(db, driver_id)
    return {"ok": True, "message": "Driver deleted successfully", "reassigned_trips": reassigned}


@router.post("/api/admin/drivers/{driver_id}/tags")
def api_admin_add_tag(driver_id: int, body: TagIn, db: Session = Depends(get_db)):
    return {"ok": True, "driver_id": driver_id, "tags": add_tag(db, driver_id, body.tag)}


# path: в теге может быть «/»
@router.delete("/api/admin/drivers/{driver_id}/tags/{tag:path}")
def api_admin_remove_tag(driver_id: int, tag: str, db: Session = Depends(get_db)):
    return {"ok": True, "driver_id": driver_id, "tags": remove_tag(db, driver_id, tag)}
