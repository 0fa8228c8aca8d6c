import datetime as dt
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import read_session
from ..admin.security import require_admin, is_admin_user
from ..schemas.trip import StatusIn, AssignDriverIn, CostIn, to_naive_utc
from ..services import analytics
from ..services import trips as trips_service
from ..services.driver import list_drivers, list_active_drivers
from .ui import templates

router = APIRouter(tags=["admin"])

Timeframe = Literal["day", "week", "month", "year"]
ADMIN_TABS = ("analytics", "trips", "drivers")


# ---------- HTML ----------
@router.get("/admin", response_class=HTMLResponse)
def admin_home(
    request: Request,
    tab: str = Query("analytics"),
    timeframe: Timeframe = Query("week"),
    status: str = Query("all"),
    db: Session = Depends(get_db),
):
    user, role = read_session(request, db)
    if not user:
        return RedirectResponse("/login", status_code=303)
    if not is_admin_user(user, role):
        return RedirectResponse("/dashboard", status_code=303)

    tab = tab if tab in ADMIN_TABS else "analytics"
    ctx = {"request": request, "user": user, "role": role, "tab": tab, "timeframe": timeframe, "status": status}
    if tab == "analytics":
        ctx["stats"] = analytics.admin_stats(db, timeframe)
        ctx["overview"] = analytics.admin_analytics(db, timeframe)
    elif tab == "trips":
        ctx["trips"] = trips_service.list_all_trips(db, status=status)
        ctx["active_drivers"] = list_active_drivers(db)
    else:
        ctx["drivers"] = list_drivers(db)
    return templates.TemplateResponse(request, "admin/home.html", ctx)


# ---------- API: поездки ----------
@router.get("/api/admin/trips")
def api_admin_trips(
    status: str = Query("all"),
    start: Optional[dt.datetime] = Query(None),
    end: Optional[dt.datetime] = Query(None),
    _=Depends(require_admin),
    db: Session = Depends(get_db),
):
    items = trips_service.list_all_trips(db, status=status, start=to_naive_utc(start), end=to_naive_utc(end))
    return {"ok": True, "items": items}


@router.post("/api/admin/trips/{trip_id}/status")
def api_admin_trip_status(trip_id: int, body: StatusIn, _=Depends(require_admin), db: Session = Depends(get_db)):
    t = trips_service.admin_update_status(db, trip_id, body.status)
    return {"ok": True, "id": t.id, "status": t.status.value}


@router.post("/api/admin/trips/{trip_id}/cost")
def api_admin_trip_cost(trip_id: int, body: CostIn, _=Depends(require_admin), db: Session = Depends(get_db)):
    t = trips_service.update_trip_cost(db, trip_id, body.cost)
    return {"ok": True, "id": t.id, "cost": t.cost}


@router.post("/api/admin/trips/{trip_id}/driver")
def api_admin_assign_driver(
    trip_id: int, body: AssignDriverIn, _=Depends(require_admin), db: Session = Depends(get_db)
):
    t = trips_service.assign_driver(db, trip_id, body.driver_id)
    return {"ok": True, "trip": trips_service.trip_to_public(t, with_customer=True)}


@router.delete("/api/admin/trips/{trip_id}/driver")
def api_admin_remove_trip_driver(trip_id: int, _=Depends(require_admin), db: Session = Depends(get_db)):
    t = trips_service.remove_driver_from_trip(db, trip_id)
    return {"ok": True, "id": t.id, "status": t.status.value, "driver_id": t.driver_id}


# ---------- API: аналитика ----------
@router.get("/api/admin/stats")
def api_admin_stats(timeframe: Timeframe = Query("week"), _=Depends(require_admin), db: Session = Depends(get_db)):
    return {"ok": True, "timeframe": timeframe, **analytics.admin_stats(db, timeframe)}


@router.get("/api/admin/destinations")
def api_admin_destinations(
    timeframe: Timeframe = Query("week"), _=Depends(require_admin), db: Session = Depends(get_db)
):
    return {"ok": True, "items": analytics.popular_destinations(db, timeframe)}


@router.get("/api/admin/analytics")
def api_admin_analytics(
    timeframe: Timeframe = Query("week"), _=Depends(require_admin), db: Session = Depends(get_db)
):
    return {"ok": True, "timeframe": timeframe, **analytics.admin_analytics(db, timeframe)}
