# app/routers/ui.py
import datetime as dt
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..deps import read_session
from ..models.trip import TripType
from ..services import users as users_service
from ..services import trips as trips_service
from ..services import driver as driver_service
from ..utils.clock import local_to_utc, utc_to_local
from ..utils.security import session_token_for
from .auth import set_session_cookie, clear_session_cookie

router = APIRouter(include_in_schema=False)

# Абсолютный путь к templates/, чтобы не ловить TemplateNotFound
TEMPLATES_DIR = Path(__file__).resolve().parents[1].parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

ADDITIONAL_SERVICES = [
    {"title": "Airport Transfers", "desc": "Premium airport pickup and drop-off services"},
    {"title": "Cruise Port Services", "desc": "Reliable transportation to and from cruise ports"},
    {"title": "Corporate Travel", "desc": "Business travel solutions for professionals"},
    {"title": "Tours & Excursions", "desc": "Guided tours and local experiences"},
]

LOGIN_ROLES = [
    ("customer", "Customer (Tourist)"),
    ("driver", "Driver"),
    ("Administrator", "Administrator"),
]

BOOKING_ROLES = ("customer", "admin")


def flash(request: Request, message: str, kind: str = "info") -> None:
    request.session.setdefault("flash", []).append({"kind": kind, "text": message})


def pop_flash(request: Request) -> list:
    return request.session.pop("flash", [])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


@router.get("/")
def index(request: Request, db: Session = Depends(get_db)):
    user, role = read_session(request, db)
    if not user:
        return _redirect("/login")
    return _redirect(users_service.home_for_role(role))


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request, mode: str = "login"):
    return templates.TemplateResponse(request, "login.html", {
        "mode": "signup" if mode == "signup" else "login",
        "roles": LOGIN_ROLES,
        "messages": pop_flash(request),
    })


@router.post("/login")
def login_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    role: str = Form("customer"),
    db: Session = Depends(get_db),
):
    try:
        user, claimed = users_service.authenticate(db, email, password, role)
    except (PermissionError, ValueError) as e:
        flash(request, str(e), "error")
        return _redirect("/login")

    resp = _redirect(users_service.home_for_role(claimed))
    set_session_cookie(resp, session_token_for(user, claimed))
    return resp


@router.post("/signup")
def signup_submit(
    request: Request,
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    confirm_password: str = Form(...),
    db: Session = Depends(get_db),
):
    try:
        users_service.signup(db, name, email, password, confirm_password)
    except ValueError as e:
        flash(request, str(e), "error")
        return _redirect("/login?mode=signup")
    flash(request, "Account created successfully! Please sign in.", "success")
    return _redirect("/login")


@router.get("/logout")
def logout():
    resp = _redirect("/login")
    clear_session_cookie(resp)
    return resp


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request, db: Session = Depends(get_db)):
    user, role = read_session(request, db)
    if not user:
        return _redirect("/login")
    return templates.TemplateResponse(request, "dashboard.html", {
        "user": user,
        "role": role,
        "is_admin": users_service.is_admin_account(user),
        "first_name": (user.full_name or user.email).split(" ")[0],
        "upcoming": trips_service.list_upcoming(db, user),
        "past": trips_service.list_past(db, user),
        "services": ADDITIONAL_SERVICES,
        "messages": pop_flash(request),
    })


@router.get("/dashboard/book", response_class=HTMLResponse)
def book_page(request: Request, db: Session = Depends(get_db)):
    user, role = read_session(request, db)
    if not user:
        return _redirect("/login")
    return templates.TemplateResponse(request, "book.html", {
        "user": user,
        "role": role,
        "trip_types": [t.value for t in TripType],
        "airport_fare": settings.AIRPORT_TRANSFER_FARE,
        "hourly_rate": settings.CITY_TOUR_HOURLY_RATE,
        "hours_range": range(settings.CITY_TOUR_MIN_HOURS, settings.CITY_TOUR_MAX_HOURS + 1),
        "messages": pop_flash(request),
    })


@router.post("/dashboard/book")
def book_submit(
    request: Request,
    trip_type: str = Form(...),
    date: str = Form(...),
    time: str = Form(...),
    pickup_location: str = Form(...),
    dropoff_location: str = Form(""),
    flight_number: str = Form(""),
    hours: str = Form(""),
    db: Session = Depends(get_db),
):
    user, role = read_session(request, db)
    if not user:
        return _redirect("/login")
    # как и POST /api/trips: бронируют клиент или админ
    if role not in BOOKING_ROLES:
        flash(request, "Only customers can book trips", "error")
        return _redirect(users_service.home_for_role(role))

    try:
        # дата и время в форме местные
        pickup_time = local_to_utc(dt.datetime.fromisoformat(f"{date}T{time}"))
    except ValueError:
        flash(request, "Please provide a valid date and time", "error")
        return _redirect("/dashboard/book")

    try:
        t = trips_service.create_trip(db, user, {
            "trip_type": trip_type,
            "pickup_location": pickup_location,
            "pickup_time": pickup_time,
            "dropoff_location": dropoff_location,
            "flight_number": flight_number,
            "hours": hours,
        })
    except ValueError as e:
        flash(request, str(e), "error")
        return _redirect("/dashboard/book")

    flash(request, f"Trip booked for {utc_to_local(t.pickup_time):%b %d, %H:%M}. Estimated cost ${t.cost:.2f}", "success")
    return _redirect("/dashboard")


@router.get("/driver", response_class=HTMLResponse)
def driver_page(request: Request, db: Session = Depends(get_db)):
    user, role = read_session(request, db)
    if not user:
        return _redirect("/login")
    if role not in ("driver", "admin"):
        return _redirect("/dashboard")
    return templates.TemplateResponse(request, "driver.html", {
        "user": user,
        "role": role,
        "trips": trips_service.list_driver_trips(db, user),
        "stats": driver_service.driver_dashboard_stats(db, user.id),
        "messages": pop_flash(request),
    })
