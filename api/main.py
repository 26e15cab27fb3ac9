import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from habithub import config, dates, db, logic, reports, weeks
from habithub.errors import HabitHubError, StorageFailure
from habithub.models import CamelModel
from habithub.scheduler import create_scheduler
from habithub.toggle import toggle

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


# -------------------------------
# LIFESPAN
# -------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        week = weeks.ensure_current_week(db.get_store())
        logger.info("Current week at startup: %s", week.week_id)
    except HabitHubError as e:
        # retried by the weekly job or the next GET /week/current
        logger.error("Could not prepare the current week at startup: %s", e.message)
    except Exception:
        # e.g. the Supabase client rejecting its URL or key
        logger.exception("Storage setup failed at startup")

    scheduler = None
    if config.SCHEDULER_ENABLED:
        scheduler = create_scheduler()
        scheduler.start()
        logger.info("Weekly scheduler started (%s)", config.TIMEZONE)
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)


app = FastAPI(title="HabitHub API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------
# ERRORS
# -------------------------------
@app.exception_handler(HabitHubError)
async def habithub_error_handler(request: Request, exc: HabitHubError):
    if isinstance(exc, StorageFailure):
        logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Storage unavailable"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return JSONResponse(status_code=400, content={"detail": "; ".join(problems) or "Invalid request"})


# -------------------------------
# MODELS
# -------------------------------
class HabitCreateModel(CamelModel):
    title: str
    scheduled_days: List[str]
    is_compulsory: bool = False
    color: Optional[str] = None


class HabitUpdateModel(CamelModel):
    title: Optional[str] = None
    scheduled_days: Optional[List[str]] = None
    is_active: Optional[bool] = None
    is_compulsory: Optional[bool] = None
    color: Optional[str] = None


class ToggleModel(CamelModel):
    habit_id: str
    day: str


# -------------------------------
# HABIT ROUTES
# -------------------------------
@app.post("/habits", status_code=201)
def create_habit(body: HabitCreateModel, store=Depends(db.get_store)):
    habit = logic.add_new_habit(
        store,
        title=body.title,
        scheduled_days=body.scheduled_days,
        is_compulsory=body.is_compulsory,
        color=body.color,
    )
    return {"message": "Habit created successfully", "habit": habit.to_api()}


@app.get("/habits")
def list_habits(store=Depends(db.get_store)):
    return [h.to_api() for h in logic.list_habits(store, active_only=True)]


@app.put("/habits/{habit_id}")
def update_habit(habit_id: str, body: HabitUpdateModel, store=Depends(db.get_store)):
    habit = logic.update_habit(store, habit_id, **body.model_dump(exclude_none=True))
    return {"message": "Habit updated successfully", "habit": habit.to_api()}


@app.delete("/habits/{habit_id}")
def delete_habit(habit_id: str, store=Depends(db.get_store)):
    logic.remove_habit(store, habit_id)
    return {"message": "Habit deleted successfully"}


# -------------------------------
# WEEK ROUTES
# -------------------------------
@app.get("/week/current")
def current_week(store=Depends(db.get_store)):
    return reports.current_week_view(store)


@app.post("/week/toggle")
def toggle_completion(body: ToggleModel, store=Depends(db.get_store)):
    result = toggle(store, body.habit_id, body.day)
    return {"message": "Habit completion toggled", **result.to_api()}


@app.get("/week/calendar/{year}/{month}")
def month_calendar(year: int, month: int, store=Depends(db.get_store)):
    return reports.calendar_view(store, year, month)


@app.get("/week/date/{date}")
def habits_for_date(date: str, store=Depends(db.get_store)):
    return reports.habits_for_date(store, date)


@app.get("/weeks/history")
def week_history(skip: int = 0, limit: int = config.HISTORY_PAGE_SIZE, store=Depends(db.get_store)):
    return reports.week_history(store, skip=skip, limit=limit)


@app.get("/weeks/stats")
def week_stats(store=Depends(db.get_store)):
    return reports.week_stats(store)


@app.get("/weeks/{week_id}")
def week_by_id(week_id: str, store=Depends(db.get_store)):
    return reports.week_view(store, week_id)


@app.get("/")
def root():
    return {"message": "HabitHub API is running", "status": "healthy"}


# Health check endpoint
@app.get("/health")
def health_check():
    return {"status": "healthy", "timestamp": dates.now().isoformat(), "timezone": config.TIMEZONE}


# For running with uvicorn directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=config.HOST, port=config.PORT)
