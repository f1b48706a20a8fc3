import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from courtside.api.endpoints import admin as admin_endpoints
from courtside.api.endpoints import auth as auth_endpoints
from courtside.api.endpoints import users as user_endpoints
from courtside.api.endpoints import tournaments as tournament_endpoints
from courtside.api.endpoints import matches as match_endpoints
from courtside.api.endpoints import witness_requests as witness_request_endpoints
from courtside.api.endpoints import rankings as ranking_endpoints
from courtside.core.database import engine
from courtside.core.exceptions import CourtsideError
from courtside.core.logging_config import configure_logging
from courtside.models import Base

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Courtside Tennis Tournament API")

# Include routers
app.include_router(auth_endpoints.router, prefix="/auth", tags=["Authentication"])
app.include_router(user_endpoints.router, prefix="/users", tags=["Users"])
app.include_router(tournament_endpoints.router, prefix="/tournaments", tags=["Tournaments"])
app.include_router(match_endpoints.router, prefix="/matches", tags=["Matches"])
app.include_router(witness_request_endpoints.router, prefix="/witness-requests", tags=["Witness Requests"])
app.include_router(ranking_endpoints.router, prefix="/rankings", tags=["Rankings"])
app.include_router(admin_endpoints.router, prefix="/admin", tags=["Admin"])


@app.exception_handler(CourtsideError)
async def courtside_error_handler(request: Request, exc: CourtsideError):
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
async def startup_event():
    Base.metadata.create_all(bind=engine)


@app.get("/")
async def root():
    return {"message": "Courtside Tennis Tournament API"}
