"""
User service - registration, login and bearer-token protected profile endpoints
"""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from .auth import authenticate, get_current_identity
from .config import Settings, get_settings
from .db import build_engine, build_session_factory, get_db, init_db
from .errors import (
    EmailAlreadyRegistered,
    HashingError,
    StorageUnavailable,
    UserNotFound,
    WrongCredentials,
)
from .passwords import PasswordHasher
from .repository import UserRepository
from .routes import health
from .schemas import AuthenticationRequest, Token, TokenClaims, UserCreate, UserResponse
from .tokens import ServerSecret, TokenService
from .utils.event_logger import configure_logging, log_auth_event

logger = logging.getLogger(__name__)

router = APIRouter()


def get_users(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


@router.get("/", response_class=PlainTextResponse)
def index(identity: TokenClaims = Depends(get_current_identity)):
    """Hello World"""
    return f"Hello world! {identity.firstname}"


@router.post("/auth", response_model=Token, tags=["auth"])
def login(credentials: AuthenticationRequest, request: Request, users: UserRepository = Depends(get_users)):
    state = request.app.state
    try:
        token = authenticate(credentials, users, state.hasher, state.token_service, state.secret, request)
    except UserNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except WrongCredentials as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    return Token(access_token=token)


@router.post("/users", response_model=UserResponse, tags=["users"])
def create_user(payload: UserCreate, request: Request, users: UserRepository = Depends(get_users)):
    password_record = request.app.state.hasher.hash(payload.password)
    try:
        user = users.create(payload.firstname, payload.lastname, payload.email, password_record)
    except EmailAlreadyRegistered as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message) from exc

    log_auth_event("user_registered", user.email, request, user_id=user.id)
    return user


@router.get("/users/{user_id}", response_model=UserResponse, tags=["users"])
def get_user(
    user_id: int,
    identity: TokenClaims = Depends(get_current_identity),
    users: UserRepository = Depends(get_users),
):
    user = users.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with id {user_id} not found")
    return user


@router.get("/me", response_model=UserResponse, tags=["users"])
def get_logged_user(identity: TokenClaims = Depends(get_current_identity)):
    return identity


async def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": exc.message})


async def hashing_error_handler(request: Request, exc: HashingError):
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": exc.message})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup; an unreachable database aborts startup"""
    init_db(app.state.engine)
    yield
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Raises:
        pydantic.ValidationError: If settings are loaded from the environment and SECRET_KEY is missing
        ValueError: If SECRET_KEY is too short to sign with
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="User Service",
        description="User registration, login and bearer-token authentication",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.secret = ServerSecret.from_settings(settings)
    app.state.hasher = PasswordHasher(
        time_cost=settings.ARGON2_TIME_COST,
        memory_cost=settings.ARGON2_MEMORY_COST,
        parallelism=settings.ARGON2_PARALLELISM,
        max_concurrency=settings.HASH_MAX_CONCURRENCY,
    )
    ttl = timedelta(minutes=settings.TOKEN_TTL_MINUTES) if settings.TOKEN_TTL_MINUTES else None
    app.state.token_service = TokenService(ttl=ttl)
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StorageUnavailable, storage_unavailable_handler)
    app.add_exception_handler(HashingError, hashing_error_handler)

    app.include_router(router)
    app.include_router(health.router)

    logger.info("User service configured with database %s", app.state.engine.url.render_as_string(hide_password=True))
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
