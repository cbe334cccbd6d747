from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import InvalidTokenError, UserNotFound, WrongCredentials
from .passwords import PasswordHasher
from .repository import UserRepository
from .schemas import AuthenticationRequest, TokenClaims
from .tokens import ServerSecret, TokenService
from .utils.event_logger import log_auth_event

bearer_scheme = HTTPBearer(auto_error=False)


def authenticate(
    credentials: AuthenticationRequest,
    users: UserRepository,
    hasher: PasswordHasher,
    tokens: TokenService,
    secret: ServerSecret,
    request: Optional[Request] = None,
) -> str:
    """
    Exchange an email and password for a signed bearer token.

    Args:
        credentials: Submitted email and password
        users: User storage
        hasher: Verifies the password against the stored record
        tokens: Signs the identity claims
        secret: Signing key
        request: Incoming request, for the auth event log

    Returns:
        The signed token

    Raises:
        UserNotFound: If no user has that email
        WrongCredentials: If the password does not verify (wrong or malformed record)
    """
    user = users.get_by_email(credentials.email)
    if user is None:
        log_auth_event("user_not_found", credentials.email, request)
        raise UserNotFound("No user matching the given credentials has been found")

    if not hasher.verify(credentials.password, user.password):
        log_auth_event("login_failure", user.email, request, user_id=user.id)
        raise WrongCredentials("Wrong credentials provided")

    # Records made with older Argon2 parameters are upgraded on successful login
    if hasher.needs_rehash(user.password):
        user = users.update_password(user, hasher.hash(credentials.password))
        log_auth_event("password_rehashed", user.email, request, user_id=user.id)

    log_auth_event("login_success", user.email, request, user_id=user.id)
    return tokens.sign(TokenClaims.model_validate(user), secret)


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    """Identity carried by the request's bearer token. No database access."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    state = request.app.state
    try:
        return state.token_service.verify(credentials.credentials, state.secret)
    except InvalidTokenError as exc:
        log_auth_event("token_rejected", None, request)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
