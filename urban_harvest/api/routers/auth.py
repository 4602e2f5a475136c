# urban_harvest/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import SignupIn, LoginIn, CurrentUser
from urban_harvest.services.auth_service import AuthService, InvalidCredentials
from urban_harvest.services.rate_limiter import LoginRateLimiter, get_login_limiter

router = APIRouter(prefix="/auth", tags=["auth"])


def get_service(db: Session):
    return AuthService(db)


@router.post("/signup", status_code=201)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.signup(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/login")
def login(
    payload: LoginIn,
    request: Request,
    db: Session = Depends(get_db),
    limiter: LoginRateLimiter = Depends(get_login_limiter),
):
    """
    Logs a customer or an administrator in.
    Failed attempts are counted per client address; a success resets the count.
    """
    client_id = request.client.host if request.client else "unknown"
    if limiter.is_blocked(client_id):
        raise HTTPException(
            status_code=429,
            detail="Too many login attempts. Please wait 5 minutes before trying again.",
        )

    svc = get_service(db)
    try:
        result = svc.login(payload)
    except InvalidCredentials as e:
        limiter.register_failure(client_id)
        raise HTTPException(status_code=401, detail=str(e))
    except ValueError as e:
        limiter.register_failure(client_id)
        raise HTTPException(status_code=400, detail=str(e))

    limiter.reset(client_id)
    return result


@router.get("/me")
def me(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.me(user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
