from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from courtside.core import security
from courtside.api.dependencies import get_db
from courtside.models import user as user_model


def get_current_user(token: str = Depends(security.oauth2_scheme), db: Session = Depends(get_db)) -> user_model.User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token_data = security.verify_token(token, credentials_exception)

    user = db.get(user_model.User, token_data.user_id)
    if user is None:
        raise credentials_exception
    return user


def require_admin(current_user: user_model.User = Depends(get_current_user)) -> user_model.User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")
    return current_user


def issue_token(user: user_model.User) -> str:
    return security.create_access_token(data={"sub": str(user.id), "role": user.role})
