from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from courtside.services import auth_service, user_service
from courtside.schemas import auth_schemas, user_schemas
from courtside.api.dependencies import get_db

router = APIRouter()

@router.post("/register", response_model=user_schemas.UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: user_schemas.UserCreate,
    db: Session = Depends(get_db),
):
    return user_service.create_user(db=db, user_in=user_in)

@router.post("/login", response_model=auth_schemas.Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    # OAuth2 password flow: the "username" field carries the email
    user = user_service.authenticate_user(db, email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": auth_service.issue_token(user), "token_type": "bearer"}
