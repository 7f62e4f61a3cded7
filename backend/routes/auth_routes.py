from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_email
from backend.database import get_db
from backend.models.user import ROLES, User
from backend.services import auth_service

router = APIRouter(tags=['auth'])


class RegisterUserRequest(BaseModel):
    name: str = ''
    email: str = ''
    password: str = ''
    initials: str | None = None
    role: str | None = None


class LoginUserRequest(BaseModel):
    email: str = ''
    password: str = ''


class UserProfileResponse(BaseModel):
    id: int
    name: str
    email: str
    initials: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class UserAuthResponse(BaseModel):
    token: str
    userId: int
    name: str
    email: str
    initials: str
    role: str


class LoginResponse(BaseModel):
    status: str
    message: str
    data: UserAuthResponse


def validate_registration(request: RegisterUserRequest) -> None:
    if not request.name.strip() or not request.email.strip() or not request.password.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Name, email, and password are required.',
        )

    if request.role is not None and request.role.strip() and request.role not in ROLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Role must be Admin or User.',
        )


@router.post('', response_model=UserProfileResponse, status_code=status.HTTP_201_CREATED)
def register_user(request: RegisterUserRequest, db: Session = Depends(get_db)):
    validate_registration(request)

    result = auth_service.register_user(
        db,
        name=request.name,
        email=request.email,
        password=request.password,
        initials=request.initials,
        role=request.role,
    )
    if result.status == auth_service.CONFLICT:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.message)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)

    return result.data


@router.post('/loginUser', response_model=LoginResponse)
def login_user(request: LoginUserRequest, db: Session = Depends(get_db)):
    result = auth_service.login_user(db, email=request.email, password=request.password)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)

    return {'status': result.status, 'message': result.message, 'data': result.data}


@router.post('/logout')
def logout_user():
    # Tokens are stateless; the client discards its copy.
    return {'status': auth_service.SUCCESS, 'message': 'Logged out.'}


@router.get('/profile', response_model=UserProfileResponse)
def get_profile(email: str = Depends(get_current_email), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found')
    return user
