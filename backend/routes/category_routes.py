from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_admin, security
from backend.database import get_db
from backend.services import category_service

router = APIRouter(tags=['categories'])


class CategoryRequest(BaseModel):
    name: str = ''
    email: str | None = None


class DeleteCategoryRequest(BaseModel):
    id: int | None = None
    email: str | None = None


class CategoryResponse(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


def validate_category_name(name: str) -> str:
    normalized = name.strip()
    if not normalized:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Category name is required.')
    return normalized


@router.get('', response_model=list[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return category_service.list_categories(db)


@router.get('/{category_id}', response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    category = category_service.get_category(db, category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Category not found')
    return category


@router.post('', response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    request: CategoryRequest,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    require_admin(db, credentials, request.email)
    return category_service.create_category(db, validate_category_name(request.name))


@router.put('/{category_id}', status_code=status.HTTP_204_NO_CONTENT)
def update_category(
    category_id: int,
    request: CategoryRequest,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    require_admin(db, credentials, request.email)
    name = validate_category_name(request.name)

    try:
        category_service.update_category(db, category_id, name)
    except category_service.CategoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _delete_category(
    category_id: int | None,
    payload: DeleteCategoryRequest | None,
    credentials: HTTPAuthorizationCredentials | None,
    db: Session,
) -> Response:
    payload = payload or DeleteCategoryRequest()
    require_admin(db, credentials, payload.email)

    category_id = category_id if category_id is not None else payload.id
    if category_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Category id is required.')

    try:
        category_service.delete_category(db, category_id)
    except category_service.CategoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete('', status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    payload: DeleteCategoryRequest | None = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    return _delete_category(None, payload, credentials, db)


@router.delete('/{category_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_category_by_id(
    category_id: int,
    payload: DeleteCategoryRequest | None = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    return _delete_category(category_id, payload, credentials, db)
