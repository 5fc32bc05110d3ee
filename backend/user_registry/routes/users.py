"""
User API Routes
Exposes the five user operations over HTTP. All calls go through UserService.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, ConfigDict

from user_registry.errors import InvalidInput, OperationFailed, RecordNotFound
from user_registry.persistence.user_gateway import UserGateway
from user_registry.services.user_service import UserService

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class UserWriteRequest(BaseModel):
    # Left optional so the service reports missing fields with its own messages
    name: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None


class UserCreatedResponse(BaseModel):
    id: int


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    age: int
    created_at: datetime


def get_user_service(request: Request) -> UserService:
    """Build the service over the engine owned by the running app"""
    return UserService(UserGateway(request.app.state.engine))


# ============================================================================
# User CRUD Endpoints
# ============================================================================


@router.post("/users", response_model=UserCreatedResponse, status_code=201)
def create_user(request: UserWriteRequest, service: UserService = Depends(get_user_service)):
    """Create a user and return the id assigned by the store."""
    try:
        user_id = service.create(request.name, request.email, request.age)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    except OperationFailed as e:
        raise HTTPException(status_code=500, detail=str(e))
    return UserCreatedResponse(id=user_id)


@router.get("/users", response_model=List[UserResponse])
def list_users(service: UserService = Depends(get_user_service)):
    """List all users (store-defined order)"""
    try:
        return service.find_all()
    except OperationFailed as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    """Get a user by ID"""
    try:
        user = service.find_by_id(user_id)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    except OperationFailed as e:
        raise HTTPException(status_code=500, detail=str(e))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/users/{user_id}", status_code=204)
def update_user(user_id: int, request: UserWriteRequest, service: UserService = Depends(get_user_service)):
    """
    Replace a user's name, email and age.

    All three fields are required; there is no partial update.
    """
    try:
        service.update_by_id(user_id, request.name, request.email, request.age)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OperationFailed as e:
        raise HTTPException(status_code=500, detail=str(e))
    return Response(status_code=204)


@router.delete("/users/{user_id}", status_code=204)
def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    """Delete a user. The id is never handed out again."""
    try:
        service.delete_by_id(user_id)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OperationFailed as e:
        raise HTTPException(status_code=500, detail=str(e))
    return Response(status_code=204)
