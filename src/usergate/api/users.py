"""Users API — accounts, sessions and self-service.

Learn: Routes for the user lifecycle:
- GET /users → every user (passwords stripped)
- POST /users → register
- POST /users/login → account/password → session token
- POST /users/logout → pre-expired token (bearer)
- GET /users/status → fresh session token (bearer)
- GET /users/search?id= → one user by query parameter
- GET /users/{id} → one user
- PUT /users/{id} → replace password/name/head (bearer, owner only)
- DELETE /users/{id} → delete own account (bearer, owner only)

Fixed paths (login, logout, status, search) are declared before
/users/{id} so they are not captured by the path parameter.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from usergate.auth.dependencies import (
    CurrentIdentity,
    get_current_user,
    get_store,
    get_token_manager,
)
from usergate.auth.jwt import TokenManager
from usergate.db.store import UserStore
from usergate.schemas.user import (
    DeletedResponse,
    LoginRequest,
    MessageResponse,
    TokenResponse,
    UserCreate,
    UserCreated,
    UserDetail,
    UserList,
    UserSearchResult,
    UserUpdate,
)
from usergate.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(
    request: Request,
    store: UserStore = Depends(get_store),
    tokens: TokenManager = Depends(get_token_manager),
) -> UserService:
    return UserService(store, tokens, bcrypt_rounds=request.app.state.settings.bcrypt_rounds)


# ─── Accounts ───────────────────────────────────────────

@router.get("", response_model=UserList)
async def list_users(svc: UserService = Depends(_svc)):
    return UserList(users=[u.public() for u in svc.list_users()])


@router.post("", response_model=UserCreated, status_code=201)
async def create_user(body: UserCreate, svc: UserService = Depends(_svc)):
    user_id = await svc.register(
        account=body.account,
        password=body.password,
        name=body.name,
        mail=body.mail,
        head=body.head,
    )
    return UserCreated(id=user_id, message="User created")


# ─── Sessions ───────────────────────────────────────────

@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, svc: UserService = Depends(_svc)):
    token = await svc.login(body.account, body.password)
    return TokenResponse(token=token)


@router.post("/logout", response_model=TokenResponse)
async def logout(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Returns an already-expired token. The presented token stays valid."""
    return TokenResponse(token=svc.logout(identity))


@router.get("/status", response_model=TokenResponse)
async def status(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    return TokenResponse(token=svc.refresh(identity))


# ─── Lookups ────────────────────────────────────────────

@router.get("/search", response_model=UserSearchResult)
async def search_user(id: Optional[str] = None, svc: UserService = Depends(_svc)):
    user = svc.search_user(id)
    return UserSearchResult(message="Search succeeded", user=user.public())


@router.get("/{user_id}", response_model=UserDetail)
async def get_user(user_id: str, svc: UserService = Depends(_svc)):
    return UserDetail(user=svc.get_user(user_id).public())


# ─── Self-service ───────────────────────────────────────

@router.put("/{user_id}", response_model=MessageResponse)
async def update_user(
    user_id: str,
    body: UserUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Replace password, name and head of the caller's own record."""
    await svc.update_user(
        identity,
        user_id,
        password=body.password,
        name=body.name,
        head=body.head,
    )
    return MessageResponse(message="User updated")


@router.delete("/{user_id}", response_model=DeletedResponse)
async def delete_user(
    user_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    token = await svc.delete_user(identity, user_id)
    return DeletedResponse(message="User deleted", token=token)
