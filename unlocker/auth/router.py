# unlocker/auth/router.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from unlocker.auth import service as svc
from unlocker.auth.dependencies import CurrentUser, get_current_user
from unlocker.auth.schemas import AuthOut, RefreshIn, RefreshOut, LogoutIn, MessageOut
from unlocker.core.errors import ServiceError, to_http
from unlocker.core.json import UTF8JSONResponse
from unlocker.core.limiter import login_limit, register_limit
from unlocker.db.session import get_session
from unlocker.users import service as users_svc
from unlocker.users.repository import get_by_id, delete_user
from unlocker.users.schemas import UserCreate, UserLogin, UserOut, UsernameCheckOut

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
    default_response_class=UTF8JSONResponse,
)


@router.get("/check-username/{username}", response_model=UsernameCheckOut)
async def check_username(username: str, db: AsyncSession = Depends(get_session)):
    return await users_svc.check_username(db, username)


@router.post(
    "/register",
    response_model=AuthOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(register_limit)],
)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_session)):
    try:
        user = await users_svc.register_user(db, payload)
        tokens = await svc.issue_tokens(db, user)
        await db.commit()
    except ServiceError as e:
        await db.rollback()
        raise to_http(e)

    return {
        "user": user,
        "access_token": tokens.access_token,
        "refresh_token": tokens.refresh_token,
        "message": "User registered successfully",
    }


@router.post("/login", response_model=AuthOut, dependencies=[Depends(login_limit)])
async def login(payload: UserLogin, db: AsyncSession = Depends(get_session)):
    if not payload.username or not payload.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    user = await users_svc.authenticate_user(db, payload.username, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    tokens = await svc.issue_tokens(db, user)
    await db.commit()
    return {
        "user": user,
        "access_token": tokens.access_token,
        "refresh_token": tokens.refresh_token,
        "message": "Login successful",
    }


@router.post("/refresh", response_model=RefreshOut)
async def refresh(payload: RefreshIn, db: AsyncSession = Depends(get_session)):
    try:
        result = await svc.refresh_session(db, payload.refresh_token)
    except ServiceError as e:
        # si el token venció, el service ya lo borró: hay que persistir eso
        await db.commit()
        raise to_http(e)
    await db.commit()
    return {
        "access_token": result.access_token,
        "user": result.user,
        "refresh_token": result.refresh_token,
    }


@router.post("/logout", response_model=MessageOut)
async def logout(payload: LogoutIn, db: AsyncSession = Depends(get_session)):
    await svc.logout(db, payload.refresh_token)
    await db.commit()
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserOut)
async def me(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user = await get_by_id(db, current.id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.delete("/account", response_model=MessageOut)
async def delete_account(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user = await get_by_id(db, current.id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    await delete_user(db, user.id)
    await db.commit()
    return {"message": "Account deleted successfully"}
