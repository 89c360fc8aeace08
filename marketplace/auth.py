import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_session
from .models import Cart, CartLine, Product, User
from .schemas import LoginOut, MessageOut, UserLogin, UserOut, UserRegister, UserUpdate
from .security import create_access_token, decode_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/user/login")


# ✅ Проверка токена
async def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session),
) -> User:
    payload = decode_access_token(token)
    email = payload.get("sub") if payload else None
    if not email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized.")

    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized.")
    return user


def require_role(role: str):
    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Only a {role} can do this.")
        return current_user

    return dependency


get_current_buyer = require_role("buyer")
get_current_seller = require_role("seller")


# ✅ Регистрация пользователя
@router.post("/register", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def register_user(payload: UserRegister, session: AsyncSession = Depends(get_session)):
    try:
        result = await session.execute(select(User).where(User.email == payload.email))
        if result.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User with this email already exists.",
            )

        user = User(
            email=payload.email,
            password_hash=get_password_hash(payload.password),
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
            gender=payload.gender,
            location=payload.location,
        )
        session.add(user)
        await session.commit()
    except IntegrityError:
        # unique email violated by a concurrent registration
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists.")
    except SQLAlchemyError:
        logger.exception("Database error while registering %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is temporarily unavailable, try again later.",
        )

    logger.info("Registered %s %s", payload.role, user.id)
    return {"message": "User is registered successfully."}


# ✅ Логин (через JSON)
@router.post("/login", response_model=LoginOut)
async def login_user(payload: UserLogin, session: AsyncSession = Depends(get_session)):
    result = await session.execute(select(User).where(User.email == payload.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid credentials.")

    token = create_access_token({"sub": user.email})
    return {"user": UserOut.model_validate(user), "token": token}


@router.get("/me", response_model=UserOut)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/edit", response_model=MessageOut)
async def edit_user(
    payload: UserUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    current_user.password_hash = get_password_hash(payload.password)
    current_user.first_name = payload.first_name
    current_user.last_name = payload.last_name
    current_user.gender = payload.gender
    current_user.location = payload.location
    await session.commit()
    return {"message": "Profile is updated successfully."}


@router.delete("/delete/account", response_model=MessageOut)
async def delete_account(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id

    # data owned by the account goes first
    if current_user.role == "seller":
        await session.execute(delete(Product).where(Product.seller_id == user_id))
    await session.execute(
        delete(CartLine).where(CartLine.cart_id.in_(select(Cart.id).where(Cart.owner_id == user_id)))
    )
    await session.execute(delete(Cart).where(Cart.owner_id == user_id))
    await session.execute(delete(User).where(User.id == user_id))
    await session.commit()

    logger.info("Deleted account %s", user_id)
    return {"message": "Your account has been permanently deleted."}
