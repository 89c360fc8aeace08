# marketplace/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from . import cart_store
from .auth import get_current_buyer
from .database import get_session
from .models import User
from .reconciler import format_money
from .schemas import (
    CartAddRequest,
    CartCount,
    CartDataOut,
    CartLineOut,
    CartQuantityUpdate,
    MessageOut,
    ProductId,
)

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("/add/{product_id}", response_model=MessageOut)
async def add_to_cart(
    product_id: ProductId,
    payload: CartAddRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_buyer),
):
    await cart_store.add_line(session, current_user.id, product_id, payload.quantity)
    return {"message": "Item is added to cart successfully."}


@router.get("/count", response_model=CartCount)
async def get_cart_count(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_buyer),
):
    return {"count": await cart_store.count_lines(session, current_user.id)}


@router.get("/data", response_model=CartDataOut)
async def get_cart_data(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_buyer),
):
    totals = await cart_store.price_cart(session, current_user.id)
    return CartDataOut(
        cart_data=[
            CartLineOut(
                product_id=line.product_id,
                order_quantity=line.order_quantity,
                available_quantity=line.available_quantity,
                image=line.image,
                name=line.name,
                brand=line.brand,
                price=line.price,
                total=line.total,
            )
            for line in totals.lines
        ],
        sub_total=format_money(totals.sub_total),
        grand_total=format_money(totals.grand_total),
    )


@router.put("/remove-item/{product_id}", response_model=MessageOut)
async def remove_cart_item(
    product_id: ProductId,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_buyer),
):
    await cart_store.remove_line(session, current_user.id, product_id)
    return {"message": "Item is removed from cart successfully."}


@router.put("/update/quantity/{product_id}", response_model=MessageOut)
async def update_cart_quantity(
    product_id: ProductId,
    payload: CartQuantityUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_buyer),
):
    await cart_store.adjust_line(session, current_user.id, product_id, payload.option)
    return {"message": "Item quantity is updated successfully."}
