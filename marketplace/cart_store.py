# marketplace/cart_store.py
"""
Cart operations against the database.

Every function takes the owner id explicitly; the routers resolve it from
the access token. Writes rely on single-statement updates plus the
(cart_id, product_id) unique constraint, so concurrent requests for the same
line either merge or are retried; nothing here holds a lock.
"""
import logging
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Cart, CartLine, Product
from .reconciler import (
    CartNotFound,
    CartTotals,
    CartWriteConflict,
    CatalogEntry,
    LineNotFound,
    LineRef,
    ProductNotFound,
    QuantityOutOfRange,
    next_quantity,
    price_lines,
)
from .schemas import Direction

logger = logging.getLogger(__name__)

MAX_WRITE_ATTEMPTS = 3


async def get_product_or_raise(session: AsyncSession, product_id: int) -> Product:
    result = await session.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if product is None:
        raise ProductNotFound()
    return product


async def _cart_id(session: AsyncSession, owner_id: int, create: bool = False) -> Optional[int]:
    result = await session.execute(select(Cart.id).where(Cart.owner_id == owner_id))
    cart_id = result.scalar_one_or_none()
    if cart_id is None and create:
        cart = Cart(owner_id=owner_id)
        session.add(cart)
        await session.flush()
        cart_id = cart.id
    return cart_id


async def add_line(session: AsyncSession, owner_id: int, product_id: int, quantity: int) -> None:
    """Merge `quantity` into the owner's line for the product, or append a new line.

    The stock ceiling is not checked here, only `adjust_line` enforces it.
    """
    await get_product_or_raise(session, product_id)

    for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
        try:
            cart_id = await _cart_id(session, owner_id, create=True)
            result = await session.execute(
                update(CartLine)
                .where(CartLine.cart_id == cart_id, CartLine.product_id == product_id)
                .values(quantity=CartLine.quantity + quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                session.add(CartLine(cart_id=cart_id, product_id=product_id, quantity=quantity))
            await session.commit()
            return
        except DataError:
            # merged quantity no longer fits the column
            await session.rollback()
            raise QuantityOutOfRange()
        except IntegrityError:
            # another request created the cart or the line first
            await session.rollback()
            logger.info("Retrying cart add for owner %s, product %s (attempt %s)", owner_id, product_id, attempt)

    logger.warning("Giving up cart add for owner %s, product %s", owner_id, product_id)
    raise CartWriteConflict()


async def remove_line(session: AsyncSession, owner_id: int, product_id: int) -> None:
    await get_product_or_raise(session, product_id)

    cart_id = await _cart_id(session, owner_id)
    if cart_id is None:
        return

    await session.execute(
        delete(CartLine)
        .where(CartLine.cart_id == cart_id, CartLine.product_id == product_id)
        .execution_options(synchronize_session=False)
    )
    await session.commit()


async def adjust_line(session: AsyncSession, owner_id: int, product_id: int, direction: Direction) -> int:
    """Move the line quantity one step within [1, product stock]; returns the new quantity."""
    await get_product_or_raise(session, product_id)

    cart_id = await _cart_id(session, owner_id)
    if cart_id is None:
        raise CartNotFound()

    for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
        result = await session.execute(
            select(CartLine.quantity).where(CartLine.cart_id == cart_id, CartLine.product_id == product_id)
        )
        current = result.scalar_one_or_none()
        if current is None:
            raise LineNotFound()

        # stock is re-read on every attempt too
        result = await session.execute(select(Product.quantity).where(Product.id == product_id))
        available = result.scalar_one_or_none()
        if available is None:
            raise ProductNotFound()

        candidate = next_quantity(current, direction, available)

        # compare-and-set: only applies if nobody changed the line since the read
        result = await session.execute(
            update(CartLine)
            .where(
                CartLine.cart_id == cart_id,
                CartLine.product_id == product_id,
                CartLine.quantity == current,
            )
            .values(quantity=candidate)
            .execution_options(synchronize_session=False)
        )
        await session.commit()
        if result.rowcount == 1:
            return candidate
        logger.info("Cart line changed concurrently for owner %s, product %s (attempt %s)", owner_id, product_id, attempt)

    logger.warning("Giving up quantity update for owner %s, product %s", owner_id, product_id)
    raise CartWriteConflict()


async def count_lines(session: AsyncSession, owner_id: int) -> int:
    result = await session.execute(
        select(func.count(CartLine.id))
        .join(Cart, Cart.id == CartLine.cart_id)
        .where(Cart.owner_id == owner_id)
    )
    return result.scalar_one()


async def price_cart(session: AsyncSession, owner_id: int) -> CartTotals:
    lines_res = await session.execute(
        select(CartLine.product_id, CartLine.quantity)
        .join(Cart, Cart.id == CartLine.cart_id)
        .where(Cart.owner_id == owner_id)
        .order_by(CartLine.id)
    )
    lines = [LineRef(product_id=pid, quantity=qty) for pid, qty in lines_res.all()]
    if not lines:
        return price_lines([], {})

    products_res = await session.execute(
        select(Product).where(Product.id.in_({line.product_id for line in lines}))
    )
    catalog = {
        p.id: CatalogEntry(
            product_id=p.id,
            name=p.name,
            brand=p.company,
            price=p.price,
            available_quantity=p.quantity,
            image=p.image,
        )
        for p in products_res.scalars().all()
    }
    return price_lines(lines, catalog)
