# marketplace/shop.py
import logging
import math
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_buyer, get_current_seller, get_current_user
from .database import get_session
from .models import Product, User
from .schemas import (
    BuyerProductListIn,
    MessageOut,
    PaginationIn,
    ProductIn,
    ProductListItem,
    ProductOut,
    ProductId,
    ProductPage,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/product", tags=["product"])

LATEST_PRODUCTS_LIMIT = 6


async def _get_product(session: AsyncSession, product_id: int) -> Product:
    result = await session.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product does not exist.")
    return product


async def _get_owned_product(session: AsyncSession, product_id: int, seller: User) -> Product:
    product = await _get_product(session, product_id)
    if product.seller_id != seller.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not owner of this product.")
    return product


def _apply_values(product: Product, payload: ProductIn) -> None:
    product.name = payload.name
    product.company = payload.company
    product.description = payload.description
    product.price = Decimal(str(payload.price))
    product.category = payload.category
    product.free_shipping = payload.free_shipping
    product.quantity = payload.quantity
    product.color = payload.color
    product.image = payload.image
    product.in_stock = payload.quantity > 0


async def _paginate(session: AsyncSession, conditions: list, page: int, limit: int, newest_first: bool) -> ProductPage:
    query = select(Product).where(*conditions)
    if newest_first:
        query = query.order_by(Product.created_at.desc(), Product.id.desc())
    else:
        query = query.order_by(Product.id)
    result = await session.execute(query.offset((page - 1) * limit).limit(limit))
    products = result.scalars().all()

    total_res = await session.execute(select(func.count(Product.id)).where(*conditions))
    total = total_res.scalar_one()

    return ProductPage(
        products=[ProductListItem.model_validate(p) for p in products],
        total_page=math.ceil(total / limit),
    )


@router.post("/add", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def add_product(
    payload: ProductIn,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_seller),
):
    product = Product(seller_id=current_user.id)
    _apply_values(product, payload)
    session.add(product)
    await session.commit()
    await session.refresh(product)
    logger.info("Seller %s added product %s", current_user.id, product.id)
    return product


@router.delete("/delete/{product_id}", response_model=MessageOut)
async def delete_product(
    product_id: ProductId,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_seller),
):
    product = await _get_owned_product(session, product_id, current_user)
    await session.execute(delete(Product).where(Product.id == product.id))
    await session.commit()
    logger.info("Seller %s deleted product %s", current_user.id, product_id)
    return {"message": "Product deleted successfully."}


@router.get("/details/{product_id}", response_model=ProductOut)
async def get_product_details(
    product_id: ProductId,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return await _get_product(session, product_id)


# список товаров продавца
@router.post("/seller/all", response_model=ProductPage)
async def list_seller_products(
    payload: PaginationIn,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_seller),
):
    conditions = [Product.seller_id == current_user.id]
    if payload.search_text:
        conditions.append(Product.name.icontains(payload.search_text, autoescape=True))
    return await _paginate(session, conditions, payload.page, payload.limit, newest_first=True)


# каталог для покупателя
@router.post("/buyer/all", response_model=ProductPage)
async def list_buyer_products(
    payload: BuyerProductListIn,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_buyer),
):
    conditions = []
    if payload.search_text:
        conditions.append(Product.name.icontains(payload.search_text, autoescape=True))
    if payload.min_price is not None:
        conditions.append(Product.price >= payload.min_price)
    if payload.max_price is not None:
        conditions.append(Product.price <= payload.max_price)
    if payload.category:
        conditions.append(Product.category.in_(payload.category))
    return await _paginate(session, conditions, payload.page, payload.limit, newest_first=False)


@router.put("/edit/{product_id}", response_model=MessageOut)
async def edit_product(
    product_id: ProductId,
    payload: ProductIn,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_seller),
):
    product = await _get_owned_product(session, product_id, current_user)
    _apply_values(product, payload)
    await session.commit()
    logger.info("Seller %s updated product %s", current_user.id, product_id)
    return {"message": "Product updated successfully."}


@router.get("/latest", response_model=List[ProductListItem])
async def latest_products(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    result = await session.execute(
        select(Product).order_by(Product.created_at.desc(), Product.id.desc()).limit(LATEST_PRODUCTS_LIMIT)
    )
    return result.scalars().all()
