"""Seed the database with a demo seller, a demo buyer and a few products.

The script is idempotent: users are looked up by email and products by
(seller, name) before anything is inserted. Tables are created if missing.

Usage:
    python scripts/seed_demo.py

DATABASE_URL is read from the environment (see marketplace/config.py).
"""
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Ensure project root is on sys.path when run as a plain script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import select

from marketplace.database import async_session_maker, create_tables
from marketplace.models import Product, User
from marketplace.security import get_password_hash

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {"email": "seller@example.com", "first_name": "Demo", "last_name": "Seller", "role": "seller"},
    {"email": "buyer@example.com", "first_name": "Demo", "last_name": "Buyer", "role": "buyer"},
]

DEMO_PRODUCTS = [
    {"name": "Basmati Rice 5kg", "company": "Daawat", "price": "12.50", "category": "grocery", "quantity": 40},
    {"name": "Cast Iron Skillet", "company": "Lodge", "price": "29.99", "category": "kitchen", "quantity": 15},
    {"name": "Cotton T-Shirt", "company": "Uniqlo", "price": "9.90", "category": "clothing", "quantity": 100,
     "color": ["white", "black"]},
    {"name": "USB-C Charger 65W", "company": "Anker", "price": "45.00", "category": "electronics", "quantity": 8},
]


async def get_or_create_user(session, data: dict) -> User:
    result = await session.execute(select(User).where(User.email == data["email"]))
    user = result.scalar_one_or_none()
    if user:
        print(f"User exists: {user.email} (id={user.id})")
        return user

    user = User(password_hash=get_password_hash(DEMO_PASSWORD), **data)
    session.add(user)
    await session.flush()
    print(f"Created {user.role}: {user.email} (id={user.id})")
    return user


async def seed() -> None:
    await create_tables()

    async with async_session_maker() as session:
        users = {}
        for data in DEMO_USERS:
            user = await get_or_create_user(session, data)
            users[user.role] = user

        seller = users["seller"]
        for data in DEMO_PRODUCTS:
            result = await session.execute(
                select(Product.id).where(Product.seller_id == seller.id, Product.name == data["name"])
            )
            if result.scalar_one_or_none():
                continue
            session.add(Product(
                seller_id=seller.id,
                name=data["name"],
                company=data["company"],
                price=Decimal(data["price"]),
                category=data["category"],
                quantity=data["quantity"],
                color=data.get("color", []),
                free_shipping=False,
                in_stock=True,
            ))
            print(f"Added product: {data['name']}")

        await session.commit()

    print(f"\nReady. Log in with any demo email and password {DEMO_PASSWORD!r} via POST /user/login")


if __name__ == "__main__":
    asyncio.run(seed())
