from sqlalchemy import (
    Column, Integer, String, Text, Boolean, ForeignKey, DateTime, func, JSON,
    Numeric, CheckConstraint, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship
from .database import Base

# 👤 Пользователь (покупатель или продавец)
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(55), nullable=False)
    last_name = Column(String(55), nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False)              # buyer / seller
    gender = Column(String(20), nullable=True)
    location = Column(String(55), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    products = relationship("Product", back_populates="seller", cascade="all, delete-orphan", passive_deletes=True)
    cart = relationship("Cart", back_populates="owner", uselist=False, cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("role IN ('buyer', 'seller')", name="ck_users_role"),
    )


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(55), nullable=False)
    company = Column(String(55), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)         # 💰 точные деньги
    category = Column(String(50), nullable=False)
    free_shipping = Column(Boolean, nullable=False, default=False)
    seller_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)  # 📦 остаток на складе
    color = Column(JSON, nullable=False, default=list)
    in_stock = Column(Boolean, nullable=False, default=True)
    image = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    seller = relationship("User", back_populates="products", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_nonneg"),
        CheckConstraint("quantity >= 0", name="ck_products_quantity_nonneg"),
        Index("ix_products_category_name", "category", "name"),
        Index("ix_products_seller", "seller_id"),
    )


# 🛒 Корзина: одна на владельца
class Cart(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    owner = relationship("User", back_populates="cart", passive_deletes=True)
    lines = relationship(
        "CartLine", back_populates="cart", order_by="CartLine.id",
        cascade="all, delete-orphan", passive_deletes=True,
    )


class CartLine(Base):
    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    # catalog reference only: price and stock are always read from products
    product_id = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    cart = relationship("Cart", back_populates="lines", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_line_product"),  # 🚫 дубли в корзине
        CheckConstraint("quantity > 0", name="ck_cart_line_quantity_pos"),
        Index("ix_cart_lines_cart", "cart_id"),
    )
