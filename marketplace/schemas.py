# marketplace/schemas.py
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional

from fastapi import Path
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

ProductCategory = Literal["grocery", "kitchen", "clothing", "electronics", "furniture", "bakery", "liquor"]
Role = Literal["buyer", "seller"]
Gender = Literal["male", "female", "other"]

# верхняя граница колонок Integer в Postgres
MAX_DB_INT = 2**31 - 1
MAX_PRICE = 99_999_999.99  # Numeric(10, 2)

ProductId = Annotated[int, Path(ge=1, le=MAX_DB_INT)]


class ApiModel(BaseModel):
    # JSON в camelCase, в Python в snake_case
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(BaseModel):
    message: str


# 👤 Пользователь
class UserRegister(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=55)
    last_name: str = Field(..., min_length=1, max_length=55)
    role: Role
    gender: Optional[Gender] = None
    location: Optional[str] = Field(None, max_length=55)


class UserLogin(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(ApiModel):
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=55)
    last_name: str = Field(..., min_length=1, max_length=55)
    gender: Optional[Gender] = None
    location: Optional[str] = Field(None, max_length=55)


class UserOut(ApiModel):
    id: int
    email: EmailStr
    first_name: str
    last_name: str
    role: Role
    gender: Optional[str] = None
    location: Optional[str] = None


class LoginOut(BaseModel):
    user: UserOut
    token: str


# 🛍️ Товар
class ProductIn(ApiModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=55)
    company: str = Field(..., min_length=2, max_length=55)
    price: float = Field(..., ge=0, le=MAX_PRICE)
    category: ProductCategory
    free_shipping: bool = False
    quantity: int = Field(..., ge=1, le=MAX_DB_INT)
    color: List[str] = Field(default_factory=list)
    description: Optional[str] = Field(None, max_length=1000)
    image: Optional[str] = Field(None, max_length=255)

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("color")
    @classmethod
    def _lowercase_colors(cls, v: List[str]) -> List[str]:
        return [c.lower() for c in v]


class ProductOut(ApiModel):
    id: int
    name: str
    company: str
    description: Optional[str] = None
    price: float
    category: str
    free_shipping: bool
    seller_id: int
    quantity: int
    color: List[str] = []
    in_stock: bool
    image: Optional[str] = None
    created_at: Optional[datetime] = None


class ProductListItem(ApiModel):
    id: int
    name: str
    company: str
    price: float
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None


class ProductPage(ApiModel):
    products: List[ProductListItem]
    total_page: int


# 📄 Пагинация
class PaginationIn(ApiModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    page: int = Field(..., ge=1, le=MAX_DB_INT)
    limit: int = Field(..., ge=1, le=MAX_DB_INT)
    search_text: Optional[str] = Field(None, max_length=55)


class BuyerProductListIn(PaginationIn):
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    category: Optional[List[ProductCategory]] = None


# 🛒 Корзина
class Direction(str, Enum):
    increase = "increase"
    decrease = "decrease"

    @property
    def step(self) -> int:
        return 1 if self is Direction.increase else -1


class CartAddRequest(BaseModel):
    quantity: int = Field(..., ge=1, le=MAX_DB_INT)


class CartQuantityUpdate(BaseModel):
    option: Direction


class CartCount(BaseModel):
    count: int


class CartLineOut(ApiModel):
    product_id: int
    order_quantity: int
    available_quantity: int
    image: Optional[str] = None
    name: str
    brand: str
    price: float
    total: float


class CartDataOut(ApiModel):
    cart_data: List[CartLineOut]
    sub_total: str
    grand_total: str
