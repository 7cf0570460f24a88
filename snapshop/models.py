# snapshop/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, Tuple, Literal

Category = Literal["electronics", "fashion", "home"]
Theme = Literal["light", "dark"]


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: str
    price: int
    category: Category
    icon: str


class CartLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    product: Product
    quantity: int = Field(ge=1)

    @property
    def line_total(self) -> int:
        return self.product.price * self.quantity

    def to_storage(self) -> Dict[str, Any]:
        # stored flat: the product's fields plus the quantity
        return {**self.product.model_dump(), "quantity": self.quantity}

    @classmethod
    def from_storage(cls, raw: Dict[str, Any]) -> "CartLine":
        data = dict(raw)
        quantity = data.pop("quantity")
        return cls(product=Product(**data), quantity=quantity)


class FilterState(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = "all"
    query: str = ""


class Account(BaseModel):
    # plaintext password: demo simplification, see snapshop/auth.py
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    email: str
    phone: str
    password: str
    created_at: str = Field(alias="createdAt")


class UserSummary(BaseModel):
    name: str
    email: str
    phone: str


class Session(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_authenticated: bool = Field(alias="isAuthenticated")
    user: UserSummary
    login_time: str = Field(alias="loginTime")


class Toast(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    kind: Literal["success", "error"] = "success"
    expires_at: float


class Redirect(BaseModel):
    model_config = ConfigDict(frozen=True)

    target: Literal["storefront", "login"]
    due_at: float


class Order(BaseModel):
    id: str
    customer: Dict[str, str]
    lines: Tuple[CartLine, ...]
    subtotal: int
    shipping: int
    total: int
    placed_at: str


# ---------------------------
# Form payloads
# ---------------------------
class CheckoutForm(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    zip: str = ""
    country: str = ""


class SignupForm(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    password: str = ""
    confirm_password: str = ""
    terms: bool = False


class LoginForm(BaseModel):
    email: str = ""
    password: str = ""
    remember_me: bool = False


class CartProductIn(BaseModel):
    product_id: int


class QuantityDeltaIn(BaseModel):
    product_id: int
    delta: int


class PasswordIn(BaseModel):
    password: str = ""


class SearchIn(BaseModel):
    query: str = ""


class FilterIn(BaseModel):
    category: str = "all"
