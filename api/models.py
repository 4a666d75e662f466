"""
API request and response models for the Caprio REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
catalog/models.py, which own the internal domain representation. Route
handlers map between the two.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import User
from catalog.models import Product, WishlistItem

# Deliberately loose: one "@" with something on each side. Deliverability is
# not our problem; the UNIQUE index only needs a stable string.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"

# bcrypt only reads the first 72 bytes of its input.
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
    return value


# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/register.

    Passwords are not whitespace-stripped. The byte cap is checked on the
    UTF-8 encoding, so 40 accented characters (80 bytes) are rejected even
    though they are under 72 characters.
    """

    name: str = Field(default="", max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    """Request body for POST /api/login."""

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str


class UserResponse(BaseModel):
    """Public view of a user. The password hash is never included."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str
    is_admin: bool
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            is_admin=user.is_admin,
            created_at=user.created_at or "",
        )


class MeResponse(BaseModel):
    """Response for GET /api/me."""

    model_config = ConfigDict(frozen=True)

    user: UserResponse


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class ColorSwatch(BaseModel):
    name: str = Field(default="", max_length=100)
    hex: Optional[str] = Field(default=None, max_length=20)


class ProductCreate(BaseModel):
    """Request body for POST /api/admin/products and PUT /api/admin/products/{id}.

    PUT replaces every editable field. rating and reviews are only written
    when supplied, so an edit from the admin form does not reset them.
    """

    name: str = Field(min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    price: float = Field(default=0.0, ge=0)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    reviews: Optional[int] = Field(default=None, ge=0)
    colors: list[ColorSwatch] = Field(default_factory=list, max_length=50)
    images: list[str] = Field(default_factory=list, max_length=50)
    category: str = Field(default="", max_length=100)
    age_group: str = Field(default="", max_length=100)

    def to_product(self) -> Product:
        return Product(
            name=self.name,
            slug=self.slug or None,
            description=self.description,
            price=self.price,
            rating=self.rating or 0.0,
            reviews=self.reviews or 0,
            colors=[c.model_dump() for c in self.colors],
            images=list(self.images),
            category=self.category,
            age_group=self.age_group,
        )

    def update_fields(self) -> dict:
        """Return the column values a full-replacement update should write."""
        fields = {
            "name": self.name,
            "slug": self.slug or None,
            "description": self.description,
            "price": self.price,
            "colors": [c.model_dump() for c in self.colors],
            "images": list(self.images),
            "category": self.category,
            "age_group": self.age_group,
        }
        if self.rating is not None:
            fields["rating"] = self.rating
        if self.reviews is not None:
            fields["reviews"] = self.reviews
        return fields


class ProductResponse(BaseModel):
    """A catalog product with colors and images decoded into lists."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    slug: Optional[str]
    description: Optional[str]
    price: float
    rating: float
    reviews: int
    colors: list[ColorSwatch]
    images: list[str]
    category: str
    age_group: str
    created_at: str

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            slug=product.slug,
            description=product.description,
            price=product.price,
            rating=product.rating,
            reviews=product.reviews,
            colors=[c for c in product.colors if isinstance(c, dict)],
            images=[str(i) for i in product.images],
            category=product.category,
            age_group=product.age_group,
            created_at=product.created_at,
        )


class IdResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int


class SuccessResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True


class SeedResponse(BaseModel):
    """Response for POST /api/admin/seed-demo."""

    model_config = ConfigDict(frozen=True)

    seeded: bool = True
    inserted: int


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------


class WishlistAdd(BaseModel):
    """Request body for POST /api/wishlist."""

    product_id: int = Field(ge=1)


class WishlistItemResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    product_id: int
    name: str
    price: float
    images: list[str]

    @classmethod
    def from_item(cls, item: WishlistItem) -> "WishlistItemResponse":
        return cls(
            id=item.id,
            product_id=item.product_id,
            name=item.name,
            price=item.price,
            images=[str(i) for i in item.images],
        )


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
