"""
Pydantic request models for the checkout API.

Required and optional fields are distinguished at the type level so that
missing input is rejected before any store access.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, model_validator

# Fields a direct (token-less) order submission must carry
DIRECT_ORDER_REQUIRED_FIELDS = (
    "shop_id",
    "delivery_first_name",
    "delivery_last_name",
    "product",
    "liters",
    "price_per_liter",
    "delivery_fee",
)


class IssueTokenRequest(BaseModel):
    """Priced cart submitted by the storefront to obtain a checkout token."""

    shop_id: str = Field(..., min_length=1, description="Shop UUID")
    product: str = Field(..., min_length=1, description="Product name")
    liters: float = Field(..., gt=0, description="Quantity in liters")
    price_per_liter: float = Field(..., gt=0, description="Unit price")
    delivery_fee: float = Field(..., ge=0, description="Delivery fee")
    total_amount: float = Field(..., gt=0, description="Quoted total (VAT included)")


class CreateOrderRequest(BaseModel):
    """
    Order submission.

    Either ``token`` is set, in which case the cart comes from the stored
    token, or the cart and shop are given directly.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    token: Optional[str] = Field(None, description="Checkout token to redeem")
    shop_id: Optional[str] = Field(None, description="Shop UUID (direct orders)")

    # Customer
    customer_name: str = Field(..., min_length=1)
    customer_email: EmailStr
    customer_phone: Optional[str] = None

    # Delivery
    delivery_first_name: Optional[str] = None
    delivery_last_name: Optional[str] = None
    delivery_street: str = Field(..., min_length=1)
    delivery_postcode: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("delivery_postcode", "delivery_postal_code")
    )
    delivery_city: str = Field(..., min_length=1)
    delivery_phone: Optional[str] = None

    # Billing
    use_same_address: bool = True
    billing_first_name: Optional[str] = None
    billing_last_name: Optional[str] = None
    billing_street: Optional[str] = None
    billing_postcode: Optional[str] = Field(
        None, validation_alias=AliasChoices("billing_postcode", "billing_postal_code")
    )
    billing_city: Optional[str] = None

    # Cart (direct orders)
    product: Optional[str] = None
    liters: Optional[float] = Field(None, gt=0)
    price_per_liter: Optional[float] = Field(None, gt=0)
    delivery_fee: Optional[float] = Field(None, ge=0)

    payment_method: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("payment_method", "payment_method_id")
    )
    terms_accepted: Optional[bool] = None

    @model_validator(mode="after")
    def validate_cart_source(self):
        """Direct orders must carry the shop, the delivery contact and the cart."""
        if self.token:
            return self

        missing = [name for name in DIRECT_ORDER_REQUIRED_FIELDS if getattr(self, name) in (None, "")]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")
        return self

    @property
    def is_token_order(self) -> bool:
        """True when the cart is taken from a checkout token."""
        return bool(self.token)


class ProcessInstantOrderRequest(BaseModel):
    """Instant processing request."""

    order_id: str = Field(..., min_length=1, description="Order UUID")


class ProcessManualOrderRequest(BaseModel):
    """Manual processing request."""

    order_id: str = Field(..., min_length=1, description="Order UUID")
    temp_order_number: Optional[str] = Field(None, description="Temporary order number")
    bank_account_id: Optional[str] = Field(None, description="Bank account shown to the customer")
