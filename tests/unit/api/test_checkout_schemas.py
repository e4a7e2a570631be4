"""Unit tests for the checkout request models."""

import pytest
from pydantic import ValidationError

from app.api.v1.schemas.checkout_schemas import CreateOrderRequest

BASE_ORDER = {
    "token": "tok_0123456789abcdef",
    "customer_name": "Erika Mustermann",
    "customer_email": "erika@example.com",
    "delivery_street": "Lindenweg 5",
    "delivery_postal_code": "20095",
    "delivery_city": "Hamburg",
    "payment_method": "bank_transfer",
}


class TestCustomerEmail:
    """The customer e-mail must be a well-formed address."""

    @pytest.mark.parametrize("email", ["@@@", "erika", "erika@", "@example.com", "erika@@example.com"])
    def test_malformed_addresses_are_rejected(self, email):
        with pytest.raises(ValidationError) as exc_info:
            CreateOrderRequest(**{**BASE_ORDER, "customer_email": email})

        assert exc_info.value.errors()[0]["loc"] == ("customer_email",)

    def test_valid_address_is_kept(self):
        request = CreateOrderRequest(**BASE_ORDER)

        assert request.customer_email == "erika@example.com"


class TestCartSource:
    """Token orders take the cart from the token, direct orders must carry it."""

    def test_token_order_needs_no_cart(self):
        assert CreateOrderRequest(**BASE_ORDER).is_token_order is True

    def test_direct_order_lists_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateOrderRequest(**{**BASE_ORDER, "token": None})

        assert "shop_id" in str(exc_info.value)
        assert "price_per_liter" in str(exc_info.value)
