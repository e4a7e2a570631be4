"""
Checkout services package.

Token issuance and resolution, order creation, the instant and manual
processing pipelines and the read-only storefront projections.
"""
