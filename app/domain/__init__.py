"""
Domain layer for the heating-oil checkout service.

This layer contains the business entities of the checkout pipeline and the
pricing rules that apply to them. It has no knowledge of persistence or HTTP.
"""
