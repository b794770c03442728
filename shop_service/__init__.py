"""Storefront backend: catalog, cart, checkout and merchant notifications."""
