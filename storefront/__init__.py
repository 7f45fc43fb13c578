"""Storefront API: album catalog and purchase intents for the artist site."""
