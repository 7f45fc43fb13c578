"""
Catalog package for the storefront API.

This package contains the album schemas, the fixed seed data loaded into
the in-memory store, and the read-only routes the front-end uses to
render the album grid and the checkout page. The store itself lives in
``storefront.storage`` so that both the catalog and purchase routes
share one instance.
"""
