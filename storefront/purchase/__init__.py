"""
Purchase package: the simulated purchase endpoint and Stripe checkout
session creation.
"""
