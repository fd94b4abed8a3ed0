"""Repository interfaces and implementations.

This package defines the abstract bookmark repository and its concrete
implementations, such as the SQLite adapter under :mod:`repositories.sqlite`.
"""
