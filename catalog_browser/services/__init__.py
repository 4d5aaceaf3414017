"""Catalog Browser - Services Package

This package contains service modules for external integrations:
- Bookstore REST API client
- HTTP client abstraction
"""
