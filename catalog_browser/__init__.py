"""Catalog Browser - Core Application Package

This package contains the core application modules including:
- Book record model (book.py)
- Catalog snapshot store (catalog.py)
- Query state and query engine (query.py)
- Loading / error / ready view projection (view.py)
- Event-driven browser shell (browser.py)
- CLI interface (main.py)
"""

__version__ = "1.0.0"
