"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from sitescan.api import app

    uvicorn sitescan.api:app --reload
"""

from sitescan.api.app import app

__all__ = ["app"]
