"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from pagemeta.api import app

    uvicorn pagemeta.api:app --reload
"""

from pagemeta.api.app import app

__all__ = ["app"]
