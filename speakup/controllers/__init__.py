"""FastAPI routers acting as controllers in the MVC architecture."""

from . import auth, candidate

__all__ = ["auth", "candidate"]
