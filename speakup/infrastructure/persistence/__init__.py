from .repositories_sqlalchemy import SQLAlchemyCandidateStore

__all__ = ["SQLAlchemyCandidateStore"]
