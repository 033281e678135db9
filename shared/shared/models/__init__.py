from shared.models.pagination import Meta
from shared.models.user import Authorizer

__all__ = ["Authorizer", "Meta"]
