# API endpoints
from . import auth, beneficiary, applications, health

__all__ = ["auth", "beneficiary", "applications", "health"]
