from app.models.user import User
from app.models.health_history import HealthHistory

__all__ = ["User", "HealthHistory"]
