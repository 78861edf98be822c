from .users import UserLifecycleService

__all__ = ["UserLifecycleService"]
