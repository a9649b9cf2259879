from staysync.models.user.user import User

__all__ = ["User"]
