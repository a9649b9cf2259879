from staysync.models.room.room import Room

__all__ = ["Room"]
