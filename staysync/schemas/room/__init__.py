from staysync.schemas.room.room import *  # noqa: F401,F403
