from staysync.schemas.broadcast.broadcast import *  # noqa: F401,F403
