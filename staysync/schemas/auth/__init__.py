from staysync.schemas.auth.auth import *  # noqa: F401,F403
