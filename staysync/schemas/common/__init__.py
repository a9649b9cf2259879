from staysync.schemas.common.base import *  # noqa: F401,F403
