from staysync.schemas.system.system_config import *  # noqa: F401,F403
