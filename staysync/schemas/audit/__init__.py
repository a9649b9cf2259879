from staysync.schemas.audit.audit import *  # noqa: F401,F403
