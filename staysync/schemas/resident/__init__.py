from staysync.schemas.resident.resident import *  # noqa: F401,F403
