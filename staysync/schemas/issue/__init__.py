from staysync.schemas.issue.issue import *  # noqa: F401,F403
