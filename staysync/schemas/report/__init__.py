from staysync.schemas.report.report import *  # noqa: F401,F403
