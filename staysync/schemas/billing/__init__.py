from staysync.schemas.billing.billing import *  # noqa: F401,F403
