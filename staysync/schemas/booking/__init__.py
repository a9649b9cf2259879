from staysync.schemas.booking.booking import *  # noqa: F401,F403
