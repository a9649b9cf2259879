from staysync.schemas.expense.expense import *  # noqa: F401,F403
