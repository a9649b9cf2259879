from staysync.models.issue.issue import Issue

__all__ = ["Issue"]
