from staysync.services.issue.issue_service import IssueService

__all__ = ["IssueService"]
