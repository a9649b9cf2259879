from staysync.repositories.issue.issue_repository import IssueRepository

__all__ = ["IssueRepository"]
