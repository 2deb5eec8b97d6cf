"""Database repository layer: one repo per aggregate root."""

from caseflow.db.repositories.case_repo import CaseRepo
from caseflow.db.repositories.comment_repo import CommentRepo
from caseflow.db.repositories.court_repo import CourtRepo
from caseflow.db.repositories.hearing_repo import HearingRepo
from caseflow.db.repositories.notification_repo import NotificationRepo
from caseflow.db.repositories.report_repo import ReportRepo
from caseflow.db.repositories.user_repo import UserRepo

__all__ = [
    "CaseRepo",
    "CommentRepo",
    "CourtRepo",
    "HearingRepo",
    "NotificationRepo",
    "ReportRepo",
    "UserRepo",
]
