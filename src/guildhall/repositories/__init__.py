"""Query construction helpers driven by filter structs."""

from .comment_repo import CommentFilters, build_comment_query
from .post_repo import PostFilters, build_post_query
from .query import LIKE_ESCAPE, contains_pattern, count_rows, fetch_page
from .report_repo import ReportFilters, build_report_query
from .user_repo import UserFilters, build_user_query

__all__ = [
    "LIKE_ESCAPE",
    "CommentFilters",
    "PostFilters",
    "ReportFilters",
    "UserFilters",
    "build_comment_query",
    "build_post_query",
    "build_report_query",
    "build_user_query",
    "contains_pattern",
    "count_rows",
    "fetch_page",
]
