from .coverage import REQUIRED_RELEASE_LINES, DialectCoverage
from .responses import (
    DEFAULT_CSRF,
    DEFAULT_GENERATOR,
    DEFAULT_USER,
    articles,
    error,
    list_page,
    login_result,
    missing_page,
    password_login_script,
    revisions_page,
    siteinfo,
    token,
    userinfo,
    watch_entry,
)

__all__ = [
    "DialectCoverage",
    "REQUIRED_RELEASE_LINES",
    "DEFAULT_CSRF",
    "DEFAULT_GENERATOR",
    "DEFAULT_USER",
    "articles",
    "error",
    "list_page",
    "login_result",
    "missing_page",
    "password_login_script",
    "revisions_page",
    "siteinfo",
    "token",
    "userinfo",
    "watch_entry",
]
