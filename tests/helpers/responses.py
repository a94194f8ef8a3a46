"""
Response factories for scripted transports.

Each factory returns the decoded JSON body the API sends for one request,
ready to be queued on a ScriptedTransport.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional


DEFAULT_GENERATOR = "MediaWiki 1.39.3"
DEFAULT_USER = "ExampleBot"
DEFAULT_CSRF = "0123456789abcdef0123456789abcdef+\\"


def siteinfo(generator: str = DEFAULT_GENERATOR, **general: Any) -> Dict[str, Any]:
    """Answer to ``meta=siteinfo&siprop=general``."""
    body = {"sitename": "Test Wiki", "mainpage": "Main Page", "generator": generator}
    body.update(general)
    return {"batchcomplete": True, "query": {"general": body}}


def token(kind: str, value: str) -> Dict[str, Any]:
    """Answer to ``meta=tokens&type=<kind>``."""
    return {"batchcomplete": True, "query": {"tokens": {f"{kind}token": value}}}


def login_result(result: str = "Success", name: str = DEFAULT_USER,
                 reason: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"result": result}
    if result == "Success":
        body["lguserid"] = 42
        body["lgusername"] = name
    if reason:
        body["reason"] = reason
    return {"login": body}


def userinfo(name: str = DEFAULT_USER, user_id: int = 42) -> Dict[str, Any]:
    body: Dict[str, Any] = {"id": user_id, "name": name}
    if user_id == 0:
        body["anon"] = True
    return {"batchcomplete": True, "query": {"userinfo": body}}


def error(code: str, info: str = "Something went wrong") -> Dict[str, Any]:
    """An error payload as the API sends it with HTTP 200."""
    return {"error": {"code": code, "info": info}}


def password_login_script(
    name: str = DEFAULT_USER,
    csrf: str = DEFAULT_CSRF,
    generator: str = DEFAULT_GENERATOR,
) -> List[Dict[str, Any]]:
    """
    The five answers of a successful password login, in request order:
    site information, login token, login, CSRF token, user information.
    """
    return [
        siteinfo(generator),
        token("login", "login-token+\\"),
        login_result("Success", name),
        token("csrf", csrf),
        userinfo(name),
    ]


def list_page(module: str, items: List[Dict[str, Any]],
              cont: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """One page of a ``list=<module>`` query."""
    body: Dict[str, Any] = {"batchcomplete": True, "query": {module: items}}
    if cont is not None:
        body["continue"] = cont
        del body["batchcomplete"]
    return body


def articles(*titles: str, start_id: int = 1) -> List[Dict[str, Any]]:
    return [{"pageid": start_id + i, "ns": 0, "title": t} for i, t in enumerate(titles)]


def watch_entry(title: str, **fields: Any) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "type": "edit",
        "ns": 0,
        "title": title,
        "pageid": 10,
        "revid": 100,
        "old_revid": 99,
        "user": "Alice",
        "timestamp": "2024-01-02T03:04:05Z",
    }
    entry.update(fields)
    return entry


def revisions_page(title: str, revisions: List[Dict[str, Any]],
                   cont: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "query": {"pages": [{"pageid": 7, "ns": 0, "title": title, "revisions": revisions}]},
    }
    if cont is not None:
        body["continue"] = cont
    return body


def missing_page(title: str) -> Dict[str, Any]:
    return {"batchcomplete": True, "query": {"pages": [{"ns": 0, "title": title, "missing": True}]}}
