#!/usr/bin/env python3
"""Smoke run: exercise RestClient against a live RealWorld API server."""

from __future__ import annotations

import logging
import os
import sys

from rest_client import RequestError, RestClient
from rest_client.realworld import (
    LoginUser,
    LoginUserRequest,
    MultipleArticlesResponse,
    NewUser,
    NewUserRequest,
    ProfileResponse,
    TagsResponse,
    UpdateUser,
    UpdateUserRequest,
    UserResponse,
)

BASE_URL = os.getenv("REALWORLD_BASE_URL", "https://api.realworld.io/api/")

passed: list[str] = []
failed: list[tuple[str, str]] = []
skipped: list[tuple[str, str]] = []


def ok(name: str, result: object = None) -> None:
    tag = type(result).__name__ if result is not None else "None"
    print(f"  PASS  {name}  -> {tag}")
    passed.append(name)


def fail(name: str, err: Exception) -> None:
    msg = f"{type(err).__name__}: {err}"[:200]
    print(f"  FAIL  {name}  -> {msg}")
    failed.append((name, msg))


def skip(name: str, reason: str) -> None:
    print(f"  SKIP  {name}  ({reason})")
    skipped.append((name, reason))


def run(name: str, fn, *, allowed: set[int] | None = None):
    """Run fn(), record pass/fail/expected-error."""
    try:
        result = fn()
        ok(name, result)
        return result
    except RequestError as e:
        if allowed and e.status_code in allowed:
            ok(name, e)
        else:
            fail(name, e)
        return None
    except Exception as e:
        fail(name, e)
        return None


def expect_status(name: str, fn, status: int) -> None:
    try:
        result = fn()
    except RequestError as e:
        if e.status_code == status:
            ok(name, e)
        else:
            fail(name, e)
        return
    except Exception as e:
        fail(name, e)
        return
    fail(name, AssertionError(f"expected status {status}, got {result!r}"))


def anonymous_steps(client: RestClient) -> None:
    print("\n=== Anonymous ===")

    tags = run("get tags", lambda: client.get("./tags", response_model=TagsResponse))
    if tags is not None and not tags.tags:
        fail("tags not empty", AssertionError("no tags returned"))

    articles = run(
        "get articles",
        lambda: client.get("./articles", {"limit": 5}, response_model=MultipleArticlesResponse),
    )
    if articles is not None and len(articles.articles) > 5:
        fail("articles limit", AssertionError(f"{len(articles.articles)} articles returned"))

    expect_status("get current user without auth", lambda: client.get("./user"), 401)

    signup = NewUserRequest(user=NewUser(username="foo", email="foo@example.com", password="abc123"))
    expect_status("register duplicate user", lambda: client.post("./users", body=signup), 422)


def authenticated_steps(client: RestClient) -> None:
    print("\n=== Authenticated ===")

    steps = ("login", "get current user", "update user", "get feed", "follow", "unfollow")
    email = os.getenv("REALWORLD_USER_EMAIL")
    password = os.getenv("REALWORLD_USER_PASSWORD")
    if not email or not password:
        for name in steps:
            skip(name, "set REALWORLD_USER_EMAIL and REALWORLD_USER_PASSWORD")
        return

    login = LoginUserRequest(user=LoginUser(email=email, password=password))
    user = run("login", lambda: client.post("./users/login", body=login, response_model=UserResponse))
    if user is None:
        for name in steps[1:]:
            skip(name, "login failed")
        return

    client.auth(f"Token {user.user.token}")
    run("get current user", lambda: client.get("./user", response_model=UserResponse))

    update = UpdateUserRequest(user=UpdateUser(email=email))
    run("update user", lambda: client.put("./user", body=update, response_model=UserResponse))

    run(
        "get feed",
        lambda: client.get("./articles/feed", {"limit": 5}, response_model=MultipleArticlesResponse),
    )

    follow_path = f"./profiles/{os.getenv('REALWORLD_FOLLOW_USERNAME', 'foo')}/follow"
    run("follow", lambda: client.post(follow_path, response_model=ProfileResponse))
    run("unfollow", lambda: client.delete(follow_path, response_model=ProfileResponse))


def main() -> None:
    logging.basicConfig(level=os.getenv("REALWORLD_LOG_LEVEL", "WARNING"))

    with RestClient(BASE_URL) as client:
        anonymous_steps(client)
        authenticated_steps(client)

    print(f"\n{len(passed)} passed, {len(failed)} failed, {len(skipped)} skipped")
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
