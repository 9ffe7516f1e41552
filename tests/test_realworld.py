from __future__ import annotations

import json

import httpx

from rest_client import RestClient
from rest_client.realworld import (
    Comment,
    MultipleCommentsResponse,
    NewArticle,
    NewArticleRequest,
    NewComment,
    NewCommentRequest,
    ProfileResponse,
    SingleArticleResponse,
    SingleCommentResponse,
    UpdateArticle,
    UpdateArticleRequest,
    UpdateUser,
    UpdateUserRequest,
    UserResponse,
)

BASE_URL = "https://api.example.com/api/"

JAKE = {"username": "jake", "bio": "I work at statefarm", "image": None, "following": False}
ARTICLE = {
    "slug": "how-to-train-your-dragon",
    "title": "How to train your dragon",
    "description": "Ever wonder how?",
    "body": "You have to believe",
    "tagList": ["dragons"],
    "createdAt": "2016-02-18T03:22:56.637Z",
    "updatedAt": "2016-02-18T03:48:35.824Z",
    "favorited": False,
    "favoritesCount": 0,
    "author": JAKE,
}
COMMENT = {
    "id": 1,
    "createdAt": "2016-02-18T03:22:56.637Z",
    "updatedAt": "2016-02-18T03:22:56.637Z",
    "body": "It takes a Jacobian",
    "author": JAKE,
}


class _Recorder:
    def __init__(self, responses: dict[tuple[str, str], dict]) -> None:
        self.responses = responses
        self.requests: list[tuple[str, str, object]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content.decode()) if request.content else None
        self.requests.append((request.method, request.url.path, body))
        return httpx.Response(200, json=self.responses[(request.method, request.url.path)])


def test_update_user_sends_partial_payload() -> None:
    recorder = _Recorder(
        {("PUT", "/api/user"): {"user": {"email": "foo@example.com", "token": "jwt", "username": "foo"}}}
    )

    with RestClient(BASE_URL, transport=httpx.MockTransport(recorder)) as client:
        payload = UpdateUserRequest(user=UpdateUser(email="foo@example.com"))
        result = client.put("./user", body=payload, response_model=UserResponse)

    assert recorder.requests == [("PUT", "/api/user", {"user": {"email": "foo@example.com"}})]
    assert result.user.email == "foo@example.com"
    assert result.user.bio is None


def test_follow_and_unfollow_return_profiles() -> None:
    path = "/api/profiles/jake/follow"
    recorder = _Recorder(
        {
            ("POST", path): {"profile": {**JAKE, "following": True}},
            ("DELETE", path): {"profile": JAKE},
        }
    )

    with RestClient(BASE_URL, transport=httpx.MockTransport(recorder)) as client:
        followed = client.post("./profiles/jake/follow", response_model=ProfileResponse)
        unfollowed = client.delete("./profiles/jake/follow", response_model=ProfileResponse)

    assert followed.profile.following is True
    assert unfollowed.profile.following is False
    assert recorder.requests == [("POST", path, None), ("DELETE", path, None)]


def test_create_and_update_article() -> None:
    slug_path = "/api/articles/how-to-train-your-dragon"
    recorder = _Recorder(
        {
            ("POST", "/api/articles"): {"article": ARTICLE},
            ("PUT", slug_path): {"article": {**ARTICLE, "title": "Did you train your dragon?"}},
        }
    )

    new_article = NewArticleRequest(
        article=NewArticle(
            title="How to train your dragon",
            description="Ever wonder how?",
            body="You have to believe",
            tag_list=["dragons"],
        )
    )
    update = UpdateArticleRequest(article=UpdateArticle(title="Did you train your dragon?"))

    with RestClient(BASE_URL, transport=httpx.MockTransport(recorder)) as client:
        created = client.post("./articles", body=new_article, response_model=SingleArticleResponse)
        updated = client.put(f"./articles/{created.article.slug}", body=update, response_model=SingleArticleResponse)

    assert recorder.requests[0][2] == {
        "article": {
            "title": "How to train your dragon",
            "description": "Ever wonder how?",
            "body": "You have to believe",
            "tagList": ["dragons"],
        }
    }
    assert recorder.requests[1][2] == {"article": {"title": "Did you train your dragon?"}}
    assert created.article.tag_list == ["dragons"]
    assert updated.article.title == "Did you train your dragon?"
    assert updated.article.author.username == "jake"


def test_add_and_list_comments() -> None:
    comments_path = "/api/articles/how-to-train-your-dragon/comments"
    recorder = _Recorder(
        {
            ("POST", comments_path): {"comment": COMMENT},
            ("GET", comments_path): {"comments": [COMMENT]},
        }
    )

    with RestClient(BASE_URL, transport=httpx.MockTransport(recorder)) as client:
        added = client.post(
            "./articles/how-to-train-your-dragon/comments",
            body=NewCommentRequest(comment=NewComment(body="It takes a Jacobian")),
            response_model=SingleCommentResponse,
        )
        listed = client.get(
            "./articles/how-to-train-your-dragon/comments",
            response_model=MultipleCommentsResponse,
        )

    assert recorder.requests[0][2] == {"comment": {"body": "It takes a Jacobian"}}
    assert isinstance(added.comment, Comment)
    assert added.comment.created_at == "2016-02-18T03:22:56.637Z"
    assert listed.comments == [added.comment]
