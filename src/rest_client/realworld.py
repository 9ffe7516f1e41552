"""Request and response models for the RealWorld ("Conduit") demo API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RealWorldModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LoginUser(RealWorldModel):
    email: str
    password: str


class LoginUserRequest(RealWorldModel):
    user: LoginUser


class NewUser(RealWorldModel):
    username: str
    email: str
    password: str


class NewUserRequest(RealWorldModel):
    user: NewUser


class User(RealWorldModel):
    email: str
    token: str
    username: str
    bio: str | None = None
    image: str | None = None


class UserResponse(RealWorldModel):
    user: User


class UpdateUser(RealWorldModel):
    email: str | None = None
    token: str | None = None
    username: str | None = None
    bio: str | None = None
    image: str | None = None


class UpdateUserRequest(RealWorldModel):
    user: UpdateUser


class Profile(RealWorldModel):
    username: str
    bio: str | None = None
    image: str | None = None
    following: bool = False


class ProfileResponse(RealWorldModel):
    profile: Profile


class Article(RealWorldModel):
    slug: str
    title: str
    description: str
    body: str | None = None
    tag_list: list[str] = Field(default_factory=list, alias="tagList")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")
    favorited: bool = False
    favorites_count: int = Field(default=0, alias="favoritesCount")
    author: Profile


class SingleArticleResponse(RealWorldModel):
    article: Article


class MultipleArticlesResponse(RealWorldModel):
    articles: list[Article] = Field(default_factory=list)
    articles_count: int = Field(alias="articlesCount")


class NewArticle(RealWorldModel):
    title: str
    description: str
    body: str
    tag_list: list[str] | None = Field(default=None, alias="tagList")


class NewArticleRequest(RealWorldModel):
    article: NewArticle


class UpdateArticle(RealWorldModel):
    title: str | None = None
    description: str | None = None
    body: str | None = None


class UpdateArticleRequest(RealWorldModel):
    article: UpdateArticle


class Comment(RealWorldModel):
    id: int
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")
    body: str
    author: Profile


class SingleCommentResponse(RealWorldModel):
    comment: Comment


class MultipleCommentsResponse(RealWorldModel):
    comments: list[Comment] = Field(default_factory=list)


class NewComment(RealWorldModel):
    body: str


class NewCommentRequest(RealWorldModel):
    comment: NewComment


class TagsResponse(RealWorldModel):
    tags: list[str] = Field(default_factory=list)


class GenericErrorModel(RealWorldModel):
    class Errors(RealWorldModel):
        body: list[str] = Field(default_factory=list)

    errors: Errors
