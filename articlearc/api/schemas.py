# articlearc/api/schemas.py
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel

from articlearc.models import (
    Article,
    ArticleView,
    Interaction,
    InteractionKind,
    InteractionStats,
    User,
    isoformat,
)
from articlearc.stores.base import OBJECT_ID_PATTERN

Tag = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True, to_lower=True, min_length=1, max_length=30
    ),
]
ObjectIdStr = Annotated[str, StringConstraints(pattern=OBJECT_ID_PATTERN)]


class RequestModel(BaseModel):
    model_config = ConfigDict(
        protected_namespaces=(), populate_by_name=True, extra="forbid"
    )


class ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- requests ---------------------------------------------------------------


class RegisterRequestModel(RequestModel):
    username: str = Field(min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9_]+$")
    email: EmailStr
    password: str = Field(min_length=6)
    interests: List[Tag] = Field(default_factory=list, max_length=10)

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not (
            any(ch.islower() for ch in value)
            and any(ch.isupper() for ch in value)
            and any(ch.isdigit() for ch in value)
        ):
            raise ValueError(
                "Password must contain at least one lowercase letter, "
                "one uppercase letter, and one number"
            )
        return value


class LoginRequestModel(RequestModel):
    username: str = Field(min_length=1, description="Username or email address")
    password: str = Field(min_length=1)


class ArticleRequestModel(RequestModel):
    title: str = Field(min_length=5, max_length=200)
    content: str = Field(min_length=50)
    summary: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Optional manual summary (generated when omitted)",
    )
    tags: List[Tag] = Field(default_factory=list, max_length=10)

    @field_validator("title", "content", "summary", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("summary", mode="after")
    @classmethod
    def blank_summary_is_absent(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class InteractionRequestModel(RequestModel):
    article_id: ObjectIdStr = Field(alias="articleId")
    interaction_type: InteractionKind = Field(alias="interactionType")


class PaginationQueryModel(RequestModel):
    page: Optional[int] = Field(default=None, ge=1)
    limit: Optional[int] = Field(default=None, ge=1, le=100)
    offset: Optional[int] = Field(default=None, ge=0)


class InteractionQueryModel(PaginationQueryModel):
    interaction_type: Optional[InteractionKind] = Field(
        default=None, alias="interactionType"
    )
    article_id: Optional[ObjectIdStr] = Field(default=None, alias="articleId")


# --- responses --------------------------------------------------------------


class UserModel(ResponseModel):
    id: str
    username: str
    email: str
    interests: List[str]
    created_at: str

    @classmethod
    def from_domain(cls, user: User) -> "UserModel":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            interests=list(user.interests),
            created_at=isoformat(user.created_at),
        )


class AuthPayloadModel(ResponseModel):
    user: UserModel
    token: str


class ArticleModel(ResponseModel):
    id: str
    title: str
    content: str
    author: str
    summary: str
    tags: List[str]
    created_by: str
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, article: Article) -> "ArticleModel":
        return cls(
            id=article.id,
            title=article.title,
            content=article.content,
            author=article.author,
            summary=article.summary,
            tags=list(article.tags),
            created_by=article.created_by,
            created_at=isoformat(article.created_at),
            updated_at=isoformat(article.updated_at),
        )


class ArticleViewModel(ResponseModel):
    id: str
    title: str
    author: str
    tags: List[str]
    summary: str

    @classmethod
    def from_domain(cls, view: ArticleView) -> "ArticleViewModel":
        return cls(
            id=view.id,
            title=view.title,
            author=view.author,
            tags=list(view.tags),
            summary=view.summary,
        )


class InteractionModel(ResponseModel):
    """Interaction as seen by its owner; the owner reference is never echoed."""

    id: str
    article_id: str
    article: Optional[ArticleViewModel] = None
    interaction_type: InteractionKind
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, interaction: Interaction) -> "InteractionModel":
        return cls(
            id=interaction.id,
            article_id=interaction.article_id,
            article=(
                ArticleViewModel.from_domain(interaction.article)
                if interaction.article is not None
                else None
            ),
            interaction_type=interaction.kind,
            created_at=isoformat(interaction.created_at),
            updated_at=isoformat(interaction.updated_at),
        )


class InteractionStatsModel(ResponseModel):
    total_views: int
    total_likes: int
    total_shares: int

    @classmethod
    def from_domain(cls, stats: InteractionStats) -> "InteractionStatsModel":
        return cls(
            total_views=stats.views,
            total_likes=stats.likes,
            total_shares=stats.shares,
        )


def envelope(message: str, data: Any = None, **extra: Any) -> Dict[str, Any]:
    """Standard success body shared by every endpoint."""
    body: Dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = _dump(data)
    for key, value in extra.items():
        body[key] = _dump(value)
    return body


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value
