from pydantic import BaseModel, ConfigDict, Field, field_validator

# Largest value the Integer likes column holds on Postgres (int4).
LIKES_MAX = 2_147_483_647


# --- Blog ---

class BlogBase(BaseModel):
    """Full data shape of a blog; re-run over merged records on update."""

    title: str = Field(min_length=1, max_length=300)
    url: str = Field(min_length=1, max_length=2048)
    author: str | None = Field(None, max_length=150)
    likes: int = Field(0, ge=0, le=LIKES_MAX)

    @field_validator("likes", mode="before")
    @classmethod
    def _default_likes(cls, value):
        # An explicit null counts as "not provided".
        return 0 if value is None else value


class BlogCreate(BlogBase):
    pass


# Fields only the owner may change; ``likes`` is a public counter.
EDITORIAL_FIELDS: frozenset[str] = frozenset({"title", "url", "author"})


class BlogUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    url: str | None = Field(None, min_length=1, max_length=2048)
    author: str | None = Field(None, max_length=150)
    likes: int | None = Field(None, ge=0, le=LIKES_MAX)

    @field_validator("title", "url", "likes")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("field may be omitted but not set to null")
        return value


class BlogResponse(BaseModel):
    id: int
    title: str
    author: str | None
    url: str
    likes: int
    user_id: int
    model_config = ConfigDict(from_attributes=True)


class OwnerProjection(BaseModel):
    """The only part of a user exposed next to a blog in the list view."""

    id: int
    model_config = ConfigDict(from_attributes=True)


class BlogWithOwner(BlogResponse):
    user: OwnerProjection


class BlogSummary(BaseModel):
    id: int
    title: str
    author: str | None
    url: str
    likes: int
    model_config = ConfigDict(from_attributes=True)


# --- User ---

class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    name: str | None = Field(None, max_length=150)
    password: str = Field(min_length=3, max_length=255)


class UserResponse(BaseModel):
    id: int
    username: str
    name: str | None = None
    blogs: list[BlogSummary] = []
    model_config = ConfigDict(from_attributes=True)


# --- Auth ---

class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str
    username: str
    name: str | None = None


class TokenClaims(BaseModel):
    """Identity claim decoded from a verified bearer token."""

    id: int
    username: str | None = None


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_blogs: int
    total_users: int
    total_likes: int
    avg_likes_per_blog: float
    cache_info: dict = {}
