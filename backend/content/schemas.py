# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the content endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from core.schemas import ApiModel


# -- Requests --------------------------------------------------------------


class ServiceCreateRequest(ApiModel):
    title: str = Field(min_length=2, max_length=200)
    description: str = Field(min_length=1)
    short_description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = None
    features: List[str] = []
    starting_price: Optional[Decimal] = Field(None, ge=0)
    sort_order: int = 0


class ProjectCreateRequest(ApiModel):
    title: str = Field(min_length=2, max_length=200)
    description: str = Field(min_length=1)
    client: Optional[str] = None
    location: Optional[str] = None
    category: str = "general"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[Decimal] = Field(None, ge=0)
    is_public: bool = True
    is_featured: bool = False


class ProjectStatusRequest(ApiModel):
    status: str


class BlogCreateRequest(ApiModel):
    title: str = Field(min_length=2, max_length=200)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = None
    tags: List[str] = []
    publish: bool = False


class SettingUpdateRequest(ApiModel):
    value: str
    description: Optional[str] = None
    is_public: Optional[bool] = None


# -- Responses -------------------------------------------------------------


class ServiceRow(ApiModel):
    id: int
    title: str
    slug: str
    description: str
    short_description: Optional[str] = None
    icon: Optional[str] = None
    features: Optional[list] = None
    starting_price: Optional[Decimal] = None
    currency: str
    sort_order: int


class ProjectRow(ApiModel):
    id: int
    title: str
    slug: str
    description: str
    client: Optional[str] = None
    location: Optional[str] = None
    category: str
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    budget: Optional[Decimal] = None
    currency: str
    is_public: bool
    is_featured: bool


class BlogPostRow(ApiModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[list] = None
    status: str
    published_at: Optional[datetime] = None
    views: int
    created_at: datetime
