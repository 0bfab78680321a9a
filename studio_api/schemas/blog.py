"""Pydantic schemas for SEO blog post generation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_WORD_COUNT = 2000
DEFAULT_TONE = "Professional and informative"


class BlogRequest(BaseModel):
    """Blog post request body.

    List-like inputs are plain strings as typed into the form: keywords and
    related searches are comma-separated, links and questions one per line.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    topic: str | None = Field(default=None, description="Subject of the post.")
    keywords: str | None = Field(default=None, description="Comma-separated primary keywords.")
    word_count: int | None = Field(default=None, ge=1, description="Target length in words.")
    tone: str | None = Field(default=None, description="Writing tone.")
    internal_links: str | None = Field(default=None, description="Internal links, one per line.")
    people_also_ask: str | None = Field(default=None, description="'People also ask' questions, one per line.")
    related_searches: str | None = Field(default=None, description="Comma-separated related search terms.")
    include_intro: bool = Field(
        default=False,
        description="Cap the introduction at 500 words so it can be used standalone.",
    )


class BlogSections(BaseModel):
    """Sections parsed out of the delimited model output; missing ones are empty."""

    title: str = ""
    meta: str = ""
    slug: str = ""
    intro: str = ""
    body: str = ""
    conclusion: str = ""
    images: str = ""


class BlogPostResponse(BlogSections):
    """Generated blog post: parsed sections plus the raw content."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = Field(default=True)
    full_content: str = Field(..., description="Unparsed model output.")
    word_count: int = Field(..., description="Whitespace-separated token count of full_content.")
