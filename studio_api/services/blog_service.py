"""SEO blog post generation service.

Builds a templated prompt from the request, asks the text model for a post in
a delimited section format (``---TITLE---`` ... ``---IMAGES---``) and parses
the sections back out.
"""

from __future__ import annotations

import logging
import re

from studio_api.adapters.llm.base import AbstractLLMClient
from studio_api.core.errors import ValidationAppError
from studio_api.schemas.blog import (
    DEFAULT_TONE,
    DEFAULT_WORD_COUNT,
    BlogPostResponse,
    BlogRequest,
    BlogSections,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert SEO content writer who creates comprehensive, engaging blog posts "
    "optimized for search engines while maintaining natural, human readability."
)

# Each section runs until the blank line preceding the next delimiter
_SECTION_PATTERNS: dict[str, re.Pattern[str]] = {
    name: re.compile(rf"---{name.upper()}---\n(.*?)\n\n---", re.S)
    for name in ("title", "meta", "slug", "intro", "body", "conclusion")
}
_IMAGES_PATTERN = re.compile(r"---IMAGES---\n(.*?)$", re.S)


def _split_commas(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",")]


def _split_lines(value: str | None) -> list[str]:
    if not value:
        return []
    return [line for line in value.split("\n") if line.strip()]


def build_blog_prompt(request: BlogRequest) -> str:
    """Render the SEO blog prompt for a request.

    Optional blocks (people-also-ask questions, related searches, internal
    links) are only included when the request provides them.

    Args:
        request: Validated blog request.

    Returns:
        Prompt string for the text model.
    """
    keywords = _split_commas(request.keywords)
    questions = _split_lines(request.people_also_ask)
    related_terms = _split_commas(request.related_searches)
    links = _split_lines(request.internal_links)

    word_count = request.word_count or DEFAULT_WORD_COUNT
    tone = request.tone or DEFAULT_TONE
    intro_guidance = (
        "MAXIMUM 500 words - this will be used separately" if request.include_intro else "300-400 words"
    )
    intro_length = "MAX 500 words" if request.include_intro else "300-400 words"

    prompt = f"""You are an expert SEO blog writer. Write a comprehensive, engaging blog post with the following specifications:

TOPIC: {request.topic}

PRIMARY KEYWORDS: {", ".join(keywords)}

TARGET WORD COUNT: {word_count} words

TONE: {tone}

STRUCTURE REQUIREMENTS:
1. SEO-optimized title (include primary keyword, make it compelling)
2. Meta description (150-160 characters, include primary keyword)
3. URL slug (lowercase, hyphens, keyword-rich)
4. Introduction ({intro_guidance})
5. Main body with H2 and H3 headings
6. Conclusion with strong call-to-action

"""

    if questions:
        numbered = "\n".join(f"{i}. {q}" for i, q in enumerate(questions, start=1))
        prompt += f"\nPEOPLE ALSO ASK QUESTIONS (answer these as H2 sections):\n{numbered}\n\n"

    if related_terms:
        prompt += f"\nRELATED SEARCH TERMS (incorporate naturally):\n{', '.join(related_terms)}\n\n"

    if links:
        joined_links = "\n".join(links)
        prompt += f"\nINTERNAL LINKS TO INCLUDE (add contextually, not forced):\n{joined_links}\n\n"

    prompt += f"""
SEO OPTIMIZATION RULES:
- Use primary keywords naturally (2-3% density)
- Include keywords in: title, first paragraph, H2 headings, conclusion
- Use semantic variations and related terms
- Write for humans first, search engines second
- Include actionable takeaways
- Use short paragraphs (2-4 sentences)
- Add transition words for readability

FORMAT:
Return the blog post in this exact structure:

---TITLE---
[Your SEO title here]

---META---
[Your meta description here]

---SLUG---
[your-url-slug-here]

---INTRO---
[Introduction section - {intro_length}]

---BODY---
[Main content with H2 and H3 headings in markdown format]

---CONCLUSION---
[Conclusion with call-to-action]

---IMAGES---
[Suggest 3-5 relevant image ideas with alt text]

Write naturally and engagingly. Provide real value to readers."""

    return prompt


def parse_blog_sections(content: str) -> BlogSections:
    """Extract the delimited sections from model output.

    Missing or malformed sections come back as empty strings.
    """
    values: dict[str, str] = {}
    for name, pattern in _SECTION_PATTERNS.items():
        match = pattern.search(content)
        values[name] = match.group(1).strip() if match else ""

    images = _IMAGES_PATTERN.search(content)
    values["images"] = images.group(1).strip() if images else ""
    return BlogSections(**values)


def count_words(content: str) -> int:
    return len(content.split())


class BlogService:
    """Generates SEO blog posts with a text model."""

    def __init__(self, llm: AbstractLLMClient) -> None:
        self.llm = llm

    @staticmethod
    def validate_request(request: BlogRequest) -> None:
        """Ensure topic and keywords are present.

        Raises:
            ValidationAppError: If either is missing or blank.
        """
        if not (request.topic or "").strip() or not (request.keywords or "").strip():
            raise ValidationAppError(
                code="missing_topic_or_keywords",
                message="Topic and keywords are required",
            )

    async def generate(self, request: BlogRequest) -> BlogPostResponse:
        """Validate, prompt the model and parse the post.

        Raises:
            ValidationAppError: If the request is incomplete.
            LLMAppError: If the text generation call fails.
        """
        self.validate_request(request)

        logger.info(
            "blog.generation_started",
            extra={"topic_chars": len(request.topic or ""), "include_intro": request.include_intro},
        )
        content = await self.llm.generate_text(build_blog_prompt(request), system_prompt=SYSTEM_PROMPT)
        sections = parse_blog_sections(content)

        missing = [name for name, value in sections.model_dump().items() if not value]
        if missing:
            logger.warning("blog.sections_missing", extra={"sections": missing})

        word_count = count_words(content)
        logger.info("blog.generation_completed", extra={"word_count": word_count})

        return BlogPostResponse(
            **sections.model_dump(),
            full_content=content,
            word_count=word_count,
        )
