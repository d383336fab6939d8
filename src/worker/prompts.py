# src/worker/prompts.py - v1
"""Prompt for the background formatting job."""

from __future__ import annotations

from kaiville_research.storage.models import Article

_FORMAT_TEMPLATE = """\
You are a formatting assistant for the Kaiville Research Center.

**PRIMARY DIRECTIVE:** PRESERVE ALL ORIGINAL TEXT. Never summarize or remove content.
Your job is to:
1. Improve formatting and structure
2. Extract metadata (keywords, key points)
3. Ensure readability

**Article Details:**
- Title: {title}
- Category: {category}
- Template: {template}
{abstract_line}
**Original Content:**
{raw_content}

**Instructions:**
- Fix formatting issues (headings, lists, code blocks, etc.)
- Preserve ALL original text verbatim
- Add section breaks where appropriate
- Ensure consistent markdown formatting

**Return JSON:**
{{
  "formattedContent": "...the formatted markdown...",
  "suggestedTitle": "...improved title if needed...",
  "extractedKeywords": ["keyword1", "keyword2", "..."]
}}"""


def build_formatting_prompt(article: Article) -> str:
    """Prompt asking the model to reformat an article and answer in JSON."""
    abstract_line = f"- Abstract: {article.abstract}\n" if article.abstract else ""
    return _FORMAT_TEMPLATE.format(
        title=article.title,
        category=article.category,
        template=article.template_used or "free-form",
        abstract_line=abstract_line,
        raw_content=article.raw_content,
    ).strip()
