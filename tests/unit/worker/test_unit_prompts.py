# tests/unit/worker/test_unit_prompts.py - v1
"""Tests for worker/prompts.py."""

from __future__ import annotations

from kaiville_research.cache.fingerprint import compute_content_hash
from kaiville_research.storage.models import Article, utcnow
from kaiville_research.worker.prompts import build_formatting_prompt


def _article(**kwargs) -> Article:
    values = dict(
        id="a1",
        title="Tidal Energy",
        category="energy",
        raw_content="Waves move.\nTides turn.",
        content_hash=compute_content_hash("Waves move.\nTides turn."),
        created_at=utcnow(),
    )
    values.update(kwargs)
    return Article(**values)


class TestBuildFormattingPrompt:
    def test_includes_article_fields(self):
        prompt = build_formatting_prompt(_article(template_used="research-paper"))
        assert "- Title: Tidal Energy" in prompt
        assert "- Category: energy" in prompt
        assert "- Template: research-paper" in prompt
        assert "Waves move.\nTides turn." in prompt

    def test_free_form_default(self):
        assert "- Template: free-form" in build_formatting_prompt(_article())

    def test_abstract_optional(self):
        assert "Abstract" not in build_formatting_prompt(_article())
        assert "- Abstract: Short summary" in build_formatting_prompt(
            _article(abstract="Short summary")
        )

    def test_asks_for_json_envelope(self):
        prompt = build_formatting_prompt(_article())
        assert '"formattedContent"' in prompt
        assert '"extractedKeywords"' in prompt
        assert "PRESERVE ALL ORIGINAL TEXT" in prompt

    def test_braces_in_content_survive(self):
        prompt = build_formatting_prompt(_article(raw_content="def f(): return {1: 2}"))
        assert "{1: 2}" in prompt
