"""Handlebars rendering of exported stories into Markdown transcripts."""

import json
from collections.abc import Callable
from typing import Any

import pybars


_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class TranscriptError(Exception):
    """Raised when a transcript template fails to compile or render."""


DEFAULT_TRANSCRIPT_TEMPLATE = """\
# {{{playerName}}}, {{{archetype}}}

- Day: {{day}}
- Sanity: {{sanity}}
- Narrator: {{{storyAnalysis.narratorRelationshipLevel}}} ({{narratorRelationship}})
- Dominant trait: {{{storyAnalysis.dominantTrait}}}
- Story complexity: {{storyAnalysis.storyComplexity}}

## Story
{{#if fullLog}}
{{#each fullLog}}
- [{{type}}] {{{content}}}
{{/each}}
{{else}}
_Nothing happened._
{{/if}}

## Places visited
{{#each events}}{{{this}}} {{/each}}

---
{{{ending}}}
"""


# ── Custom Handlebars helpers ────────────────────────────


def _helper_of_type(this, options, entries, entry_type):
    """{{#of_type fullLog "consequence"}}...{{/of_type}}: iterate entries of one log type."""
    result = []
    for entry in entries or []:
        if entry.get("type") == entry_type:
            result.extend(options["fn"](entry))
    return result


def _helper_last(this, options, items, count):
    """{{#last array N}}...{{/last}}: iterate over the last N items."""
    result = []
    for item in list(items or [])[-int(count):]:
        result.extend(options["fn"](item))
    return result


_HELPERS: dict[str, Callable] = {
    "of_type": _helper_of_type,
    "last": _helper_last,
}


def render_transcript(story_data: dict[str, Any] | str, template_str: str | None = None) -> str:
    """Render an exported story (dict or export JSON string) as Markdown."""
    template_str = template_str or DEFAULT_TRANSCRIPT_TEMPLATE
    try:
        context = json.loads(story_data) if isinstance(story_data, str) else story_data
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context, helpers=_HELPERS))
    except Exception as e:
        raise TranscriptError(f"Transcript error: {e}") from e
