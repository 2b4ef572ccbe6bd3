"""
Document parser: turns one generated curriculum document into a provisional
{description, prerequisites, ordered steps, tags} structure.

Recognised grammar (loose, markdown-like):

    ## Overview
    free text -> description
    ## Prerequisites
    - item -> Prerequisite (importance: recommended)
    ## Learning Journey
    ### Stage 1: <title>
    - item -> Step (order 1, 2, ... in encounter order)
    ## Resources
    - item -> Resource, distributed round-robin over the steps

The parser never raises. Missing sections yield empty content; anything
unexpected yields the default structure.
"""

from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel, Field

from api.utils.logger import configure_logging
from learning_engine.errors import ParsingFailure
from learning_engine.models import Importance, Prerequisite, Resource, ResourceKind, Step

logger = configure_logging()

SECTION_RE = re.compile(r"^##(?!#)\s*(.+?)\s*$", re.MULTILINE)
STAGE_RE = re.compile(r"^###\s*Stage\s+\d+\s*:\s*(.+?)\s*$", re.MULTILINE)
LIST_ITEM_RE = re.compile(r"^\s*-\s+(.+?)\s*$", re.MULTILINE)

DEFAULT_STEP_MINUTES = 30

# Checked in order; first keyword hit wins.
RESOURCE_KEYWORDS = (
    (ResourceKind.VIDEO, ("video", "youtube", "course")),
    (ResourceKind.BOOK, ("book", "ebook")),
    (ResourceKind.TOOL, ("tool", "software", "platform")),
)


class ParsedPath(BaseModel):
    description: str
    steps: List[Step] = Field(default_factory=list)
    prerequisites: List[Prerequisite] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


def default_description(topic: str) -> str:
    return f"A comprehensive learning path for {topic}."


def default_parsed_path(topic: str, level: str) -> ParsedPath:
    return ParsedPath(
        description=default_description(topic),
        steps=[],
        prerequisites=[],
        tags=unique_tags([topic, level]),
    )


def unique_tags(tags: List[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for tag in tags:
        if tag and tag not in seen:
            seen.add(tag)
            out.append(tag)
    return out


def split_sections(content: str) -> dict[str, str]:
    """Map lowercased `## ` heading titles to their bodies. First occurrence wins."""
    sections: dict[str, str] = {}
    matches = list(SECTION_RE.finditer(content))
    for idx, m in enumerate(matches):
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(content)
        title = m.group(1).strip().lower()
        sections.setdefault(title, content[m.end():end].strip())
    return sections


def find_section(sections: dict[str, str], *, exact: str = "", prefix: str = "", suffix: str = "") -> Optional[str]:
    for title, body in sections.items():
        if exact and title == exact:
            return body
        if prefix and title.startswith(prefix):
            return body
        if suffix and title.endswith(suffix):
            return body
    return None


def list_items(text: str) -> List[str]:
    return [item for item in LIST_ITEM_RE.findall(text or "") if item]


def build_prerequisite(text: str) -> Prerequisite:
    return Prerequisite(topic=text, description=text, importance=Importance.RECOMMENDED, resource_url="")


def classify_resource(text: str) -> ResourceKind:
    lower = text.lower()
    for kind, keywords in RESOURCE_KEYWORDS:
        if any(k in lower for k in keywords):
            return kind
    return ResourceKind.ARTICLE


def parse_stages(journey: str) -> List[tuple[str, List[str]]]:
    """Return (stage title, list items) pairs in document order."""
    stages: List[tuple[str, List[str]]] = []
    headers = list(STAGE_RE.finditer(journey))
    for idx, h in enumerate(headers):
        end = headers[idx + 1].start() if idx + 1 < len(headers) else len(journey)
        stages.append((h.group(1).strip(), list_items(journey[h.end():end])))
    return stages


def build_step(title: str, stage_title: str, order: int) -> Step:
    return Step(
        title=title,
        description=f"Learn about {title} as part of {stage_title}.",
        content=f"## {title}\n\nThis step covers {title} as part of the {stage_title} stage.",
        order=float(order),
        estimated_minutes=DEFAULT_STEP_MINUTES,
    )


def _parse(content: str, topic: str, level: str) -> ParsedPath:
    if not isinstance(content, str):
        raise ParsingFailure(f"expected text document, got {type(content).__name__}")

    sections = split_sections(content)

    overview = find_section(sections, exact="overview")
    description = overview if overview else default_description(topic)

    prerequisites = [
        build_prerequisite(item)
        for item in list_items(find_section(sections, exact="prerequisites") or "")
    ]

    steps: List[Step] = []
    stage_titles: List[str] = []
    journey = find_section(sections, suffix="learning journey") or ""
    for stage_title, items in parse_stages(journey):
        stage_titles.append(stage_title)
        for item in items:
            steps.append(build_step(item, stage_title, len(steps) + 1))

    resources = find_section(sections, prefix="resources")
    if resources and steps:
        for idx, item in enumerate(list_items(resources)):
            steps[idx % len(steps)].resources.append(
                Resource(title=item, url="", kind=classify_resource(item), description=item)
            )

    tags = unique_tags([topic, level] + [t.lower() for t in stage_titles])
    return ParsedPath(description=description, steps=steps, prerequisites=prerequisites, tags=tags)


def parse_path_document(content: Optional[str], topic: str, level: str) -> ParsedPath:
    """Parse a generated curriculum document. Never raises."""
    level = getattr(level, "value", level)
    if not content:
        return default_parsed_path(topic, level)
    try:
        return _parse(content, topic, level)
    except Exception as e:
        logger.warning("parsing failure topic=%s level=%s: %s", topic, level, e)
        return default_parsed_path(topic, level)
