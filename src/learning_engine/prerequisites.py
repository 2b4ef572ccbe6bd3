"""
Prerequisite resolution for a topic/level: parse a generated prerequisites
document, or fall back to fixed level-tiered templates.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List

from api.utils.logger import configure_logging
from learning_engine.errors import GenerationFailure
from learning_engine.models import Importance, Level, Prerequisite, coerce_level
from learning_engine.parser import build_prerequisite, find_section, list_items, split_sections

if TYPE_CHECKING:
    from learning_engine.generation import CurriculumGenerator

logger = configure_logging()

RESOURCE_BASE_URL = "https://example.com/learn"

IMPORTANCE_MARKERS = (
    ("(required)", Importance.REQUIRED),
    ("(optional)", Importance.OPTIONAL),
)


def parse_prerequisite_item(text: str) -> Prerequisite:
    """`(required)` / `(optional)` markers set importance; anything else is recommended."""
    for marker, marked in IMPORTANCE_MARKERS:
        if marker in text:
            prereq = build_prerequisite(text.replace(marker, "").strip())
            prereq.importance = marked
            return prereq
    return build_prerequisite(text)


def topic_slug(topic: str) -> str:
    return re.sub(r"\s+", "-", topic.strip().lower())


def fallback_prerequisites(topic: str, level: Level | str) -> List[Prerequisite]:
    level = coerce_level(level)
    base = f"{RESOURCE_BASE_URL}/{topic_slug(topic)}"
    if level == Level.BEGINNER:
        return [
            Prerequisite(
                topic=f"Fundamentals of {topic}",
                description=f"Basic understanding of {topic} concepts",
                importance=Importance.REQUIRED,
                resource_url=f"{base}/basics",
            )
        ]
    if level == Level.INTERMEDIATE:
        return [
            Prerequisite(
                topic=f"Fundamentals of {topic}",
                description=f"Solid understanding of {topic} fundamentals",
                importance=Importance.REQUIRED,
                resource_url=f"{base}/fundamentals",
            ),
            Prerequisite(
                topic=f"Basic {topic} Applications",
                description=f"Experience with basic {topic} applications",
                importance=Importance.RECOMMENDED,
                resource_url=f"{base}/applications",
            ),
        ]
    return [
        Prerequisite(
            topic=f"Advanced {topic} Concepts",
            description=f"Strong understanding of advanced {topic} concepts",
            importance=Importance.REQUIRED,
            resource_url=f"{base}/advanced",
        ),
        Prerequisite(
            topic=f"{topic} Implementation",
            description=f"Experience implementing {topic} in real-world scenarios",
            importance=Importance.REQUIRED,
            resource_url=f"{base}/implementation",
        ),
        Prerequisite(
            topic=f"{topic} Best Practices",
            description=f"Familiarity with {topic} best practices and patterns",
            importance=Importance.RECOMMENDED,
            resource_url=f"{base}/best-practices",
        ),
    ]


def parse_prerequisites(content: str) -> List[Prerequisite]:
    """Prerequisites listed under `## Prerequisites`. Never raises."""
    try:
        section = find_section(split_sections(content or ""), exact="prerequisites")
        return [parse_prerequisite_item(item) for item in list_items(section or "")]
    except Exception as e:
        logger.warning("prerequisite parsing failure: %s", e)
        return []


def identify_prerequisites(
    topic: str,
    level: Level | str,
    generator: "CurriculumGenerator | None",
) -> List[Prerequisite]:
    """
    Prerequisites for `topic` at `level`. Generation or parsing problems
    degrade to the level-tiered templates; never raises.
    """
    level = coerce_level(level)
    if generator is not None:
        try:
            parsed = parse_prerequisites(generator.generate_prerequisites(topic, level.value))
            if parsed:
                return parsed
            logger.warning("generated prerequisites empty topic=%s level=%s; using templates", topic, level.value)
        except GenerationFailure as e:
            logger.warning("prerequisite generation failed topic=%s level=%s: %s", topic, level.value, e)
    return fallback_prerequisites(topic, level)
