"""Learning path generation prompts, one template per learner level."""

from __future__ import annotations

from learning_engine.models import Level, coerce_level
from learning_engine.prompt_builder import build_from_template

# Every template asks for the section grammar learning_engine.parser understands.
FORMAT_BLOCK = """Format the learning path exactly as follows:

# Learning Path: {topic}

## Overview
{overview_hint}

## Prerequisites
- one prerequisite per line

## Learning Journey

### Stage 1: <stage title>
- one concept per line
{stage_hint}

## Resources
- one resource per line (say whether it is a video, book, tool or article)
"""

LEVEL_TEMPLATES = {
    Level.BEGINNER: {
        "system": (
            "You are an educational curriculum designer creating a learning path for a beginner with no prior "
            "knowledge of the subject. Build a strong foundation with gradual progression and prefer practical "
            "understanding over theory."
        ),
        "prefix": "Create a beginner-friendly learning path for the topic: {topic}",
        "overview_hint": "A brief introduction to the topic and why it is valuable to learn.",
        "stage_hint": "Use 3 stages: Fundamentals (3-4 concepts), Core Concepts (4-5), Practical Applications (3-4).",
        "suffix": "Use simple language and avoid jargon.",
    },
    Level.INTERMEDIATE: {
        "system": (
            "You are an educational curriculum designer creating a learning path for someone with intermediate "
            "knowledge of the subject. Build on their foundation with more complex and specialized topics, "
            "balancing theory with projects."
        ),
        "prefix": "Create a comprehensive learning path for someone with basic knowledge of: {topic}",
        "overview_hint": "A substantive introduction to the topic, its importance and applications.",
        "stage_hint": (
            "Use 4 stages: Strengthening Fundamentals (3-4 concepts), Advanced Concepts (5-6), "
            "Specialized Topics (4-5), Practical Implementation (3-4)."
        ),
        "suffix": "Provide a structured progression from review to implementation.",
    },
    Level.ADVANCED: {
        "system": (
            "You are an educational curriculum designer creating a learning path for someone seeking mastery of "
            "the subject. Focus on cutting-edge concepts, current research and sophisticated applications."
        ),
        "prefix": "Design an advanced learning path for someone with strong knowledge of: {topic}",
        "overview_hint": "The current state of the field, recent developments and open questions.",
        "stage_hint": (
            "Use 4 stages: Cutting-Edge Concepts (4-5 concepts), Specialized Methodologies (4-5), "
            "Current Research Areas (3-4), Advanced Implementation (2-3)."
        ),
        "suffix": "Focus on depth, nuance and mastery.",
    },
}

TEMPLATE_PREREQUISITES = """{system}

List the prerequisite knowledge a {level} learner needs before studying: {topic}

## Prerequisites
- one prerequisite per line, each followed by (required), (optional) or nothing when merely recommended
"""

TEMPLATE_BRANCH = """{system}

The learner is following a learning path on "{main_topic}" and wants a specialized branch named "{branch_name}" focused on: {topic}

{format_block}
Keep the branch short: one or two stages, 3-5 concepts in total."""


def build_learning_path_prompt(*, topic: str, level: str) -> str:
    template = LEVEL_TEMPLATES[coerce_level(level)]
    format_block = build_from_template(
        FORMAT_BLOCK,
        topic=topic,
        overview_hint=template["overview_hint"],
        stage_hint=template["stage_hint"],
    )
    return "\n\n".join(
        [
            template["system"],
            build_from_template(template["prefix"], topic=topic),
            format_block,
            template["suffix"],
        ]
    )


def build_prerequisites_prompt(*, topic: str, level: str) -> str:
    lvl = coerce_level(level)
    return build_from_template(
        TEMPLATE_PREREQUISITES,
        system=LEVEL_TEMPLATES[lvl]["system"],
        level=lvl.value,
        topic=topic,
    )


def build_branch_prompt(*, topic: str, branch_name: str, level: str, main_topic: str) -> str:
    lvl = coerce_level(level)
    template = LEVEL_TEMPLATES[lvl]
    format_block = build_from_template(
        FORMAT_BLOCK,
        topic=branch_name,
        overview_hint=f"How {branch_name} extends {main_topic}.",
        stage_hint="",
    )
    return build_from_template(
        TEMPLATE_BRANCH,
        system=template["system"],
        main_topic=main_topic,
        branch_name=branch_name,
        topic=topic,
        format_block=format_block,
    )
