"""
Text generation capability.

CurriculumGenerator is the contract the engine depends on; implementations
return raw documents in the section grammar understood by
learning_engine.parser and raise GenerationFailure on any error or timeout.

- TemplateCurriculumGenerator: deterministic documents, no external calls
  (reduced-dependency mode and the fallback source for failed generations).
- infra.llm.ollama.OllamaCurriculumGenerator: live model adapter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from learning_engine.branches import fallback_branch_titles
from learning_engine.models import Importance, Level, coerce_level
from learning_engine.prerequisites import fallback_prerequisites


class CurriculumGenerator(ABC):
    """
    Defines the contract for all curriculum text sources.
    """
    @abstractmethod
    def generate(self, topic: str, level: str) -> str:
        """Full learning path document for topic/level."""
        raise NotImplementedError

    @abstractmethod
    def generate_prerequisites(self, topic: str, level: str) -> str:
        """Document whose `## Prerequisites` section lists what to know first."""
        raise NotImplementedError

    @abstractmethod
    def generate_branch(self, topic: str, branch_name: str, level: str, main_topic: str) -> str:
        """Learning path document for a branch of `main_topic`."""
        raise NotImplementedError


STAGE_TEMPLATES: Dict[Level, List[Tuple[str, List[str]]]] = {
    Level.BEGINNER: [
        ("Fundamentals", ["Basic terminology of {topic}", "History and context of {topic}", "Core principles of {topic}"]),
        ("Core Concepts", ["Key building blocks of {topic}", "How {topic} components fit together",
                           "Common patterns in {topic}", "Typical mistakes in {topic}"]),
        ("Practical Applications", ["A first {topic} project", "Using {topic} in everyday problems",
                                    "Reviewing your {topic} work"]),
    ],
    Level.INTERMEDIATE: [
        ("Strengthening Fundamentals", ["Revisiting {topic} foundations", "Mental models for {topic}",
                                        "Terminology refresh for {topic}"]),
        ("Advanced Concepts", ["Design trade-offs in {topic}", "Performance considerations in {topic}",
                               "Testing and validation in {topic}", "Tooling for {topic}"]),
        ("Practical Implementation", ["A medium-sized {topic} project", "Debugging {topic} solutions",
                                      "Sharing {topic} work with others"]),
    ],
    Level.ADVANCED: [
        ("Cutting-Edge Concepts", ["Current research in {topic}", "Emerging techniques in {topic}",
                                   "Open problems in {topic}"]),
        ("Specialized Methodologies", ["Formal methods for {topic}", "Scaling {topic} systems",
                                       "Evaluating {topic} approaches"]),
        ("Advanced Implementation", ["An integrated {topic} capstone", "Contributing to {topic} communities",
                                     "Teaching {topic} to others"]),
    ],
}

RESOURCE_TEMPLATES = [
    "Introductory video course on {topic}",
    "Reference book covering {topic}",
    "Interactive practice tool for {topic}",
    "Community articles about {topic}",
]


class TemplateCurriculumGenerator(CurriculumGenerator):
    """Deterministic documents built from fixed templates. Never fails."""

    def generate(self, topic: str, level: str) -> str:
        level = coerce_level(level)
        lines = [
            f"# Learning Path: {topic}",
            "",
            "## Overview",
            f"This learning path guides {level.value} learners through {topic}, "
            "from the fundamentals to practical applications.",
            "",
            self._prerequisites_section(topic, level, markers=False),
            "",
            "## Learning Journey",
        ]
        for idx, (stage, items) in enumerate(STAGE_TEMPLATES[level], start=1):
            lines.append("")
            lines.append(f"### Stage {idx}: {stage}")
            lines.extend(f"- {item.format(topic=topic)}" for item in items)
        lines.append("")
        lines.append("## Resources")
        lines.extend(f"- {item.format(topic=topic)}" for item in RESOURCE_TEMPLATES)
        return "\n".join(lines) + "\n"

    def generate_prerequisites(self, topic: str, level: str) -> str:
        return f"# Prerequisites for {topic}\n\n{self._prerequisites_section(topic, coerce_level(level))}\n"

    def generate_branch(self, topic: str, branch_name: str, level: str, main_topic: str) -> str:
        titles = fallback_branch_titles(branch_name, level)
        lines = [
            f"# Branch: {branch_name}",
            "",
            "## Overview",
            f"A specialized branch of {main_topic} focusing on {branch_name} ({topic}).",
            "",
            "## Learning Journey",
            "",
            f"### Stage 1: {branch_name}",
        ]
        lines.extend(f"- {title}" for title in titles)
        return "\n".join(lines) + "\n"

    @staticmethod
    def _prerequisites_section(topic: str, level: Level, markers: bool = True) -> str:
        # Importance markers are only read from prerequisite documents.
        lines = ["## Prerequisites"]
        for prereq in fallback_prerequisites(topic, level):
            marker = "" if not markers or prereq.importance == Importance.RECOMMENDED else f" ({prereq.importance.value})"
            lines.append(f"- {prereq.topic}{marker}")
        return "\n".join(lines)
