"""Unit tests for the template generator, path assembly and prompts."""
import pytest

from api.prompt_builders.learning_path import (
    build_branch_prompt,
    build_learning_path_prompt,
    build_prerequisites_prompt,
)
from learning_engine.models import Level
from learning_engine.parser import parse_path_document
from learning_engine.path_builder import build_learning_path
from learning_engine.prerequisites import fallback_prerequisites
from learning_engine.prompt_builder import build_from_template


@pytest.mark.unit
class TestTemplateCurriculumGenerator:
    @pytest.mark.parametrize("level,count", [("beginner", 10), ("intermediate", 10), ("advanced", 9)])
    def test_documents_parse_into_steps(self, template_generator, level, count):
        document = template_generator.generate("Docker", level)
        parsed = parse_path_document(document, "Docker", level)
        assert len(parsed.steps) == count
        assert all("Docker" in s.title for s in parsed.steps)
        assert parsed.prerequisites
        assert any(s.resources for s in parsed.steps)

    def test_main_document_prerequisites_carry_no_markers(self, template_generator):
        parsed = parse_path_document(template_generator.generate("Docker", "advanced"), "Docker", "advanced")
        assert [p.topic for p in parsed.prerequisites] == [
            p.topic for p in fallback_prerequisites("Docker", "advanced")
        ]

    def test_deterministic(self, template_generator):
        assert template_generator.generate("Go", "beginner") == template_generator.generate("Go", "beginner")


@pytest.mark.unit
class TestBuildLearningPath:
    def test_assembles_aggregate(self, sample_document):
        path = build_learning_path("Python", "beginner", 7, sample_document)
        assert path.title == "Learning Path: Python"
        assert path.level == Level.BEGINNER
        assert path.user_id == 7
        assert len(path.steps) == 10
        assert [cp.after_step for cp in path.checkpoints] == [3.0, 6.0, 9.0]
        assert path.tags[:2] == ["Python", "beginner"]
        assert path.raw_content == sample_document
        assert path.progress == 0
        assert path.completed_at is None
        assert path.is_adaptive is True and path.is_public is False

    def test_unparseable_document(self):
        path = build_learning_path("Rust", "advanced", 1, "garbage")
        assert path.steps == [] and path.checkpoints == []
        assert path.description == "A comprehensive learning path for Rust."


@pytest.mark.unit
class TestPrompts:
    def test_build_from_template_missing_keys_empty(self):
        assert build_from_template("Hello {name}{missing}!", name="you") == "Hello you!"
        assert build_from_template("", name="x") == ""

    def test_level_specific_path_prompts(self):
        beginner = build_learning_path_prompt(topic="SQL", level="beginner")
        advanced = build_learning_path_prompt(topic="SQL", level="advanced")
        assert "beginner-friendly" in beginner
        assert "advanced learning path" in advanced
        for prompt in (beginner, advanced):
            assert "## Learning Journey" in prompt
            assert "### Stage 1:" in prompt
            assert "SQL" in prompt

    def test_prerequisites_prompt(self):
        prompt = build_prerequisites_prompt(topic="SQL", level="intermediate")
        assert "## Prerequisites" in prompt and "intermediate" in prompt

    def test_branch_prompt(self):
        prompt = build_branch_prompt(topic="window functions", branch_name="Analytics", level="advanced", main_topic="SQL")
        assert '"SQL"' in prompt and '"Analytics"' in prompt and "window functions" in prompt
