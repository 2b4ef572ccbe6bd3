"""Unit tests for progress tracking and path completion."""
import pytest

from learning_engine.checkpoints import evaluate_checkpoint
from learning_engine.errors import NotFoundError
from learning_engine.models import LearningPath
from learning_engine.progress import (
    calculate_progress,
    refresh_completion,
    round_half_up,
    set_step_completed,
    should_take_checkpoint,
)


def complete_all(path):
    for step in path.steps:
        set_step_completed(path, step.id)


def pass_all_checkpoints(path):
    for cp in path.checkpoints:
        evaluate_checkpoint(cp, [0] * len(cp.questions))
    refresh_completion(path)


@pytest.mark.unit
class TestProgress:
    @pytest.mark.parametrize("k", range(0, 11))
    def test_progress_is_rounded_percentage(self, sample_path, k):
        for step in sample_path.steps[:k]:
            set_step_completed(sample_path, step.id)
        assert sample_path.progress == round_half_up(100 * k / 10)

    def test_empty_path_progress_is_zero(self):
        path = LearningPath(topic="Nothing", user_id=1)
        assert calculate_progress(path) == 0
        assert refresh_completion(path) is False
        assert path.completed_at is None

    def test_round_half_up(self):
        assert round_half_up(62.5) == 63
        assert round_half_up(12.5) == 13
        assert round_half_up(33.3) == 33

    def test_unknown_step_raises(self, sample_path):
        with pytest.raises(NotFoundError):
            set_step_completed(sample_path, "missing")

    def test_completion_sets_timestamp(self, sample_path):
        set_step_completed(sample_path, sample_path.steps[0].id)
        assert sample_path.steps[0].completed_at is not None
        assert sample_path.updated_at >= sample_path.created_at


@pytest.mark.unit
class TestPathCompletion:
    def test_steps_alone_do_not_complete_path(self, sample_path):
        complete_all(sample_path)
        assert sample_path.progress == 100
        assert sample_path.completed_at is None

    def test_steps_and_passed_checkpoints_complete_path(self, sample_path):
        complete_all(sample_path)
        pass_all_checkpoints(sample_path)
        assert sample_path.completed_at is not None

    def test_failed_checkpoint_blocks_completion(self, sample_path):
        complete_all(sample_path)
        pass_all_checkpoints(sample_path)
        cp = sample_path.checkpoints[0]
        evaluate_checkpoint(cp, [1] * len(cp.questions))
        refresh_completion(sample_path)
        assert sample_path.completed_at is None

    def test_reopening_step_clears_completion(self, sample_path):
        complete_all(sample_path)
        pass_all_checkpoints(sample_path)
        stamp = sample_path.completed_at

        set_step_completed(sample_path, sample_path.steps[4].id, completed=False)
        assert sample_path.completed_at is None
        assert sample_path.steps[4].completed_at is None

        set_step_completed(sample_path, sample_path.steps[4].id)
        assert sample_path.completed_at is not None
        assert sample_path.completed_at >= stamp

    def test_completed_at_kept_while_complete(self, sample_path):
        complete_all(sample_path)
        pass_all_checkpoints(sample_path)
        stamp = sample_path.completed_at
        refresh_completion(sample_path)
        assert sample_path.completed_at == stamp


@pytest.mark.unit
class TestShouldTakeCheckpoint:
    def test_signals_when_threshold_reached(self, sample_path):
        for step in sample_path.steps[:2]:
            set_step_completed(sample_path, step.id)
        assert should_take_checkpoint(sample_path) is False
        set_step_completed(sample_path, sample_path.steps[2].id)
        assert should_take_checkpoint(sample_path) is True

    def test_moves_to_next_open_checkpoint(self, sample_path):
        for step in sample_path.steps[:3]:
            set_step_completed(sample_path, step.id)
        cp = sample_path.checkpoints[0]
        evaluate_checkpoint(cp, [0] * len(cp.questions))
        assert should_take_checkpoint(sample_path) is False

    def test_no_checkpoints_left(self):
        assert should_take_checkpoint(LearningPath(topic="T", user_id=1)) is False
