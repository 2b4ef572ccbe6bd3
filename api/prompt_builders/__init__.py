"""
App prompt builders: all prompt content and templates live here; generators receive built prompts.
"""

from api.prompt_builders.learning_path import (
    build_branch_prompt,
    build_learning_path_prompt,
    build_prerequisites_prompt,
)

__all__ = [
    "build_learning_path_prompt",
    "build_prerequisites_prompt",
    "build_branch_prompt",
]
