from api.config import Settings
from infra.llm.ollama import OllamaCurriculumGenerator
from learning_engine.generation import CurriculumGenerator, TemplateCurriculumGenerator


def build_generator(settings: Settings) -> CurriculumGenerator:
    if settings.use_template_generation:
        return TemplateCurriculumGenerator()

    return OllamaCurriculumGenerator(
        model=settings.ollama_model,
        base_url=settings.ollama_base_url,
        timeout_seconds=settings.generation_timeout_seconds,
    )
