"""
Ollama-backed curriculum generator.

Wraps LangChain's OllamaLLM. Every call checks that the Ollama API answers,
then runs the prompt on a worker thread bounded by the configured timeout.
Any error, timeout or empty output surfaces as GenerationFailure so callers
can fall back to template documents.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

import httpx
from langchain_ollama import OllamaLLM as LangChainOllamaLLM

from api.prompt_builders.learning_path import (
    build_branch_prompt,
    build_learning_path_prompt,
    build_prerequisites_prompt,
)
from api.utils.logger import configure_logging, log_request
from learning_engine.errors import GenerationFailure
from learning_engine.generation import CurriculumGenerator

logger = configure_logging()


class OllamaCurriculumGenerator(CurriculumGenerator):
    def __init__(
        self,
        model: str,
        temperature: float = 0.7,
        base_url: str = "http://localhost:11434",
        timeout_seconds: float = 60.0,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        # The wrapper shares a name with the LangChain class, so that one is aliased.
        self._llm = LangChainOllamaLLM(
            model=model,
            temperature=temperature,
            base_url=self.base_url,
            client_kwargs={"timeout": timeout_seconds},
        )

    def generate(self, topic: str, level: str) -> str:
        return self._invoke(build_learning_path_prompt(topic=topic, level=level), f"generate path topic={topic!r}")

    def generate_prerequisites(self, topic: str, level: str) -> str:
        return self._invoke(build_prerequisites_prompt(topic=topic, level=level), f"generate prerequisites topic={topic!r}")

    def generate_branch(self, topic: str, branch_name: str, level: str, main_topic: str) -> str:
        prompt = build_branch_prompt(topic=topic, branch_name=branch_name, level=level, main_topic=main_topic)
        return self._invoke(prompt, f"generate branch name={branch_name!r}")

    def check_available(self) -> None:
        """Raise GenerationFailure when the Ollama API does not answer."""
        try:
            response = httpx.get(f"{self.base_url}/api/tags", timeout=5.0)
        except httpx.HTTPError as e:
            logger.error("Ollama connection check failed: %s. Is Ollama running?", e)
            raise GenerationFailure(f"Cannot connect to Ollama at {self.base_url}") from e
        if response.status_code != 200:
            raise GenerationFailure(f"Ollama API returned status {response.status_code}")

    def _invoke(self, prompt: str, name: str) -> str:
        with log_request(logger, name):
            self.check_available()
            start = time.time()
            executor = ThreadPoolExecutor(max_workers=1)
            future = executor.submit(self._llm.invoke, prompt)
            try:
                text = future.result(timeout=self.timeout_seconds)
            except FutureTimeoutError:
                future.cancel()
                raise GenerationFailure(
                    f"Generation timed out after {self.timeout_seconds}s (model={self.model})"
                ) from None
            except Exception as e:
                raise GenerationFailure(f"Generation failed: {e}") from e
            finally:
                # Do not block on a hung model call.
                executor.shutdown(wait=False)

            elapsed = time.time() - start
            if elapsed > self.timeout_seconds / 2:
                logger.warning("slow generation %.2fs model=%s; consider a smaller model", elapsed, self.model)
            text = text if isinstance(text, str) else str(getattr(text, "content", text) or "")
            if not text.strip():
                raise GenerationFailure("Model returned an empty document")
            return text
