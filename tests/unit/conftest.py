"""
Unit test fixtures. Engine objects only; no HTTP app, no real LLM.
Shared fixtures (sample_path, memory_repository, template_generator) live in tests/conftest.py.
"""
