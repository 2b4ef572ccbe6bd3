"""
Adaptive learning path engine.

Turns a generated curriculum document into an ordered path of steps with
checkpoints, prerequisites and branches; tracks progress and adapts the path
to checkpoint performance.

Import from submodules, e.g.:
    from learning_engine.parser import parse_path_document
    from learning_engine.store import InMemoryPathRepository
"""
