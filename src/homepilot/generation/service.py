"""Advise service: generator text in, recovered analysis out."""

from __future__ import annotations

from ..models import GeneratedAnalysis
from ..recovery import interpret_generated
from .base import TextGenerator


def advise(generator: TextGenerator, prompt: str, system_prompt: str | None = None) -> GeneratedAnalysis:
    """Ask ``generator`` for an analysis and recover it into a GeneratedAnalysis.

    Generator errors propagate; retrying is the caller's decision.
    """
    raw = generator.generate(prompt, system_prompt=system_prompt)
    return interpret_generated(raw)
