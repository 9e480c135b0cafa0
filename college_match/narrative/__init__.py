"""Boundary for free-text collaborators: prompts, response parsing, and templated fallbacks."""

from college_match.narrative.explanations import explain_in_batches, generate_explanations
from college_match.narrative.http import HttpTextGenerator, TextGenerator

__all__ = ["HttpTextGenerator", "TextGenerator", "explain_in_batches", "generate_explanations"]
