# apps/domain/prompts/__init__.py
"""
Versioned Jinja2 prompts for the AI advisor
"""
from .template import PromptTemplate

__all__ = ["PromptTemplate"]
