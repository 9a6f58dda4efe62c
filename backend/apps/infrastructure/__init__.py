# apps/infrastructure/__init__.py
"""
Infrastructure Layer - Cross-Cutting Concerns

This layer handles:
- Dependency injection (container)
- Per-environment service configuration
- Rate limit budgets
"""

__version__ = "1.0.0"
