# apps/domain/prompts/template.py
"""
Prompt Template Manager

Handles loading and rendering versioned prompt templates.
"""
from pathlib import Path

from jinja2 import Environment, FileSystemLoader


class PromptTemplate:
    """
    Manages prompt templates using Jinja2

    Templates are versioned and stored in prompts/{version}/ directories.
    """

    def __init__(self, version: str = "v1.0", brand: str = "Kings Advice"):
        """
        Initialize prompt template manager

        Args:
            version: Template version to use (e.g., "v1.0", "v1.1")
            brand: Firm name the consultant speaks for
        """
        self.version = version
        self.brand = brand

        # Get template directory
        base_dir = Path(__file__).parent
        template_dir = base_dir / version

        if not template_dir.exists():
            raise ValueError(f"Template version {version} not found at {template_dir}")

        # Initialize Jinja2 environment
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=False,  # Don't escape for LLM input
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_system(self) -> str:
        """Render the consultant persona prompt"""
        template = self.env.get_template("system.j2")
        return template.render(brand=self.brand)

    def render_question(self, customer_name: str, question: str) -> str:
        """
        Render the customer's question

        Args:
            customer_name: Name the consultant may address
            question: Free-text business question

        Returns:
            Rendered user prompt string
        """
        template = self.env.get_template("question.j2")
        return template.render(customer_name=customer_name, question=question)

    def build_messages(self, customer_name: str, question: str) -> list:
        """Chat-completion message list for one consulting question"""
        return [
            {"role": "system", "content": self.render_system()},
            {"role": "user", "content": self.render_question(customer_name, question)},
        ]
