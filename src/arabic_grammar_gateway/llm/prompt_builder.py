"""
Prompt builder for generation requests.

Renders the Jinja2 templates under ``llm/templates`` (or a directory given
by PROMPT_TEMPLATES_DIR). One template per endpoint; closed vocabularies are
passed in as context so the prompt always lists the values the validator
will accept.
"""

import json
from pathlib import Path
from typing import Any

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined

logger = structlog.get_logger(__name__)

BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "templates"


class PromptBuilder:
    """
    Build prompt strings from named templates.

    Templates are looked up as ``<name>.j2``. Missing context variables raise
    instead of rendering blanks.
    """

    def __init__(self, templates_dir: Path | str | None = None):
        self.templates_dir = Path(templates_dir) if templates_dir else BUNDLED_TEMPLATES_DIR

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
            autoescape=False,  # Prompts, not HTML
        )
        self.jinja_env.filters["tojson_ar"] = _tojson_unicode

        logger.info("PromptBuilder initialized", templates_dir=str(self.templates_dir))

    def render(self, name: str, **context: Any) -> str:
        """
        Render template ``name`` with ``context``.

        Raises:
            jinja2.TemplateNotFound: Unknown template name
            jinja2.UndefinedError: Missing context variable
        """
        template = self.jinja_env.get_template(f"{name}.j2")
        prompt = template.render(**context).strip()
        logger.debug("Rendered prompt", template=name, prompt_length=len(prompt))
        return prompt


def _tojson_unicode(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)
