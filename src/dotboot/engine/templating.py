"""
Dotboot Templating Engine

Manifest values (paths, URLs, package names) are Jinja2 templates rendered
against the run's variables: home, user, platform, source_dir, zsh_custom,
plugins_dir and the manifest's own ``vars``.
"""

import os
import re
from typing import Any, Callable, Dict, Optional

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

from dotboot.engine.errors import TemplateError

TEMPLATE_MARKERS = ("{{", "{%")

_UNDEFINED_NAME = re.compile(r"'([^']+)' is undefined")


def _filter_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


FILTERS: Dict[str, Callable[..., Any]] = {
    "bool": _filter_bool,
    "basename": lambda p: os.path.basename(str(p)),
    "dirname": lambda p: os.path.dirname(str(p)),
    "expanduser": lambda p: os.path.expanduser(str(p)),
}


def is_template(value: Any) -> bool:
    """True for strings that contain Jinja2 markup."""
    return isinstance(value, str) and any(m in value for m in TEMPLATE_MARKERS)


def _undefined_name(error: UndefinedError) -> Optional[str]:
    match = _UNDEFINED_NAME.search(str(error))
    return match.group(1) if match else None


class TemplateEngine:
    """
    Renders manifest data.

    Undefined variables are errors, not empty strings: a typo in a
    destination path must never turn into a copy to "/".
    """

    def __init__(self):
        self.env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self.env.filters.update(FILTERS)

    def render(self, value: Any, variables: Dict[str, Any]) -> Any:
        """
        Render one value. Anything that is not a template comes back as is.

        Raises:
            TemplateError: Undefined variable or bad template syntax
        """
        if not is_template(value):
            return value

        try:
            return self.env.from_string(value).render(variables)
        except UndefinedError as e:
            name = _undefined_name(e)
            raise TemplateError(
                f"Undefined variable '{name}'" if name else f"Undefined variable: {e}",
                template=value,
                variable=name,
            )
        except TemplateSyntaxError as e:
            raise TemplateError(f"Template syntax error: {e}", template=value)

    def render_recursive(self, data: Any, variables: Dict[str, Any]) -> Any:
        """Render every string inside nested dicts and lists. Keys stay literal."""
        if isinstance(data, dict):
            return {k: self.render_recursive(v, variables) for k, v in data.items()}
        if isinstance(data, list):
            return [self.render_recursive(item, variables) for item in data]
        return self.render(data, variables)
