"""Template rendering for announcement messages and URLs.

Templates use {{key}} placeholders against a property map; dotted keys
such as {{project.version}} resolve into nested groups. Missing keys
render as an empty string unless an error label is given, in which case
they raise TemplateError carrying that label.
"""

from __future__ import annotations

from typing import Any, Mapping

from jinja2 import ChainableUndefined, Environment, StrictUndefined
from jinja2.exceptions import TemplateError as JinjaTemplateError

from kerygma_release.errors import TemplateError

# Only {{ }} is markup; block and comment delimiters are set to
# sequences that cannot appear in a message so "{%" and "{#" stay literal.
_OPTIONS: dict[str, Any] = {
    "autoescape": False,
    "keep_trailing_newline": True,
    "block_start_string": "\x00{%",
    "block_end_string": "%}\x00",
    "comment_start_string": "\x00{#",
    "comment_end_string": "#}\x00",
    "line_statement_prefix": None,
    "line_comment_prefix": None,
}

_LENIENT = Environment(undefined=ChainableUndefined, **_OPTIONS)
_STRICT = Environment(undefined=StrictUndefined, **_OPTIONS)


def render(template: str, properties: Mapping[str, Any], error_label: str | None = None) -> str:
    env = _STRICT if error_label else _LENIENT
    try:
        return env.from_string(template).render(dict(properties))
    except JinjaTemplateError as exc:
        raise TemplateError(error_label or "template", exc) from exc
