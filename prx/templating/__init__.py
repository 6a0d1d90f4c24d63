"""Branch name pattern matching and template rendering for prx.

This package provides:
- pattern: compile_pattern, parse_branch, expand_pattern
- normalize: remove_consecutive_duplicates, normalize_branch_name
- functions: build_template_functions (humanize, title, lower, upper, ...)
- gotemplate: translate ({{.Name}} action dialect -> Jinja2 source)
- renderer: TemplateRenderer, missing_key_from_error
"""

from prx.templating.pattern import (
    compile_pattern,
    expand_pattern,
    parse_branch,
    placeholder_token,
)
from prx.templating.normalize import (
    normalize_branch_name,
    remove_consecutive_duplicates,
)
from prx.templating.functions import build_template_functions
from prx.templating.gotemplate import translate
from prx.templating.renderer import TemplateRenderer, missing_key_from_error


__all__ = [
    "compile_pattern",
    "expand_pattern",
    "parse_branch",
    "placeholder_token",
    "normalize_branch_name",
    "remove_consecutive_duplicates",
    "build_template_functions",
    "translate",
    "TemplateRenderer",
    "missing_key_from_error",
]
