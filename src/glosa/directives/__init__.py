"""``@annotate-cfg`` directive handling.

The line classifier only recognizes the directive marker; this package parses
the ``[key=value]`` option groups and applies them to the AnnotationConfig of
the running pass.
"""

from glosa.directives.options import (
    OPTION_HANDLERS,
    OptionGroup,
    apply_directive,
    apply_option,
    parse_clamp,
    scan_option_groups,
)

__all__ = [
    "OPTION_HANDLERS",
    "OptionGroup",
    "apply_directive",
    "apply_option",
    "parse_clamp",
    "scan_option_groups",
]
