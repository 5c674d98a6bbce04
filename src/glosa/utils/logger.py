"""Logger access for glosa modules.

Every module logs under the ``glosa.`` namespace and only at debug level:
annotations dropped above the first anchor, directive errors, rangeFn
failures, inverse searches that find no raw range, per-pass summaries,
render resources created and released, and session shutdown. The library
never installs handlers; a host that wants these records enables
``logging.getLogger("glosa")``.

Example:
    >>> from glosa.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Pass over %d lines", 42)
"""

from __future__ import annotations

import logging

_ROOT = "glosa"


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, moved under ``glosa.`` when outside it.

    >>> get_logger("hostplugin").name
    'glosa.hostplugin'
    >>> get_logger("glosa.parser").name
    'glosa.parser'
    """
    if name != _ROOT and not name.startswith(f"{_ROOT}."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
