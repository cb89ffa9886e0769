"""dataconf loaders for agelock configuration.

Configuration is HOCON.  The CLI reads it once, at startup, through
:func:`load_config`; nothing below the runner looks at files or the
environment on its own.
"""

import json
import os
import re
from collections.abc import Mapping
from typing import TypeVar, cast

import dataconf

from agelock.core.config.settings import AgelockConfig

T = TypeVar("T")

ENV_PREFIX = "AGELOCK_"

_HOCON_LITERAL = re.compile(r"^(true|false|null|-?\d+(\.\d+)?)$")


def load_from_file(path: str, config_class: type[T]) -> T:
    """Parse the HOCON file at *path* into *config_class*.

    Example:
        >>> config = load_from_file("agelock.conf", AgelockConfig)
    """
    return cast(T, dataconf.file(path, config_class))


def load_from_string(hocon_str: str, config_class: type[T]) -> T:
    """Parse an inline HOCON document, e.g. ``'{ pure_eval: true }'``."""
    return cast(T, dataconf.string(hocon_str, config_class))


def load_from_env(prefix: str, config_class: type[T]) -> T:
    """Build *config_class* from ``<prefix>FIELD`` variables.

    Nested sections are joined with a double underscore, so the store
    root is ``AGELOCK_STORE__ROOT``.
    """
    return cast(T, dataconf.env(prefix, config_class))


def env_to_hocon(environ: Mapping[str, str], prefix: str = ENV_PREFIX) -> str:
    """Render the ``<prefix>*`` entries of *environ* as a HOCON document.

    ``AGELOCK_STORE__ROOT=/srv/store`` becomes ``store.root = "/srv/store"``.
    Booleans, numbers, ``null`` and ``[...]``/``{...}`` values are kept
    unquoted so dataconf can type them; everything else is a string.
    """
    lines = []
    for name, value in sorted(environ.items()):
        if not name.startswith(prefix) or len(name) == len(prefix):
            continue
        key = ".".join(part.lower() for part in name[len(prefix) :].split("__"))
        raw = value.strip()
        if _HOCON_LITERAL.match(raw) or raw[:1] in ("[", "{"):
            lines.append(f"{key} = {raw}")
        else:
            lines.append(f"{key} = {json.dumps(value)}")
    return "\n".join(lines)


def load_config(path: str | None = None, environ: Mapping[str, str] | None = None) -> AgelockConfig:
    """Pick the configuration source for a CLI run.

    An explicit *path* wins.  Otherwise the ``AGELOCK_*`` entries of
    *environ* (the process environment when omitted) are used, and the
    built-in defaults when there are none.
    """
    if path is not None:
        return load_from_file(path, AgelockConfig)
    document = env_to_hocon(os.environ if environ is None else environ)
    if document:
        return load_from_string(document, AgelockConfig)
    return AgelockConfig()
