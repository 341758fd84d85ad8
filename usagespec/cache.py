"""Cache locations and the on-disk scripts extracted from usage shebang files."""

from __future__ import annotations

import hashlib
import os
from collections.abc import Mapping
from pathlib import Path

__all__ = [
    "var_true",
    "home_dir",
    "cache_dir",
    "hash_to_str",
    "script_name",
    "create_script",
]


def _env(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def var_true(key: str, environ: Mapping[str, str] | None = None) -> bool:
    """Return True when the variable is set to ``1`` or ``true``."""
    return _env(environ).get(key) in ("1", "true")


def home_dir(environ: Mapping[str, str] | None = None) -> Path:
    """The user's home directory, falling back to ``/tmp``."""
    home = _env(environ).get("HOME")
    return Path(home) if home is not None else Path("/tmp")


def cache_dir(environ: Mapping[str, str] | None = None) -> Path:
    """The directory where generated scripts are cached."""
    env = _env(environ)
    xdg = env.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg is not None else home_dir(env) / ".cache"
    return base / "usage"


def hash_to_str(value: str | bytes) -> str:
    """A short, stable hexadecimal digest of ``value``."""
    data = value.encode("utf-8") if isinstance(value, str) else value
    digest = hashlib.blake2b(data, digest_size=8).digest()
    return format(int.from_bytes(digest, "big"), "x")


def script_name(script: str | os.PathLike[str], body: str) -> str:
    """File name for the cached copy of ``script`` with the given body."""
    name = Path(script).name
    stem = "".join(
        c.lower() for c in name if c.isascii() and c.isalnum()
    )[:8]
    return f"{stem}-{hash_to_str(body)}"


def create_script(
    script: str | os.PathLike[str],
    body: str,
    directory: str | os.PathLike[str] | None = None,
) -> Path:
    """Write ``body`` as an executable file in the cache and return its path.

    An existing file with the same name is left untouched.
    """
    target_dir = Path(directory) if directory is not None else cache_dir()
    output_path = target_dir / script_name(script, body)
    if not output_path.exists():
        target_dir.mkdir(parents=True, exist_ok=True)
        output_path.write_text(body, encoding="utf-8")
        output_path.chmod(0o755)
    return output_path