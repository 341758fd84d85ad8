"""Word completion for command lines described by a usage spec.

The functions work on spec objects by attribute access:

* commands have ``name``, ``help``, ``aliases``, ``hide`` and a
  ``subcommands`` mapping;
* flags have ``short`` (characters), ``long`` (names), ``help``, ``hide``
  and ``negate``;
* args have ``name`` and ``choices`` (a sequence of strings or None);
* completers have ``run``, ``descriptions`` and ``type_``.
"""

from __future__ import annotations

import os
import re
import subprocess
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import jinja2

__all__ = [
    "CompletionError",
    "USAGE_VERSION",
    "complete_subcommands",
    "complete_long_flag_names",
    "complete_short_flag_names",
    "complete_path",
    "complete_builtin",
    "render_run_template",
    "parse_run_output",
    "complete_arg",
    "format_choices",
    "sh",
]

USAGE_VERSION = "2.1.1"

Choice = tuple[str, str]

_UNESCAPED_COLON = re.compile(r"[^\\]:")


class CompletionError(Exception):
    """Raised when a completer cannot be rendered or run."""


def complete_subcommands(cmd: Any, ctoken: str) -> list[Choice]:
    """Visible subcommand names and aliases starting with ``ctoken``."""
    choices: list[Choice] = []
    for sub in cmd.subcommands.values():
        if sub.hide:
            continue
        help_text = sub.help or ""
        choices.append((sub.name, help_text))
        choices.extend((alias, help_text) for alias in sub.aliases)
    return sorted(c for c in choices if c[0].startswith(ctoken))


def complete_long_flag_names(flags: Mapping[str, Any], ctoken: str) -> list[Choice]:
    """Long flag names (and negations) of visible flags starting with ``ctoken``."""
    unique: dict[str, Choice] = {}
    for flag in flags.values():
        if flag.hide:
            continue
        help_text = flag.help or ""
        candidates = [(f"--{long}", help_text) for long in flag.long]
        if flag.negate is not None:
            candidates.append((flag.negate, ""))
        for name, description in candidates:
            unique.setdefault(name, (name, description))
    return sorted(c for c in unique.values() if c[0].startswith(ctoken))


def complete_short_flag_names(flags: Mapping[str, Any], ctoken: str) -> list[Choice]:
    """Short flag names of visible flags matching the letter after the dash."""
    cur = ctoken[1] if len(ctoken) > 1 else None
    shorts = dict.fromkeys(
        short for flag in flags.values() if not flag.hide for short in flag.short
    )
    return sorted(
        (f"-{c}", "") for c in shorts if cur is None or c == cur
    )


def complete_path(
    base: str | os.PathLike[str],
    ctoken: str,
    predicate: Callable[[Path], bool],
) -> list[str]:
    """Entries next to the partial path ``ctoken`` that satisfy ``predicate``."""
    base = Path(base)
    path = Path(ctoken)
    directory = path.parent
    if not directory.is_absolute():
        directory = base / directory
    prefix = path.name
    if ctoken.endswith("/") and os.path.isdir(ctoken):
        directory = path
        prefix = ""
    try:
        entries = list(directory.iterdir())
    except OSError:
        return []
    names = []
    for entry in entries:
        if not entry.name.startswith(prefix) or not predicate(entry):
            continue
        try:
            names.append(str(entry.relative_to(base)))
        except ValueError:
            names.append(str(entry))
    return sorted(names)


def complete_builtin(
    type_: str, ctoken: str, cwd: str | os.PathLike[str] | None = None
) -> list[Choice]:
    """Completions for the built-in ``path``, ``file`` and ``dir`` types."""
    try:
        base = Path(cwd) if cwd is not None else Path.cwd()
    except OSError:
        return []
    if type_ in ("path", "file"):
        names = complete_path(base, ctoken, lambda _: True)
    elif type_ == "dir":
        names = complete_path(base, ctoken, lambda p: p.is_dir())
    else:
        names = []
    return [(name, "") for name in names]


def render_run_template(run: str, words: Sequence[str], cword: int) -> str:
    """Render a completer's ``run`` template with the command-line words."""
    context: dict[str, Any] = {"words": list(words), "CURRENT": cword}
    if cword > 0:
        context["PREV"] = cword - 1
    env = jinja2.Environment(
        autoescape=False,
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
    )
    try:
        return env.from_string(run).render(context)
    except jinja2.TemplateError as err:
        raise CompletionError(f"invalid completer template {run!r}: {err}") from err


def _lines(text: str) -> Iterable[str]:
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    for part in parts:
        yield part[:-1] if part.endswith("\r") else part


def _unescape(text: str) -> str:
    return text.strip().replace("\\:", ":")


def parse_run_output(stdout: str, ctoken: str, descriptions: bool) -> list[Choice]:
    """Turn a completer's output into choices, splitting ``name:description``."""
    choices: list[Choice] = []
    for line in _lines(stdout):
        if not line.startswith(ctoken):
            continue
        if not descriptions:
            choices.append((line.strip(), ""))
            continue
        match = _UNESCAPED_COLON.search(line)
        if match is None:
            choices.append((_unescape(line), ""))
            continue
        split = match.end() - 1
        name, rest = line[:split], line[split:]
        if len(rest) <= 1:
            choices.append((_unescape(name), ""))
        else:
            choices.append((_unescape(name), _unescape(rest[1:])))
    return choices


def complete_arg(
    arg: Any,
    complete: Any,
    ctoken: str,
    words: Sequence[str] = (),
    cword: int = 0,
    cwd: str | os.PathLike[str] | None = None,
) -> list[Choice]:
    """Completions for a positional argument or a flag's value."""
    name = arg.name.lower()
    type_ = getattr(complete, "type_", None) or name

    builtin = complete_builtin(type_, ctoken, cwd)
    if builtin:
        return builtin

    if arg.choices is not None:
        return [(c, "") for c in arg.choices if c.startswith(ctoken)]

    run = getattr(complete, "run", None)
    if run is not None:
        script = render_run_template(run, words, cword)
        stdout = sh(script)
        return parse_run_output(stdout, ctoken, bool(complete.descriptions))

    return []


def format_choices(choices: Sequence[Choice], shell: str | None) -> list[str]:
    """Output lines for the given shell; descriptions are shown only if any exist."""
    any_descriptions = any(description for _, description in choices)
    lines = []
    for choice, description in choices:
        if any_descriptions and shell == "fish":
            lines.append(f"{choice}\t{description}")
        elif any_descriptions and shell == "zsh":
            c = choice.replace(":", "\\\\:")
            d = description.replace("'", "'\\''")
            lines.append(f"'{c}'\\:'{d}'")
        else:
            lines.append(choice)
    return lines


def sh(script: str, version: str = USAGE_VERSION) -> str:
    """Run ``script`` with ``sh -c`` and return its standard output."""
    env = {**os.environ, "__USAGE": version}
    try:
        result = subprocess.run(
            ["sh", "-c", script],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            env=env,
            check=False,
        )
    except OSError as err:
        raise CompletionError(f"sh -c {script}: {err}") from err
    if result.returncode != 0:
        raise CompletionError(
            f"sh -c {script}: exited with status {result.returncode}"
        )
    return result.stdout.decode("utf-8")