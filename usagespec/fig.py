"""Fig completion specs generated from usage specs.

Spec objects are read by attribute access:

* commands have ``name``, ``aliases``, ``help``, ``hide``, a ``subcommands``
  mapping, and ``flags``, ``args`` and ``mounts`` sequences;
* flags have ``short``, ``long``, ``help``, ``var``, ``hide`` and ``arg``;
* args have ``name``, ``help``, ``var``, ``required``, ``hide`` and
  ``choices`` (a sequence of strings or None);
* mounts have ``run``; completers have ``name`` and ``run``.
"""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "GeneratorType",
    "FigGenerator",
    "FigArg",
    "FigOption",
    "FigCommand",
    "simple_generator",
    "arg_template",
    "arg_generator",
    "arg_from_spec",
    "option_from_spec",
    "command_from_spec",
    "fill_args_complete",
    "render_fig_spec",
]


class GeneratorType(enum.Enum):
    """Kinds of Fig generators that can be emitted."""

    ENV_VAR = "EnvVar"
    COMPLETE = "Complete"


_GENERATOR_NAMES = {
    GeneratorType.ENV_VAR: "envVarGenerator",
    GeneratorType.COMPLETE: "completionGeneratorTemplate",
}


@dataclass
class FigGenerator:
    """A generator placeholder; serialized as ``template_str`` and replaced later."""

    type_: GeneratorType
    post_process: str = ""
    template_str: str = ""

    def generator_name(self) -> str:
        """Name of the TypeScript generator function."""
        return _GENERATOR_NAMES[self.type_]

    def generator_text(self) -> str:
        """The TypeScript expression that replaces the placeholder."""
        arg = f"(`{self.post_process}`)" if self.type_ is GeneratorType.COMPLETE else ""
        return f"{self.generator_name()}{arg}"


def simple_generator(type_: GeneratorType) -> FigGenerator:
    """A generator without post-processing, keyed by its upper-cased name."""
    return FigGenerator(
        type_=type_,
        post_process="",
        template_str=_GENERATOR_NAMES[type_].upper(),
    )


def _capitalize(text: str) -> str:
    if not text:
        return text
    return text[0].upper()[0] + text[1:]


def _one_or_many(values: Sequence[Any]) -> Any:
    return values[0] if len(values) == 1 else list(values)


@dataclass
class FigArg:
    """An argument of a Fig command or option."""

    name: str
    description: str | None = None
    is_optional: bool = False
    is_variadic: bool = False
    template: str | None = None
    generator: FigGenerator | None = None
    suggestions: list[str] = field(default_factory=list)
    debounce: bool | None = None

    def update_from_complete(self, complete: Any) -> None:
        """Attach a completion generator unless one is already set."""
        if self.generator is not None:
            return
        run = getattr(complete, "run", None)
        self.generator = FigGenerator(
            type_=GeneratorType.COMPLETE,
            post_process=run if run is not None else "",
            template_str=f"${complete.name}$",
        )

    def to_dict(self) -> dict[str, Any]:
        """The JSON-ready form of this argument."""
        out: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            out["description"] = _capitalize(self.description)
        if self.is_optional:
            out["isOptional"] = True
        if self.is_variadic:
            out["isVariadic"] = True
        if self.template is not None:
            out["template"] = self.template
        if self.generator is not None:
            out["generators"] = self.generator.template_str
        if self.suggestions:
            out["suggestions"] = list(self.suggestions)
        if self.debounce is not None:
            out["debounce"] = self.debounce
        return out


@dataclass
class FigOption:
    """A flag of a Fig command."""

    name: list[str]
    description: str | None = None
    is_repeatable: bool = False
    args: FigArg | None = None

    def to_dict(self) -> dict[str, Any]:
        """The JSON-ready form of this option."""
        out: dict[str, Any] = {"name": _one_or_many(self.name)}
        if self.description is not None:
            out["description"] = _capitalize(self.description)
        out["isRepeatable"] = self.is_repeatable
        if self.args is not None:
            out["args"] = self.args.to_dict()
        return out


@dataclass
class FigCommand:
    """A Fig command with its subcommands, options and arguments."""

    name: list[str]
    description: str | None = None
    subcommands: list[FigCommand] = field(default_factory=list)
    options: list[FigOption] = field(default_factory=list)
    args: list[FigArg] = field(default_factory=list)
    generate_spec: str | None = None
    cache: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """The JSON-ready form of this command tree."""
        out: dict[str, Any] = {"name": _one_or_many(self.name)}
        if self.description is not None:
            out["description"] = self.description
        if self.subcommands:
            out["subcommands"] = [s.to_dict() for s in self.subcommands]
        if self.options:
            out["options"] = [o.to_dict() for o in self.options]
        if self.args:
            out["args"] = _one_or_many([a.to_dict() for a in self.args])
        if self.generate_spec is not None:
            out["generateSpec"] = self.generate_spec
        if self.cache is not None:
            out["cache"] = self.cache
        return out

    def generators(self) -> list[FigGenerator]:
        """All generators: subcommands' first, then options', then arguments'."""
        found = [g for sub in self.subcommands for g in sub.generators()]
        found.extend(
            o.args.generator
            for o in self.options
            if o.args is not None and o.args.generator is not None
        )
        found.extend(a.generator for a in self.args if a.generator is not None)
        return found

    def commands(self) -> list[FigCommand]:
        """Every command in the tree, descendants before their parent."""
        found = [c for sub in self.subcommands for c in sub.commands()]
        found.append(self)
        return found

    def all_args(self) -> list[FigArg]:
        """Every argument in the tree: options', subcommands', then own."""
        found = [o.args for o in self.options if o.args is not None]
        found.extend(a for sub in self.subcommands for a in sub.all_args())
        found.extend(self.args)
        return found


def arg_template(name: str) -> str | None:
    """The Fig template suggested by an argument's name."""
    lower = name.lower()
    if "file" in lower:
        return "filepaths"
    if "dir" in lower:
        return "folders"
    if "path" in lower:
        return "filepaths"
    return None


def arg_generator(name: str) -> FigGenerator | None:
    """An environment-variable generator for arguments named after env vars."""
    if "env_var" in name.lower():
        return simple_generator(GeneratorType.ENV_VAR)
    return None


def _arg_name(name: str) -> str:
    for ch in "<>[]":
        name = name.replace(ch, "")
    return "".join(c.lower() if c.isascii() else c for c in name)


def arg_from_spec(arg: Any) -> FigArg:
    """Build a Fig argument from a spec argument."""
    generator = arg_generator(arg.name)
    return FigArg(
        name=_arg_name(arg.name),
        description=arg.help,
        is_optional=not arg.required,
        is_variadic=bool(arg.var),
        template=arg_template(arg.name),
        generator=generator,
        suggestions=list(arg.choices or []),
        debounce=True if generator is not None else None,
    )


def option_from_spec(flag: Any) -> FigOption:
    """Build a Fig option from a spec flag."""
    names = [f"-{c}" for c in flag.short]
    names.extend(f"--{long}" for long in flag.long)
    return FigOption(
        name=names,
        description=flag.help,
        is_repeatable=bool(flag.var),
        args=arg_from_spec(flag.arg) if flag.arg is not None else None,
    )


def command_from_spec(cmd: Any) -> FigCommand | None:
    """Build a Fig command tree from a spec command; None if it is hidden."""
    if cmd.hide:
        return None
    subcommands = [
        fig_cmd
        for sub in cmd.subcommands.values()
        if not sub.hide
        for fig_cmd in [command_from_spec(sub)]
        if fig_cmd is not None
    ]
    mounts = list(cmd.mounts)
    generate_spec = None
    if mounts:
        calls = ",".join(f'"{m.run}"' for m in mounts)
        generate_spec = f"${calls}$"
    return FigCommand(
        name=[cmd.name, *cmd.aliases],
        description=cmd.help,
        subcommands=subcommands,
        options=[option_from_spec(f) for f in cmd.flags if not f.hide],
        args=[arg_from_spec(a) for a in cmd.args if not a.hide],
        generate_spec=generate_spec,
        cache=False if mounts else None,
    )


def fill_args_complete(args: Sequence[FigArg], completes: Mapping[str, Any]) -> None:
    """Attach completers to the arguments whose names they are keyed by."""
    for arg in args:
        complete = completes.get(arg.name)
        if complete is not None:
            arg.update_from_complete(complete)


def render_fig_spec(cmd: Any, completes: Mapping[str, Any] | None = None) -> str:
    """Render the TypeScript Fig completion spec for a spec's root command."""
    main = command_from_spec(cmd)
    if main is None:
        raise ValueError("the root command is hidden")
    fill_args_complete(main.all_args(), completes or {})
    body = json.dumps(main.to_dict(), indent=2, ensure_ascii=False)
    result = f"const completionSpec: Fig.Spec = {body}"

    for generator in main.generators():
        result = result.replace(f'"{generator.template_str}"', generator.generator_text())

    for command in main.commands():
        if command.generate_spec is None:
            continue
        calls = command.generate_spec.replace("$", "")
        quoted = command.generate_spec.replace('"', '\\"')
        result = result.replace(f'"{quoted}"', f"usageGenerateSpec([{calls}])")

    return result