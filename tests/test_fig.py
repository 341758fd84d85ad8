import json
from types import SimpleNamespace

import pytest

from usagespec.fig import (
    FigArg,
    FigCommand,
    FigGenerator,
    FigOption,
    GeneratorType,
    arg_from_spec,
    arg_generator,
    arg_template,
    command_from_spec,
    fill_args_complete,
    option_from_spec,
    render_fig_spec,
    simple_generator,
)

PREFIX = "const completionSpec: Fig.Spec = "


def make_arg(name, help=None, required=True, var=False, hide=False, choices=None):
    return SimpleNamespace(
        name=name, help=help, required=required, var=var, hide=hide, choices=choices
    )


def make_flag(short=(), long=(), help=None, var=False, hide=False, arg=None):
    return SimpleNamespace(
        short=list(short), long=list(long), help=help, var=var, hide=hide, arg=arg
    )


def make_cmd(
    name,
    help=None,
    aliases=(),
    hide=False,
    subcommands=None,
    flags=(),
    args=(),
    mounts=(),
):
    return SimpleNamespace(
        name=name,
        help=help,
        aliases=list(aliases),
        hide=hide,
        subcommands=subcommands or {},
        flags=list(flags),
        args=list(args),
        mounts=list(mounts),
    )


def make_complete(name, run=None):
    return SimpleNamespace(name=name, run=run, descriptions=False, type_=None)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("file", "filepaths"),
        ("<DIR>", "folders"),
        ("some_path", "filepaths"),
        ("profile_dir", "filepaths"),
        ("name", None),
    ],
)
def test_arg_template(name, expected):
    assert arg_template(name) == expected


def test_simple_generator_uses_uppercased_name():
    gen = simple_generator(GeneratorType.ENV_VAR)
    assert gen.template_str == "envVarGenerator".upper()
    assert gen.generator_name() == "envVarGenerator"
    assert gen.generator_text() == "envVarGenerator"


def test_complete_generator_text_wraps_post_process():
    gen = FigGenerator(GeneratorType.COMPLETE, "mycli plugins", "$plugin$")
    assert gen.generator_name() == "completionGeneratorTemplate"
    assert gen.generator_text() == "completionGeneratorTemplate(`mycli plugins`)"


def test_arg_generator():
    assert arg_generator("ENV_VARS").type_ is GeneratorType.ENV_VAR
    assert arg_generator("env_var").template_str == "ENVVARGENERATOR"
    assert arg_generator("name") is None


def test_arg_from_spec_to_dict():
    arg = make_arg("<File>", help="input file", required=False, var=True)
    fig = arg_from_spec(arg)
    assert fig.to_dict() == {
        "name": "file",
        "description": "Input file",
        "isOptional": True,
        "isVariadic": True,
        "template": "filepaths",
    }


def test_arg_from_spec_choices_and_env_generator():
    fig = arg_from_spec(make_arg("env_var", choices=["a", "b"]))
    data = fig.to_dict()
    assert data["suggestions"] == ["a", "b"]
    assert data["generators"] == fig.generator.template_str
    assert data["debounce"] is True
    assert "isOptional" not in data


def test_option_single_name_is_scalar():
    opt = option_from_spec(make_flag(long=["global"], help="global install"))
    assert opt.to_dict() == {
        "name": "--global",
        "description": "Global install",
        "isRepeatable": False,
    }


def test_option_names_short_before_long():
    flag = make_flag(short=["d"], long=["dir"], var=True, arg=make_arg("dir"))
    data = option_from_spec(flag).to_dict()
    assert data["name"] == ["-d", "--dir"]
    assert data["isRepeatable"] is True
    assert data["args"]["template"] == "folders"


def test_command_from_spec_hidden_returns_none():
    assert command_from_spec(make_cmd("secret", hide=True)) is None


def test_command_from_spec_filters_hidden():
    cmd = make_cmd(
        "mycli",
        help="my cli",
        aliases=["m"],
        subcommands={
            "a": make_cmd("a"),
            "b": make_cmd("b", hide=True),
        },
        flags=[make_flag(long=["x"]), make_flag(long=["y"], hide=True)],
        args=[make_arg("one"), make_arg("two", hide=True)],
    )
    fig = command_from_spec(cmd)
    data = fig.to_dict()
    assert data["name"] == ["mycli", "m"]
    assert data["description"] == "my cli"
    assert [s["name"] for s in data["subcommands"]] == ["a"]
    assert [o["name"] for o in data["options"]] == ["--x"]
    assert data["args"] == {"name": "one"}
    assert "generateSpec" not in data
    assert "cache" not in data


def test_command_description_not_capitalized():
    data = command_from_spec(make_cmd("c", help="lower")).to_dict()
    assert data["description"] == "lower"


def test_command_mounts():
    cmd = make_cmd("c", mounts=[SimpleNamespace(run="a"), SimpleNamespace(run="b")])
    fig = command_from_spec(cmd)
    assert fig.generate_spec == '$"a","b"$'
    assert fig.cache is False


def test_commands_order_descendants_first():
    leaf = FigCommand(name=["leaf"])
    mid = FigCommand(name=["mid"], subcommands=[leaf])
    root = FigCommand(name=["root"], subcommands=[mid])
    assert [c.name[0] for c in root.commands()] == ["leaf", "mid", "root"]


def test_all_args_order():
    opt_arg = FigArg(name="o")
    sub_arg = FigArg(name="s")
    own_arg = FigArg(name="a")
    root = FigCommand(
        name=["root"],
        options=[FigOption(name=["--o"], args=opt_arg), FigOption(name=["--p"])],
        subcommands=[FigCommand(name=["sub"], args=[sub_arg])],
        args=[own_arg],
    )
    assert root.all_args() == [opt_arg, sub_arg, own_arg]


def test_generators_collects_in_order():
    sub_gen = FigGenerator(GeneratorType.COMPLETE, "x", "$s$")
    opt_gen = simple_generator(GeneratorType.ENV_VAR)
    root = FigCommand(
        name=["root"],
        subcommands=[FigCommand(name=["s"], args=[FigArg(name="s", generator=sub_gen)])],
        options=[FigOption(name=["--e"], args=FigArg(name="e", generator=opt_gen))],
        args=[FigArg(name="plain")],
    )
    assert root.generators() == [sub_gen, opt_gen]


def test_update_from_complete_keeps_existing_generator():
    existing = simple_generator(GeneratorType.ENV_VAR)
    arg = FigArg(name="env_var", generator=existing)
    arg.update_from_complete(make_complete("env_var", run="ls"))
    assert arg.generator is existing


def test_update_from_complete_without_run():
    arg = FigArg(name="plugin")
    arg.update_from_complete(make_complete("plugin"))
    assert arg.generator.post_process == ""
    assert arg.generator.template_str == "$plugin$"
    assert arg.generator.type_ is GeneratorType.COMPLETE


def test_fill_args_complete_matches_by_name():
    matched = FigArg(name="plugin")
    other = FigArg(name="version")
    fill_args_complete([matched, other], {"plugin": make_complete("plugin", run="ls")})
    assert matched.generator.post_process == "ls"
    assert other.generator is None


def test_render_plain_spec_is_json():
    cmd = make_cmd("mycli", help="my cli", args=[make_arg("name")])
    out = render_fig_spec(cmd)
    assert out.startswith(PREFIX)
    assert json.loads(out[len(PREFIX):]) == command_from_spec(cmd).to_dict()


def test_render_replaces_env_var_generator():
    cmd = make_cmd("mycli", args=[make_arg("env_var")])
    out = render_fig_spec(cmd)
    assert '"generators": envVarGenerator' in out
    assert "ENVVARGENERATOR" not in out


def test_render_replaces_complete_generator():
    cmd = make_cmd(
        "mycli",
        subcommands={"install": make_cmd("install", args=[make_arg("plugin")])},
    )
    completes = {"plugin": make_complete("plugin", run="mycli plugins")}
    out = render_fig_spec(cmd, completes)
    assert '"generators": completionGeneratorTemplate(`mycli plugins`)' in out
    assert "$plugin$" not in out


def test_render_replaces_mounts():
    cmd = make_cmd("mycli", mounts=[SimpleNamespace(run="mycli mount")])
    out = render_fig_spec(cmd)
    assert '"generateSpec": usageGenerateSpec(["mycli mount"])' in out
    assert '"cache": false' in out


def test_render_hidden_root_raises():
    with pytest.raises(ValueError):
        render_fig_spec(make_cmd("mycli", hide=True))