# usagespec

This package helps command-line tools that describe themselves with a usage
spec. It provides word completion for shells, caching of script bodies on
disk, and generation of Fig completion specs.

## Installation

```
pip install usagespec
```

To run the test suite, install the `test` extra:

```
pip install "usagespec[test]"
pytest
```

## Working with spec objects

The completion and Fig functions read their input through attributes. Any
objects with the right fields will work:

- **Commands** have:
  - `name`, `help`, `aliases` and `hide`
  - a `subcommands` mapping
  - for Fig output, also `flags`, `args` and `mounts` sequences
- **Flags** have:
  - `short` (characters) and `long` (names)
  - `help`, `hide` and `negate`
  - for Fig output, also `var` and `arg`
- **Args** have:
  - `name` and `choices` (a sequence of strings, or `None`)
  - for Fig output, also `help`, `var`, `required` and `hide`
- **Completers** have `name`, `run`, `descriptions` and `type_`.
- **Mounts** have `run`.

## `usagespec.cache`

This module finds the cache directory and writes executable scripts into it.
Every function that takes `environ` falls back to `os.environ` when it is
omitted.

- `var_true(key, environ)` is true when the variable is set to exactly `1` or
  `true`.
- `home_dir(environ)` returns `HOME`, or `/tmp` when `HOME` is unset.
- `cache_dir(environ)` returns `$XDG_CACHE_HOME/usage`. When
  `XDG_CACHE_HOME` is unset it uses `<home>/.cache/usage`.
- `hash_to_str(value)` returns a short hexadecimal digest of a string or
  bytes value. The digest is a 64-bit BLAKE2b hash.
- `script_name(script, body)` builds a name from two parts, joined by a
  dash:
  - up to eight lower-case ASCII alphanumeric characters of the script's
    file name
  - the hash of the body
- `create_script(script, body, directory)` does the following:
  - It writes the body into `directory` under that name. It uses
    `cache_dir()` when no directory is given.
  - It marks the file `0o755`.
  - It returns the file's path.
  - An existing file with that name is left as it is.

## `usagespec.completion`

This module produces completion candidates as `(word, description)` tuples.

- `complete_subcommands(cmd, ctoken)` gives visible subcommand names and their
  aliases that start with `ctoken`, sorted.
- `complete_long_flag_names(flags, ctoken)` gives `--long` names and `negate`
  names of visible flags. Duplicates are removed, only names that start with
  `ctoken` are kept, and the result is sorted.
- `complete_short_flag_names(flags, ctoken)` gives `-x` names of visible
  flags. If `ctoken` has a character after the dash, only that letter is kept.
- `complete_path(base, ctoken, predicate)` lists the entries next to a partial
  path that satisfy `predicate`. Paths are relative to `base` where possible.
- `complete_builtin(type_, ctoken, cwd)` completes paths for the types `path`
  and `file`, and directories for `dir`. Any other type gives nothing.
- `complete_arg(arg, complete, ctoken, words, cword, cwd)` tries these
  sources in order:
  1. the built-in type: the completer's `type_`, or else the argument's name
     in lower case
  2. the argument's `choices`
  3. the completer's `run` command
- `render_run_template(run, words, cword)` renders a `run` command as a Jinja
  template. The template can use `words`, `CURRENT` and (when `cword > 0`)
  `PREV`. Undefined names are errors.
- `sh(script, version)` runs a command with `sh -c`. The environment variable
  `__USAGE` is set to `version`. The function returns the command's standard
  output.
- `parse_run_output(stdout, ctoken, descriptions)` keeps the lines that start
  with `ctoken`. With `descriptions` set, it splits each line at the first
  unescaped colon into word and description, and `\:` becomes `:`.
- `format_choices(choices, shell)` returns output lines for `bash`, `fish` or
  `zsh`. Descriptions are written only when at least one candidate has one,
  and never for bash.

`CompletionError` is raised when a template cannot be rendered, or when a
`run` command cannot be started or exits with a non-zero status.

```python
from usagespec.completion import format_choices

print("\n".join(format_choices([("plugin-1", "desc")], "zsh")))
# 'plugin-1'\:'desc'
```

## `usagespec.fig`

This module converts a command tree into a Fig completion spec.

- The dataclasses `FigCommand`, `FigOption`, `FigArg` and `FigGenerator`
  model the spec. `GeneratorType` has the members `ENV_VAR` and `COMPLETE`.
- `command_from_spec(cmd)`, `option_from_spec(flag)` and `arg_from_spec(arg)`
  build these objects. Hidden items are skipped, and a hidden root gives
  `None`.
- `arg_template(name)` picks a template from the argument's name:
  - `filepaths` for names containing `file` or `path`
  - `folders` for names containing `dir`
- `arg_generator(name)` adds an environment-variable generator for names
  containing `env_var`.
- `fill_args_complete(args, completes)` attaches completion generators to the
  arguments named in `completes`.
- `render_fig_spec(cmd, completes)` returns the TypeScript text
  `const completionSpec: Fig.Spec = {...}`. In that text:
  - generator placeholders become `envVarGenerator` or
    `completionGeneratorTemplate(...)` calls
  - mounts become `usageGenerateSpec([...])` calls

  It raises `ValueError` when the root command is hidden.

## What this package does not do

- It has no command-line program.
- It does not read or parse usage spec files. You supply the spec objects.
- It does not parse a command line to work out which flag or argument is
  being completed.
- The Fig output calls `envVarGenerator`, `completionGeneratorTemplate` and
  `usageGenerateSpec`, but does not define them. Those TypeScript helpers
  must come from elsewhere.
- It does not write Fig specs to files.