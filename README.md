# minish

`minish` is a library of building blocks for a small command shell. It splits
a command line into tokens, checks the grammar, expands parameters inside
quoted text, groups tokens into a pipeline, sets up pipes, redirections and
here-documents, and runs each command either as one of its builtins or as an
external program found on `PATH`.

## The environment table

Variables live in an `EnvTable` (`minish.envtable`). Each entry carries an
`Attribute`, `GLOBAL` (exported to the programs the shell starts) or `LOCAL`.

```python
from minish.envtable import EnvTable

table = EnvTable.from_environ(["HOME=/home/user", "PATH=/usr/bin:/bin", "SHLVL=1"], "1")
table.search("HOME")      # "/home/user"
table.search("SHLVL")     # "2": SHLVL is raised by one
table.envp()              # "NAME=value" strings for the exported variables
```

`from_environ` also adds `UID=1000`, and `OLDPWD` without a value when the
environment has none. Lookups match any stored name in the bucket that starts
with the searched name; `unset` removes only an exact match. `key_of` and
`value_of` split an assignment such as `NAME=value` into its two halves.

## Parsing a line

```python
from minish.tokens import tokenize, validate_grammar
from minish.commands import split_pipeline

tokens = tokenize("ls -l | grep py > out.txt")
validate_grammar(tokens)          # raises minish.errors.ParseError
commands = split_pipeline(tokens)
```

`tokenize` splits at blanks and at `|`, `<` and `>`, keeping quoted text
together. `validate_grammar` raises `ParseError` (its `status` is 2, its
`message` the formatted error line) for a pipe at the start or end of a line
or followed by another pipe, a redirection not followed by a word, or an
unclosed quote in the last token. Printing the message and recording the
status is left to the caller.

`minish.conditions` holds the predicates the parser relies on: `TokenType`,
`token_type`, `is_redirection`, `is_builtin`, `is_expandable`, `in_quotes`,
`is_boundary`, `is_double_operator`, `identifier_valid`, `has_meta`,
`is_option` and `starts_with_digit`.

## Expansion

`minish.expansion.expand_quotes(text, index, quote, shell)` removes the
opening quote at `index` and, for double quotes, expands `$NAME` and `$?`
in what it encloses, returning the new text and the index of the last
processed character. `replacement_expansion` expands a single parameter name.

## Running commands

A `Shell` (`minish.state`) bundles the environment table, the last exit code
and the output streams. `create_shell` builds one from an environment (the
process environment by default) and raises `ShellExit(12)` when it is empty.
`start_execution` in `minish.executor` opens the pipes, applies the
redirections and runs the pipeline, returning the new exit code:

```python
import os
import sys

from minish.state import create_shell
from minish.tokens import tokenize, validate_grammar
from minish.commands import split_pipeline
from minish.executor import start_execution

shell = create_shell(os.environ, os.environ.get("SHLVL", "0"), sys.stdout, sys.stderr)
tokens = tokenize("echo hello | tr a-z A-Z")
validate_grammar(tokens)
start_execution(shell, split_pipeline(tokens))
```

Exit codes: 127 for a command that cannot be found, 126 when running or
opening a file fails with a permission error, 1 for a missing redirection
file, 130 after an interrupted here-document. `cd`, `unset`, `exit` and
`export` with arguments change the shell itself and are skipped inside a
pipeline.

`prompt_signals()` and `execution_signals(shell)` install the signal handlers
for reading input and for running commands, and return the previous ones.

## Builtins

`minish.builtins` has `cd`, `echo`, `env`, `exit_shell`, `export`, `pwd` and
`unset`, each called as `name(shell, argv)` and returning the exit code, for
example `echo(shell, ["echo", "-n", "hi"])` or
`export(shell, ["export", "NAME=value"])`. `exit_shell` raises
`minish.errors.ShellExit` with the status instead of returning, except when
given too many arguments.

## What it does not do

- There is no interactive prompt or command to start: reading lines, keeping
  history and looping is up to the program that uses the library.
- Parameter expansion is not applied to tokens automatically, and unquoted
  `$NAME` is not expanded; `start_execution` runs the words as they are.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.