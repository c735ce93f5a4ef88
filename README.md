# rustdrill

`rustdrill` walks you through a course of small Rust exercises. It compiles
each exercise with `rustc`, runs its binary or its test harness, lints Clippy
exercises with `cargo clippy`, and tells you which exercise to work on next.
In watch mode it checks your work again every time you save a file.

## Requirements

- Python 3.11 or later
- A Rust toolchain with `rustc` on your `PATH` (`cargo` as well for Clippy exercises)
- `git`, if you want to reset exercises

## Installation

```
pip install .
```

## The course directory

Run `rustdrill` from the directory that holds the course. It must contain an
`info.toml` file listing the exercises in their recommended order:

```toml
[[exercises]]
name = "intro1"
path = "exercises/00_intro/intro1.rs"
mode = "compile"
hint = "Remove the I AM NOT DONE comment to move on."
```

`mode` is one of:

- `compile`: the exercise is compiled as a program and run;
- `test`: the exercise is compiled as a test harness and its tests are run;
- `clippy`: the exercise is compiled and must pass `cargo clippy` with warnings denied.

An exercise counts as pending while its file still contains a line with the
comment `// I AM NOT DONE`. Once it compiles and passes, remove that comment
to move on to the next one.

If there is no `info.toml` in the current directory, or `rustc --version`
cannot be run, `rustdrill` prints a message and exits with status 1.

## Commands

```
rustdrill                 # print the welcome text and an introduction
rustdrill watch           # check exercises in order, checking again on every save
rustdrill verify          # check all exercises in order once
rustdrill run NAME        # compile and run (or test) a single exercise
rustdrill run next        # run the first exercise that is not done yet
rustdrill hint NAME       # print the hint for an exercise
rustdrill list            # list exercises with their path and status
rustdrill reset NAME      # restore an exercise with `git stash -- <file>`
rustdrill lsp             # write rust-project.json for rust-analyzer
```

`verify` and `run` exit with status 1 when an exercise fails; `run`, `hint`
and `reset` do so too when no exercise has the given name.

`--nocapture`, given before the command, shows the output of test exercises.

`rustdrill watch --success-hints` also prints an exercise's hint once it compiles.

`rustdrill list` takes these options:

- `--paths` / `-p`: print only the paths;
- `--names` / `-n`: print only the names;
- `--filter` / `-f PATTERNS`: keep exercises whose name or path contains any of the comma separated patterns;
- `--unsolved` / `-u`: only exercises not yet done;
- `--solved` / `-s`: only exercises that are done.

It ends with a line giving how many exercises are done.

### Watch mode

While `rustdrill watch` is running, type one of these commands and press Enter:

| command  | effect                                             |
|----------|----------------------------------------------------|
| `hint`   | print the hint for the current exercise            |
| `clear`  | clear the screen                                   |
| `quit`   | leave watch mode                                   |
| `!<cmd>` | run a program, e.g. `!rustc --explain E0381`       |
| `help`   | list these commands                                |

Watch mode stops on its own once every exercise is done.

### Editor support

`rustdrill lsp` writes `rust-project.json` into the current directory, with one
crate for every `.rs` file under `exercises/`, so that rust-analyzer understands
the exercises. The sysroot is taken from `RUST_SRC_PATH` when that is set, and
otherwise from `rustc --print sysroot`.

## Environment

- `NO_EMOJI`: when set, plain symbols are printed instead of emoji.

## Using it from Python

```python
from rustdrill.exercise import load_exercises

exercises = load_exercises("info.toml")
for exercise in exercises:
    print(exercise, "Done" if exercise.looks_done() else "Pending")
```

`Exercise.compile()` returns a `CompiledExercise`, which is a context manager
that removes the temporary binary when it is closed; compiling or running
failures raise `ExerciseFailed`, whose `output` holds the captured `stdout`
and `stderr`. `rustdrill.verify.verify` and `rustdrill.run.run` drive the same
checks as the commands above.

The `rustdrill.lessons` package holds worked solutions to a number of the
course exercises, in four modules:

- `rustdrill.lessons.basics`: numbers, conditions and strings, such as `calculate_price_of_apples` and `animal_habitat`;
- `rustdrill.lessons.errors`: optional values and errors, such as `total_cost` and `parse_pos_nonzero`;
- `rustdrill.lessons.sequences`: lists, mappings and iteration, such as `transformer`, `build_scores_table` and `divide`;
- `rustdrill.lessons.objects`: records, messages and shared behaviour, such as `ReportCard`, `State.process` and `append_bar`.

## What it does not include

`rustdrill` does not ship a course. The `info.toml` file and the `.rs`
exercise files it lists must be provided in the directory you run it from.
The worked solutions in `rustdrill.lessons` cover only some topics; there are
none for type conversions.