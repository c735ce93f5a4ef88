"""Checking exercises in order, with progress and completion prompts."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from enum import Enum, auto

from rich.console import Console
from rich.status import Status
from rich.text import Text

from rustdrill.exercise import CompiledExercise, Exercise, ExerciseFailed, Mode
from rustdrill.ui import success, warn

_BAR_WIDTH = 60


class _RunMode(Enum):
    INTERACTIVE = auto()
    NON_INTERACTIVE = auto()


def _console(stderr: bool = False) -> Console:
    return Console(stderr=stderr, soft_wrap=True, highlight=False)


@contextmanager
def _spinner(message: str) -> Iterator[Status]:
    with _console(stderr=True).status(message) as status:
        yield status


def _render_bar(position: int, total: int, message: str) -> Text:
    filled = _BAR_WIDTH * position // total if total else _BAR_WIDTH
    if filled >= _BAR_WIDTH:
        complete, rest = "#" * _BAR_WIDTH, ""
    else:
        complete, rest = "#" * filled, ">" + "-" * (_BAR_WIDTH - filled - 1)
    return Text.assemble(
        "Progress: [",
        (complete, "green"),
        (rest, "red"),
        f"] {position}/{total} {message}",
    )


def _show_progress(position: int, total: int, percentage: float) -> None:
    _console(stderr=True).print(_render_bar(position, total, f"({percentage:.1f} %)"))


def verify(
    exercises: Iterable[Exercise],
    progress: tuple[int, int],
    verbose: bool = False,
    success_hints: bool = False,
) -> Exercise | None:
    """Check exercises in order; return the first that is not finished, else None."""
    num_done, total = progress
    percentage = num_done / total * 100.0 if total else 100.0
    position = num_done
    _show_progress(position, total, percentage)
    for exercise in exercises:
        try:
            match exercise.mode:
                case Mode.TEST:
                    passed = _compile_and_test(
                        exercise, _RunMode.INTERACTIVE, verbose, success_hints
                    )
                case Mode.COMPILE:
                    passed = _compile_and_run_interactively(exercise, success_hints)
                case Mode.CLIPPY:
                    passed = _compile_only(exercise, success_hints)
        except ExerciseFailed:
            passed = False
        if not passed:
            return exercise
        if total:
            percentage += 100.0 / total
        position += 1
        _show_progress(position, total, percentage)
    return None


def test(exercise: Exercise, verbose: bool = False) -> None:
    """Compile and run an exercise's tests; raise ExerciseFailed if they fail."""
    _compile_and_test(exercise, _RunMode.NON_INTERACTIVE, verbose, False)


def _compile(exercise: Exercise, status: Status) -> CompiledExercise:
    try:
        return exercise.compile()
    except ExerciseFailed as failure:
        status.stop()
        warn(f"Compiling of {exercise} failed! Please try again. Here's the output:")
        print(failure.output.stderr)
        raise


def _compile_only(exercise: Exercise, success_hints: bool) -> bool:
    with _spinner(f"Compiling {exercise}...") as status:
        _compile(exercise, status).close()
    return _prompt_for_completion(exercise, None, success_hints)


def _compile_and_run_interactively(exercise: Exercise, success_hints: bool) -> bool:
    with _spinner(f"Compiling {exercise}...") as status:
        with _compile(exercise, status) as compiled:
            status.update(f"Running {exercise}...")
            try:
                output = compiled.run()
            except ExerciseFailed as failure:
                status.stop()
                warn(f"Ran {exercise} with errors")
                print(failure.output.stdout)
                print(failure.output.stderr)
                raise
    return _prompt_for_completion(exercise, output.stdout, success_hints)


def _compile_and_test(
    exercise: Exercise, run_mode: _RunMode, verbose: bool, success_hints: bool
) -> bool:
    with _spinner(f"Testing {exercise}...") as status:
        with _compile(exercise, status) as compiled:
            try:
                output = compiled.run()
            except ExerciseFailed as failure:
                status.stop()
                warn(
                    f"Testing of {exercise} failed! Please try again. "
                    "Here's the output:"
                )
                print(failure.output.stdout)
                raise
    if verbose:
        print(output.stdout)
    if run_mode is _RunMode.INTERACTIVE:
        return _prompt_for_completion(exercise, None, success_hints)
    return True


def _separator() -> Text:
    return Text("====================", style="bold")


def _prompt_for_completion(
    exercise: Exercise, prompt_output: str | None, success_hints: bool
) -> bool:
    state = exercise.state()
    if state.done:
        return True

    verbs = {Mode.COMPILE: "ran", Mode.TEST: "tested", Mode.CLIPPY: "compiled"}
    success(f"Successfully {verbs[exercise.mode]} {exercise}!")

    no_emoji = "NO_EMOJI" in os.environ
    clippy_message = (
        "The code is compiling, and Clippy is happy!"
        if no_emoji
        else "The code is compiling, and 📎 Clippy 📎 is happy!"
    )
    messages = {
        Mode.COMPILE: "The code is compiling!",
        Mode.TEST: "The code is compiling, and the tests pass!",
        Mode.CLIPPY: clippy_message,
    }
    message = messages[exercise.mode]
    console = _console()

    print()
    print(f"~*~ {message} ~*~" if no_emoji else f"🎉 🎉  {message} 🎉 🎉")
    print()

    if prompt_output is not None:
        print("Output:")
        console.print(_separator())
        print(prompt_output)
        console.print(_separator())
        print()
    if success_hints:
        print("Hints:")
        console.print(_separator())
        print(exercise.hint)
        console.print(_separator())
        print()

    print("You can keep working on this exercise,")
    console.print(
        Text.assemble(
            "or jump into the next one by removing the ",
            ("`I AM NOT DONE`", "bold"),
            " comment:",
        )
    )
    print()
    for context_line in state.context:
        line = (
            Text(context_line.line, style="bold")
            if context_line.important
            else Text(context_line.line)
        )
        console.print(
            Text.assemble(
                (f"{context_line.number:>2}", "bold blue"),
                " ",
                ("|", "blue"),
                "  ",
                line,
            )
        )
    return False