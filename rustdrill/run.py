"""Running a single exercise and resetting it."""

from __future__ import annotations

import subprocess

from rich.console import Console

from rustdrill.exercise import Exercise, ExerciseFailed, Mode
from rustdrill.ui import success, warn
from rustdrill.verify import test


def run(exercise: Exercise, verbose: bool = False) -> None:
    """Compile and run one exercise; raise ExerciseFailed when it fails."""
    if exercise.mode is Mode.TEST:
        test(exercise, verbose)
    else:
        _compile_and_run(exercise)


def reset(exercise: Exercise) -> subprocess.Popen:
    """Start stashing the changes made to the exercise file and return the process."""
    return subprocess.Popen(["git", "stash", "--", str(exercise.path)])


def _compile_and_run(exercise: Exercise) -> None:
    spinner = Console(stderr=True, soft_wrap=True, highlight=False)
    with spinner.status(f"Compiling {exercise}...") as status:
        try:
            compiled = exercise.compile()
        except ExerciseFailed as failure:
            status.stop()
            warn(f"Compilation of {exercise} failed!, Compiler error message:\n")
            print(failure.output.stderr)
            raise
        with compiled:
            status.update(f"Running {exercise}...")
            try:
                output = compiled.run()
            except ExerciseFailed as failure:
                status.stop()
                print(failure.output.stdout)
                print(failure.output.stderr)
                warn(f"Ran {exercise} with errors")
                raise
    print(output.stdout)
    success(f"Successfully ran {exercise}")