"""Exercises: loading, compiling, running and completion state."""

from __future__ import annotations

import os
import re
import subprocess
import threading
import tomllib
import weakref
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

RUSTC_ARGS = ("--color", "always", "--edition", "2021", "-C", "strip=debuginfo")
I_AM_DONE_REGEX = re.compile(r"(?m)^\s*///?\s*I\s+AM\s+NOT\s+DONE")
CONTEXT = 2
CLIPPY_CARGO_TOML_PATH = "./exercises/22_clippy/Cargo.toml"


def temp_file() -> str:
    """Return a temporary binary path unique to this process and thread."""
    return f"./temp_{os.getpid()}_{threading.get_ident()}"


def _remove(path: str) -> None:
    try:
        os.remove(path)
    except OSError:
        pass


def clean() -> None:
    """Remove the temporary binary of the current thread, if any."""
    _remove(temp_file())


class Mode(Enum):
    """How an exercise is checked."""

    COMPILE = "compile"
    TEST = "test"
    CLIPPY = "clippy"


@dataclass(frozen=True)
class ContextLine:
    """A source line shown around the pending marker."""

    line: str
    number: int
    important: bool


@dataclass(frozen=True)
class State:
    """Completion state: done when there is no pending context."""

    context: tuple[ContextLine, ...] = ()

    @property
    def done(self) -> bool:
        return not self.context


@dataclass(frozen=True)
class ExerciseOutput:
    """Captured output of a compiler or program run."""

    stdout: str
    stderr: str


class ExerciseFailed(Exception):
    """Compiling or running an exercise did not succeed."""

    def __init__(self, output: ExerciseOutput) -> None:
        super().__init__(output.stderr or output.stdout)
        self.output = output


def _execute(args: list[str], failure: str) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(args, capture_output=True)
    except OSError as exc:
        raise RuntimeError(failure) from exc


def _output(result: subprocess.CompletedProcess) -> ExerciseOutput:
    return ExerciseOutput(
        stdout=(result.stdout or b"").decode("utf-8", errors="replace"),
        stderr=(result.stderr or b"").decode("utf-8", errors="replace"),
    )


def _lines(source: str) -> list[str]:
    parts = source.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [part.removesuffix("\r") for part in parts]


@dataclass
class Exercise:
    """An exercise as described in info.toml."""

    name: str
    path: Path
    mode: Mode
    hint: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.mode = Mode(self.mode)

    def __str__(self) -> str:
        return str(self.path)

    def _compile_command(self) -> subprocess.CompletedProcess:
        source = str(self.path)
        if self.mode is Mode.COMPILE:
            return _execute(
                ["rustc", source, "-o", temp_file(), *RUSTC_ARGS],
                "Failed to run 'compile' command.",
            )
        if self.mode is Mode.TEST:
            return _execute(
                ["rustc", "--test", source, "-o", temp_file(), *RUSTC_ARGS],
                "Failed to run 'compile' command.",
            )
        cargo_toml = (
            f'[package]\nname = "{self.name}"\nversion = "0.0.1"\n'
            f'edition = "2021"\n[[bin]]\nname = "{self.name}"\n'
            f'path = "{self.name}.rs"'
        )
        message = (
            "Failed to write Clippy Cargo.toml file."
            if "NO_EMOJI" in os.environ
            else "Failed to write 📎 Clippy 📎 Cargo.toml file."
        )
        try:
            Path(CLIPPY_CARGO_TOML_PATH).write_text(cargo_toml)
        except OSError as exc:
            raise RuntimeError(message) from exc
        # Build a binary too, so clippy exercises can be run afterwards.
        _execute(
            ["rustc", source, "-o", temp_file(), *RUSTC_ARGS], "Failed to compile!"
        )
        _execute(
            ["cargo", "clean", "--manifest-path", CLIPPY_CARGO_TOML_PATH,
             "--color", "always"],
            "Failed to run 'cargo clean'",
        )
        return _execute(
            ["cargo", "clippy", "--manifest-path", CLIPPY_CARGO_TOML_PATH,
             "--color", "always", "--", "-D", "warnings", "-D", "clippy::float_cmp"],
            "Failed to run 'compile' command.",
        )

    def compile(self) -> CompiledExercise:
        """Compile the exercise; raise ExerciseFailed with the compiler output."""
        result = self._compile_command()
        if result.returncode == 0:
            return CompiledExercise(self, temp_file())
        clean()
        raise ExerciseFailed(_output(result))

    def run(self) -> ExerciseOutput:
        """Run the compiled binary; raise ExerciseFailed if it exits non-zero."""
        arg = "--show-output" if self.mode is Mode.TEST else ""
        result = _execute([temp_file(), arg], "Failed to run 'run' command")
        output = _output(result)
        if result.returncode != 0:
            raise ExerciseFailed(output)
        return output

    def state(self) -> State:
        """Return whether the pending marker is still present, with context."""
        source = self.path.read_text(encoding="utf-8")
        if not I_AM_DONE_REGEX.search(source):
            return State()
        lines = _lines(source)
        matched = next(
            (i for i, line in enumerate(lines) if I_AM_DONE_REGEX.search(line)), None
        )
        if matched is None:
            raise RuntimeError("This should not happen at all")
        first = max(matched - CONTEXT, 0)
        last = matched + CONTEXT
        return State(
            tuple(
                ContextLine(line=line, number=i + 1, important=i == matched)
                for i, line in enumerate(lines[first : last + 1], start=first)
            )
        )

    def looks_done(self) -> bool:
        """True when the pending marker has been removed from the file."""
        return self.state().done


class CompiledExercise:
    """A compiled exercise; its binary is removed when closed or collected."""

    def __init__(self, exercise: Exercise, binary: str) -> None:
        self.exercise = exercise
        self.binary = binary
        self._finalizer = weakref.finalize(self, _remove, binary)

    def run(self) -> ExerciseOutput:
        return self.exercise.run()

    def close(self) -> None:
        self._finalizer()

    def __enter__(self) -> CompiledExercise:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def load_exercises(path: str | os.PathLike = "info.toml") -> list[Exercise]:
    """Read the exercise list from an info.toml file."""
    with open(path, "rb") as handle:
        data = tomllib.load(handle)
    try:
        return [
            Exercise(
                name=entry["name"],
                path=Path(entry["path"]),
                mode=Mode(entry["mode"]),
                hint=entry["hint"],
            )
            for entry in data["exercises"]
        ]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"malformed exercise list: {exc}") from exc