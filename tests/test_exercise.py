import os
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from rustdrill.exercise import (
    CompiledExercise,
    ContextLine,
    Exercise,
    ExerciseFailed,
    Mode,
    State,
    clean,
    load_exercises,
    temp_file,
)

PENDING = "// fake_exercise\n\n// I AM NOT DONE\n\nfn main() {\n\n}\n"
FINISHED = "// fake_exercise\n\nfn main() {\n\n}\n"


def _completed(code=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(args=[], returncode=code, stdout=stdout, stderr=stderr)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_temp_file_contains_pid():
    assert temp_file().startswith(f"./temp_{os.getpid()}_")


def test_clean(workdir):
    Path(temp_file()).write_text("")
    clean()
    assert not Path(temp_file()).exists()
    clean()
    assert not Path(temp_file()).exists()


def test_compiled_exercise_close_removes_binary(workdir):
    Path(temp_file()).write_text("")
    exercise = Exercise("example", workdir / "pending_exercise.rs", Mode.COMPILE)
    with mock.patch("subprocess.run", return_value=_completed()):
        compiled = exercise.compile()
    assert isinstance(compiled, CompiledExercise)
    with compiled:
        assert Path(temp_file()).exists()
    assert not Path(temp_file()).exists()


def test_pending_state(workdir):
    path = workdir / "pending_exercise.rs"
    path.write_text(PENDING)
    exercise = Exercise("pending_exercise", path, Mode.COMPILE)
    expected = State(
        (
            ContextLine("// fake_exercise", 1, False),
            ContextLine("", 2, False),
            ContextLine("// I AM NOT DONE", 3, True),
            ContextLine("", 4, False),
            ContextLine("fn main() {", 5, False),
        )
    )
    assert exercise.state() == expected
    assert not exercise.looks_done()


def test_finished_exercise(workdir):
    path = workdir / "finished_exercise.rs"
    path.write_text(FINISHED)
    exercise = Exercise("finished_exercise", path, Mode.COMPILE)
    assert exercise.state() == State()
    assert exercise.looks_done()


def test_marker_on_first_line_context_starts_at_one(workdir):
    path = workdir / "first.rs"
    path.write_text("// I AM NOT DONE\n\n#[test]\nfn it_works() {}\n")
    state = Exercise("first", path, Mode.TEST).state()
    assert [c.number for c in state.context] == [1, 2, 3]
    assert state.context[0].important


def test_missing_file_raises(workdir):
    exercise = Exercise("missing", workdir / "missing.rs", Mode.COMPILE)
    with pytest.raises(OSError):
        exercise.state()


def test_exercise_with_output(workdir):
    exercise = Exercise("exercise_with_output", workdir / "testSuccess.rs", Mode.TEST)
    with mock.patch("subprocess.run", return_value=_completed(stdout=b"THIS TEST TOO SHALL PASS\n")) as run:
        out = exercise.compile().run()
    assert "THIS TEST TOO SHALL PASS" in out.stdout
    compile_args = run.call_args_list[0].args[0]
    run_args = run.call_args_list[1].args[0]
    assert compile_args[:2] == ["rustc", "--test"]
    assert run_args == [temp_file(), "--show-output"]


def test_compile_failure_raises_and_cleans(workdir):
    Path(temp_file()).write_text("")
    exercise = Exercise("compFailure", workdir / "compFailure.rs", Mode.COMPILE)
    with mock.patch("subprocess.run", return_value=_completed(code=1, stderr=b"error: expected pattern")):
        with pytest.raises(ExerciseFailed) as info:
            exercise.compile()
    assert info.value.output.stderr == "error: expected pattern"
    assert not Path(temp_file()).exists()


def test_run_failure_raises(workdir):
    exercise = Exercise("testNotPassed", workdir / "testNotPassed.rs", Mode.COMPILE)
    with mock.patch("subprocess.run", return_value=_completed(code=101, stdout=b"out", stderr=b"panicked")) as run:
        with pytest.raises(ExerciseFailed) as info:
            exercise.run()
    assert info.value.output.stdout == "out"
    assert info.value.output.stderr == "panicked"
    assert run.call_args.args[0] == [temp_file(), ""]


def test_clippy_without_directory_fails(workdir):
    exercise = Exercise("clippy1", workdir / "clippy1.rs", Mode.CLIPPY)
    with mock.patch("subprocess.run", return_value=_completed()):
        with pytest.raises(RuntimeError):
            exercise.compile()


def test_str_is_path(workdir):
    path = Path("exercises/00_intro/intro1.rs")
    assert str(Exercise("intro1", path, Mode.COMPILE)) == str(path)


def test_load_exercises(workdir):
    (workdir / "info.toml").write_text(
        '[[exercises]]\nname = "intro1"\npath = "exercises/intro1.rs"\n'
        'mode = "compile"\nhint = "Hello!"\n\n'
        '[[exercises]]\nname = "if1"\npath = "exercises/if1.rs"\n'
        'mode = "test"\nhint = ""\n'
    )
    exercises = load_exercises("info.toml")
    assert [e.name for e in exercises] == ["intro1", "if1"]
    assert [e.mode for e in exercises] == [Mode.COMPILE, Mode.TEST]
    assert exercises[0].hint == "Hello!"
    assert exercises[1].path == Path("exercises/if1.rs")


def test_load_exercises_bad_mode(workdir):
    (workdir / "info.toml").write_text(
        '[[exercises]]\nname = "x"\npath = "x.rs"\nmode = "bogus"\nhint = ""\n'
    )
    with pytest.raises(ValueError):
        load_exercises("info.toml")