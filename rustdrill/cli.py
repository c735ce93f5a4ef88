"""Command line interface: listing, running, verifying and watching exercises."""

from __future__ import annotations

import argparse
import os
import queue
import subprocess
import sys
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import TextIO

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from rustdrill.exercise import Exercise, ExerciseFailed, load_exercises
from rustdrill.project import RustAnalyzerProject
from rustdrill.run import reset, run
from rustdrill.verify import verify

PROG = "rustdrill"
_DEBOUNCE_SECONDS = 1.0
_POLL_SECONDS = 1.0
_CHANGE_EVENTS = frozenset({"created", "modified", "moved"})

WELCOME = r"""       welcome to...
                 _       _      _ _ _
  _ __ _   _ ___| |_  __| |_ __(_) | |
 | '__| | | / __| __|/ _` | '__| | | |
 | |  | |_| \__ \ |_| (_| | |  | | | |
 |_|   \__,_|___/\__|\__,_|_|  |_|_|_|"""

DEFAULT_OUT = """Thanks for installing rustdrill!

Is this your first time? Don't worry, rustdrill was made for beginners! We are
going to teach you a lot of things about Rust, but before we can get
started, here's a couple of notes about how rustdrill operates:

1. The central concept behind rustdrill is that you solve exercises. These
   exercises usually have some sort of syntax error in them, which will cause
   them to fail compilation or testing. Sometimes there's a logic error instead
   of a syntax error. No matter what error, it's your job to find it and fix it!
   You'll know when you fixed it because then, the exercise will compile and
   rustdrill will be able to move on to the next exercise.
2. If you run rustdrill in watch mode (which we recommend), it'll automatically
   start with the first exercise. Don't get confused by an error message popping
   up as soon as you run rustdrill! This is part of the exercise that you're
   supposed to solve, so open the exercise file in an editor and start your
   detective work!
3. If you're stuck on an exercise, there is a helpful hint you can view by typing
   'hint' (in watch mode), or running `rustdrill hint exercise_name`.
4. If you want to use `rust-analyzer` with exercises, which provides features like
   autocompletion, run the command `rustdrill lsp`.

Got all that? Great! To get started, run `rustdrill watch` in order to get the first
exercise. Make sure to have your editor open!"""

FINISH_LINE = """+----------------------------------------------------+
|          You made it to the Fe-nish line!          |
+--------------------------  ------------------------+
                           \\/\x1b[31m
     ▒▒          ▒▒▒▒▒▒▒▒      ▒▒▒▒▒▒▒▒          ▒▒
   ▒▒▒▒  ▒▒    ▒▒        ▒▒  ▒▒        ▒▒    ▒▒  ▒▒▒▒
   ▒▒▒▒  ▒▒  ▒▒            ▒▒            ▒▒  ▒▒  ▒▒▒▒
 ░░▒▒▒▒░░▒▒  ▒▒            ▒▒            ▒▒  ▒▒░░▒▒▒▒
   ▓▓▓▓▓▓▓▓  ▓▓      ▓▓██  ▓▓  ▓▓██      ▓▓  ▓▓▓▓▓▓▓▓
     ▒▒▒▒    ▒▒      ████  ▒▒  ████      ▒▒░░  ▒▒▒▒
       ▒▒  ▒▒▒▒▒▒        ▒▒▒▒▒▒        ▒▒▒▒▒▒  ▒▒
         ▒▒▒▒▒▒▒▒▒▒▓▓▓▓▓▓▒▒▒▒▒▒▒▒▓▓▒▒▓▓▒▒▒▒▒▒▒▒
           ▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒
             ▒▒▒▒▒▒▒▒▒▒██▒▒▒▒▒▒██▒▒▒▒▒▒▒▒▒▒
           ▒▒  ▒▒▒▒▒▒▒▒▒▒██████▒▒▒▒▒▒▒▒▒▒  ▒▒
         ▒▒    ▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒    ▒▒
       ▒▒    ▒▒    ▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒    ▒▒    ▒▒
       ▒▒  ▒▒    ▒▒                  ▒▒    ▒▒  ▒▒
           ▒▒  ▒▒                      ▒▒  ▒▒\x1b[0m

We hope you enjoyed learning about the various aspects of Rust!
You can also write your own exercises to help the greater community!"""

_WATCH_HELP = """Commands available to you in watch mode:
  hint   - prints the current exercise's hint
  clear  - clears the screen
  quit   - quits watch mode
  !<cmd> - executes a command, like `!rustc --explain E0381`
  help   - displays this help message

Watch mode automatically re-evaluates the current exercise
when you edit a file's contents."""


class WatchStatus(Enum):
    """How watch mode ended."""

    FINISHED = auto()
    UNFINISHED = auto()


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        message = message.replace(
            "the following arguments are required",
            "the following required arguments were not provided",
        )
        self.print_usage(sys.stderr)
        self.exit(2, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog=PROG,
        description="A collection of small exercises to get you used to "
        "writing and reading Rust code",
    )
    parser.add_argument(
        "--nocapture", action="store_true", help="Show outputs from the test exercises"
    )
    commands = parser.add_subparsers(dest="command")
    commands.add_parser(
        "verify", help="Verify all exercises according to the recommended order"
    )
    watch_parser = commands.add_parser(
        "watch", help="Rerun `verify` when files were edited"
    )
    watch_parser.add_argument(
        "--success-hints", action="store_true", help="Show hints on success"
    )
    for name, text in (
        ("run", "Run/Test a single exercise"),
        ("reset", 'Reset a single exercise using "git stash -- <filename>"'),
        ("hint", "Return a hint for the given exercise"),
    ):
        sub = commands.add_parser(name, help=text)
        sub.add_argument("name", help="The name of the exercise")
    listing = commands.add_parser("list", help="List the exercises available")
    listing.add_argument(
        "-p", "--paths", action="store_true", help="Show only the paths of the exercises"
    )
    listing.add_argument(
        "-n", "--names", action="store_true", help="Show only the names of the exercises"
    )
    listing.add_argument(
        "-f",
        "--filter",
        help="Provide a string to match exercise names. "
        "Comma separated patterns are accepted",
    )
    listing.add_argument(
        "-u", "--unsolved", action="store_true", help="Display only unsolved exercises"
    )
    listing.add_argument(
        "-s", "--solved", action="store_true", help="Display only solved exercises"
    )
    commands.add_parser("lsp", help="Enable rust-analyzer for exercises")
    return parser


def rustc_exists() -> bool:
    """True when `rustc --version` can be run successfully."""
    try:
        result = subprocess.run(
            ["rustc", "--version"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError:
        return False
    return result.returncode == 0


def find_exercise(name: str, exercises: Sequence[Exercise]) -> Exercise:
    """Find an exercise by name; "next" picks the first unfinished one."""
    if name == "next":
        found = next((e for e in exercises if not e.looks_done()), None)
        if found is None:
            raise LookupError(
                "🎉 Congratulations! You have done all the exercises!\n"
                "🔚 There are no more exercises to do next!"
            )
        return found
    found = next((e for e in exercises if e.name == name), None)
    if found is None:
        raise LookupError(f"No exercise found for '{name}'!")
    return found


@dataclass
class _SharedHint:
    value: str | None = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get(self) -> str | None:
        with self.lock:
            return self.value

    def set(self, value: str) -> None:
        with self.lock:
            self.value = value


def _shell_command(text: str, hint: _SharedHint, should_quit: threading.Event) -> None:
    if text == "hint":
        current = hint.get()
        if current is not None:
            print(current)
    elif text == "clear":
        print("\x1b[2J\x1b[1;1H")
    elif text == "quit":
        should_quit.set()
        print("Bye!")
    elif text == "help":
        print(_WATCH_HELP)
    elif text.startswith("!"):
        command = text[1:]
        parts = command.split()
        if not parts:
            print("no command provided")
            return
        try:
            subprocess.run(parts)
        except OSError as exc:
            print(f"failed to execute command `{command}`: {exc}")
    else:
        print(f"unknown command: {text}")


def _shell_loop(stream: TextIO, hint: _SharedHint, should_quit: threading.Event) -> None:
    while True:
        try:
            raw = stream.readline()
        except (OSError, ValueError) as error:
            print(f"error reading command: {error}")
            return
        if raw == "":
            return
        _shell_command(raw.strip(), hint, should_quit)


def _spawn_watch_shell(hint: _SharedHint, should_quit: threading.Event) -> None:
    print(
        "Welcome to watch mode! You can type 'help' to get an overview of "
        "the commands you can use here."
    )
    threading.Thread(
        target=_shell_loop, args=(sys.stdin, hint, should_quit), daemon=True
    ).start()


class _ChangeCollector(FileSystemEventHandler):
    def __init__(self, sink: queue.Queue[Path]) -> None:
        self._sink = sink

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _CHANGE_EVENTS:
            return
        for raw in (event.src_path, getattr(event, "dest_path", "")):
            if raw:
                self._sink.put(Path(os.fsdecode(raw)))


def _collect(events: queue.Queue[Path], first: Path) -> list[Path]:
    batch = {first: None}
    while True:
        try:
            batch[events.get(timeout=_DEBOUNCE_SECONDS)] = None
        except queue.Empty:
            return list(batch)


def _ends_with(full: Path, tail: Path) -> bool:
    parts = tuple(part for part in tail.parts if part != ".")
    return bool(parts) and len(parts) <= len(full.parts) and full.parts[-len(parts):] == parts


def _clear_screen() -> None:
    print("\x1bc")


def watch(
    exercises: Sequence[Exercise], verbose: bool = False, success_hints: bool = False
) -> WatchStatus:
    """Verify exercises, then re-verify whenever an exercise file changes."""
    events: queue.Queue[Path] = queue.Queue()
    should_quit = threading.Event()
    observer = Observer()
    observer.schedule(_ChangeCollector(events), "./exercises", recursive=True)
    observer.start()
    try:
        _clear_screen()
        failed = verify(exercises, (0, len(exercises)), verbose, success_hints)
        if failed is None:
            return WatchStatus.FINISHED
        hint = _SharedHint(failed.hint)
        _spawn_watch_shell(hint, should_quit)
        while True:
            try:
                first = events.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                batch = []
            else:
                batch = _collect(events, first)
            for path in batch:
                if path.suffix != ".rs" or not path.exists():
                    continue
                filepath = path.resolve()
                changed = next(
                    (e for e in exercises if _ends_with(filepath, e.path)), None
                )
                pending = ([changed] if changed is not None else []) + [
                    e
                    for e in exercises
                    if not e.looks_done() and not _ends_with(filepath, e.path)
                ]
                num_done = sum(
                    1
                    for e in exercises
                    if e.looks_done() and not _ends_with(filepath, e.path)
                )
                _clear_screen()
                failed = verify(
                    pending, (num_done, len(exercises)), verbose, success_hints
                )
                if failed is None:
                    return WatchStatus.FINISHED
                hint.set(failed.hint)
            if should_quit.is_set():
                return WatchStatus.UNFINISHED
    finally:
        observer.stop()
        observer.join()


def _list(exercises: Sequence[Exercise], args: argparse.Namespace) -> int:
    if not args.paths and not args.names:
        print(f"{'Name':<17}\t{'Path':<46}\t{'Status':<7}")
    done_count = 0
    filters = (args.filter or "").lower()
    for exercise in exercises:
        fname = str(exercise.path)
        matches = any(
            part in exercise.name or part in fname
            for part in filters.split(",")
            if part.strip()
        )
        done = exercise.looks_done()
        if done:
            done_count += 1
        status = "Done" if done else "Pending"
        wanted = (
            (done and args.solved)
            or (not done and args.unsolved)
            or (not args.solved and not args.unsolved)
        )
        if not wanted or not (matches or args.filter is None):
            continue
        if args.paths:
            line = f"{fname}\n"
        elif args.names:
            line = f"{exercise.name}\n"
        else:
            line = f"{exercise.name:<17}\t{fname:<46}\t{status:<7}\n"
        try:
            sys.stdout.write(line)
        except BrokenPipeError:
            return 0
        except OSError:
            return 1
    total = len(exercises)
    percentage = done_count / total * 100.0 if total else float("nan")
    print(
        f"Progress: You completed {done_count} / {total} exercises "
        f"({percentage:.1f} %)."
    )
    return 0


def _lsp() -> int:
    project = RustAnalyzerProject()
    try:
        project.get_sysroot_src()
    except OSError:
        print("Couldn't find toolchain path, do you have `rustc` installed?")
        return 1
    project.exercises_to_json()
    if not project.crates:
        print("Failed find any exercises, make sure you're in the exercises folder")
        return 0
    try:
        project.write_to_disk()
    except OSError:
        print("Failed to write rust-project.json to disk for rust-analyzer")
        return 0
    print("Successfully generated rust-project.json")
    print(
        "rust-analyzer will now parse exercises, restart your language server or editor"
    )
    return 0


def _watch_command(exercises: Sequence[Exercise], verbose: bool, hints: bool) -> int:
    try:
        status = watch(exercises, verbose, hints)
    except OSError as exc:
        print(f"Error: Could not watch your progress. Error message was {exc!r}.")
        print(
            "Most likely you've run out of disk space or your "
            "'inotify limit' has been reached."
        )
        return 1
    if status is WatchStatus.FINISHED:
        print("🎉 All exercises completed! 🎉")
        print(f"\n{FINISH_LINE}\n")
    else:
        print("We hope you're enjoying learning about Rust!")
        print(
            "If you want to continue working on the exercises at a later point, "
            f"you can simply run `{PROG} watch` again"
        )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    args = _build_parser().parse_args(argv)

    if args.command is None:
        print(f"\n{WELCOME}\n")

    if not Path("info.toml").exists():
        print(f"{PROG} must be run from the directory that holds info.toml")
        print("Try `cd` into the exercises folder!")
        return 1

    if not rustc_exists():
        print("We cannot find `rustc`.")
        print("Try running `rustc --version` to diagnose your problem.")
        print("For instructions on how to install Rust, check the README.")
        return 1

    exercises = load_exercises("info.toml")
    verbose = args.nocapture

    if args.command is None:
        print(f"{DEFAULT_OUT}\n")
        return 0

    if args.command == "list":
        return _list(exercises, args)
    if args.command == "verify":
        failed = verify(exercises, (0, len(exercises)), verbose, False)
        return 0 if failed is None else 1
    if args.command == "lsp":
        return _lsp()
    if args.command == "watch":
        return _watch_command(exercises, verbose, args.success_hints)

    try:
        exercise = find_exercise(args.name, exercises)
    except LookupError as exc:
        print(exc)
        return 1

    if args.command == "run":
        try:
            run(exercise, verbose)
        except ExerciseFailed:
            return 1
    elif args.command == "reset":
        try:
            reset(exercise).wait()
        except OSError:
            return 1
    elif args.command == "hint":
        print(exercise.hint)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())