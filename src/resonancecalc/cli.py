# src/resonancecalc/cli.py

"""
Resonance Calculator - checked 256-bit arithmetic and the triad engine

Description:
    Evaluates operations from the resonance catalogue (checked arithmetic,
    digit functions, number theory, combinatorics, bits, arrays, triad
    kernels, hashing) and drives a stateful ResonanceEngine session from
    an interactive prompt.

usage: see resonancecalc -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import shlex
import sys
import textwrap
import threading
import traceback
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

import resonancecalc.config as CONFIG
from resonancecalc.display import (
    print_discovery_report,
    print_engine_result,
    print_events,
    print_invocation,
    print_profiles_with_descriptions,
    print_state,
    screen_header,
    show_intro_help,
    show_operation_list,
)
from resonancecalc.errors import EngineError
from resonancecalc.invoke import invoke
from resonancecalc.registry import Index, discover, discover_with_report
from resonancecalc.runtime import APPLY, ensure_runtime_deps
from resonancecalc.runtime import current as _rt_current
from resonancecalc.session import Session
from resonancecalc.utility import UserInputError, clear_screen, flatten_dotted, typename
from resonancecalc.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook

    def _thread_excepthook(args):
        sys.stderr.write("\n[UNCAUGHT THREAD EXCEPTION]\n")
        traceback.print_exception(args.exc_type, args.exc_value, args.exc_traceback, file=sys.stderr)
        sys.stderr.flush()
    threading.excepthook = _thread_excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    if not msg.startswith("Error:"):
        msg = f"{Fore.RED}Error:{Style.RESET_ALL} {msg}"
    print(msg, file=sys.stderr)


def _print_engine_error(e: EngineError) -> None:
    print(f"{Fore.RED}{Style.BRIGHT}{type(e).__name__}{Style.RESET_ALL}: {e}", file=sys.stderr)


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _apply_profile(name: str, *, debug_flag: bool) -> str:
    if not CONFIG.has_profile(name):
        raise UserInputError(
            f"unknown profile: '{name}'. Available profiles: {', '.join(CONFIG.list_all_profiles())}"
        )
    selected = CONFIG.load_settings(name)
    APPLY(selected)
    rt = _rt_current()
    if debug_flag:
        rt.debug = True
    if rt.debug:
        print(f"[debug] active profile: {name}", file=sys.stderr)
        if selected._source:
            print(f"[debug] profile file: {selected._source}", file=sys.stderr)
        flat = flatten_dotted(rt.settings)
        for k in sorted(flat, key=str.lower):
            print(f"        {k:.<40} {flat[k]!r} ({typename(flat[k])})", file=sys.stderr)
        print(file=sys.stderr)
    return name


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create workspace folders and copy packaged profiles if missing.

      init overwrite
          Meant for developers. Requires environment variable RESONANCE_DEV=1.
          Replaces the workspace profiles with the packaged ones.

      list
          List all available operations.

      where
          Show the workspace and package paths.

      active
          Show the last used profile.

    examples:
      resonancecalc digital_root 2**200
      resonancecalc safe_mul 2**128 2**128
      resonancecalc super_calc [3,6,9] 7
      resonancecalc                       (interactive session)
    """)

    p = argparse.ArgumentParser(
        prog="resonancecalc",
        description="Resonance Calculator — checked 256-bit arithmetic & triad engine",
        usage=(
            "resonancecalc [operation [args ...]] [--profile NAME] [--debug]\n"
            "       resonancecalc init|list|where|active\n"
            "       resonancecalc -h | --help\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="operation args",
                   help="operation name followed by its arguments, or a command")
    p.add_argument("--profile", default=None, help="Profile to apply (default: last used, then 'default')")
    p.add_argument("--debug", action="store_true", help="Show timings, engine events and tracebacks")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except EngineError as e:
        _print_engine_error(e)
        return 3
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


# ---- main ----
def _main_impl(argv=None) -> int:
    colorama_init()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps(strict=True):
        return 1

    items = list(args.items)
    command = items[0].lower() if items else None

    if command == "init":
        if items[1:] == ["overwrite"]:
            if os.environ.get("RESONANCE_DEV") != "1":
                print("Refusing to overwrite: set RESONANCE_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0

    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('resonancecalc').joinpath('..').resolve()}")
        return 0

    ensure_workspace_seeded()

    if command == "active":
        print(f"Active profile: {CONFIG.read_current_profile() or 'default'}")
        return 0

    profile_name = _apply_profile(_select_profile_name(args.profile), debug_flag=args.debug)
    if args.profile:
        CONFIG.write_current_profile(profile_name)

    if rt.debug:
        index, rep = discover_with_report(workspace_dir())
        print_discovery_report(index, rep)
    else:
        index = discover(workspace_dir())

    if command == "list":
        show_operation_list(index)
        return 0

    # --- one-shot operation ---
    if items:
        print_invocation(invoke(index, items[0], items[1:]))
        return 0

    return repl(index, profile_name)


# ---- REPL ----


def _toggle(rt, attr: str, parts: list[str], label: str) -> None:
    if len(parts) == 1 or parts[1] == "status":
        print(f"{label} is currently {'ON' if getattr(rt, attr) else 'OFF'}.")
    elif parts[1] in {"on", "off"}:
        setattr(rt, attr, parts[1] == "on")
        print(f"{label} {'enabled' if parts[1] == 'on' else 'disabled'} for this session.")
    else:
        print(f"Usage: {label.split()[0].upper()} [on|off|status]")


def _handle_session_command(session: Session, parts: list[str]) -> bool:
    """Engine-session commands; returns False when the line is not one of them."""
    cmd = parts[0].lower()
    rest = parts[1:]

    if cmd == "call":
        if not rest:
            raise UserInputError("usage: call <entry> args...")
        print_engine_result(rest[0], session.call(rest[0], rest[1:]))
        return True
    if cmd == "as":
        if len(rest) != 1:
            raise UserInputError("usage: as <curator|oracle|keeper|0xaddress>")
        addr = session.switch_caller(rest[0])
        role = session.role_of(addr)
        print(f"Caller: {addr}" + (f" ({role})" if role else ""))
        return True
    if cmd == "block":
        if len(rest) != 1:
            print(f"Block: {session.block_number}")
        else:
            print(f"Block: {session.set_block(rest[0])}")
        return True
    if cmd == "value":
        if len(rest) != 1:
            print(f"Attached value: {session.value}")
        else:
            print(f"Attached value: {session.set_value(rest[0])}")
        return True
    if cmd == "events":
        last = int(rest[0]) if rest and rest[0].isdigit() else None
        print_events(session.engine.events, last=last)
        return True
    if cmd == "state":
        print_state(session.engine)
        return True
    return False


def repl(index: Index, profile_name: str) -> int:
    if not _rt_current().debug:
        clear_screen()
    print(screen_header())

    current_profile = profile_name
    session = Session.from_config()

    while True:
        try:
            prompt = (f"\n[{current_profile}] {session.caller[:10]}… block {session.block_number}"
                      f" — operation, command or profile (h=Help, q=Quit): ")
            user_input = input(prompt).strip()

            low = user_input.lower()
            if low in {"", "q", "quit"}:
                break
            if low in {"h", "help"}:
                show_intro_help()
                continue
            if low in {"p", "list profiles"}:
                print_profiles_with_descriptions()
                continue
            if low == "list":
                show_operation_list(index)
                continue
            if low == "reset":
                session = Session.from_config()
                print("New engine session from the [ENGINE] profile section.")
                continue

            try:
                parts = shlex.split(user_input)
            except ValueError as e:
                raise UserInputError(f"cannot split input: {e}") from None
            first = parts[0].lower()

            if first in {"fast", "debug"}:
                _toggle(_rt_current(), "fast_mode" if first == "fast" else "debug",
                        [p.lower() for p in parts], "Fast mode" if first == "fast" else "Debug mode")
                continue

            if _handle_session_command(session, parts):
                continue

            if index.resolve(parts[0]) is not None:
                print_invocation(invoke(index, parts[0], parts[1:]))
                continue

            if CONFIG.has_profile(user_input):
                current_profile = _apply_profile(user_input, debug_flag=False)
                CONFIG.write_current_profile(user_input)
                print(f"Applied profile: {current_profile}")
                continue

            print(f"{Fore.RED}Invalid input: {Style.RESET_ALL}'{user_input}'. Type H for help.")
        except UserInputError as e:
            _print_user_error(str(e))
        except EngineError as e:
            _print_engine_error(e)
        except (EOFError, KeyboardInterrupt):
            print()
            break
        except Exception as e:
            if _rt_current().debug:
                traceback.print_exc()
            else:
                _print_user_error(f"{e.__class__.__name__}: {e}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
