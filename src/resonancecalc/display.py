# src/resonancecalc/display.py
from __future__ import annotations

import sys
from collections.abc import Iterable

from colorama import Fore, Style

from resonancecalc import __version__
from resonancecalc.config import list_profiles_with_descriptions, read_current_profile
from resonancecalc.constants import MAX_SLOTS
from resonancecalc.engine import Event, ResonanceEngine
from resonancecalc.fmt import format_args, format_value, wrap_description
from resonancecalc.invoke import Invocation, enabled_operations
from resonancecalc.registry import DiscoveryReport, Index


def screen_header() -> str:
    return (f"{Fore.YELLOW}{Style.BRIGHT}"
            f"Resonance Calculator v{__version__} — checked 256-bit arithmetic & triad engine"
            f"{Style.RESET_ALL}")


def _group_by_category(index: Index, names: Iterable[str]) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {}
    for name in names:
        groups.setdefault(index.categories.get(name) or "General", []).append(name)
    return groups


def show_operation_list(index: Index) -> None:
    """Every enabled operation, grouped by category, with its call name and description."""
    enabled = enabled_operations(index)
    groups = _group_by_category(index, enabled)

    print(screen_header())
    print()
    print(f"{Fore.YELLOW}Available operations: {len(enabled)} of {len(index.funcs)}{Style.RESET_ALL}")
    print()
    for cat in sorted(groups, key=str.lower):
        print(f"{Fore.CYAN}{Style.BRIGHT}{cat}:{Style.RESET_ALL}")
        for name in groups[cat]:
            prefix = f"  {Fore.GREEN}{name}{Style.RESET_ALL}"
            ref = index.oeis.get(name)
            desc = index.descriptions.get(name, "") or index.labels.get(name, "")
            if ref:
                desc = f"{desc} [{ref}]" if desc else f"[{ref}]"
            print(wrap_description(prefix, desc, indent_cols=6))
        print()


def print_invocation(inv: Invocation) -> None:
    head = f"{Fore.CYAN}{inv.label}{Style.RESET_ALL}"
    if inv.skipped:
        print(f"{head}: {Fore.YELLOW}skipped{Style.RESET_ALL} ({inv.skipped})")
        return
    print(f"{head} = {format_value(inv.value)}")


def print_engine_result(entry: str, value: object) -> None:
    if value is None:
        print(f"{Fore.GREEN}{entry}: ok{Style.RESET_ALL}")
    else:
        print(f"{Fore.GREEN}{entry}{Style.RESET_ALL} = {format_value(value)}")


def print_events(events: Iterable[Event], *, last: int | None = None) -> None:
    evs = list(events)
    if last is not None:
        evs = evs[-last:]
    if not evs:
        print(f"{Style.DIM}(no events){Style.RESET_ALL}")
        return
    for ev in evs:
        print(f"  {Style.DIM}#{ev.sequence:<4} block {ev.block_number:<8}{Style.RESET_ALL}"
              f"{Fore.MAGENTA}{ev.name}{Style.RESET_ALL}({format_args(ev.args)})")


def print_state(engine: ResonanceEngine) -> None:
    st = engine.snapshot()
    roles = engine.roles
    rows = [
        ("curator", roles.curator),
        ("oracle", roles.oracle),
        ("keeper", roles.keeper),
        ("magnitude bound", format_value(st.magnitude_bound)),
        ("current phase", format_value(st.current_phase)),
        ("harmonic slots", f"{format_value(st.harmonic_slot_count)} of {MAX_SLOTS} (high-water mark)"),
        ("oracle results", format_value(len(st.oracle_results))),
        ("triad resolutions", format_value(st.triad_resolution_count)),
        ("flux computations", format_value(st.flux_computation_count)),
        ("oracle calls", format_value(st.oracle_call_count)),
        ("resonant points", format_value(st.resonant_point_count)),
        ("super calcs", format_value(st.super_calc_count)),
    ]
    for recipient, amount in sorted(st.credited.items()):
        rows.append((f"credited {recipient}", format_value(amount)))
    for k, v in rows:
        print(f"  {k:.<22} {v}")
    used = sorted(st.harmonic_slots.items())
    if used:
        print(f"  {Style.DIM}slots:{Style.RESET_ALL} "
              + ", ".join(f"[{i}]={format_value(v)}" for i, v in used[:16])
              + (" …" if len(used) > 16 else ""))


def print_discovery_report(index: Index, rep: DiscoveryReport) -> None:
    print(f"[debug] discovered operations: {len(index.funcs)}", file=sys.stderr)
    for name, cnt in rep.ws_loaded:
        print(f"[discovery] {Fore.GREEN}ws OK{Style.RESET_ALL} {name}: {cnt} operation(s)", file=sys.stderr)
    for name, err in rep.ws_failed:
        print(f"[discovery] {Fore.RED}ws FAIL{Style.RESET_ALL} {name}: {err}", file=sys.stderr)
    for name, cnt in rep.pkg_loaded:
        print(f"[discovery] pkg {name}: {cnt}", file=sys.stderr)
    if rep.skipped_duplicates:
        print(f"[discovery] {Fore.YELLOW}SKIP{Style.RESET_ALL} "
              f"{len(rep.skipped_duplicates)} duplicate name(s) shadowed by the workspace.", file=sys.stderr)


def show_intro_help() -> None:
    y, c, r = Fore.YELLOW, Fore.CYAN, Style.RESET_ALL
    print(screen_header())
    print(f"""
{y}Operations{r}
  {c}<operation> args...{r}      evaluate one catalogue operation, e.g.  digital_root 2**200
                           integers accept expressions: 2**256-1, 1e18, 0xff, 20!, 1_000
                           lists: [1,2,3] or 1,2,3    bytes: 0xdeadbeef
  {c}list{r}                     list all operations by category

{y}Engine session{r}
  {c}call <entry> args...{r}     run an engine entry point as the current caller
                           entries: resolve_triad compute_flux store_harmonic
                                    set_magnitude_bound invoke_oracle update_phase_lock
                                    record_resonant_point execute_super_calc
                                    verify_and_emit_triad receive
                                    get_harmonic get_last_oracle_result
  {c}as <role|address>{r}        switch caller: curator, oracle, keeper or any 0x address
  {c}value <n>{r}                value attached to the next calls (0 to stop)
  {c}block <n>{r}                set the block number
  {c}events [n]{r}               show the event log (last n)
  {c}state{r}                    show engine state
  {c}reset{r}                    new engine from the profile's [ENGINE] section

{y}Session{r}
  {c}p{r}                        list profiles; type a profile name to switch
  {c}fast on|off{r}              per-operation input limits
  {c}debug on|off{r}             timings and event trace on stderr
  {c}h{r} / {c}q{r}                    help / quit
""")


def print_profiles_with_descriptions() -> None:
    pairs = list_profiles_with_descriptions()
    if not pairs:
        print("\nAvailable profiles: (none)")
        return
    current = read_current_profile()
    lines = []
    for name, desc in pairs:
        mark = ">" if current and name == current else " "
        lines.append(f"{mark} {name:13} — {desc}")
    print("\nAvailable profiles:\n  " + "\n  ".join(lines))
