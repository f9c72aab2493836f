from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Sequence

from .application import SizingApplication
from .config import configure_logging
from .db.session import init_db
from .persistence import PersistenceService
from .result_builder import ResultBuilder
from .session_setup import SessionDataError, build_sizing_session
from .sizing.catalogs import PANEL_OPTIONS, REGIONS, search_appliances
from .sizing.consumption import ConsumptionMode


def build_argument_parser() -> argparse.ArgumentParser:
    """
    Build the CLI argument parser used by entry points.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(description="Household solar sizing CLI")
    parser.add_argument("--log-level", default=None, help="Logging level (default INFO)")
    sub = parser.add_subparsers(dest="command")

    calculate = sub.add_parser("calculate", help="Size a system for one household")
    calculate.add_argument(
        "--session-file",
        type=str,
        default=None,
        help="Path to a JSON file with the household session",
    )
    calculate.add_argument(
        "--bill",
        type=float,
        default=None,
        help="Monthly bill amount; switches to bill mode",
    )
    calculate.add_argument(
        "--advice",
        action="store_true",
        help="Request the advisory text and include it in the report",
    )
    calculate.add_argument(
        "--no-save",
        action="store_true",
        help="Do not write report files to the results directory",
    )

    catalog = sub.add_parser("catalog", help="Show reference catalogs")
    catalog_sub = catalog.add_subparsers(dest="catalog_command")
    catalog_appliances = catalog_sub.add_parser("appliances", help="List catalog appliances")
    catalog_appliances.add_argument("--search", default=None, help="Filter by name or category")
    catalog_sub.add_parser("regions", help="List regions and peak sun hours")
    catalog_sub.add_parser("panels", help="List panel options")
    catalog_sub.add_parser("inverters", help="List the inverter catalog used for sizing")

    inverter = sub.add_parser("inverter", help="Manage the inverter catalog in the database")
    inverter_sub = inverter.add_subparsers(dest="inverter_command")
    inv_upsert = inverter_sub.add_parser("upsert", help="Create or update an inverter")
    inv_upsert.add_argument("--label", required=True)
    inv_upsert.add_argument("--brand")
    inv_upsert.add_argument("--capacity-kw", type=float, required=True, dest="capacity_kw")
    inv_upsert.add_argument(
        "--phase",
        default="single-phase",
        help="single-phase / three-phase (1P and 3P accepted)",
    )

    session = sub.add_parser("session", help="Manage saved household sessions")
    session_sub = session.add_subparsers(dest="session_command")

    session_list = session_sub.add_parser("list", help="List saved sessions")
    session_list.add_argument(
        "--json",
        action="store_true",
        help="Print the full session payloads as JSON",
    )

    session_save = session_sub.add_parser("save", help="Save/update a session from a JSON file")
    session_save.add_argument("--name", required=True, help="Session name")
    session_save.add_argument("--file", required=True, help="Path to the JSON file")

    session_run = session_sub.add_parser("run", help="Run a saved session")
    run_group = session_run.add_mutually_exclusive_group(required=True)
    run_group.add_argument("--name", help="Saved session name")
    run_group.add_argument("--id", type=int, help="Saved session ID")
    session_run.add_argument("--advice", action="store_true", help="Request the advisory text")
    session_run.add_argument(
        "--no-save",
        action="store_true",
        help="Do not write report files to the results directory",
    )

    return parser


def _load_json_file(path: str | Path) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise SystemExit(f"File not found: {file_path}")
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON file ({file_path}): {exc}") from exc


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


def _calculate_payload(args: argparse.Namespace) -> dict[str, Any]:
    payload = _load_json_file(args.session_file) if args.session_file else {}
    if args.bill is not None:
        if args.bill < 0:
            raise SystemExit("The monthly bill cannot be negative.")
        payload["mode"] = ConsumptionMode.BILL.value
        payload["monthly_bill_amount"] = args.bill
    return payload


def _configure_outputs(app: SizingApplication, args: argparse.Namespace) -> None:
    app.save_outputs = not getattr(args, "no_save", False)
    app.result_builder = ResultBuilder() if app.save_outputs else None


def main(argv: Sequence[str] | None = None) -> None:
    """
    CLI entry point for sizing, catalogs and saved sessions.

    Args:
        argv: Optional sequence of CLI args (defaults to sys.argv).
    """
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return

    if args.command == "catalog":
        if not args.catalog_command:
            parser.error("Specify a catalog subcommand (appliances/regions/panels/inverters).")
        if args.catalog_command == "appliances":
            _print_json([asdict(item) for item in search_appliances(args.search)])
            return
        if args.catalog_command == "regions":
            _print_json(
                [
                    {"index": index, "name": region.name, "peak_sun_hours": region.peak_sun_hours}
                    for index, region in enumerate(REGIONS)
                ]
            )
            return
        if args.catalog_command == "panels":
            _print_json([{"watts": panel.watts, "label": panel.label} for panel in PANEL_OPTIONS])
            return

    init_db()
    persistence = PersistenceService()
    app = SizingApplication(persistence=persistence)

    if args.command == "catalog":
        if args.catalog_command == "inverters":
            _print_json([option.to_dict() for option in app.inverter_catalog()])
            return
        parser.error(f"Unknown catalog subcommand: {args.catalog_command}")

    if args.command == "calculate":
        _configure_outputs(app, args)
        payload = _calculate_payload(args)
        try:
            if args.advice:
                summary = app.consult(payload)
            else:
                summary = app.calculate(payload)
        except SessionDataError as exc:
            raise SystemExit(f"Invalid session: {exc}") from exc
        _print_json(summary)
        return

    if args.command == "inverter":
        if args.inverter_command != "upsert":
            parser.error("Specify an inverter subcommand (upsert).")
        if args.capacity_kw <= 0:
            parser.error("--capacity-kw must be positive.")
        try:
            record = persistence.upsert_inverter(
                {
                    "label": args.label,
                    "brand": args.brand,
                    "capacity_kw": args.capacity_kw,
                    "phase_type": args.phase,
                }
            )
        except ValueError as exc:
            parser.error(str(exc))
        print(f"Inverter '{record.label}' saved ({record.capacity_kw:g} kW, {record.phase_type}).")
        return

    if args.command == "session":
        if not args.session_command:
            parser.error("Specify a session subcommand (list/save/run).")

        if args.session_command == "list":
            sessions = persistence.list_sessions()
            if args.json:
                data = [{"id": s.id, "name": s.name, "data": s.data} for s in sessions]
            else:
                data = [{"id": s.id, "name": s.name} for s in sessions]
            _print_json(data)
            return

        if args.session_command == "save":
            data = _load_json_file(args.file)
            try:
                session = build_sizing_session(data)
            except SessionDataError as exc:
                raise SystemExit(f"Invalid session: {exc}") from exc
            record = persistence.save_session(args.name, session)
            print(f"Session '{record.name}' saved with ID {record.id}.")
            return

        if args.session_command == "run":
            _configure_outputs(app, args)
            try:
                summary = app.run_saved_session(
                    config_id=args.id,
                    name=args.name,
                    with_advice=args.advice,
                )
            except LookupError as exc:
                raise SystemExit(str(exc)) from exc
            except SessionDataError as exc:
                raise SystemExit(f"Invalid session: {exc}") from exc
            _print_json(summary)
            return

        parser.error(f"Unknown session subcommand: {args.session_command}")

    parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()
