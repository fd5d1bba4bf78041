from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Any, Iterable

SETTINGS_DESTS = {"settings_path", "save_settings_path"}


def add_settings_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--settings",
        dest="settings_path",
        default=None,
        help="Load option defaults from a settings file (json or csv).",
    )
    parser.add_argument(
        "--save-settings",
        dest="save_settings_path",
        default=None,
        help="Save the effective option values to a settings file (json or csv).",
    )


def split_settings_argv(
    argv: Iterable[str],
) -> tuple[list[str], str | None, str | None]:
    """Pull ``--settings``/``--save-settings`` out of argv, wherever they appear."""
    pre = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    add_settings_args(pre)
    known, rest = pre.parse_known_args(list(argv))
    return rest, known.settings_path, known.save_settings_path


def detect_command(argv: Iterable[str]) -> str | None:
    for arg in argv:
        if not arg.startswith("-"):
            return arg
    return None


def _csv_value(raw: str) -> Any:
    text = raw.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def read_settings(path: Path) -> dict[str, Any]:
    """
    Read a settings file.

    ``.csv`` files hold ``key,value`` rows (an optional ``key,value`` header
    is skipped, values are JSON-decoded when possible). Anything else is
    read as a JSON object.
    """
    if not path.exists():
        raise SystemExit(f"Settings file not found: {path}")

    if path.suffix.lower() == ".csv":
        data: dict[str, Any] = {}
        with path.open("r", newline="", encoding="utf-8") as handle:
            for row in csv.reader(handle):
                if not row or not row[0].strip():
                    continue
                key = row[0].strip()
                if key == "key" and len(row) > 1 and row[1].strip() == "value":
                    continue
                data[key] = _csv_value(row[1]) if len(row) > 1 else ""
        return data

    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SystemExit(f"Invalid JSON in settings file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SystemExit(f"Settings file must be a JSON object: {path}")
    return data


def settings_for(data: dict[str, Any], command: str | None) -> dict[str, Any]:
    """
    Pick the section of ``data`` that applies to ``command``.

    A flat mapping applies to every command. Otherwise the section named
    after the command wins, then ``default``.
    """
    if command and isinstance(data.get(command), dict):
        return dict(data[command])
    if isinstance(data.get("default"), dict):
        return dict(data["default"])
    if all(not isinstance(v, dict) for v in data.values()):
        return dict(data)
    return {}


def _option_actions(parser: argparse.ArgumentParser) -> list[argparse.Action]:
    return [a for a in parser._actions if a.option_strings and a.dest != "help"]


def _given_on_command_line(action: argparse.Action, argv: Iterable[str]) -> bool:
    for arg in argv:
        for opt in action.option_strings:
            if arg == opt or arg.startswith(opt + "="):
                return True
    return False


def apply_defaults(
    parser: argparse.ArgumentParser,
    settings: dict[str, Any],
    argv: Iterable[str] = (),
) -> None:
    """
    Use ``settings`` as option defaults on ``parser``.

    argparse extends the default of an ``append`` option instead of
    replacing it, so such options keep a ``None`` default whenever they
    appear in ``argv``: the command line replaces the settings list.
    """
    argv = list(argv)
    for action in _option_actions(parser):
        if action.dest not in settings:
            continue
        action.required = False
        if isinstance(action, argparse._AppendAction) and _given_on_command_line(action, argv):
            continue
        action.default = settings[action.dest]


def find_subparser(
    parser: argparse.ArgumentParser,
    command: str | None,
) -> argparse.ArgumentParser | None:
    if not command:
        return None
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            return action.choices.get(command)
    return None


def collect_settings(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for action in _option_actions(parser):
        if action.dest in SETTINGS_DESTS or action.dest == "version":
            continue
        value = getattr(args, action.dest, None)
        out[action.dest] = str(value) if isinstance(value, Path) else value
    return out


def write_settings(
    path: Path,
    settings: dict[str, Any],
    *,
    command: str | None = None,
) -> None:
    """
    Write settings as CSV (flat) or JSON.

    JSON files are merged: the command's section is replaced and any other
    sections already in the file are kept.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".csv":
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(["key", "value"])
            for key in sorted(settings):
                writer.writerow([key, json.dumps(settings[key])])
        return

    data: dict[str, Any] = {}
    if path.exists():
        data = read_settings(path)
    if command:
        data[command] = settings
    else:
        data = settings

    with path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2, sort_keys=True)
        handle.write("\n")
