from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict

import yaml

from smartflow import settings
from smartflow.cli import walk as walk_cmd
from smartflow.errors import SmartFlowError, TemplateLoadError
from smartflow.flow.lint import check_template
from smartflow.flow.visibility import available_fields, is_visible
from smartflow.logs import configure_logging
from smartflow.models.template import Template
from smartflow.models.types import OPERATOR_LABELS, needs_value
from smartflow.sources.templates import is_url, load_template
from smartflow.storage import db


def _is_file(raw: str) -> bool:
    try:
        return Path(raw).is_file()
    except (OSError, ValueError):
        return False


def _resolve_template(location: str, data_dir: str) -> Template:
    # A URL or an existing file is loaded directly, anything else is a stored template id
    if is_url(location) or _is_file(location):
        return load_template(location)

    conn = db.connect(Path(data_dir))
    db.init_schema(conn)
    t = db.load_template(conn, location)
    if t is None:
        raise TemplateLoadError(f"{location!r} is neither a template file nor a stored template id")
    return t


def _load_answers(raw: str | None) -> Dict[str, Any]:
    if not raw:
        return {}
    text = Path(raw).read_text(encoding="utf-8") if _is_file(raw) else raw
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateLoadError(f"answers are not valid YAML/JSON: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TemplateLoadError("answers must be a mapping of field name to value")
    return data


def _cmd_init_db(args: argparse.Namespace) -> int:
    conn = db.connect(Path(args.data_dir))
    db.init_schema(conn)
    print(f"Initialized sqlite db in {Path(args.data_dir).resolve()}")
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    template = load_template(args.location)
    conn = db.connect(Path(args.data_dir))
    db.init_schema(conn)
    db.save_template(conn, template)
    print(f"Imported {template.id} ({len(template.screens)} screens)")
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    conn = db.connect(Path(args.data_dir))
    db.init_schema(conn)
    for row in db.list_templates(conn):
        print(f"{row['template_id']}\t{row['name']}\t{row['screen_count']} screens")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    template = _resolve_template(args.template, args.data_dir)
    issues = check_template(template)
    for issue in issues:
        print(issue.describe())
    if issues:
        print(f"{len(issues)} issue(s) in {template.id}")
        return 1
    print(f"{template.id}: conditions OK")
    return 0


def _cmd_operators(args: argparse.Namespace) -> int:
    for op, label in OPERATOR_LABELS.items():
        operand = "value" if needs_value(op) else "-"
        print(f"{op.value}\t{label}\t{operand}")
    return 0


def _cmd_evaluate(args: argparse.Namespace) -> int:
    result = is_visible(args.conditions, _load_answers(args.answers))
    print("true" if result else "false")
    return 0


def _cmd_walk(args: argparse.Namespace) -> int:
    template = _resolve_template(args.template, args.data_dir)
    for line in walk_cmd.run(template, _load_answers(args.answers)):
        print(line)
    return 0


def _cmd_fields(args: argparse.Namespace) -> int:
    template = _resolve_template(args.template, args.data_dir)
    try:
        fields = available_fields(template, args.screen, args.field)
    except KeyError as e:
        raise TemplateLoadError(str(e.args[0])) from e
    for f in fields:
        print(f"{f.name}\t{f.type}\t{f.label} ({f.screen_title})")
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="smartflow")
    p.add_argument("--log-level", default=settings.log_level())
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init-db", help="Initialize local sqlite database")
    p_init.add_argument("--data-dir", default=settings.data_dir())
    p_init.set_defaults(func=_cmd_init_db)

    p_import = sub.add_parser("import", help="Load a template file or URL into the database")
    p_import.add_argument("location")
    p_import.add_argument("--data-dir", default=settings.data_dir())
    p_import.set_defaults(func=_cmd_import)

    p_list = sub.add_parser("list", help="List stored templates")
    p_list.add_argument("--data-dir", default=settings.data_dir())
    p_list.set_defaults(func=_cmd_list)

    p_check = sub.add_parser("check", help="Report conditions that can never work as authored")
    p_check.add_argument("template", help="file, URL or stored template id")
    p_check.add_argument("--data-dir", default=settings.data_dir())
    p_check.set_defaults(func=_cmd_check)

    p_ops = sub.add_parser("operators", help="List condition operators")
    p_ops.set_defaults(func=_cmd_operators)

    p_eval = sub.add_parser("evaluate", help="Evaluate one condition group against answers")
    p_eval.add_argument("--conditions", required=True, help="condition group as JSON")
    p_eval.add_argument("--answers", help="answers file, or inline JSON/YAML")
    p_eval.set_defaults(func=_cmd_evaluate)

    p_walk = sub.add_parser("walk", help="Show which screens and fields are visible for some answers")
    p_walk.add_argument("template", help="file, URL or stored template id")
    p_walk.add_argument("--answers", help="answers file, or inline JSON/YAML")
    p_walk.add_argument("--data-dir", default=settings.data_dir())
    p_walk.set_defaults(func=_cmd_walk)

    p_fields = sub.add_parser("fields", help="List fields a condition may refer to")
    p_fields.add_argument("template", help="file, URL or stored template id")
    p_fields.add_argument("--screen", required=True)
    p_fields.add_argument("--field")
    p_fields.add_argument("--data-dir", default=settings.data_dir())
    p_fields.set_defaults(func=_cmd_fields)

    args = p.parse_args(argv)
    configure_logging(args.log_level)

    try:
        return args.func(args)
    except SmartFlowError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
