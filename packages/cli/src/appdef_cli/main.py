import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from appdef_cli.log import get_logger, setup_logging
from appdef_core import (
    AppDefError,
    DefinitionRegistry,
    dump_document,
    EmptyDataModelError,
    from_canonical,
    generate,
    lint_issues,
    load_applications,
    load_schema,
    load_view_catalog,
    load_yaml_document,
    merge_applications,
    merge_view_catalog,
    parse_sql_ddl,
    schema_issues,
    write_document,
)
from appdef_core.canonical import entity_to_dict, view_to_dict
from appdef_core.issues import Issue, has_errors, to_lines
from appdef_core.loader import load_yaml_mapping
from appdef_core.naming import qualified_name
from appdef_core.schema import default_schema_path
from appdef_core.settings import overlay_paths, resolve_environment

logger = get_logger("appdef_cli")


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1 like every other failure."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        print(f"Error: {message}", file=sys.stderr)
        raise SystemExit(1)


def _print_issues(issues: List[Issue]) -> None:
    if not issues:
        print("No issues found.")
        return
    for line in to_lines(issues):
        print(line)


def _issues_as_json(issues: List[Issue]) -> List[Dict[str, str]]:
    return [issue.to_dict() for issue in issues]


def _report_error(exc: BaseException) -> None:
    print(f"Error: {exc}", file=sys.stderr)
    cause = exc.__cause__
    detail = " ".join(str(cause).split()) if cause is not None else ""
    if detail:
        print(f"Details: {detail}", file=sys.stderr)


def cmd_generate(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    if not input_path.is_file():
        raise FileNotFoundError(f"SQL file not found: {input_path.resolve()}")

    print(f"Reading SQL file: {input_path}")
    tables = parse_sql_ddl(input_path.read_text(encoding="utf-8"))
    if not tables:
        print("Warning: No tables found in SQL file")
    else:
        print(f"Found {len(tables)} table(s)")
        for table in tables:
            print(f"- {qualified_name(table.schema, table.name)} ({len(table.columns)} columns)")

    output = generate(tables)
    write_document(args.output, output)
    print(f"Successfully generated YAML: {args.output}")
    return 0


def cmd_merge(args: argparse.Namespace) -> int:
    environment = resolve_environment(args.environment)
    overlays = overlay_paths(args.settings, environment)
    if environment:
        logger.info("Using settings environment %s", environment)

    print(f"Reading application settings: {args.settings}")
    applications = load_applications(args.settings, overlays=overlays)
    print(f"Found {len(applications)} application(s)")

    print(f"Reading data model: {args.data}")
    data = load_yaml_document(args.data)
    if data.entity_count() == 0:
        raise EmptyDataModelError(f"No entities found in {args.data} dataModel")
    print(f"Found {data.entity_count()} entity(ies) and {data.view_count()} view(s)")

    print("Merging applications with data model...")
    output = merge_applications(applications, data.data_model, data.views)
    write_document(args.output, output)
    print(f"Successfully wrote merged YAML: {args.output}")
    return 0


def cmd_merge_views(args: argparse.Namespace) -> int:
    print(f"Reading views: {args.views}")
    catalog = load_view_catalog(args.views)
    if not catalog.views:
        raise AppDefError(f"No views found in {args.views}")
    print(f"Found {len(catalog.views)} view(s)")

    print(f"Reading data model: {args.data}")
    definition = load_yaml_document(args.data)
    merged = merge_view_catalog(definition, catalog)
    write_document(args.data, dump_document(merged))
    print(f"Successfully merged views into: {args.data}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    schema = load_schema(args.schema)
    document = load_yaml_mapping(args.document)
    issues = schema_issues(document, schema)
    if not has_errors(issues):
        issues.extend(lint_issues(from_canonical(document)))

    if args.output_json:
        print(json.dumps(_issues_as_json(issues), indent=2))
    else:
        _print_issues(issues)
    return 1 if has_errors(issues) else 0


def cmd_lookup(args: argparse.Namespace) -> int:
    registry = DefinitionRegistry(load_yaml_document(args.document))

    app_schema = ""
    if args.app:
        app = registry.find_application(args.app)
        if app is None:
            raise AppDefError(f"Unknown application: {args.app}")
        app_schema = app.schema

    payload: Optional[Dict[str, Any]] = None
    entity = registry.find_entity(args.name, default_schema=app_schema)
    if entity is not None and (not args.app or registry.is_entity_visible(args.app, args.name)):
        payload = {"entity": entity_to_dict(entity)}
    else:
        view = registry.find_view(args.name)
        if view is not None and (not args.app or registry.is_view_visible(args.app, args.name)):
            payload = {"view": view_to_dict(view)}

    if payload is None:
        scope = f" for application {args.app}" if args.app else ""
        print(f"Not found{scope}: {args.name}", file=sys.stderr)
        return 1

    print(yaml.safe_dump(payload, sort_keys=False), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="appdef", description="Application definition generator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    generate_parser = sub.add_parser("generate", help="Lower a SQL DDL file into a YAML data model")
    generate_parser.add_argument("input", help="Path to the SQL DDL file")
    generate_parser.add_argument("output", help="Output YAML path")
    generate_parser.set_defaults(func=cmd_generate)

    merge_parser = sub.add_parser("merge", help="Merge application settings with a data model")
    merge_parser.add_argument("settings", help="Path to appsettings.json")
    merge_parser.add_argument("data", help="Path to data.yaml")
    merge_parser.add_argument("output", help="Output YAML path")
    merge_parser.add_argument(
        "--environment",
        help="Settings overlay name (appsettings.<ENV>.json). Defaults to APPDEF_ENVIRONMENT.",
    )
    merge_parser.set_defaults(func=cmd_merge)

    merge_views_parser = sub.add_parser("merge-views", help="Merge a views file into data.yaml in place")
    merge_views_parser.add_argument("data", help="Path to data.yaml (rewritten)")
    merge_views_parser.add_argument("views", help="Path to views.yaml")
    merge_views_parser.set_defaults(func=cmd_merge_views)

    validate_parser = sub.add_parser("validate", help="Validate a document with schema + cross-reference checks")
    validate_parser.add_argument("document", help="Path to the document YAML")
    validate_parser.add_argument("--schema", default=default_schema_path(), help="Path to JSON schema")
    validate_parser.add_argument("--output-json", action="store_true", help="Print issues as JSON")
    validate_parser.set_defaults(func=cmd_validate)

    lookup_parser = sub.add_parser("lookup", help="Print an entity or view by name")
    lookup_parser.add_argument("document", help="Path to the document YAML")
    lookup_parser.add_argument("name", help="Entity as schema:Name or Name, or a view name")
    lookup_parser.add_argument("--app", help="Only match what this application can see")
    lookup_parser.set_defaults(func=cmd_lookup)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        return args.func(args)
    except (AppDefError, OSError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        _report_error(exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
