#!/usr/bin/env python3
import argparse
import logging
import os
import sys
from typing import List, Optional

from rubotogen_lib import (
    ConfigError,
    GenerationError,
    GenerationParams,
    generate_core_classes,
    generate_inheriting_file,
    generate_subclass_or_interface,
    load_api,
    load_config,
)
from rubotogen_lib.config import DEFAULT_CONFIG_FILE
from rubotogen_lib.generator import underscore


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _add_method_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--method-base",
        default="all",
        choices=["all", "none", "abstract", "on"],
        help="Starting set of methods to generate (default: all)",
    )
    parser.add_argument("--method-include", default="", help="Comma separated method names to add")
    parser.add_argument("--method-exclude", default="", help="Comma separated method names to leave out")
    parser.add_argument("--implements", default="", help="Comma separated extra interfaces to implement")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Generate methods that are added or deprecated between minSdkVersion and targetSdkVersion",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate Java classes that forward Android callbacks to Ruby scripts."
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE if os.path.exists(DEFAULT_CONFIG_FILE) else None,
        help=f"Settings file (default: ./{DEFAULT_CONFIG_FILE} when present)",
    )
    parser.add_argument(
        "--manifest",
        default="AndroidManifest.xml" if os.path.exists("AndroidManifest.xml") else None,
        help="AndroidManifest.xml to read package and SDK versions from (default: ./AndroidManifest.xml when present)",
    )
    parser.add_argument("--api", help="API descriptor YAML (overrides the settings file)")
    parser.add_argument("--min-sdk", type=int, help="minSdkVersion (overrides settings and manifest)")
    parser.add_argument("--target-sdk", type=int, help="targetSdkVersion (overrides settings and manifest)")
    parser.add_argument("-o", "--dest", help="Project root to write src/ into (default: .)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report progress")
    parser.add_argument("--debug", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("gen", help="Generate a subclass or an interface implementation")
    target = gen.add_mutually_exclusive_group(required=True)
    target.add_argument("--class", dest="klass", help="Class to extend, e.g. android.app.Activity")
    target.add_argument("--interface", help="Interface to implement, e.g. android.view.View.OnClickListener")
    gen.add_argument("--name", required=True, help="Name of the generated class")
    gen.add_argument("--package", help="Package of the generated class (default: project package)")
    gen.add_argument("--template", default="InheritingClass", help="Template id (default: InheritingClass)")
    _add_method_options(gen)

    core = sub.add_parser("core", help="Generate RubotoActivity, RubotoService and the other core classes")
    core.add_argument("--class", dest="klass", default="all", help='"all" or a simple class name (default: all)')
    core.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the remaining classes when one of them fails",
    )
    _add_method_options(core)

    inheriting = sub.add_parser("inheriting", help="Generate a script backed Activity, Service or BroadcastReceiver")
    inheriting.add_argument("--kind", required=True, choices=["Activity", "Service", "BroadcastReceiver"])
    inheriting.add_argument("--name", required=True, help="Name of the generated class")
    inheriting.add_argument("--package", help="Package of the generated class (default: project package)")
    inheriting.add_argument("--script", help="Script file name (default: <name in snake case>.rb)")
    return parser


def _script_name(name: str) -> str:
    return f"{underscore(name)}.rb"


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, debug=args.debug)

    try:
        config = load_config(
            args.config,
            args.manifest,
            require_sdk=args.command != "inheriting",
            min_sdk=args.min_sdk,
            target_sdk=args.target_sdk,
            api=args.api,
            destination=args.dest,
        )
    except (ConfigError, OSError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "inheriting":
            paths = generate_inheriting_file(
                args.kind,
                args.name,
                args.package or config.package,
                args.script or _script_name(args.name),
                config.destination,
            )
            for path in paths:
                print(f"Generated {path}")
            return 0

        api = load_api(config.api_path)
        if args.command == "gen":
            params = GenerationParams(
                name=args.name,
                klass=args.klass,
                interface=args.interface,
                package=args.package,
                template=args.template,
                method_base=args.method_base,
                method_include=args.method_include,
                method_exclude=args.method_exclude,
                implements=args.implements,
                force=args.force,
            )
            print(f"Generated {generate_subclass_or_interface(api, config, params)}")
            return 0

        result = generate_core_classes(
            api,
            config,
            selection=args.klass,
            method_base=args.method_base,
            method_include=args.method_include,
            method_exclude=args.method_exclude,
            implements=args.implements,
            force=args.force,
            halt_on_error=not args.keep_going,
        )
    except (GenerationError, OSError) as e:
        print(f"Generation failed: {e}", file=sys.stderr)
        return 1

    for path in result.written:
        print(f"Generated {path}")
    for name, error in result.errors:
        print(f"Generation of {name} failed: {error}", file=sys.stderr)
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
