"""CLI for markview - render Markdown into a rich-text document model."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

import yaml

from . import __version__
from .core.errors import MarkviewError
from .core.tokens import classify_token
from .export.serialize import document_to_dict, render_tree
from .runtime import build_runtime


def _version_string() -> str:
    return (
        f"markview {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def cmd_parse(args: argparse.Namespace, rt: Any) -> int:
    """Parse a Markdown file and print its document."""
    source = _read_source(args.file)
    doc = rt.parse(source, offset=args.offset)

    if args.format == "tree":
        print(render_tree(doc))
    elif args.format == "yaml":
        print(
            yaml.safe_dump(
                document_to_dict(doc), sort_keys=False, allow_unicode=True
            ),
            end="",
        )
    else:
        print(json.dumps(document_to_dict(doc), indent=2, ensure_ascii=False, default=str))
    return 0


def cmd_classify(args: argparse.Namespace, rt: Any) -> int:
    """Show how code tokens would be linkified."""
    workspace_id = rt.config.links.workspace_id
    results = [classify_token(token, workspace_id) for token in args.tokens]

    if args.json:
        print(json.dumps(results, indent=2))
        return 0

    for result in results:
        kind = result["kind"]
        if kind == "file":
            where = result["path"]
            if result["line"] is not None:
                where += f" line {result['line']}"
            if result["col"] is not None:
                where += f" col {result['col']}"
            target = result["url"] or "(not linkable without a workspace)"
            print(f"{result['token']}\tfile\t{where}\t{target}")
        elif kind == "url":
            print(f"{result['token']}\turl\t{result['url']}")
        else:
            print(f"{result['token']}\ttext")
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Serve /parse and /classify over HTTP."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(f"Error: serve needs the api extra (pip install markview[api]): {e}", file=sys.stderr)
        return 1

    token: str | None = args.token
    if token == "auto":
        token = generate_token()
        print(f"Authorization: Bearer {token}")
    elif token == "none":
        token = None

    app = create_app(rt, token=token, enable_cors=args.cors)
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="markview", description="Markdown rich-text renderer"
    )
    parser.add_argument(
        "--version", action="version", version=_version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/markview.toml)",
    )
    parser.add_argument(
        "--workspace",
        default=None,
        help="Workspace id used to link relative file references (overrides config)",
    )
    parser.add_argument(
        "--no-links",
        dest="no_links",
        action="store_true",
        help="Do not linkify tokens inside inline code",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log diagnostics to stderr"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # parse command
    parser_parse = subparsers.add_parser("parse", help="Parse a Markdown file")
    parser_parse.add_argument("file", help="Markdown file, or - for stdin")
    parser_parse.add_argument(
        "--format", choices=["json", "yaml", "tree"], default="json",
        help="Output format (default: json)"
    )
    parser_parse.add_argument(
        "--offset", type=int, default=0,
        help="Added to every source position (default: 0)"
    )

    # classify command
    parser_classify = subparsers.add_parser(
        "classify", help="Show how code tokens would be linkified"
    )
    parser_classify.add_argument("tokens", nargs="+", metavar="TOKEN")
    parser_classify.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument("--host", default="127.0.0.1", help="Bind host")
    parser_serve.add_argument("--port", type=int, default=8765, help="Bind port")
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token: 'auto' to generate, 'none' to disable, or a value"
    )
    parser_serve.add_argument(
        "--cors", action="store_true", help="Enable CORS for all origins"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        rt = build_runtime(
            config_path=args.config,
            workspace_id=args.workspace,
            links_enabled=False if args.no_links else None,
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    handlers = {
        "parse": cmd_parse,
        "classify": cmd_classify,
        "serve": cmd_serve,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except (MarkviewError, OSError, UnicodeDecodeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
