# prompt_relay/cli.py
import argparse
import logging
import sys
from typing import List, Optional

from prompt_relay.client.project import (
    apply_generation,
    default_export_name,
    example_project,
    export_project,
    import_project,
    record_error,
)
from prompt_relay.client.request_builder import DEFAULT_RELAY_URL, RelayClient, RelayClientError, load_inline_file
from prompt_relay.core.errors import RelayError
from prompt_relay.models import AnalysisResult, GenerationResponse

logger = logging.getLogger(__name__)


def _print_generation(resp: GenerationResponse) -> None:
    for mp in resp.master_prompts:
        print(f"=== Master prompt ({mp.language}) ===")
        print(mp.prompt)
        print()
    preview = resp.preview
    if preview.type is None:
        print("(no preview)")
    elif preview.type.value == "text":
        print("=== Preview ===")
        print(preview.content)
    else:
        print(f"=== Preview: {preview.type.value}, {len(preview.content)} chars of data URL ===")


def _print_analysis(result: AnalysisResult) -> None:
    print(f"Score: {result.score:g}/100")
    print(f"Context:      {result.analysis.context}")
    print(f"Objective:    {result.analysis.objective}")
    print(f"Role:         {result.analysis.role}")
    print(f"Expectations: {result.analysis.expectations}")
    print()
    print("Suggestions:")
    print(result.suggestions)


def cmd_serve(args) -> int:
    import uvicorn

    from prompt_relay.utils.config import load_settings

    settings = load_settings()
    uvicorn.run("prompt_relay.main:create_app",
                factory=True,
                host=args.host or settings.host,
                port=args.port or settings.port,
                log_level=settings.log_level.lower())
    return 0


def cmd_generate(args) -> int:
    snapshot = import_project(args.project)
    if args.file:
        snapshot = snapshot.model_copy(update={"uploaded_file": load_inline_file(args.file)})
    client = RelayClient(args.url)
    try:
        resp = client.generate(snapshot)
    except (RelayClientError, RelayError) as e:
        print(f"Error: {e}", file=sys.stderr)
        export_project(record_error(snapshot, str(e)), args.project)
        return 1
    export_project(apply_generation(snapshot, resp), args.project)
    _print_generation(resp)
    return 0


def cmd_analyze(args) -> int:
    text = args.text
    if args.text_file:
        with open(args.text_file, "r", encoding="utf-8") as fh:
            text = fh.read()
    try:
        result = RelayClient(args.url).analyze(text or "")
    except (RelayClientError, RelayError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    _print_analysis(result)
    return 0


def cmd_example(args) -> int:
    path = export_project(example_project(), args.path or default_export_name())
    print(f"Wrote example project to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prompt-relay", description="C.O.R.E prompt builder and relay")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="Run the relay server")
    p.add_argument("--host", type=str, default=None)
    p.add_argument("--port", type=int, default=None)
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("generate", help="Send a project file to the relay and store the result in it")
    p.add_argument("project", help="Project JSON file")
    p.add_argument("--file", help="Attach a local file (image, document) to the request")
    p.add_argument("--url", default=DEFAULT_RELAY_URL)
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser("analyze", help="Score a prompt against C.O.R.E")
    p.add_argument("text", nargs="?", default="")
    p.add_argument("--text-file", help="Read the prompt from a file")
    p.add_argument("--url", default=DEFAULT_RELAY_URL)
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser("example", help="Write the sample project to a file")
    p.add_argument("path", nargs="?", default=None)
    p.set_defaults(func=cmd_example)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    try:
        return args.func(args)
    except RelayError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
