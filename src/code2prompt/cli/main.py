"""CLI entry point for code2prompt."""
import argparse
import json
import logging
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from code2prompt.providers.exceptions import ProviderError
from code2prompt.scripting.exceptions import ScriptingError

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_SCRIPT_ERROR = 2
EXIT_PROVIDER_ERROR = 3
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

DEFAULT_MAX_BYTES = 8192


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="code2prompt",
        description="Turn a codebase into an LLM prompt and optionally query an LLM with it",
    )
    parser.add_argument("path", type=str, help="Codebase root (the 'before' root with --diff-path)")
    parser.add_argument(
        "--diff-path",
        type=str,
        default="",
        help="Current ('after') root; enables diff mode against PATH",
    )
    parser.add_argument("--template", type=str, default="", help="Prompt template file")
    parser.add_argument(
        "--extensions",
        type=str,
        default="",
        help="Comma-separated extension allow-list (for example: js,py)",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="GLOB",
        help="Exclusion glob; may be given more than once",
    )
    parser.add_argument(
        "--max-bytes",
        type=int,
        default=DEFAULT_MAX_BYTES,
        help=f"Per-file byte cap (default: {DEFAULT_MAX_BYTES})",
    )
    parser.add_argument(
        "--hide-project-path",
        action="store_true",
        help="Omit the absolute project path from the prompt",
    )
    parser.add_argument("--prompt", type=str, default="", help="Question to send with the context")
    parser.add_argument(
        "--run-template",
        action="store_true",
        help="Run the template's pre/post script blocks around the LLM request",
    )
    parser.add_argument(
        "--providers",
        type=str,
        default="",
        help="Comma-separated provider preference order (for example: OPENAI,GROQ)",
    )
    parser.add_argument("--output-json", action="store_true", help="Output results as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    return parser


def validate_directory(raw_path: str) -> str:
    """Validate and resolve a root directory.

    Args:
        raw_path: Raw path string from CLI arguments.

    Returns:
        Resolved absolute path as string.

    Raises:
        SystemExit: If path is not a valid directory.
    """
    resolved = Path(raw_path).resolve()
    if not resolved.is_dir():
        print(f"Error: '{raw_path}' is not a valid directory.", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT)
    return str(resolved)


def format_result_json(result: dict) -> str:
    """Serialize result dict to JSON string.

    Calls .model_dump() on Pydantic model values and drops callables
    (template helpers). Falls back to str() for other non-serializable
    types via default=str.
    """

    def _serialize(obj):
        if hasattr(obj, "model_dump"):
            return obj.model_dump(mode="json")
        return obj

    prepared = {k: _serialize(v) for k, v in result.items() if not callable(v)}
    return json.dumps(prepared, indent=2, default=str)


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def build_app(args: argparse.Namespace, path: str, diff_path: str | None):
    """Create the Code2Prompt facade from CLI arguments."""
    from code2prompt.core import Code2Prompt
    from code2prompt.models import PromptOptions, ProviderSettings

    options = PromptOptions(
        path=path,
        diff=diff_path is not None,
        diff_path=diff_path,
        extensions=_split_csv(args.extensions),
        ignore=args.ignore,
        max_bytes_per_file=args.max_bytes,
        template=args.template or None,
        show_project_path=not args.hide_project_path,
    )
    preferences = _split_csv(args.providers) or None
    return Code2Prompt(options, settings=ProviderSettings.from_env(preferences))


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        path = validate_directory(args.path)
        diff_path = validate_directory(args.diff_path) if args.diff_path else None
    except SystemExit as exc:
        return exc.code

    if args.template and not Path(args.template).is_file():
        print(f"Error: template '{args.template}' not found.", file=sys.stderr)
        return EXIT_INVALID_INPUT
    if args.max_bytes <= 0:
        print("Error: --max-bytes must be positive.", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        app = build_app(args, path, diff_path)

        if args.run_template:
            print(format_result_json(app.run_template(args.prompt)))
        elif args.prompt:
            outcome = app.request(args.prompt)
            if args.output_json:
                print(format_result_json(outcome.model_dump(mode="json")))
            elif isinstance(outcome.data, str):
                print(outcome.data)
            else:
                print(json.dumps(outcome.data, indent=2, default=str))
        elif args.output_json:
            generated = app.generate_context_prompt(as_object=True)
            print(format_result_json(generated))
        else:
            print(app.generate_context_prompt())
        return EXIT_SUCCESS

    except ScriptingError as exc:
        return _handle_error("Template error", exc, args.verbose, EXIT_SCRIPT_ERROR)

    except ProviderError as exc:
        return _handle_error("Provider error", exc, args.verbose, EXIT_PROVIDER_ERROR)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)
