"""Command-line entry point for AutoTex."""

import argparse
import logging
import sys
from pathlib import Path

from autotex.config import settings
from autotex.llm import sampling_from_settings
from autotex.models import GenerationRequest
from autotex.preview.renderer import render
from autotex.ui.api_client import ConnectionState, GenerationFailure, OllamaClient
from autotex.ui.utils import create_download_latex, truncate_text

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

APP_PATH = Path(__file__).resolve().parent / "ui" / "app.py"


def serve(args: argparse.Namespace) -> int:
    """Run the Streamlit UI."""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", str(APP_PATH), "--server.port", str(args.port)]
    return stcli.main()


def check(args: argparse.Namespace) -> int:
    """Report whether Ollama is reachable and which models it has."""
    result = OllamaClient().check_availability()
    print(result.diagnostic)
    if result.state is not ConnectionState.CONNECTED:
        return 1
    for name in result.models:
        print(f"  - {name}")
    return 0


def convert(args: argparse.Namespace) -> int:
    """Convert a description to LaTeX, printing it or writing a full document."""
    client = OllamaClient()
    availability = client.check_availability()
    if availability.state is not ConnectionState.CONNECTED:
        logger.error(availability.diagnostic)
        return 1

    request = GenerationRequest(
        prompt=args.text,
        model=args.model or settings.ollama_model,
        options=sampling_from_settings(),
    )
    logger.info(f"Converting with {request.model}: {truncate_text(request.prompt, 60)}")
    result = client.generate(request)
    if isinstance(result, GenerationFailure):
        logger.error(f"Conversion error: {result.error}")
        return 1

    if args.output is None:
        print(result.latex)
        return 0

    try:
        args.output.write_text(create_download_latex(result.latex), encoding="utf-8")
    except (OSError, ValueError) as e:
        logger.error(f"Export failed: {e}")
        return 1
    logger.info(f"Wrote LaTeX document to {args.output}")
    return 0


def preview(args: argparse.Namespace) -> int:
    """Print the preview HTML for a LaTeX file."""
    try:
        latex = args.file.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Could not read {args.file}: {e}")
        return 1
    print(render(latex))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autotex",
        description="Convert natural language descriptions into LaTeX using a local Ollama server",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the web UI")
    serve_parser.add_argument("--port", type=int, default=8501, help="Port for the Streamlit server")
    serve_parser.set_defaults(handler=serve)

    check_parser = subparsers.add_parser("check", help="Check the Ollama connection")
    check_parser.set_defaults(handler=check)

    convert_parser = subparsers.add_parser("convert", help="Convert a description to LaTeX")
    convert_parser.add_argument("text", type=str, help="Natural-language description")
    convert_parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Ollama model (uses OLLAMA_MODEL if not specified)",
    )
    convert_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write a complete .tex document here instead of printing the body",
    )
    convert_parser.set_defaults(handler=convert)

    preview_parser = subparsers.add_parser("preview", help="Render a LaTeX file as preview HTML")
    preview_parser.add_argument("file", type=Path, help="LaTeX file to render")
    preview_parser.set_defaults(handler=preview)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main function for the AutoTex CLI."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return args.handler(args)
    except Exception as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
