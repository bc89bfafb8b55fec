"""Entry point — wires Config → Analyzer → server or command-line client."""
import argparse
import asyncio
import base64
import logging
import mimetypes
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown

from bloodq.analyzer import AnalysisRequest, Analyzer
from bloodq.config import Config
from bloodq.constants import (
    MSG_LIMIT_REACHED,
    MSG_REMAINING,
    MSG_SERVER_STARTING,
    MSG_SETTINGS,
    MSG_SETTINGS_SAVED,
    PROVIDERS,
)
from bloodq.settings_store import SettingsStore, UsageLimitStore

console = Console()


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def format_time_remaining(milliseconds: int) -> str:
    hours = milliseconds // (60 * 60 * 1000)
    minutes = (milliseconds % (60 * 60 * 1000)) // (60 * 1000)
    return f"{hours}h {minutes}m"


def mask_key(key: str | None) -> str:
    match key:
        case str() as k if len(k.strip()) > 8:
            return f"{k[:4]}…{k[-4:]}"
        case str() as k if k.strip():
            return "set"
        case _:
            return "not set"


def image_to_data_uri(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    match mime_type:
        case str() as m if m.startswith("image/"):
            pass
        case _:
            raise ValueError(f"Not an image file: {path}")
    data = base64.standard_b64encode(path.read_bytes()).decode()
    return f"data:{mime_type};base64,{data}"


# ── commands ────────────────────────────────────────────────────────────────


def cmd_serve(config: Config, args: argparse.Namespace) -> int:
    import uvicorn

    from bloodq.server import create_app

    logging.getLogger(__name__).info(MSG_SERVER_STARTING, config.host, config.port)
    app = create_app(Analyzer(default_gemini_key=config.gemini_api_key))
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    return 0


def cmd_analyze(config: Config, args: argparse.Namespace) -> int:
    settings = SettingsStore(Path(config.settings_path))
    usage = UsageLimitStore(
        settings, path=Path(config.usage_path), max_per_day=config.max_images_per_day
    )
    provider = args.provider or settings.get_preferred_provider()

    try:
        image = image_to_data_uri(Path(args.image))
    except (OSError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        return 1

    match usage.track_image_processed(provider):
        case (False, _):
            wait = format_time_remaining(usage.reset_time_remaining())
            console.print(f"[red]{MSG_LIMIT_REACHED % (usage.max_per_day, wait)}[/red]")
            return 1
        case _:
            pass

    context = (args.context or "").strip() or None
    analyzer = Analyzer(default_gemini_key=config.gemini_api_key)
    outcome = asyncio.run(
        analyzer.analyze(
            AnalysisRequest(image=image, provider=provider, context_text=context),
            settings.get_api_key(provider),
        )
    )
    match outcome.result:
        case None:
            console.print(f"[red]{outcome.error}[/red]")
            return 1
        case result:
            console.print(Markdown(result.text))
            if not settings.has_provider_api_key(provider):
                console.print(MSG_REMAINING % usage.remaining_image_count(provider))
            return 0


def cmd_settings(config: Config, args: argparse.Namespace) -> int:
    settings = SettingsStore(Path(config.settings_path))
    changed = False
    if args.key:
        provider, key = args.key
        settings.save_api_key(provider, key)
        changed = True
    if args.prefer:
        settings.set_preferred_provider(args.prefer)
        changed = True
    if changed:
        console.print(MSG_SETTINGS_SAVED)

    console.print(MSG_SETTINGS % (
        settings.get_preferred_provider(),
        *(mask_key(settings.get_api_key(p)) for p in PROVIDERS),
    ))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bloodq", description="Blood test image analysis.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the HTTP API server")

    analyze = sub.add_parser("analyze", help="Analyze a blood test image")
    analyze.add_argument("image", help="Path to the image file")
    analyze.add_argument("--provider", choices=PROVIDERS, help="Override the preferred provider")
    analyze.add_argument("--context", help="Additional context for the analysis")

    settings = sub.add_parser("settings", help="Show or edit API keys and preferred provider")
    settings.add_argument("--key", nargs=2, metavar=("PROVIDER", "KEY"), help="Save an API key")
    settings.add_argument("--prefer", choices=PROVIDERS, help="Set the preferred provider")
    return parser


COMMANDS = {
    "serve": cmd_serve,
    "analyze": cmd_analyze,
    "settings": cmd_settings,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "settings" and args.key and args.key[0] not in PROVIDERS:
        console.print(f"[red]Unknown provider: {args.key[0]}[/red]")
        return 2

    config = Config.from_env()
    _setup_logging(config.log_level)
    return COMMANDS[args.command](config, args)


if __name__ == "__main__":
    sys.exit(main())
