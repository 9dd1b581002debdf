"""Main entry point for the Shorts Myeongri Master CLI."""

import argparse
import mimetypes
from pathlib import Path


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="쇼츠 명리 마스터 - AI fortune script and background video generator"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # UI command
    subparsers.add_parser("ui", help="Launch the Streamlit UI")

    # Analyze command
    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze a shorts screenshot and draft a fortune script"
    )
    analyze_parser.add_argument("image", type=Path, help="Path to the screenshot")
    analyze_parser.add_argument("--output", type=Path, help="Output JSON path")

    # Video command
    video_parser = subparsers.add_parser(
        "video", help="Generate the zodiac background video for a script"
    )
    video_parser.add_argument("script", type=Path, help="Path to the script text file")
    video_parser.add_argument("--output", type=Path, required=True, help="Output MP4 path")

    args = parser.parse_args()

    if args.command == "ui":
        run_ui()
    elif args.command == "analyze":
        return run_analyze(args.image, args.output)
    elif args.command == "video":
        return run_video(args.script, args.output)
    else:
        parser.print_help()
    return 0


def run_ui():
    """Launch the Streamlit UI."""
    import os
    import subprocess
    import sys

    project_root = Path(__file__).parent.parent
    app_path = project_root / "src" / "ui" / "app.py"
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(project_root), env.get("PYTHONPATH", "")) if p
    )
    subprocess.run([sys.executable, "-m", "streamlit", "run", str(app_path)], env=env)


def _api_key_provider():
    from src.config import config
    from src.services.credentials import build_credential_gate

    gate = build_credential_gate(config)
    return lambda: gate.get_api_key() or config.google_api_key or None


def run_analyze(image_path: Path, output_path: Path = None) -> int:
    """Analyze a screenshot from the command line."""
    from src.services.birth_years import birth_years_for_display
    from src.services.errors import FortuneShortsError
    from src.services.fortune_analyzer import FortuneAnalyzer

    mime_type = mimetypes.guess_type(str(image_path))[0] or "image/png"
    print(f"Analyzing: {image_path} ({mime_type})")

    analyzer = FortuneAnalyzer(api_key_provider=_api_key_provider())
    try:
        result = analyzer.analyze(
            image_path.read_bytes(),
            mime_type,
            progress_callback=lambda msg, p: print(f"  {msg}"),
        )
    except FortuneShortsError as e:
        print(f"Error: {e.user_message}")
        return 1

    print(f"\nTitle: {result.suggested_title}")
    print(f"Hook: {result.hook}")
    years = birth_years_for_display(result.suggested_fortune_script)
    print(f"Birth years ({len(years)}): {', '.join(years)}")

    if output_path:
        output_path.write_text(
            result.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
        print(f"Saved to: {output_path}")
    else:
        print("\n" + result.suggested_fortune_script)
    return 0


def run_video(script_path: Path, output_path: Path) -> int:
    """Generate the background video from the command line."""
    from src.services.errors import FortuneShortsError
    from src.services.fortune_video_generator import FortuneVideoGenerator

    generator = FortuneVideoGenerator(api_key_provider=_api_key_provider())
    try:
        path = generator.generate(
            script_path.read_text(encoding="utf-8"),
            output_path=output_path,
            progress_callback=lambda msg, p: print(f"  {msg}"),
        )
    except FortuneShortsError as e:
        print(f"Error: {e.user_message}")
        return 1

    print(f"Video saved to: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
