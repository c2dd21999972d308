"""
kreolsafe — analyze a piece of text from the command line.

Usage:
    kreolsafe "Twa to enn bourik"            # Local analysis (no oracle)
    echo "..." | kreolsafe                   # Read text from stdin
    kreolsafe --mode full "..."              # Local hints + Gemini oracle
    kreolsafe --hints --repeat-max 1 "..."   # Also print hints, custom folding
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from typing import Optional, Sequence

from kreolsafe.config import settings
from kreolsafe.detector import analyze, analyze_local, clip_text
from kreolsafe.engine import EngineConfig, HintEngine, hint_engine
from kreolsafe.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kreolsafe",
        description="Flag potentially harmful spans in Kreol/English text",
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="Text to analyze (default: read from stdin)",
    )
    parser.add_argument(
        "--mode",
        choices=("local", "full"),
        default="local",
        help="local: hints only (default); full: hints + oracle",
    )
    parser.add_argument(
        "--repeat-max",
        type=int,
        default=None,
        help=f"Max repeated characters kept when normalizing (default: {settings.REPEAT_MAX})",
    )
    parser.add_argument(
        "--hints",
        action="store_true",
        help="Include the raw local hints in the output",
    )
    parser.add_argument(
        "--log-format",
        choices=("json", "text"),
        default=None,
        help="Log format on stderr",
    )
    return parser


def _engine_for(repeat_max: Optional[int]) -> HintEngine:
    if repeat_max is None:
        return hint_engine
    base = EngineConfig.from_settings()
    return HintEngine(replace(base, normalize=replace(base.normalize, repeat_max=repeat_max)))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(fmt=args.log_format)

    text = args.text if args.text is not None else sys.stdin.read()
    if not text.strip():
        print("Error: no text to analyze", file=sys.stderr)
        return 2

    engine = _engine_for(args.repeat_max)

    if args.mode == "full":
        from kreolsafe.llm.factory import get_provider
        llm = get_provider(settings.LLM_PROVIDER)
        result = asyncio.run(analyze(text, llm, engine=engine))
    else:
        result = analyze_local(text, engine=engine)

    output = result.to_dict()
    if args.hints:
        output["hints"] = [h.to_dict() for h in engine.build_hints(clip_text(text))]

    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
