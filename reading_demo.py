"""
Example: ingest a source and flash it in the terminal with bionic markers.

Usage:
    python3 reading_demo.py --file /path/to/book.epub --wpm 400 --group-size 2
    python3 reading_demo.py --url https://example.com/article --style bold-center
    python3 reading_demo.py --text "Some words to read" --speak
"""

import argparse
import asyncio
import logging
from dataclasses import replace
from pathlib import Path

from readflow.config import ReaderConfig
from readflow.ingestion import IngestionError, IngestionPipeline, IngestKind
from readflow.logging_config import setup_logging
from readflow.playback import LoggingSpeechSynthesizer, SpeechChannel, TimedFlashScheduler
from readflow.reading import HighlightStyle, RenderToken, TransformOptions, compute_render_token

logger = logging.getLogger("reading_demo")


def format_token(token: RenderToken) -> str:
    if token.is_skipped:
        return token.original
    if token.has_center_marker:
        before, after = token.split_rest()
        return f"{before}[{token.highlighted}]{after}"
    return f"[{token.highlighted}]{token.rest}"


async def run(args) -> int:
    config = ReaderConfig.from_env()
    pipeline = IngestionPipeline(config=config.ingestion)

    try:
        if args.file:
            document = await pipeline.ingest_file(args.file.name, args.file.read_bytes())
        elif args.url:
            document = await pipeline.ingest(IngestKind.URL, args.url)
        else:
            document = await pipeline.ingest(IngestKind.PASTE, args.text)
    except IngestionError as exc:
        print(f"Could not load source ({exc.kind.value}): {exc.message}")
        return 1

    content = await pipeline.prepare(document, lambda percent: logger.debug("tokenizing %s%%", percent))
    print(f"{content.title}: {content.word_count} words")

    options = TransformOptions(style=args.style, fixation_strength=args.strength)
    playback = replace(
        config.playback,
        wpm=args.wpm or config.playback.wpm,
        words_per_group=args.group_size or config.playback.words_per_group,
        speech_enabled=args.speak or config.playback.speech_enabled,
    )
    words = content.tokens.words[: args.limit] if args.limit else content.tokens.words

    def show(cursor):
        group = scheduler.current_words()
        rendered = [compute_render_token(word, cursor.index + offset, options) for offset, word in enumerate(group)]
        print(f"{cursor.index:>6}  " + " ".join(format_token(token) for token in rendered))

    scheduler = TimedFlashScheduler.from_config(
        words,
        playback,
        speech=SpeechChannel.from_config(playback, LoggingSpeechSynthesizer()),
        on_change=show,
    )
    scheduler.start()
    while scheduler.playing:
        await asyncio.sleep(scheduler.interval_ms / 1000)
    return 0


def main():
    parser = argparse.ArgumentParser()
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="Path to an .epub, .txt or .md file")
    source.add_argument("--url", help="Web page to read")
    source.add_argument("--text", help="Text to read")
    parser.add_argument("--wpm", type=int, default=None, help="Words per minute (100-1000)")
    parser.add_argument("--group-size", type=int, default=None, help="Words flashed at once (1-7)")
    parser.add_argument(
        "--style",
        default=HighlightStyle.BOLD_START.value,
        choices=[style.value for style in HighlightStyle],
        help="Highlight style",
    )
    parser.add_argument("--strength", type=int, default=3, help="Fixation strength (1-5)")
    parser.add_argument("--limit", type=int, default=0, help="Only flash the first N words")
    parser.add_argument("--speak", action="store_true", help="Log each group as a speech request")
    parser.add_argument("--log-level", default=None, help="Overrides READFLOW_LOG_LEVEL")
    args = parser.parse_args()

    if args.file and not args.file.exists():
        raise FileNotFoundError(f"File not found: {args.file}")

    setup_logging(args.log_level or ReaderConfig.from_env().log_level)
    raise SystemExit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
