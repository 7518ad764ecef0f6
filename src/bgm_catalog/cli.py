"""
BGM Catalog CLI - Entry point

Thin front end over the record store and recommendation engine. Every
command goes through TrackStore / recommend_from_store; nothing here
touches the persisted collection directly.
"""

import argparse
import random
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger
from rich.table import Table

from bgm_catalog.core.config import Config, get_data_file, load_config
from bgm_catalog.core.console import get_console, print_error, safe_print
from bgm_catalog.core.output import setup_from_config
from bgm_catalog.domain.library import (
    CatalogError,
    JsonFileStorage,
    Track,
    TrackData,
    TrackNotFoundError,
    TrackStore,
    filter_tracks,
    normalize_tag_input,
    tag_vocabulary,
)
from bgm_catalog.domain.recommendation import (
    explain_recommendation,
    recommend_from_store,
)


def format_when(value: Optional[datetime]) -> str:
    """Format a timestamp for display in local time."""
    if value is None:
        return "never"
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def render_track_table(tracks: list[Track], title: str = "Tracks") -> Table:
    """Build a Rich table summarizing tracks."""
    table = Table(title=title)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Artist")
    table.add_column("Mood", style="cyan")
    table.add_column("Usage", style="magenta")
    table.add_column("Used", justify="right")
    table.add_column("Last used")
    table.add_column("★", justify="center")

    for track in tracks:
        table.add_row(
            track.id,
            track.title,
            track.artist,
            ", ".join(track.mood_tags),
            ", ".join(track.usage_tags),
            str(track.used_count),
            format_when(track.last_used_at),
            "★" if track.favorite else "",
        )
    return table


def print_track_detail(track: Track) -> None:
    """Print every field of a track."""
    safe_print(f"{track.title}", style="bold")
    safe_print(f"  by {track.artist}")
    safe_print(f"  ID:         {track.id}")
    if track.platform_url:
        safe_print(f"  Link:       {track.platform_url}")
    safe_print(f"  Mood tags:  {', '.join(track.mood_tags) or '-'}")
    safe_print(f"  Usage tags: {', '.join(track.usage_tags) or '-'}")
    safe_print(f"  Favorite:   {'yes' if track.favorite else 'no'}")
    safe_print(f"  Used:       {track.used_count} time(s), last {format_when(track.last_used_at)}")
    safe_print(f"  Added:      {format_when(track.created_at)}")
    if track.notes:
        safe_print(f"  Notes:      {track.notes}")


def _require_track(store: TrackStore, track_id: str) -> Track:
    track = store.get_track(track_id)
    if track is None:
        raise TrackNotFoundError(track_id)
    return track


def cmd_list(store: TrackStore, args: argparse.Namespace, config: Config) -> int:
    tracks = filter_tracks(
        store.list_tracks(),
        search=args.search or "",
        favorites_only=args.favorites,
        mood=args.mood,
        usage=args.usage,
    )
    if not tracks:
        safe_print("No tracks found.", style="yellow")
        return 0
    get_console().print(render_track_table(tracks))
    return 0


def cmd_show(store: TrackStore, args: argparse.Namespace, config: Config) -> int:
    print_track_detail(_require_track(store, args.id))
    return 0


def cmd_add(store: TrackStore, args: argparse.Namespace, config: Config) -> int:
    data = TrackData(
        title=(args.title or "").strip(),
        artist=(args.artist or "").strip(),
        platform_url=args.url or None,
        mood_tags=normalize_tag_input(args.mood or []),
        usage_tags=normalize_tag_input(args.usage or []),
        notes=args.notes or "",
        favorite=bool(args.favorite),
    )
    track = store.create_track(data)
    safe_print(f"Added {track.artist} - {track.title} ({track.id})", style="green")
    return 0


def cmd_edit(store: TrackStore, args: argparse.Namespace, config: Config) -> int:
    current = _require_track(store, args.id)
    data = TrackData(
        title=args.title.strip() if args.title is not None else current.title,
        artist=args.artist.strip() if args.artist is not None else current.artist,
        platform_url=(args.url or None) if args.url is not None else current.platform_url,
        mood_tags=(
            normalize_tag_input(args.mood) if args.mood is not None else current.mood_tags
        ),
        usage_tags=(
            normalize_tag_input(args.usage)
            if args.usage is not None
            else current.usage_tags
        ),
        notes=args.notes if args.notes is not None else current.notes,
        favorite=args.favorite if args.favorite is not None else current.favorite,
    )
    track = store.update_track(args.id, data)
    safe_print(f"Updated {track.artist} - {track.title}", style="green")
    return 0


def cmd_delete(store: TrackStore, args: argparse.Namespace, config: Config) -> int:
    store.delete_track(args.id)
    safe_print(f"Deleted {args.id}", style="green")
    return 0


def cmd_use(store: TrackStore, args: argparse.Namespace, config: Config) -> int:
    track = store.mark_used(args.id)
    safe_print(
        f"Marked {track.title} used ({track.used_count} time(s))", style="green"
    )
    return 0


def cmd_favorite(store: TrackStore, args: argparse.Namespace, config: Config) -> int:
    track = store.toggle_favorite(args.id)
    state = "added to" if track.favorite else "removed from"
    safe_print(f"{track.title} {state} favorites", style="green")
    return 0


def cmd_recommend(store: TrackStore, args: argparse.Namespace, config: Config) -> int:
    rng = random.Random(args.seed) if args.seed is not None else None

    if args.explain:
        track, ranked = explain_recommendation(store, rng, config.recommendation)
        if ranked:
            table = Table(title="Candidates (best first)")
            table.add_column("Score", justify="right")
            table.add_column("Title", style="bold")
            table.add_column("Tags")
            for position, item in enumerate(ranked):
                style = "green" if position < config.recommendation.top_k else None
                table.add_row(
                    str(item.score),
                    item.track.title,
                    ", ".join(item.track.all_tags),
                    style=style,
                )
            get_console().print(table)
        elif track is not None:
            safe_print(
                "Every track was used recently; picking from the whole catalog.",
                style="yellow",
            )
    else:
        track = recommend_from_store(store, rng, config.recommendation)

    if track is None:
        safe_print("No tracks yet. Add one with 'bgm-catalog add'.", style="yellow")
        return 0

    safe_print("Recommended:", style="bold green")
    print_track_detail(track)

    if args.use:
        updated = store.mark_used(track.id)
        safe_print(f"Marked used ({updated.used_count} time(s))", style="green")
    return 0


def cmd_tags(store: TrackStore, args: argparse.Namespace, config: Config) -> int:
    moods, usages = tag_vocabulary(store.list_tracks())
    safe_print("Mood tags:", style="bold cyan")
    safe_print("  " + ", ".join(moods))
    safe_print("Usage tags:", style="bold magenta")
    safe_print("  " + ", ".join(usages))
    return 0


def _add_track_options(parser: argparse.ArgumentParser, editing: bool) -> None:
    parser.add_argument("--title", required=not editing, help="Track title")
    parser.add_argument("--artist", required=not editing, help="Artist name")
    parser.add_argument("--url", help="Platform link (e.g. Instagram audio page)")
    parser.add_argument(
        "--mood", action="append", help="Mood tag (repeat for several)"
    )
    parser.add_argument(
        "--usage", action="append", help="Usage tag (repeat for several)"
    )
    parser.add_argument("--notes", help="Free-text notes")
    if editing:
        parser.add_argument(
            "--favorite",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Set or clear the favorite flag",
        )
    else:
        parser.add_argument("--favorite", action="store_true", help="Mark as favorite")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the bgm-catalog command."""
    parser = argparse.ArgumentParser(
        prog="bgm-catalog",
        description="BGM Catalog - mood/usage tagged background music with recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        help="Track collection file (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    list_parser = subparsers.add_parser("list", help="List tracks")
    list_parser.add_argument("--search", help="Search title, artist and tags")
    list_parser.add_argument(
        "--favorites", action="store_true", help="Only favorite tracks"
    )
    list_parser.add_argument("--mood", help="Only tracks with this mood tag")
    list_parser.add_argument("--usage", help="Only tracks with this usage tag")
    list_parser.set_defaults(handler=cmd_list)

    show_parser = subparsers.add_parser("show", help="Show one track")
    show_parser.add_argument("id", help="Track ID")
    show_parser.set_defaults(handler=cmd_show)

    add_parser = subparsers.add_parser("add", help="Add a track")
    _add_track_options(add_parser, editing=False)
    add_parser.set_defaults(handler=cmd_add)

    edit_parser = subparsers.add_parser("edit", help="Edit a track")
    edit_parser.add_argument("id", help="Track ID")
    _add_track_options(edit_parser, editing=True)
    edit_parser.set_defaults(handler=cmd_edit)

    delete_parser = subparsers.add_parser("delete", help="Delete a track")
    delete_parser.add_argument("id", help="Track ID")
    delete_parser.set_defaults(handler=cmd_delete)

    use_parser = subparsers.add_parser("use", help="Mark a track as used")
    use_parser.add_argument("id", help="Track ID")
    use_parser.set_defaults(handler=cmd_use)

    favorite_parser = subparsers.add_parser("favorite", help="Toggle favorite")
    favorite_parser.add_argument("id", help="Track ID")
    favorite_parser.set_defaults(handler=cmd_favorite)

    recommend_parser = subparsers.add_parser("recommend", help="Recommend a track")
    recommend_parser.add_argument(
        "--seed", type=int, help="Seed the random pick (repeatable results)"
    )
    recommend_parser.add_argument(
        "--explain", action="store_true", help="Show candidate scores"
    )
    recommend_parser.add_argument(
        "--use", action="store_true", help="Mark the recommended track used"
    )
    recommend_parser.set_defaults(handler=cmd_recommend)

    tags_parser = subparsers.add_parser("tags", help="List known tags")
    tags_parser.set_defaults(handler=cmd_tags)

    return parser


def run(argv: Optional[list[str]] = None, config: Optional[Config] = None) -> int:
    """Parse arguments and execute one command.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])
        config: Configuration to use (default: load from config.toml)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)

    if config is None:
        config = load_config()
    setup_from_config(config.logging)

    data_file = args.data_file if args.data_file else get_data_file(config)
    store = TrackStore(JsonFileStorage(data_file), validate=True)

    try:
        return args.handler(store, args, config)
    except CatalogError as e:
        logger.error(f"{args.subcommand} failed: {e}")
        print_error(f"Error: {e}")
        return 1


def main() -> None:
    """Main entry point for the bgm-catalog command."""
    sys.exit(run())


if __name__ == "__main__":
    main()
