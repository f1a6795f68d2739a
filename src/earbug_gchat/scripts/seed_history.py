"""
Writes a synthetic `<user>.pb.zstd` listening history so the service can be
run end to end without real earbug data.

    python -m earbug_gchat.scripts.seed_history alice --days 30

Goes to EARBUG_BUCKET when set, EARBUG_DATA_DIR otherwise.
"""
import argparse
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

from google.cloud import storage
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from earbug_gchat import settings
from earbug_gchat.domains.summary.aggregator import format_summary, summarize
from earbug_gchat.domains.summary.decoder import encode
from earbug_gchat.domains.summary.models import PlaybackEvent, PlaybackLog
from earbug_gchat.domains.summary.pipeline import object_key


# Configuration
TRACK_POOL_SIZE = 400
PLAYS_PER_DAY = (10, 60)

console = Console()


def generate_history(days: int, now: datetime, seed: int = 0) -> PlaybackLog:
    """One entry per play, keyed by RFC 3339 start time, over the last `days` days."""
    rng = random.Random(seed)
    tracks = [f"{rng.getrandbits(64):016x}" for _ in range(TRACK_POOL_SIZE)]

    playbacks: PlaybackLog = {}
    for day in range(days, -1, -1):
        start = (now - timedelta(days=day)).replace(hour=0, minute=0, second=0, microsecond=0)
        for _ in range(rng.randint(*PLAYS_PER_DAY)):
            ts = start + timedelta(seconds=rng.randrange(24 * 60 * 60))
            # newer days lean towards tracks further down the pool, so some are new
            reach = min(TRACK_POOL_SIZE, 50 + (days - day) * 10)
            playbacks[ts.strftime("%Y-%m-%dT%H:%M:%SZ")] = PlaybackEvent(track_id=rng.choice(tracks[:reach]))
    return playbacks


def write_object(key: str, data: bytes) -> str:
    if settings.EARBUG_BUCKET:
        bucket = storage.Client().bucket(settings.EARBUG_BUCKET)
        bucket.blob(key).upload_from_string(data, content_type="application/zstd")
        return f"gs://{settings.EARBUG_BUCKET}/{key}"

    root = Path(settings.EARBUG_DATA_DIR or ".")
    root.mkdir(parents=True, exist_ok=True)
    path = root / key
    path.write_bytes(data)
    return str(path)


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("user")
    parser.add_argument("--days", type=int, default=30)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args(argv)

    now = datetime.now(timezone.utc)
    playbacks = generate_history(args.days, now, seed=args.seed)
    data = encode(playbacks)
    location = write_object(object_key(args.user), data)

    stats = summarize(playbacks, now)

    table = Table(title="Seeded history", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold yellow")
    table.add_row("Location", location)
    table.add_row("Playbacks", f"{len(playbacks):,}")
    table.add_row("Compressed size", f"{len(data):,} B")
    table.add_row("Summary date", stats.cutoff)
    table.add_row("Plays", str(stats.play_count))
    table.add_row("Tracks", str(stats.distinct_track_count))
    table.add_row("New tracks", str(stats.new_track_count))

    console.print(table)
    console.print(Panel(format_summary(stats), title="Message the service would post"))


if __name__ == "__main__":
    main()
