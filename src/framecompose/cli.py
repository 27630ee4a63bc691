"""CLI for frame rendering.

Reads a YAML timeline manifest, resolves the timeline, and writes the
requested frames as PNG files (frame-00000.png, ...). Every frame is
computed independently from its number, so frame ranges can be split
across worker processes. Encoding the frames into a video container is
left to external tools.

Usage:
    # Render every frame
    python -m framecompose.cli \
        --manifest timeline.yaml --output /tmp/frames/

    # Render one frame
    python -m framecompose.cli \
        --manifest timeline.yaml --output /tmp/frames/ --frame 120

    # Every 10th frame of the first 300, 4 workers
    python -m framecompose.cli \
        --manifest timeline.yaml --output /tmp/frames/ \
        --end 300 --every 10 --workers 4

    # Validate only (no rendering)
    python -m framecompose.cli --manifest timeline.yaml --validate
"""

import argparse
import json
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

from PIL import Image

from .errors import ConfigurationError, DurationError, FrameRangeError
from .manifest import build_from_manifest, load_timeline_manifest
from .render import audio_gain_curve, render_frame
from .timeline import ResolvedTimeline, describe_timeline


def frame_filename(frame: int) -> str:
    return f"frame-{frame:05d}.png"


def select_frames(
    total_frames: int,
    start: int = 0,
    end: int | None = None,
    every: int = 1,
) -> list[int]:
    """Frame numbers in [start, end) stepping by *every*, within the timeline."""
    if every < 1:
        raise FrameRangeError(f"--every must be >= 1, got {every}")
    if end is None or end > total_frames:
        end = total_frames
    if start < 0 or start >= end:
        raise FrameRangeError(
            f"Empty frame range {start}-{end} (timeline has {total_frames} frames)"
        )
    return list(range(start, end, every))


def _render_batch(args):
    """Worker function for parallel rendering.

    Takes a single tuple so it works with ProcessPoolExecutor.submit().
    Each worker renders its frames and writes them to disk independently.
    """
    batch_index, config, resolved, frames, out_dir = args
    label = f"[batch {batch_index}] frames {frames[0]}-{frames[-1]} ({len(frames)})"
    print(f"  START  {label}", flush=True)
    t0 = time.monotonic()
    for frame in frames:
        pixels = render_frame(config, resolved, frame)
        Image.fromarray(pixels).save(Path(out_dir) / frame_filename(frame))
    elapsed = time.monotonic() - t0
    print(f"  DONE   {label} — {elapsed:.1f}s wall", flush=True)
    return batch_index, len(frames)


def write_audio_gain(config: dict, out_dir: Path) -> Path | None:
    """Write the per-frame audio gain curve as JSON (skipped without audio)."""
    audio = config.get("audio")
    if audio is None:
        return None
    video = config["video"]
    out_path = out_dir / "audio-gain.json"
    payload = {
        "src": audio.get("src"),
        "fps": video["fps"],
        "total_frames": video["duration"],
        "gains": [round(float(g), 6) for g in audio_gain_curve(config)],
    }
    with open(out_path, "w") as f:
        json.dump(payload, f, indent=2)
    return out_path


# ── Main rendering ───────────────────────────────────────────────


def render(
    manifest_path: str,
    output_dir: str,
    frames: list[int] | None = None,
    start: int = 0,
    end: int | None = None,
    every: int = 1,
    workers: int = 1,
) -> list[int]:
    """Load manifest, resolve the timeline, write PNG frames.

    Args:
        manifest_path: Path to YAML timeline manifest.
        output_dir: Directory for frame PNGs and audio-gain.json.
        frames: Explicit frame numbers; overrides start/end/every.
        start: First frame (inclusive).
        end: Last frame (exclusive); defaults to the timeline length.
        every: Step between rendered frames.
        workers: Parallel worker processes. 1 = sequential.

    Returns:
        The frame numbers written.

    Raises:
        FrameRangeError: Requested frames fall outside the timeline.
    """
    config = load_timeline_manifest(manifest_path)
    resolved = build_from_manifest(config)
    video = config["video"]

    if frames is None:
        frames = select_frames(resolved.total_frames, start, end, every)
    for frame in frames:
        if not 0 <= frame < resolved.total_frames:
            raise FrameRangeError(
                f"--frame {frame} out of range "
                f"(timeline has {resolved.total_frames} frames, 0-{resolved.total_frames - 1})"
            )

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    w, h = video["resolution"]
    effective_workers = max(1, min(workers, len(frames)))
    batches = [frames[i::effective_workers] for i in range(effective_workers)]
    work = [(i, config, resolved, batch, str(out_dir)) for i, batch in enumerate(batches)]

    print(
        f"Rendering {len(frames)} frames ({w}x{h}, {video['fps']}fps) to {out_dir}/"
        + (f" ({effective_workers} workers)" if effective_workers > 1 else "")
        + "\n"
    )
    t_start = time.monotonic()
    if effective_workers == 1:
        _render_batch(work[0])
    else:
        with ProcessPoolExecutor(max_workers=effective_workers) as pool:
            futures = {pool.submit(_render_batch, item): item[0] for item in work}
            for future in as_completed(futures):
                future.result()  # propagate exceptions

    gain_path = write_audio_gain(config, out_dir)
    if gain_path is not None:
        print(f"Audio gain curve: {gain_path}")

    total_wall = time.monotonic() - t_start
    print(f"\nDone: {len(frames)} frames rendered to {out_dir}/ ({total_wall:.1f}s total)")
    return frames


def print_timeline(resolved: ResolvedTimeline) -> None:
    print(
        f"Timeline valid: {len(resolved.scenes)} scenes, "
        f"{resolved.total_frames} frames at {resolved.fps}fps "
        f"({resolved.duration_seconds:.2f}s)"
    )
    for row in describe_timeline(resolved):
        print(f"  {row}")


# ── CLI entry point ───────────────────────────────────────────────


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Render a YAML timeline manifest to PNG frames.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML timeline manifest",
    )
    parser.add_argument(
        "--output",
        help="Output directory for frame PNGs",
    )
    parser.add_argument(
        "--frame", type=int, default=None,
        help="Render only this global frame (0-based)",
    )
    parser.add_argument(
        "--start", type=int, default=0,
        help="First frame to render (default: 0)",
    )
    parser.add_argument(
        "--end", type=int, default=None,
        help="Stop before this frame (default: timeline length)",
    )
    parser.add_argument(
        "--every", type=int, default=1,
        help="Render every Nth frame (default: 1)",
    )
    parser.add_argument(
        "--workers", type=int, default=1,
        help="Number of parallel worker processes (default: 1)",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest and print the resolved layout, don't render",
    )
    args = parser.parse_args(args)

    if args.validate:
        try:
            config = load_timeline_manifest(args.manifest)
            resolved = build_from_manifest(config)
        except (ConfigurationError, DurationError) as e:
            sys.exit(f"Invalid manifest: {e}")
        print_timeline(resolved)
        return

    if not args.output:
        parser.error("--output is required (unless using --validate)")

    if args.frame is not None and (args.start != 0 or args.end is not None or args.every != 1):
        parser.error("--frame and --start/--end/--every are mutually exclusive")

    try:
        render(
            args.manifest, args.output,
            frames=[args.frame] if args.frame is not None else None,
            start=args.start,
            end=args.end,
            every=args.every,
            workers=args.workers,
        )
    except FrameRangeError as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
