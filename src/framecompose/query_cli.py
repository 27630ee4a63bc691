"""CLI for frame queries — what is active at a global frame.

Prints the active scene(s) with their local frames, the transition
progress and blend parameters inside a transition window, and the
audio gain. No pixels are rendered.

Usage:
    framecompose query --manifest timeline.yaml --frame 110
    framecompose query --manifest timeline.yaml --frame 110 --json
"""

import argparse
import json

from .errors import FrameRangeError
from .manifest import build_from_manifest, load_timeline_manifest
from .render import frame_gain
from .timeline import ActiveState, query_frame


def state_to_dict(state: ActiveState, gain: float | None = None) -> dict:
    """Plain-dict form of an ActiveState (JSON serializable)."""
    result = {
        "frame": state.frame,
        "scenes": [
            {"id": s.scene_id, "index": s.index, "local_frame": s.local_frame}
            for s in state.scenes
        ],
    }
    if state.in_transition:
        tr = state.transition
        result["transition"] = {
            "kind": tr.kind,
            "direction": tr.direction,
            "push": tr.push,
            "frames": tr.frames,
            "progress": state.progress,
            **state.composite.to_dict(),
        }
    if gain is not None:
        result["gain"] = gain
    return result


def _print_state(info: dict) -> None:
    print(f"Frame {info['frame']}:")
    for s in info["scenes"]:
        print(f"  scene {s['index']}  {s['id']}  local frame {s['local_frame']}")
    tr = info.get("transition")
    if tr:
        kind = tr["kind"] + (f" {tr['direction']}" if tr["direction"] else "")
        print(f"  transition {kind}  progress {tr['progress']:.3f}")
        print(
            f"    outgoing alpha {tr['outgoing_alpha']:.3f} "
            f"offset ({tr['outgoing_offset'][0]:+.3f}, {tr['outgoing_offset'][1]:+.3f})"
        )
        print(
            f"    incoming alpha {tr['incoming_alpha']:.3f} "
            f"offset ({tr['incoming_offset'][0]:+.3f}, {tr['incoming_offset'][1]:+.3f})"
        )
    if "gain" in info:
        print(f"  audio gain {info['gain']:.4f}")


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Show the scenes, transition and audio gain active at a frame.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML timeline manifest",
    )
    parser.add_argument(
        "--frame", type=int, required=True,
        help="Global frame number (0-based)",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print the state as JSON",
    )
    parsed = parser.parse_args(args)

    config = load_timeline_manifest(parsed.manifest)
    resolved = build_from_manifest(config)
    try:
        state = query_frame(resolved, parsed.frame)
    except FrameRangeError as e:
        parser.error(str(e))
    gain = frame_gain(config, parsed.frame) if config["audio"] is not None else None
    info = state_to_dict(state, gain)

    if parsed.json:
        print(json.dumps(info, indent=2))
    else:
        _print_state(info)


if __name__ == "__main__":
    main()
