"""CLI for posemetrics: ``posemetrics analyze`` and ``posemetrics connections``."""

import argparse
import json
import logging
import sys
from typing import List, Optional

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="posemetrics",
        description="Motion metrics and injury-risk heuristics from pose keypoints",
    )
    sub = parser.add_subparsers(dest="command")

    # posemetrics analyze
    analyze_p = sub.add_parser("analyze", help="Analyze a video file")
    analyze_p.add_argument("video", help="Path to the input video")
    analyze_p.add_argument(
        "--playback-fps",
        type=float,
        default=30.0,
        help="Frame rate of the output timeline (default: 30)",
    )
    analyze_p.add_argument(
        "--analysis-fps",
        type=float,
        default=15.0,
        help="Maximum analysis frame rate (default: 15)",
    )
    analyze_p.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Stop after N analyzed frames",
    )
    analyze_p.add_argument(
        "--json",
        action="store_true",
        help="Print summary and per-frame metrics as JSON",
    )
    analyze_p.add_argument(
        "-o", "--output",
        default=None,
        help="Write an annotated video to this path",
    )
    analyze_p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # posemetrics connections
    sub.add_parser("connections", help="List skeleton connections")

    return parser


def _cmd_analyze(args: argparse.Namespace) -> None:
    """Handle ``posemetrics analyze``."""
    from posemetrics.analyzer import PoseAnalyzer
    from posemetrics.config import SessionConfig
    from posemetrics.session import AnalysisSession
    from posemetrics.skeleton import body_center
    from posemetrics.source import VideoFileSource

    config = SessionConfig(
        playback_fps=args.playback_fps,
        analysis_fps=args.analysis_fps,
        max_frames=args.max_frames,
    )
    session = AnalysisSession(PoseAnalyzer(), config)

    with VideoFileSource(args.video) as source:
        outcome = session.analyze_video(source)
        if args.output:
            _save_overlay(source, outcome.results, args.output, config.playback_fps)

    summary = outcome.summary()

    if args.json:
        frames = []
        for r in outcome.results:
            entry = {"frame": r.frame, "metrics": r.metrics.to_dict()}
            if r.poses:
                entry["center"] = body_center(r.poses[0])
            frames.append(entry)
        print(json.dumps({
            "summary": summary.to_dict() if summary else None,
            "analyzedFrames": outcome.sparse_count,
            "failedFrames": outcome.failed_frames,
            "recommendations": list(summary.recommendations) if summary else [],
            "frames": frames,
        }, indent=2))
        return

    print(f"Analyzed {outcome.sparse_count} frames "
          f"({len(outcome.failed_frames)} failed), "
          f"{len(outcome.results)}/{outcome.total_frames} on timeline")
    if summary is None:
        print("No results.")
        return
    print(f"  speed        avg {summary.speed:.1f} m/s")
    print(f"  jump height  avg {summary.jump_height:.1f} cm")
    print(f"  cadence      avg {summary.cadence:.0f} spm")
    print(f"  agility      avg {summary.agility_score:.1f}/100")
    print(f"  peak risk    {summary.peak_risk.upper()}")
    for line in summary.recommendations:
        print(f"    - {line}")
    if args.output:
        print(f"Saved annotated video to {args.output}")


def _save_overlay(source, results, output_path: str, fps: float) -> None:
    """Render ``results`` over the source sampled at playback rate."""
    from posemetrics.viz import VideoSaver

    codec = "MJPG" if output_path.lower().endswith(".avi") else "mp4v"
    saver = None
    try:
        for frame, result in zip(source.sample(fps), results):
            if saver is None:
                h, w = frame.data.shape[:2]
                saver = VideoSaver(output_path, fps=fps, width=w, height=h, codec=codec)
            saver.update(frame, result)
    finally:
        if saver:
            saver.close()


def _cmd_connections(args: argparse.Namespace) -> None:
    """Handle ``posemetrics connections``."""
    from posemetrics.skeleton import POSE_CONNECTIONS

    for start, end in POSE_CONNECTIONS:
        print(f"  {start:15s} -> {end}")


def main(argv: Optional[List[str]] = None):
    """Entry point for ``posemetrics`` CLI."""
    from posemetrics.errors import PoseMetricsError

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG)

    try:
        if args.command == "analyze":
            _cmd_analyze(args)
        elif args.command == "connections":
            _cmd_connections(args)
    except (PoseMetricsError, IOError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
