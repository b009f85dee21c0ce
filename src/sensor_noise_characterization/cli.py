"""CLI for estimating sensor noise from a recorded measurement file."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from .config import AccumulationConfig, NoiseEstimatorSettings
from .estimator import build_noise_estimator
from .models import ChannelLayout
from .session import InvalidStateError
from .sources import open_replay_file
from .stop_policy import StopMode


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Estimate static sensor noise from a recording")
    parser.add_argument("--input", required=True, help="CSV rows: timestamp_nanos,accuracy[,values...]")
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("--stop-mode", choices=[mode.value for mode in StopMode], help="Completion rule")
    parser.add_argument("--max-samples", type=int, help="Samples before completion")
    parser.add_argument("--max-duration-millis", type=int, help="Duration (ms) before completion")
    parser.add_argument("--layout", choices=[layout.value for layout in ChannelLayout], help="Channel layout")
    parser.add_argument("--ned", action="store_true", help="Convert ENU triads to NED")
    return parser


def _settings(args: argparse.Namespace) -> NoiseEstimatorSettings:
    settings = NoiseEstimatorSettings.from_toml(args.config) if args.config else NoiseEstimatorSettings()
    overrides = {
        "stop_mode": args.stop_mode,
        "max_samples": args.max_samples,
        "max_duration_millis": args.max_duration_millis,
        "layout": args.layout,
        "convert_to_ned": True if args.ned else None,
    }
    data = settings.accumulation.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})
    settings.accumulation = AccumulationConfig.model_validate(data)
    return settings


def main(argv: Sequence[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    settings = _settings(args)

    try:
        source = open_replay_file(args.input)
        estimator = build_noise_estimator(source, settings=settings)
        estimator.start()
        source.replay()
    except (InvalidStateError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    estimator.stop()

    result = estimator.result
    payload = {
        "completed": result is not None,
        "processed_count": estimator.processed_count,
        "unreliable": estimator.result_unreliable,
        "result": result.to_dict() if result is not None else None,
    }
    print(json.dumps(payload, indent=2))
    return 0 if result is not None else 1


if __name__ == "__main__":
    sys.exit(main())
