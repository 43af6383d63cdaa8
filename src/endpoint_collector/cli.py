from __future__ import annotations

import argparse
import json
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tqdm.auto import tqdm

from .config import CollectionConfig, EngineSettings
from .logging_utils import get_logger
from .probe import check_urls
from .service import CollectionResult, collect
from .validator import validate

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Collect and map fields from HTTP endpoints")
    p.add_argument("--timeout", type=float, default=None, help="Per-attempt request timeout (seconds)")
    sub = p.add_subparsers(dest="tool", required=True)

    pc = sub.add_parser("collect", help="Run one collection config and print the result")
    pc.add_argument("config", help="JSON file with one config, or '-' for stdin")

    pb = sub.add_parser("batch", help="Run many collection configs concurrently")
    pb.add_argument("configs", nargs="+", help="JSON files, each holding a config or a list of configs")
    pb.add_argument("--workers", type=int, default=None)
    pb.add_argument("--output-dir", default=None, help="Write one <name>.json per result here")
    pb.add_argument("--progress-bar", action=argparse.BooleanOptionalAction, default=None)

    pv = sub.add_parser("validate", help="Check a config without sending anything")
    pv.add_argument("config", help="JSON file with one config, or '-' for stdin")

    pp = sub.add_parser("probe", help="Connectivity check (HEAD) for one or more URLs")
    pp.add_argument("urls", nargs="+")
    pp.add_argument("--timeout", dest="probe_timeout", type=float, default=5.0)

    return p


def _read_json(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    with Path(source).expanduser().open("r", encoding="utf-8") as f:
        return json.load(f)


def load_configs(source: str) -> List[Tuple[str, Dict[str, Any]]]:
    """Return (name, raw config) pairs; a list file yields ``<stem>-<n>`` names."""
    payload = _read_json(source)
    stem = "stdin" if source == "-" else Path(source).stem
    items = list(enumerate(payload)) if isinstance(payload, list) else [(None, payload)]
    out: List[Tuple[str, Dict[str, Any]]] = []
    for i, item in items:
        if not isinstance(item, dict):
            raise SystemExit(f"{source}: config entries must be JSON objects")
        out.append((stem if i is None else f"{stem}-{i}", item))
    return out


def _dump(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


def _settings(args: argparse.Namespace) -> EngineSettings:
    settings = EngineSettings.from_env()
    if args.timeout is not None:
        settings = replace(settings, request_timeout=args.timeout)
    return settings


def _single_config(source: str) -> Dict[str, Any]:
    payload = _read_json(source)
    if not isinstance(payload, dict):
        raise SystemExit(f"{source}: expected a single config object")
    return payload


def run_collect(args: argparse.Namespace) -> int:
    raw = _single_config(args.config)
    result = collect(CollectionConfig.from_dict(raw), settings=_settings(args))
    print(_dump(result.to_dict()))
    return 0 if result.success else 1


def run_batch(args: argparse.Namespace) -> int:
    settings = _settings(args)
    progress_bar = settings.progress_bar if args.progress_bar is None else args.progress_bar
    workers = args.workers or settings.workers

    jobs: List[Tuple[str, Dict[str, Any]]] = []
    for source in args.configs:
        jobs.extend(load_configs(source))
    if not jobs:
        logger.warning("No configs to collect.")
        return 0

    out_dir: Optional[Path] = Path(args.output_dir).expanduser() if args.output_dir else None
    if out_dir:
        out_dir.mkdir(parents=True, exist_ok=True)

    results: Dict[int, CollectionResult] = {}
    bar = tqdm(total=len(jobs), desc="collect", unit="cfg", leave=True) if progress_bar else None

    def run_one(raw: Dict[str, Any]) -> CollectionResult:
        return collect(CollectionConfig.from_dict(raw), settings=settings)

    try:
        with ThreadPoolExecutor(max_workers=max(1, workers)) as ex:
            futs = {ex.submit(run_one, raw): i for i, (_, raw) in enumerate(jobs)}
            for fut in as_completed(futs):
                i = futs[fut]
                results[i] = fut.result()
                if not results[i].success:
                    logger.warning("[%s] failed: %s", jobs[i][0], results[i].error)
                if bar is not None:
                    bar.update(1)
    finally:
        if bar is not None:
            bar.close()

    ordered = [(name, results[i]) for i, (name, _) in enumerate(jobs)]
    if out_dir:
        for name, result in ordered:
            (out_dir / f"{name}.json").write_text(_dump(result.to_dict()), encoding="utf-8")
        logger.info("Wrote %d results to %s", len(ordered), out_dir)
    else:
        print(_dump([dict(name=name, **result.to_dict()) for name, result in ordered]))

    failed = sum(1 for _, r in ordered if not r.success)
    logger.info("batch done: %d ok, %d failed.", len(ordered) - failed, failed)
    return 0 if failed == 0 else 1


def run_validate(args: argparse.Namespace) -> int:
    raw = _single_config(args.config)
    check = validate(CollectionConfig.from_dict(raw))
    print(_dump({"valid": check.valid, "errors": check.errors}))
    return 0 if check.valid else 1


def run_probe(args: argparse.Namespace) -> int:
    report = check_urls(args.urls, timeout=args.probe_timeout)
    print(_dump({
        "results": [r.to_dict() for r in report["results"]],
        "first_reachable": report["first_reachable"],
    }))
    return 0 if report["first_reachable"] else 1


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    if args.tool == "collect":
        return run_collect(args)
    if args.tool == "batch":
        return run_batch(args)
    if args.tool == "validate":
        return run_validate(args)
    if args.tool == "probe":
        return run_probe(args)

    raise SystemExit("Invalid arguments")
