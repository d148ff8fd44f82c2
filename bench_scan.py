import argparse
import json
import tempfile
import time
from datetime import datetime
from pathlib import Path
from typing import List

from music_scanner.core import Scanner


def benchmark(src: Path, repeats: int, out_file: Path):
    """
    Times a cold scan into an empty catalog, then warm re-scans of the same
    tree, where the mod-time skip should avoid every tag and cover read.
    """
    with tempfile.TemporaryDirectory() as tmp:
        scanner = Scanner(Path(tmp) / "bench.db", src)
        scanner.migrate_db()

        times: List[float] = []
        written: List[int] = []
        for _ in range(repeats):
            t0 = time.perf_counter()
            summary = scanner.start()
            times.append(time.perf_counter() - t0)
            written.append(summary.tracks_written)

    cold = times[0]
    warm_runs = times[1:]
    warm_avg = sum(warm_runs) / len(warm_runs) if warm_runs else None
    if warm_avg is not None:
        print(f"cold: {cold:.2f}s ({written[0]} tracks), avg warm over {len(warm_runs)} runs: {warm_avg:.2f}s")
    else:
        print(f"cold: {cold:.2f}s ({written[0]} tracks, single run)")

    out_file.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "timestamp": datetime.now().isoformat(),
        "src": str(src),
        "repeats": repeats,
        "times": times,
        "tracks_written": written,
        "cold": cold,
        "warm_avg": warm_avg,
    }
    out_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"Wrote results to {out_file}")


def parse_args():
    p = argparse.ArgumentParser(description="Benchmark cold vs. warm scans of a music tree.")
    p.add_argument("src", type=Path, help="Music root to scan")
    p.add_argument("--repeats", type=int, default=3, help="Scans to run; the first is cold")
    p.add_argument("--output", type=Path, default=Path("bench_scan_results.json"), help="Path to write JSON results")
    return p.parse_args()


def main():
    args = parse_args()
    benchmark(args.src.resolve(), args.repeats, args.output)


if __name__ == "__main__":
    main()
