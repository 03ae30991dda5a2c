#!/usr/bin/env python3
"""
Performance benchmark for pipehtml against other HTML parsers.
Reads every *.html (and zstd compressed *.html.zst) file from a directory into
memory first, so only parsing is timed.
"""

# ruff: noqa: PERF203, PLC0415, BLE001
from __future__ import annotations

import argparse
import multiprocessing
import os
import pathlib
import sys
import threading
import time

try:
    import zstandard as zstd
except ImportError:
    zstd = None

# Optional dependency for RSS sampling
try:
    import psutil

    _PSUTIL_AVAILABLE = True
except Exception:
    psutil = None
    _PSUTIL_AVAILABLE = False

PARSERS = ["pipehtml", "pipehtml_bytes", "html5lib", "lxml", "bs4", "html.parser", "selectolax"]


class MemoryMonitor:
    """Samples the RSS of a process on a background thread."""

    def __init__(self, pid: int | None = None, sample_interval: float = 0.01):
        self.sample_interval = sample_interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._proc = psutil.Process(pid if pid is not None else os.getpid()) if _PSUTIL_AVAILABLE else None
        self.start_rss: int | None = None
        self.end_rss: int | None = None
        self.peak_rss: int | None = None
        self.samples = 0

    def _get_rss(self) -> int | None:
        if not self._proc:
            return None
        try:
            return self._proc.memory_info().rss
        except psutil.Error:
            return None

    def start(self):
        if not _PSUTIL_AVAILABLE:
            return
        self.start_rss = self.peak_rss = self._get_rss()
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        while not self._stop.is_set():
            rss = self._get_rss()
            if rss is not None:
                self.end_rss = rss
                self.peak_rss = rss if self.peak_rss is None else max(self.peak_rss, rss)
                self.samples += 1
            self._stop.wait(self.sample_interval)

    def stop(self):
        if not _PSUTIL_AVAILABLE:
            return
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=1.0)
        # The child may already have exited; keep the last sample then
        current = self._get_rss()
        if current:
            self.end_rss = current

    def to_dict(self) -> dict:
        def mb(x):
            return (x or 0) / (1024 * 1024)

        delta = mb(self.end_rss) - mb(self.start_rss) if self.start_rss is not None else 0.0
        return {"rss_peak_mb": mb(self.peak_rss), "rss_delta_mb": delta, "mem_samples": self.samples}


def load_documents(directory: pathlib.Path, limit: int | None = None) -> list[tuple[str, bytes]]:
    """Return (filename, raw bytes) for each document in directory."""
    if not directory.is_dir():
        print(f"ERROR: Directory not found at {directory}")
        sys.exit(1)
    paths = sorted(p for p in directory.iterdir() if p.name.endswith((".html", ".htm", ".html.zst")))
    if limit:
        paths = paths[:limit]
    dctx = None
    documents = []
    for path in paths:
        data = path.read_bytes()
        if path.name.endswith(".zst"):
            if zstd is None:
                print("ERROR: zstandard is required for .zst files. Install with: pip install zstandard")
                sys.exit(1)
            dctx = dctx or zstd.ZstdDecompressor()
            try:
                data = dctx.decompress(data)
            except zstd.ZstdError as e:
                print(f"Warning: Failed to decompress {path.name}: {e}")
                continue
        documents.append((path.name, data))
    return documents


def _time_parser(parse, documents, iterations, keep_errors=False) -> dict:
    """Time parse(document) over every document; the first call is a warm-up."""
    times = []
    errors = 0
    error_files = []
    if documents:
        try:
            parse(documents[0][1])
        except Exception:
            pass
    for _ in range(iterations):
        for filename, document in documents:
            start = time.perf_counter()
            try:
                parse(document)
            except Exception as e:
                errors += 1
                if keep_errors:
                    error_files.append((filename, str(e)))
                continue
            times.append(time.perf_counter() - start)
    return {
        "total_time": sum(times),
        "mean_time": sum(times) / len(times) if times else 0,
        "min_time": min(times) if times else 0,
        "max_time": max(times) if times else 0,
        "errors": errors,
        "success_count": len(times),
        "error_files": error_files,
    }


def _as_text(documents):
    return [(name, data.decode("utf-8", errors="replace")) for name, data in documents]


def benchmark_pipehtml(documents: list, iterations: int = 1) -> dict:
    """Scan decoded text. Pages the scanner rejects are counted as errors."""
    from pipehtml import PipeHTML

    return _time_parser(lambda html: PipeHTML(html).root, _as_text(documents), iterations, keep_errors=True)


def benchmark_pipehtml_bytes(documents: list, iterations: int = 1) -> dict:
    """Scan raw bytes, honouring <meta charset> announcements."""
    from pipehtml import parse_bytes

    return _time_parser(lambda data: parse_bytes(data).result, documents, iterations, keep_errors=True)


def benchmark_html5lib(documents: list, iterations: int = 1) -> dict:
    try:
        import html5lib
    except ImportError:
        return {"error": "html5lib not installed (pip install html5lib)"}
    return _time_parser(html5lib.parse, _as_text(documents), iterations)


def benchmark_lxml(documents: list, iterations: int = 1) -> dict:
    try:
        from lxml import html as lxml_html
    except ImportError:
        return {"error": "lxml not installed (pip install lxml)"}
    return _time_parser(lxml_html.fromstring, _as_text(documents), iterations)


def benchmark_bs4(documents: list, iterations: int = 1) -> dict:
    try:
        from bs4 import BeautifulSoup
    except ImportError:
        return {"error": "beautifulsoup4 not installed (pip install beautifulsoup4)"}
    return _time_parser(lambda html: BeautifulSoup(html, "html.parser").name, _as_text(documents), iterations)


def benchmark_html_parser(documents: list, iterations: int = 1) -> dict:
    """Stdlib html.parser with handlers that just collect events."""
    from html.parser import HTMLParser

    class CollectingParser(HTMLParser):
        def __init__(self):
            super().__init__()
            self.events = []

        def handle_starttag(self, tag, attrs):
            self.events.append(("start", tag, attrs))

        def handle_endtag(self, tag):
            self.events.append(("end", tag))

        def handle_data(self, data):
            self.events.append(("data", data))

    def parse(html):
        parser = CollectingParser()
        parser.feed(html)
        parser.close()
        return parser.events

    return _time_parser(parse, _as_text(documents), iterations)


def benchmark_selectolax(documents: list, iterations: int = 1) -> dict:
    try:
        from selectolax.parser import HTMLParser
    except ImportError:
        return {"error": "selectolax not installed (pip install selectolax)"}
    return _time_parser(lambda html: HTMLParser(html).root, _as_text(documents), iterations)


BENCHMARKS = {
    "pipehtml": benchmark_pipehtml,
    "pipehtml_bytes": benchmark_pipehtml_bytes,
    "html5lib": benchmark_html5lib,
    "lxml": benchmark_lxml,
    "bs4": benchmark_bs4,
    "html.parser": benchmark_html_parser,
    "selectolax": benchmark_selectolax,
}


def _benchmark_worker(name, documents, iterations, queue):
    try:
        queue.put(BENCHMARKS[name](documents, iterations))
    except Exception as e:
        queue.put({"error": str(e)})


def run_benchmark(name, documents, args) -> dict:
    """Run one benchmark, in a child process when memory is being measured."""
    if args.no_mem or not _PSUTIL_AVAILABLE:
        return BENCHMARKS[name](documents, args.iterations)

    queue = multiprocessing.Queue()
    process = multiprocessing.Process(target=_benchmark_worker, args=(name, documents, args.iterations, queue))
    process.start()
    monitor = MemoryMonitor(pid=process.pid, sample_interval=max(0.0005, args.mem_sample_ms / 1000.0))
    monitor.start()
    try:
        result = queue.get()
    finally:
        monitor.stop()
        process.join()
    if "error" not in result:
        result.update(monitor.to_dict())
    return result


def print_results(results: dict, file_count: int, iterations: int = 1, show_errors: bool = False):
    print("\n" + "=" * 100)
    suffix = f" x {iterations} iterations" if iterations > 1 else ""
    print(f"BENCHMARK RESULTS ({file_count} HTML files{suffix})")
    print("=" * 100)
    print(f"\n{'Parser':<15} {'Total (s)':<10} {'Mean (ms)':<10} {'Peak (MB)':<10} {'Delta (MB)':<10} {'Errors':<8}")
    print("-" * 100)

    baseline = results.get("pipehtml", {}).get("mean_time", 0)
    for name in PARSERS:
        result = results.get(name)
        if result is None:
            continue
        if "error" in result:
            print(f"{name:<15} {result['error']}")
            continue
        if "rss_peak_mb" in result:
            mem_str = f"{result['rss_peak_mb']:>10.1f} {result['rss_delta_mb']:>10.1f}"
        else:
            mem_str = f"{'n/a':>10} {'n/a':>10}"
        relative = ""
        if name != "pipehtml" and baseline > 0 and result["mean_time"] > 0:
            relative = f" ({result['mean_time'] / baseline:.2f}x)"
        print(
            f"{name:<15} {result['total_time']:<10.3f} {result['mean_time'] * 1000:<10.3f} "
            f"{mem_str} {result['errors']:<8}{relative}",
        )
    print("\n" + "=" * 100)

    # pipehtml refuses some real-world markup outright; show why
    for name in ("pipehtml", "pipehtml_bytes"):
        error_files = results.get(name, {}).get("error_files") or []
        if not error_files:
            continue
        print(f"\n{name} rejected {len(error_files)} document(s)")
        if show_errors:
            for filename, message in error_files:
                print(f"  {filename}: {message}")


def main():
    parser = argparse.ArgumentParser(description="Benchmark HTML parsers over a directory of HTML files")
    parser.add_argument("directory", type=pathlib.Path, help="Directory with *.html or *.html.zst files")
    parser.add_argument(
        "--limit", type=int, default=100, help="Limit number of files to test (default: 100, use 0 for all)",
    )
    parser.add_argument(
        "--iterations", type=int, default=5, help="Number of iterations to run for averaging (default: 5)",
    )
    parser.add_argument(
        "--parsers", nargs="+", choices=PARSERS, default=PARSERS, help="Parsers to benchmark (default: all)",
    )
    parser.add_argument("--show-errors", action="store_true", help="List every document pipehtml rejected")
    parser.add_argument("--no-mem", action="store_true", help="Disable memory measurement (RSS sampling)")
    parser.add_argument(
        "--mem-sample-ms", type=float, default=10.0, help="Memory sampling interval in milliseconds (default: 10ms)",
    )
    args = parser.parse_args()

    print(f"Loading HTML files from {args.directory}...")
    documents = load_documents(args.directory, args.limit if args.limit > 0 else None)
    if not documents:
        print("ERROR: No HTML files loaded")
        sys.exit(1)
    total_bytes = sum(len(data) for _, data in documents)
    print(f"Loaded {len(documents)} HTML files ({total_bytes / 1024 / 1024:.2f} MB)")
    if not _PSUTIL_AVAILABLE and not args.no_mem:
        print("Note: psutil not installed; memory metrics will be skipped. Install with: pip install psutil")

    results = {}
    for name in args.parsers:
        print(f"\nBenchmarking {name}...", end="", flush=True)
        result = run_benchmark(name, documents, args)
        results[name] = result
        if "error" in result:
            print(f" SKIPPED ({result['error']})")
        else:
            print(f" DONE ({result['total_time']:.3f}s)")

    print_results(results, len(documents), args.iterations, show_errors=args.show_errors)


if __name__ == "__main__":
    main()
