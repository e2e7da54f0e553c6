from __future__ import annotations

import argparse
import logging
import re
from pathlib import Path

import matplotlib.pyplot as plt

from perf_history import Kind, LoaderSettings, RunStore, load_directory
from perf_history.aggregator import TOTAL


def _safe(name: str) -> str:
    s = re.sub(r'[^a-zA-Z0-9._-]+', '_', name.strip())
    s = s.lstrip('_.')
    return s or 'crate'


def _plot_weekly(*, store: RunStore, kind: Kind, crate: str, phase: str, out_dir: Path) -> Path:
    # 1) weekly[0] is the latest week; plot oldest first
    weeks = list(reversed(store.summary(kind).weekly))
    xs = [w.date for w in weeks]
    ys = [w.by_crate.get(crate, {}).get(phase, float('nan')) for w in weeks]

    plt.figure()
    plt.axhline(0.0, color='#9ca3af', linewidth=0.8)
    plt.plot(xs, ys, marker='o')
    plt.title(f'{kind} {crate}/{phase} (weekly change)')
    plt.ylabel('%')
    plt.gcf().autofmt_xdate()

    out_dir.mkdir(parents=True, exist_ok=True)
    png = out_dir / f'{_safe(crate)}-{_safe(phase)}-weekly.png'
    plt.savefig(png, dpi=160, bbox_inches='tight')
    plt.close()
    return png


def _plot_history(*, store: RunStore, kind: Kind, crate: str, phase: str, out_dir: Path) -> Path:
    runs = [r for r in store.runs(kind) if phase in r.by_crate.get(crate, {})]
    xs = [r.date for r in runs]
    ys = [r.by_crate[crate][phase].time for r in runs]

    plt.figure()
    plt.plot(xs, ys, linewidth=1.0)
    plt.title(f'{kind} {crate}/{phase}')
    plt.ylabel('s')
    plt.gcf().autofmt_xdate()

    out_dir.mkdir(parents=True, exist_ok=True)
    png = out_dir / f'{_safe(crate)}-{_safe(phase)}-history.png'
    plt.savefig(png, dpi=160, bbox_inches='tight')
    plt.close()
    return png


def main() -> None:
    parser = argparse.ArgumentParser(description='Plot the history and weekly trend of one crate phase.')
    parser.add_argument('--data-dir', type=str, default='')
    parser.add_argument('--out-dir', type=str, default='report')
    parser.add_argument('--kind', type=str, choices=[k.value for k in Kind], default=Kind.FULL_COMPILER.value)
    parser.add_argument('--crate', type=str, default=TOTAL)
    parser.add_argument('--phase', type=str, default=TOTAL)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    store = load_directory(args.data_dir or None, LoaderSettings.from_env()).store
    kind = Kind(args.kind)
    out_dir = Path(args.out_dir)

    known = store.crate_names if kind is Kind.FULL_COMPILER else store.benchmark_names
    if args.crate not in known:
        raise SystemExit(f'unknown {kind} crate: {args.crate}')

    pngs = [
        _plot_history(store=store, kind=kind, crate=args.crate, phase=args.phase, out_dir=out_dir),
        _plot_weekly(store=store, kind=kind, crate=args.crate, phase=args.phase, out_dir=out_dir),
    ]

    total = store.summary(kind).total.by_crate.get(args.crate, {}).get(args.phase)
    sections = [
        f'<h1>{kind} {args.crate}/{args.phase}</h1>',
        f'<h2>last run: {store.last_date:%Y-%m-%d %H:%M}</h2>',
        f'<h2>total change: {"n/a" if total is None else f"{total:+.2f}%"}</h2>',
    ]
    sections.extend(f"<div class='card'><img src='{p.name}'></div>" for p in pngs)

    index = out_dir / 'index.html'
    index.write_text(
        "<html><head><meta charset='utf-8'><title>Trend Report</title>"
        '<style>'
        'body{margin:0 auto;padding:16px;font-family:system-ui,-apple-system,sans-serif;}'
        '.card{border:1px solid #e5e7eb;border-radius:10px;padding:10px;background:#fff;margin-bottom:12px;}'
        '.card img{width:100%;height:auto;display:block;}'
        '</style>'
        '</head><body>' + '\n'.join(sections) + '</body></html>',
        encoding='utf-8',
    )

    print(f'[trend-view] wrote: {index}')


if __name__ == '__main__':
    main()
