from __future__ import annotations

import argparse
import logging

from perf_history import Kind, LoaderSettings, load_directory


def main() -> None:
    parser = argparse.ArgumentParser(description='Load a measurement directory and list its runs.')
    parser.add_argument('--data-dir', type=str, default='')
    parser.add_argument('--kind', type=str, choices=[k.value for k in Kind], default='')
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    settings = LoaderSettings.from_env()
    result = load_directory(args.data_dir or None, settings)
    store = result.store

    kinds = [Kind(args.kind)] if args.kind else list(Kind)
    for kind in kinds:
        for run in store.runs(kind):
            print(f'{kind}  {run.date:%Y-%m-%d %H:%M:%S}  {run.commit}  crates={len(run.by_crate)}')

    print(f'last_date={store.last_date:%Y-%m-%d %H:%M:%S}  crates={len(store.crate_names)}  benchmarks={len(store.benchmark_names)}')


if __name__ == '__main__':
    main()
