"""
Command-line runner for the signal chain.

Usage:
    sigchain [--config CONFIG_PATH] [--frequency HZ] [--filter {notch,fir,none}]
             [--log-file PATH] [--verbose]
"""

import argparse
import copy
import logging
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import DEFAULT_CONFIG, load_config
from .exceptions import InvalidParameterError, SignalError
from .pipeline import FILTER_KINDS, PipelineConfig, PipelineResult, SignalChain
from .utils.logging import setup_logging

console = Console()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Generate, filter and analyse a test tone')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML configuration file (defaults are used for missing keys)')
    parser.add_argument('--frequency', type=float, default=None,
                        help='Override the source tone frequency in Hz')
    parser.add_argument('--filter', type=str, choices=FILTER_KINDS, default=None,
                        help='Override the filter stage')
    parser.add_argument('--log-file', type=str, default=None,
                        help='Write a detailed log to this file')
    parser.add_argument('--verbose', action='store_true',
                        help='Log at DEBUG level')
    return parser.parse_args(argv)


def print_result(config: PipelineConfig, result: PipelineResult) -> None:
    console.print(Panel.fit(
        "[bold blue]Signal Chain[/bold blue]\n"
        f"Tone: {config.frequency} Hz | Sample rate: {config.sample_rate} Hz | "
        f"Samples: {result.n_samples} | Filter: {config.filter_kind}",
        border_style="blue"
    ))

    table = Table(title="Zero-crossing estimates", box=box.ROUNDED)
    table.add_column("Window", justify="right", style="cyan")
    table.add_column("Estimate (Hz)", justify="right", style="green")
    for i, estimate in enumerate(result.estimates, start=1):
        table.add_row(str(i), f"{estimate:.2f}")
    console.print(table)

    if not result.estimates:
        console.print("[yellow]Signal shorter than one estimation window[/yellow]")

    if result.raw_peak_hz is not None:
        console.print(
            f"Spectral peak: raw [bold]{result.raw_peak_hz:.2f} Hz[/bold], "
            f"filtered [bold]{result.filtered_peak_hz:.2f} Hz[/bold]"
        )


def _override(config: dict, section: str, key: str, value) -> None:
    current = config.get(section)
    if current is None:
        current = config[section] = {}
    if not isinstance(current, dict):
        raise InvalidParameterError(
            f"Config section '{section}' must be a mapping, got {type(current).__name__}"
        )
    current[key] = value


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config) if args.config else copy.deepcopy(DEFAULT_CONFIG)

        if args.frequency is not None:
            _override(config, 'source', 'frequency', args.frequency)
        if args.filter is not None:
            _override(config, 'filter', 'kind', args.filter)

        log_cfg = config.get('logging') or {}
        if not isinstance(log_cfg, dict):
            raise InvalidParameterError(
                f"Config section 'logging' must be a mapping, got {type(log_cfg).__name__}"
            )
    except (OSError, SignalError) as e:
        console.print(f"[bold red]✗[/bold red] Could not load config: {e}")
        return 2

    if args.verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, str(log_cfg.get('level', 'INFO')).upper(), logging.INFO)
    logger = setup_logging(
        log_file=args.log_file or log_cfg.get('file'),
        level=level,
        name='sigchain'
    )

    try:
        pipeline_config = PipelineConfig.from_dict(config)
        result = SignalChain(pipeline_config).run()
    except SignalError as e:
        logger.error(f"Signal chain failed: {e}")
        console.print(f"[bold red]✗[/bold red] {e}")
        return 2

    print_result(pipeline_config, result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
