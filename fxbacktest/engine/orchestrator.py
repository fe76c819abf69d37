"""
Batch orchestration.

Runs many independent single-strategy simulations on a bounded thread
pool, one batch group at a time, and aggregates the successful results.
A failing strategy is recorded and excluded; it never aborts the batch.
"""

import time
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Any

import numpy as np
import pandas as pd
from loguru import logger
from tqdm import tqdm

from fxbacktest.core.exceptions.backtest import ConfigurationError, DataError, TaskError
from fxbacktest.core.models.backtest import BacktestConfig, BacktestResult
from fxbacktest.core.models.batch import (
    BatchPolicy,
    BatchResult,
    BatchTelemetry,
    CandleData,
    CandleSource,
    StrategyDefinition,
)
from fxbacktest.core.protocols import OutputSink
from fxbacktest.core.utils.decorators import log_operation
from fxbacktest.infrastructure.data import CandleCSVLoader, candles_to_frame

from .simulator import run_single
from .telemetry import PeakMemoryTracker, estimate_dataframe_memory, estimate_trades_memory


def discover_strategies(
    directory: str | Path,
    pattern: str = "*.csv",
    config_override: Mapping[str, Any] | None = None,
) -> list[StrategyDefinition]:
    """Build one strategy per price file in ``directory``, named by file stem.

    Raises:
        DataError: If the directory does not exist
    """
    data_dir = Path(directory)
    if not data_dir.is_dir():
        raise DataError(f"Data directory not found: {data_dir}")
    files = sorted((p for p in data_dir.glob(pattern) if p.is_file()), key=lambda p: p.stem)
    return [StrategyDefinition(p.stem, p, config_override) for p in files]


@dataclass
class _BatchState:
    """Shared state of one batch run. Each map has its own lock."""

    results: dict[str, BacktestResult] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    durations: dict[str, float] = field(default_factory=dict)
    results_lock: Lock = field(default_factory=Lock)
    durations_lock: Lock = field(default_factory=Lock)


class BatchOrchestrator:
    """Runs strategy definitions in parallel batches.

    Args:
        shared_config: Configuration every strategy starts from
        policy: Worker count, batch size and memory policy
        loader: Price file loader, shared by all workers
        sink: Optional destination for human-readable progress lines
    """

    def __init__(
        self,
        shared_config: BacktestConfig,
        policy: BatchPolicy | None = None,
        loader: CandleCSVLoader | None = None,
        sink: OutputSink | None = None,
    ) -> None:
        self.shared_config = shared_config
        self.policy = (policy or BatchPolicy()).validate()
        self.loader = loader or CandleCSVLoader()
        self.sink = sink

    def run(self, strategy_defs: Iterable[StrategyDefinition]) -> BatchResult:
        """Run every strategy and aggregate.

        Raises:
            ConfigurationError: If two strategies share a name
        """
        definitions = list(strategy_defs)
        names = [d.name for d in definitions]
        self._check_unique(names)

        policy = self.policy
        state = _BatchState()
        memory = PeakMemoryTracker(policy.memory_limit_mb)
        batches = [
            definitions[k : k + policy.batch_size]
            for k in range(0, len(definitions), policy.batch_size)
        ]

        logger.info(
            f"Starting batch run: {len(definitions)} strategies in {len(batches)} batches, "
            f"{policy.worker_count} workers"
        )
        start_time = time.perf_counter()

        with (
            tqdm(
                total=len(definitions),
                desc="Backtesting",
                unit="strategy",
                disable=not policy.show_progress,
            ) as progress,
            ThreadPoolExecutor(max_workers=policy.worker_count) as pool,
        ):
            for batch_number, batch in enumerate(batches, start=1):
                futures = [pool.submit(self._run_task, d, state, memory) for d in batch]
                # Barrier: the next group starts only when this one is done
                for future in as_completed(futures):
                    future.result()
                    progress.update(1)
                self._emit(
                    f"Batch {batch_number}/{len(batches)} complete: "
                    f"{len(state.results)} succeeded, {len(state.failures)} failed so far"
                )

        telemetry = BatchTelemetry(
            task_durations={n: state.durations[n] for n in names if n in state.durations},
            total_duration=time.perf_counter() - start_time,
            peak_memory_mb=memory.peak_mb,
            batches_processed=len(batches),
        )
        result = self._aggregate(names, state, telemetry)

        logger.success(
            f"Batch run complete: {len(result.results)}/{result.submitted_count} succeeded "
            f"in {telemetry.total_duration:.2f}s"
        )
        self._emit(
            f"Completed {len(result.results)} of {result.submitted_count} strategies "
            f"({result.excluded_count} excluded)"
        )
        if result.best_strategy:
            self._emit(f"Best: {result.best_strategy}, worst: {result.worst_strategy}")
        return result

    def _run_task(
        self, definition: StrategyDefinition, state: _BatchState, memory: PeakMemoryTracker
    ) -> None:
        """Run one strategy, recording either its result or its failure."""
        name = definition.name
        start_time = time.perf_counter()
        try:
            result = self._simulate(definition, memory)
        except Exception as e:
            error = TaskError(name, e)
            logger.error(str(error))
            with state.results_lock:
                state.failures[name] = f"{type(e).__name__}: {e}"
        else:
            with state.results_lock:
                state.results[name] = result
        finally:
            with state.durations_lock:
                state.durations[name] = time.perf_counter() - start_time

    def _simulate(self, definition: StrategyDefinition, memory: PeakMemoryTracker) -> BacktestResult:
        config = self.shared_config.with_overrides(definition.config_override).validate()
        data = self._resolve_source(definition.source)

        data_mb = 0.0
        if self.policy.track_memory or self.policy.memory_limit_mb is not None:
            frame = data if isinstance(data, pd.DataFrame) else candles_to_frame(data)
            data_mb = estimate_dataframe_memory(frame)
            memory.check_limit(definition.name, data_mb)

        outcome = run_single(config, data)
        if isinstance(outcome, DataError):
            raise outcome

        if self.policy.track_memory:
            memory.record(data_mb + estimate_trades_memory(outcome.trades))
        return outcome

    def _resolve_source(self, source: CandleSource) -> CandleData:
        """Load a strategy's candle data from a path, frame, sequence or factory."""
        if isinstance(source, str | Path):
            return self.loader.load(source)
        if isinstance(source, pd.DataFrame):
            return source
        if callable(source):
            produced = source()
            if isinstance(produced, str | Path) or callable(produced):
                raise DataError("Candle factory must return a DataFrame or candle sequence")
            return produced
        return list(source)

    @staticmethod
    def _check_unique(names: Sequence[str]) -> None:
        duplicates = sorted(n for n, count in Counter(names).items() if count > 1)
        if duplicates:
            raise ConfigurationError("strategy_defs", f"duplicate strategy names {duplicates}")

    @staticmethod
    def _aggregate(names: Sequence[str], state: _BatchState, telemetry: BatchTelemetry) -> BatchResult:
        """Cross-strategy averages and best/worst over successes in submission order."""
        result = BatchResult(
            strategy_names=list(names),
            results=dict(state.results),
            failures={n: state.failures[n] for n in names if n in state.failures},
            telemetry=telemetry,
        )
        completed = list(result.ordered_results())
        if not completed:
            return result

        result.average_win_rate = float(np.mean([r.win_rate for _, r in completed]))
        result.average_profit_factor = float(np.mean([r.profit_factor for _, r in completed]))
        result.average_max_drawdown = float(
            np.mean([r.stats.max_drawdown_percent for _, r in completed])
        )

        best_name, best = completed[0]
        worst_name, worst = completed[0]
        for name, r in completed[1:]:
            if r.net_profit > best.net_profit:
                best_name, best = name, r
            if r.net_profit < worst.net_profit:
                worst_name, worst = name, r
        result.best_strategy = best_name
        result.worst_strategy = worst_name
        return result

    def _emit(self, line: str) -> None:
        if self.sink is not None:
            self.sink.write(line)


@log_operation
def run_batch(
    strategy_defs: Iterable[StrategyDefinition],
    shared_config: BacktestConfig,
    batch_policy: BatchPolicy | None = None,
    sink: OutputSink | None = None,
) -> BatchResult:
    """Run a batch of strategies. Per-strategy failures are recorded, never raised."""
    return BatchOrchestrator(shared_config, batch_policy, sink=sink).run(strategy_defs)
