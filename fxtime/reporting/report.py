"""
Report generation utilities.

This module turns decoded bar data into human‑readable artefacts: a
CSV file of the bars, a JSON summary of the history and a PNG chart of
the close price.
"""

from __future__ import annotations

import os
import json
import logging
from typing import Any, Dict, List, Optional, Sequence
import pandas as pd
import matplotlib

# Use non‑interactive backend for environments without display
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from ..data.bar_data import bars_to_frame
from ..data.instruments import Instrument
from ..data.models import Bar
from ..utils.timeutils import format_gmt
from .stats import sharpe_ratio, sortino_ratio

logger = logging.getLogger(__name__)


def compute_bar_summary(bars: Sequence[Bar]) -> Dict[str, Any]:
    """Compute summary statistics of a bar history.

    Returns
    -------
    dict
        Bar count, first and last FXT time, range high and low in
        points, total ticks and the Sharpe and Sortino ratios of the
        close-to-close returns.
    """
    if not bars:
        return {
            'bars': 0,
            'first_time': None,
            'last_time': None,
            'high': None,
            'low': None,
            'ticks': 0,
            'sharpe': 0.0,
            'sortino': 0.0,
        }

    returns: List[float] = [
        (cur.close - prev.close) / prev.close
        for prev, cur in zip(bars, bars[1:])
        if prev.close
    ]
    return {
        'bars': len(bars),
        'first_time': format_gmt(bars[0].time),
        'last_time': format_gmt(bars[-1].time),
        'high': max(b.high for b in bars),
        'low': min(b.low for b in bars),
        'ticks': sum(b.ticks for b in bars),
        'sharpe': sharpe_ratio(returns) if returns else 0.0,
        'sortino': sortino_ratio(returns) if returns else 0.0,
    }


def generate_bar_report(
    bars: Sequence[Bar],
    out_dir: str = "results",
    instrument: Optional[Instrument] = None,
) -> List[str]:
    """Generate report files for a bar history.

    Creates the output directory if it does not exist and writes the
    following files:

    - `bars.csv` – the bars indexed by FXT time
    - `summary.json` – history summary
    - `close.png` – line chart of the close price

    Returns the paths written.
    """
    os.makedirs(out_dir, exist_ok=True)
    df = bars_to_frame(bars, instrument)

    bars_path = os.path.join(out_dir, 'bars.csv')
    df.to_csv(bars_path)

    summary = compute_bar_summary(bars)
    if instrument is not None:
        summary['symbol'] = instrument.name
    summary_path = os.path.join(out_dir, 'summary.json')
    with open(summary_path, 'w', encoding='utf-8') as fh:
        json.dump(summary, fh, indent=2, ensure_ascii=False)

    fig, ax = plt.subplots(figsize=(10, 4))
    if not df.empty:
        ax.plot(pd.to_datetime(df.index), df['close'], linewidth=1.0)
        ax.set_title(f"{instrument.name} Close" if instrument else 'Close')
        ax.set_xlabel('Time (FXT)')
        ax.set_ylabel('Price' if instrument else 'Points')
        fig.autofmt_xdate()
    fig.tight_layout()
    plot_path = os.path.join(out_dir, 'close.png')
    fig.savefig(plot_path)
    plt.close(fig)

    paths = [bars_path, summary_path, plot_path]
    for path in paths:
        logger.info("Wrote %s", path)
    return paths
