"""Matplotlib-based chart helpers for YieldRouter."""

from __future__ import annotations

import pandas as pd


class Visualizer:
    """Static helpers that turn comparison and dashboard data into charts."""

    @staticmethod
    def _plt():
        # imported on first chart so headless polling never loads a backend
        try:
            from matplotlib import pyplot
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError("charts need matplotlib; reinstall yield-router with its dependencies") from exc
        return pyplot

    @staticmethod
    def bar_apy(
        df: pd.DataFrame,
        title: str = "Protocol APY Comparison",
        x_col: str = "name",
        y_col: str = "apy",
        *,
        save_path: str | None = None,
        show: bool = True,
    ) -> None:
        """Bar chart of a comparison series; ``y_col`` is already in percent."""

        if df.empty:
            return
        plt = Visualizer._plt()
        plt.figure(figsize=(10, 6))
        plt.bar(df[x_col], df[y_col])
        plt.title(title)
        plt.ylabel("APY (%)")
        plt.xticks(rotation=45, ha="right")
        plt.tight_layout()
        if save_path:
            plt.savefig(save_path, bbox_inches="tight")
        if show:
            plt.show()

    @staticmethod
    def history_lines(
        df: pd.DataFrame,
        title: str = "APY history",
        *,
        save_path: str | None = None,
        show: bool = True,
    ) -> None:
        """One line per column of a timestamp-indexed history frame."""

        if df.empty:
            return
        plt = Visualizer._plt()
        plt.figure(figsize=(10, 6))
        for col in df.columns:
            plt.plot(df.index, df[col], label=str(col))
        plt.title(title)
        plt.xlabel("Time")
        plt.ylabel("APY (%)")
        plt.legend()
        plt.tight_layout()
        if save_path:
            plt.savefig(save_path, bbox_inches="tight")
        if show:
            plt.show()


__all__ = ["Visualizer"]
