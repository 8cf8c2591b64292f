# engine/state.py
from dataclasses import dataclass
from typing import Dict, List

from ..data_model import YearReturn, returns_from_mapping
from ..market.data import get_all_years
from .storage import load_custom_returns, save_custom_returns


@dataclass
class SimulationState:
    """Per-regime state threaded through the yearly loop."""

    wealth: float
    carry_forward_loss: float = 0.0


class CustomReturnsState:
    def __init__(self, storage_path: str = "user_data/custom_returns.json"):
        self.storage_path = storage_path
        self.returns: Dict[int, float] = load_custom_returns(storage_path)

    def get_all(self) -> Dict[int, float]:
        return dict(self.returns)

    def years(self) -> List[int]:
        return sorted(self.returns)

    def has_data(self) -> bool:
        return bool(self.returns)

    def set_year(self, year: int, return_pct: float | None) -> None:
        if return_pct is None:
            self.returns.pop(int(year), None)
        else:
            self.returns[int(year)] = float(return_pct)
        self._save()

    def remove_year(self, year: int) -> None:
        if int(year) in self.returns:
            del self.returns[int(year)]
            self._save()

    def replace(self, returns: Dict[int, float]) -> None:
        self.returns = {int(year): float(pct) for year, pct in returns.items()}
        self._save()

    def clear(self) -> None:
        self.returns = {}
        self._save()

    def next_year(self) -> int:
        """The year after the last one known to either the market data or the custom map."""
        years = sorted(set(get_all_years()) | set(self.returns))
        return years[-1] + 1 if years else 0

    def add_year(self, return_pct: float = 0.0) -> int:
        year = self.next_year()
        self.set_year(year, return_pct)
        return year

    def as_series(self, start_year: int | None = None, end_year: int | None = None) -> List[YearReturn]:
        return returns_from_mapping(self.returns, start_year, end_year)

    def _save(self) -> None:
        save_custom_returns(self.storage_path, self.returns)
