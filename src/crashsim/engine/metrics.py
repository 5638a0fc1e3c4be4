"""Path metrics. Always computed on full-resolution series, never downsampled ones."""

import logging

import numpy as np

logger = logging.getLogger(__name__)


def realized_volatility(log_prices: np.ndarray, periods_per_year: int) -> float:
    """Annualised sample standard deviation of log returns.

    A series with a single return has no sample deviation and reports 0.
    """
    log_returns = np.diff(np.asarray(log_prices, dtype=float))
    if len(log_returns) < 2:
        logger.debug("Realized volatility: %d return(s), reporting 0", len(log_returns))
        return 0.0
    return float(np.std(log_returns, ddof=1) * np.sqrt(periods_per_year))


def effective_trends(prices: np.ndarray, periods_per_year: int) -> np.ndarray:
    """Annualised compound return per row: (last/first)^(1/years) - 1.

    Short, high-frequency series can overflow to inf; that is left for the
    caller to render.
    """
    prices = np.atleast_2d(np.asarray(prices, dtype=float))
    years = prices.shape[1] / periods_per_year
    growth = prices[:, -1] / prices[:, 0]
    with np.errstate(over="ignore"):
        return growth ** (1.0 / years) - 1.0
