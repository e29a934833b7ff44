"""
Analysis Engine Module

Calculates fund performance and risk metrics from daily return series:
- Monthly compounded returns
- Value-at-Risk (daily, monthly)
- Sharpe and Sortino ratios
- Correlation to a benchmark
- Since-inception and annualized performance
"""

__version__ = "0.1.0"
