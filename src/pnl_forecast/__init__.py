"""PnL forecast trajectory engine.

Reconstructs a trading model's realized cumulative PnL curve from its
closed-trade ledger and extends it forward with a statistically derived
forecast (central estimate plus percentile bands).
"""

__version__ = "0.1.0"
