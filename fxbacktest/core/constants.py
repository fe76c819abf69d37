"""
Core constants and limits.

Defines simulation defaults and resource limits shared by the sizer,
simulator, statistics engine and batch orchestrator.
"""

# Simulation Defaults
DEFAULT_INITIAL_BALANCE = 10000.0
DEFAULT_RISK_PER_TRADE = 1.0  # Percent of balance
DEFAULT_STOP_LOSS_PIPS = 10.0
DEFAULT_TAKE_PROFIT_PIPS = 20.0
DEFAULT_RISK_REWARD_RATIO = 2.0

# Simulator Windows
HORIZON_CANDLES = 100  # Force close after this many candles
COOLDOWN_CANDLES = 5  # Candles to wait after a trade resolves
STRUCTURE_LOOKBACK = 10  # Swing high/low lookback for structure stops
DEFAULT_OFFSET_PCT = 1.0  # Fallback stop/target distance as percent of price
MIN_CANDLES = 3  # Previous, signal and at least one resolution candle

# Sizing
LOT_PRECISION = 2  # Position size decimals
DEFAULT_TP1_PERCENT = 60.0
DEFAULT_TP2_PERCENT = 40.0
SPLIT_TOLERANCE = 1e-9

# Statistics
TRADING_DAYS_PER_YEAR = 252  # One trade is treated as one trading day

# Batch Limits
DEFAULT_BATCH_SIZE = 10
MAX_BATCH_SIZE = 10000
MAX_WORKER_COUNT = 256

# Risk Curve Simulation
DEFAULT_RISK_CURVE_TRADES = 100
DEFAULT_RISK_CURVE_WIN_RATE = 0.55
DEFAULT_MAX_RISK_PER_TRADE = 2.0
KELLY_FRACTION = 0.5  # Half-Kelly
