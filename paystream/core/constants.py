"""
Application-wide default values.

Monetary defaults are decimal strings; they are only converted to integer
micro-units when they are accumulated into agent statistics.
"""

DEFAULT_APP_PORT = 8000

# Judgment oracle
ORACLE_DEFAULT_MODEL = "anthropic/claude-sonnet-4"
ORACLE_TEMPERATURE = 0.1
ORACLE_MAX_TOKENS = 1024
ORACLE_TIMEOUT_SECONDS = 30.0

# Consensus
APPROVAL_THRESHOLD = 0.75
RISK_THRESHOLD = 0.7
FRAUD_THRESHOLD = 0.6
REVIEW_FRACTION = 0.7

# Treasury
TREASURY_BALANCE = 100000.0
TREASURY_DAILY_LIMIT = 50000.0

# x402 client
X402_TIMEOUT_SECONDS = 30.0
X402_DEFAULT_DEPOSIT = "1.00"
X402_DEFAULT_RATE = "0.0001"
X402_DEFAULT_AMOUNT = "0.001"
X402_STREAM_ID_START = 1000

MICRO_UNITS = 1_000_000
