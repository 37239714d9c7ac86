# Fixed point scale factors
PRECISION_DECIMALS = 18
PRECISION = 10**PRECISION_DECIMALS  # stable unit and usd values
FEED_DECIMALS = 8  # Price feeds answer with 8 decimals
ADDITIONAL_FEED_PRECISION = 10 ** (PRECISION_DECIMALS - FEED_DECIMALS)  # 1e10
U256_MAX = 2**256 - 1

# Risk constants
LIQUIDATION_THRESHOLD = 50  # 200% overcollateralized
LIQUIDATION_PRECISION = 100
LIQUIDATION_BONUS = 10  # 10% bonus to liquidators
MIN_HEALTH_FACTOR = PRECISION  # 1.0

# Oracle constants
STALENESS_WINDOW = 3 * 60 * 60  # 3 hours in seconds

# Reserved address
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
