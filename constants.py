# constants.py

MONTHS_PER_YEAR: int = 12
SMALL_EPSILON: float = 1e-6

LAKH: float = 100_000.0
CRORE: float = 10_000_000.0
CURRENCY_SYMBOL: str = "₹"

DEFAULT_TAX_BRACKET: float = 0.30
COARSE_TIMELINE_STEP: int = 5

DISCLAIMER: str = (
    "Projections are estimates based on assumed returns. Not guaranteed. Verify with PFRDA."
)
TAX_NOTE: str = "Consult a tax advisor for precise calculations"

DEFAULT_LOG_FORMAT: str = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# Plotting constants
CORPUS_COLOR = '#1f77b4'
CONTRIBUTED_COLOR = '#ff7f0e'
PENSION_COLOR = '#2ca02c'
