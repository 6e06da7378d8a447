# config.py — Central configuration for the Goal Funding Engine

# ─────────────────────────────────────────────
# DEFAULT SETTINGS (merged into every plan document)
# ─────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "currency":           "INR",
    "fund_house":         "icici",
    "equity_allocation":  60,     # % equity in the long-term mix
    "equity_return":      10,     # % / year
    "debt_return":        5,
    "arbitrage_return":   6,
    "epf_return":         8,
    "nps_return":         9,
    "epf_nps_step_up":    5,      # % / year, payroll contributions
    "investment_step_up": 5,      # % / year, goal SIPs
}

# ─────────────────────────────────────────────
# HORIZON BUCKETS
# ─────────────────────────────────────────────
SHORT_TERM_THRESHOLD = 5          # years; below this a goal is short-term
SHORT = "short"
LONG  = "long"

BUCKET_DISPLAY = {SHORT: "Short Term", LONG: "Long Term"}

# Long-term equity sleeve: 70% Nifty 50, 30% Nifty Next 50
EQUITY_SPLIT = {"nifty50": 70, "nifty_next50": 30}

# Recommended scheme per split line, by fund house
FUND_HOUSES = {
    "icici": {
        "name":         "ICICI Prudential",
        "arbitrage":    "ICICI Prudential Equity Arbitrage Fund Direct Growth",
        "nifty50":      "ICICI Prudential Nifty 50 Index Fund Direct Growth",
        "nifty_next50": "ICICI Prudential Nifty Next 50 Index Fund Direct Growth",
        "money_market": "ICICI Prudential Money Market Fund Direct Growth",
    },
    "hdfc": {
        "name":         "HDFC",
        "arbitrage":    "HDFC Arbitrage Fund Direct Growth",
        "nifty50":      "HDFC Nifty 50 Index Fund Direct Growth",
        "nifty_next50": "HDFC Nifty Next 50 Index Fund Direct Growth",
        "money_market": "HDFC Money Market Fund Direct Growth",
    },
}
GENERIC_FUNDS = {
    "arbitrage":    "Equity Arbitrage Fund",
    "nifty50":      "Nifty 50 Index Fund",
    "nifty_next50": "Nifty Next 50 Index Fund",
    "money_market": "Money Market Fund",
}

# ─────────────────────────────────────────────
# RETIREMENT (EPF / NPS)
# ─────────────────────────────────────────────
EPF_RETURN         = 8
NPS_RETURN         = 9
EPF_NPS_STEP_UP    = 7            # fixed % / year when a goal opts in
EPF_CATEGORIES     = ("EPF Corpus", "EPF")
NPS_CATEGORIES     = ("NPS Corpus", "NPS")

# ─────────────────────────────────────────────
# NUMERICS
# ─────────────────────────────────────────────
DAYS_PER_YEAR         = 365.25
SOLVER_MAX_ITERATIONS = 100
SOLVER_TOLERANCE      = 0.01      # money units on future value
SOLVER_NUDGE          = 0.01
ALLOCATION_EPSILON    = 0.01      # remaining capacity / value treated as zero

# ─────────────────────────────────────────────
# HOLDING TAXONOMY
# ─────────────────────────────────────────────
SHORT_ONLY   = "SHORT_ONLY"
LONG_ONLY    = "LONG_ONLY"
BOTH         = "BOTH"
NOT_LINKABLE = "NOT_LINKABLE"

ASSET_CATEGORY_GROUPS = [
    ("Retirement",                ["EPF Corpus", "PPF Corpus", "NPS Corpus"]),
    ("Mutual Funds & Securities", ["Equity Mutual Funds", "Debt/Arbitrage Mutual Funds",
                                   "Stocks", "Bonds", "ULIPs", "Crypto"]),
    ("Gold",                      ["Gold ETFs/SGBs", "Physical Gold"]),
    ("Real Estate",               ["House", "Land"]),
    ("Savings Instruments",       ["Savings Bank", "FDs & RDs"]),
    ("Insurance",                 ["LIC/Insurance Policy"]),
    ("Employment Benefits",       ["ESOPs", "Gratuity"]),
    ("Other",                     ["Other"]),
]

ASSET_CATEGORIES = [c for _, cats in ASSET_CATEGORY_GROUPS for c in cats]

# Anything not listed here (including legacy names) is NOT_LINKABLE
CATEGORY_ELIGIBILITY = {
    "Savings Bank":                SHORT_ONLY,
    "FDs & RDs":                   SHORT_ONLY,
    "Equity Mutual Funds":         LONG_ONLY,
    "Stocks":                      LONG_ONLY,
    "Gold ETFs/SGBs":              LONG_ONLY,
    "Debt/Arbitrage Mutual Funds": BOTH,
}

# ─────────────────────────────────────────────
# STORAGE
# ─────────────────────────────────────────────
DATA_DIR  = "data/"
PLAN_FILE = "plan.json"
DEPRECATED_GOAL_FIELDS = [
    "investments", "initial_lumpsum", "equity_percent", "debt_percent", "annual_step_up",
]
