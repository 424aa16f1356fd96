# Reference tables for the ceramic binder-jet process. Source: production
# constants for the 400/600 machines and the current supplier price sheets.

from .errors import InvalidInput
from .schemas import Dimensions, MachineProfile, PriceTable

# Material consumption per cm³ of part volume
POWDER_DENSITY = 0.002   # kg/cm³
BINDER_RATIO = 0.27      # ml/cm³
SILICA_DENSITY = 0.55    # g/cm³

# Glaze is affine in volume: g = 0.1615 * volume + 31.76
GLAZE_FACTOR = 0.1615
GLAZE_BASE = 31.76

# Slicing / packing defaults
LAYER_HEIGHT_MM = 0.1
OBJECT_SPACING_MM = 15.0

MACHINES = {
    "400": MachineProfile(
        name="Printer 400",
        bed_dimensions=Dimensions(width=390, depth=290, height=200),
        layer_time_seconds=45,  # per 0.1mm layer
        wall_margin_mm=10,
    ),
    "600": MachineProfile(
        name="Printer 600",
        bed_dimensions=Dimensions(width=595, depth=600, height=250),
        layer_time_seconds=35,
        wall_margin_mm=10,
    ),
}

# Unit prices: powder per kg, binder per ml, silica and glaze per g
PRICE_TABLES = {
    "USD": PriceTable(currency="USD", powder_per_kg=100.00, binder_per_ml=0.09,
                      silica_per_g=0.072, glaze_per_g=0.01),
    "EUR": PriceTable(currency="EUR", powder_per_kg=92.86, binder_per_ml=0.085,
                      silica_per_g=0.069, glaze_per_g=0.0098),
    "JPY": PriceTable(currency="JPY", powder_per_kg=14285.71, binder_per_ml=12.50,
                      silica_per_g=11.00, glaze_per_g=1.56),
    "SGD": PriceTable(currency="SGD", powder_per_kg=135.00, binder_per_ml=0.12,
                      silica_per_g=0.10, glaze_per_g=0.0137),
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "JPY": "¥",
    "SGD": "S$",
}


def get_machine(key: str) -> MachineProfile:
    """Look up a machine profile by key ("400", "600")."""
    if key not in MACHINES:
        raise InvalidInput(
            f"Unknown machine: {key}. Available: {list(MACHINES.keys())}"
        )
    return MACHINES[key]


def lookup_price_table(tables: dict, currency: str) -> PriceTable:
    """Find a currency code (case-insensitive) in a code → PriceTable dict."""
    code = str(currency or "").upper()
    if code not in tables:
        raise InvalidInput(
            f"Unknown currency: {currency}. Available: {list(tables.keys())}"
        )
    return tables[code]


def get_price_table(currency: str) -> PriceTable:
    """Look up one of the default price tables."""
    return lookup_price_table(PRICE_TABLES, currency)


def currency_symbol(currency: str) -> str:
    return CURRENCY_SYMBOLS.get(str(currency or "").upper(), "$")
