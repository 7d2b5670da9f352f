"""
Shipping Reference Data
Methods, rate tiers and tax rates loaded by the seed command.
"""

SHIPPING_METHODS = [
    {
        "key": "standard",
        "name": "Standard Shipping",
        "description": "Standard delivery service",
        "estimated_days": "5-7 business days",
        "is_active": True,
        "default_cost": "10.00"
    },
    {
        "key": "express",
        "name": "Express Shipping",
        "description": "Faster delivery service",
        "estimated_days": "2-3 business days",
        "is_active": True,
        "default_cost": "20.00"
    },
    {
        "key": "next_day",
        "name": "Next Day Delivery",
        "description": "Get it tomorrow!",
        "estimated_days": "1 business day",
        "is_active": True,
        "default_cost": "35.00"
    }
]

# country '' is the catch-all "rest of world" row, state None covers every state
SHIPPING_RATES = [
    {"method": "standard", "country": "US", "state": None, "min_weight": "0", "max_weight": "5", "cost": "8.95"},
    {"method": "standard", "country": "US", "state": None, "min_weight": "5.01", "max_weight": "10", "cost": "12.95"},
    {"method": "standard", "country": "US", "state": "CA", "min_weight": "0", "max_weight": "10", "cost": "14.95"},
    {"method": "express", "country": "US", "state": None, "min_weight": "0", "max_weight": "5", "cost": "18.95"},
    {"method": "express", "country": "US", "state": None, "min_weight": "5.01", "max_weight": "10", "cost": "24.95"},
    {"method": "next_day", "country": "US", "state": None, "min_weight": "0", "max_weight": "5", "cost": "29.95"},
    {"method": "next_day", "country": "US", "state": None, "min_weight": "5.01", "max_weight": "10", "cost": "39.95"},
    {"method": "standard", "country": "CA", "state": None, "min_weight": "0", "max_weight": "10", "cost": "15.95"},
    {"method": "express", "country": "CA", "state": None, "min_weight": "0", "max_weight": "10", "cost": "28.95"},
    {"method": "standard", "country": "", "state": None, "min_weight": "0", "max_weight": "10", "cost": "24.95"},
]

TAX_RATES = [
    {"country": "US", "state": None, "rate": "0.0", "description": "No federal sales tax"},
    {"country": "US", "state": "CA", "rate": "0.0725", "description": "California state sales tax"},
    {"country": "US", "state": "NY", "rate": "0.045", "description": "New York state sales tax"},
    {"country": "US", "state": "TX", "rate": "0.0625", "description": "Texas state sales tax"},
    {"country": "CA", "state": None, "rate": "0.05", "description": "Canada GST"},
    {"country": "GB", "state": None, "rate": "0.2", "description": "UK VAT"},
    {"country": "EG", "state": None, "rate": "0.14", "description": "Egypt VAT"},
    {"country": "", "state": None, "rate": "0.0", "description": "Default international tax rate"},
]
