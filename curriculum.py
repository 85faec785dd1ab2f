# Built-in curriculum and rating defaults.
# Any of these can be overridden with a JSON file (see catalog.load_config).

REQUIRED_STREAK = 15

LEVEL_GROUPS = [
    {
        "key": "number-bonds",
        "name": "Number Bonds",
        "levels": [
            {"key": "bonds10", "name": "Bonds to 10", "family": "bonds", "params": {"value": 10}},
            {"key": "bonds20", "name": "Bonds to 20", "family": "bonds", "params": {"value": 20}},
            {
                "key": "mixed10-20",
                "name": "Mixed Bonds 10-20",
                "family": "bonds",
                "params": {"custom_range": [10, 20]},
            },
            {"key": "bonds100", "name": "Bonds to 100", "family": "bonds", "params": {"value": 100}},
            {"key": "bonds90", "name": "Bonds to 90", "family": "bonds", "params": {"value": 90}},
            {"key": "bonds-10", "name": "Bonds to -10", "family": "bonds", "params": {"value": -10}},
            {"key": "bonds-20", "name": "Bonds to -20", "family": "bonds", "params": {"value": -20}},
            {"key": "bonds-50", "name": "Bonds to -50", "family": "bonds", "params": {"value": -50}},
        ],
    },
    {
        "key": "multiplication-division",
        "name": "Multiplication & Division",
        "levels": [
            {
                "key": "group245",
                "name": "2 4 5 10",
                "family": "groupTables",
                "params": {"tables": [2, 4, 5, 10]},
            },
            {
                "key": "group369",
                "name": "3 6 9",
                "family": "groupTables",
                "params": {"tables": [3, 6, 9]},
            },
            {
                "key": "multall",
                "name": "2 to 12",
                "family": "groupTables",
                "params": {"tables": [2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12]},
            },
            {
                "key": "mixed-negative-mult",
                "name": "Negatives",
                "family": "negativeTables",
                "params": {"tables": [2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12]},
            },
            {"key": "powersOf10", "name": "Powers of 10", "family": "powersOf10"},
            {
                "key": "double100",
                "name": "Doubling",
                "family": "doubling",
                "params": {"max_number": 100},
            },
            {"key": "squares", "name": "Perfect Squares", "family": "squares"},
            {"key": "unitConversions", "name": "Unit Conversions", "family": "unitConversions"},
        ],
    },
    {
        "key": "fractions-decimals-percentages",
        "name": "Fractions Decimals Percentages",
        "levels": [
            {"key": "hcf", "name": "HCF", "family": "hcf"},
            {"key": "lcm", "name": "LCM", "family": "lcm"},
            {"key": "equivFractions", "name": "Equivalent Fractions", "family": "equivFractions"},
            {
                "key": "simplifyFractions",
                "name": "Simplifying Fractions",
                "family": "simplifyFractions",
            },
            {
                "key": "fdpConversions",
                "name": "Common FDP Equivalences",
                "family": "fdpConversions",
            },
            {
                "key": "fdpConversionsMultiples",
                "name": "FDP Conversions",
                "family": "fdpConversionsMultiples",
            },
            {
                "key": "fractionOfQuantity",
                "name": "Fraction of a Quantity",
                "family": "fractionOfQuantity",
            },
            {
                "key": "percentageOfQuantity",
                "name": "Percentage of a Quantity",
                "family": "percentageOfQuantity",
            },
        ],
    },
]

# Best first; the last tier catches everything.
RATING_TIERS = [
    {"key": "true-mastery", "name": "Maths Queen", "max_avg": 1.5},
    {"key": "mastery", "name": "Mastery", "max_avg": 2},
    {"key": "expert", "name": "Expert", "max_avg": 3},
    {"key": "developing", "name": "Developing", "max_avg": 4},
    {"key": "beginner", "name": "Beginner", "max_avg": None},
]

MASTERY_TIER = "mastery"

# Higher multiplier = more seconds allowed per question for the same tier.
DIFFICULTY_MULTIPLIERS = {
    # Number Bonds
    "bonds10": 1,
    "bonds20": 1,
    "mixed10-20": 1.0,
    "bonds90": 1.6,
    "bonds100": 1.2,
    "bonds-10": 1.5,
    "bonds-20": 1.5,
    "bonds-50": 1.6,
    # Multiplication & Division
    "group245": 1,
    "group369": 1.0,
    "multall": 1.1,
    "mixed-negative-mult": 1.4,
    "powersOf10": 2,
    "double100": 1.2,
    "squares": 1,
    "unitConversions": 4,  # knowledge + calculation
    # Fractions Decimals Percentages
    "hcf": 1.5,
    "lcm": 2,
    "equivFractions": 1.5,
    "simplifyFractions": 2.5,
    "fdpConversions": 2,  # 2-3 input fields
    "fdpConversionsMultiples": 2.2,
    "fractionOfQuantity": 1.8,
    "percentageOfQuantity": 1.8,
    "default": 1.0,
}
