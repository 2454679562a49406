"""
Built-in Scenario Content

Eight bond journal entries, authored with the same camelCase keys a
JSON catalog file uses. Present values use the effective interest
method; factors are rounded to six places, amounts to cents.
"""

SCENARIOS = [
    {
        "id": 1,
        "faceValue": 100000,
        "issuePrice": 100000,
        "statedRate": 0.06,
        "effectiveRate": 0.06,
        "lifeYears": 10,
        "paymentFrequency": "Semiannually",
        "bondType": "face",
        "task": (
            "The bonds were issued at face value on January 1. "
            "Record the first interest payment on June 30."
        ),
        "solution": [
            {"account": "Interest Expense", "debit": 3000},
            {"account": "Cash", "credit": 3000},
        ],
        "keyCalculations": {
            "overview": (
                "Bonds issued at face value have no premium or discount to "
                "amortize, so interest expense equals the cash paid."
            ),
            "cashInterest": "$100,000 × 6% × 6/12 = $3,000.00",
        },
        "successMessage": (
            "Great job! With no premium or discount, interest expense "
            "equals the cash interest paid."
        ),
    },
    {
        "id": 2,
        "faceValue": 200000,
        "issuePrice": 200000,
        "statedRate": 0.05,
        "effectiveRate": 0.05,
        "lifeYears": 5,
        "paymentFrequency": "Annually",
        "bondType": "face",
        "task": "Record the issuance of the bonds at face value on January 1.",
        "solution": [
            {"account": "Cash", "debit": 200000},
            {"account": "Bonds Payable", "credit": 200000},
        ],
        "keyCalculations": {
            "overview": (
                "When the stated rate equals the market rate the bonds sell "
                "at face value."
            ),
            "cashReceived": "$200,000.00",
        },
        "successMessage": "Great job! Bonds Payable is always carried at face value.",
    },
    {
        "id": 3,
        "faceValue": 150000,
        "issuePrice": 138417.40,
        "statedRate": 0.08,
        "effectiveRate": 0.10,
        "lifeYears": 5,
        "paymentFrequency": "Semiannually",
        "bondType": "discount",
        "task": (
            "The bonds were issued at a discount on January 1. Using the "
            "effective interest method, record the first interest payment "
            "on June 30."
        ),
        "solution": [
            {"account": "Interest Expense", "debit": 6920.87},
            {"account": "Discount on Bonds Payable", "credit": 920.87},
            {"account": "Cash", "credit": 6000},
        ],
        "keyCalculations": {
            "overview": (
                "Interest expense is the carrying value times the market rate; "
                "the difference from the cash paid amortizes the discount."
            ),
            "cashInterest": "$150,000 × 8% × 6/12 = $6,000.00",
            "interestExpense": "$138,417.40 × 10% × 6/12 = $6,920.87",
            "discountAmortization": "$6,920.87 − $6,000.00 = $920.87",
        },
        "successMessage": (
            "Nice! Amortizing the discount pushes interest expense above "
            "the cash paid."
        ),
    },
    {
        "id": 4,
        "faceValue": 300000,
        "issuePrice": 324332.69,
        "statedRate": 0.10,
        "effectiveRate": 0.08,
        "lifeYears": 5,
        "paymentFrequency": "Semiannually",
        "bondType": "premium",
        "task": "Record the issuance of the bonds at a premium on January 1.",
        "solution": [
            {"account": "Cash", "debit": 324332.69},
            {"account": "Bonds Payable", "credit": 300000},
            {"account": "Premium on Bonds Payable", "credit": 24332.69},
        ],
        "keyCalculations": {
            "overview": (
                "The issue price is the present value of the principal plus "
                "the present value of the interest payments at 4% for 10 periods."
            ),
            "presentValueOfPrincipal": "$300,000 × 0.675564 = $202,669.25",
            "presentValueOfInterest": "$15,000 × 8.110896 = $121,663.44",
            "issuePrice": "$202,669.25 + $121,663.44 = $324,332.69",
            "premium": "$324,332.69 − $300,000.00 = $24,332.69",
        },
        "successMessage": (
            "Nice! The premium is recorded separately from Bonds Payable."
        ),
    },
    {
        "id": 5,
        "faceValue": 300000,
        "issuePrice": 324332.69,
        "statedRate": 0.10,
        "effectiveRate": 0.08,
        "lifeYears": 5,
        "paymentFrequency": "Semiannually",
        "bondType": "premium",
        "task": (
            "Using the effective interest method, record the first interest "
            "payment on June 30 for the bonds issued at a premium."
        ),
        "solution": [
            {"account": "Interest Expense", "debit": 12973.31},
            {"account": "Premium on Bonds Payable", "debit": 2026.69},
            {"account": "Cash", "credit": 15000},
        ],
        "keyCalculations": {
            "overview": (
                "Amortizing a premium reduces interest expense below the "
                "cash paid."
            ),
            "cashInterest": "$300,000 × 10% × 6/12 = $15,000.00",
            "interestExpense": "$324,332.69 × 8% × 6/12 = $12,973.31",
            "premiumAmortization": "$15,000.00 − $12,973.31 = $2,026.69",
        },
        "successMessage": "Well done! Premium amortization is a debit to the premium account.",
    },
    {
        "id": 6,
        "faceValue": 500000,
        "issuePrice": 486878.42,
        "statedRate": 0.06,
        "effectiveRate": 0.07,
        "lifeYears": 3,
        "paymentFrequency": "Annually",
        "bondType": "discount",
        "task": "Record the issuance of the bonds at a discount on January 1.",
        "solution": [
            {"account": "Cash", "debit": 486878.42},
            {"account": "Discount on Bonds Payable", "debit": 13121.58},
            {"account": "Bonds Payable", "credit": 500000},
        ],
        "keyCalculations": {
            "overview": (
                "The issue price is the present value of the principal plus "
                "the present value of the interest payments at 7% for 3 periods."
            ),
            "presentValueOfPrincipal": "$500,000 × 0.816298 = $408,148.94",
            "presentValueOfInterest": "$30,000 × 2.624316 = $78,729.48",
            "issuePrice": "$408,148.94 + $78,729.48 = $486,878.42",
            "discount": "$500,000.00 − $486,878.42 = $13,121.58",
        },
        "successMessage": "Well done! The discount is a contra-liability with a debit balance.",
    },
    {
        "id": 7,
        "faceValue": 500000,
        "issuePrice": 486878.42,
        "statedRate": 0.06,
        "effectiveRate": 0.07,
        "lifeYears": 3,
        "paymentFrequency": "Annually",
        "bondType": "discount",
        "task": (
            "Using the effective interest method, record the first annual "
            "interest payment on December 31 for the bonds issued at a discount."
        ),
        "solution": [
            {"account": "Interest Expense", "debit": 34081.49},
            {"account": "Discount on Bonds Payable", "credit": 4081.49},
            {"account": "Cash", "credit": 30000},
        ],
        "keyCalculations": {
            "cashInterest": "$500,000 × 6% = $30,000.00",
            "interestExpense": "$486,878.42 × 7% = $34,081.49",
            "discountAmortization": "$34,081.49 − $30,000.00 = $4,081.49",
            "newCarryingValue": "$486,878.42 + $4,081.49 = $490,959.91",
        },
        "successMessage": "Excellent! The carrying value moves toward face value each period.",
    },
    {
        "id": 8,
        "faceValue": 250000,
        "issuePrice": 250000,
        "statedRate": 0.07,
        "effectiveRate": 0.07,
        "lifeYears": 10,
        "paymentFrequency": "Annually",
        "bondType": "face",
        "task": (
            "The final interest payment has already been recorded. "
            "Record the retirement of the bonds at maturity."
        ),
        "solution": [
            {"account": "Bonds Payable", "debit": 250000},
            {"account": "Cash", "credit": 250000},
        ],
        "keyCalculations": {
            "overview": (
                "At maturity any premium or discount is fully amortized, so "
                "the carrying value equals face value."
            ),
            "cashPaid": "$250,000.00",
        },
        "successMessage": "Excellent! At maturity the bonds are retired at face value.",
    },
]
