"""Builders for test scenario content."""


def raw_scenario(scenario_id: int, **overrides) -> dict:
    """A minimal balanced scenario in catalog (camelCase) form."""
    scenario = {
        "id": scenario_id,
        "faceValue": 10000,
        "issuePrice": 10000,
        "statedRate": 0.05,
        "effectiveRate": 0.05,
        "lifeYears": 5,
        "paymentFrequency": "Annually",
        "bondType": "face",
        "task": f"Record the issuance for scenario {scenario_id}.",
        "solution": [
            {"account": "Cash", "debit": 10000},
            {"account": "Bonds Payable", "credit": 10000},
        ],
    }
    scenario.update(overrides)
    return scenario
