"""Fixed 3x3 risk matrix.

Maps (probability, impact) to an overall risk level. The lattice is kept as
a literal table so it can be inspected and tested as data.
"""

from easycert.models.risk import RiskLevel

_H, _M, _L = RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW

# RISK_MATRIX[probability][impact]
RISK_MATRIX: dict[RiskLevel, dict[RiskLevel, RiskLevel]] = {
    _H: {_H: _H, _M: _H, _L: _M},
    _M: {_H: _H, _M: _M, _L: _L},
    _L: {_H: _M, _M: _L, _L: _L},
}


def risk_level(probability: RiskLevel, impact: RiskLevel) -> RiskLevel:
    """Return the risk level for a probability/impact pair.

    Total over RiskLevel x RiskLevel; callers coerce raw values first.
    """
    return RISK_MATRIX[probability][impact]
