"""Unit tests for the 3x3 risk matrix."""

import pytest

from easycert.models.risk import RiskLevel
from easycert.risk.matrix import RISK_MATRIX, risk_level

H, M, L = RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW


class TestRiskMatrix:
    """Tests for risk_level()."""

    @pytest.mark.parametrize(
        ("probability", "impact", "expected"),
        [
            (H, H, H),
            (H, M, H),
            (H, L, M),
            (M, H, H),
            (M, M, M),
            (M, L, L),
            (L, H, M),
            (L, M, L),
            (L, L, L),
        ],
    )
    def test_all_nine_cells(
        self, probability: RiskLevel, impact: RiskLevel, expected: RiskLevel
    ) -> None:
        """Test every probability/impact pair maps to the documented level."""
        assert risk_level(probability, impact) is expected

    def test_matrix_is_total(self) -> None:
        """Test the table covers every pair of levels."""
        for probability in RiskLevel:
            assert set(RISK_MATRIX[probability]) == set(RiskLevel)

    def test_medium_row_follows_impact(self) -> None:
        """Test a medium probability takes the impact level."""
        row = RISK_MATRIX[M]
        assert [row[i] for i in (L, M, H)] == [L, M, H]

    def test_extreme_pair_is_medium(self) -> None:
        """Test high probability / low impact is one step above medium / low."""
        assert risk_level(H, L) is M
        assert risk_level(M, L) is L

    def test_matrix_is_symmetric(self) -> None:
        """Test swapping probability and impact never changes the level."""
        for probability in RiskLevel:
            for impact in RiskLevel:
                assert risk_level(probability, impact) is risk_level(impact, probability)
