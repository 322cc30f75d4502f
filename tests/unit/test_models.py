"""Unit tests for EasyCert data models."""

from datetime import UTC, datetime
from typing import Any

import pytest

from easycert.models import (
    Organization,
    RiskLevel,
    RiskScenario,
    SecurityFacts,
    SecurityTemplate,
)
from easycert.models.risk import format_scenario_id, is_valid_scenario_id


def _scenario(**overrides: Any) -> RiskScenario:
    values: dict[str, Any] = {
        "id": "R01",
        "asset": "Servidor",
        "threat": "Malware",
        "vulnerability": "Sin parches",
        "probability": RiskLevel.HIGH,
        "impact": RiskLevel.MEDIUM,
        "risk_level": RiskLevel.HIGH,
        "controls": ["Antimalware"],
    }
    values.update(overrides)
    return RiskScenario(**values)


class TestRiskLevel:
    """Tests for RiskLevel."""

    def test_canonical_values(self) -> None:
        """Test the persisted strings."""
        assert [level.value for level in RiskLevel] == ["Bajo", "Medio", "Alto"]

    def test_ordering_by_severity(self) -> None:
        """Test levels order by severity, not alphabetically."""
        assert RiskLevel.LOW < RiskLevel.MEDIUM < RiskLevel.HIGH
        assert max(RiskLevel) is RiskLevel.HIGH

    def test_rank(self) -> None:
        """Test numeric ranks."""
        assert [level.rank for level in RiskLevel] == [1, 2, 3]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Alto", RiskLevel.HIGH),
            ("Bajo", RiskLevel.LOW),
            (RiskLevel.MEDIUM, RiskLevel.MEDIUM),
            ("alto", None),
            ("High", None),
            (" Alto", None),
            (3, None),
            (None, None),
        ],
    )
    def test_parse(self, value: Any, expected: RiskLevel | None) -> None:
        """Test only exact canonical values parse."""
        assert RiskLevel.parse(value) is expected


class TestScenarioIds:
    """Tests for scenario id helpers."""

    def test_format(self) -> None:
        """Test ids are zero-padded to two digits."""
        assert format_scenario_id(1) == "R01"
        assert format_scenario_id(12) == "R12"
        assert format_scenario_id(100) == "R100"

    def test_validity(self) -> None:
        """Test the id pattern."""
        assert is_valid_scenario_id("R01")
        assert is_valid_scenario_id("R123")
        assert not is_valid_scenario_id("R1")
        assert not is_valid_scenario_id("01")
        assert not is_valid_scenario_id(None)


class TestRiskScenario:
    """Tests for RiskScenario."""

    def test_to_dict_uses_persisted_keys(self) -> None:
        """Test camelCase riskLevel and string levels."""
        data = _scenario().to_dict()
        assert data["riskLevel"] == "Alto"
        assert data["probability"] == "Alto"
        assert data["impact"] == "Medio"
        assert list(data) == [
            "id",
            "asset",
            "threat",
            "vulnerability",
            "probability",
            "impact",
            "riskLevel",
            "controls",
        ]

    def test_from_dict_round_trip(self) -> None:
        """Test from_dict restores the scenario."""
        scenario = _scenario()
        assert RiskScenario.from_dict(scenario.to_dict()) == scenario

    def test_from_dict_is_strict(self) -> None:
        """Test trusted data with invalid levels is rejected."""
        data = _scenario().to_dict()
        data["impact"] = "High"
        with pytest.raises(ValueError, match="Invalid impact"):
            RiskScenario.from_dict(data)

    def test_invalid_id_rejected(self) -> None:
        """Test malformed ids raise."""
        with pytest.raises(ValueError, match="Invalid scenario id"):
            _scenario(id="1")

    def test_blank_label_rejected(self) -> None:
        """Test blank labels raise."""
        with pytest.raises(ValueError, match="asset cannot be empty"):
            _scenario(asset="  ")

    def test_empty_controls_rejected(self) -> None:
        """Test a scenario needs at least one control."""
        with pytest.raises(ValueError, match="controls cannot be empty"):
            _scenario(controls=[])


class TestSecurityFacts:
    """Tests for SecurityFacts."""

    def test_sufficiency(self) -> None:
        """Test the guard needs assets, threats and vulnerabilities."""
        assert SecurityFacts(["A"], ["T"], ["V"]).is_sufficient
        assert not SecurityFacts(["A"], ["T"], [], ["M"]).is_sufficient
        assert not SecurityFacts().is_sufficient

    def test_has_any_risk_inputs(self) -> None:
        """Test measures alone are not risk inputs."""
        assert SecurityFacts(threats=["T"]).has_any_risk_inputs
        assert not SecurityFacts(existing_measures=["M"]).has_any_risk_inputs

    def test_normalized_none_container(self) -> None:
        """Test a None container normalizes to an empty list."""
        facts = SecurityFacts(
            information_assets=["DB"], threats=None, vulnerabilities=["x"]  # type: ignore[arg-type]
        )
        assert facts.normalized() == SecurityFacts(["DB"], [], ["x"])

    def test_normalized_string_container(self) -> None:
        """Test a bare string is one label, not its characters."""
        facts = SecurityFacts(information_assets="Base de datos")  # type: ignore[arg-type]
        assert facts.normalized().information_assets == ["Base de datos"]

    def test_normalized_drops_blanks(self) -> None:
        """Test blank and non-string labels are removed."""
        facts = SecurityFacts(threats=[" Malware ", "", "  ", 3])  # type: ignore[list-item]
        assert facts.normalized().threats == ["Malware"]

    def test_to_dict_camel_case(self) -> None:
        """Test persisted keys."""
        assert SecurityFacts(["A"], ["T"], ["V"], ["M"]).to_dict() == {
            "informationAssets": ["A"],
            "threats": ["T"],
            "vulnerabilities": ["V"],
            "existingMeasures": ["M"],
        }

    def test_from_dict_accepts_both_key_styles(self) -> None:
        """Test camelCase and snake_case keys both load."""
        camel = SecurityFacts.from_dict({"informationAssets": ["A"], "existingMeasures": ["M"]})
        snake = SecurityFacts.from_dict({"information_assets": ["A"], "existing_measures": ["M"]})
        assert camel == snake
        assert camel.information_assets == ["A"]

    def test_from_dict_cleans_labels(self) -> None:
        """Test null containers, blanks and non-strings are dropped."""
        facts = SecurityFacts.from_dict(
            {
                "informationAssets": None,
                "threats": [" Malware ", "", 3, None],
                "vulnerabilities": "V",
            }
        )
        assert facts.information_assets == []
        assert facts.threats == ["Malware"]
        assert facts.vulnerabilities == ["V"]

    def test_from_dict_none(self) -> None:
        """Test None gives empty facts."""
        assert SecurityFacts.from_dict(None) == SecurityFacts()

    def test_copy_is_independent(self) -> None:
        """Test copies do not share lists."""
        facts = SecurityFacts(["A"], ["T"], ["V"])
        copied = facts.copy()
        copied.threats.append("X")
        assert facts.threats == ["T"]


class TestSecurityTemplate:
    """Tests for SecurityTemplate."""

    def test_from_dict(self) -> None:
        """Test templates load from their document form."""
        template = SecurityTemplate.from_dict(
            {
                "id": "retail",
                "name": "Comercio",
                "industry": "Retail",
                "template": {"informationAssets": ["TPV"]},
            }
        )
        assert template.facts.information_assets == ["TPV"]
        assert template.is_default is False

    def test_to_dict_round_trip(self) -> None:
        """Test to_dict output loads back."""
        template = SecurityTemplate(
            id="x", name="X", industry="General", facts=SecurityFacts(["A"]), is_default=True
        )
        assert SecurityTemplate.from_dict(template.to_dict()) == template

    def test_empty_id_rejected(self) -> None:
        """Test templates need an id."""
        with pytest.raises(ValueError, match="id cannot be empty"):
            SecurityTemplate(id=" ", name="X", industry="General")

    def test_empty_name_rejected(self) -> None:
        """Test templates need a name."""
        with pytest.raises(ValueError, match="name cannot be empty"):
            SecurityTemplate(id="x", name="", industry="General")


class TestOrganization:
    """Tests for Organization."""

    def test_defaults(self) -> None:
        """Test a new organization has no assessment."""
        org = Organization(name="  Acme  ")
        assert org.name == "Acme"
        assert org.id
        assert org.has_risk_assessment is False
        assert org.last_inference_at is None
        assert org.created_at.tzinfo is UTC

    def test_empty_name_rejected(self) -> None:
        """Test organizations need a name."""
        with pytest.raises(ValueError, match="name cannot be empty"):
            Organization(name="")

    def test_to_dict_from_dict_round_trip(self) -> None:
        """Test the persisted form restores every field."""
        org = Organization(
            name="Acme",
            industry="Retail",
            size=12,
            security_facts=SecurityFacts(["A"], ["T"], ["V"]),
            risk_scenarios=[_scenario()],
            last_inference_at=datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC),
        )
        data = org.to_dict()

        assert data["securityInfo"]["informationAssets"] == ["A"]
        assert data["riskScenarios"][0]["riskLevel"] == "Alto"
        assert data["lastRiskInference"] == "2026-01-02T03:04:05+00:00"
        assert Organization.from_dict(data) == org
