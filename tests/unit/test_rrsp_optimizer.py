import pytest

from taxplanner.data import UnknownProvinceError, get_tax_data
from taxplanner.rrsp.optimizer import (
    NO_BENEFIT_MESSAGE,
    RRSPScenario,
    build_recommendation,
    max_contribution_for,
    optimize,
    sample_contributions,
    savings_for_contribution,
    select_optimal,
    sweep_step,
)
from tests.fixtures.tax_tables import make_tax_data


def _scenario(contribution: float, savings: float, marginal: float = 0.36) -> RRSPScenario:
    return RRSPScenario(
        contribution=contribution,
        adjusted_income=0.0,
        federal_tax=0.0,
        provincial_tax=0.0,
        total_tax=0.0,
        tax_savings=savings,
        marginal_rate=marginal,
        effective_rate=0.0,
    )


def test_ceiling_is_room_or_ninety_percent_of_income():
    assert max_contribution_for(60_000, 10_000) == 10_000
    assert max_contribution_for(5_000, 10_000) == pytest.approx(4_500)
    assert max_contribution_for(60_000, -500) == 0
    assert max_contribution_for(-1_000, 10_000) == 0


@pytest.mark.parametrize("ceiling,expected", [(0, 1_000), (10_000, 1_000), (30_000, 1_500), (32_490, 1_624)])
def test_sweep_step(ceiling, expected):
    assert sweep_step(ceiling) == expected


def test_sample_points_append_exact_ceiling():
    points = sample_contributions(12_345.5)
    assert points[0] == 0
    assert points[-2] == 12_000
    assert points[-1] == 12_345.5
    assert points == sorted(points)


def test_sample_points_without_room():
    assert sample_contributions(0) == [0.0]


def test_zero_room_gives_no_benefit_recommendation():
    result = optimize(60_000, 0, "AB", make_tax_data())
    assert result.optimal_contribution == 0
    assert result.optimal_savings == 0
    assert result.recommendation == NO_BENEFIT_MESSAGE
    assert len(result.scenarios) == 1


def test_baseline_figures():
    result = optimize(60_000, 10_000, "AB", make_tax_data())
    assert result.current_tax == pytest.approx(12_600)
    assert result.current_marginal_rate == pytest.approx(0.36)


def test_full_room_used_while_in_top_bracket():
    result = optimize(60_000, 10_000, "AB", make_tax_data())
    assert [s.contribution for s in result.scenarios] == [float(c) for c in range(0, 10_001, 1_000)]
    assert result.optimal_contribution == 10_000
    assert result.optimal_savings == pytest.approx(3_600)
    assert result.recommendation == (
        "Contribute $10,000.00 to reduce your marginal rate by 11.0%. "
        "Estimated tax savings: $3,600.00 (36.0% return). "
        "Remaining room: $0.00."
    )


def test_stops_at_bracket_boundary_when_returns_diminish():
    result = optimize(60_000, 20_000, "AB", make_tax_data())
    assert len(result.scenarios) == 21
    assert result.scenarios[-1].contribution == 20_000
    assert result.optimal_contribution == 10_000
    assert "Remaining room: $10,000.00." in result.recommendation


def test_first_and_last_scenarios():
    result = optimize(60_000, 12_345.5, "ON", make_tax_data())
    first, last = result.scenarios[0], result.scenarios[-1]
    assert first.contribution == 0
    assert first.tax_savings == 0
    assert first.adjusted_income == 60_000
    assert last.contribution == 12_345.5
    assert last.adjusted_income == pytest.approx(60_000 - 12_345.5)


def test_scenario_fields_are_consistent():
    result = optimize(85_000, 15_000, "ON", make_tax_data())
    for scenario in result.scenarios:
        assert scenario.total_tax == pytest.approx(scenario.federal_tax + scenario.provincial_tax)
        assert scenario.tax_savings == pytest.approx(result.current_tax - scenario.total_tax)
        assert scenario.effective_rate == pytest.approx(scenario.total_tax / scenario.adjusted_income)


def test_income_cap_limits_ceiling():
    result = optimize(5_000, 10_000, "AB", make_tax_data())
    assert result.scenarios[-1].contribution == pytest.approx(4_500)
    assert result.optimal_contribution == 0


def test_effective_rate_guarded_for_non_positive_income():
    result = optimize(0, 10_000, "AB", make_tax_data())
    assert result.scenarios[0].effective_rate == 0
    assert result.recommendation == NO_BENEFIT_MESSAGE


def test_last_qualifying_point_wins():
    scenarios = (
        _scenario(0, 0),
        _scenario(1_000, 360),
        _scenario(2_000, 500),
        _scenario(3_000, 860),
    )
    assert select_optimal(scenarios, 0.36).contribution == 3_000


def test_no_qualifying_point_keeps_zero():
    scenarios = (_scenario(0, 0), _scenario(1_000, 100), _scenario(2_000, 200))
    assert select_optimal(scenarios, 0.36).contribution == 0


def test_recommendation_without_rate_change():
    text = build_recommendation(_scenario(2_000, 720, marginal=0.36), 0.36, 5_000)
    assert text.startswith("Consider contributing $2,000.00 for estimated tax savings of $720.00 (36.0% return).")
    assert "Remaining room: $3,000.00." in text


def test_unknown_province_raises():
    with pytest.raises(UnknownProvinceError, match="No tax data for province: ZZ"):
        optimize(60_000, 10_000, "ZZ", make_tax_data())


def test_unknown_province_is_a_key_error():
    with pytest.raises(KeyError):
        savings_for_contribution(60_000, 1_000, "ZZ", make_tax_data())


@pytest.mark.parametrize("province", ["AB", "ON"])
def test_single_contribution_matches_sweep(province):
    tax_data = make_tax_data()
    result = optimize(85_000, 15_000, province, tax_data)
    for scenario in result.scenarios:
        assert savings_for_contribution(85_000, scenario.contribution, province, tax_data) == scenario.tax_savings


def test_single_contribution_matches_sweep_with_builtin_data():
    tax_data = get_tax_data(2025)
    result = optimize(120_000, 25_000, "ON", tax_data)
    sampled = result.scenarios[7]
    assert savings_for_contribution(120_000, sampled.contribution, "on", tax_data) == sampled.tax_savings


def test_province_code_is_case_insensitive():
    tax_data = make_tax_data()
    assert optimize(60_000, 10_000, "ab", tax_data) == optimize(60_000, 10_000, "AB", tax_data)
