import math

import pytest

from stratalloc.scripts.precision import (
    calculate_achieved_margin_of_error,
    calculate_achieved_variance,
    calculate_total_cost,
)
from stratalloc.scripts.stratified import (
    build_strata_frame,
    calculate_neyman_sample_size,
    calculate_optimum_sample_size,
    calculate_proportional_sample_size,
    neyman_allocation_weights,
    optimum_allocation_weights,
    proportional_allocation_weights,
)
from stratalloc.sampling.types import StratumRecord

N = 10000


class TestAchievedVariance:
    @pytest.mark.parametrize(
        "size_fn, weight_fn",
        [
            (calculate_proportional_sample_size, proportional_allocation_weights),
            (calculate_neyman_sample_size, neyman_allocation_weights),
            (calculate_optimum_sample_size, optimum_allocation_weights),
        ],
    )
    def test_continuous_allocation_meets_target(
        self, reference_frame, target_variance, size_fn, weight_fn
    ):
        n = size_fn(reference_frame, target_variance, N)
        continuous = (n * weight_fn(reference_frame)).to_dict()
        achieved = calculate_achieved_variance(reference_frame, continuous)
        assert achieved == pytest.approx(target_variance, rel=1e-9)

    def test_rounded_proportional(self, reference_frame):
        allocation = {1: 315, 2: 236, 3: 157, 4: 79}
        expected = 16 / 315 + 36 / 236 + 36 / 157 + 16 / 79 - 500 / N
        assert calculate_achieved_variance(reference_frame, allocation) == pytest.approx(
            expected
        )

    def test_unsampled_stratum_is_infinite(self, reference_frame):
        allocation = {1: 315, 2: 236, 3: 157}
        assert calculate_achieved_variance(reference_frame, allocation) == math.inf

    def test_unsampled_constant_stratum_adds_nothing(self):
        frame = build_strata_frame(
            [
                StratumRecord(1, 100, 0.0, 1.0),
                StratumRecord(2, 100, 2.0, 1.0),
            ]
        )
        with_zero = calculate_achieved_variance(frame, {1: 0, 2: 10})
        # 0.5² x 2² / 10 - 0.5 x 4 / 200
        assert with_zero == pytest.approx(0.1 - 0.01)

    def test_census_has_no_variance(self, reference_frame):
        census = {1: 4000, 2: 3000, 3: 2000, 4: 1000}
        assert calculate_achieved_variance(reference_frame, census) == pytest.approx(
            0.0, abs=1e-12
        )


class TestMarginOfError:
    def test_inverts_target_variance(self, target_variance):
        assert calculate_achieved_margin_of_error(target_variance, 1.96) == pytest.approx(
            1.5
        )

    def test_infinite(self):
        assert calculate_achieved_margin_of_error(math.inf, 1.96) == math.inf


class TestTotalCost:
    def test_cost(self, reference_frame):
        allocation = {1: 165, 2: 202, 3: 175, 4: 104}
        assert calculate_total_cost(reference_frame, allocation) == pytest.approx(4312.0)

    def test_time(self, reference_frame):
        allocation = {1: 165, 2: 202, 3: 175, 4: 104}
        assert calculate_total_cost(
            reference_frame, allocation, column="Th"
        ) == pytest.approx(1078.0)

    def test_missing_time_is_none(self):
        frame = build_strata_frame([StratumRecord(1, 100, 1.0, 2.0)])
        assert calculate_total_cost(frame, {1: 10}, column="Th") is None
        assert calculate_total_cost(frame, {1: 10}) == pytest.approx(20.0)

    def test_cost_optimum_is_cheapest(self, reference_frame, target_variance):
        costs = {}
        for name, size_fn, weight_fn in [
            ("proportional", calculate_proportional_sample_size, proportional_allocation_weights),
            ("neyman", calculate_neyman_sample_size, neyman_allocation_weights),
            ("optimum", calculate_optimum_sample_size, optimum_allocation_weights),
        ]:
            n = size_fn(reference_frame, target_variance, N)
            costs[name] = calculate_total_cost(
                reference_frame, (n * weight_fn(reference_frame)).to_dict()
            )

        assert costs["optimum"] < costs["neyman"] < costs["proportional"]
