"""
Unit tests for pump subset allocation.
"""

import numpy as np
import pytest

from steam_boiler.allocation import PumpAllocation, candidate_subsets, select_pumps


class TestCandidateSubsets:
    """Test bitmask enumeration."""

    def test_shape(self):
        """Test one row per subset and one column per pump."""
        assert candidate_subsets(3).shape == (8, 3)
        assert candidate_subsets(0).shape == (1, 0)

    def test_rows_are_bitmasks(self):
        """Test row m sets column i exactly when bit i of m is set."""
        subsets = candidate_subsets(3)
        np.testing.assert_array_equal(subsets[0], [False, False, False])
        np.testing.assert_array_equal(subsets[1], [True, False, False])
        np.testing.assert_array_equal(subsets[6], [False, True, True])
        np.testing.assert_array_equal(subsets[7], [True, True, True])

    def test_negative_count(self):
        """Test negative pump counts are rejected."""
        with pytest.raises(ValueError):
            candidate_subsets(-1)


class TestSelectPumps:
    """Test choosing the pump subset closest to a required flow."""

    def test_exact_match(self):
        """Test a subset hitting the flow exactly is chosen."""
        allocation = select_pumps([3.0, 5.0, 9.0], 8.0)
        assert allocation.mask == 3
        assert allocation.open_pumps == (0, 1)
        assert allocation.pumpage == 8.0
        assert allocation.deviation == 0.0

    def test_tie_goes_to_lowest_mask(self):
        """Test equal candidates resolve to the first in enumeration order."""
        # 3 + 9 = 12 (mask 5) and 5 + 9 = 14 (mask 6) are both 1 away from 13
        allocation = select_pumps([3.0, 5.0, 9.0], 13.0)
        assert allocation.mask == 5
        assert allocation.open_pumps == (0, 2)

    def test_half_way_tie_between_sizes(self):
        """Test a flow between two subset sizes."""
        allocation = select_pumps([4.0, 4.0], 6.0)
        assert allocation.mask == 1
        assert allocation.pumpage == 4.0
        assert allocation.deviation == 2.0

    def test_rounding_toward_nearest(self):
        """Test the nearest subset wins over a larger one."""
        allocation = select_pumps([4.0, 4.0], 5.0)
        assert allocation.open_pumps == (0,)

    def test_negative_flow_closes_everything(self):
        """Test a draining requirement opens no pumps."""
        allocation = select_pumps([10.0, 10.0], -20.0)
        assert allocation.mask == 0
        assert allocation.open_pumps == ()
        assert allocation.pumpage == 0.0

    def test_large_flow_opens_everything(self):
        """Test a requirement beyond total capacity opens every pump."""
        allocation = select_pumps([10.0, 10.0, 10.0], 500.0)
        assert allocation.open_pumps == (0, 1, 2)
        assert allocation.pumpage == 30.0

    def test_is_open(self):
        """Test per-pump lookup on the bitmask."""
        allocation = PumpAllocation(mask=5, open_pumps=(0, 2), pumpage=12.0, deviation=0.0)
        assert allocation.is_open(0)
        assert not allocation.is_open(1)
        assert allocation.is_open(2)
