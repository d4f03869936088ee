"""Tests for nested scroll container expansion."""

import pytest
from unittest.mock import AsyncMock

from longshot_core.container_expander import (
    EXPANDED_STYLES,
    MAX_EXPANDED_CONTAINERS,
    expand_scrollable_containers,
    plan_container_overrides,
)


def m(index, scroll_height, client_height=500, overflow_y="auto"):
    return {"index": index, "overflowY": overflow_y, "clientHeight": client_height, "scrollHeight": scroll_height}


class TestPlanContainerOverrides:

    def test_threshold_boundary(self):
        plan = plan_container_overrides([m(1, 799), m(2, 800)])
        assert [o.index for o in plan] == [2]

    def test_tallest_first_and_limited(self):
        measurements = [m(i, 1000 + i * 100) for i in range(8)]
        plan = plan_container_overrides(measurements)
        assert len(plan) == MAX_EXPANDED_CONTAINERS
        assert [o.index for o in plan] == [7, 6, 5, 4, 3]

    def test_non_scrolling_and_empty_skipped(self):
        plan = plan_container_overrides([
            m(1, 5000, overflow_y="hidden"),
            m(2, 5000, client_height=0),
            m(3, 0),
            m(4, 5000, overflow_y="scroll"),
        ])
        assert [o.index for o in plan] == [4]

    def test_styles_release_height_clamps(self):
        (override,) = plan_container_overrides([m(1, 4000)])
        assert override.styles == EXPANDED_STYLES
        assert override.styles["overflow"] == "visible"
        assert override.styles["maxHeight"] == "none"
        assert override.styles["height"] == "auto"

    def test_nothing_to_expand(self):
        assert plan_container_overrides([]) == []


class TestExpandScrollableContainers:

    @pytest.mark.asyncio
    async def test_applies_plan(self, mock_page, make_pool):
        pool = make_pool()
        pool.evaluate = AsyncMock(side_effect=[[m(3, 4000), m(9, 600)], 1])
        mock_page.evaluate_handle.return_value = pool

        expanded = await expand_scrollable_containers(mock_page)

        assert expanded == 1
        payload = pool.evaluate.await_args_list[1].args[1]
        assert payload == [{"index": 3, "styles": EXPANDED_STYLES}]
        pool.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_containers_is_noop(self, mock_page, make_pool):
        pool = make_pool([])
        mock_page.evaluate_handle.return_value = pool

        assert await expand_scrollable_containers(mock_page) == 0
        assert pool.evaluate.await_count == 1

    @pytest.mark.asyncio
    async def test_evaluation_failure_swallowed(self, mock_page):
        mock_page.evaluate_handle = AsyncMock(side_effect=Exception("Execution context was destroyed"))
        assert await expand_scrollable_containers(mock_page) == 0

    @pytest.mark.asyncio
    async def test_apply_failure_swallowed(self, mock_page, make_pool):
        pool = make_pool()
        pool.evaluate = AsyncMock(side_effect=[[m(3, 4000)], Exception("detached")])
        mock_page.evaluate_handle.return_value = pool

        assert await expand_scrollable_containers(mock_page) == 0
        pool.dispose.assert_awaited_once()
