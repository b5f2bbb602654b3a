"""
Order Admin Use Case Tests
"""

import asyncio
import copy
from unittest.mock import AsyncMock, MagicMock

import pytest

from luxe_storefront.application.use_cases.order_admin_use_case import OrderAdminUseCase
from luxe_storefront.domain.entities.order_entity import Order
from luxe_storefront.domain.value_objects.order_status import OrderStatus
from luxe_storefront.infrastructure.cache.query_cache import ORDERS_QUERY_KEY, QueryCache
from luxe_storefront.infrastructure.utilities.exceptions import (
    ApiError,
    IllegalStatusTransitionError,
    ValidationError,
)


def _order(order_id, status="Pending", is_paid=False, total=100.0):
    return Order.from_dict(
        {
            "_id": order_id,
            "status": status,
            "isPaid": is_paid,
            "paymentMethod": "Cash on Delivery",
            "totalPrice": total,
        }
    )


@pytest.fixture
def orders():
    return [
        _order("o1", "Pending"),
        _order("o2", "Shipped", is_paid=True, total=300.0),
        _order("o3", "Delivered", is_paid=True, total=200.0),
    ]


@pytest.fixture
def order_repository(orders):
    repo = MagicMock()
    repo.get_all_orders = AsyncMock(return_value=list(orders))
    repo.get_order_by_id = AsyncMock()
    repo.update_order_status = AsyncMock(side_effect=lambda order_id, status: _order(order_id, status.value))
    repo.mark_order_paid = AsyncMock(side_effect=lambda order_id: _order(order_id, is_paid=True))
    return repo


@pytest.fixture
def cache():
    return QueryCache(default_ttl=60)


@pytest.fixture
def use_case(order_repository, cache):
    return OrderAdminUseCase(order_repository, cache)


class TestLoadOrders:
    """Test the cached order list"""

    @pytest.mark.asyncio
    async def test_cached_after_first_load(self, use_case, order_repository):
        first = await use_case.load_orders()
        second = await use_case.load_orders()

        assert [order.id for order in first] == ["o1", "o2", "o3"]
        assert second == first
        order_repository.get_all_orders.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_force_refetches(self, use_case, order_repository):
        await use_case.load_orders()
        await use_case.load_orders(force=True)
        assert order_repository.get_all_orders.await_count == 2

    @pytest.mark.asyncio
    async def test_filter_and_stats(self, use_case):
        await use_case.load_orders()

        assert [order.id for order in use_case.get_orders("shipped")] == ["o2"]
        stats = use_case.get_order_stats()
        assert stats.total_orders == 3
        assert stats.total_revenue == 500.0

    @pytest.mark.asyncio
    async def test_filter_with_unknown_status(self, use_case):
        await use_case.load_orders()
        with pytest.raises(ValidationError):
            use_case.get_orders("Lost")


class TestUpdateStatus:
    """Test optimistic status changes"""

    @pytest.mark.asyncio
    async def test_success_keeps_new_status(self, use_case, order_repository, cache):
        await use_case.load_orders()

        updated = await use_case.update_status("o1", OrderStatus.PROCESSING)

        assert updated.status is OrderStatus.PROCESSING
        order_repository.update_order_status.assert_awaited_once_with("o1", OrderStatus.PROCESSING)
        cached = {order.id: order.status for order in use_case.get_cached_orders()}
        assert cached["o1"] is OrderStatus.PROCESSING
        assert cache.is_fresh(ORDERS_QUERY_KEY) is False

    @pytest.mark.asyncio
    async def test_failure_rolls_back_exactly(self, use_case, order_repository, cache):
        await use_case.load_orders()
        before = copy.deepcopy(cache.get_query_data(ORDERS_QUERY_KEY))
        order_repository.update_order_status = AsyncMock(side_effect=ApiError("rejected", 500))

        with pytest.raises(ApiError):
            await use_case.update_status("o1", "Canceled")

        assert cache.get_query_data(ORDERS_QUERY_KEY) == before
        assert cache.is_fresh(ORDERS_QUERY_KEY) is False
        assert not use_case.is_in_flight("o1")

    @pytest.mark.asyncio
    async def test_illegal_transition_never_calls_api(self, use_case, order_repository, cache):
        await use_case.load_orders()
        before = cache.snapshot(ORDERS_QUERY_KEY)

        with pytest.raises(IllegalStatusTransitionError):
            await use_case.update_status("o3", OrderStatus.PENDING)

        order_repository.update_order_status.assert_not_awaited()
        assert cache.snapshot(ORDERS_QUERY_KEY) == before
        assert not use_case.is_in_flight("o3")

    @pytest.mark.asyncio
    async def test_same_status_is_noop(self, use_case, order_repository):
        await use_case.load_orders()

        order = await use_case.update_status("o2", "Shipped")

        assert order.status is OrderStatus.SHIPPED
        order_repository.update_order_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_status(self, use_case):
        with pytest.raises(ValidationError):
            await use_case.update_status("o1", "Lost")

    @pytest.mark.asyncio
    async def test_status_change_keeps_payment(self, use_case):
        await use_case.load_orders()
        updated = await use_case.update_status("o2", OrderStatus.DELIVERED)
        assert updated.is_paid is True

    @pytest.mark.asyncio
    async def test_order_not_in_list_is_fetched(self, use_case, order_repository):
        await use_case.load_orders()
        order_repository.get_order_by_id = AsyncMock(return_value=_order("o9", "Processing"))

        updated = await use_case.update_status("o9", OrderStatus.SHIPPED)

        assert updated.status is OrderStatus.SHIPPED
        assert "o9" in [order.id for order in use_case.get_cached_orders()]

    @pytest.mark.asyncio
    async def test_second_update_while_in_flight_is_ignored(self, use_case, order_repository):
        await use_case.load_orders()
        release = asyncio.Event()

        async def slow_update(order_id, status):
            await release.wait()
            return _order(order_id, status.value)

        order_repository.update_order_status = AsyncMock(side_effect=slow_update)

        first = asyncio.create_task(use_case.update_status("o1", OrderStatus.PROCESSING))
        await asyncio.sleep(0)
        assert use_case.is_in_flight("o1")

        assert await use_case.update_status("o1", OrderStatus.CANCELED) is None

        release.set()
        result = await first
        assert result.status is OrderStatus.PROCESSING
        order_repository.update_order_status.assert_awaited_once()
        assert not use_case.is_in_flight("o1")

    @pytest.mark.asyncio
    async def test_refetch_during_update_keeps_optimistic_state(self, use_case, order_repository):
        await use_case.load_orders()
        release = asyncio.Event()

        async def slow_update(order_id, status):
            await release.wait()
            return _order(order_id, status.value)

        order_repository.update_order_status = AsyncMock(side_effect=slow_update)
        task = asyncio.create_task(use_case.update_status("o1", OrderStatus.PROCESSING))
        await asyncio.sleep(0)

        orders = await use_case.load_orders(force=True)

        assert {order.id: order.status for order in orders}["o1"] is OrderStatus.PROCESSING
        release.set()
        await task

    @pytest.mark.asyncio
    async def test_failed_update_does_not_hide_other_settled_updates(self, use_case, order_repository, cache):
        """A rollback leaves the list stale so the next read refetches"""
        await use_case.load_orders()
        release = asyncio.Event()

        async def update(order_id, status):
            if order_id == "o1":
                await release.wait()
                raise ApiError("rejected", 500)
            return _order(order_id, status.value)

        order_repository.update_order_status = AsyncMock(side_effect=update)
        failing = asyncio.create_task(use_case.update_status("o1", OrderStatus.PROCESSING))
        await asyncio.sleep(0)

        delivered = await use_case.update_status("o2", OrderStatus.DELIVERED)
        assert delivered.status is OrderStatus.DELIVERED

        release.set()
        with pytest.raises(ApiError):
            await failing

        assert cache.is_fresh(ORDERS_QUERY_KEY) is False
        await use_case.load_orders()
        assert order_repository.get_all_orders.await_count == 2


class TestMarkPaid:
    """Test payment marking"""

    @pytest.mark.asyncio
    async def test_mark_paid(self, use_case, order_repository):
        await use_case.load_orders()

        updated = await use_case.mark_paid("o1")

        assert updated.is_paid is True
        assert updated.paid_at is not None
        assert updated.status is OrderStatus.PENDING
        order_repository.mark_order_paid.assert_awaited_once_with("o1")

    @pytest.mark.asyncio
    async def test_already_paid_is_noop(self, use_case, order_repository):
        await use_case.load_orders()

        order = await use_case.mark_paid("o2")

        assert order.is_paid is True
        order_repository.mark_order_paid.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_rolls_back(self, use_case, order_repository, cache):
        await use_case.load_orders()
        before = copy.deepcopy(cache.get_query_data(ORDERS_QUERY_KEY))
        order_repository.mark_order_paid = AsyncMock(side_effect=ApiError("gateway", 502))

        with pytest.raises(ApiError):
            await use_case.mark_paid("o1")

        assert cache.get_query_data(ORDERS_QUERY_KEY) == before
        assert cache.is_fresh(ORDERS_QUERY_KEY) is False

    @pytest.mark.asyncio
    async def test_reset(self, use_case, cache):
        await use_case.load_orders()
        use_case.reset()
        assert cache.get_query_data(ORDERS_QUERY_KEY) is None


class TestDoubleSubmission:
    """Test the per-order guard across payment and status updates"""

    @pytest.mark.asyncio
    async def test_second_mark_paid_while_in_flight_is_ignored(self, use_case, order_repository):
        await use_case.load_orders()
        release = asyncio.Event()

        async def slow_paid(order_id):
            await release.wait()
            return _order(order_id, is_paid=True)

        order_repository.mark_order_paid = AsyncMock(side_effect=slow_paid)

        first = asyncio.create_task(use_case.mark_paid("o1"))
        await asyncio.sleep(0)

        assert await use_case.mark_paid("o1") is None

        release.set()
        result = await first
        assert result.is_paid is True
        order_repository.mark_order_paid.assert_awaited_once_with("o1")
        assert not use_case.is_in_flight("o1")

    @pytest.mark.asyncio
    async def test_mark_paid_during_status_update_is_ignored(self, use_case, order_repository):
        await use_case.load_orders()
        release = asyncio.Event()

        async def slow_update(order_id, status):
            await release.wait()
            return _order(order_id, status.value)

        order_repository.update_order_status = AsyncMock(side_effect=slow_update)

        update = asyncio.create_task(use_case.update_status("o1", OrderStatus.PROCESSING))
        await asyncio.sleep(0)

        assert await use_case.mark_paid("o1") is None

        release.set()
        await update
        order_repository.mark_order_paid.assert_not_awaited()
        cached = {order.id: order for order in use_case.get_cached_orders()}
        assert cached["o1"].is_paid is False
