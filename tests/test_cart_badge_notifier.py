"""
Cart Badge Notifier Tests
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from luxe_storefront.infrastructure.events.cart_badge_notifier import (
    EVENT_DELTA,
    EVENT_REFRESH_REQUESTED,
    EVENT_SET,
    CartBadge,
    CartBadgeNotifier,
    CartCountDelta,
    CartCountSet,
    CartRefreshRequested,
    get_cart_notifier,
)


class TestCartBadgeNotifier:
    """Test the publish/subscribe channel"""

    def test_events_carry_names_and_payloads(self):
        """Event kinds have stable wire names"""
        assert CartCountDelta(2).name == EVENT_DELTA
        assert CartCountDelta(2).payload() == {"delta": 2}
        assert CartCountSet(4).name == EVENT_SET
        assert CartCountSet(4).payload() == {"count": 4}
        assert CartRefreshRequested().name == EVENT_REFRESH_REQUESTED
        assert CartRefreshRequested().payload() == {}

    def test_delivery_to_all_listeners(self, notifier):
        """Every subscribed listener receives the event"""
        first, second = MagicMock(), MagicMock()
        notifier.subscribe(first)
        notifier.subscribe(second)

        notifier.emit_delta(3)

        first.assert_called_once_with(CartCountDelta(3))
        second.assert_called_once_with(CartCountDelta(3))

    def test_unsubscribe(self, notifier):
        """Unsubscribed listeners receive nothing more"""
        listener = MagicMock()
        unsubscribe = notifier.subscribe(listener)
        assert notifier.listener_count == 1

        unsubscribe()
        unsubscribe()
        notifier.request_refresh()

        listener.assert_not_called()
        assert notifier.listener_count == 0

    def test_no_replay_for_late_subscribers(self, notifier):
        """Events published before subscribing are not delivered"""
        notifier.emit_set(5)
        listener = MagicMock()
        notifier.subscribe(listener)
        listener.assert_not_called()

    def test_failing_listener_does_not_block_others(self, notifier):
        """A raising listener is logged and skipped"""
        broken = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        notifier.subscribe(broken)
        notifier.subscribe(healthy)

        notifier.emit_delta(1)

        healthy.assert_called_once_with(CartCountDelta(1))

    def test_emit_set_clamps_negative(self, notifier, events):
        """Absolute counts are never negative"""
        notifier.emit_set(-3)
        assert events == [CartCountSet(0)]

    def test_global_notifier_is_shared(self):
        """Process-wide notifier is a singleton"""
        assert get_cart_notifier() is get_cart_notifier()


class TestCartBadge:
    """Test the badge consumer"""

    def test_delta_accumulates_and_clamps(self, notifier):
        """Deltas add up and never go below zero"""
        badge = CartBadge(notifier, initial_count=1)
        notifier.emit_delta(2)
        assert badge.count == 3
        notifier.emit_delta(-10)
        assert badge.count == 0

    def test_set_overwrites(self, notifier):
        """Set replaces the count and is idempotent"""
        badge = CartBadge(notifier, initial_count=7)
        notifier.emit_set(3)
        notifier.emit_set(3)
        assert badge.count == 3

    def test_refresh_without_loop_marks_pending(self, notifier):
        """Outside an event loop a refresh request is remembered"""
        badge = CartBadge(notifier, count_provider=AsyncMock(return_value=4))
        notifier.request_refresh()
        assert badge.needs_refresh is True
        assert badge.count == 0

    @pytest.mark.asyncio
    async def test_refresh_request_reads_provider(self, notifier):
        """Inside a loop a refresh request re-reads the count"""
        provider = AsyncMock(return_value=6)
        badge = CartBadge(notifier, count_provider=provider)

        notifier.request_refresh()
        await badge.wait_for_refresh()

        assert badge.count == 6
        provider.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_count(self, notifier):
        """A failing provider leaves the previous count in place"""
        provider = AsyncMock(side_effect=RuntimeError("offline"))
        badge = CartBadge(notifier, count_provider=provider, initial_count=2)

        notifier.request_refresh()
        await badge.wait_for_refresh()

        assert badge.count == 2

    def test_close_unsubscribes(self):
        """Closed badges stop listening"""
        notifier = CartBadgeNotifier()
        badge = CartBadge(notifier)
        badge.close()
        notifier.emit_delta(5)
        assert badge.count == 0
        assert notifier.listener_count == 0
