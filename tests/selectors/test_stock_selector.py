"""
Tests for StockSelector: stock on hand derived from movements.

Covers:
- IN / OUT / ADJUST sign convention
- End-of-day cutoff
- Tenant and garage scope (selected garage, garage set, empty set,
  inactive garages)
- Inactive parts, search, ordering by part name
- Outbound quantities count OUT movements only
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from garage_kernel.domain.scope import ScopeFilter
from garage_kernel.models import MovementType, PartStatus
from garage_kernel.selectors.stock_selector import StockSelector

AS_ON = date(2025, 3, 31)


class TestNetQuantities:

    def test_sign_convention(self, session, inventory):
        garage = inventory.garage()
        part = inventory.part("Oil Filter")
        inventory.movement(garage, part, MovementType.IN, "10", date(2025, 1, 5))
        # OUT recorded with either sign still reduces stock
        inventory.movement(garage, part, MovementType.OUT, "3", date(2025, 1, 6))
        inventory.movement(garage, part, MovementType.OUT, "-2", date(2025, 1, 7))
        inventory.movement(garage, part, MovementType.ADJUST, "-1.5", date(2025, 1, 8))
        inventory.movement(garage, part, MovementType.ADJUST, "0.25", date(2025, 1, 9))

        net = StockSelector(session).net_quantities(None, inventory.scope(garage), AS_ON)

        assert net[part.id] == Decimal("3.75")

    def test_in_recorded_negative_still_adds(self, session, inventory):
        garage = inventory.garage()
        part = inventory.part("Wiper Blade")
        inventory.movement(garage, part, MovementType.IN, "-4", date(2025, 1, 5))

        net = StockSelector(session).net_quantities(None, inventory.scope(garage), AS_ON)

        assert net[part.id] == Decimal("4.00")

    def test_cutoff_is_inclusive_end_of_day(self, session, inventory):
        garage = inventory.garage()
        part = inventory.part("Brake Pad")
        inventory.movement(garage, part, MovementType.IN, "5", datetime(2025, 3, 31, 23, 59, 59))
        inventory.movement(garage, part, MovementType.IN, "7", datetime(2025, 4, 1, 0, 0, 0))

        net = StockSelector(session).net_quantities(None, inventory.scope(garage), AS_ON)

        assert net[part.id] == Decimal("5.00")

    def test_zero_net_omitted_negative_kept(self, session, inventory):
        garage = inventory.garage()
        balanced = inventory.part("Balanced")
        short = inventory.part("Short")
        inventory.movement(garage, balanced, MovementType.IN, "2", date(2025, 1, 1))
        inventory.movement(garage, balanced, MovementType.OUT, "2", date(2025, 1, 2))
        inventory.movement(garage, short, MovementType.OUT, "1", date(2025, 1, 2))

        net = StockSelector(session).net_quantities(None, inventory.scope(garage), AS_ON)

        assert balanced.id not in net
        assert net[short.id] == Decimal("-1.00")

    def test_restrict_to_part_ids(self, session, inventory):
        garage = inventory.garage()
        a = inventory.part("A part")
        b = inventory.part("B part")
        for part in (a, b):
            inventory.movement(garage, part, MovementType.IN, "1", date(2025, 1, 1))

        net = StockSelector(session).net_quantities([b.id], inventory.scope(garage), AS_ON)

        assert list(net) == [b.id]

    def test_empty_part_ids_returns_empty(self, session, inventory):
        garage = inventory.garage()
        assert dict(StockSelector(session).net_quantities([], inventory.scope(garage), AS_ON)) == {}

    def test_mapping_is_read_only(self, session, inventory):
        garage = inventory.garage()
        part = inventory.part("Spark Plug")
        inventory.movement(garage, part, MovementType.IN, "1", date(2025, 1, 1))

        net = StockSelector(session).net_quantities(None, inventory.scope(garage), AS_ON)

        try:
            net[part.id] = Decimal("99")
        except TypeError:
            pass
        else:
            raise AssertionError("selector mapping must be read-only")


class TestScope:

    def test_selected_garage_excludes_other_garages(self, session, inventory):
        garage_a = inventory.garage("A")
        garage_b = inventory.garage("B")
        part = inventory.part("Timing Belt")
        inventory.movement(garage_a, part, MovementType.IN, "4", date(2025, 1, 1))
        inventory.movement(garage_b, part, MovementType.IN, "9", date(2025, 1, 1))
        inventory.movement(garage_b, part, MovementType.OUT, "2", date(2025, 1, 2))

        selector = StockSelector(session)
        only_a = ScopeFilter(
            tenant_id=inventory.tenant_id,
            garage_ids=frozenset({garage_a.id, garage_b.id}),
            selected_garage_id=garage_a.id,
        )

        assert selector.net_quantities(None, only_a, AS_ON)[part.id] == Decimal("4.00")
        assert dict(selector.outbound_quantities([part.id], only_a, AS_ON)) == {}
        both = inventory.scope(garage_a, garage_b)
        assert selector.net_quantities(None, both, AS_ON)[part.id] == Decimal("11.00")

    def test_empty_garage_set_matches_nothing(self, session, inventory):
        garage = inventory.garage()
        part = inventory.part("Air Filter")
        inventory.movement(garage, part, MovementType.IN, "4", date(2025, 1, 1))

        empty = ScopeFilter(tenant_id=inventory.tenant_id, garage_ids=frozenset())

        assert dict(StockSelector(session).parts_in_stock(empty, AS_ON)) == {}

    def test_inactive_garage_contributes_nothing(self, session, inventory):
        open_garage = inventory.garage("OPEN")
        closed_garage = inventory.garage("CLOSED", is_active=False)
        part = inventory.part("Drive Belt")
        inventory.movement(open_garage, part, MovementType.IN, "3", date(2025, 1, 1))
        inventory.movement(closed_garage, part, MovementType.IN, "4", date(2025, 1, 1))
        inventory.movement(closed_garage, part, MovementType.OUT, "1", date(2025, 1, 2))

        selector = StockSelector(session)
        closed_only = inventory.scope(closed_garage)
        both = inventory.scope(open_garage, closed_garage)

        assert dict(selector.parts_in_stock(closed_only, AS_ON)) == {}
        assert dict(selector.outbound_quantities([part.id], closed_only, AS_ON)) == {}
        assert selector.net_quantities(None, both, AS_ON)[part.id] == Decimal("3.00")

    def test_other_tenant_invisible(self, session, inventory):
        garage = inventory.garage()
        part = inventory.part("Fuse")
        inventory.movement(garage, part, MovementType.IN, "4", date(2025, 1, 1))

        foreign = ScopeFilter(tenant_id=uuid4(), garage_ids=frozenset({garage.id}))

        assert dict(StockSelector(session).parts_in_stock(foreign, AS_ON)) == {}


class TestPartsInStock:

    def test_positive_only_ordered_by_name(self, session, inventory):
        garage = inventory.garage()
        zeta = inventory.part("Zeta Bulb")
        alpha = inventory.part("Alpha Clamp")
        gone = inventory.part("Middle Hose")
        inventory.movement(garage, zeta, MovementType.IN, "1", date(2025, 1, 1))
        inventory.movement(garage, alpha, MovementType.IN, "2", date(2025, 1, 1))
        inventory.movement(garage, gone, MovementType.OUT, "1", date(2025, 1, 1))

        stock = StockSelector(session).parts_in_stock(inventory.scope(garage), AS_ON)

        assert list(stock) == [alpha.id, zeta.id]
        assert stock[alpha.id] == Decimal("2.00")

    def test_inactive_parts_excluded(self, session, inventory):
        garage = inventory.garage()
        active = inventory.part("Active Part")
        retired = inventory.part("Retired Part", status=PartStatus.INACTIVE)
        for part in (active, retired):
            inventory.movement(garage, part, MovementType.IN, "3", date(2025, 1, 1))

        stock = StockSelector(session).parts_in_stock(inventory.scope(garage), AS_ON)

        assert list(stock) == [active.id]

    def test_search_matches_name_or_sku_case_insensitive(self, session, inventory):
        garage = inventory.garage()
        by_name = inventory.part("Cabin Filter", sku="CF-01")
        by_sku = inventory.part("Element", sku="XFILTER-9")
        other = inventory.part("Radiator Cap", sku="RC-2")
        for part in (by_name, by_sku, other):
            inventory.movement(garage, part, MovementType.IN, "1", date(2025, 1, 1))

        stock = StockSelector(session).parts_in_stock(inventory.scope(garage), AS_ON, search="  filter ")

        assert set(stock) == {by_name.id, by_sku.id}

    def test_search_wildcards_are_literal(self, session, inventory):
        garage = inventory.garage()
        plain = inventory.part("Bolt M8", sku="B-M8")
        inventory.movement(garage, plain, MovementType.IN, "1", date(2025, 1, 1))

        stock = StockSelector(session).parts_in_stock(inventory.scope(garage), AS_ON, search="%")

        assert dict(stock) == {}


class TestOutboundQuantities:

    def test_counts_absolute_out_only(self, session, inventory):
        garage = inventory.garage()
        part = inventory.part("Coolant")
        inventory.movement(garage, part, MovementType.IN, "20", date(2025, 1, 1))
        inventory.movement(garage, part, MovementType.OUT, "4", date(2025, 1, 2))
        inventory.movement(garage, part, MovementType.OUT, "-3", date(2025, 1, 3))
        inventory.movement(garage, part, MovementType.ADJUST, "-5", date(2025, 1, 4))
        inventory.movement(garage, part, MovementType.OUT, "6", date(2025, 4, 2))

        outbound = StockSelector(session).outbound_quantities([part.id], inventory.scope(garage), AS_ON)

        assert outbound[part.id] == Decimal("7")

    def test_part_without_out_movements_absent(self, session, inventory):
        garage = inventory.garage()
        part = inventory.part("Gasket")
        inventory.movement(garage, part, MovementType.IN, "2", date(2025, 1, 1))

        outbound = StockSelector(session).outbound_quantities([part.id], inventory.scope(garage), AS_ON)

        assert part.id not in outbound
