"""Tests for the promotion evaluator."""

import pytest

from pos_pricing.catalog import PromotionId, SNACK_CATEGORIES
from pos_pricing.discount import fixed, percentage
from pos_pricing.pricer import price_line
from pos_pricing.promotions import Unit, evaluate_promotion, expand_units

from .fixtures import candy, drink, make_item, snack


class TestExpandUnits:
    """Tests for flattening lines into units."""

    def test_one_unit_per_quantity_in_cart_order(self) -> None:
        """Units keep the owning item id and cart position."""
        lines = [price_line(snack("a", 3.0, 2)), price_line(drink("d", 9.0)), price_line(snack("b", 2.0))]
        assert expand_units(lines, SNACK_CATEGORIES) == [
            Unit("a", 0, 3.0),
            Unit("a", 0, 3.0),
            Unit("b", 2, 2.0),
        ]

    def test_units_use_effective_price(self) -> None:
        """Overridden prices carry into the units."""
        lines = [price_line(snack("a", 3.0, overridden_price=1.0))]
        assert expand_units(lines, SNACK_CATEGORIES) == [Unit("a", 0, 1.0)]


class TestNoPromotion:
    """Tests for absent or unknown promotions."""

    @pytest.mark.parametrize("promotion_id", [None, "", "HAPPY_HOUR"])
    def test_no_credits(self, promotion_id) -> None:
        """Unknown ids behave as no promotion."""
        assert evaluate_promotion([drink("cola", 10.0, 2)], promotion_id) == {}

    def test_no_qualifying_items(self) -> None:
        """A promotion without matching categories credits nothing."""
        items = [make_item("lighter", 9.0, category="Varios")]
        for promotion_id in PromotionId:
            assert evaluate_promotion(items, promotion_id) == {}


class TestBeverages:
    """Tests for PROMO_BEBIDAS."""

    def test_ten_percent_of_line(self) -> None:
        """10% of a 2 x 10 beverage line is 2.00."""
        credits = evaluate_promotion([drink("cola", 10.0, 2)], PromotionId.PROMO_BEBIDAS)
        assert credits == {"cola": pytest.approx(2.0)}

    def test_applies_after_item_discount(self) -> None:
        """The credit is taken from the discounted line total."""
        items = [drink("cola", 10.0, 2, discount=percentage(50))]
        credits = evaluate_promotion(items, "PROMO_BEBIDAS")
        assert credits["cola"] == pytest.approx(1.0)

    def test_only_beverages(self) -> None:
        """Other categories receive no credit."""
        items = [drink("cola", 12.0), candy("gum", 4.5), drink("water", 8.0)]
        credits = evaluate_promotion(items, PromotionId.PROMO_BEBIDAS)
        assert set(credits) == {"cola", "water"}
        assert credits["water"] == pytest.approx(0.8)

    def test_fully_discounted_line_omitted(self) -> None:
        """Zero credits are not listed."""
        items = [drink("cola", 10.0, discount=fixed(10))]
        assert evaluate_promotion(items, PromotionId.PROMO_BEBIDAS) == {}


class TestComboKiosco:
    """Tests for COMBO_KIOSCO."""

    def test_half_price_on_cheapest_candy_unit(self) -> None:
        """Only the 3-priced unit gets 1.50."""
        items = [drink("cola", 12.0), candy("gum", 3.0), candy("choc", 5.0)]
        credits = evaluate_promotion(items, PromotionId.COMBO_KIOSCO)
        assert credits == {"gum": pytest.approx(1.5)}

    def test_single_unit_of_multi_quantity_line(self) -> None:
        """A line of several candies gets credit for one unit only."""
        items = [drink("cola", 12.0), candy("gum", 4.0, 3)]
        credits = evaluate_promotion(items, PromotionId.COMBO_KIOSCO)
        assert credits == {"gum": pytest.approx(2.0)}

    def test_requires_a_beverage(self) -> None:
        """Candy alone does not qualify."""
        assert evaluate_promotion([candy("gum", 3.0, 2)], PromotionId.COMBO_KIOSCO) == {}

    def test_requires_a_candy(self) -> None:
        """A beverage alone does not qualify."""
        assert evaluate_promotion([drink("cola", 12.0, 3)], PromotionId.COMBO_KIOSCO) == {}

    def test_tie_goes_to_earlier_line(self) -> None:
        """Equal prices select the line earliest in the cart."""
        items = [candy("first", 5.0), drink("cola", 12.0), candy("second", 5.0)]
        credits = evaluate_promotion(items, PromotionId.COMBO_KIOSCO)
        assert credits == {"first": pytest.approx(2.5)}

    def test_uses_overridden_price(self) -> None:
        """The effective unit price drives selection and credit."""
        items = [drink("cola", 12.0), candy("gum", 3.0), candy("choc", 5.0, overridden_price=2.0)]
        credits = evaluate_promotion(items, PromotionId.COMBO_KIOSCO)
        assert credits == {"choc": pytest.approx(1.0)}

    def test_singular_category_label(self) -> None:
        """The singular candy label is the same category."""
        items = [drink("cola", 12.0), make_item("gum", 3.0, category="Golosina")]
        credits = evaluate_promotion(items, PromotionId.COMBO_KIOSCO)
        assert credits == {"gum": pytest.approx(1.5)}


class TestSnacks3x2:
    """Tests for SNACKS_3X2."""

    def test_cheapest_of_first_group_free(self) -> None:
        """Units 2,3,4,5: the 2 is free and the 5 is a partial group."""
        items = [snack("s2", 2.0), snack("s3", 3.0), snack("s4", 4.0), snack("s5", 5.0)]
        credits = evaluate_promotion(items, PromotionId.SNACKS_3X2)
        assert credits == {"s2": pytest.approx(2.0)}
        assert sum(credits.values()) == pytest.approx(2.0)

    def test_partial_group_gets_nothing(self) -> None:
        """Two units do not form a group."""
        assert evaluate_promotion([snack("a", 2.0, 2)], PromotionId.SNACKS_3X2) == {}

    def test_groups_span_lines(self) -> None:
        """Units from different lines form one group."""
        items = [snack("a", 6.0), snack("b", 4.0, 2)]
        credits = evaluate_promotion(items, PromotionId.SNACKS_3X2)
        assert credits == {"b": pytest.approx(4.0)}

    def test_each_complete_group_frees_its_cheapest(self) -> None:
        """Sorted 1..6 makes groups (1,2,3) and (4,5,6): 1 and 4 are free, not 1 and 2."""
        items = [snack(f"s{p}", float(p)) for p in (6, 5, 4, 3, 2, 1)]
        credits = evaluate_promotion(items, PromotionId.SNACKS_3X2)
        assert credits == {"s1": pytest.approx(1.0), "s4": pytest.approx(4.0)}
        assert "s2" not in credits

    def test_credits_aggregate_per_line(self) -> None:
        """Six identical units on one line make two free units on that line."""
        credits = evaluate_promotion([snack("bar", 6.0, 6)], PromotionId.SNACKS_3X2)
        assert credits == {"bar": pytest.approx(12.0)}

    def test_tie_break_by_cart_position(self) -> None:
        """Equal prices free the earlier line's unit."""
        items = [snack("first", 2.0), snack("second", 2.0), snack("third", 2.0)]
        credits = evaluate_promotion(items, PromotionId.SNACKS_3X2)
        assert credits == {"first": pytest.approx(2.0)}

    def test_credit_capped_at_discounted_line(self) -> None:
        """A free unit never pushes its line below zero."""
        items = [snack("a", 2.0, discount=fixed(1.5)), snack("b", 3.0), snack("c", 4.0)]
        credits = evaluate_promotion(items, PromotionId.SNACKS_3X2)
        assert credits == {"a": pytest.approx(0.5)}
