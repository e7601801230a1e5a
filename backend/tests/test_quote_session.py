"""
test_quote_session.py — Event-level tests for QuoteSession.

Tests cover:
  - Factory state and derived totals
  - Family switch partial reset (toggles, overrides, cost, last-edited)
  - Size switching, add-on toggles and overrides
  - Presets, adder margin, subscription inputs
  - Reference table edits flowing into the quote
  - Full reset
  - No torn state when an event fails
  - Oversized costs, word toggles and read-only selections
"""

import dataclasses

import pytest

from frontline.models.pricing_schema import Adder, EditedField, Family, Size


class TestFactoryState:

    def test_factory_quote(self, session):
        """
        MP3/M, cost 50 000 @ 50% -> 100 000; Foam M 1000 @ 50% -> 2000.
        ASE 895 + 119 = 1014; subscription 89.00.
        """
        result = session.quote()
        assert result.state.family == Family.MP3
        assert result.state.size == Size.M
        assert result.state.triad.price == 100_000
        assert result.state.triad.last_edited == EditedField.PRICE
        assert result.totals.adders_total == 2000
        assert result.totals.one_time_total == 102_000
        assert result.totals.ase_annual == 1014.0
        assert result.totals.subscription_monthly == 89.0

    def test_only_foam_enabled(self, session):
        enabled = {a for a, sel in session.state.selections.items() if sel.enabled}
        assert enabled == {Adder.FOAM}


class TestFamilySwitch:

    @pytest.mark.parametrize("family,cost", [(Family.LV2, 60_000.0), (Family.MP3, 50_000.0)])
    def test_partial_reset(self, session, family, cost):
        session.set_adder_enabled(Adder.BOOSTER, True)
        session.set_adder_enabled(Adder.UPS, True)
        session.set_adder_enabled(Adder.FOAM, False)
        session.set_adder_size(Adder.POOL, Size.L)
        session.set_adder_size(Adder.FOAM, Size.XL)
        session.edit_cost(12_345)

        result = session.set_family(family)
        state = result.state
        assert state.family == family
        assert state.triad.cost == cost
        assert state.triad.last_edited == EditedField.COST
        assert {a for a, s in state.selections.items() if s.enabled} == {Adder.FOAM}
        assert all(s.size_override is None for s in state.selections.values())

    def test_price_recomputed_from_existing_margin(self, session):
        """GM 0.4 kept across the switch: 60 000 / 0.6 = 100 000."""
        session.edit_margin(0.4)
        result = session.set_family(Family.LV2)
        assert result.state.triad.margin == pytest.approx(0.4)
        assert result.state.triad.price == 100_000

    def test_uses_edited_default_cost(self, session):
        session.set_default_cost(Family.LV2, 62_000)
        assert session.set_family(Family.LV2).state.triad.cost == 62_000.0

    def test_unknown_family(self, session):
        with pytest.raises(ValueError):
            session.set_family("LV3")


class TestSystemEdits:

    def test_cost_margin_price_cycle(self, session):
        session.edit_cost(6000)
        assert session.quote().state.triad.price == 12_000
        session.edit_price(15_000)
        assert session.quote().state.triad.margin == pytest.approx(0.6)
        session.edit_margin(0.25)
        assert session.quote().state.triad.price == 8000

    def test_garbage_cost_is_zero(self, session):
        result = session.edit_cost("abc")
        assert result.state.triad.cost == 0.0
        assert result.state.triad.price == 0
        assert result.totals.one_time_total == result.totals.adders_total

    def test_size_change_moves_followers_only(self, session):
        session.set_adder_enabled(Adder.BOOSTER, True)
        session.set_adder_size(Adder.FOAM, Size.S)
        result = session.set_size(Size.L)
        assert result.adders[Adder.FOAM].effective_size == Size.S
        assert result.adders[Adder.BOOSTER].effective_size == Size.L
        assert result.totals.ase_annual == 995.0 + 139.0 + 189.0

    def test_xl_is_not_a_system_size(self, session):
        with pytest.raises(ValueError):
            session.set_size(Size.XL)


class TestAddersAndMargins:

    def test_all_adders_disabled(self, bare_session):
        result = bare_session.quote()
        assert result.totals.adders_total == 0
        assert result.totals.one_time_total == result.state.triad.price

    def test_foam_xl_price(self, session):
        result = session.set_adder_size(Adder.FOAM, Size.XL)
        assert result.adders[Adder.FOAM].price == 3600
        assert result.adders[Adder.FOAM].size_status == "Overridden"

    def test_clear_override(self, session):
        session.set_adder_size(Adder.FOAM, Size.XL)
        result = session.set_adder_size(Adder.FOAM, None)
        assert result.adders[Adder.FOAM].effective_size == Size.M
        assert result.adders[Adder.FOAM].size_status == "Following system"

    def test_adder_margin_independent_of_system(self, session):
        """Adder GM 0.6: foam 1000 / 0.4 = 2500; system price untouched."""
        result = session.set_adder_margin(0.6)
        assert result.adders[Adder.FOAM].price == 2500
        assert result.state.triad.price == 100_000

    def test_preset_sets_both_margins(self, session):
        """Production preset 37.5%: 50 000 / 0.625 = 80 000; foam 1000 / 0.625 = 1600."""
        result = session.apply_preset("prod")
        assert result.state.triad.price == 80_000
        assert result.state.triad.last_edited == EditedField.MARGIN
        assert result.state.adder_margin == pytest.approx(0.375)
        assert result.adders[Adder.FOAM].price == 1600

    def test_enabling_ups_leaves_ase(self, session):
        before = session.quote().totals
        after = session.set_adder_enabled(Adder.UPS, True).totals
        assert after.adders_total == before.adders_total + 500
        assert after.ase_annual == before.ase_annual


class TestSubscriptionInputs:

    def test_annual_billing(self, session):
        assert session.set_annual_billing(True).totals.subscription_monthly == pytest.approx(80.10)

    def test_high_usage_and_vertical(self, session):
        session.set_vertical("ci")
        result = session.set_high_usage(True)
        assert result.totals.subscription_monthly == pytest.approx(104.55)

    def test_unknown_vertical(self, session):
        with pytest.raises(ValueError):
            session.set_vertical("gov")


class TestTableEdits:

    def test_adder_cost_edit_flows_into_quote(self, session):
        result = session.set_adder_cost(Adder.FOAM, None, Size.M, 1100)
        assert result.adders[Adder.FOAM].price == 2200

    def test_ase_and_subscription_edits(self, session):
        session.set_ase_increment(Family.MP3, Size.M, Adder.FOAM, 120)
        session.set_ase_base(Family.MP3, Size.M, 900)
        result = session.set_subscription_base(Family.MP3, 99)
        assert result.totals.ase_annual == 1020.0
        assert result.totals.subscription_monthly == 99.0


class TestReset:

    def test_reset_restores_everything(self, session):
        session.set_family(Family.LV2)
        session.set_size(Size.S)
        session.apply_preset("ci")
        session.set_adder_enabled(Adder.SOLAR, True)
        session.set_annual_billing(True)
        session.set_adder_cost(Adder.FOAM, None, Size.M, 1)

        result = session.reset()
        state = result.state
        assert state.family == Family.MP3
        assert state.size == Size.M
        assert state.triad.cost == 50_000.0
        assert state.triad.price == 100_000
        assert state.triad.last_edited == EditedField.PRICE
        assert state.adder_margin == pytest.approx(0.5)
        assert state.annual_billing is False
        assert result.adders[Adder.FOAM].cost == 1000.0
        assert result.totals.one_time_total == 102_000


class TestAtomicity:

    def test_failed_event_keeps_prior_quote(self, session):
        before = session.quote()
        with pytest.raises(ValueError):
            session.set_adder_size(Adder.BOOSTER, Size.XL)
        assert session.quote() is before

    def test_unknown_table_cell_keeps_prior_quote(self, session):
        before = session.quote()
        with pytest.raises(KeyError):
            session.set_ase_increment(Family.MP3, Size.M, Adder.UPS, 50)
        assert session.quote() is before


class TestInputHardening:

    def test_oversized_adder_cost_at_full_margin(self, session):
        """1e307 / max(1 - 1.0, 0.01) overflows to inf; the add-on prices at 0."""
        session.set_adder_cost(Adder.FOAM, None, Size.M, 1e307)
        result = session.set_adder_margin(1.0)
        assert result.adders[Adder.FOAM].price == 0
        assert result.totals.adders_total == 0
        assert result.totals.one_time_total == 100_000
        assert session.snapshot_json()

    def test_word_toggles(self, session):
        session.set_adder_enabled(Adder.BOOSTER, "false")
        assert session.state.selections[Adder.BOOSTER].enabled is False
        session.set_adder_enabled(Adder.BOOSTER, "true")
        assert session.state.selections[Adder.BOOSTER].enabled is True

    def test_word_subscription_flags(self, session):
        result = session.set_annual_billing("false")
        assert result.state.annual_billing is False
        assert result.totals.subscription_monthly == 89.0
        result = session.set_high_usage("on")
        assert result.state.high_usage is True
        assert result.totals.subscription_monthly == 109.0

    def test_selections_are_read_only(self, session):
        with pytest.raises(TypeError):
            session.state.selections[Adder.UPS] = None
        with pytest.raises(dataclasses.FrozenInstanceError):
            session.state.selections[Adder.UPS].enabled = True
        assert session.state.selections[Adder.UPS].enabled is False
