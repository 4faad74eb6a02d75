"""
Tests for the status effect lifecycle.
"""

from ..engine_core.state import PlayerState, PlayerStats, StatName, StatusEffectInstance


class TestTick:
    """Tests for StatusLifecycle.tick."""

    def test_no_statuses(self, lifecycle, player):
        tick = lifecycle.tick(player)
        assert tick.player.stats == player.stats
        assert tick.player.turn_count == 1
        assert tick.report.is_empty

    def test_ongoing_delta_applied(self, lifecycle, player):
        player = player.with_statuses([StatusEffectInstance("bleeding", 3)])
        tick = lifecycle.tick(player)
        assert tick.player.stats.hp == 98
        assert tick.player.get_status("bleeding").remaining_duration == 2

    def test_ongoing_scales_with_stacks(self, lifecycle, player):
        player = player.with_statuses([StatusEffectInstance("poison", 2, stacks=3)])
        assert lifecycle.tick(player).player.stats.hp == 97

    def test_deltas_summed_per_stat(self, lifecycle, player):
        player = player.with_statuses([
            StatusEffectInstance("bleeding", 3),
            StatusEffectInstance("poison", 2, stacks=2),
        ])
        tick = lifecycle.tick(player)
        assert tick.player.stats.hp == 96
        assert tick.report.stat_changes["HP"].requested == -4

    def test_expiry(self, lifecycle, player):
        """A status applied for 3 turns acts 3 times, then is gone."""
        player = player.with_statuses([StatusEffectInstance("bleeding", 3)])
        expired = []
        for _ in range(3):
            tick = lifecycle.tick(player)
            player = tick.player
            expired += tick.expired
        assert player.stats.hp == 94
        assert not player.has_status("bleeding")
        assert expired == ["bleeding"]

    def test_condition_bound_fires_and_clears(self, lifecycle):
        """hungry applies while HUNGER <= 10 and clears once it rises."""
        player = PlayerState(stats=PlayerStats(hunger=5))
        tick = lifecycle.tick(player)
        assert tick.triggered == ["hungry"]
        assert tick.player.get_status("hungry").remaining_duration is None

        # Condition-bound statuses never count down
        tick = lifecycle.tick(tick.player)
        assert tick.player.has_status("hungry")
        assert tick.player.stats.hp == 99

        fed = tick.player.with_stats(tick.player.stats.with_value(StatName.HUNGER, 50))
        tick = lifecycle.tick(fed)
        assert tick.cleared == ["hungry"]
        assert not tick.player.has_status("hungry")

    def test_trigger_not_refired_when_active(self, lifecycle):
        player = PlayerState(stats=PlayerStats(hunger=5), statuses=[StatusEffectInstance("hungry", None)])
        tick = lifecycle.tick(player)
        assert tick.triggered == []
        assert tick.player.get_status("hungry").stacks == 1

    def test_stackable_trigger_stacks_to_limit(self, lifecycle):
        """chill gains a stack each turn FIT stays <= 5, then holds at its limit."""
        player = PlayerState(stats=PlayerStats(fit=3))
        stacks = []
        triggered = []
        for _ in range(5):
            tick = lifecycle.tick(player)
            player = tick.player
            stacks.append(player.get_status("chill").stacks)
            triggered.append(tick.triggered)
        assert stacks == [1, 2, 3, 3, 3]
        assert triggered == [["chill"], ["chill"], ["chill"], [], []]
        assert player.stats.san == 91

    def test_turn_counter(self, lifecycle, player):
        for _ in range(4):
            player = lifecycle.tick(player).player
        assert player.turn_count == 4

    def test_tick_to_death(self, lifecycle):
        player = PlayerState(stats=PlayerStats(hp=2), statuses=[StatusEffectInstance("bleeding", 3)])
        tick = lifecycle.tick(player)
        assert tick.player.stats.hp == 0
        assert tick.player.game_over_reason == "death"
