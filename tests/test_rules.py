"""
Tests for the tile model, claim resolution and the Hu check
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from paohuzi.tiles import Tile, TileSet, TileSuit, small, big, parse_tiles, tiles_to_counts
from paohuzi.player import Player, Meld, MeldType
from paohuzi.wall import Wall
from paohuzi.rules import TableRules, THREE_PLAYER_RULES, TWO_PLAYER_RULES
from paohuzi.claims import (
    PengOption, ChiOption, iter_chi_options, find_chi_options, find_claim, claim_order,
    legal_claims,
)
from paohuzi.hu import can_hu, can_hu_counts


class TestTiles:
    """Test tile system"""

    def test_tile_creation(self):
        """Test creating tiles"""
        t1 = small(1)
        assert t1.suit == TileSuit.SMALL
        assert t1.rank == 1

        t2 = big(10)
        assert t2.suit == TileSuit.BIG
        assert t2.rank == 10

    def test_invalid_rank(self):
        """Ranks outside 1-10 are rejected"""
        with pytest.raises(ValueError):
            small(0)
        with pytest.raises(ValueError):
            big(11)

    def test_equality_ignores_instance(self):
        """Physical copies of a tile are interchangeable"""
        assert small(5, 3) == small(5, 17)
        assert hash(small(5, 3)) == hash(small(5, 17))
        assert small(5) != big(5)

    def test_canonical_order(self):
        """Small sorts before Big, then ascending rank"""
        tiles = [big(1), small(10), big(3), small(2)]
        assert sorted(tiles) == [small(2), small(10), big(1), big(3)]

    def test_tile_index(self):
        """Test tile index calculation"""
        assert small(1).tile_index == 0
        assert small(10).tile_index == 9
        assert big(1).tile_index == 10
        assert big(10).tile_index == 19
        assert Tile.from_index(13) == big(4)

    def test_tile_from_string(self):
        """Test parsing tiles from strings"""
        assert Tile.from_string("s5") == small(5)
        assert Tile.from_string("B10") == big(10)
        assert Tile.from_string("Small 7") == small(7)
        assert Tile.from_string("五") == small(5)
        assert Tile.from_string("伍") == big(5)
        with pytest.raises(ValueError):
            Tile.from_string("x3")
        assert parse_tiles("s2 s7 s10") == [small(2), small(7), small(10)]

    def test_labels(self):
        """Bilingual labels"""
        assert small(5).label() == ("Small 5", "五", "wǔ")
        assert big(10).label() == ("Big 10", "拾", "shí")
        assert small(5).describe() == "Small 5 - 五 (wǔ)"


class TestTileSet:
    """Test TileSet operations"""

    def test_create_full_set(self):
        """80 tiles, 4 of each kind, unique instance ids"""
        tiles = TileSet.create_full_set()
        assert len(tiles) == 80
        assert len({t.id for t in tiles}) == 80
        counts = tiles.to_count_array()
        assert counts.shape == (20,)
        assert np.all(counts == 4)

    def test_remove_returns_instance(self):
        """Removing by value hands back the physical tile"""
        tiles = TileSet([small(3, 10), small(4, 11)])
        removed = tiles.remove(small(3))
        assert removed.id == 10
        assert tiles.remove(small(9)) is None
        assert len(tiles) == 1

    def test_counts(self):
        """Test counting tiles"""
        tiles = TileSet([small(1), small(1), big(2)])
        assert tiles.count(small(1)) == 2
        assert tiles.count(big(1)) == 0
        counts = tiles_to_counts(tiles)
        assert counts[0] == 2
        assert counts[11] == 1


class TestWall:
    """Test wall operations"""

    def test_wall_creation(self):
        """Test wall creation"""
        wall = Wall(seed=1)
        assert wall.remaining == 80

    def test_deal_hands(self):
        """Dealer gets 21, others 20"""
        wall = Wall(seed=1)
        hands = wall.deal_hands(3, dealer=0)
        assert [len(h) for h in hands] == [21, 20, 20]
        assert wall.remaining == 80 - 61

    def test_deal_two_players_dealer_second(self):
        """The extra tile follows the dealer seat"""
        wall = Wall(seed=1)
        hands = wall.deal_hands(2, dealer=1)
        assert [len(h) for h in hands] == [20, 21]
        assert wall.remaining == 39

    def test_seeded_shuffle(self):
        """Same seed, same wall"""
        assert [t.id for t in Wall(seed=7).tiles] == [t.id for t in Wall(seed=7).tiles]
        assert [t.id for t in Wall(seed=7).tiles] != [t.id for t in Wall(seed=8).tiles]

    def test_draw_until_empty(self):
        """Draw pile shrinks monotonically and then yields None"""
        wall = Wall(seed=3)
        drawn = wall.draw_many(100)
        assert len(drawn) == 80
        assert wall.is_empty
        assert wall.draw() is None


class TestRules:
    """Test table configuration"""

    def test_presets(self):
        assert THREE_PLAYER_RULES.num_players == 3
        assert TWO_PLAYER_RULES.num_players == 2
        assert THREE_PLAYER_RULES.tiles_dealt == 61

    def test_invalid_configuration(self):
        """Only 2 or 3 seats, dealer must be seated"""
        with pytest.raises(ValueError):
            TableRules(num_players=4)
        with pytest.raises(ValueError):
            TableRules(num_players=2, dealer=2)
        with pytest.raises(ValueError):
            TableRules(num_players=3, hand_size=40)


class TestMeld:
    """Test meld validation"""

    def test_peng(self):
        meld = Meld(MeldType.PENG, [small(5), small(5), small(5)])
        assert meld.ranks == (5, 5, 5)

    def test_chi_runs(self):
        """Consecutive runs and 2-7-10 are valid Chi melds"""
        assert Meld(MeldType.CHI, [small(8), small(6), small(7)]).ranks == (6, 7, 8)
        assert Meld(MeldType.CHI, [big(10), big(2), big(7)]).ranks == (2, 7, 10)

    def test_invalid_melds(self):
        with pytest.raises(ValueError):
            Meld(MeldType.PENG, [small(5), small(5)])
        with pytest.raises(ValueError):
            Meld(MeldType.PENG, [small(5), small(5), big(5)])
        with pytest.raises(ValueError):
            Meld(MeldType.CHI, [small(1), small(2), big(3)])
        with pytest.raises(ValueError):
            Meld(MeldType.CHI, [small(1), small(3), small(5)])


class TestPlayer:
    """Test hand management"""

    def test_hand_stays_sorted(self):
        player = Player(0)
        for tile in [big(2), small(9), small(1)]:
            player.add_tile(tile)
        assert player.get_hand_tiles() == [small(1), small(9), big(2)]
        assert player.discard_at(1) == small(9)
        assert player.get_hand_tiles() == [small(1), big(2)]

    def test_remove_tiles_all_or_nothing(self):
        """A missing tile leaves the hand untouched"""
        player = Player(0)
        for tile in [small(5), small(6)]:
            player.add_tile(tile)
        with pytest.raises(ValueError):
            player.remove_tiles([small(5), small(5)])
        assert len(player.hand) == 2
        assert player.remove_tiles([small(6)]) == [small(6)]


class TestChiFinder:
    """Test Chi option enumeration"""

    def test_single_run(self):
        """Small-6 against Small-7 and Small-8"""
        options = find_chi_options([small(7), small(8)], small(6))
        assert len(options) == 1
        assert options[0].ranks == (6, 7, 8)
        assert options[0].cards == (small(7), small(8), small(6))

    def test_all_run_patterns_in_order(self):
        """Discard low, middle, high of a run"""
        hand = [small(4), small(5), small(7), small(8), big(2)]
        options = find_chi_options(hand, small(6))
        assert [o.ranks for o in options] == [(4, 5, 6), (5, 6, 7), (6, 7, 8)]

    def test_special_run(self):
        """2-7-10 is offered when the discard is one of those ranks"""
        options = find_chi_options([small(2), small(10)], small(7))
        assert [o.ranks for o in options] == [(2, 7, 10)]

    def test_edge_ranks_skip_out_of_range_patterns(self):
        """Patterns leaving 1-10 are skipped, not clamped"""
        assert [o.ranks for o in find_chi_options([small(2), small(3)], small(1))] == [(1, 2, 3)]
        hand = [small(8), small(9), small(2), small(7)]
        assert [o.ranks for o in find_chi_options(hand, small(10))] == [(8, 9, 10), (2, 7, 10)]

    def test_other_suit_ignored(self):
        assert find_chi_options([big(7), big(8)], small(6)) == []

    def test_duplicates_collapse(self):
        """Several copies of a rank give one option per rank triple"""
        hand = [small(7, 1), small(7, 2), small(8, 3), small(8, 4)]
        options = find_chi_options(hand, small(6))
        assert len(options) == 1
        # first matching instance is used
        assert options[0].cards[0].id == 1

    def test_lazy_and_single_pass(self):
        """The finder is a generator that can be consumed once"""
        it = iter_chi_options([small(7), small(8)], small(6))
        assert len(list(it)) == 1
        assert list(it) == []


class TestClaimPriority:
    """Test the claim priority resolver"""

    def test_claim_order(self):
        assert claim_order(0, 3) == [1, 2]
        assert claim_order(2, 3) == [0, 1]
        assert claim_order(1, 2) == [0]

    def test_peng_for_next_seat(self):
        """Small-5 discarded, next seat holds two Small-5"""
        hands = [[big(1)], [small(5), small(5), big(9)], [big(3)]]
        claim = find_claim(hands, 0, small(5))
        assert claim.claimer == 1
        assert claim.discarder == 0
        assert claim.options == (PengOption(small(5)),)

    def test_first_eligible_seat_wins(self):
        """A Chi for the next seat beats a Peng further round the table"""
        hands = [[big(1)], [small(7), small(8)], [small(6), small(6)]]
        claim = find_claim(hands, 0, small(6))
        assert claim.claimer == 1
        assert all(isinstance(o, ChiOption) for o in claim.options)

    def test_only_next_seat_may_chi(self):
        """Later seats are offered Peng only"""
        hands = [[big(1)], [big(2)], [small(6), small(6), small(7), small(8)]]
        claim = find_claim(hands, 0, small(6))
        assert claim.claimer == 2
        assert claim.options == (PengOption(small(6)),)

        hands = [[big(1)], [big(2)], [small(7), small(8)]]
        assert find_claim(hands, 0, small(6)) is None

    def test_peng_listed_before_chi(self):
        hands = [[big(1)], [small(6), small(6), small(7), small(8)], []]
        claim = find_claim(hands, 0, small(6))
        assert isinstance(claim.options[0], PengOption)
        assert claim.option_names == ["peng", "chi"]
        assert [o.ranks for o in claim.chi_options] == [(6, 7, 8)]

    def test_discarder_excluded(self):
        hands = [[], [small(6), small(6)], []]
        assert find_claim(hands, 1, small(6)) is None

    def test_wraps_around(self):
        """After the last seat the next seat is seat 0"""
        hands = [[small(3), small(4)], [small(5), small(5)], [big(1)]]
        claim = find_claim(hands, 2, small(5))
        assert claim.claimer == 0
        assert [o.ranks for o in claim.chi_options] == [(3, 4, 5)]

    def test_no_discard(self):
        assert find_claim([[], [], []], 0, None) is None

    def test_exclusive_and_earliest(self):
        """Property: the granted seat is the earliest one with any option"""
        rng = np.random.default_rng(0)
        deck = list(TileSet.create_full_set())
        for _ in range(200):
            order = rng.permutation(len(deck))
            tiles = [deck[i] for i in order]
            hands = [tiles[0:20], tiles[20:40], tiles[40:60]]
            discarder = int(rng.integers(3))
            discard = tiles[60]
            claim = find_claim(hands, discarder, discard)

            seats = claim_order(discarder, 3)
            eligible = [s for s in seats
                        if legal_claims(hands[s], discard, allow_chi=(s == seats[0]))]
            if eligible:
                assert claim.claimer == eligible[0]
            else:
                assert claim is None


class TestHuCheck:
    """Test the winning-hand decomposition search"""

    def test_triplet(self):
        assert can_hu([small(5), small(5), small(5)])

    def test_special_run(self):
        assert can_hu([small(2), small(7), small(10)])

    def test_empty_hand(self):
        assert can_hu([])

    def test_singleton(self):
        assert not can_hu([small(5)])
        assert not can_hu([small(5), small(5)])

    def test_mixed_groups(self):
        assert can_hu([small(1), small(2), small(3), big(4), big(4), big(4)])
        assert can_hu([small(8), small(9), small(10)])

    def test_suits_do_not_mix(self):
        assert not can_hu([small(1), small(2), big(3)])
        assert not can_hu([small(2), small(7), big(10)])

    def test_no_wraparound_runs(self):
        assert not can_hu([small(9), small(10), small(1)])

    def test_backtracks_out_of_triplet(self):
        """Taking the triplet first fails; runs plus 2-7-10 succeed"""
        hand = parse_tiles("s2 s2 s2 s3 s3 s4 s4 s7 s10")
        assert can_hu(hand)

    def test_full_hand_of_triplets(self):
        hand = []
        for rank in (1, 3, 5, 7):
            hand += [small(rank)] * 3
        for rank in (2, 4, 6):
            hand += [big(rank)] * 3
        assert len(hand) == 21
        assert can_hu(hand)

    def test_leftover_tile(self):
        hand = parse_tiles("s1 s2 s3 b5 b5 b5 b9")
        assert not can_hu(hand)

    def test_counts_snapshot_untouched(self):
        counts = tiles_to_counts(parse_tiles("s2 s2 s2 s3 s3 s4 s4 s7 s10"))
        before = counts.copy()
        assert can_hu_counts(counts)
        assert np.array_equal(counts, before)

    def test_bad_snapshot(self):
        with pytest.raises(ValueError):
            can_hu_counts(np.zeros(34, dtype=np.int8))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
