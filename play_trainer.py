#!/usr/bin/env python3
"""
Pass-and-play PaoHuZi trainer in the terminal.

Usage:
    python play_trainer.py                      # 3 players, you vs two bots
    python play_trainer.py --players 2
    python play_trainer.py --manual 2 --seed 7  # Player 3 is also human
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from paohuzi import (
    Game, GamePhase, ManualSeat, RandomSeat, RulesError,
    THREE_PLAYER_RULES, TWO_PLAYER_RULES,
)
from paohuzi.game import seat_name


HELP = """Commands:
  d        draw
  x N      discard hand tile N
  p        pass on the claim
  g        peng
  c [N]    chi (option N, default 0)
  h        practice Hu check
  q        quit"""


def render(game: Game, seat: int) -> str:
    """Text view of the game for the deciding seat."""
    state = game.get_state()
    lines = []
    lines.append("=" * 60)
    lines.append(f"{state.players} players | Dealer: Player {state.dealer + 1} | "
                 f"Phase: {state.phase.label} | Active: {seat_name(state.current)}")
    lines.append(f"Draw pile: {state.draw_pile_count}")
    lines.append(f"Last discard: {state.last_discard.describe() if state.last_discard else 'None'}")

    for p in range(state.players):
        if p == seat:
            continue
        melds = " ".join(str(m) for m in state.melds[p]) or "none"
        lines.append(f"  P{p + 1}: {state.hand_sizes[p]} cards | melds {melds}")

    lines.append("")
    lines.append(f"{seat_name(seat)} melds: " + (" ".join(str(m) for m in state.melds[seat]) or "none"))
    hand = state.hands.get(seat, ())
    lines.append(f"{seat_name(seat)} hand:")
    for i, tile in enumerate(hand):
        lines.append(f"  [{i:2d}] {tile.describe()}")

    if state.phase == GamePhase.CLAIM_WINDOW and state.claim is not None:
        lines.append("")
        lines.append(f"Claim decision: {seat_name(state.claim.claimer)}")
        for i, option in enumerate(state.claim.chi_options):
            lines.append(f"  chi {i}: {option.describe()}")
        if state.claim.peng is not None:
            lines.append(f"  peng: {state.claim.peng.tile.describe()}")

    lines.append("")
    lines.append("Recent:")
    for msg in reversed(state.log[:6]):
        lines.append(f"  {msg}")
    return "\n".join(lines)


def handle_command(game: Game, seat: int, command: str) -> bool:
    """Apply one command. Returns False when the player quits."""
    parts = command.split()
    if not parts:
        return True
    verb, args = parts[0].lower(), parts[1:]

    if verb == "q":
        return False
    if verb == "d":
        game.draw(seat=seat)
    elif verb == "x":
        index = int(args[0]) if args else None
        game.discard(index, seat=seat)
    elif verb == "p":
        game.respond_pass(seat=seat)
    elif verb == "g":
        game.respond_peng(seat=seat)
    elif verb == "c":
        game.respond_chi(int(args[0]) if args else 0, seat=seat)
    elif verb == "h":
        print("Can Hu!" if game.check_hu(seat) else "Not ready to Hu yet.")
    else:
        print(HELP)
    return True


def play(players: int, manual_seats, seed=None) -> None:
    rules = THREE_PLAYER_RULES if players == 3 else TWO_PLAYER_RULES
    seats = []
    for s in range(players):
        if s == 0 or s in manual_seats:
            seats.append(ManualSeat())
        else:
            seats.append(RandomSeat(None if seed is None else seed + s))

    game = Game(rules, seats=seats, seed=seed)
    game.start_game()
    print(HELP)

    while game.phase != GamePhase.ENDED:
        seat = game.decision_seat()
        print(render(game, seat))
        print(f"Actions: {', '.join(game.valid_actions(seat))}")
        try:
            command = input(f"{seat_name(seat)} > ").strip()
        except EOFError:
            break
        try:
            if not handle_command(game, seat, command):
                break
        except (RulesError, ValueError) as e:
            print(f"Rejected: {e}")

    print()
    print("=" * 60)
    print(game.log.latest or "Bye.")
    print("Thanks for playing!")


def main():
    parser = argparse.ArgumentParser(description="PaoHuZi trainer (pass-and-play)")
    parser.add_argument("--players", type=int, choices=[2, 3], default=3,
                        help="Number of players")
    parser.add_argument("--manual", type=int, nargs="*", default=[],
                        help="Extra human seats by player number (2 or 3)")
    parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    parser.add_argument("--verbose", action="store_true", help="Log engine transitions")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    manual_seats = {n - 1 for n in args.manual if 1 <= n <= args.players}
    play(args.players, manual_seats, seed=args.seed)


if __name__ == "__main__":
    main()
