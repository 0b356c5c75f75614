#!/usr/bin/env python3
"""
Terminal front end for patience games.

Run ``patience --variant klondike --seed 42`` to play, or ``patience --demo``
for a quick look at a card and a fresh deal.
"""

import argparse
import logging
import shlex
import sys
from typing import List, Optional

from patience import api
from patience.common.card import Card, Rank, Suit
from patience.common.io_interface import ConsoleIOInterface, IOInterface
from patience.errors import PatienceError
from patience.events import EngineEventType
from patience.solitaire.pile import PileKind
from patience.solitaire.state import GameState, GameStatus, GameView, PileView
from patience.variants import RuleSetRegistry

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  m <from> <to> [n]   move n cards (default 1)
  d                   deal from the stock (turns the waste over when empty)
  f <pile>            turn over the top card of a tableau pile
  u / r               undo / redo
  h                   list legal moves
  s                   check whether any move is left
  q                   quit
Piles: s (stock), w (waste), t1..t8 (tableau), c1..c4 (free cells),
       fh fd fc fs (foundations), or full pile ids."""


def resolve_pile(state: GameState, name: str) -> str:
    """Expand a short pile name such as ``t3`` or ``fh`` to a pile id."""
    name = name.lower()
    if name in state.piles:
        return name
    aliases = {"s": "stock", "w": "waste"}
    if name in aliases:
        return aliases[name]
    if name[:1] == "t" and name[1:].isdigit():
        return f"tableau-{name[1:]}"
    if name[:1] == "c" and name[1:].isdigit():
        return f"cell-{name[1:]}"
    if name[:1] == "f" and len(name) == 2:
        try:
            return f"foundation-{Suit.from_letter(name[1]).name.lower()}"
        except ValueError:
            pass
    return name


def render_pile(pile: PileView) -> str:
    if not pile.cards:
        return "--"
    return " ".join(str(card) for card in pile.cards)


def render_view(view: GameView) -> str:
    """Lay out a game view as text."""
    lines = [f"{view.rule_set.title()}  score {view.score}  moves {view.moves}"]
    by_kind = {}
    for pile in view.piles:
        by_kind.setdefault(pile.kind, []).append(pile)

    for pile in by_kind.get(PileKind.STOCK, []):
        lines.append(f"Stock: {len(pile.cards)} card(s)")
    for pile in by_kind.get(PileKind.WASTE, []):
        lines.append(f"Waste: {' '.join(str(card) for card in pile.cards[-3:]) or '--'}")
    if PileKind.FREE_CELL in by_kind:
        cells = [str(p.top) if p.top else "--" for p in by_kind[PileKind.FREE_CELL]]
        lines.append(f"Cells: {' '.join(cells)}")
    foundations = [
        f"{pile.suit}:{pile.top if pile.top else '--'}"
        for pile in by_kind.get(PileKind.FOUNDATION, [])
    ]
    lines.append(f"Foundations: {' '.join(foundations)}")
    for index, pile in enumerate(by_kind.get(PileKind.TABLEAU, []), start=1):
        lines.append(f"  t{index}: {render_pile(pile)}")

    if view.status is not GameStatus.IN_PROGRESS:
        lines.append(f"Status: {view.status.name}")
    return "\n".join(lines)


class PatienceCLI:
    """Interactive command loop around one game."""

    def __init__(self, state: GameState, io_interface: Optional[IOInterface] = None):
        self.state = state
        self.io = io_interface or ConsoleIOInterface()

    def run(self) -> GameStatus:
        events = self.state.event_bus
        game_id = self.state.id
        events.on(EngineEventType.CARD_REVEALED, self._on_revealed, game_id=game_id)
        events.on(EngineEventType.STOCK_RECYCLED, self._on_recycled, game_id=game_id)
        try:
            self._loop()
        finally:
            events.remove_all_listeners(game_id=game_id)
        return self.state.status

    def _loop(self) -> None:
        self.io.output(render_view(self.state.view()))
        while True:
            try:
                line = self.io.input("> ").strip()
            except EOFError:
                break
            if not line:
                continue
            if line.lower() in ("q", "quit"):
                break
            try:
                changed = self.handle(line)
            except PatienceError as exc:
                self.io.output(str(exc))
                continue
            except ValueError as exc:
                self.io.output(f"Could not read command: {exc}")
                continue
            if changed:
                self.io.output(render_view(self.state.view()))
            if self.state.status is GameStatus.WON:
                self.io.output("You won!")
                break

    def _on_revealed(self, data) -> None:
        self.io.output(f"Turned over {data['card']}")

    def _on_recycled(self, data) -> None:
        self.io.output("Waste turned back into the stock")

    def handle(self, line: str) -> bool:
        """Run one command. Returns True when the board changed."""
        parts = shlex.split(line)
        command, args = parts[0].lower(), parts[1:]

        if command == "m" and len(args) in (2, 3):
            if len(args) == 3 and not args[2].isdigit():
                self.io.output(HELP_TEXT)
                return False
            count = int(args[2]) if len(args) == 3 else 1
            api.apply_move(
                self.state,
                resolve_pile(self.state, args[0]),
                resolve_pile(self.state, args[1]),
                count,
            )
            return True
        if command == "d":
            self.deal()
            return True
        if command == "f" and len(args) == 1:
            api.reveal(self.state, resolve_pile(self.state, args[0]))
            return True
        if command == "u":
            api.undo(self.state)
            return True
        if command == "r":
            api.redo(self.state)
            return True
        if command == "h":
            moves = api.legal_moves(self.state)
            self.io.output("\n".join(str(move) for move in moves) or "No legal moves")
            return False
        if command == "s":
            view = api.detect_stuck(self.state)
            self.io.output(
                "No moves left" if view.status is GameStatus.STUCK else "Moves remain"
            )
            return False

        self.io.output(HELP_TEXT)
        return False

    def deal(self) -> None:
        if "stock" not in self.state.piles:
            self.io.output("This game has no stock")
            return
        stock = self.state.pile("stock")
        waste = self.state.pile("waste")
        if stock.is_empty():
            api.apply_move(self.state, "waste", "stock", waste.size)
        else:
            count = min(self.state.rules.options.draw_count, stock.size)
            api.apply_move(self.state, "stock", "waste", count)


def run_demo(io: IOInterface, variant: str, seed: Optional[int]) -> None:
    card = Card(Suit.HEARTS, Rank.ACE)
    io.output(f"Created a card: {card}")
    io.output(f"Card is face {'up' if card.is_face_up else 'down'}")
    card.flip()
    io.output(f"After flip, card is face {'up' if card.is_face_up else 'down'}")
    io.output(render_view(api.get_view(api.new_game(variant, seed))))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play patience in the terminal")
    parser.add_argument(
        "--variant",
        choices=RuleSetRegistry.list_rule_sets(),
        default="klondike",
        help="Rule set to play",
    )
    parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    parser.add_argument(
        "--draw",
        type=int,
        choices=(1, 3),
        default=None,
        help="Cards dealt from the stock at a time (Klondike)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level",
    )
    parser.add_argument(
        "--demo", action="store_true", help="Show a card and a fresh deal, then exit"
    )
    return parser


def main(argv: Optional[List[str]] = None, io_interface: Optional[IOInterface] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    io = io_interface or ConsoleIOInterface()

    if args.demo:
        run_demo(io, args.variant, args.seed)
        return 0

    options = {}
    if args.draw is not None:
        if args.variant != "klondike":
            io.output("--draw only applies to Klondike")
            return 2
        options["draw_count"] = args.draw

    state = api.new_game(args.variant, args.seed, **options)
    logger.info("Started %s game %s (seed %s)", args.variant, state.id, args.seed)
    PatienceCLI(state, io).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
