"""Tests for agents and players."""

import pytest

from nogo.agents import (
    Agent,
    MCTSPlayer,
    Player,
    RandomAgent,
    RandomPlayer,
    create_agent,
    parse_args,
)
from nogo.game import Board, BoardGeometry, Move, MoveResult, PieceType
from nogo.mcts import constant_budget
from nogo.utils import make_rng


class FakeClock:
    def __init__(self, step=0.25):
        self.now = 0.0
        self.step = step

    def __call__(self):
        now = self.now
        self.now += self.step
        return now


class TestAgent:
    def test_parse_args(self):
        assert parse_args("name=x role=black seed=3") == {"name": "x", "role": "black", "seed": "3"}
        assert parse_args("a=1 a=2")["a"] == "2"
        assert parse_args("flag")["flag"] == "flag"
        assert parse_args("") == {}

    def test_defaults(self):
        agent = Agent()
        assert agent.name == "unknown"
        assert agent.role == "unknown"

    def test_properties(self):
        agent = Agent("name=tester budget=0.5 iterations=100")
        assert agent.name == "tester"
        assert agent.property("budget") == "0.5"
        assert agent.get_float("budget") == 0.5
        assert agent.get_int("iterations") == 100
        assert agent.get_float("missing", 1.5) == 1.5
        assert agent.get_int("missing") is None

    def test_name_and_role_read_meta(self):
        import nogo.agents

        agent = nogo.agents.Agent("name=x")
        assert agent.name == "x"
        assert agent.role == "unknown"
        assert agent.property("name") == "x"
        assert isinstance(type(agent).__dict__["name"], property)

    def test_notify(self):
        agent = Agent("name=a")
        agent.notify("budget=2")
        assert agent.get_float("budget") == 2.0

    def test_base_action_is_pass(self):
        move = Agent().take_action(Board())
        assert move.is_pass


class TestPlayer:
    def test_role(self):
        assert RandomPlayer("role=black").who == PieceType.BLACK
        assert RandomPlayer("role=white").who == PieceType.WHITE

    @pytest.mark.parametrize("role", ["", "role=red", "role=unknown"])
    def test_invalid_role(self, role):
        with pytest.raises(ValueError):
            RandomPlayer(role)

    @pytest.mark.parametrize("name", ["a[b", "a(b", "a:b", "a;b", "a)b", "a]b"])
    def test_invalid_name(self, name):
        with pytest.raises(ValueError):
            Player(f"name={name} role=black")

    def test_pass_move(self):
        player = RandomPlayer("role=white")
        move = player.pass_move()
        assert move.is_pass
        assert move.color == PieceType.WHITE

    def test_seed_reproducible(self):
        a = RandomPlayer("role=black seed=4")
        b = RandomPlayer("role=black seed=4")
        assert a.take_action(Board()) == b.take_action(Board())

    def test_notify_seed_reseeds(self):
        player = RandomAgent("seed=1")
        player.notify("seed=5")
        assert player.rng.integers(1 << 30) == make_rng(5).integers(1 << 30)


class TestRandomPlayer:
    def test_plays_legal_move(self):
        board = Board()
        player = RandomPlayer("role=black seed=0")
        for _ in range(10):
            move = player.take_action(board)
            assert move.color == PieceType.BLACK
            assert move.apply(board.copy()) == MoveResult.LEGAL

    def test_does_not_mutate_board(self):
        board = Board()
        before = board.copy()
        RandomPlayer("role=black seed=0").take_action(board)
        assert board == before

    def test_pass_when_stuck(self):
        board = Board(BoardGeometry.standard(1))
        assert RandomPlayer("role=black").take_action(board).is_pass


class TestMCTSPlayer:
    def test_name(self):
        assert MCTSPlayer("role=black").name == "mcts"

    def test_plays_legal_move(self):
        board = Board()
        player = MCTSPlayer("role=black iterations=50 seed=1")
        move = player.take_action(board)
        assert move.color == PieceType.BLACK
        assert move.apply(board.copy()) == MoveResult.LEGAL
        assert player.last_stats.iterations == 50

    def test_wrong_turn_passes(self):
        player = MCTSPlayer("role=white iterations=10")
        assert player.take_action(Board()).is_pass

    def test_budget_sources(self):
        board = Board()
        assert MCTSPlayer("role=black").budget_for(board) == 0.8
        assert MCTSPlayer("role=black budget=0.2").budget_for(board) == 0.2
        assert MCTSPlayer("role=black iterations=5").budget_for(board) is None
        policy_player = MCTSPlayer("role=black", budget_policy=constant_budget(0.3))
        assert policy_player.budget_for(board) == 0.3
        override = MCTSPlayer("role=black budget=0.1", budget_policy=constant_budget(0.3))
        assert override.budget_for(board) == 0.1
        capped = MCTSPlayer("role=black iterations=5", budget_policy=constant_budget(0.3))
        assert capped.budget_for(board) is None

    def test_iterations_replace_budget_policy(self):
        player = MCTSPlayer(
            "role=black iterations=7 seed=1",
            budget_policy=constant_budget(0.3),
            clock=FakeClock(step=1.0),
        )
        player.take_action(Board())
        assert player.last_stats.iterations == 7

    @pytest.mark.parametrize("budget", ["0", "-1", "0.0"])
    def test_non_positive_budget_rejected(self, budget):
        with pytest.raises(ValueError):
            MCTSPlayer(f"role=black budget={budget}").budget_for(Board())
        player = MCTSPlayer("role=black")
        player.notify(f"budget={budget}")
        with pytest.raises(ValueError):
            player.take_action(Board())

    def test_budget_with_fake_clock(self):
        player = MCTSPlayer("role=black budget=1.0 seed=2", clock=FakeClock())
        player.take_action(Board())
        assert player.last_stats.iterations == 3

    def test_rave_and_exploration_from_args(self):
        player = MCTSPlayer("role=black iterations=10 rave=1 c=0.5 rave_bias=0.1")
        player.take_action(Board())
        assert player.mcts.use_rave
        assert player.mcts.exploration == 0.5
        assert player.mcts.rave_bias == 0.1

    def test_same_seed_same_move(self):
        a = MCTSPlayer("role=black iterations=100 seed=9").take_action(Board())
        b = MCTSPlayer("role=black iterations=100 seed=9").take_action(Board())
        assert a == b

    def test_notify_seed_reaches_search(self):
        player = MCTSPlayer("role=black")
        player.notify("seed=3")
        assert player.mcts.rng is player.rng

    def test_pass_on_terminal_board(self):
        board = Board(BoardGeometry.standard(1))
        move = MCTSPlayer("role=black iterations=5").take_action(board)
        assert move == Move.pass_move(PieceType.BLACK, board.geometry)


class TestCreateAgent:
    def test_mcts(self):
        assert isinstance(create_agent("name=mcts role=black"), MCTSPlayer)

    def test_random(self):
        assert isinstance(create_agent("role=white"), RandomPlayer)
        assert isinstance(create_agent("name=random role=white"), RandomPlayer)

    def test_invalid_role(self):
        with pytest.raises(ValueError):
            create_agent("name=mcts")
