"""Tests for MCTS invariants."""

import math

import numpy as np
import pytest

from nogo.game import (
    Board,
    BoardGeometry,
    HOLLOW_9X9,
    STANDARD_9X9,
    Move,
    MoveResult,
    PieceType,
    opponent,
)
from nogo.mcts import (
    MCTS,
    Node,
    RolloutResult,
    SearchState,
    backpropagate,
    constant_budget,
    rollout,
    select_child,
    staged_budget,
    uct_score,
)
from nogo.mcts.policy import first_play_record
from nogo.utils import make_rng


class FakeClock:
    """Clock that advances a fixed step every time it is read."""

    def __init__(self, step=0.25):
        self.now = 0.0
        self.step = step

    def __call__(self):
        now = self.now
        self.now += self.step
        return now


def dead_board():
    """1x1 board: the only placement is suicide, so black cannot move."""
    return Board(BoardGeometry.standard(1))


class TestNode:
    def test_initial_state(self):
        node = Node(board=Board())
        assert node.visits == 0
        assert node.wins == 0
        assert node.rave_visits == 0
        assert node.rave_wins == 0
        assert node.is_leaf()
        assert not node.is_terminal()

    def test_expand_creates_one_child_per_legal_move(self):
        board = Board(HOLLOW_9X9)
        node = Node(board=board)
        node.expand(make_rng(0))
        assert len(node.children) == 73
        assert {c.move.position for c in node.children} == set(HOLLOW_9X9.playable)
        for child in node.children:
            assert child.board.to_move == PieceType.WHITE
            assert child.board.stone_count() == 1
        assert board.stone_count() == 0

    def test_expand_is_idempotent(self):
        node = Node(board=Board())
        node.expand(make_rng(0))
        children = list(node.children)
        node.expand(make_rng(1))
        assert node.children == children

    def test_expand_shuffles(self):
        a = Node(board=Board())
        b = Node(board=Board())
        a.expand(make_rng(1))
        b.expand(make_rng(2))
        assert [c.move.position for c in a.children] != [c.move.position for c in b.children]

    def test_terminal_node(self):
        node = Node(board=dead_board())
        node.expand(make_rng(0))
        assert node.is_terminal()
        assert node.children == []

    def test_update(self):
        node = Node(board=Board())
        node.update(True)
        node.update(False)
        node.update_rave(True)
        assert node.visits == 2
        assert node.wins == 1
        assert node.rave_visits == 1
        assert node.rave_wins == 1
        assert node.win_rate == pytest.approx(1 / 3)

    def test_teardown_clears_subtree(self):
        root = Node(board=Board())
        root.expand(make_rng(0))
        child = root.children[0]
        child.expand(make_rng(0))
        assert root.count_nodes() == 1 + 73 + len(child.children)

        root.teardown()
        assert root.children == []
        assert child.children == []
        assert not root.expanded
        assert root.count_nodes() == 1

    def test_teardown_deep_chain(self):
        board = Board()
        root = Node(board=board)
        node = root
        for _ in range(5000):
            nxt = Node(board=board)
            node.children.append(nxt)
            node.expanded = True
            node = nxt
        assert root.count_nodes() == 5001
        root.teardown()
        assert root.count_nodes() == 1


class TestSelection:
    def test_unvisited_child_scores_infinity(self):
        assert uct_score(0, 0, 10) == math.inf
        assert uct_score(0, 0, 10, use_rave=True, rave_visits=5, rave_wins=5) == math.inf

    def test_unvisited_beats_any_visited(self):
        for visits, wins, parent in [(1, 0, 1), (1000, 0, 1001), (3, 3, 100000)]:
            assert uct_score(0, 0, parent) > uct_score(visits, wins, parent)

    def test_uct_formula(self):
        score = uct_score(10, 3, 20, exploration=1.414)
        expected = (10 - 3) / 11 + 1.414 * math.sqrt(math.log(20) / 11)
        assert score == pytest.approx(expected)

    def test_own_view(self):
        score = uct_score(10, 3, 20, exploration=0.0, opponent_view=False)
        assert score == pytest.approx(3 / 11)

    def test_rave_without_rave_visits_is_uct(self):
        plain = uct_score(10, 3, 20)
        blended = uct_score(10, 3, 20, rave_visits=0, rave_wins=0, use_rave=True)
        assert blended == plain

    def test_rave_blend(self):
        b = 0.025
        score = uct_score(10, 3, 20, 30, 12, exploration=0.0, rave_bias=b, use_rave=True)
        beta = 30 / (10 + 30 + 4 * 10 * 30 * b * b)
        expected = (1 - beta) * (7 / 11) + beta * (18 / 31)
        assert score == pytest.approx(expected)
        assert 18 / 31 < score < 7 / 11

    def test_rave_ignored_when_disabled(self):
        assert uct_score(10, 3, 20, 30, 12, use_rave=False) == uct_score(10, 3, 20)

    def test_select_prefers_unvisited(self):
        root = Node(board=Board(), visits=10)
        root.expand(make_rng(0))
        for child in root.children[1:]:
            child.visits = 5
            child.wins = 0
        assert select_child(root, make_rng(0)) is root.children[0]

    def test_select_breaks_ties_randomly(self):
        root = Node(board=Board())
        root.expand(make_rng(0))
        picks = {select_child(root, make_rng(seed)).move.position for seed in range(50)}
        assert len(picks) > 1

    def test_select_from_childless_node(self):
        with pytest.raises(ValueError):
            select_child(Node(board=Board()), make_rng(0))


class TestRollout:
    def test_rollout_terminates_with_stuck_side_losing(self):
        board = Board()
        rng = make_rng(3)
        for _ in range(5):
            result = rollout(board, rng)
            final = board.copy()
            for move in result.moves:
                assert move.apply(final) == MoveResult.LEGAL
            assert final.legal_moves() == []
            assert result.winner == opponent(final.to_move)
            assert result.length == len(result.moves)

    def test_rollout_leaves_board_alone(self):
        board = Board()
        before = board.copy()
        rollout(board, make_rng(0))
        assert board == before

    def test_rollout_on_dead_board(self):
        result = rollout(dead_board(), make_rng(0))
        assert result.winner == PieceType.WHITE
        assert result.moves == []

    def test_rollout_is_reproducible(self):
        a = rollout(Board(), make_rng(11))
        b = rollout(Board(), make_rng(11))
        assert a.moves == b.moves
        assert a.winner == b.winner


class TestBackprop:
    def make_path(self):
        root = Node(board=Board())
        root.expand(make_rng(0))
        child = root.children[0]
        child.expand(make_rng(0))
        grandchild = child.children[0]
        return [root, child, grandchild]

    def test_parity(self):
        path = self.make_path()
        backpropagate(path, RolloutResult(winner=PieceType.BLACK))
        assert [n.visits for n in path] == [1, 1, 1]
        # Black to move at the root and the grandchild, white at the child
        assert [n.wins for n in path] == [1, 0, 1]

        backpropagate(path, RolloutResult(winner=PieceType.WHITE))
        assert [n.visits for n in path] == [2, 2, 2]
        assert [n.wins for n in path] == [1, 1, 1]

    def test_no_rave_updates_without_rave(self):
        path = self.make_path()
        backpropagate(path, RolloutResult(winner=PieceType.BLACK))
        for node in path:
            for child in node.children:
                assert child.rave_visits == 0

    def test_first_play_record(self):
        path = self.make_path()
        first = path[1].move.position
        second = path[2].move.position
        other = next(i for i in HOLLOW_9X9.playable if i not in (first, second))
        playout = [Move.place(first, PieceType.BLACK), Move.place(other, PieceType.BLACK)]
        record = first_play_record(path, playout)
        assert record[first] == 0
        assert record[second] == 1
        assert record[other] == 3

    def test_rave_credit(self):
        root = Node(board=Board())
        root.expand(make_rng(0))
        a = root.children[0]
        a.expand(make_rng(0))
        p = a.move.position
        q, r = [c.move.position for c in a.children if c.move.position != p][:2]

        # Ply 0: black p (tree), ply 1: white q, ply 2: black r
        result = RolloutResult(
            winner=PieceType.BLACK,
            moves=[Move.place(q, PieceType.WHITE), Move.place(r, PieceType.BLACK)],
        )
        backpropagate([root, a], result, use_rave=True)

        root_children = {c.move.position: c for c in root.children}
        a_children = {c.move.position: c for c in a.children}

        # Root children are black moves: credited for black's first plays
        assert root_children[p].rave_visits == 1
        assert root_children[r].rave_visits == 1
        assert root_children[q].rave_visits == 0
        assert root_children[r].rave_wins == 0  # stats are white's (to move there)

        # Children of `a` are white moves: credited for white's first plays
        assert a_children[q].rave_visits == 1
        assert a_children[q].rave_wins == 1
        assert a_children[r].rave_visits == 0


class TestSearch:
    def test_requires_a_limit(self):
        with pytest.raises(ValueError):
            MCTS(rng=make_rng(0)).search(Board())

    def test_root_visits_equal_iterations(self):
        mcts = MCTS(rng=make_rng(0))
        root = mcts.search(Board(), max_iterations=60)
        assert root.visits == 60
        assert sum(c.visits for c in root.children) == 60
        assert mcts.last_stats.iterations == 60
        assert mcts.last_stats.root_visits == 60
        assert mcts.state == SearchState.FINISHED
        mcts.teardown()

    def test_root_visits_with_rave(self):
        mcts = MCTS(rng=make_rng(0), use_rave=True)
        root = mcts.search(Board(), max_iterations=40)
        assert root.visits == 40
        assert any(c.rave_visits > 0 for c in root.children)
        mcts.teardown()

    def test_search_does_not_mutate_board(self):
        board = Board()
        board.place(HOLLOW_9X9.parse("E5"))
        before = board.copy()
        MCTS(rng=make_rng(0)).take_action(board, max_iterations=30)
        assert board == before

    def test_deterministic_with_seed(self):
        a = MCTS(rng=make_rng(42)).take_action(Board(), max_iterations=200)
        b = MCTS(rng=make_rng(42)).take_action(Board(), max_iterations=200)
        assert a == b

    def test_deterministic_with_fake_clock(self):
        moves = []
        for _ in range(2):
            mcts = MCTS(rng=make_rng(5), use_rave=True, clock=FakeClock(step=0.25))
            moves.append(mcts.take_action(Board(), budget=10.0))
        assert moves[0] == moves[1]

    def test_budget_with_fake_clock(self):
        mcts = MCTS(rng=make_rng(0), clock=FakeClock(step=0.25))
        root = mcts.search(Board(), budget=1.0)
        # Deadline checks read 0.25, 0.5, 0.75, then 1.0 stops the loop
        assert mcts.last_stats.iterations == 3
        assert root.visits == 3
        mcts.teardown()

    def test_iteration_cap_beats_budget(self):
        mcts = MCTS(rng=make_rng(0), clock=FakeClock(step=0.001))
        root = mcts.search(Board(), budget=100.0, max_iterations=5)
        assert root.visits == 5
        mcts.teardown()

    def test_take_action_returns_legal_move(self):
        board = Board()
        move = MCTS(rng=make_rng(1)).take_action(board, max_iterations=100)
        assert not move.is_pass
        assert move.color == PieceType.BLACK
        assert move.apply(board.copy()) == MoveResult.LEGAL

    def test_zero_budget_still_returns_a_move(self):
        board = Board()
        move = MCTS(rng=make_rng(0)).take_action(board, budget=0.0)
        assert not move.is_pass
        assert move.apply(board.copy()) == MoveResult.LEGAL

    def test_budget_below_clock_step_still_returns_a_move(self):
        # The first deadline check is already past the deadline
        mcts = MCTS(rng=make_rng(0), clock=FakeClock(step=2.0))
        root = mcts.search(Board(), budget=1.0)
        assert mcts.last_stats.iterations == 0
        assert root.children
        move = mcts.best_move(root)
        # No child was visited, so the tie goes to the lowest position
        assert move == Move.place(0, PieceType.BLACK)
        mcts.teardown()

    @pytest.mark.parametrize("use_rave", [False, True])
    def test_finds_winning_move(self, use_rave):
        # Three cells in a line: black in the middle leaves white only
        # suicidal ends, black on an end loses to white on the other end
        line = BoardGeometry(size=3, hollow=frozenset({3, 4, 5, 6, 7, 8}))
        board = Board(line)
        move = MCTS(rng=make_rng(0), use_rave=use_rave).take_action(board, max_iterations=30)
        assert move.position == 1
        assert move.color == PieceType.BLACK

    def test_take_action_tears_tree_down(self):
        mcts = MCTS(rng=make_rng(0))
        mcts.take_action(Board(), max_iterations=20)
        assert mcts.root is None
        assert mcts.state == SearchState.IDLE
        assert mcts.last_stats.iterations == 20

    def test_teardown(self):
        mcts = MCTS(rng=make_rng(0))
        root = mcts.search(Board(), max_iterations=100)
        child = max(root.children, key=lambda c: c.visits)
        mcts.teardown()
        assert root.children == []
        assert child.children == []
        assert mcts.root is None

    def test_pass_sentinel_on_terminal_board(self):
        board = dead_board()
        move = MCTS(rng=make_rng(0)).take_action(board, max_iterations=10)
        assert move.is_pass
        assert move.color == PieceType.BLACK

    def test_best_move_most_visited(self):
        mcts = MCTS(rng=make_rng(0))
        root = Node(board=Board(STANDARD_9X9))
        root.expand(make_rng(3))
        target = next(c for c in root.children if c.move.position == 40)
        target.visits = 5
        assert mcts.best_move(root).position == 40
        assert mcts.last_stats.best_visits == 5

    def test_best_move_ties_go_to_lowest_position(self):
        mcts = MCTS(rng=make_rng(0))
        root = Node(board=Board(STANDARD_9X9))
        root.expand(make_rng(3))
        for child in root.children:
            child.visits = 2
        assert mcts.best_move(root).position == 0


class TestBudget:
    def test_constant(self):
        policy = constant_budget(0.5)
        assert policy(0) == 0.5
        assert policy(60) == 0.5

    def test_staged(self):
        policy = staged_budget([(4, 0.3), (30, 1.2)], default=0.5)
        assert policy(0) == 0.3
        assert policy(3) == 0.3
        assert policy(4) == 1.2
        assert policy(29) == 1.2
        assert policy(30) == 0.5

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            constant_budget(0)
        with pytest.raises(ValueError):
            staged_budget([(4, -1.0)], default=0.5)
        with pytest.raises(ValueError):
            staged_budget([], default=0)
