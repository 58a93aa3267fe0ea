"""
Tests for agent implementations.

Tests greedy action selection, QLearner and EvolutionaryAgent for:
- Agent interface compliance
- Temporal difference update and first-visit blending
- Exploration schedule and seed reproducibility
- Failure on non-finite values
"""
import math

import numpy as np
import pytest
import torch

from rl_algorithms.exceptions import ConfigurationError, NonFiniteValueError
from rl_algorithms.networks import NetworkBuilder
from rl_algorithms.players.base import BaseAgent, greedy_action
from rl_algorithms.players.evolutionary import EvolutionaryAgent
from rl_algorithms.players.q_learner import QLearner


class TestGreedyAction:
    """Tests for the greedy_action helper."""

    def test_picks_maximum(self):
        """Test that the largest value wins."""
        assert greedy_action([0.1, 0.7, 0.3]) == 1

    def test_first_index_on_tie(self):
        """Test that ties go to the first index."""
        assert greedy_action([0.5, 0.9, 0.9]) == 1

    def test_tolerance_tie(self):
        """Test that values within machine epsilon count as equal."""
        values = [1.0, 1.0 + np.finfo(float).eps / 2]
        assert greedy_action(values) == 0

    def test_zero_tolerance(self):
        """Test exact comparison when tolerance is zero."""
        assert greedy_action([1.0, 1.0 + 1e-9], tolerance=0.0) == 1

    def test_accepts_tensor(self):
        """Test tensor input."""
        assert greedy_action(torch.tensor([0.0, -1.0, 2.0])) == 2

    def test_nan_raises(self):
        """Test that NaN fails loudly."""
        with pytest.raises(NonFiniteValueError, match="finite"):
            greedy_action([0.0, float('nan')])

    def test_inf_raises(self):
        """Test that inf fails loudly."""
        with pytest.raises(NonFiniteValueError):
            greedy_action([float('inf'), 0.0])

    def test_empty_raises(self):
        """Test that an empty vector fails."""
        with pytest.raises(NonFiniteValueError, match="empty"):
            greedy_action([])


class TestQLearner:
    """Tests for QLearner."""

    def test_init(self, learner):
        """Test learner initialization."""
        assert learner.actions == 2
        assert learner.lr == 0.1
        assert learner.gamma == 0.1
        assert learner.epsilon == 1.0
        assert learner.epsilon_threshold == 0.1
        assert learner.q_table == {}
        assert learner.exploring

    def test_is_agent(self, learner):
        """Test interface compliance."""
        assert isinstance(learner, BaseAgent)
        assert learner.get_agent_type() == 'q_learning'

    @pytest.mark.parametrize('kwargs', [
        {'actions': 0, 'lr': 0.1, 'gamma': 0.1},
        {'actions': 2, 'lr': 1.5, 'gamma': 0.1},
        {'actions': 2, 'lr': 0.1, 'gamma': -0.1},
        {'actions': 2.0, 'lr': 0.1, 'gamma': 0.1},
    ])
    def test_invalid_config(self, kwargs):
        """Test that bad hyperparameters are rejected."""
        with pytest.raises(ConfigurationError):
            QLearner(**kwargs)

    def test_first_visit_update(self, learner):
        """Test the first-insertion blend on a fresh table."""
        learner.learn('A', 'B', 0, 1.0)

        assert np.array_equal(learner.q_table['B'], [0.0, 0.0])
        # prior is the reward: (1 - 0.1) * 1.0 + 0.1 * (1.0 + 0.1 * 0)
        assert learner.q_table['A'][0] == pytest.approx(1.0)
        assert learner.q_table['A'][1] == 0.0

    def test_repeat_visit_update(self, learner):
        """Test the update once the state is already in the table."""
        learner.learn('A', 'B', 0, 1.0)
        learner.learn('A', 'B', 0, 1.0)

        # (1 - 0.1) * 1.0 + 0.1 * (1.0 + 0.1 * 0)
        assert learner.q_table['A'][0] == pytest.approx(1.0)

        learner.learn('A', 'B', 1, 2.0)
        # (1 - 0.1) * 0.0 + 0.1 * 2.0
        assert learner.q_table['A'][1] == pytest.approx(0.2)

    def test_bootstraps_from_next_state(self):
        """Test that the next state's maximum enters the target."""
        learner = QLearner(actions=2, lr=0.5, gamma=0.5)
        learner.q_table['B'] = np.array([4.0, 2.0])
        learner.q_table['A'] = np.array([0.0, 0.0])

        learner.learn('A', 'B', 1, 1.0)

        # (1 - 0.5) * 0 + 0.5 * (1 + 0.5 * 4)
        assert learner.q_table['A'][1] == pytest.approx(1.5)

    def test_self_transition_on_fresh_table(self, learner):
        """Test that next_state is inserted before state is looked up."""
        learner.learn('A', 'A', 0, 1.0)

        # 'A' already exists as zeros when the prior is read
        assert learner.q_table['A'][0] == pytest.approx(0.1)

    def test_rows_have_action_count(self):
        """Test that every stored row has exactly `actions` entries."""
        learner = QLearner(actions=3, lr=0.3, gamma=0.9, seed=1)
        for step in range(50):
            learner.learn(step % 7, (step + 1) % 7, step % 3, float(step % 2))

        assert len(learner) == 7
        for values in learner.q_table.values():
            assert values.shape == (3,)

    def test_epsilon_decays(self, learner):
        """Test epsilon is non-increasing and decays by 0.9 per update."""
        previous = learner.epsilon
        for _ in range(30):
            learner.learn('A', 'B', 0, 0.0)
            assert learner.epsilon <= previous
            previous = learner.epsilon

        assert learner.epsilon == pytest.approx(0.9 ** 30)
        assert learner.steps == 30

    def test_exploration_cutover(self, learner):
        """Test the switch from exploring to exploiting after 22 updates."""
        for _ in range(21):
            learner.learn('A', 'B', 0, 1.0)
        assert learner.exploring

        learner.learn('A', 'B', 0, 1.0)
        assert not learner.exploring

    def test_exploit_picks_best(self, learner):
        """Test greedy action once epsilon is below the threshold."""
        learner.epsilon = 0.05
        learner.q_table['A'] = np.array([0.1, 0.9])

        assert all(learner.act('A') == 1 for _ in range(20))

    def test_exploit_tie_picks_first(self, learner):
        """Test ties go to the first action when exploiting."""
        learner.epsilon = 0.1
        learner.q_table['A'] = np.array([0.5, 0.5])
        assert learner.act('A') == 0

    def test_exploit_unseen_state_is_random(self, learner):
        """Test unseen states fall back to random actions."""
        learner.epsilon = 0.0
        actions = {learner.act('unseen') for _ in range(100)}

        assert actions == {0, 1}
        assert 'unseen' not in learner.q_table

    def test_explore_ignores_table(self, learner):
        """Test that exploration is uniform even with a clear best action."""
        learner.q_table['A'] = np.array([0.0, 100.0])
        actions = {learner.act('A') for _ in range(100)}
        assert actions == {0, 1}

    def test_act_in_range(self):
        """Test actions always fall in [0, actions)."""
        learner = QLearner(actions=4, lr=0.5, gamma=0.5, seed=3)
        for _ in range(200):
            assert 0 <= learner.act((1, 2)) < 4

    def test_seed_reproducibility(self):
        """Test that seeded learners act identically."""
        a = QLearner(actions=5, lr=0.1, gamma=0.1, seed=11)
        b = QLearner(actions=5, lr=0.1, gamma=0.1, seed=11)

        assert [a.act(0) for _ in range(20)] == [b.act(0) for _ in range(20)]

    def test_nan_value_fails_loudly(self, learner):
        """Test that exploiting over NaN values raises."""
        learner.epsilon = 0.0
        learner.q_table['A'] = np.array([math.nan, 1.0])

        with pytest.raises(NonFiniteValueError):
            learner.act('A')

    def test_nan_next_state_fails(self, learner):
        """Test that bootstrapping from NaN raises and leaves state alone."""
        learner.q_table['B'] = np.array([math.nan, 0.0])

        with pytest.raises(NonFiniteValueError):
            learner.learn('A', 'B', 0, 1.0)
        assert 'A' not in learner.q_table
        assert learner.epsilon == 1.0

    def test_nan_reward_rejected(self, learner):
        """Test that a NaN reward is never consumed."""
        with pytest.raises(NonFiniteValueError, match="reward"):
            learner.learn('A', 'B', 0, float('nan'))
        assert learner.q_table == {}

    def test_action_out_of_range(self, learner):
        """Test that learn rejects unknown actions."""
        with pytest.raises(ConfigurationError, match="action must be in"):
            learner.learn('A', 'B', 2, 1.0)

    @pytest.mark.parametrize('action', [0.5, True, '0', -1])
    def test_action_must_be_integer_index(self, learner, action):
        """Test that floats, bools and strings are not accepted as actions."""
        with pytest.raises(ConfigurationError, match="action must be in"):
            learner.learn('A', 'B', action, 1.0)
        assert 'A' not in learner.q_table

    def test_numpy_action_accepted(self, learner):
        """Test integer numpy actions from an argmax."""
        learner.learn('A', 'B', np.int64(1), 1.0)
        assert learner.q_table['A'][1] == pytest.approx(1.0)

    def test_overflowing_update_rejected(self):
        """Test that an update overflowing to inf is not stored."""
        learner = QLearner(1, lr=1.0, gamma=1.0, seed=0)
        learner.learn('A', 'B', 0, 1e308)
        epsilon, steps = learner.epsilon, learner.steps

        with pytest.raises(NonFiniteValueError, match="overflowed"):
            learner.learn('C', 'A', 0, 1e308)

        assert 'C' not in learner.q_table
        assert learner.epsilon == epsilon
        assert learner.steps == steps

        # A later update with lr=1 must not turn a stored inf into NaN
        learner.learn('C', 'D', 0, 0.0)
        assert all(np.all(np.isfinite(row)) for row in learner.q_table.values())

    def test_q_values_does_not_insert(self, learner):
        """Test q_values returns zeros for unseen states without inserting."""
        values = learner.q_values('X')

        assert np.array_equal(values, [0.0, 0.0])
        assert 'X' not in learner.q_table

    def test_q_values_is_copy(self, learner):
        """Test q_values cannot modify the table."""
        learner.learn('A', 'B', 0, 1.0)
        learner.q_values('A')[0] = 99.0
        assert learner.q_table['A'][0] == pytest.approx(1.0)

    def test_get_config(self, learner):
        """Test configuration output."""
        config = learner.get_config()
        assert config['type'] == 'q_learning'
        assert config['actions'] == 2
        assert config['seed'] == 7

    def test_learns_corridor(self, corridor):
        """Test that the learner walks right along the corridor after training."""
        learner = QLearner(actions=2, lr=0.5, gamma=0.9, seed=0)

        for _ in range(30):
            corridor.reset()
            while not corridor.done:
                state = corridor.observe()
                action = learner.act(state)
                reward = corridor.step(action)
                learner.learn(state, corridor.observe(), action, reward)

        assert not learner.exploring
        for state, values in learner.q_table.items():
            assert values.shape == (2,)
            assert np.all(np.isfinite(values))


class TestEvolutionaryAgent:
    """Tests for EvolutionaryAgent."""

    @pytest.fixture
    def network(self):
        builder = NetworkBuilder()
        return builder.randomize(builder.from_topology([4, 8, 3]), torch.Generator().manual_seed(0))

    @pytest.fixture
    def agent(self, network):
        return EvolutionaryAgent(network=network, id='ind_0000')

    def test_init(self, agent):
        """Test agent initialization."""
        assert agent.id == 'ind_0000'
        assert agent.generation == 0
        assert agent.parent_ids == []
        assert agent.mutation_history == []
        assert agent.topology == [4, 8, 3]
        assert agent.get_agent_type() == 'evolutionary'

    def test_act_in_range(self, agent):
        """Test actions fall in [0, output_size)."""
        for _ in range(20):
            assert 0 <= agent.act(torch.randn(4)) < 3

    def test_act_matches_argmax(self, agent, network):
        """Test that act returns the argmax of the network output."""
        state = [0.3, -0.2, 0.9, 0.1]
        expected = int(torch.argmax(network.predict(state)).item())
        assert agent.act(state) == expected

    def test_act_first_maximum(self):
        """Test ties pick the first maximum output."""
        network = NetworkBuilder().from_topology([2, 3])
        with torch.no_grad():
            network.weights()[0].zero_()
            network.biases()[0].copy_(torch.tensor([0.2, 0.7, 0.7]))

        assert EvolutionaryAgent(network).act([1.0, 1.0]) == 1

    def test_act_non_finite_output(self):
        """Test that NaN outputs fail loudly."""
        network = NetworkBuilder().from_topology([2, 2])
        with torch.no_grad():
            network.biases()[0][1] = float('nan')

        with pytest.raises(NonFiniteValueError):
            EvolutionaryAgent(network).act([0.0, 0.0])

    def test_act_wrong_input_size(self, agent):
        """Test that the state vector must match the input size."""
        with pytest.raises(ConfigurationError):
            agent.act([1.0, 2.0, 3.0])

    def test_clone_is_independent(self, agent):
        """Test cloning copies the network without aliasing it."""
        clone = agent.clone()
        with torch.no_grad():
            for p in clone.network.parameters():
                p.add_(1.0)

        for p1, p2 in zip(agent.network.parameters(), clone.network.parameters()):
            assert not torch.equal(p1, p2)
        assert clone.id == agent.id

    def test_get_config(self, agent):
        """Test configuration output."""
        config = agent.get_config()
        assert config['topology'] == [4, 8, 3]
        assert config['type'] == 'evolutionary'
