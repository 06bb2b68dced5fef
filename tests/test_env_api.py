"""
Tests for Gymnasium environment API.
"""

import pytest
import numpy as np

from willi.core.config_loader import load_config
from willi.core.env_gym import WilliEnv


def crush_map():
    """20x15 map: rock over the player, one food in the far corner."""
    rows = [" " * 20 for _ in range(15)]
    rows[0] = "r" + " " * 19
    rows[1] = "s" + " " * 19
    rows[14] = " " * 19 + "f"
    return "\n".join(rows)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def env():
    env = WilliEnv()
    yield env
    env.close()


class TestWilliEnv:
    """Test single environment API."""
    
    def test_reset_returns_obs_and_info(self, env):
        """Reset should return (observation, info) tuple."""
        result = env.reset(seed=42)
        
        assert isinstance(result, tuple)
        assert len(result) == 2
        
        obs, info = result
        assert isinstance(obs, dict)
        assert isinstance(info, dict)
        assert info["player"] == (1, 1)
    
    def test_observation_structure(self, env, config):
        """Observation should have expected keys and shapes."""
        obs, _ = env.reset(seed=42)
        
        for key in ("player", "dead", "won", "moves_used",
                    "food_remaining", "rocks_moved_last_step", "tiles"):
            assert key in obs
        
        assert obs["tiles"].shape == (config.grid.height, config.grid.width)
        assert obs["player"].tolist() == [1, 1]
        assert env.observation_space.contains(obs)
    
    def test_step_returns_five_values(self, env):
        """Step should return (obs, reward, terminated, truncated, info)."""
        env.reset(seed=42)
        
        result = env.step(1)
        
        assert isinstance(result, tuple)
        assert len(result) == 5
        
        obs, reward, terminated, truncated, info = result
        assert isinstance(obs, dict)
        assert isinstance(reward, float)
        assert isinstance(terminated, bool)
        assert isinstance(truncated, bool)
        assert info["moved"]
        assert info["player"] == (2, 1)
    
    def test_reward_is_always_zero(self, env):
        """Environment reward should always be 0.0."""
        env.reset(seed=42)
        rng = np.random.default_rng(0)
        
        for _ in range(50):
            _, reward, terminated, truncated, _ = env.step(int(rng.integers(0, 4)))
            assert reward == 0.0
            
            if terminated or truncated:
                env.reset()
    
    def test_numpy_action(self, env):
        env.reset()
        
        _, _, _, _, info = env.step(np.array(2))
        
        assert info["player"] == (1, 2)
    
    @pytest.mark.parametrize("action", [-1, 4, 10])
    def test_invalid_action(self, env, action):
        env.reset()
        
        with pytest.raises(ValueError):
            env.step(action)
    
    def test_deterministic_reset(self, env):
        """Reset always restores the same level."""
        obs1, _ = env.reset(seed=1)
        env.step(2)
        env.step(1)
        obs2, _ = env.reset(seed=2)
        
        np.testing.assert_array_equal(obs1["tiles"], obs2["tiles"])
        np.testing.assert_array_equal(obs1["player"], obs2["player"])
    
    def test_crush_terminates(self):
        env = WilliEnv(map_text=crush_map())
        env.reset()
        
        _, _, terminated, truncated, info = env.step(2)
        
        assert terminated
        assert not truncated
        assert info["dead"]
        assert info["terminated_reason"] == "crushed"
    
    def test_ansi_render(self):
        env = WilliEnv(map_text=crush_map(), render_mode="ansi")
        env.reset()
        
        frame = env.render()
        
        assert frame.splitlines()[1].startswith("s")
        assert frame.splitlines()[0].startswith("r")
    
    def test_headless_render(self, env):
        env.reset()
        assert env.render() is None
    
    def test_unsupported_render_mode(self):
        with pytest.raises(ValueError):
            WilliEnv(render_mode="human")
    
    def test_debug_output(self, capsys):
        env = WilliEnv(debug=True)
        env.reset()
        env.step(1)
        
        out = capsys.readouterr().out
        assert "[DEBUG] WilliEnv initialized" in out
        assert "[DEBUG] Step: action=RIGHT" in out
    
    def test_moves_used_stays_in_bounds_after_win(self, tmp_path):
        """Steps after the last food keep observations inside the space."""
        default = load_config()
        with open(default.level.default_map_path.parent.parent / "game_config.yaml") as f:
            text = f.read()
        assert "max_moves: 1000" in text
        config_path = tmp_path / "game_config.yaml"
        config_path.write_text(text.replace("max_moves: 1000", "max_moves: 2"))
        
        rows = [" " * 20 for _ in range(15)]
        rows[0] = "sf" + " " * 18
        env = WilliEnv(config_path=str(config_path), map_text="\n".join(rows))
        env.reset()
        
        for _ in range(4):
            obs, _, terminated, truncated, _ = env.step(1)
            assert terminated
            assert not truncated
            assert obs["moves_used"] <= 2
            assert env.observation_space.contains(obs)
