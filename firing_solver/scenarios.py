#!/usr/bin/env python3
"""
Reference Firing Scenarios for the Firing Solver.

Each scenario pairs a weapon with a target snapshot:
- stationary: fixed target above and ahead of the weapon
- moving: target drifting away and upward
- arbitrary: target circling a fixed point

Scenarios can also be loaded from JSON (see ``firing_solver/data/scenarios.json``).

Usage:
    runner = ScenarioRunner()
    result = runner.run_scenario("moving")
    print(result.direct, result.lob)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

try:
    from .ballistics import AimPolicy, Solution, Weapon, fire
    from .intercept import DEFAULT_CONFIG, SolverConfig, solve
    from .target import Target, predict
    from .vector import Vector2D
except ImportError:
    from ballistics import AimPolicy, Solution, Weapon, fire
    from intercept import DEFAULT_CONFIG, SolverConfig, solve
    from target import Target, predict
    from vector import Vector2D

logger = logging.getLogger(__name__)

DEFAULT_SCENARIOS_PATH = Path(__file__).parent / "data" / "scenarios.json"


# =============================================================================
# SCENARIO CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class ScenarioConfig:
    """
    A weapon and a target to solve against.

    Attributes:
        name: Unique scenario identifier.
        weapon: Weapon stats.
        target: Target snapshot at the moment of firing.
        display_name: Human-readable scenario name.
        description: What the scenario exercises.
    """
    name: str
    weapon: Weapon
    target: Target
    display_name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> ScenarioConfig:
        """
        Create a scenario from a config mapping.

        Raises:
            ValueError: If the mapping is missing fields or holds bad values.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Scenario config must be an object, got {data!r}")
        name = data.get("name")
        if not name:
            raise ValueError(f"Scenario config missing field 'name': {data!r}")
        if not isinstance(name, str):
            raise ValueError(f"Scenario name must be a string, got {name!r}")
        try:
            weapon = Weapon.from_dict(data["weapon"])
            target = Target.from_dict(data["target"])
        except KeyError as e:
            raise ValueError(f"Scenario {name!r} missing field {e.args[0]!r}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Scenario {name!r}: {e}") from e
        return cls(
            name=name,
            weapon=weapon,
            target=target,
            display_name=data.get("display_name", name),
            description=data.get("description", ""),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "weapon": self.weapon.to_dict(),
            "target": self.target.to_dict(),
        }


# =============================================================================
# SCENARIO RESULT
# =============================================================================

@dataclass
class ScenarioResult:
    """
    Firing solutions for one scenario under both aim policies.

    Attributes:
        scenario: The scenario that was solved.
        direct: Fastest intercept, or None if there is none.
        lob: High-arc intercept, or None if there is none.
    """
    scenario: ScenarioConfig
    direct: Optional[Solution]
    lob: Optional[Solution]
    config: SolverConfig = field(default=DEFAULT_CONFIG)

    def get_solution(self, policy: AimPolicy) -> Optional[Solution]:
        return self.direct if policy is AimPolicy.DIRECT else self.lob

    def intercept_error(self, policy: AimPolicy) -> Optional[float]:
        """
        Distance between projectile and target at the solution's flight time.

        Returns:
            Miss distance, or None if the policy has no solution.
        """
        sol = self.get_solution(policy)
        if sol is None:
            return None
        shot = fire(self.scenario.weapon, sol.angle, sol.time)
        return shot.distance_to(predict(self.scenario.target, sol.time))

    @property
    def solved(self) -> bool:
        """True when both policies produced a solution."""
        return self.direct is not None and self.lob is not None


# =============================================================================
# SCENARIO DEFINITIONS
# =============================================================================

def create_stationary() -> ScenarioConfig:
    """Fixed target 650 ahead and 150 up."""
    return ScenarioConfig(
        name="stationary",
        display_name="Stationary Target",
        description="Fixed target ahead of and above the weapon.",
        weapon=Weapon(speed=650.0, gravity=400.0),
        target=Target(position=Vector2D(650.0, 150.0)),
    )


def create_moving() -> ScenarioConfig:
    """Target drifting away and climbing."""
    return ScenarioConfig(
        name="moving",
        display_name="Moving Target",
        description="Target starting at ground level, drifting away and climbing.",
        weapon=Weapon(speed=600.0, gravity=400.0),
        target=Target(position=Vector2D(450.0, 0.0), velocity=Vector2D(100.0, 50.0)),
    )


def create_arbitrary() -> ScenarioConfig:
    """Target circling a fixed point."""
    return ScenarioConfig(
        name="arbitrary",
        display_name="Circling Target",
        description="Target orbiting (650, 50) at radius 100, one radian per second.",
        weapon=Weapon(speed=650.0, gravity=400.0),
        target=Target(position=Vector2D(650.0, 50.0), radius=100.0),
    )


SCENARIO_REGISTRY: Dict[str, Callable[[], ScenarioConfig]] = {
    "stationary": create_stationary,
    "moving": create_moving,
    "arbitrary": create_arbitrary,
}


# =============================================================================
# LOADING
# =============================================================================

def load_scenarios(
    path: Union[str, Path] = DEFAULT_SCENARIOS_PATH
) -> tuple[List[ScenarioConfig], SolverConfig]:
    """
    Load scenarios and solver settings from a JSON file.

    The document holds a ``scenarios`` list and an optional ``solver``
    mapping with ``max_time`` and ``time_step``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the content is not valid scenario data.
    """
    path = Path(path)
    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{path}: invalid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("scenarios"), list):
        raise ValueError(f"{path}: expected an object with a 'scenarios' list")

    scenarios = [ScenarioConfig.from_dict(item) for item in data["scenarios"]]
    names = [s.name for s in scenarios]
    if len(set(names)) != len(names):
        raise ValueError(f"{path}: duplicate scenario names in {names}")

    config = SolverConfig.from_dict(data.get("solver", {}))
    logger.info(f"Loaded {len(scenarios)} scenarios from {path}")
    return scenarios, config


# =============================================================================
# SCENARIO RUNNER
# =============================================================================

class ScenarioRunner:
    """
    Solves scenarios under both aim policies.

    Usage:
        runner = ScenarioRunner()
        result = runner.run_scenario("stationary")
    """

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        scenarios: Optional[List[ScenarioConfig]] = None
    ) -> None:
        """
        Initialize the scenario runner.

        Args:
            config: Sweep horizon and resolution shared by every run.
            scenarios: Extra scenarios (e.g. from ``load_scenarios``) that
                       take precedence over the built-in ones by name.
        """
        self.config = config or DEFAULT_CONFIG
        self._extra: Dict[str, ScenarioConfig] = {s.name: s for s in scenarios or []}

    def list_scenarios(self) -> List[str]:
        """Names of all available scenarios."""
        names = list(SCENARIO_REGISTRY.keys())
        names.extend(name for name in self._extra if name not in SCENARIO_REGISTRY)
        return names

    def create_scenario(self, name: str) -> Optional[ScenarioConfig]:
        """Scenario configuration by name, or None if unknown."""
        if name in self._extra:
            return self._extra[name]
        if name in SCENARIO_REGISTRY:
            return SCENARIO_REGISTRY[name]()
        return None

    def run_scenario(self, scenario: Union[str, ScenarioConfig]) -> ScenarioResult:
        """
        Solve a scenario for both the direct and lob policies.

        Raises:
            KeyError: If a scenario name is not known.
        """
        if isinstance(scenario, str):
            config = self.create_scenario(scenario)
            if config is None:
                raise KeyError(f"Unknown scenario: {scenario!r}")
            scenario = config

        result = ScenarioResult(
            scenario=scenario,
            direct=solve(scenario.weapon, scenario.target, AimPolicy.DIRECT, self.config),
            lob=solve(scenario.weapon, scenario.target, AimPolicy.LOB, self.config),
            config=self.config,
        )
        if not result.solved:
            logger.info(
                f"Scenario {scenario.name!r}: direct={'ok' if result.direct else 'none'}, "
                f"lob={'ok' if result.lob else 'none'}"
            )
        return result

    def run_all(self) -> Dict[str, ScenarioResult]:
        """Solve every available scenario."""
        return {name: self.run_scenario(name) for name in self.list_scenarios()}


# =============================================================================
# EXAMPLE USAGE / SELF-TEST
# =============================================================================

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    runner = ScenarioRunner()
    for name, res in runner.run_all().items():
        print(f"\n--- {res.scenario.display_name} ---")
        for policy in AimPolicy:
            sol = res.get_solution(policy)
            if sol is None:
                print(f"  {policy.value:>6}: no solution")
                continue
            print(f"  {policy.value:>6}: angle={sol.angle_deg:6.2f} deg, "
                  f"time={sol.time:.3f}s, miss={res.intercept_error(policy):.3f}")
