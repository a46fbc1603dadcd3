import random
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TypeVar

from aduib_consul.utils.constant import LoadBalancePolicy

T = TypeVar("T")


class LoadBalancer(ABC):
    """Picks one instance out of the currently healthy ones."""

    @abstractmethod
    def select_instance(self, instances: Sequence[T] | None) -> T | None:
        """Return one of ``instances``, or None when there are none."""


class RandomLoadBalancer(LoadBalancer):
    """Uniform random pick. Not suitable where unpredictability matters."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def select_instance(self, instances: Sequence[T] | None) -> T | None:
        if not instances:
            return None
        return instances[self._rng.randrange(len(instances))]


class LoadBalancerFactory:
    _balancers: dict[LoadBalancePolicy, LoadBalancer] = {
        LoadBalancePolicy.Random: RandomLoadBalancer(),
    }

    @classmethod
    def get_load_balancer(cls, policy: LoadBalancePolicy) -> LoadBalancer:
        try:
            return cls._balancers[policy]
        except KeyError:
            raise ValueError(f"Unsupported load balance policy: {policy}") from None
