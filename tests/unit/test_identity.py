"""
Unit tests for lock identity derivation.
"""

import pytest

from joblock.identity import (
    LockIdentity,
    LockPolicyRegistry,
    constant_key,
    default_lock_key,
    default_lock_ttl,
    fixed_ttl,
    get_registry,
    register_lock_policy,
)
from joblock.types.lock import LockSpec


class TestDefaultLockKey:
    """Tests for the default key derivation."""

    def test_key_format(self):
        """Test the key is prefix, job type and rendered arguments."""
        assert default_lock_key("Report", [1]) == "lock:Report-[1]"
        assert default_lock_key("Report", ("a", 2)) == "lock:Report-['a', 2]"

    def test_no_arguments(self):
        """Test a job without arguments."""
        assert default_lock_key("Cleanup", []) == "lock:Cleanup-[]"

    def test_deterministic(self):
        """Test equal inputs produce identical keys."""
        first = default_lock_key("Report", [1, {"region": "eu"}])
        second = default_lock_key("Report", [1, {"region": "eu"}])

        assert first == second

    def test_list_and_tuple_arguments_match(self):
        """Test the container type of the argument sequence does not matter."""
        assert default_lock_key("Report", [1, 2]) == default_lock_key("Report", (1, 2))

    def test_argument_order_is_significant(self):
        """Test reordered arguments produce a different key."""
        assert default_lock_key("Report", [1, 2]) != default_lock_key("Report", [2, 1])

    def test_argument_type_is_significant(self):
        """Test an int and its string form produce different keys."""
        assert default_lock_key("Report", [1]) != default_lock_key("Report", ["1"])

    def test_job_type_is_significant(self):
        """Test different job types never share a key."""
        assert default_lock_key("Report", [1]) != default_lock_key("Invoice", [1])

    def test_default_ttl_is_unbounded(self):
        """Test the default TTL."""
        assert default_lock_ttl("Report", [1]) is None


class TestLockIdentity:
    """Tests for LockIdentity."""

    def test_derive_default(self):
        """Test the default identity."""
        spec = LockIdentity().derive("Report", [1])

        assert spec == LockSpec(key="lock:Report-[1]", ttl=None)
        assert spec.is_bounded is False

    def test_constant_key_ignores_arguments(self):
        """Test a constant key collapses argument variants."""
        identity = LockIdentity(key_fn=constant_key("network-graph"))

        assert identity.derive("Graph", [1]).key == "network-graph"
        assert identity.derive("Graph", [2]).key == "network-graph"

    def test_fixed_ttl(self):
        """Test a fixed TTL."""
        spec = LockIdentity(ttl_fn=fixed_ttl(5)).derive("Report", [1])

        assert spec.ttl == 5
        assert spec.is_bounded is True

    def test_ttl_can_depend_on_arguments(self):
        """Test a TTL function using the job arguments."""
        identity = LockIdentity(ttl_fn=lambda job_type, args: args[0] * 10)

        assert identity.derive("Report", [3]).ttl == 30

    def test_negative_ttl_rejected(self):
        """Test a negative TTL from an override."""
        identity = LockIdentity(ttl_fn=lambda job_type, args: -1)

        with pytest.raises(ValueError):
            identity.derive("Report", [1])

    def test_non_integer_ttl_rejected(self):
        """Test a non-integer TTL from an override."""
        identity = LockIdentity(ttl_fn=lambda job_type, args: 1.5)

        with pytest.raises(TypeError):
            identity.derive("Report", [1])

    def test_fixed_ttl_validates_eagerly(self):
        """Test fixed_ttl rejects bad values when built."""
        with pytest.raises(ValueError):
            fixed_ttl(-5)
        with pytest.raises(TypeError):
            fixed_ttl(True)

    def test_zero_ttl_allowed(self):
        """Test zero is a valid TTL."""
        assert LockIdentity(ttl_fn=fixed_ttl(0)).derive("Report", []).ttl == 0


class TestLockPolicyRegistry:
    """Tests for LockPolicyRegistry."""

    def test_unregistered_type_uses_default(self, registry: LockPolicyRegistry):
        """Test fallback to the default identity."""
        assert registry.derive("Report", [1]).key == "lock:Report-[1]"
        assert registry.list_policies() == []

    def test_register_key_override(self, registry: LockPolicyRegistry):
        """Test overriding only the key."""
        registry.register("Graph", key=constant_key("network-graph"))

        spec = registry.derive("Graph", [42])

        assert spec.key == "network-graph"
        assert spec.ttl is None
        assert registry.list_policies() == ["Graph"]

    def test_overrides_are_per_type(self, registry: LockPolicyRegistry):
        """Test an override does not leak into other job types."""
        registry.register("Graph", key=constant_key("network-graph"))

        assert registry.derive("Report", [42]).key == "lock:Report-[42]"

    def test_with_default_keeps_overrides(self, registry: LockPolicyRegistry):
        """Test swapping the default identity keeps registered overrides."""
        registry.register("Graph", key=constant_key("network-graph"))

        bounded = registry.with_default(LockIdentity(ttl_fn=fixed_ttl(60)))

        assert bounded.derive("Graph", [1]) == LockSpec(key="network-graph", ttl=60)
        assert bounded.derive("Report", [1]).ttl == 60
        # The original registry is unchanged
        assert registry.derive("Report", [1]).ttl is None

    def test_explicit_unbounded_ttl_survives_bounded_default(self, registry: LockPolicyRegistry):
        """Test a type can opt out of a bounded default TTL."""
        registry.register("Forever", ttl=default_lock_ttl)

        bounded = registry.with_default(LockIdentity(ttl_fn=fixed_ttl(60)))

        assert bounded.derive("Forever", [1]).ttl is None

    def test_register_lock_policy_decorator(self):
        """Test the decorator registers into the process-wide registry."""

        @register_lock_policy("decorated_job", ttl=fixed_ttl(7))
        async def decorated_job(value: int) -> int:
            return value

        assert decorated_job.__name__ == "decorated_job"
        assert get_registry().derive("decorated_job", [1]).ttl == 7
