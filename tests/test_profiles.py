"""Tests for profiles module."""

import dataclasses

import pytest

from macropad_tool.constants import SUPPORTED_PIDS, VENDOR_ID
from macropad_tool.exceptions import (
    ProfileError,
    UnknownProductError,
    UnsupportedFeatureError,
)
from macropad_tool.models import ProtocolFamily
from macropad_tool.profiles import (
    get_profile,
    known_profiles,
    lookup,
    require_led,
    require_read,
)


class TestLookup:
    """Tests for profile lookup."""

    def test_every_supported_pid_has_profile(self) -> None:
        """Every supported product ID should resolve."""
        for pid in SUPPORTED_PIDS:
            profile = lookup(pid)
            assert profile is not None
            assert profile.product_id == pid
            assert profile.vendor_id == VENDOR_ID

    def test_unknown_pid(self) -> None:
        """Unknown product IDs should return None."""
        assert lookup(0x1234) is None

    def test_get_profile_unknown(self) -> None:
        """get_profile should raise a ProfileError for unknown IDs."""
        with pytest.raises(UnknownProductError) as exc_info:
            get_profile(0x1234)
        assert isinstance(exc_info.value, ProfileError)
        assert exc_info.value.product_id == 0x1234

    def test_known_profiles_sorted(self) -> None:
        """Profiles should be listed by product ID."""
        pids = [profile.product_id for profile in known_profiles()]
        assert pids == sorted(SUPPORTED_PIDS)


class TestCapabilities:
    """Tests for per-model capabilities."""

    def test_8840(self) -> None:
        """12-key model supports delay and LED."""
        profile = get_profile(0x8840)
        assert (profile.rows, profile.cols, profile.knobs) == (3, 4, 2)
        assert profile.num_buttons == 12
        assert profile.supports_delay
        assert profile.supports_led
        assert profile.family is ProtocolFamily.K884X

    def test_8842(self) -> None:
        """6-key model has neither delay nor LED."""
        profile = get_profile(0x8842)
        assert (profile.rows, profile.cols, profile.knobs) == (2, 3, 1)
        assert not profile.supports_delay
        assert not profile.supports_led

    def test_8890(self) -> None:
        """4-key model uses its own command set and one layer."""
        profile = get_profile(0x8890)
        assert (profile.rows, profile.cols, profile.knobs) == (1, 4, 0)
        assert profile.family is ProtocolFamily.K8890
        assert profile.programmable_layers == 1
        assert profile.max_chords == 5
        assert not profile.supports_read

    def test_profiles_are_immutable(self) -> None:
        """Profiles should be frozen."""
        profile = get_profile(0x8840)
        with pytest.raises(dataclasses.FrozenInstanceError):
            profile.rows = 9  # type: ignore[misc]


class TestRequireLed:
    """Tests for require_led function."""

    def test_supported(self) -> None:
        """Should pass for LED-capable models."""
        require_led(get_profile(0x8840))

    def test_unsupported(self) -> None:
        """Should raise for models without LED support."""
        with pytest.raises(UnsupportedFeatureError):
            require_led(get_profile(0x8842))


class TestRequireRead:
    """Tests for require_read function."""

    @pytest.mark.parametrize("product_id", [0x8840, 0x8842])
    def test_supported(self, product_id: int) -> None:
        """The 884x models answer read-back requests."""
        require_read(get_profile(product_id))

    def test_unsupported(self) -> None:
        """The 4-key model cannot send back its mappings."""
        with pytest.raises(UnsupportedFeatureError, match="0x8890"):
            require_read(get_profile(0x8890))
