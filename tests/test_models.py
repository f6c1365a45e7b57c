"""Tests for device models and the partial control request."""

import pytest
from pydantic import ValidationError

from lumalink.models import (
    BatchResult,
    ColorState,
    Device,
    DiscoverySnapshot,
    PartialControlRequest,
    Transport,
)


def _device(**overrides) -> Device:
    values = dict(
        id="d1",
        label="Lamp",
        power=True,
        brightness=50,
        hue=0,
        saturation=0,
        kelvin=3500,
        connected=True,
        preferred_transport=Transport.LOCAL,
    )
    values.update(overrides)
    return Device(**values)


class TestPartialControlRequest:
    def test_empty_request_is_allowed(self):
        request = PartialControlRequest()
        assert not request.changes_color
        assert request.power is None

    @pytest.mark.parametrize(
        "field, value",
        [
            ("brightness", 101),
            ("brightness", -1),
            ("hue", 361),
            ("saturation", 150),
            ("kelvin", 1000),
            ("kelvin", 10000),
            ("transition_ms", -5),
        ],
    )
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            PartialControlRequest(**{field: value})

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            PartialControlRequest(color="red")

    def test_power_only_does_not_change_color(self):
        assert not PartialControlRequest(power=True, transition_ms=0).changes_color

    def test_brightness_changes_color_but_not_hue(self):
        request = PartialControlRequest(brightness=20)
        assert request.changes_color
        assert not request.changes_hue_or_temperature


class TestMerge:
    current = ColorState(hue=200, saturation=0, brightness=50, kelvin=3500)

    def test_unset_channels_keep_current_values(self):
        merged = PartialControlRequest(brightness=10).merge_into(self.current)
        assert merged == ColorState(hue=200, saturation=0, brightness=10, kelvin=3500)

    def test_all_channels_overridden(self):
        request = PartialControlRequest(hue=10, saturation=90, brightness=80, kelvin=6500)
        assert request.merge_into(self.current) == ColorState(10, 90, 80, 6500)

    @pytest.mark.parametrize("field", ["hue", "saturation", "kelvin"])
    def test_zero_brightness_raised_for_visible_change(self, field):
        dark = ColorState(hue=0, saturation=0, brightness=0, kelvin=3500)
        value = 2700 if field == "kelvin" else 30
        merged = PartialControlRequest(**{field: value}).merge_into(dark)
        assert merged.brightness == 100

    def test_explicit_zero_brightness_kept(self):
        merged = PartialControlRequest(hue=30, brightness=0).merge_into(self.current)
        assert merged.brightness == 0

    def test_safeguard_needs_zero_current_brightness(self):
        merged = PartialControlRequest(hue=30).merge_into(self.current)
        assert merged.brightness == 50


class TestDevice:
    def test_white_mode(self):
        assert _device(saturation=0).is_white_mode
        assert not _device(saturation=40).is_white_mode

    def test_degraded_copy(self):
        device = _device()
        stale = device.as_degraded()
        assert stale is not device
        assert (stale.connected, stale.reachable) == (False, False)
        assert device.reachable is True
        assert stale.color == device.color

    def test_transport_alternate(self):
        assert Transport.LOCAL.alternate is Transport.CLOUD
        assert Transport.CLOUD.alternate is Transport.LOCAL


def test_snapshot_lookup():
    snapshot = DiscoverySnapshot(
        local_available=True, devices=(_device(id="a"), _device(id="b"))
    )
    assert snapshot.find("b").id == "b"
    assert snapshot.find("c") is None
    assert snapshot.is_available(Transport.LOCAL)
    assert not snapshot.is_available(Transport.CLOUD)


def test_batch_result_total():
    result = BatchResult(succeeded=2, failed=1, errors={"x": "boom"})
    assert result.total == 3
