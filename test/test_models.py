import pytest

from floodguard.models import CenterStatus, status_for


@pytest.mark.parametrize("capacity, occupancy, status", [
    (500, 0, CenterStatus.OPEN),
    (500, 449, CenterStatus.OPEN),
    (500, 450, CenterStatus.FULL),
    (500, 500, CenterStatus.FULL),
    (800, 719, CenterStatus.OPEN),
    (800, 720, CenterStatus.FULL),
])
def test_full_from_ninety_percent(capacity, occupancy, status):
    assert status_for(capacity, occupancy) == status


def test_center_status_serializes(center):
    assert center.to_dict()["status"] == "Open"
