import pytest

from gravcore.constants import M_EARTH, M_SUN
from gravcore.data_models import Body
from gravcore.presets_loader import SeedBody, SeedTemplate


@pytest.fixture
def sun():
    return Body("Sun", M_SUN, (0.0, 0.0), (0.0, 0.0), color=(255, 215, 0))


@pytest.fixture
def sun_earth_seed():
    return [
        SeedBody("Sun", M_SUN, (255, 215, 0), position=(0.0, 0.0), velocity=(0.0, 0.0)),
        SeedBody("Earth", M_EARTH, (30, 144, 255), period_years=1.0, eccentricity=0.0167),
    ]


@pytest.fixture
def sun_earth_template(sun_earth_seed):
    return SeedTemplate(name="Sun & Earth", bodies=sun_earth_seed)


@pytest.fixture
def crash_template():
    """Sun plus two bodies that overlap on the first step and a bystander further out."""
    return SeedTemplate(
        name="Crash",
        bodies=[
            SeedBody("Sun", M_SUN, position=(0.0, 0.0), velocity=(0.0, 0.0)),
            SeedBody("A", M_EARTH, position=(1.0e11, 0.0), velocity=(0.0, 0.0)),
            SeedBody("B", M_EARTH, position=(1.0e11 + 1.0e3, 0.0), velocity=(0.0, 0.0)),
            SeedBody("C", M_EARTH, position=(2.0e11, 0.0), velocity=(0.0, 0.0)),
        ],
    )
