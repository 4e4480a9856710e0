from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from galaxy.cloud import PointCloud
from galaxy.controller import CloudController
from galaxy.errors import GalaxyConfigError
from galaxy.parameters import (
    INTEGER_FIELDS,
    PARAMETER_RANGES,
    GalaxyParameters,
    clamp_parameter,
    step_decimals,
)

logger = logging.getLogger(__name__)

Value = Union[float, int, bool]

# (folder, label) per editable field, in display order.
PANEL_FIELDS: Dict[str, Tuple[str, str]] = {
    "count": ("General", "Stars Count"),
    "point_size": ("General", "Star Size"),
    "radius": ("General", "Galaxy Radius"),
    "branches": ("General", "Galaxy Branches"),
    "spin": ("General", "Branches Spin"),
    "rotation_speed": ("General", "Rotation Speed"),
    "void_size": ("General", "Void Size"),
    "randomness": ("Angle randomness", "Angle Randomness"),
    "randomness_power": ("Angle randomness", "Angle Randomness Power"),
    "opacity": ("Colors", "Opacity"),
    "has_nebula": ("Nebula", "Active"),
    "nebula_density": ("Nebula", "Density"),
    "twist_factor": ("Twist", "Twist Factor"),
    "twist_amount": ("Twist", "Twist Amount"),
    "curl_frequency": ("Curl", "Curl Frequency"),
    "curl_amplitude": ("Curl", "Curl Amplitude"),
}

COARSE_MULTIPLIER = 10


@dataclass(frozen=True)
class PanelLine:
    folder: str
    label: str
    value: str
    selected: bool
    pending: bool


def format_value(name: str, value: Value) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    if name in INTEGER_FIELDS:
        return str(int(value))
    return f"{value:.{step_decimals(PARAMETER_RANGES[name][2])}f}"


class ParameterPanel:
    """Keyboard-driven editor over the galaxy parameters.

    Nudges only stage a value; the controller regenerates when the edit is
    committed (on key release), mirroring an on-finish-change slider.
    """

    def __init__(self, controller: CloudController) -> None:
        self._controller = controller
        self._names: List[str] = list(PANEL_FIELDS)
        self._index = 0
        self._staged: Optional[Value] = None

    @property
    def selected(self) -> str:
        return self._names[self._index]

    def select_next(self) -> None:
        self._discard()
        self._index = (self._index + 1) % len(self._names)

    def select_previous(self) -> None:
        self._discard()
        self._index = (self._index - 1) % len(self._names)

    def select(self, name: str) -> None:
        if name not in PANEL_FIELDS:
            raise GalaxyConfigError(f"Parameter '{name}' is not on the panel.")
        self._discard()
        self._index = self._names.index(name)

    def current_value(self) -> Value:
        if self._staged is not None:
            return self._staged
        return getattr(self._params(), self.selected)

    def nudge(self, direction: int, coarse: bool = False) -> Value:
        name = self.selected
        if name == "has_nebula":
            self._staged = not bool(self.current_value())
            return self._staged
        step = PARAMETER_RANGES[name][2] * (COARSE_MULTIPLIER if coarse else 1)
        self._staged = clamp_parameter(name, float(self.current_value()) + direction * step)
        return self._staged

    def toggle(self) -> Value:
        if self.selected != "has_nebula":
            return self.current_value()
        return self.nudge(1)

    def commit(self) -> Optional[PointCloud]:
        """Send the staged value to the controller. Returns the new cloud, if any."""
        if self._staged is None:
            return None
        name, value = self.selected, self._staged
        self._staged = None
        if getattr(self._params(), name) == value:
            return None
        logger.info("Committing %s = %s", name, format_value(name, value))
        return self._controller.commit(**{name: value})

    def lines(self) -> List[PanelLine]:
        params = self._params()
        result = []
        for i, name in enumerate(self._names):
            folder, label = PANEL_FIELDS[name]
            selected = i == self._index
            pending = selected and self._staged is not None
            value = self._staged if pending else getattr(params, name)
            result.append(PanelLine(folder, label, format_value(name, value), selected, pending))
        return result

    def _params(self) -> GalaxyParameters:
        return self._controller.parameters or GalaxyParameters()

    def _discard(self) -> None:
        self._staged = None
