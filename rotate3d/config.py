"""
Configuration for a single 3-D rotate invocation.

A RotateConfig can be built directly, from a dictionary, from a YAML file,
or from ``option=value`` argument tokens:

    pan=30 tilt=-20 pef=1.2 auto=zc vp=tile bgcolor=white

Pan, tilt and roll may appear several times and in any order; the order is
kept and becomes the rotation composition order. All values are validated
when the config is created, before any matrix arithmetic.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from rotate3d.auto_fit import FitMode, parse_fit_mode
from rotate3d.camera_model import validate_pef, zoom_scale
from rotate3d.errors import InvalidParameter
from rotate3d.rotation import RotationAxis, RotationOp, validate_angle
from rotate3d.types import Degrees, PixelsFloat, Unitless
from rotate3d.warp_spec import FillPolicy, VirtualPixelMethod, parse_virtual_pixel

logger = logging.getLogger(__name__)

CONFIG_SECTION = "rotate3d"

_OFFSET_FIELDS = ("idx", "idy", "odx", "ody")
_OPTION_NAMES = (
    "pan", "tilt", "roll", "pef", "idx", "idy", "odx", "ody", "zoom",
    "bgcolor", "skycolor", "auto", "vp",
)


def _parse_number(name: str, value: Any) -> float:
    """Parse a finite float, raising InvalidParameter with the option name."""
    if isinstance(value, bool):
        raise InvalidParameter(f"{name.upper()}={value} IS NOT A NUMBER")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{name.upper()}={value} IS NOT A NUMBER") from None
    if not math.isfinite(number):
        raise InvalidParameter(f"{name.upper()}={value} IS NOT A NUMBER")
    return number


@dataclass(frozen=True)
class RotateConfig:
    """Validated parameters of one rotate invocation.

    Attributes:
        rotations: Pan/tilt/roll operations in application order.
        pef: Perspective exaggeration factor, [0, 3.19].
        idx: Rotation pivot offset right of the input center, pixels.
        idy: Rotation pivot offset below the input center, pixels.
        odx: Pivot position right of the output center, pixels.
        ody: Pivot position below the output center, pixels.
        zoom: Output zoom, |zoom| >= 1.
        auto: Auto-fit mode, or None.
        virtual_pixel: Virtual-pixel method for the warp.
        bgcolor: Background colour spec.
        skycolor: Sky colour spec.
    """

    rotations: tuple[RotationOp, ...] = ()
    pef: Unitless = Unitless(1.0)
    idx: PixelsFloat = PixelsFloat(0.0)
    idy: PixelsFloat = PixelsFloat(0.0)
    odx: PixelsFloat = PixelsFloat(0.0)
    ody: PixelsFloat = PixelsFloat(0.0)
    zoom: Unitless = Unitless(1.0)
    auto: Optional[FitMode] = None
    virtual_pixel: VirtualPixelMethod = VirtualPixelMethod.BACKGROUND
    bgcolor: str = "black"
    skycolor: str = "black"

    def __post_init__(self) -> None:
        """Validate every field; store numbers as floats and normalise enums and sequences."""
        rotations = []
        for op in self.rotations:
            if not isinstance(op, RotationOp):
                raise InvalidParameter(f"Rotation must be a RotationOp, got {op!r}")
            name = RotationAxis(op.axis).value
            angle = _parse_number(name, op.angle)
            validate_angle(angle, name)
            rotations.append(RotationOp(op.axis, Degrees(angle)))
        object.__setattr__(self, "rotations", tuple(rotations))

        pef = _parse_number("pef", self.pef)
        validate_pef(pef)
        object.__setattr__(self, "pef", Unitless(pef))

        zoom = _parse_number("zoom", self.zoom)
        zoom_scale(zoom)
        object.__setattr__(self, "zoom", Unitless(zoom))

        for name in _OFFSET_FIELDS:
            object.__setattr__(self, name, PixelsFloat(_parse_number(name, getattr(self, name))))

        object.__setattr__(self, "auto", parse_fit_mode(self.auto))
        object.__setattr__(self, "virtual_pixel", parse_virtual_pixel(self.virtual_pixel))

        for name in ("bgcolor", "skycolor"):
            if not isinstance(getattr(self, name), str) or not getattr(self, name):
                raise InvalidParameter(f"{name.upper()} must be a non-empty colour string")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def fill_policy(self) -> FillPolicy:
        """Build the FillPolicy handed to the warp."""
        return FillPolicy(
            background=self.bgcolor,
            sky=self.skycolor,
            virtual_pixel=self.virtual_pixel,
        )

    def effective(self) -> RotateConfig:
        """
        Return a copy with the values superseded by the auto-fit mode reset.

        c ignores odx/ody; zc and out ignore odx/ody and zoom.
        """
        if self.auto is FitMode.CENTER:
            return replace(self, odx=PixelsFloat(0.0), ody=PixelsFloat(0.0))
        if self.auto in (FitMode.ZOOM_CENTER, FitMode.OUT):
            return replace(self, odx=PixelsFloat(0.0), ody=PixelsFloat(0.0), zoom=Unitless(1.0))
        return self

    # ------------------------------------------------------------------
    # Construction from external sources
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_rotations(items: Iterable[Any]) -> tuple[RotationOp, ...]:
        """Parse ``[{pan: 30}, {tilt: 20}]`` or ``[[pan, 30], ...]`` into RotationOps."""
        ops = []
        for item in items:
            if isinstance(item, dict):
                if len(item) != 1:
                    raise InvalidParameter(
                        f"Each rotation must have exactly one of pan/tilt/roll, got {item}"
                    )
                ((axis, angle),) = item.items()
            elif isinstance(item, (list, tuple)) and len(item) == 2:
                axis, angle = item
            else:
                raise InvalidParameter(f"Invalid rotation entry: {item!r}")

            try:
                axis = RotationAxis(axis)
            except ValueError:
                raise InvalidParameter(
                    f"Unknown rotation axis '{axis}'. Must be one of: pan, tilt, roll"
                ) from None
            ops.append(RotationOp(axis, Degrees(_parse_number(axis.value, angle))))
        return tuple(ops)

    @classmethod
    def from_dict(cls, config: dict) -> RotateConfig:
        """Create configuration from a dictionary.

        Args:
            config: Dictionary with any of the keys ``rotations``, ``pef``,
                ``idx``, ``idy``, ``odx``, ``ody``, ``zoom``, ``auto``,
                ``virtual_pixel`` (or ``vp``), ``bgcolor``, ``skycolor``.

        Returns:
            RotateConfig instance

        Raises:
            InvalidParameter: If a key is unknown or a value is invalid.

        Example:
            >>> config = RotateConfig.from_dict({
            ...     'rotations': [{'pan': 30}, {'tilt': 20}],
            ...     'pef': 1.2,
            ...     'auto': 'c',
            ... })
        """
        if not isinstance(config, dict):
            raise InvalidParameter(f"Configuration must be a dictionary, got {type(config)}")

        data = dict(config)
        if "vp" in data:
            if "virtual_pixel" in data:
                raise InvalidParameter("Specify only one of 'vp' and 'virtual_pixel'")
            data["virtual_pixel"] = data.pop("vp")

        known = {
            "rotations", "pef", "zoom", "auto", "virtual_pixel", "bgcolor", "skycolor",
            *_OFFSET_FIELDS,
        }
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidParameter(f"Unknown configuration keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        if "rotations" in data:
            rotations = data["rotations"] or []
            if not isinstance(rotations, (list, tuple)):
                raise InvalidParameter(f"'rotations' must be a list, got {type(rotations)}")
            kwargs["rotations"] = cls._parse_rotations(rotations)
        if "pef" in data:
            kwargs["pef"] = Unitless(_parse_number("pef", data["pef"]))
        if "zoom" in data:
            kwargs["zoom"] = Unitless(_parse_number("zoom", data["zoom"]))
        for name in _OFFSET_FIELDS:
            if name in data:
                kwargs[name] = PixelsFloat(_parse_number(name, data[name]))
        if "auto" in data:
            kwargs["auto"] = parse_fit_mode(data["auto"])
        if "virtual_pixel" in data:
            kwargs["virtual_pixel"] = parse_virtual_pixel(data["virtual_pixel"])
        for name in ("bgcolor", "skycolor"):
            if name in data:
                kwargs[name] = str(data[name])

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str) -> RotateConfig:
        """Load configuration from the ``rotate3d`` section of a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            InvalidParameter: If the file is empty, malformed, or holds invalid values.
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidParameter(f"Failed to parse YAML configuration file: {e}") from e

        if not data:
            raise InvalidParameter(f"Configuration file is empty: {path}")

        if CONFIG_SECTION not in data:
            raise InvalidParameter(
                f"Configuration file missing '{CONFIG_SECTION}' section: {path}\n"
                f"Expected structure: {CONFIG_SECTION}:\n  rotations: ...\n  ..."
            )

        return cls.from_dict(data[CONFIG_SECTION] or {})

    @classmethod
    def from_option_args(cls, tokens: Iterable[str], base: Optional[RotateConfig] = None) -> RotateConfig:
        """Parse ``option=value`` tokens.

        Rotations given as tokens are appended after any rotations in base;
        other options override base.

        Raises:
            InvalidParameter: If a token is malformed, unknown or invalid.

        Example:
            >>> RotateConfig.from_option_args(["pan=30", "tilt=20", "auto=c"])
        """
        base = base or cls()
        rotations = list(base.rotations)
        overrides: dict[str, Any] = {}

        for token in tokens:
            name, sep, value = token.partition("=")
            name = name.strip().lower()
            if not sep or not name:
                raise InvalidParameter(f"{token} IS NOT A VALID ARGUMENT (expected option=value)")
            if name not in _OPTION_NAMES:
                raise InvalidParameter(f"{token} IS NOT A VALID ARGUMENT")

            value = value.strip()
            if name in ("pan", "tilt", "roll"):
                angle = _parse_number(name, value)
                validate_angle(angle, name)
                rotations.append(RotationOp(RotationAxis(name), Degrees(angle)))
            elif name in ("pef", "zoom"):
                overrides[name] = Unitless(_parse_number(name, value))
            elif name in _OFFSET_FIELDS:
                overrides[name] = PixelsFloat(_parse_number(name, value))
            elif name == "auto":
                overrides["auto"] = parse_fit_mode(value)
            elif name == "vp":
                overrides["virtual_pixel"] = parse_virtual_pixel(value)
            else:
                overrides[name] = value

        return replace(base, rotations=tuple(rotations), **overrides)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary suitable for YAML serialisation."""
        return {
            "rotations": [{RotationAxis(op.axis).value: float(op.angle)} for op in self.rotations],
            "pef": float(self.pef),
            "idx": float(self.idx),
            "idy": float(self.idy),
            "odx": float(self.odx),
            "ody": float(self.ody),
            "zoom": float(self.zoom),
            "auto": self.auto.value if self.auto else None,
            "virtual_pixel": self.virtual_pixel.value,
            "bgcolor": self.bgcolor,
            "skycolor": self.skycolor,
        }

    def save_to_yaml(self, path: str) -> None:
        """Save configuration to a YAML file under the ``rotate3d`` section."""
        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w') as f:
            yaml.safe_dump({CONFIG_SECTION: self.to_dict()}, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {path}")


def get_default_config() -> RotateConfig:
    """Default configuration: no rotation, pef 1, zoom 1, no auto-fit."""
    return RotateConfig()
